"""Structured error types for parse/runtime separation."""

from __future__ import annotations

from dataclasses import dataclass


class MatcalcError(Exception):
    """Base class for structured matcalc errors."""


@dataclass(frozen=True)
class MatcalcParseError(MatcalcError):
    """Failure while turning an expression into a tree."""

    message: str
    start: int = -1
    end: int = -1
    token: str | None = None

    def __str__(self) -> str:
        span = ""
        if self.start >= 0:
            span = f" at span [{self.start}, {self.end})"
        found = ""
        if self.token is not None:
            found = f"; found {self.token!r}"
        return f"{self.message}{span}{found}"


class MalformedTokenError(MatcalcParseError):
    """Token is neither a number, a known identifier nor an operator."""


class StackUnderflowError(MatcalcParseError):
    """Binary operator with fewer than two operands available."""


class StructureError(MatcalcError):
    """Token stream or tree does not have a well-formed shape."""


class MatcalcRuntimeError(MatcalcError):
    """Generic evaluation failure after a successful parse."""


class MatcalcTypeError(MatcalcRuntimeError):
    """Operator applied to operand kinds it has no meaning for."""


class DimensionError(MatcalcRuntimeError):
    """Non-conformable matrix shapes."""


class SingularMatrixError(MatcalcRuntimeError):
    """Matrix has a zero determinant."""


class NotOrthogonalError(MatcalcRuntimeError):
    """Matrix fails the off-diagonal orthogonality check."""


class MatcalcUnsupportedError(MatcalcRuntimeError):
    """Operation is recognised but deliberately not implemented."""


_ERROR_KINDS: tuple[tuple[type[MatcalcError], str], ...] = (
    (MalformedTokenError, "MalformedToken"),
    (StackUnderflowError, "StackUnderflow"),
    (StructureError, "StructuralError"),
    (MatcalcTypeError, "TypeMismatch"),
    (DimensionError, "DimensionMismatch"),
    (SingularMatrixError, "SingularMatrix"),
    (NotOrthogonalError, "NotOrthogonal"),
    (MatcalcUnsupportedError, "UnsupportedOperation"),
)


def error_kind(err: BaseException) -> str:
    """Name of the conceptual error kind, for boundary layers that flatten errors."""
    for cls, name in _ERROR_KINDS:
        if isinstance(err, cls):
            return name
    if isinstance(err, MatcalcParseError):
        return "ParseError"
    if isinstance(err, MatcalcError):
        return "RuntimeError"
    return type(err).__name__
