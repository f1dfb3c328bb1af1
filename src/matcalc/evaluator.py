"""Tree evaluator and the ``calculate`` entry point."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping, MutableMapping
from typing import Callable, Final

from . import kernel
from .ast import Node, Operation
from .errors import MatcalcTypeError, MatcalcUnsupportedError, StructureError
from .lexer import token_texts, tokenize
from .parser import RESERVED_WORDS, Operator, to_postfix
from .tree import build_tree, parse_number
from .values import Matrix, Scalar, Value, as_value, kind_of

logger = logging.getLogger(__name__)

MAX_TREE_DEPTH: Final[int] = max(1, int(os.environ.get("MATCALC_MAX_TREE_DEPTH", "400")))


class VariableStore(MutableMapping[str, Value]):
    """Name -> value mapping handed to :func:`calculate`.

    The evaluator only reads it; the interactive session owns mutation.
    """

    def __init__(self, data: Mapping[str, object] | None = None) -> None:
        self._values: dict[str, Value] = {}
        for name, value in ({} if data is None else dict(data)).items():
            self[name] = value

    @staticmethod
    def validate_name(name: str) -> None:
        if not name or " " in name:
            raise ValueError(f"invalid identifier {name!r}")
        if name in RESERVED_WORDS:
            raise ValueError(f"{name!r} is a reserved identifier")
        if parse_number(name) is not None:
            raise ValueError(f"{name!r} would be read as a number")

    def __getitem__(self, key: str) -> Value:
        return self._values[key]

    def __setitem__(self, key: str, value: object) -> None:
        self.validate_name(key)
        self._values[key] = as_value(value)

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"


def _kinds(left: Value, right: Value) -> str:
    return f"{kind_of(left).value} and {kind_of(right).value}"


def _scalar_pow(base: float, exponent: float) -> float:
    # IEEE pow semantics: poles and overflow are infinite, other domain errors nan.
    odd_integer = exponent.is_integer() and int(exponent) % 2 == 1
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return -math.inf if base < 0 and odd_integer else math.inf
    except ValueError:
        if base == 0.0:
            return math.copysign(math.inf, base) if odd_integer else math.inf
        return math.nan


def _sum(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(left.value + right.value)
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return kernel.add(left, right)
    raise MatcalcTypeError(f"'+' is undefined for {_kinds(left, right)}")


def _sub(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(left.value - right.value)
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return kernel.sub(left, right)
    raise MatcalcTypeError(f"'-' is undefined for {_kinds(left, right)}")


def _mul(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(left.value * right.value)
    if isinstance(left, Matrix) and isinstance(right, Matrix):
        return kernel.mul(left, right)
    if isinstance(left, Matrix):
        assert isinstance(right, Scalar)
        return kernel.mul_scalar(left, right.value)
    assert isinstance(right, Matrix)
    return kernel.mul_scalar(right, left.value)


def _pow(left: Value, right: Value) -> Value:
    if isinstance(left, Scalar) and isinstance(right, Scalar):
        return Scalar(_scalar_pow(left.value, right.value))
    if isinstance(left, Matrix) and isinstance(right, Scalar):
        exponent = right.value
        if not math.isfinite(exponent) or not exponent.is_integer():
            raise MatcalcTypeError(f"matrix exponent must be an integer, got {exponent}")
        return kernel.power(left, int(exponent))
    raise MatcalcTypeError(f"'^' is undefined for {_kinds(left, right)}")


def _div(left: Value, right: Value) -> Value:
    raise MatcalcUnsupportedError("division is not supported")


_BINARY_OPS: Final[dict[Operator, Callable[[Value, Value], Value]]] = {
    Operator.SUM: _sum,
    Operator.SUB: _sub,
    Operator.MUL: _mul,
    Operator.POW: _pow,
    Operator.DIV: _div,
}

_UNARY_OPS: Final[dict[Operator, Callable[[Matrix], Value]]] = {
    Operator.TRANSPOSE: kernel.transpose,
    Operator.DETERMINANT: lambda m: Scalar(kernel.determinant(m)),
    Operator.INVERSE: kernel.inverse,
}


def solve(node: Node) -> Value:
    """Evaluate a tree bottom-up; the first failure aborts the walk."""
    operand = node.operand
    if not isinstance(operand, Operation):
        if node.left is not None or node.right is not None:
            raise StructureError("value leaf has children")
        return operand

    op = operand.op
    if op.is_unary:
        if node.right is not None:
            raise StructureError(f"unary operator {op.value!r} has a right operand")
        if node.left is None:
            raise StructureError(f"unary operator {op.value!r} has no operand")
        value = solve(node.left)
        if not isinstance(value, Matrix):
            raise MatcalcTypeError(f"{op.value!r} needs a matrix, got {kind_of(value).value}")
        return _UNARY_OPS[op](value)

    if node.left is None or node.right is None:
        raise StructureError(f"binary operator {op.value!r} is missing an operand")
    left = solve(node.left)
    right = solve(node.right)
    return _BINARY_OPS[op](left, right)


def calculate(expression: str, store: Mapping[str, Value]) -> Value:
    """Parse and evaluate one space-separated expression against ``store``."""
    postfix = to_postfix(tokenize(expression))
    logger.debug("postfix: %s", " ".join(token_texts(postfix)))
    tree = build_tree(postfix, store)
    if tree is None:
        raise StructureError(f"expression {expression!r} does not reduce to a single value")
    depth = tree.depth()
    if depth > MAX_TREE_DEPTH:
        raise StructureError(f"expression nests {depth} levels deep (limit {MAX_TREE_DEPTH})")
    result = solve(tree)
    logger.debug("result kind: %s", kind_of(result).value)
    return result
