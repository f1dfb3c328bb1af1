"""matcalc public API."""

from .errors import (
    DimensionError,
    MalformedTokenError,
    MatcalcError,
    MatcalcParseError,
    MatcalcRuntimeError,
    MatcalcTypeError,
    MatcalcUnsupportedError,
    NotOrthogonalError,
    SingularMatrixError,
    StackUnderflowError,
    StructureError,
    error_kind,
)
from .evaluator import VariableStore, calculate, solve
from .kernel import (
    SystemKind,
    SystemSolution,
    add,
    adjugate,
    cofactor_matrix,
    determinant,
    identity,
    inverse,
    inverse_orthogonal,
    mul,
    mul_scalar,
    power,
    solve_system,
    sub,
    transpose,
)
from .parser import Operator, infix_to_postfix, to_postfix
from .tree import build_tree
from .values import Matrix, Scalar, Value, ValueKind

__all__ = [
    "calculate",
    "solve",
    "VariableStore",
    "to_postfix",
    "infix_to_postfix",
    "build_tree",
    "Operator",
    "Matrix",
    "Scalar",
    "Value",
    "ValueKind",
    "add",
    "sub",
    "mul",
    "mul_scalar",
    "identity",
    "power",
    "transpose",
    "determinant",
    "cofactor_matrix",
    "adjugate",
    "inverse",
    "inverse_orthogonal",
    "solve_system",
    "SystemKind",
    "SystemSolution",
    "error_kind",
    "MatcalcError",
    "MatcalcParseError",
    "MalformedTokenError",
    "StackUnderflowError",
    "StructureError",
    "MatcalcRuntimeError",
    "MatcalcTypeError",
    "DimensionError",
    "SingularMatrixError",
    "NotOrthogonalError",
    "MatcalcUnsupportedError",
]
