"""Dense matrix algebra used by the evaluator.

Every function is pure: inputs are never mutated and a fresh :class:`Matrix`
is returned. Failures raise the structured errors from :mod:`matcalc.errors`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Final

import jax.numpy as jnp

from .errors import DimensionError, MatcalcUnsupportedError, NotOrthogonalError, SingularMatrixError
from .values import DTYPE, Matrix

logger = logging.getLogger(__name__)

# Magnitude at or below which a determinant or pivot counts as zero.
ZERO_TOLERANCE: Final[float] = abs(float(os.environ.get("MATCALC_ZERO_TOLERANCE", "0")))


def is_zero(value: float, *, tolerance: float | None = None) -> bool:
    tol = ZERO_TOLERANCE if tolerance is None else tolerance
    return abs(value) <= tol


def _require_same_shape(a: Matrix, b: Matrix, *, op: str) -> None:
    if a.shape != b.shape:
        raise DimensionError(f"{op}: shapes {a.rows}x{a.cols} and {b.rows}x{b.cols} differ")


def _require_square(a: Matrix, *, op: str) -> None:
    if not a.is_square():
        raise DimensionError(f"{op}: matrix must be square, got {a.rows}x{a.cols}")


def add(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape(a, b, op="sum")
    return Matrix(a.data + b.data)


def sub(a: Matrix, b: Matrix) -> Matrix:
    _require_same_shape(a, b, op="sub")
    return add(a, mul_scalar(b, -1.0))


def mul(a: Matrix, b: Matrix) -> Matrix:
    if a.cols != b.rows:
        raise DimensionError(
            f"mul: left has {a.cols} columns but right has {b.rows} rows"
        )
    if a.cols == 0:
        return Matrix.new_empty(a.rows, b.cols)
    return Matrix(jnp.matmul(a.data, b.data))


def mul_scalar(a: Matrix, k: float) -> Matrix:
    return Matrix(a.data * jnp.asarray(k, dtype=DTYPE))


def identity(n: int) -> Matrix:
    return Matrix(jnp.eye(n, dtype=DTYPE))


def power(a: Matrix, exponent: int) -> Matrix:
    """Raise a square matrix to a non-negative integer power by repeated products."""
    _require_square(a, op="pow")
    if exponent < 0:
        raise MatcalcUnsupportedError("negative matrix powers are not supported")
    if exponent == 0:
        return identity(a.rows)
    result = a.copy()
    for _ in range(exponent - 1):
        result = mul(result, a)
    return result


def transpose(a: Matrix) -> Matrix:
    _require_square(a, op="transpose")
    return Matrix(a.data.T)


def _expand_cofactors(cells: list[list[float]], hidden_rows: list[bool], hidden_cols: list[bool]) -> float:
    # Laplace expansion along the first visible row; masks are restored after each minor.
    total = 0.0
    positive = True
    for i, row in enumerate(cells):
        if hidden_rows[i]:
            continue
        for j, cell in enumerate(row):
            if hidden_cols[j]:
                continue
            if hidden_rows.count(False) == 1 and hidden_cols.count(False) == 1:
                return cell
            hidden_rows[i] = True
            hidden_cols[j] = True
            minor = _expand_cofactors(cells, hidden_rows, hidden_cols)
            hidden_rows[i] = False
            hidden_cols[j] = False
            total += cell * minor if positive else -cell * minor
            positive = not positive
        break
    return total


def determinant(a: Matrix) -> float:
    """Determinant by recursive cofactor expansion (O(n!))."""
    if not a.is_square() or a.rows == 0:
        raise DimensionError(f"determinant: needs a non-empty square matrix, got {a.rows}x{a.cols}")
    cells = a.tolist()
    return _expand_cofactors(cells, [False] * a.rows, [False] * a.cols)


def cofactor_matrix(a: Matrix) -> Matrix:
    _require_square(a, op="cofactor")
    n = a.rows
    if n == 1:
        return Matrix.new_from(1, 1, [[1.0]])
    cells = a.tolist()
    out: list[list[float]] = []
    for i in range(n):
        row_out: list[float] = []
        for j in range(n):
            hidden_rows = [False] * n
            hidden_cols = [False] * n
            hidden_rows[i] = True
            hidden_cols[j] = True
            minor = _expand_cofactors(cells, hidden_rows, hidden_cols)
            row_out.append(minor if (i + j) % 2 == 0 else -minor)
        out.append(row_out)
    return Matrix.new_from(n, n, out)


def adjugate(a: Matrix) -> Matrix:
    """Classical adjoint: the cofactor matrix taken over the transpose."""
    return cofactor_matrix(transpose(a))


def inverse(a: Matrix) -> Matrix:
    det = determinant(a)
    if is_zero(det):
        raise SingularMatrixError(f"matrix is singular (determinant {det})")
    return mul_scalar(adjugate(a), 1.0 / det)


def inverse_orthogonal(a: Matrix) -> Matrix:
    """Inverse of an orthogonal matrix, taken as its transpose.

    Every off-diagonal pair must satisfy ``a[i, j] == -a[j, i]`` exactly;
    otherwise :class:`NotOrthogonalError` is raised.
    """
    _require_square(a, op="inverse_orthogonal")
    data = a.data
    off_diagonal = ~jnp.eye(a.rows, dtype=bool)
    if not bool(jnp.all(jnp.where(off_diagonal, data == -data.T, True))):
        raise NotOrthogonalError("matrix is not orthogonal")
    return Matrix(data.T)


class SystemKind(str, Enum):
    INCOMPATIBLE = "incompatible"
    COMPATIBLE_INDETERMINATE = "compatible_indeterminate"
    COMPATIBLE_DETERMINATE = "compatible_determinate"


@dataclass(frozen=True)
class SystemSolution:
    kind: SystemKind
    rank: int
    reduced: Matrix
    solution: tuple[float, ...] | None = None

    def is_incompatible(self) -> bool:
        return self.kind is SystemKind.INCOMPATIBLE

    def is_compatible_indeterminate(self) -> bool:
        return self.kind is SystemKind.COMPATIBLE_INDETERMINATE

    def is_compatible_determinate(self) -> bool:
        return self.kind is SystemKind.COMPATIBLE_DETERMINATE


def row_echelon(augmented: Matrix) -> Matrix:
    """Row-echelon form with partial pivoting and unit pivots."""
    a = augmented.data
    rows, cols = augmented.shape
    row = 0
    for col in range(cols - 1):
        if row >= rows:
            break
        pivot_row = row + int(jnp.argmax(jnp.abs(a[row:, col])))
        if pivot_row != row:
            a = a.at[jnp.array([row, pivot_row])].set(a[jnp.array([pivot_row, row])])
        pivot = float(a[row, col])
        if is_zero(pivot):
            continue
        a = a.at[row].divide(pivot)
        factors = a[row + 1 :, col : col + 1]
        a = a.at[row + 1 :].add(-factors * a[row])
        # Clear the column exactly so the rank scan sees true zeros.
        a = a.at[row + 1 :, col].set(0.0)
        row += 1
    return Matrix(a)


def solve_system(augmented: Matrix) -> SystemSolution:
    """Classify and, when determinate, solve the linear system ``A|b``."""
    rows, cols = augmented.shape
    if cols < 2:
        raise DimensionError(f"augmented matrix needs at least 2 columns, got {cols}")
    unknowns = cols - 1
    reduced = row_echelon(augmented)
    cells = reduced.tolist()

    rank = rows
    for row in reversed(cells):
        if all(is_zero(cell) for cell in row[:unknowns]):
            if not is_zero(row[unknowns]):
                logger.debug("system classified incompatible")
                return SystemSolution(kind=SystemKind.INCOMPATIBLE, rank=rank, reduced=reduced)
            rank -= 1

    if rank < unknowns:
        logger.debug("system classified indeterminate (rank %d < %d unknowns)", rank, unknowns)
        return SystemSolution(kind=SystemKind.COMPATIBLE_INDETERMINATE, rank=rank, reduced=reduced)

    solution = [0.0] * unknowns
    for k in range(unknowns - 1, -1, -1):
        acc = cells[k][unknowns]
        for j in range(k + 1, unknowns):
            acc -= cells[k][j] * solution[j]
        solution[k] = acc
    logger.debug("system classified determinate with rank %d", rank)
    return SystemSolution(
        kind=SystemKind.COMPATIBLE_DETERMINATE,
        rank=rank,
        reduced=reduced,
        solution=tuple(solution),
    )
