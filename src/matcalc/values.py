"""Runtime value model: dense matrices, scalars and their tagged union."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

import jax.numpy as jnp

from .errors import DimensionError

DTYPE = jnp.float32


class Matrix:
    """Dense, row-major, rectangular matrix of floats.

    Cells live in a 2-D ``jax.numpy`` array. Single-cell mutation through
    :meth:`set` rebinds the array, so matrices never share storage.
    """

    __slots__ = ("_data",)

    def __init__(self, data: jnp.ndarray) -> None:
        arr = jnp.asarray(data, dtype=DTYPE)
        if arr.ndim != 2:
            raise DimensionError(f"matrix data must be 2-D, got rank {arr.ndim}")
        self._data = arr

    @classmethod
    def new_empty(cls, rows: int, cols: int) -> "Matrix":
        if rows < 0 or cols < 0:
            raise DimensionError(f"negative matrix dimensions ({rows}, {cols})")
        return cls(jnp.zeros((rows, cols), dtype=DTYPE))

    @classmethod
    def new_from(cls, rows: int, cols: int, data: Sequence[Sequence[float]]) -> "Matrix":
        if len(data) != rows:
            raise DimensionError(f"expected {rows} rows, got {len(data)}")
        for idx, row in enumerate(data):
            if len(row) != cols:
                raise DimensionError(f"row {idx} has {len(row)} cells, expected {cols}")
        if rows == 0 or cols == 0:
            return cls.new_empty(rows, cols)
        return cls(jnp.asarray([[float(cell) for cell in row] for row in data], dtype=DTYPE))

    @classmethod
    def from_rows(cls, data: Sequence[Sequence[float]]) -> "Matrix":
        cols = len(data[0]) if data else 0
        return cls.new_from(len(data), cols, data)

    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    # Short names used throughout the kernel.
    m = rows
    n = cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def data(self) -> jnp.ndarray:
        return self._data

    def set(self, row: int, col: int, value: float) -> None:
        self._check_index(row, col)
        self._data = self._data.at[row, col].set(value)

    def is_square(self) -> bool:
        return self.rows == self.cols

    def tolist(self) -> list[list[float]]:
        return [[float(cell) for cell in row] for row in self._data.tolist()]

    def copy(self) -> "Matrix":
        return Matrix(self._data)

    def equals(self, other: "Matrix") -> bool:
        if self.shape != other.shape:
            return False
        return bool(jnp.array_equal(self._data, other._data))

    def allclose(self, other: "Matrix", *, atol: float = 1e-5, rtol: float = 1e-5) -> bool:
        if self.shape != other.shape:
            return False
        return bool(jnp.allclose(self._data, other._data, atol=atol, rtol=rtol))

    def _check_index(self, row: int, col: int) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} matrix")

    def __getitem__(self, key):
        if isinstance(key, tuple):
            row, col = key
            self._check_index(row, col)
            return float(self._data[row, col])
        if not 0 <= key < self.rows:
            raise IndexError(f"row {key} outside {self.rows}x{self.cols} matrix")
        return tuple(float(cell) for cell in self._data[key].tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols}, {self.tolist()!r})"


@dataclass(frozen=True)
class Scalar:
    value: float

    def __float__(self) -> float:
        return float(self.value)


Value = Union[Scalar, Matrix]


class ValueKind(str, Enum):
    SCALAR = "scalar"
    MATRIX = "matrix"


def kind_of(value: object) -> ValueKind:
    if isinstance(value, Matrix):
        return ValueKind.MATRIX
    if isinstance(value, Scalar):
        return ValueKind.SCALAR
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def as_value(value: object) -> Value:
    """Wrap plain numbers and nested lists so callers can seed stores loosely."""
    if isinstance(value, (Scalar, Matrix)):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not calculator values")
    if isinstance(value, numbers.Real):
        return Scalar(float(value))
    if isinstance(value, (list, tuple)):
        return Matrix.from_rows(value)
    if isinstance(value, jnp.ndarray):
        if value.ndim == 0:
            return Scalar(float(value))
        return Matrix(value)
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def format_scalar(value: float) -> str:
    if math.isfinite(value) and value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return f"{value:.6g}"


def format_value(value: Value) -> str:
    if isinstance(value, Scalar):
        return format_scalar(value.value)
    return "\n".join(" ".join(format_scalar(cell) for cell in row) for row in value.tolist())
