"""
Common contract for the dense, sparse and adaptive matrix representations.

All three expose the same surface and differ only in how rows are stored.
Operations that build a new matrix (tensor, multiply, copy, permute_rows)
never touch their operands; transpose, conjugate and set work in place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Sequence, Tuple
import numpy as np

from heisenberg.core.errors import DimensionError


class Matrix(ABC):
    """Abstract complex matrix with ``rows`` x ``cols`` entries."""

    rows: int
    cols: int

    @classmethod
    @abstractmethod
    def from_array(cls, array) -> Matrix:
        """Build a matrix from a 2-D array-like."""
        pass

    @classmethod
    @abstractmethod
    def zeros(cls, rows: int, cols: int) -> Matrix:
        """All-zero matrix of the given shape."""
        pass

    @classmethod
    def identity(cls, size: int = 2) -> Matrix:
        """Identity matrix of the given size."""
        return cls.from_array(np.eye(size, dtype=np.complex128))

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Number of stored non-zero entries."""
        pass

    @abstractmethod
    def get(self, i: int, j: int) -> complex:
        pass

    @abstractmethod
    def set(self, i: int, j: int, value: complex) -> None:
        pass

    @abstractmethod
    def tensor(self, other: Matrix) -> Matrix:
        """
        Kronecker product ``self ⊗ other``.

        The result has shape ``(a.rows*b.rows, a.cols*b.cols)`` and
        ``C[x*b.rows + y, i*b.cols + j] == A[x, i] * B[y, j]``.
        """
        pass

    @abstractmethod
    def multiply(self, other: Matrix) -> Matrix:
        """Matrix product ``self @ other``."""
        pass

    @abstractmethod
    def transpose(self) -> Matrix:
        """Transpose in place and return self."""
        pass

    @abstractmethod
    def conjugate(self) -> Matrix:
        """Complex-conjugate every entry in place and return self."""
        pass

    @abstractmethod
    def copy(self) -> Matrix:
        """Deep copy with independent storage."""
        pass

    @abstractmethod
    def multiply_vector(self, vector: np.ndarray) -> np.ndarray:
        """Matrix-vector product, used to apply an operator to a state."""
        pass

    @abstractmethod
    def permute_rows(self, order: Sequence[int]) -> Matrix:
        """New matrix whose row ``i`` is a copy of row ``order[i]``."""
        pass

    @abstractmethod
    def to_numpy(self) -> np.ndarray:
        """Dense 2-D numpy view of the matrix (always a fresh array)."""
        pass

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.multiply(other)

    def allclose(self, other, atol: float = 1e-10) -> bool:
        """Compare entries against another matrix or array-like."""
        theirs = other.to_numpy() if isinstance(other, Matrix) else np.asarray(other)
        if theirs.shape != self.shape:
            return False
        return bool(np.allclose(self.to_numpy(), theirs, atol=atol))

    def __str__(self) -> str:
        dense = self.to_numpy()
        lines = []
        for row in dense:
            lines.append(" ".join(_format_complex(v) for v in row))
        return "\n".join(lines)

    def _check_multiply(self, other: Matrix) -> None:
        if self.cols != other.rows:
            raise DimensionError(
                f"cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols}"
            )

    def _check_vector(self, vector: np.ndarray) -> None:
        if self.cols != len(vector):
            raise DimensionError(
                f"cannot apply {self.rows}x{self.cols} matrix to vector of length {len(vector)}"
            )

    def _check_order(self, order: Sequence[int]) -> None:
        if len(order) != self.rows:
            raise DimensionError(
                f"row order has {len(order)} entries for a matrix with {self.rows} rows"
            )
        for k in order:
            if not 0 <= k < self.rows:
                raise DimensionError(f"row index {k} out of range for {self.rows} rows")


def _format_complex(value: complex) -> str:
    return f"({value.real:f}{value.imag:+f}i)"


def format_entries(values: Iterable[complex]) -> str:
    """Render a sequence of amplitudes on one line."""
    return " ".join(_format_complex(complex(v)) for v in values)
