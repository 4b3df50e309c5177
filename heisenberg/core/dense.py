"""
Dense matrix representation.

Entries live in one flat, row-major numpy array of length rows*cols. Every
entry is materialized, zeros included, which makes this the simplest and
fastest form for small operators and the most wasteful one for wide gates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
import numpy as np

from heisenberg.core.errors import DimensionError
from heisenberg.core.matrix import Matrix


@dataclass(eq=False)
class DenseMatrix(Matrix):
    """
    Row-major dense complex matrix.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        data: Flat complex128 array, ``data[i*cols + j]`` is entry (i, j)
    """
    rows: int
    cols: int
    data: np.ndarray

    def __post_init__(self):
        self.data = np.asarray(self.data, dtype=np.complex128).ravel()
        if self.data.size != self.rows * self.cols:
            raise DimensionError(
                f"{self.data.size} entries cannot fill a {self.rows}x{self.cols} matrix"
            )

    @classmethod
    def from_array(cls, array) -> DenseMatrix:
        arr = np.asarray(array, dtype=np.complex128)
        if arr.ndim != 2:
            raise DimensionError(f"expected a 2-D array, got {arr.ndim} dimensions")
        return cls(rows=arr.shape[0], cols=arr.shape[1], data=arr.copy())

    @classmethod
    def zeros(cls, rows: int, cols: int) -> DenseMatrix:
        return cls(rows=rows, cols=cols, data=np.zeros(rows * cols, dtype=np.complex128))

    def _grid(self) -> np.ndarray:
        # 2-D view sharing storage with self.data
        return self.data.reshape(self.rows, self.cols)

    @property
    def nnz(self) -> int:
        return int(np.count_nonzero(self.data))

    def get(self, i: int, j: int) -> complex:
        return complex(self.data[i * self.cols + j])

    def set(self, i: int, j: int, value: complex) -> None:
        self.data[i * self.cols + j] = value

    def tensor(self, other: Matrix) -> DenseMatrix:
        b = other if isinstance(other, DenseMatrix) else DenseMatrix.from_array(other.to_numpy())
        product = np.kron(self._grid(), b._grid())
        return DenseMatrix(
            rows=self.rows * b.rows,
            cols=self.cols * b.cols,
            data=product.ravel(),
        )

    def multiply(self, other: Matrix) -> DenseMatrix:
        self._check_multiply(other)
        b = other._grid() if isinstance(other, DenseMatrix) else other.to_numpy()
        product = self._grid() @ b
        return DenseMatrix(rows=self.rows, cols=other.cols, data=product.ravel())

    def transpose(self) -> DenseMatrix:
        # ravel() of the transposed view copies into the new row-major order
        self.data = self._grid().T.ravel()
        self.rows, self.cols = self.cols, self.rows
        return self

    def conjugate(self) -> DenseMatrix:
        np.conjugate(self.data, out=self.data)
        return self

    def copy(self) -> DenseMatrix:
        return DenseMatrix(rows=self.rows, cols=self.cols, data=self.data.copy())

    def multiply_vector(self, vector: np.ndarray) -> np.ndarray:
        vector = np.asarray(vector, dtype=np.complex128)
        self._check_vector(vector)
        return self._grid() @ vector

    def permute_rows(self, order: Sequence[int]) -> DenseMatrix:
        self._check_order(order)
        permuted = self._grid()[np.asarray(order, dtype=np.int64)]
        return DenseMatrix(rows=self.rows, cols=self.cols, data=permuted.ravel())

    def to_numpy(self) -> np.ndarray:
        return self._grid().copy()
