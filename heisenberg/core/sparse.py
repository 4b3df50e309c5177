"""
Sparse matrix representation.

Each row is a ``{column: value}`` dict holding only non-zero entries. Gate
and permutation matrices for n qubits are 2^n x 2^n with one or two entries
per row, so this form avoids storing the zeros at the cost of a dict lookup
per access.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Sequence, Tuple
import numpy as np
from scipy import sparse

from heisenberg.core.errors import DimensionError
from heisenberg.core.matrix import Matrix


SparseRowData = Dict[int, complex]


def accumulate(target: SparseRowData, column: int, value: complex) -> None:
    """Add ``value`` into ``target[column]``, dropping the key if it cancels to 0."""
    total = target.get(column, 0) + value
    if total != 0:
        target[column] = total
    else:
        target.pop(column, None)


def tensor_rows(
    row_a: Iterator[Tuple[int, complex]],
    row_b: Sequence[Tuple[int, complex]],
    width_b: int
) -> SparseRowData:
    """Kronecker product of two sparse rows, keeping only non-zero products."""
    out = {}
    for i, va in row_a:
        for j, vb in row_b:
            value = va * vb
            if value != 0:
                out[i * width_b + j] = value
    return out


@dataclass(eq=False)
class SparseMatrix(Matrix):
    """
    Row-wise sparse complex matrix.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        data: One dict per row mapping column index to a non-zero value
    """
    rows: int
    cols: int
    data: List[SparseRowData] = field(default_factory=list)

    def __post_init__(self):
        if not self.data:
            self.data = [{} for _ in range(self.rows)]
        if len(self.data) != self.rows:
            raise DimensionError(
                f"{len(self.data)} rows supplied for a {self.rows}x{self.cols} matrix"
            )
        # Explicit zeros never survive construction
        self.data = [{j: v for j, v in row.items() if v != 0} for row in self.data]

    @classmethod
    def from_array(cls, array) -> SparseMatrix:
        arr = np.asarray(array, dtype=np.complex128)
        if arr.ndim != 2:
            raise DimensionError(f"expected a 2-D array, got {arr.ndim} dimensions")
        data = []
        for row in arr:
            (cols,) = np.nonzero(row)
            data.append({int(j): complex(row[j]) for j in cols})
        return cls(rows=arr.shape[0], cols=arr.shape[1], data=data)

    @classmethod
    def zeros(cls, rows: int, cols: int) -> SparseMatrix:
        return cls(rows=rows, cols=cols)

    @property
    def nnz(self) -> int:
        return sum(len(row) for row in self.data)

    def get(self, i: int, j: int) -> complex:
        return self.data[i].get(j, 0j)

    def set(self, i: int, j: int, value: complex) -> None:
        if value == 0:
            self.data[i].pop(j, None)
        else:
            self.data[i][j] = complex(value)

    def iter_entries(self) -> Iterator[Tuple[int, int, complex]]:
        """Iterate over (row, col, value) for every stored entry."""
        for i, row in enumerate(self.data):
            for j, value in row.items():
                yield i, j, value

    def tensor(self, other: Matrix) -> SparseMatrix:
        b = other if isinstance(other, SparseMatrix) else SparseMatrix.from_array(other.to_numpy())
        b_rows = [list(row.items()) for row in b.data]
        output = []
        for row_a in self.data:
            for row_b in b_rows:
                output.append(tensor_rows(iter(row_a.items()), row_b, b.cols))
        return SparseMatrix(rows=self.rows * b.rows, cols=self.cols * b.cols, data=output)

    def multiply(self, other: Matrix) -> SparseMatrix:
        self._check_multiply(other)
        b = other if isinstance(other, SparseMatrix) else SparseMatrix.from_array(other.to_numpy())
        output = []
        for row_a in self.data:
            values = {}
            for y, va in row_a.items():
                for j, vb in b.data[y].items():
                    accumulate(values, j, va * vb)
            output.append(values)
        return SparseMatrix(rows=self.rows, cols=b.cols, data=output)

    def transpose(self) -> SparseMatrix:
        moved = [{} for _ in range(self.cols)]
        for i, j, value in self.iter_entries():
            moved[j][i] = value
        self.data = moved
        self.rows, self.cols = self.cols, self.rows
        return self

    def conjugate(self) -> SparseMatrix:
        for row in self.data:
            for j, value in row.items():
                row[j] = value.conjugate()
        return self

    def copy(self) -> SparseMatrix:
        return SparseMatrix(rows=self.rows, cols=self.cols, data=[dict(r) for r in self.data])

    def multiply_vector(self, vector: np.ndarray) -> np.ndarray:
        vector = np.asarray(vector, dtype=np.complex128)
        self._check_vector(vector)
        output = np.zeros(self.rows, dtype=np.complex128)
        for x, row in enumerate(self.data):
            total = 0j
            for y, value in row.items():
                total += vector[y] * value
            output[x] = total
        return output

    def permute_rows(self, order: Sequence[int]) -> SparseMatrix:
        self._check_order(order)
        return SparseMatrix(
            rows=self.rows,
            cols=self.cols,
            data=[dict(self.data[k]) for k in order]
        )

    def to_numpy(self) -> np.ndarray:
        out = np.zeros((self.rows, self.cols), dtype=np.complex128)
        for i, j, value in self.iter_entries():
            out[i, j] = value
        return out

    def to_scipy_sparse(self) -> sparse.csr_matrix:
        """Convert to a scipy CSR matrix with the same entries."""
        rows, cols, data = [], [], []
        for i, j, value in self.iter_entries():
            rows.append(i)
            cols.append(j)
            data.append(value)
        return sparse.csr_matrix(
            (np.asarray(data, dtype=np.complex128), (rows, cols)),
            shape=(self.rows, self.cols)
        )
