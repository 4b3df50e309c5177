"""
Adaptive matrix representation.

Every row is stored independently as either a ``SparseRow`` (column -> value
dict) or a ``DenseRow`` (full numpy array). Rows start sparse and are
promoted to dense once they cross the ``SparsityCutoff`` thresholds, so wide
permutation-like operators stay cheap while rows that fill up (e.g. after
repeated tensoring with dense gate blocks) get array storage. Promotion is
one-way: a dense row is never demoted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
import numpy as np
from scipy import sparse

from heisenberg.core.config import SparsityCutoff
from heisenberg.core.errors import DimensionError
from heisenberg.core.matrix import Matrix
from heisenberg.core.sparse import accumulate, tensor_rows


@dataclass(eq=False)
class SparseRow:
    """Row holding only its non-zero entries."""
    entries: Dict[int, complex] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, j: int) -> complex:
        return self.entries.get(j, 0j)

    def items(self) -> Iterator[Tuple[int, complex]]:
        return iter(self.entries.items())

    def dot(self, vector: np.ndarray) -> complex:
        total = 0j
        for y, value in self.entries.items():
            total += vector[y] * value
        return total

    def conjugate(self) -> None:
        for j, value in self.entries.items():
            self.entries[j] = value.conjugate()

    def copy(self) -> SparseRow:
        return SparseRow(dict(self.entries))

    def promote(self, width: int) -> DenseRow:
        values = np.zeros(width, dtype=np.complex128)
        for j, value in self.entries.items():
            values[j] = value
        return DenseRow(values)


@dataclass(eq=False)
class DenseRow:
    """Row holding every entry, zeros included."""
    values: np.ndarray

    def __len__(self) -> int:
        return len(self.values)

    def get(self, j: int) -> complex:
        return complex(self.values[j])

    def items(self) -> Iterator[Tuple[int, complex]]:
        (cols,) = np.nonzero(self.values)
        for j in cols:
            yield int(j), complex(self.values[j])

    def dot(self, vector: np.ndarray) -> complex:
        return complex(np.dot(self.values, vector))

    def conjugate(self) -> None:
        np.conjugate(self.values, out=self.values)

    def copy(self) -> DenseRow:
        return DenseRow(self.values.copy())


Row = Union[DenseRow, SparseRow]


@dataclass(eq=False)
class AdaptiveMatrix(Matrix):
    """
    Matrix whose rows independently switch from sparse to dense storage.

    Attributes:
        rows: Number of rows
        cols: Number of columns
        data: One ``DenseRow`` or ``SparseRow`` per matrix row
        cutoff: Promotion thresholds, inherited by every derived matrix
    """
    rows: int
    cols: int
    data: List[Row] = field(default_factory=list)
    cutoff: SparsityCutoff = field(default_factory=SparsityCutoff)

    def __post_init__(self):
        if not self.data:
            self.data = [SparseRow() for _ in range(self.rows)]
        if len(self.data) != self.rows:
            raise DimensionError(
                f"{len(self.data)} rows supplied for a {self.rows}x{self.cols} matrix"
            )

    def _settle(self, entries: Dict[int, complex]) -> Row:
        """Wrap freshly computed non-zero entries in the row type they qualify for."""
        row = SparseRow(entries)
        if self.cutoff.should_promote(len(row), self.cols):
            return row.promote(self.cols)
        return row

    def _derived(self, rows: int, cols: int, entries: List[Dict[int, complex]]) -> AdaptiveMatrix:
        out = AdaptiveMatrix(rows=rows, cols=cols, cutoff=self.cutoff)
        out.data = [out._settle(e) for e in entries]
        return out

    @classmethod
    def from_array(cls, array, cutoff: Optional[SparsityCutoff] = None) -> AdaptiveMatrix:
        arr = np.asarray(array, dtype=np.complex128)
        if arr.ndim != 2:
            raise DimensionError(f"expected a 2-D array, got {arr.ndim} dimensions")
        out = cls(rows=arr.shape[0], cols=arr.shape[1], cutoff=cutoff or SparsityCutoff())
        for i, row in enumerate(arr):
            (cols,) = np.nonzero(row)
            out.data[i] = out._settle({int(j): complex(row[j]) for j in cols})
        return out

    @classmethod
    def zeros(cls, rows: int, cols: int, cutoff: Optional[SparsityCutoff] = None) -> AdaptiveMatrix:
        return cls(rows=rows, cols=cols, cutoff=cutoff or SparsityCutoff())

    @classmethod
    def identity(cls, size: int = 2, cutoff: Optional[SparsityCutoff] = None) -> AdaptiveMatrix:
        out = cls.zeros(size, size, cutoff=cutoff)
        for i in range(size):
            out.data[i] = SparseRow({i: 1 + 0j})
        return out

    @property
    def nnz(self) -> int:
        return sum(1 for row in self.data for _ in row.items())

    @property
    def dense_rows(self) -> int:
        """Number of rows that have been promoted to array storage."""
        return sum(1 for row in self.data if isinstance(row, DenseRow))

    def get(self, i: int, j: int) -> complex:
        return self.data[i].get(j)

    def set(self, i: int, j: int, value: complex) -> None:
        row = self.data[i]
        if isinstance(row, DenseRow):
            row.values[j] = value
            return
        if value == 0:
            row.entries.pop(j, None)
            return
        row.entries[j] = complex(value)
        if self.cutoff.should_promote(len(row), self.cols):
            self.data[i] = row.promote(self.cols)

    def iter_entries(self) -> Iterator[Tuple[int, int, complex]]:
        """Iterate over (row, col, value) for every non-zero entry."""
        for i, row in enumerate(self.data):
            for j, value in row.items():
                yield i, j, value

    def _adapt(self, other: Matrix) -> AdaptiveMatrix:
        if isinstance(other, AdaptiveMatrix):
            return other
        return AdaptiveMatrix.from_array(other.to_numpy(), cutoff=self.cutoff)

    def tensor(self, other: Matrix) -> AdaptiveMatrix:
        b = self._adapt(other)
        b_rows = [list(row.items()) for row in b.data]
        output = []
        for row_a in self.data:
            a_items = list(row_a.items())
            for row_b in b_rows:
                output.append(tensor_rows(iter(a_items), row_b, b.cols))
        return self._derived(self.rows * b.rows, self.cols * b.cols, output)

    def multiply(self, other: Matrix) -> AdaptiveMatrix:
        self._check_multiply(other)
        b = self._adapt(other)
        b_rows = [list(row.items()) for row in b.data]
        output = []
        for row_a in self.data:
            values = {}
            for y, va in row_a.items():
                for j, vb in b_rows[y]:
                    accumulate(values, j, va * vb)
            output.append(values)
        return self._derived(self.rows, b.cols, output)

    def transpose(self) -> AdaptiveMatrix:
        moved = [{} for _ in range(self.cols)]
        for i, j, value in self.iter_entries():
            moved[j][i] = value
        self.rows, self.cols = self.cols, self.rows
        self.data = [self._settle(entries) for entries in moved]
        return self

    def conjugate(self) -> AdaptiveMatrix:
        for row in self.data:
            row.conjugate()
        return self

    def copy(self) -> AdaptiveMatrix:
        return AdaptiveMatrix(
            rows=self.rows,
            cols=self.cols,
            data=[row.copy() for row in self.data],
            cutoff=self.cutoff
        )

    def multiply_vector(self, vector: np.ndarray) -> np.ndarray:
        vector = np.asarray(vector, dtype=np.complex128)
        self._check_vector(vector)
        return np.array([row.dot(vector) for row in self.data], dtype=np.complex128)

    def permute_rows(self, order: Sequence[int]) -> AdaptiveMatrix:
        self._check_order(order)
        return AdaptiveMatrix(
            rows=self.rows,
            cols=self.cols,
            data=[self.data[k].copy() for k in order],
            cutoff=self.cutoff
        )

    def to_numpy(self) -> np.ndarray:
        out = np.zeros((self.rows, self.cols), dtype=np.complex128)
        for i, row in enumerate(self.data):
            if isinstance(row, DenseRow):
                out[i] = row.values
            else:
                for j, value in row.items():
                    out[i, j] = value
        return out

    def to_scipy_sparse(self) -> sparse.csr_matrix:
        """Convert to a scipy CSR matrix with the same non-zero entries."""
        return sparse.csr_matrix(self.to_numpy())
