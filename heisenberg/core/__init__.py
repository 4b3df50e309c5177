"""Core heisenberg components: matrix representations, gates and configuration."""

from heisenberg.core.errors import HeisenbergError, DimensionError
from heisenberg.core.config import SparsityCutoff, OptimizerConfig
from heisenberg.core.matrix import Matrix
from heisenberg.core.dense import DenseMatrix
from heisenberg.core.sparse import SparseMatrix
from heisenberg.core.adaptive import AdaptiveMatrix, DenseRow, SparseRow
from heisenberg.core.gates import Gate, GateType, controlled_not_permutation

__all__ = [
    # Errors
    "HeisenbergError",
    "DimensionError",
    # Configuration
    "SparsityCutoff",
    "OptimizerConfig",
    # Matrices
    "Matrix",
    "DenseMatrix",
    "SparseMatrix",
    "AdaptiveMatrix",
    "DenseRow",
    "SparseRow",
    # Gates
    "Gate",
    "GateType",
    "controlled_not_permutation",
]
