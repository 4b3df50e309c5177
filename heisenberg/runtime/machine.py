"""
Quantum machine: a state vector plus the gate operations that evolve it.

The machine owns its state and replaces it wholesale after every operation.
All operator algebra is delegated to one of the matrix representations
(dense, sparse or adaptive), chosen when the machine is created.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Sequence, Type
import numpy as np

from heisenberg.core.adaptive import AdaptiveMatrix
from heisenberg.core.config import SparsityCutoff
from heisenberg.core.dense import DenseMatrix
from heisenberg.core.errors import DimensionError
from heisenberg.core.gates import (
    Gate,
    HADAMARD,
    PAULI_I,
    PAULI_X,
    PAULI_Y,
    PAULI_Z,
    S_GATE,
    T_GATE,
    controlled_not_permutation,
    rx_matrix,
    ry_matrix,
    rz_matrix,
    u_matrix,
)
from heisenberg.core.matrix import Matrix, format_entries
from heisenberg.core.sparse import SparseMatrix
from heisenberg.core import vector


class MachineKind(Enum):
    """Matrix representation backing a machine."""
    DENSE = "dense"
    SPARSE = "sparse"
    ADAPTIVE = "adaptive"


MATRIX_TYPES = {
    MachineKind.DENSE: DenseMatrix,
    MachineKind.SPARSE: SparseMatrix,
    MachineKind.ADAPTIVE: AdaptiveMatrix,
}


@dataclass(eq=False)
class Machine:
    """
    Simulated register of qubits.

    Usage:
        machine = Machine.sparse()
        q0 = machine.zero()
        q1 = machine.zero()
        machine.h(q0).controlled_not([q0], q1)
        print(machine.probabilities())

    Attributes:
        kind: Matrix representation used for every operator
        cutoff: Promotion thresholds for the adaptive representation
        state: Current state vector (length 2^num_qubits)
        num_qubits: Qubits added so far
    """
    kind: MachineKind = MachineKind.SPARSE
    cutoff: SparsityCutoff = field(default_factory=SparsityCutoff)
    state: np.ndarray = field(default_factory=vector.empty_state, repr=False)
    num_qubits: int = 0

    def __post_init__(self):
        self.kind = MachineKind(self.kind)

    @classmethod
    def dense(cls) -> Machine:
        return cls(kind=MachineKind.DENSE)

    @classmethod
    def sparse(cls) -> Machine:
        return cls(kind=MachineKind.SPARSE)

    @classmethod
    def adaptive(cls, cutoff: Optional[SparsityCutoff] = None) -> Machine:
        return cls(kind=MachineKind.ADAPTIVE, cutoff=cutoff or SparsityCutoff())

    @property
    def matrix_type(self) -> Type[Matrix]:
        return MATRIX_TYPES[self.kind]

    def matrix(self, array) -> Matrix:
        """Wrap a 2-D array in this machine's matrix representation."""
        if self.kind is MachineKind.ADAPTIVE:
            return AdaptiveMatrix.from_array(array, cutoff=self.cutoff)
        return self.matrix_type.from_array(array)

    def _identity(self) -> Matrix:
        return self.matrix(PAULI_I)

    def _check_qubits(self, qubits: Iterable[int]) -> None:
        for q in qubits:
            if not 0 <= q < self.num_qubits:
                raise DimensionError(
                    f"qubit {q} out of range for a {self.num_qubits}-qubit machine"
                )

    # -- qubit initialization -------------------------------------------------

    def _add_qubit(self, bit: int) -> int:
        qubit = self.num_qubits
        self.num_qubits += 1
        basis = vector.basis_state(bit)
        if qubit == 0:
            self.state = basis
        else:
            self.state = vector.tensor(self.state, basis)
        return qubit

    def zero(self) -> int:
        """Add a qubit in |0⟩ and return its index."""
        return self._add_qubit(0)

    def one(self) -> int:
        """Add a qubit in |1⟩ and return its index."""
        return self._add_qubit(1)

    # -- operator application -------------------------------------------------

    def expand(self, gate, qubits: Sequence[int]) -> Matrix:
        """
        Embed a 2x2 operator into the full register.

        Builds ``M_0 ⊗ M_1 ⊗ ... ⊗ M_{n-1}`` where ``M_k`` is the gate for
        positions in ``qubits`` and the identity elsewhere. Position 0 seeds
        the accumulator rather than being tensored onto one.
        """
        self._check_qubits(qubits)
        gate = gate if isinstance(gate, Matrix) else self.matrix(gate)
        targets = set(qubits)
        identity = self._identity()

        full = gate.copy() if 0 in targets else identity
        for position in range(1, self.num_qubits):
            full = full.tensor(gate if position in targets else identity)
        return full

    def apply(self, gate, *qubits: int) -> Matrix:
        """
        Apply a 2x2 operator to each of ``qubits`` and return the full-width operator.

        Args:
            gate: 2x2 array or Matrix
            qubits: Qubits the operator acts on (identity on the rest)
        """
        full = self.expand(gate, qubits)
        self.state = full.multiply_vector(self.state)
        return full

    def controlled_not(self, controls: Sequence[int], target: int) -> Matrix:
        """
        Flip ``target`` on every basis state where all ``controls`` are 1.

        The gate is never assembled from a 2x2 CNOT block: it is the
        full-width identity with its rows permuted by the bit flip.

        Returns:
            The full-width gate matrix that was applied
        """
        controls = list(controls)
        self._check_qubits(controls + [target])
        identity = self._identity()
        full = identity
        for _ in range(self.num_qubits - 1):
            full = identity.tensor(full)

        order = controlled_not_permutation(self.num_qubits, controls, target)
        gate = full.permute_rows(order)
        self.state = gate.multiply_vector(self.state)
        return gate

    def apply_gate(self, gate: Gate) -> Machine:
        """Replay a ``Gate`` descriptor."""
        gate.apply_to(self)
        return self

    # -- gate family ----------------------------------------------------------

    def i(self, *qubits: int) -> Machine:
        self.apply(PAULI_I, *qubits)
        return self

    def h(self, *qubits: int) -> Machine:
        self.apply(HADAMARD, *qubits)
        return self

    def x(self, *qubits: int) -> Machine:
        self.apply(PAULI_X, *qubits)
        return self

    def y(self, *qubits: int) -> Machine:
        self.apply(PAULI_Y, *qubits)
        return self

    def z(self, *qubits: int) -> Machine:
        self.apply(PAULI_Z, *qubits)
        return self

    def s(self, *qubits: int) -> Machine:
        self.apply(S_GATE, *qubits)
        return self

    def t(self, *qubits: int) -> Machine:
        self.apply(T_GATE, *qubits)
        return self

    def u(self, theta: float, phi: float, lam: float, *qubits: int) -> Machine:
        self.apply(u_matrix(theta, phi, lam), *qubits)
        return self

    def rx(self, theta: float, *qubits: int) -> Machine:
        self.apply(rx_matrix(theta), *qubits)
        return self

    def ry(self, theta: float, *qubits: int) -> Machine:
        self.apply(ry_matrix(theta), *qubits)
        return self

    def rz(self, theta: float, *qubits: int) -> Machine:
        self.apply(rz_matrix(theta), *qubits)
        return self

    def swap(self, *qubits: int) -> Machine:
        """
        Reverse the order of ``qubits``: qubit i trades places with qubit len-1-i.

        Each pair costs three controlled-nots.
        """
        length = len(qubits)
        for k in range(length // 2):
            c, t = qubits[k], qubits[length - 1 - k]
            self.controlled_not([c], t)
            self.controlled_not([t], c)
            self.controlled_not([c], t)
        return self

    # -- readout --------------------------------------------------------------

    def probabilities(self) -> np.ndarray:
        return vector.probabilities(self.state)

    def __str__(self) -> str:
        return format_entries(self.state)
