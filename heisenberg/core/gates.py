"""
Gate definitions for heisenberg.

This module holds the canonical 2x2 unitaries, the ``Gate`` descriptor that
circuits and genomes are made of, and the basis-index permutation behind the
multi-controlled NOT.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import numpy as np

from heisenberg.core.errors import DimensionError


# Common gate matrices
PAULI_I = np.array([[1, 0], [0, 1]], dtype=np.complex128)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
PAULI_Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
HADAMARD = np.array([[1, 1], [1, -1]], dtype=np.complex128) / np.sqrt(2)
S_GATE = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
T_GATE = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)


def rx_matrix(theta: float) -> np.ndarray:
    """Rotation around X-axis: Rx(θ) = exp(-iθX/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def ry_matrix(theta: float) -> np.ndarray:
    """Rotation around Y-axis: Ry(θ) = exp(-iθY/2)"""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def rz_matrix(theta: float) -> np.ndarray:
    """Rotation around Z-axis: Rz(θ) = exp(-iθZ/2)"""
    return np.array([
        [np.exp(-1j * theta / 2), 0],
        [0, np.exp(1j * theta / 2)]
    ], dtype=np.complex128)


def u_matrix(theta: float, phi: float, lam: float) -> np.ndarray:
    """General single-qubit unitary U(θ, φ, λ)."""
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([
        [c, -np.exp(1j * lam) * s],
        [np.exp(1j * phi) * s, np.exp(1j * (phi + lam)) * c]
    ], dtype=np.complex128)


def controlled_not_permutation(
    num_qubits: int,
    controls: Sequence[int],
    target: int
) -> List[int]:
    """
    Basis-index permutation implemented by a multi-controlled NOT.

    Index ``i`` is read as an ``num_qubits``-bit string with qubit 0 as the
    most-significant bit. When every control bit is 1 the target bit is
    flipped. With no controls the target is flipped unconditionally.

    Returns:
        ``order`` such that the gate's row ``i`` is row ``order[i]`` of the
        identity.
    """
    for q in list(controls) + [target]:
        if not 0 <= q < num_qubits:
            raise DimensionError(f"qubit {q} out of range for {num_qubits} qubits")
    if target in controls:
        raise ValueError(f"target {target} is also a control")

    top = num_qubits - 1
    control_mask = 0
    for c in controls:
        control_mask |= 1 << (top - c)
    target_bit = 1 << (top - target)

    order = []
    for i in range(1 << num_qubits):
        if i & control_mask == control_mask:
            order.append(i ^ target_bit)
        else:
            order.append(i)
    return order


class GateType(Enum):
    """Gate families a circuit can contain."""
    CONTROLLED_NOT = "controlled_not"
    I = "i"
    H = "h"
    X = "x"
    Y = "y"
    Z = "z"
    S = "s"
    T = "t"
    U = "u"
    RX = "rx"
    RY = "ry"
    RZ = "rz"


FIXED_MATRICES = {
    GateType.I: PAULI_I,
    GateType.H: HADAMARD,
    GateType.X: PAULI_X,
    GateType.Y: PAULI_Y,
    GateType.Z: PAULI_Z,
    GateType.S: S_GATE,
    GateType.T: T_GATE,
}

ROTATION_MATRICES = {
    GateType.RX: rx_matrix,
    GateType.RY: ry_matrix,
    GateType.RZ: rz_matrix,
}

PARAMETRIC_TYPES = frozenset({GateType.U, GateType.RX, GateType.RY, GateType.RZ})


@dataclass(frozen=True)
class Gate:
    """
    One step of a circuit.

    Attributes:
        gate_type: Which gate family this is
        qubits: Control qubits for CONTROLLED_NOT, operand qubits otherwise
        target: Target qubit (CONTROLLED_NOT only)
        theta, phi, lam: Angles for U and the axis rotations
    """
    gate_type: GateType
    qubits: Tuple[int, ...] = ()
    target: Optional[int] = None
    theta: float = 0.0
    phi: float = 0.0
    lam: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "qubits", tuple(int(q) for q in self.qubits))
        if self.gate_type is GateType.CONTROLLED_NOT:
            if self.target is None:
                raise ValueError("controlled-not needs a target qubit")
            if self.target in self.qubits:
                raise ValueError(f"target {self.target} is also a control")

    @property
    def is_parametric(self) -> bool:
        return self.gate_type in PARAMETRIC_TYPES

    @property
    def touched_qubits(self) -> Tuple[int, ...]:
        """All qubits this gate reads or writes."""
        if self.target is None:
            return self.qubits
        return self.qubits + (self.target,)

    def matrix(self) -> np.ndarray:
        """
        The 2x2 unitary applied to each operand qubit.

        Controlled-not has no 2x2 form here; it is built as a permutation of
        the full-width identity instead.
        """
        if self.gate_type in FIXED_MATRICES:
            return FIXED_MATRICES[self.gate_type]
        if self.gate_type in ROTATION_MATRICES:
            return ROTATION_MATRICES[self.gate_type](self.theta)
        if self.gate_type is GateType.U:
            return u_matrix(self.theta, self.phi, self.lam)
        raise ValueError(f"{self.gate_type.name} has no single-qubit matrix")

    def apply_to(self, machine) -> None:
        """Replay this gate on a machine."""
        if self.gate_type is GateType.CONTROLLED_NOT:
            machine.controlled_not(self.qubits, self.target)
        else:
            machine.apply(self.matrix(), *self.qubits)

    def __str__(self) -> str:
        name = self.gate_type.value
        if self.gate_type is GateType.CONTROLLED_NOT:
            return f"{name}({list(self.qubits)} -> {self.target})"
        if self.gate_type is GateType.U:
            return f"{name}({self.theta:.3f}, {self.phi:.3f}, {self.lam:.3f}){list(self.qubits)}"
        if self.is_parametric:
            return f"{name}({self.theta:.3f}){list(self.qubits)}"
        return f"{name}{list(self.qubits)}"
