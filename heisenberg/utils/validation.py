"""
Validation utilities for heisenberg.

Cross-checks the matrix representations against each other and against an
exact Qiskit statevector simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence
import numpy as np

from heisenberg.core.gates import Gate, GateType
from heisenberg.core.matrix import Matrix
from heisenberg.evolution.genome import Genome
from heisenberg.runtime.machine import MachineKind


@dataclass
class ValidationResult:
    """Result of validating a simulated state against a reference."""
    reference: str
    state: np.ndarray
    expected: np.ndarray
    max_error: float
    passed: bool
    threshold: float
    details: Dict[str, Any]


def is_unitary(matrix: Matrix, atol: float = 1e-10) -> bool:
    """Check ``G · conj(G)^T ≈ I`` using the matrix's own operations."""
    if matrix.rows != matrix.cols:
        return False
    adjoint = matrix.copy().transpose().conjugate()
    product = matrix.multiply(adjoint)
    return product.allclose(np.eye(matrix.rows), atol=atol)


def _run(gates: Sequence[Gate], width: int, inputs: Sequence[int], kind) -> np.ndarray:
    genome = Genome(gates=list(gates), width=width, kind=kind)
    return genome.run(inputs)


def compare_representations(
    gates: Sequence[Gate],
    width: int,
    inputs: Sequence[int] = (),
    kinds: Iterable = tuple(MachineKind)
) -> Dict[MachineKind, float]:
    """
    Run one circuit on several machine kinds.

    Returns:
        Max absolute amplitude deviation of each kind from the first one
    """
    kinds = [MachineKind(k) for k in kinds]
    reference = _run(gates, width, inputs, kinds[0])
    deviations = {}
    for kind in kinds:
        state = _run(gates, width, inputs, kind)
        deviations[kind] = float(np.max(np.abs(state - reference)))
    return deviations


def to_qiskit_circuit(gates: Sequence[Gate], width: int, inputs: Sequence[int] = ()):
    """
    Build the equivalent Qiskit circuit.

    Qiskit orders qubits little-endian, so our qubit ``q`` (most-significant
    first) maps to Qiskit qubit ``n-1-q``. Input bits become X gates.
    """
    try:
        from qiskit import QuantumCircuit
    except ImportError:
        raise ImportError("Qiskit required for validation")

    n = max(width, len(inputs))
    qc = QuantumCircuit(n)

    def m(q: int) -> int:
        return n - 1 - q

    for q, bit in enumerate(inputs):
        if bit:
            qc.x(m(q))

    for gate in gates:
        kind = gate.gate_type
        if kind is GateType.CONTROLLED_NOT:
            if gate.qubits:
                qc.mcx([m(c) for c in gate.qubits], m(gate.target))
            else:
                qc.x(m(gate.target))
            continue
        for q in gate.qubits:
            if kind is GateType.I:
                qc.id(m(q))
            elif kind is GateType.U:
                qc.u(gate.theta, gate.phi, gate.lam, m(q))
            elif kind in (GateType.RX, GateType.RY, GateType.RZ):
                getattr(qc, kind.value)(gate.theta, m(q))
            else:
                getattr(qc, kind.value)(m(q))
    return qc


def validate_against_exact(
    gates: Sequence[Gate],
    width: int,
    inputs: Sequence[int] = (),
    kind="sparse",
    threshold: float = 1e-9,
    verbose: bool = False
) -> ValidationResult:
    """
    Validate a simulated circuit against exact Qiskit simulation.

    Args:
        gates: Circuit to run
        width: Number of qubits
        inputs: Initial basis bits (padded with 0 up to width)
        kind: Machine representation to validate
        threshold: Maximum allowed amplitude error
        verbose: Print detailed output

    Returns:
        ValidationResult with comparison data
    """
    try:
        from qiskit.quantum_info import Statevector
    except ImportError:
        raise ImportError("Qiskit required for validation")

    kind = MachineKind(kind)
    state = _run(gates, width, inputs, kind)
    expected = np.asarray(Statevector.from_instruction(
        to_qiskit_circuit(gates, width, inputs)
    ).data)

    errors = np.abs(state - expected)
    max_error = float(np.max(errors)) if errors.size else 0.0
    passed = max_error <= threshold

    if verbose:
        print(f"\n{'Index':<8} {'Simulated':<28} {'Exact':<28} {'Error':<12}")
        print("-" * 78)
        for i, (ours, theirs) in enumerate(zip(state, expected)):
            print(f"{i:<8} {str(np.round(ours, 6)):<28} "
                  f"{str(np.round(theirs, 6)):<28} {errors[i]:<12.2e}")
        print("-" * 78)
        print(f"Max error: {max_error:.2e}")
        print(f"Result: {'PASSED' if passed else 'FAILED'}")

    return ValidationResult(
        reference="qiskit",
        state=state,
        expected=expected,
        max_error=max_error,
        passed=passed,
        threshold=threshold,
        details={
            "num_qubits": len(state).bit_length() - 1,
            "num_gates": len(gates),
            "kind": kind.value,
        }
    )
