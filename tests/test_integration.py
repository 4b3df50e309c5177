"""
Integration tests: representations against each other and against Qiskit.
"""

import pytest
import numpy as np

from heisenberg.core.config import OptimizerConfig
from heisenberg.core.gates import Gate, GateType
from heisenberg.evolution.genome import GateSampler
from heisenberg.runtime.machine import MachineKind
from heisenberg.utils.validation import compare_representations, validate_against_exact


def random_circuit(width, depth, seed):
    sampler = GateSampler(width=width, config=OptimizerConfig(), rng=np.random.default_rng(seed))
    return [sampler.gate() for _ in range(depth)]


class TestRepresentationEquivalence:
    """Dense, sparse and adaptive machines must agree on every circuit."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_circuits(self, seed):
        gates = random_circuit(width=3, depth=15, seed=seed)
        deviations = compare_representations(gates, width=3, inputs=(1, 0, 1))

        assert set(deviations) == set(MachineKind)
        assert max(deviations.values()) < 1e-12

    def test_wider_register(self):
        gates = random_circuit(width=5, depth=10, seed=99)
        deviations = compare_representations(gates, width=5, inputs=(0, 1))
        assert max(deviations.values()) < 1e-12


class TestQiskitValidation:
    """Cross-checks against exact statevector simulation."""

    def test_bell_state(self):
        pytest.importorskip("qiskit")
        gates = [
            Gate(GateType.H, qubits=(0,)),
            Gate(GateType.CONTROLLED_NOT, qubits=(0,), target=1),
        ]
        result = validate_against_exact(gates, width=2)

        assert result.passed
        assert np.allclose(np.abs(result.state) ** 2, [0.5, 0, 0, 0.5])

    def test_bit_ordering(self):
        pytest.importorskip("qiskit")
        gates = [Gate(GateType.CONTROLLED_NOT, qubits=(0,), target=2)]
        result = validate_against_exact(gates, width=3, inputs=(1, 1, 0))

        assert result.passed
        assert np.isclose(abs(result.expected[7]), 1.0)

    @pytest.mark.parametrize("kind", ["dense", "sparse", "adaptive"])
    def test_random_circuits(self, kind):
        pytest.importorskip("qiskit")
        for seed in range(3):
            gates = random_circuit(width=3, depth=12, seed=seed)
            result = validate_against_exact(gates, width=3, inputs=(0, 1), kind=kind)
            assert result.passed, f"seed {seed}: max error {result.max_error}"
            assert result.details["kind"] == kind


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
