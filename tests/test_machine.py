"""
Tests for the quantum machine.
"""

import pytest
import numpy as np

from heisenberg.core.adaptive import DenseRow
from heisenberg.core.config import SparsityCutoff
from heisenberg.core.errors import DimensionError
from heisenberg.core.gates import Gate, GateType, HADAMARD, PAULI_I
from heisenberg.runtime.machine import Machine, MachineKind
from heisenberg.utils.validation import is_unitary


KINDS = list(MachineKind)


def basis(index, n):
    v = np.zeros(1 << n, dtype=complex)
    v[index] = 1
    return v


class TestInitialization:
    """Tests for qubit allocation."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_sequential_indices(self, kind):
        machine = Machine(kind=kind)
        assert machine.zero() == 0
        assert machine.one() == 1
        assert machine.zero() == 2
        assert machine.num_qubits == 3

    @pytest.mark.parametrize("kind", KINDS)
    def test_first_qubit_is_most_significant(self, kind):
        machine = Machine(kind=kind)
        machine.one()
        machine.zero()
        machine.zero()
        assert np.allclose(machine.state, basis(4, 3))

    def test_kind_from_string(self):
        assert Machine(kind="adaptive").kind is MachineKind.ADAPTIVE
        assert Machine.dense().kind is MachineKind.DENSE

    def test_machines_compare_by_identity(self):
        a = Machine.dense()
        b = Machine.dense()
        for m in (a, b):
            m.zero()
            m.zero()
        assert a != b
        assert a == a


class TestControlledNot:
    """Tests for the permutation-built controlled-not."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_regression_state(self, kind):
        machine = Machine(kind=kind)
        machine.one()
        machine.one()
        machine.zero()

        a = machine.controlled_not([0], 2)
        b = machine.controlled_not([0, 1], 2)

        assert np.allclose(machine.state, basis(6, 3))

        c = b.multiply(a)
        d = c.copy().transpose()
        assert d.allclose(c)

    @pytest.mark.parametrize("kind", KINDS)
    def test_returned_gate_is_permutation(self, kind):
        machine = Machine(kind=kind)
        for _ in range(3):
            machine.zero()

        gate = machine.controlled_not([1], 0)

        expected = np.eye(8)[[0, 1, 2, 3, 4, 5, 6, 7]]
        expected[[2, 3, 6, 7]] = np.eye(8)[[6, 7, 2, 3]]
        assert gate.allclose(expected)
        assert is_unitary(gate)

    @pytest.mark.parametrize("kind", KINDS)
    def test_involution(self, kind):
        machine = Machine(kind=kind)
        for _ in range(3):
            machine.zero()
        machine.h(0).ry(0.5, 1).t(2).rx(0.7, 2)
        before = machine.state.copy()

        machine.controlled_not([0, 2], 1)
        assert not np.allclose(machine.state, before)
        machine.controlled_not([0, 2], 1)

        assert np.allclose(machine.state, before)

    @pytest.mark.parametrize("kind", KINDS)
    def test_single_qubit_without_controls(self, kind):
        machine = Machine(kind=kind)
        machine.zero()
        machine.controlled_not([], 0)
        assert np.allclose(machine.state, [0, 1])

    def test_bad_qubits(self):
        machine = Machine.sparse()
        machine.zero()
        machine.zero()
        with pytest.raises(DimensionError):
            machine.controlled_not([0], 2)
        with pytest.raises(ValueError):
            machine.controlled_not([1], 1)


class TestSwap:
    """Tests for the CNOT-based swap."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_swap_two(self, kind):
        machine = Machine(kind=kind)
        q0 = machine.zero()
        q1 = machine.one()
        machine.swap(q0, q1)
        assert np.allclose(machine.state, [0, 0, 1, 0])

    @pytest.mark.parametrize("kind", KINDS)
    def test_swap_reverses_order(self, kind):
        machine = Machine(kind=kind)
        machine.one()
        machine.zero()
        machine.zero()
        machine.swap(0, 1, 2)
        # qubit 0 pairs with qubit 2, qubit 1 stays put
        assert np.allclose(machine.state, basis(1, 3))


class TestSingleQubitGates:
    """Tests for the 2x2 gate family."""

    @pytest.mark.parametrize("kind", KINDS)
    def test_rotations_by_four_pi(self, kind):
        for name in ("rx", "ry", "rz"):
            machine = Machine(kind=kind)
            q = machine.zero()
            getattr(machine, name)(4 * np.pi, q)
            assert np.allclose(machine.state, [1, 0])

    @pytest.mark.parametrize("kind", KINDS)
    def test_rx_pi_flips(self, kind):
        machine = Machine(kind=kind)
        q = machine.zero()
        machine.rx(np.pi, q)
        assert np.allclose(machine.state, [0, -1j])

    @pytest.mark.parametrize("kind", KINDS)
    def test_hadamard_on_first_qubit(self, kind):
        machine = Machine(kind=kind)
        machine.zero()
        machine.zero()
        full = machine.apply(HADAMARD, 0)

        assert full.shape == (4, 4)
        assert full.allclose(np.kron(HADAMARD, PAULI_I))
        assert np.allclose(machine.state, [1 / np.sqrt(2), 0, 1 / np.sqrt(2), 0])

    @pytest.mark.parametrize("kind", KINDS)
    def test_gate_on_several_qubits(self, kind):
        machine = Machine(kind=kind)
        machine.zero()
        machine.zero()
        machine.zero()
        machine.x(0, 2)
        assert np.allclose(machine.state, basis(5, 3))

    @pytest.mark.parametrize("kind", KINDS)
    def test_bell_state(self, kind):
        machine = Machine(kind=kind)
        q0 = machine.zero()
        q1 = machine.zero()
        machine.h(q0).controlled_not([q0], q1)
        assert np.allclose(machine.probabilities(), [0.5, 0, 0, 0.5])

    @pytest.mark.parametrize("kind", KINDS)
    def test_phase_gates(self, kind):
        machine = Machine(kind=kind)
        q = machine.one()
        machine.s(q).t(q).z(q)
        assert np.allclose(machine.state, [0, -1j * np.exp(1j * np.pi / 4)])

    @pytest.mark.parametrize("kind", KINDS)
    def test_u_gate_matches_ry(self, kind):
        a = Machine(kind=kind)
        a.zero()
        a.u(1.3, 0.0, 0.0, 0)
        b = Machine(kind=kind)
        b.zero()
        b.ry(1.3, 0)
        assert np.allclose(a.state, b.state)

    def test_apply_gate_descriptor(self):
        machine = Machine.sparse()
        machine.zero()
        machine.apply_gate(Gate(GateType.RY, qubits=(0,), theta=np.pi))
        assert np.allclose(machine.probabilities(), [0, 1])

    def test_identity_with_no_qubits(self):
        machine = Machine.dense()
        machine.one()
        machine.zero()
        machine.i().h()
        assert np.allclose(machine.state, basis(2, 2))

    def test_out_of_range_qubit(self):
        machine = Machine.sparse()
        machine.zero()
        with pytest.raises(DimensionError):
            machine.h(1)

    def test_empty_machine(self):
        with pytest.raises(DimensionError):
            Machine.sparse().h()


class TestRepresentations:
    """Same circuit, different matrix engines."""

    def circuit(self, machine):
        machine.one()
        machine.zero()
        machine.zero()
        machine.h(0).controlled_not([0], 1)
        machine.ry(0.4, 2).controlled_not([1, 2], 0)
        machine.u(0.3, 1.1, 2.2, 1).swap(0, 2).s(1).rz(1.7, 0, 1)
        return machine.state

    def test_all_kinds_agree(self):
        states = [self.circuit(Machine(kind=kind)) for kind in KINDS]
        for state in states[1:]:
            assert np.allclose(state, states[0], atol=1e-12)

    def test_aggressive_promotion_agrees(self):
        cutoff = SparsityCutoff(percent=0.0, size=0)
        machine = Machine.adaptive(cutoff=cutoff)
        state = self.circuit(machine)

        assert np.allclose(state, self.circuit(Machine.dense()), atol=1e-12)

        full = machine.expand(HADAMARD, [0, 1, 2])
        assert full.dense_rows == full.rows
        assert all(isinstance(r, DenseRow) for r in full.data)

    def test_norm_preserved(self):
        state = self.circuit(Machine.sparse())
        assert np.isclose(np.linalg.norm(state), 1.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
