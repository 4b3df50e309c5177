"""Runtime components: the simulated quantum machine."""

from heisenberg.runtime.machine import Machine, MachineKind, MATRIX_TYPES

__all__ = ["Machine", "MachineKind", "MATRIX_TYPES"]
