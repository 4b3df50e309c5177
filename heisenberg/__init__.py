"""
heisenberg - classical quantum circuit simulation

Dense, sparse and adaptive matrix engines for small quantum registers, plus a
genetic search for circuits that reproduce target measurement probabilities.
"""

from heisenberg.core.errors import DimensionError
from heisenberg.core.gates import Gate, GateType
from heisenberg.runtime.machine import Machine, MachineKind
from heisenberg.evolution.optimizer import optimize

__version__ = "0.1.0"
__all__ = ["Machine", "MachineKind", "Gate", "GateType", "DimensionError", "optimize"]
