"""Tunable constants for the matrix layer and the circuit optimizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple
import numpy as np

from heisenberg.core.gates import GateType


# Default sparse -> dense promotion thresholds for adaptive rows
CUTOFF_PERCENT = 0.1
CUTOFF_SIZE = 256

MACHINE_KINDS = ("dense", "sparse", "adaptive")


@dataclass(frozen=True)
class SparsityCutoff:
    """
    When an adaptive matrix row switches from map storage to array storage.

    A sparse row is promoted once it holds more than ``size`` entries AND
    those entries cover more than ``percent`` of the row width. Both
    comparisons are strict.
    """
    percent: float = CUTOFF_PERCENT
    size: int = CUTOFF_SIZE

    def __post_init__(self):
        if not 0.0 <= self.percent <= 1.0:
            raise ValueError(f"cutoff percent must be in [0, 1], got {self.percent}")
        if self.size < 0:
            raise ValueError(f"cutoff size must be non-negative, got {self.size}")

    def should_promote(self, length: int, width: int) -> bool:
        """Check whether a sparse row of ``length`` entries should become dense."""
        if width <= 0:
            return False
        return length > self.size and length / width > self.percent


def _default_gate_weights() -> Dict[str, int]:
    # Controlled-not dominates so random circuits actually entangle
    return {
        "controlled_not": 5,
        "i": 2,
        "h": 1,
        "x": 1,
        "y": 1,
        "z": 1,
        "s": 1,
        "t": 1,
        "u": 1,
        "rx": 1,
        "ry": 1,
        "rz": 1,
    }


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Knobs of the evolutionary circuit search.

    Attributes:
        population_size: Genomes kept after each truncation
        elite_size: Top genomes used as crossover parents (and crossover rounds)
        generations: Number of generations to run
        gate_weights: Relative draw weight per gate type value
        max_operands: Upper bound on operand/control qubits per random gate
        angle_range: Angles are drawn uniformly from [0, angle_range)
        machine_kind: Matrix representation used to evaluate genomes
        cutoff: Row promotion thresholds when machine_kind is adaptive
    """
    population_size: int = 100
    elite_size: int = 10
    generations: int = 100
    gate_weights: Dict[str, int] = field(default_factory=_default_gate_weights)
    max_operands: int = 2
    angle_range: float = 4 * np.pi
    machine_kind: str = "sparse"
    cutoff: SparsityCutoff = field(default_factory=SparsityCutoff)

    def __post_init__(self):
        if self.population_size < 1:
            raise ValueError("population_size must be positive")
        if not 1 <= self.elite_size <= self.population_size:
            raise ValueError("elite_size must be between 1 and population_size")
        if self.generations < 0:
            raise ValueError("generations must be non-negative")
        if self.max_operands < 0:
            raise ValueError("max_operands must be non-negative")
        if any(w < 0 for w in self.gate_weights.values()):
            raise ValueError("gate weights must be non-negative")
        if sum(self.gate_weights.values()) <= 0:
            raise ValueError("at least one gate type needs a positive weight")
        if str(getattr(self.machine_kind, "value", self.machine_kind)) not in MACHINE_KINDS:
            raise ValueError(f"unknown machine kind: {self.machine_kind}")
        known = {t.value for t in GateType}
        for name in self.gate_weights:
            if name not in known:
                raise ValueError(f"Unknown gate: {name}")

    def weight_table(self) -> Tuple[Tuple[str, ...], np.ndarray]:
        """Return gate type values and their normalized draw probabilities."""
        names = tuple(name for name, w in self.gate_weights.items() if w > 0)
        weights = np.array([self.gate_weights[n] for n in names], dtype=float)
        return names, weights / weights.sum()
