"""
Circuit genomes for the evolutionary search.

A genome is an ordered gate list plus the probability specifications it is
scored against. Fitness is the summed squared error between simulated
measurement probabilities and the targets, so 0 is a perfect match.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
import numpy as np

from heisenberg.core import vector
from heisenberg.core.config import OptimizerConfig, SparsityCutoff
from heisenberg.core.gates import Gate, GateType
from heisenberg.runtime.machine import Machine, MachineKind


# (input bits, target probabilities)
ProbabilitySpec = Tuple[Tuple[int, ...], Tuple[float, ...]]


def normalize_specs(probabilities) -> Tuple[ProbabilitySpec, ...]:
    """Freeze user-supplied (inputs, targets) pairs into tuples."""
    specs = []
    for inputs, targets in probabilities:
        specs.append((
            tuple(1 if bit else 0 for bit in inputs),
            tuple(float(p) for p in targets),
        ))
    return tuple(specs)


@dataclass
class Genome:
    """
    A candidate circuit.

    Attributes:
        gates: Gates in execution order
        width: Number of qubits the circuit runs on
        probabilities: (input bits, target probabilities) pairs to score against
        kind: Machine representation used for evaluation
        cutoff: Promotion thresholds when ``kind`` is adaptive
        fitness: Last computed fitness, None until evaluated
    """
    gates: List[Gate]
    width: int
    probabilities: Tuple[ProbabilitySpec, ...] = ()
    kind: MachineKind = MachineKind.SPARSE
    cutoff: SparsityCutoff = field(default_factory=SparsityCutoff)
    fitness: Optional[float] = None

    def __post_init__(self):
        self.kind = MachineKind(self.kind)
        self.probabilities = normalize_specs(self.probabilities)

    @property
    def depth(self) -> int:
        return len(self.gates)

    @property
    def is_evaluated(self) -> bool:
        return self.fitness is not None

    def copy(self) -> Genome:
        """Independent gate list, shared (immutable) specs, fitness cleared."""
        return Genome(
            gates=list(self.gates),
            width=self.width,
            probabilities=self.probabilities,
            kind=self.kind,
            cutoff=self.cutoff,
        )

    def prepare(self, inputs: Sequence[int]) -> Machine:
        """Fresh machine loaded with ``inputs``, padded with |0⟩ up to ``width``."""
        machine = Machine(kind=self.kind, cutoff=self.cutoff)
        for bit in inputs:
            if bit:
                machine.one()
            else:
                machine.zero()
        while machine.num_qubits < self.width:
            machine.zero()
        return machine

    def run(self, inputs: Sequence[int]) -> np.ndarray:
        """Execute the circuit on one input pattern and return the final state."""
        machine = self.prepare(inputs)
        for gate in self.gates:
            machine.apply_gate(gate)
        return machine.state

    def execute(self) -> float:
        """
        Score the circuit against every probability specification.

        Each evaluation starts from a fresh machine, so repeated calls on an
        unchanged genome return the same value.

        Returns:
            The fitness, also stored on ``self.fitness``
        """
        fitness = 0.0
        for inputs, targets in self.probabilities:
            state = self.run(inputs)
            fitness += vector.squared_error(state, targets)
        self.fitness = fitness
        return fitness

    def __str__(self) -> str:
        body = ", ".join(str(g) for g in self.gates)
        return f"Genome(fitness={self.fitness}, width={self.width}, gates=[{body}])"


@dataclass
class GateSampler:
    """
    Draws random, well-formed gates for a circuit of fixed width.

    Qubit indices always come from ``[0, width)`` and are de-duplicated, and a
    controlled-not target is never one of its own controls.
    """
    width: int
    config: OptimizerConfig
    rng: np.random.Generator

    def __post_init__(self):
        if self.width < 1:
            raise ValueError(f"width must be positive, got {self.width}")
        self._names, self._weights = self.config.weight_table()

    def qubit(self, exclude: Sequence[int] = ()) -> int:
        """A random qubit not in ``exclude``."""
        candidates = [q for q in range(self.width) if q not in exclude]
        return int(self.rng.choice(candidates))

    def operands(self, limit: int) -> Tuple[int, ...]:
        """Between 0 and ``limit`` distinct random qubits."""
        limit = min(limit, self.width)
        count = int(self.rng.integers(0, limit + 1))
        picked = self.rng.choice(self.width, size=count, replace=False)
        return tuple(int(q) for q in picked)

    def angle(self) -> float:
        return float(self.rng.uniform(0.0, self.config.angle_range))

    def gate(self) -> Gate:
        gate_type = GateType(str(self.rng.choice(self._names, p=self._weights)))

        if gate_type is GateType.CONTROLLED_NOT:
            # leave room for a distinct target
            controls = self.operands(min(self.config.max_operands, self.width - 1))
            return Gate(gate_type, qubits=controls, target=self.qubit(controls))

        qubits = self.operands(self.config.max_operands)
        if gate_type is GateType.U:
            return Gate(
                gate_type,
                qubits=qubits,
                theta=self.angle(),
                phi=self.angle(),
                lam=self.angle(),
            )
        if gate_type in (GateType.RX, GateType.RY, GateType.RZ):
            return Gate(gate_type, qubits=qubits, theta=self.angle())
        return Gate(gate_type, qubits=qubits)

    def genome(self, depth: int, probabilities) -> Genome:
        """A genome of ``depth`` freshly drawn gates."""
        return Genome(
            gates=[self.gate() for _ in range(depth)],
            width=self.width,
            probabilities=probabilities,
            kind=self.config.machine_kind,
            cutoff=self.config.cutoff,
        )
