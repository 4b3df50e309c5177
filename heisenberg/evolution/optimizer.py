"""
Evolutionary search for circuits that reproduce target probabilities.

Each generation scores new genomes, keeps the best ``population_size`` of
them (elitism), breeds children from the top ``elite_size`` by swapping one
gate between copies, and adds one point-mutated copy of every genome. The
search is stochastic and carries no convergence guarantee, but the best
fitness can never get worse from one generation to the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from heisenberg.core.config import OptimizerConfig
from heisenberg.evolution.genome import GateSampler, Genome, normalize_specs
from heisenberg.evolution.population import Population

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """
    Outcome of an optimizer run.

    Attributes:
        best: Lowest-fitness genome found
        population: Final sorted population
        history: Best fitness at the start of each generation
    """
    best: Genome
    population: Population
    history: List[float] = field(default_factory=list)

    @property
    def best_fitness(self) -> float:
        return self.best.fitness

    @property
    def generations(self) -> int:
        return len(self.history)


@dataclass
class CircuitOptimizer:
    """
    Genetic optimizer over fixed-depth circuits.

    Usage:
        optimizer = CircuitOptimizer(width=2, depth=4, probabilities=specs, seed=7)
        result = optimizer.run()
        print(result.best)

    Attributes:
        width: Qubits per circuit
        depth: Gates per circuit
        probabilities: (input bits, target probabilities) pairs
        config: Search parameters
        rng: Random generator; built from ``seed`` when omitted
        seed: Seed used when no generator is given
    """
    width: int
    depth: int
    probabilities: tuple
    config: OptimizerConfig = field(default_factory=OptimizerConfig)
    rng: Optional[np.random.Generator] = None
    seed: Optional[int] = 1

    population: Population = field(default_factory=Population, repr=False)
    history: List[float] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if self.width < 1:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.depth < 1:
            raise ValueError(f"depth must be positive, got {self.depth}")
        self.probabilities = normalize_specs(self.probabilities)
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)
        self.sampler = GateSampler(width=self.width, config=self.config, rng=self.rng)

    def initialize(self) -> None:
        """Fill the population with random genomes."""
        self.population = Population([
            self.sampler.genome(self.depth, self.probabilities)
            for _ in range(self.config.population_size)
        ])
        self.history = []

    def select(self) -> float:
        """Evaluate, sort and truncate. Returns the best fitness."""
        evaluated = self.population.evaluate()
        self.population.sort_by_fitness()
        evicted = self.population.truncate(self.config.population_size)
        logger.debug("evaluated %d genomes, evicted %d", evaluated, evicted)
        return self.population.best.fitness

    def crossover(self) -> None:
        """Swap one random gate between copies of two elite parents, elite_size times."""
        elite = self.population.elite(self.config.elite_size)
        for _ in range(self.config.elite_size):
            m1, m2 = self.rng.integers(len(elite), size=2)
            c1, c2 = elite[m1].copy(), elite[m2].copy()
            g1, g2 = self.rng.integers(self.depth, size=2)
            c1.gates[g1], c2.gates[g2] = c2.gates[g2], c1.gates[g1]
            self.population.add_offspring(c1)
            self.population.add_offspring(c2)

    def mutate(self) -> None:
        """Add a copy of every genome with one gate replaced by a fresh random gate."""
        for genome in list(self.population):
            mutant = genome.copy()
            mutant.gates[self.rng.integers(self.depth)] = self.sampler.gate()
            self.population.add_offspring(mutant)

    def step(self) -> float:
        """Run one generation and return the best fitness it started from."""
        best = self.select()
        self.history.append(best)
        logger.info("generation %d best fitness %.6f", len(self.history), best)
        self.crossover()
        self.mutate()
        return best

    def run(self) -> OptimizationResult:
        """Run every configured generation and return the best circuit found."""
        self.initialize()
        for _ in range(self.config.generations):
            self.step()

        # Score the last generation's offspring too
        self.select()
        best = self.population.best
        logger.info("finished after %d generations, best fitness %.6f",
                    len(self.history), best.fitness)
        return OptimizationResult(
            best=best,
            population=self.population,
            history=list(self.history),
        )


def optimize(
    width: int,
    depth: int,
    probabilities,
    config: Optional[OptimizerConfig] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = 1
) -> OptimizationResult:
    """
    Search for a circuit matching the target probability specifications.

    Args:
        width: Number of qubits
        depth: Number of gates per circuit
        probabilities: Iterable of (input bits, target probabilities) pairs.
            Input bits shorter than ``width`` are padded with |0⟩.
        config: Search parameters (defaults: 100 genomes, 10 elites, 100 generations)
        rng: Explicit random generator; takes precedence over ``seed``
        seed: Seed for a fresh generator, so runs are reproducible

    Returns:
        OptimizationResult with the best genome and the fitness history
    """
    optimizer = CircuitOptimizer(
        width=width,
        depth=depth,
        probabilities=probabilities,
        config=config or OptimizerConfig(),
        rng=rng,
        seed=seed,
    )
    return optimizer.run()
