"""Evolutionary circuit search."""

from heisenberg.evolution.genome import Genome, GateSampler
from heisenberg.evolution.population import Population
from heisenberg.evolution.optimizer import CircuitOptimizer, OptimizationResult, optimize

__all__ = [
    "Genome",
    "GateSampler",
    "Population",
    "CircuitOptimizer",
    "OptimizationResult",
    "optimize",
]
