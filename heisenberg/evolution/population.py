"""Population container for the evolutionary circuit search."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from heisenberg.evolution.genome import Genome


@dataclass
class Population:
    """
    Ordered collection of genomes.

    The optimizer cycles it through evaluate -> sort_by_fitness -> truncate
    -> add_offspring every generation.
    """
    genomes: List[Genome] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.genomes)

    def __iter__(self) -> Iterator[Genome]:
        return iter(self.genomes)

    def __getitem__(self, index: int) -> Genome:
        return self.genomes[index]

    def add_offspring(self, genome: Genome) -> None:
        """Append a genome; it is scored on the next ``evaluate``."""
        self.genomes.append(genome)

    def evaluate(self) -> int:
        """
        Execute every genome that has no fitness yet.

        Returns:
            Number of genomes evaluated
        """
        count = 0
        for genome in self.genomes:
            if not genome.is_evaluated:
                genome.execute()
                count += 1
        return count

    def sort_by_fitness(self) -> None:
        """Sort ascending by fitness (best first). Every genome must be evaluated."""
        pending = sum(1 for g in self.genomes if not g.is_evaluated)
        if pending:
            raise ValueError(f"{pending} genomes have not been evaluated")
        # stable, so ties keep their insertion order
        self.genomes.sort(key=lambda g: g.fitness)

    def truncate(self, size: int) -> int:
        """
        Keep only the first ``size`` genomes.

        Returns:
            Number of genomes evicted
        """
        evicted = max(0, len(self.genomes) - size)
        del self.genomes[size:]
        return evicted

    def elite(self, size: int) -> List[Genome]:
        """The first ``size`` genomes (the best ones after sorting)."""
        return self.genomes[:size]

    @property
    def best(self) -> Genome:
        """Lowest-fitness evaluated genome."""
        scored = [g for g in self.genomes if g.is_evaluated]
        if not scored:
            raise ValueError("population has no evaluated genomes")
        return min(scored, key=lambda g: g.fitness)
