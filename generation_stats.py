"""
Per-generation fitness statistics.
"""

from dataclasses import asdict, dataclass
from typing import Sequence

import numpy as np


@dataclass(frozen=True)
class GenerationStatistics:
    max_fitness:  float
    min_fitness:  float
    mean_fitness: float
    std_fitness:  float     # population standard deviation

    @classmethod
    def from_population(cls, population: Sequence) -> "GenerationStatistics":
        """Summarise the fitness of a finished generation."""
        if not population:
            raise ValueError("cannot compute statistics of an empty population")
        fitness = np.array([ind.fitness() for ind in population], dtype=np.float64)
        return cls(
            max_fitness=float(fitness.max()),
            min_fitness=float(fitness.min()),
            mean_fitness=float(fitness.mean()),
            std_fitness=float(fitness.std()),
        )

    def as_dict(self) -> dict:
        return asdict(self)
