"""
Genetic Algorithm engine for Forage.

One call to GeneticAlgorithm.evolve() turns a scored population into the
next, equally sized, generation:

  for every slot:
    1. select two parents (selection strategy)
    2. cross their chromosomes (crossover strategy)
    3. mutate the child (mutation strategy)
    4. wrap the child chromosome in a fresh, unscored individual
"""

from typing import Protocol, Sequence

import numpy as np

from genome import (Chromosome, Crossover, FitnessProportionateSelection,
                    GaussianMutation, Mutation, Selection, UniformCrossover)


class Individual(Protocol):
    """What the engine needs from a member of the population."""

    @classmethod
    def from_chromosome(cls, chromosome: Chromosome) -> "Individual": ...

    def as_chromosome(self) -> Chromosome: ...

    def fitness(self) -> float: ...


class GeneticAlgorithm:
    """
    Generational GA with pluggable selection, crossover and mutation.
    Parents never survive into the next generation as-is.
    """

    def __init__(self,
                 selection_method: Selection = None,
                 crossover_method: Crossover = None,
                 mutation_method:  Mutation  = None):
        self.selection_method = selection_method or FitnessProportionateSelection()
        self.crossover_method = crossover_method or UniformCrossover()
        self.mutation_method  = mutation_method  or GaussianMutation()

    def evolve(self, rng: np.random.Generator,
               population: Sequence[Individual]) -> list:
        """Breed ``len(population)`` children from ``population``."""
        children = []
        for _ in range(len(population)):
            parent_a, parent_b = self.selection_method.select(rng, population, 2)
            child = self.crossover_method.cross(
                rng, parent_a.as_chromosome(), parent_b.as_chromosome())
            child = self.mutation_method.mutate(rng, child)
            children.append(type(parent_a).from_chromosome(child))
        return children
