"""
Genome encoding and genetic operators for Forage.

A chromosome is a flat vector of float64 genes. For a creature it holds
the brain's parameters in the order produced by
NeuralNetwork.weights_and_biases():

  for each layer, for each neuron:  bias, w_0, w_1, ..., w_{nin-1}

The operators below are interchangeable strategies. Anything with a
matching ``select`` / ``cross`` / ``mutate`` method can be plugged into
the GeneticAlgorithm.
"""

from typing import Iterable, Protocol, Sequence

import numpy as np

from config import MUTATION_RATE, MUTATION_STRENGTH


class ZeroFitnessError(ValueError):
    """Raised when fitness-proportionate selection has nothing to weight."""


# ──────────────────────────────────────────────────────────────────────────────
# Chromosome
# ──────────────────────────────────────────────────────────────────────────────

class Chromosome:
    """Ordered, fixed-length vector of real-valued genes."""

    __slots__ = ("_genes",)

    def __init__(self, genes: Iterable[float]):
        if not isinstance(genes, np.ndarray):
            genes = list(genes)
        self._genes = np.array(genes, dtype=np.float64).reshape(-1)

    @property
    def genes(self) -> np.ndarray:
        """Read-only view of the genes."""
        view = self._genes.view()
        view.flags.writeable = False
        return view

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index: int) -> float:
        return float(self._genes[index])

    def __iter__(self):
        return (float(g) for g in self._genes)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return np.array_equal(self._genes, other._genes)

    def __repr__(self) -> str:
        return f"Chromosome({self._genes.tolist()!r})"


# ──────────────────────────────────────────────────────────────────────────────
# Strategy interfaces
# ──────────────────────────────────────────────────────────────────────────────

class Selection(Protocol):
    def select(self, rng: np.random.Generator, population: Sequence,
               cnt: int) -> list: ...


class Crossover(Protocol):
    def cross(self, rng: np.random.Generator, chromosome_a: Chromosome,
              chromosome_b: Chromosome) -> Chromosome: ...


class Mutation(Protocol):
    def mutate(self, rng: np.random.Generator,
               chromosome: Chromosome) -> Chromosome: ...


# ──────────────────────────────────────────────────────────────────────────────
# Selection
# ──────────────────────────────────────────────────────────────────────────────

class FitnessProportionateSelection:
    """
    Roulette-wheel selection.

    Draws ``cnt`` individuals with replacement, each with probability
    fitness / total_fitness. Draws are independent, so the same individual
    may come back more than once.
    """

    def select(self, rng: np.random.Generator, population: Sequence,
               cnt: int) -> list:
        if not population:
            raise ValueError("cannot select from an empty population")

        weights = np.array([ind.fitness() for ind in population],
                           dtype=np.float64)
        if np.any(weights < 0):
            raise ZeroFitnessError("fitness must be non-negative for "
                                   "fitness-proportionate selection")
        total = weights.sum()
        if not total > 0:
            raise ZeroFitnessError("population has zero total fitness")

        picks = rng.choice(len(population), size=cnt, p=weights / total)
        return [population[int(i)] for i in picks]


# ──────────────────────────────────────────────────────────────────────────────
# Crossover
# ──────────────────────────────────────────────────────────────────────────────

class UniformCrossover:
    """Each gene comes from either parent with probability 0.5."""

    def cross(self, rng: np.random.Generator, chromosome_a: Chromosome,
              chromosome_b: Chromosome) -> Chromosome:
        if len(chromosome_a) != len(chromosome_b):
            raise ValueError(
                f"chromosome lengths differ: {len(chromosome_a)} != "
                f"{len(chromosome_b)}")

        take_a = rng.random(len(chromosome_a)) < 0.5
        return Chromosome(np.where(take_a, chromosome_a.genes,
                                   chromosome_b.genes))


# ──────────────────────────────────────────────────────────────────────────────
# Mutation
# ──────────────────────────────────────────────────────────────────────────────

class GaussianMutation:
    """
    Perturb each gene with probability ``mutation_rate`` by
    ``N(0, 1) * mutation_strength``. Untouched genes are copied bit-for-bit.
    """

    def __init__(self, mutation_rate: float = MUTATION_RATE,
                 mutation_strength: float = MUTATION_STRENGTH):
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError(
                f"mutation_rate must be in [0, 1], got {mutation_rate}")
        if not mutation_strength >= 0.0:
            raise ValueError(
                f"mutation_strength must be >= 0, got {mutation_strength}")
        self.mutation_rate     = mutation_rate
        self.mutation_strength = mutation_strength

    def mutate(self, rng: np.random.Generator,
               chromosome: Chromosome) -> Chromosome:
        # one uniform draw per gene, one normal draw per mutated gene only
        genes = chromosome.genes.copy()
        hit   = rng.random(len(genes)) < self.mutation_rate
        genes[hit] += rng.standard_normal(int(hit.sum())) * self.mutation_strength
        return Chromosome(genes)
