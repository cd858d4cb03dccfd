import numpy as np
import pytest

from genetic_algorithm import GeneticAlgorithm
from genome import (Chromosome, FitnessProportionateSelection, GaussianMutation,
                    UniformCrossover, ZeroFitnessError)


class SumIndividual:
    """Fitness is the sum of the genes."""

    def __init__(self, chromosome):
        self.chromosome = chromosome

    @classmethod
    def from_chromosome(cls, chromosome):
        return cls(chromosome)

    def as_chromosome(self):
        return self.chromosome

    def fitness(self):
        return float(sum(self.chromosome))


class FixedIndividual:
    """Carries an explicit fitness; bred children start at zero."""

    def __init__(self, chromosome, fitness=0.0):
        self.chromosome = chromosome
        self._fitness = fitness

    @classmethod
    def from_chromosome(cls, chromosome):
        return cls(chromosome)

    def as_chromosome(self):
        return self.chromosome

    def fitness(self):
        return self._fitness


def _evolver(rate=0.5, strength=1.0):
    return GeneticAlgorithm(
        FitnessProportionateSelection(),
        UniformCrossover(),
        GaussianMutation(rate, strength),
    )


def _mean_fitness(population):
    return float(np.mean([ind.fitness() for ind in population]))


def test_evolve_improves_population():
    rng = np.random.default_rng(0)
    evolver = _evolver()
    population = [
        SumIndividual(Chromosome([0.0, 0.0, 0.0])),
        SumIndividual(Chromosome([3.0, 3.0, 3.0])),
        SumIndividual(Chromosome([1.0, 2.0, 3.0])),
    ]
    initial = _mean_fitness(population)

    means = []
    for _ in range(50):
        population = evolver.evolve(rng, population)
        assert len(population) == 3
        means.append(_mean_fitness(population))

    assert means[-1] > initial
    assert np.mean(means[-10:]) > np.mean(means[:10])


def test_evolve_preserves_size_and_resets_fitness():
    rng = np.random.default_rng(3)
    population = [FixedIndividual(Chromosome(rng.normal(size=6)), fitness=f)
                  for f in (1.0, 5.0, 2.0, 8.0, 3.0)]

    children = _evolver().evolve(rng, population)

    assert len(children) == len(population)
    assert all(isinstance(child, FixedIndividual) for child in children)
    assert all(child.fitness() == 0.0 for child in children)
    assert all(len(child.as_chromosome()) == 6 for child in children)


def test_evolve_without_mutation_only_recombines_parent_genes():
    rng = np.random.default_rng(5)
    population = [
        FixedIndividual(Chromosome([1.0, 1.0, 1.0, 1.0]), fitness=1.0),
        FixedIndividual(Chromosome([2.0, 2.0, 2.0, 2.0]), fitness=1.0),
    ]
    children = _evolver(rate=0.0, strength=0.0).evolve(rng, population)
    for child in children:
        assert set(child.as_chromosome()) <= {1.0, 2.0}


def test_evolve_only_breeds_from_fit_parents():
    rng = np.random.default_rng(11)
    population = [
        FixedIndividual(Chromosome([7.0, 7.0]), fitness=1.0),
        FixedIndividual(Chromosome([-3.0, -3.0]), fitness=0.0),
    ]
    children = _evolver(rate=0.0, strength=0.0).evolve(rng, population)
    assert all(list(child.as_chromosome()) == [7.0, 7.0] for child in children)


def test_evolve_fails_when_nobody_is_fit():
    rng = np.random.default_rng(0)
    population = [FixedIndividual(Chromosome([1.0]), fitness=0.0) for _ in range(4)]
    with pytest.raises(ZeroFitnessError):
        _evolver().evolve(rng, population)


def test_default_strategies():
    evolver = GeneticAlgorithm()
    assert isinstance(evolver.selection_method, FitnessProportionateSelection)
    assert isinstance(evolver.crossover_method, UniformCrossover)
    assert isinstance(evolver.mutation_method, GaussianMutation)
