from collections import Counter

import numpy as np
import pytest

from genome import (Chromosome, FitnessProportionateSelection, GaussianMutation,
                    UniformCrossover, ZeroFitnessError)


class ScoredIndividual:
    def __init__(self, fitness):
        self._fitness = fitness

    def fitness(self):
        return self._fitness


# ──────────────────────────────────────────────────────────────────────────────
# Chromosome
# ──────────────────────────────────────────────────────────────────────────────

def test_chromosome_access():
    chromosome = Chromosome([3.0, 1.0, 2.0])
    assert len(chromosome) == 3
    assert chromosome[0] == 3.0
    assert chromosome[2] == 2.0
    assert list(chromosome) == [3.0, 1.0, 2.0]
    assert chromosome == Chromosome(np.array([3.0, 1.0, 2.0]))
    assert chromosome != Chromosome([3.0, 1.0])


def test_chromosome_genes_are_read_only():
    chromosome = Chromosome([1.0, 2.0])
    with pytest.raises(ValueError):
        chromosome.genes[0] = 5.0
    assert chromosome[0] == 1.0


def test_chromosome_copies_its_input():
    genes = np.array([1.0, 2.0])
    chromosome = Chromosome(genes)
    genes[0] = 9.0
    assert chromosome[0] == 1.0


# ──────────────────────────────────────────────────────────────────────────────
# Selection
# ──────────────────────────────────────────────────────────────────────────────

def _population():
    return [ScoredIndividual(f) for f in (1.0, 2.0, 4.0, 0.0)]


def test_selection_is_proportional_to_fitness():
    rng = np.random.default_rng(0)
    selected = FitnessProportionateSelection().select(rng, _population(), 4000)

    freq = Counter(ind.fitness() for ind in selected)
    assert len(selected) == 4000
    assert freq[0.0] == 0
    assert 1.5 < freq[2.0] / freq[1.0] < 2.6
    assert 3.0 < freq[4.0] / freq[1.0] < 5.3


def test_selection_single_draws_follow_same_distribution():
    rng = np.random.default_rng(1)
    selector = FitnessProportionateSelection()
    population = _population()

    freq = Counter(selector.select(rng, population, 1)[0].fitness()
                   for _ in range(3000))
    assert freq[0.0] == 0
    assert 3.0 < freq[4.0] / freq[1.0] < 5.5


def test_selection_returns_members_of_population():
    rng = np.random.default_rng(2)
    population = _population()
    for ind in FitnessProportionateSelection().select(rng, population, 20):
        assert any(ind is member for member in population)


def test_selection_of_empty_population_fails():
    with pytest.raises(ValueError):
        FitnessProportionateSelection().select(np.random.default_rng(0), [], 2)


def test_selection_with_zero_total_fitness_fails():
    population = [ScoredIndividual(0.0) for _ in range(3)]
    with pytest.raises(ZeroFitnessError):
        FitnessProportionateSelection().select(np.random.default_rng(0), population, 2)


def test_selection_with_negative_fitness_fails():
    population = [ScoredIndividual(3.0), ScoredIndividual(-1.0)]
    with pytest.raises(ZeroFitnessError):
        FitnessProportionateSelection().select(np.random.default_rng(0), population, 2)


# ──────────────────────────────────────────────────────────────────────────────
# Crossover
# ──────────────────────────────────────────────────────────────────────────────

def test_uniform_crossover_is_symmetric():
    rng = np.random.default_rng(0)
    crosser = UniformCrossover()
    ones = Chromosome([1.0] * 50)
    minus_ones = Chromosome([-1.0] * 50)

    sums = []
    for _ in range(2000):
        child = crosser.cross(rng, ones, minus_ones)
        assert len(child) == 50
        assert set(child) <= {1.0, -1.0}
        sums.append(sum(child))

    assert abs(np.mean(sums)) < 1.0
    # both parents actually contribute
    assert min(sums) < 0 < max(sums)


def test_uniform_crossover_of_identical_parents_is_identity():
    rng = np.random.default_rng(0)
    parent = Chromosome([0.5, -2.0, 7.25])
    assert UniformCrossover().cross(rng, parent, parent) == parent


def test_uniform_crossover_rejects_different_lengths():
    with pytest.raises(ValueError):
        UniformCrossover().cross(np.random.default_rng(0),
                                 Chromosome([1.0] * 2), Chromosome([-1.0] * 3))


# ──────────────────────────────────────────────────────────────────────────────
# Mutation
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("rate, strength", [
    (0.0, 0.0),
    (0.0, 3.0),
    (0.5, 0.0),
    (1.0, 0.0),
])
def test_mutation_without_rate_or_strength_is_identity(rate, strength):
    rng = np.random.default_rng(0)
    chromosome = Chromosome(rng.normal(size=25))
    mutated = GaussianMutation(rate, strength).mutate(rng, chromosome)
    assert mutated == chromosome


def test_mutation_at_full_rate_changes_every_gene():
    rng = np.random.default_rng(0)
    chromosome = Chromosome([0.0] * 100)
    mutated = GaussianMutation(1.0, 3.0).mutate(rng, chromosome)
    assert all(g != 0.0 for g in mutated)
    assert 1.5 < np.std(list(mutated)) < 4.5


def test_mutation_at_half_rate_changes_about_half():
    rng = np.random.default_rng(0)
    chromosome = Chromosome([0.0] * 200)
    mutated = GaussianMutation(0.5, 3.0).mutate(rng, chromosome)
    changed = sum(1 for g in mutated if g != 0.0)
    assert 60 < changed < 140


@pytest.mark.parametrize("rate, normals", [(0.0, 0), (1.0, 10)])
def test_mutation_draws_a_normal_only_for_mutated_genes(rate, normals):
    rng = np.random.default_rng(11)
    GaussianMutation(rate, 1.0).mutate(rng, Chromosome([0.0] * 10))

    expected = np.random.default_rng(11)
    expected.random(10)
    expected.standard_normal(normals)
    assert rng.random() == expected.random()


def test_mutation_does_not_modify_input():
    rng = np.random.default_rng(0)
    chromosome = Chromosome([1.0, 2.0, 3.0])
    GaussianMutation(1.0, 1.0).mutate(rng, chromosome)
    assert list(chromosome) == [1.0, 2.0, 3.0]


@pytest.mark.parametrize("rate", [-0.1, 1.5])
def test_mutation_rate_must_be_a_probability(rate):
    with pytest.raises(ValueError):
        GaussianMutation(rate, 1.0)


def test_mutation_strength_must_not_be_negative():
    with pytest.raises(ValueError):
        GaussianMutation(0.5, -1.0)
