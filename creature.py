"""
Creature class for Forage.

Each creature has:
  - a position in the unit torus and a heading (radians)
  - a speed and a count of food eaten this generation
  - an Eye (fixed for life)
  - a NeuralNetwork brain (fixed for life)

CreatureIndividual is the genetic algorithm's view of a creature: its
brain flattened to a chromosome, scored by how much it ate. The two
conversions (creature → individual, individual → creature) are the only
place where the simulation and the genetic algorithm meet.
"""

import math

import numpy as np

from config import BRAIN_OUTPUTS, HIDDEN_PER_RECEPTOR, INITIAL_BIAS, MIN_SPEED
from eye import Eye
from genome import Chromosome
from neural_network import NeuralNetwork


def brain_topology(eye: Eye) -> tuple:
    """(nin, nouts) of the brain that goes with ``eye``."""
    return eye.receptors, [HIDDEN_PER_RECEPTOR * eye.receptors, BRAIN_OUTPUTS]


class Creature:
    """
    A single forager.
    """
    __slots__ = ("position", "heading", "speed", "consumed", "eye", "brain")

    def __init__(self, rng: np.random.Generator, eye: Eye, brain: NeuralNetwork):
        self.position = rng.random(2)                     # (x, y) in [0, 1)
        self.heading  = float(rng.uniform(-math.pi, math.pi))
        self.speed    = MIN_SPEED
        self.consumed = 0                                 # food eaten this generation
        self.eye      = eye
        self.brain    = brain

    # ──────────────────────────────────────────────────────────────────────────

    @classmethod
    def random(cls, rng: np.random.Generator, eye: Eye = None) -> "Creature":
        """Creature with a randomly initialised brain."""
        eye = eye or Eye()
        nin, nouts = brain_topology(eye)
        brain = NeuralNetwork.random(rng, nin, nouts, INITIAL_BIAS)
        return cls(rng, eye, brain)

    @classmethod
    def from_chromosome(cls, rng: np.random.Generator, chromosome: Chromosome,
                        eye: Eye = None) -> "Creature":
        """Creature whose brain is decoded from ``chromosome``."""
        eye = eye or Eye()
        nin, nouts = brain_topology(eye)
        brain = NeuralNetwork.from_chromosome(nin, nouts, chromosome)
        return cls(rng, eye, brain)

    def as_chromosome(self) -> Chromosome:
        return Chromosome(self.brain.weights_and_biases())

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    def __repr__(self) -> str:
        return (f"Creature(x={self.x:.3f}, y={self.y:.3f}, "
                f"heading={self.heading:+.3f}, consumed={self.consumed})")


class CreatureIndividual:
    """Chromosome + fitness; what the GeneticAlgorithm breeds."""

    __slots__ = ("chromosome", "_fitness")

    def __init__(self, chromosome: Chromosome, fitness: float = 0.0):
        self.chromosome = chromosome
        self._fitness   = float(fitness)

    @classmethod
    def from_creature(cls, creature: Creature) -> "CreatureIndividual":
        return cls(creature.as_chromosome(), creature.consumed)

    @classmethod
    def from_chromosome(cls, chromosome: Chromosome) -> "CreatureIndividual":
        # bred individuals have not been scored yet
        return cls(chromosome)

    def into_creature(self, rng: np.random.Generator,
                      eye: Eye = None) -> Creature:
        return Creature.from_chromosome(rng, self.chromosome, eye)

    def as_chromosome(self) -> Chromosome:
        return self.chromosome

    def fitness(self) -> float:
        return self._fitness
