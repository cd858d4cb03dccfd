"""
Simulation Engine for Forage.

Every step():
  1. Count the step; at the end of a generation, evolve() first
  2. Creatures touching food eat it (food jumps to a random spot)
  3. Each creature looks, thinks, and adjusts its speed and heading
  4. Each creature moves forward, wrapping around the world edges

evolve():
  1. Score every creature by the food it ate
  2. Breed a new population with the genetic algorithm
  3. Replace all creatures, scatter all food
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from config import (
    NUM_CREATURES, NUM_FOOD, GENERATION_STEPS,
    MIN_SPEED, MAX_SPEED, MAX_ACCEL, MAX_ANGULAR_ACCEL, EAT_RADIUS,
    MUTATION_RATE, MUTATION_STRENGTH,
)
from creature import CreatureIndividual
from eye import Eye, wrap_angle
from generation_stats import GenerationStatistics
from genetic_algorithm import GeneticAlgorithm
from genome import FitnessProportionateSelection, GaussianMutation, UniformCrossover
from world import World, WorldSnapshot, wrap_position


@dataclass(frozen=True)
class SimulationSnapshot:
    """Everything a renderer may look at after a step."""
    generation:       int
    generation_steps: int
    world:            WorldSnapshot
    statistics:       Optional[GenerationStatistics]   # None before gen 1 ends

    def as_dict(self) -> dict:
        return {
            "generation":      self.generation,
            "generationSteps": self.generation_steps,
            **self.world.as_dict(),
            "statistics": (self.statistics.as_dict()
                           if self.statistics is not None else None),
        }


class Simulation:
    """
    Main simulation controller.
    """

    def __init__(
        self,
        world:             World,
        genetic_algorithm: GeneticAlgorithm = None,
        generation_length: int   = GENERATION_STEPS,
        eye:               Eye   = None,
    ):
        if generation_length < 1:
            raise ValueError(
                f"generation_length must be >= 1, got {generation_length}")
        self.world             = world
        self.genetic_algorithm = genetic_algorithm or GeneticAlgorithm(
            FitnessProportionateSelection(),
            UniformCrossover(),
            GaussianMutation(MUTATION_RATE, MUTATION_STRENGTH),
        )
        if eye is None:
            # offspring must decode with the eye their parents were built for
            eye = world.creatures[0].eye if world.creatures else Eye()
        self.generation_length = generation_length
        self.eye               = eye

        self._generation       = 0
        self._generation_steps = 0
        self._prev_statistics  = None

    @classmethod
    def random(
        cls,
        rng:               np.random.Generator,
        num_creatures:     int   = NUM_CREATURES,
        num_food:          int   = NUM_FOOD,
        generation_length: int   = GENERATION_STEPS,
        mutation_rate:     float = MUTATION_RATE,
        mutation_strength: float = MUTATION_STRENGTH,
        eye:               Eye   = None,
    ) -> "Simulation":
        eye = eye or Eye()
        genetic_algorithm = GeneticAlgorithm(
            FitnessProportionateSelection(),
            UniformCrossover(),
            GaussianMutation(mutation_rate, mutation_strength),
        )
        world = World.random(rng, num_creatures, num_food, eye)
        return cls(world, genetic_algorithm, generation_length, eye)

    # ──────────────────────────────────────────────────────────────────────────
    # Read-only state
    # ──────────────────────────────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def generation_steps(self) -> int:
        return self._generation_steps

    @property
    def prev_generation_statistics(self) -> Optional[GenerationStatistics]:
        return self._prev_statistics

    def snapshot(self) -> SimulationSnapshot:
        return SimulationSnapshot(
            generation=self._generation,
            generation_steps=self._generation_steps,
            world=self.world.snapshot(),
            statistics=self._prev_statistics,
        )

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    def step(self, rng: np.random.Generator) -> Optional[GenerationStatistics]:
        """
        Advance the world by one tick.

        Returns the finished generation's statistics if this step crossed a
        generation boundary, otherwise None.
        """
        finished = None
        steps = self._generation_steps + 1
        if steps >= self.generation_length:
            finished = self.evolve(rng)     # resets generation_steps to 0
        else:
            self._generation_steps = steps

        self._eat_food(rng)
        self._process_brains()
        self._move_creatures()
        return finished

    def train(self, rng: np.random.Generator) -> GenerationStatistics:
        """Step until the current generation ends; return its statistics."""
        while True:
            finished = self.step(rng)
            if finished is not None:
                return finished

    def evolve(self, rng: np.random.Generator) -> GenerationStatistics:
        """
        Replace the population with a bred one and scatter the food.

        The new generation is built completely before anything is replaced,
        so a failure (e.g. nobody ate) leaves the simulation untouched.
        """
        population = [CreatureIndividual.from_creature(c)
                      for c in self.world.creatures]
        statistics = GenerationStatistics.from_population(population)

        offspring = self.genetic_algorithm.evolve(rng, population)
        creatures = [ind.into_creature(rng, self.eye) for ind in offspring]

        self.world.creatures   = creatures
        self.world.relocate_food(rng)
        self._generation      += 1
        self._generation_steps = 0
        self._prev_statistics  = statistics
        return statistics

    # ──────────────────────────────────────────────────────────────────────────
    # One step, phase by phase
    # ──────────────────────────────────────────────────────────────────────────

    def _eat_food(self, rng: np.random.Generator):
        if not self.world.food:
            return
        food_positions = self.world.food_positions()
        for creature in self.world.creatures:
            dist = np.hypot(*(food_positions - creature.position).T)
            for i in np.flatnonzero(dist < EAT_RADIUS):
                creature.consumed += 1
                food = self.world.food[i]
                food.randomize_position(rng)
                food_positions[i] = food.position

    def _process_brains(self):
        food_positions = self.world.food_positions()
        for creature in self.world.creatures:
            vision = creature.eye.process_vision(
                creature.position, creature.heading, food_positions)
            output = creature.brain.forward(vision)

            speed_accel   = float(np.clip(output[0], -MAX_ACCEL, MAX_ACCEL))
            angular_accel = float(np.clip(output[1], -MAX_ANGULAR_ACCEL,
                                          MAX_ANGULAR_ACCEL))
            creature.speed   = float(np.clip(creature.speed + speed_accel,
                                             MIN_SPEED, MAX_SPEED))
            creature.heading = float(wrap_angle(creature.heading + angular_accel))

    def _move_creatures(self):
        for creature in self.world.creatures:
            direction = np.array([np.cos(creature.heading),
                                  np.sin(creature.heading)])
            creature.position = wrap_position(
                creature.position + direction * creature.speed)
