"""
World for Forage.

The world is the unit square with wrap-around edges (a torus): leaving
through the right edge brings a creature back in on the left. It holds
the creatures and the food. Food is never destroyed; eaten food is just
moved somewhere else.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import NUM_CREATURES, NUM_FOOD
from creature import Creature
from eye import Eye


def wrap_position(position: np.ndarray) -> np.ndarray:
    """Wrap every coordinate into [0, 1)."""
    wrapped = np.mod(position, 1.0)
    # np.mod(-1e-20, 1.0) rounds up to 1.0
    wrapped[wrapped >= 1.0] = 0.0
    return wrapped


class Food:
    __slots__ = ("position",)

    def __init__(self, position):
        self.position = np.array(position, dtype=np.float64)

    @classmethod
    def random(cls, rng: np.random.Generator) -> "Food":
        return cls(rng.random(2))

    def randomize_position(self, rng: np.random.Generator):
        self.position = rng.random(2)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])


@dataclass(frozen=True)
class WorldSnapshot:
    """Read-only copy of the world for renderers."""
    creatures: Tuple[Tuple[float, float, float], ...]   # (x, y, heading)
    food:      Tuple[Tuple[float, float], ...]          # (x, y)

    def as_dict(self) -> dict:
        return {
            "creatures": [{"x": x, "y": y, "heading": h}
                          for (x, y, h) in self.creatures],
            "food":      [{"x": x, "y": y} for (x, y) in self.food],
        }


class World:
    """
    Owns all creatures and food.
    """

    def __init__(self, creatures: list, food: list):
        self.creatures = list(creatures)
        self.food      = list(food)

    @classmethod
    def random(cls, rng: np.random.Generator,
               num_creatures: int = NUM_CREATURES,
               num_food:      int = NUM_FOOD,
               eye:           Eye = None) -> "World":
        eye = eye or Eye()
        creatures = [Creature.random(rng, eye) for _ in range(num_creatures)]
        food      = [Food.random(rng) for _ in range(num_food)]
        return cls(creatures, food)

    # ──────────────────────────────────────────────────────────────────────────

    def food_positions(self) -> np.ndarray:
        """(n, 2) array of food positions."""
        if not self.food:
            return np.empty((0, 2))
        return np.array([f.position for f in self.food])

    def relocate_food(self, rng: np.random.Generator):
        for food in self.food:
            food.randomize_position(rng)

    # ──────────────────────────────────────────────────────────────────────────
    # Snapshot for visualisation
    # ──────────────────────────────────────────────────────────────────────────

    def snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            creatures=tuple((c.x, c.y, c.heading) for c in self.creatures),
            food=tuple((f.x, f.y) for f in self.food),
        )
