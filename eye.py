"""
Eye – the only sense a Forage creature has.

The field of view is a cone of ``fov_angle`` radians centred on the
creature's heading, reaching ``fov_range`` world units. It is split into
``receptors`` equal angular bins, numbered from the left edge of the cone.
Each receptor reports the distance to the nearest food in its bin,
normalised by ``fov_range`` (0..1), or NOTHING_SEEN (2.0) if the bin is
empty.
"""

import math
from dataclasses import dataclass

import numpy as np

from config import FOV_ANGLE, FOV_RANGE, NOTHING_SEEN, RECEPTORS


def wrap_angle(angle):
    """Wrap an angle (or array of angles) into (-pi, pi]."""
    return math.pi - np.mod(math.pi - angle, 2 * math.pi)


@dataclass(frozen=True)
class Eye:
    """Immutable sensor configuration; call process_vision() to look."""

    fov_range: float = FOV_RANGE
    fov_angle: float = FOV_ANGLE
    receptors: int   = RECEPTORS

    def __post_init__(self):
        if not self.fov_range > 0:
            raise ValueError(f"fov_range must be positive, got {self.fov_range}")
        if not self.fov_angle > 0:
            raise ValueError(f"fov_angle must be positive, got {self.fov_angle}")
        if self.receptors < 1:
            raise ValueError(f"need at least one receptor, got {self.receptors}")

    # ──────────────────────────────────────────────────────────────────────────

    def process_vision(self, position, heading: float, food_positions) -> np.ndarray:
        """
        Args:
            position:       (x, y) of the viewer
            heading:        viewer's heading in radians
            food_positions: array-like of shape (n, 2)

        Returns:
            float64 array of shape (receptors,), values in [0, 1] or 2.0
        """
        vision = np.full(self.receptors, NOTHING_SEEN, dtype=np.float64)

        food = np.asarray(food_positions, dtype=np.float64).reshape(-1, 2)
        if len(food) == 0:
            return vision

        displacement = food - np.asarray(position, dtype=np.float64)
        dist = np.hypot(displacement[:, 0], displacement[:, 1])
        angle = np.arctan2(displacement[:, 1], displacement[:, 0])
        # 0 = left edge of the cone, fov_angle = right edge
        angle = wrap_angle(angle - heading) + self.fov_angle / 2

        seen = (dist <= self.fov_range) & (angle >= 0) & (angle <= self.fov_angle)
        if not seen.any():
            return vision

        angle_per_receptor = self.fov_angle / self.receptors
        idx = (angle[seen] / angle_per_receptor).astype(np.int64)
        idx = np.minimum(idx, self.receptors - 1)
        # nearest food wins when several share a receptor
        np.minimum.at(vision, idx, dist[seen] / self.fov_range)
        return vision
