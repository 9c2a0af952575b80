import math

import numpy as np

from .base import Formation


def ring_capacity(ring: int) -> int:
    """Agents that fit on ring `ring` when neighbours sit one spacing apart."""
    if ring == 0:
        return 1
    return int(math.floor(2 * math.pi * ring))


class CircleFormation(Formation):
    """
    Concentric rings around the origin. Ring 0 is the single centre slot,
    ring r has radius r*spacing and floor(2*pi*r) evenly spaced slots.
    Rings fill in order; the outermost one may be partial.
    """

    def positions(self, count: int) -> np.ndarray:
        out = np.empty((count, 3))
        out[:, 1] = self.height
        placed = 0
        ring = 0
        while placed < count:
            slots = ring_capacity(ring)
            take = min(slots, count - placed)
            radius = ring * self.spacing
            angles = np.arange(take) / slots * 2 * math.pi
            out[placed:placed + take, 0] = np.cos(angles) * radius
            out[placed:placed + take, 2] = np.sin(angles) * radius
            placed += take
            ring += 1
        return out


class SphereFormation(Formation):
    """Fibonacci-style spiral over a sphere of radius 3*spacing."""

    def positions(self, count: int) -> np.ndarray:
        r = self.spacing * 3
        idx = np.arange(count)
        phi = np.arccos(-1 + 2 * idx / count)
        theta = math.sqrt(count * math.pi) * phi
        return np.stack(
            [
                r * np.cos(theta) * np.sin(phi),
                r * np.sin(theta) * np.sin(phi),
                r * np.cos(phi),
            ],
            axis=1,
        )


class SpiralFormation(Formation):
    def __init__(self, angle_step: float = 0.3, radius: float = 12.0, vertical_step: float = 1.2):
        self.angle_step = angle_step
        self.radius = radius
        self.vertical_step = vertical_step

    def positions(self, count: int) -> np.ndarray:
        idx = np.arange(count)
        angle = idx * self.angle_step
        return np.stack(
            [
                np.cos(angle) * self.radius,
                idx * self.vertical_step + self.height,
                np.sin(angle) * self.radius,
            ],
            axis=1,
        )
