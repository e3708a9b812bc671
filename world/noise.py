"""
Fogwalk — world/noise.py
Random/Noise Source: uniform draws and 2D coherent noise for world generation.
==============================================================================
Stack:       Python 3.11+ | tcod.noise (Simplex)

Every generation routine draws through a RandomSource, never through the
module-level `random` functions, so a seed fully determines a world.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Protocol

import tcod.noise

# Largest float strictly below 1.0; keeps noise() inside [0, 1).
_BELOW_ONE = math.nextafter(1.0, 0.0)


class RandomSource(Protocol):
    """What the generator consumes from its environment."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def noise(self, x: float, y: float) -> float:
        """Coherent noise in [0, 1), deterministic for the same inputs."""
        ...


def uniform(source: RandomSource, low: float, high: float) -> float:
    """Uniform float in [low, high) drawn from a single random() call."""
    return low + (high - low) * source.random()


def randrange(source: RandomSource, low: int, high: int) -> int:
    """floor(uniform(low, high)); mirrors how every stamper picks coordinates."""
    return int(math.floor(uniform(source, low, high)))


class SeededSource:
    """
    Default RandomSource: `random.Random` for uniforms and tcod Simplex noise
    remapped from [-1, 1] to [0, 1).
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = random.randint(1, 100000)
        self.seed = seed
        self.rng = random.Random(seed)
        self._noise = tcod.noise.Noise(
            dimensions=2,
            algorithm=tcod.noise.Algorithm.SIMPLEX,
            seed=seed,
        )

    def random(self) -> float:
        return self.rng.random()

    def noise(self, x: float, y: float) -> float:
        value = (self._noise.get_point(x, y) + 1.0) / 2.0
        return min(max(value, 0.0), _BELOW_ONE)
