"""
Fogwalk — tests/conftest.py
Shared fixtures: a scripted random/noise source and small configs.
"""

import itertools

import pytest

from engine.data_loader import GameConfig, WorldGenConfig


class ScriptedSource:
    """RandomSource that replays fixed values; noise comes from a callable."""

    def __init__(self, randoms=(0.5,), noise=None, cycle=True):
        self._values = itertools.cycle(randoms) if cycle else iter(randoms)
        self._noise = noise or (lambda x, y: 0.0)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._values)

    def noise(self, x: float, y: float) -> float:
        return self._noise(x, y)


@pytest.fixture
def scripted():
    return ScriptedSource


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def small_config():
    """32x32 world, start in the middle, same tables as the canonical game."""
    return GameConfig(worldgen=WorldGenConfig(world_size=32, region_size=8, start=(16, 16)))
