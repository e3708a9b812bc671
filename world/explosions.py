"""
Fogwalk — world/explosions.py
Explosion Timer Engine: per-tile countdowns driving endless detonation cycles.

Phases by timer value (defaults):
  timer > 30          SAFE        charging, harmless
  10 < timer <= 30    WARNING     about to blow, harmless
  timer <= 10         DETONATING  damages a player standing on it
A timer that reaches 0 is reset to 120 within the same tick, so it is never
observed at 0 or below.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

import numpy as np

from engine.data_loader import SimulationConfig
from world.grid import WorldGrid
from world.tiles import Tile


class ExplosionPhase(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DETONATING = "detonating"


def explosion_phase(timer: int, config: SimulationConfig) -> ExplosionPhase:
    if timer <= config.explosion_detonation:
        return ExplosionPhase.DETONATING
    if timer <= config.explosion_warning:
        return ExplosionPhase.WARNING
    return ExplosionPhase.SAFE


def is_detonating(timer: int, config: SimulationConfig) -> bool:
    return timer <= config.explosion_detonation


def update_explosions(grid: WorldGrid, config: SimulationConfig) -> List[Tuple[int, int]]:
    """
    Advances every explosion timer by one tick.
    Returns the (x, y) cells that crossed into detonation on this tick.
    """
    mask = grid.tiles == Tile.EXPLOSION
    if not mask.any():
        return []

    timers = grid.explosion_timers
    timers[mask] -= 1

    started = mask & (timers == config.explosion_detonation)
    timers[mask & (timers <= 0)] = config.explosion_reset

    ys, xs = np.nonzero(started)
    return list(zip(xs.tolist(), ys.tolist()))
