"""
Fogwalk — world/hazards.py
Moving Hazards: back-and-forth patrols that save and restore the tile under them.
================================================================================
Stack:       Python 3.11+ | NumPy (via WorldGrid)

Invariants
----------
- Exactly one grid cell per hazard holds Tile.MOVING_HAZARD.
- `under_tile` is what that cell would hold if the hazard were absent.
- A step is restore → advance → capture → overwrite, in that order, so a hazard
  never destroys a tile it passes over.
- A hazard whose next cell is occupied by another hazard holds its position for
  that step, since capturing another hazard as an under-tile would break both
  invariants above. Hazards blocking each other in a ring (head-on pairs)
  rotate through each other's cells together instead.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from engine.data_loader import WorldGenConfig
from world.grid import WorldGrid
from world.noise import RandomSource, randrange
from world.tiles import Tile

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


@dataclass
class MovingHazard:
    x: int
    y: int
    path: List[Point]
    path_progress: int = 0
    move_timer: int = 0
    move_speed: int = 30
    under_tile: Tile = Tile.FLOOR
    steps_taken: int = field(default=0, repr=False)

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def next_cell(self) -> Point:
        return self.path[(self.path_progress + 1) % len(self.path)]

    def ready(self) -> bool:
        """Advances the move timer by one tick. True when a step is due."""
        self.move_timer += 1
        if self.move_timer < self.move_speed:
            return False
        self.move_timer = 0
        return True

    def blocked(self, grid: WorldGrid) -> bool:
        nx, ny = self.next_cell()
        return (nx, ny) != self.position and grid.get_tile(nx, ny) == Tile.MOVING_HAZARD

    def step(self, grid: WorldGrid) -> None:
        grid.set_tile(self.x, self.y, self.under_tile)

        self.path_progress = (self.path_progress + 1) % len(self.path)
        self.x, self.y = self.path[self.path_progress]

        self.under_tile = grid.get_tile(self.x, self.y)
        grid.set_tile(self.x, self.y, Tile.MOVING_HAZARD)
        self.steps_taken += 1

    def update(self, grid: WorldGrid) -> bool:
        """
        Single-hazard tick. Returns True if the hazard stepped.
        Waits while another hazard holds the next cell; update_moving_hazards
        additionally resolves hazards that block each other in a ring.
        """
        if not self.ready():
            return False
        if self.blocked(grid):
            return False
        self.step(grid)
        return True


def _blocking_ring(hazard: MovingHazard, hazards: List[MovingHazard]) -> Optional[List[MovingHazard]]:
    """
    Follows the chain of hazards each waiting on the next one's cell.
    Returns the chain when it closes back on `hazard`, else None.
    """
    by_cell = {h.position: h for h in hazards}
    ring = [hazard]
    seen = {id(hazard)}
    current = hazard
    while True:
        blocker = by_cell.get(current.next_cell())
        if blocker is None or blocker is current:
            return None
        if blocker is hazard:
            return ring
        if id(blocker) in seen:
            return None
        ring.append(blocker)
        seen.add(id(blocker))
        current = blocker


def _rotate_ring(ring: List[MovingHazard]) -> None:
    """
    Moves every hazard of a ring into the next one's cell at once. All ring
    cells hold MOVING_HAZARD before and after, so the grid is untouched and
    each hazard inherits the under-tile of the cell it enters.
    """
    unders = [h.under_tile for h in ring]
    for i, h in enumerate(ring):
        h.path_progress = (h.path_progress + 1) % len(h.path)
        h.x, h.y = h.path[h.path_progress]
        h.under_tile = unders[(i + 1) % len(ring)]
        h.steps_taken += 1
    for h in ring[1:]:
        h.move_timer = 0


def update_moving_hazards(grid: WorldGrid, hazards: List[MovingHazard]) -> int:
    """
    Ticks every hazard in placement order. Returns how many stepped.

    A hazard blocked by another waits, unless the blockers form a ring back to
    it (two hazards meeting head-on, or four around a 2x2 square). A ring
    rotates as a whole so the hazards pass through each other.
    """
    moved = 0
    for hazard in hazards:
        if not hazard.ready():
            continue
        if not hazard.blocked(grid):
            hazard.step(grid)
            moved += 1
            continue
        ring = _blocking_ring(hazard, hazards)
        if ring is not None:
            _rotate_ring(ring)
            moved += len(ring)
    return moved


def build_patrol_path(grid: WorldGrid, x: int, y: int, horizontal: bool, length: int) -> List[Point]:
    """
    Walks forward from (x, y) along one axis for up to `length` cells, stopping
    at the first cell that is off-grid or not FLOOR, then appends the interior
    cells in reverse so the route loops back without repeating its endpoints.
    """
    forward: List[Point] = []
    for i in range(length):
        px, py = (x + i, y) if horizontal else (x, y + i)
        if grid.get_tile(px, py) != Tile.FLOOR:
            break
        forward.append((px, py))
    return forward + forward[-2:0:-1]


def place_moving_hazards(
    grid: WorldGrid,
    source: RandomSource,
    config: WorldGenConfig,
    start: Optional[Point] = None,
) -> List[MovingHazard]:
    """
    Places up to `hazard_count` hazards within `hazard_attempts` candidate draws.
    Returning fewer than requested (even none) is a normal outcome.
    """
    sx, sy = start if start is not None else config.start
    size = grid.size
    margin = config.hazard_margin
    min_len, max_len = config.hazard_path_length_range

    hazards: List[MovingHazard] = []
    attempts = 0
    while len(hazards) < config.hazard_count and attempts < config.hazard_attempts:
        attempts += 1
        mx = randrange(source, margin, size - margin)
        my = randrange(source, margin, size - margin)

        if math.dist((mx, my), (sx, sy)) <= config.hazard_min_distance:
            continue
        if grid.get_tile(mx, my) != Tile.FLOOR:
            continue

        horizontal = source.random() > 0.5
        length = randrange(source, min_len, max_len)
        path = build_patrol_path(grid, mx, my, horizontal, length)
        if len(path) <= 2:
            logger.debug("Rejected hazard at (%d, %d): path length %d", mx, my, len(path))
            continue

        x0, y0 = path[0]
        hazard = MovingHazard(
            x=x0,
            y=y0,
            path=path,
            move_timer=randrange(source, 0, config.hazard_move_speed),
            move_speed=config.hazard_move_speed,
            under_tile=grid.get_tile(x0, y0),
        )
        grid.set_tile(x0, y0, Tile.MOVING_HAZARD)
        hazards.append(hazard)

    if len(hazards) < config.hazard_count:
        logger.warning(
            "Placed %d/%d moving hazards after %d attempts",
            len(hazards), config.hazard_count, attempts,
        )
    return hazards
