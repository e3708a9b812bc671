"""
Fogwalk — world/grid.py
World Grid: fixed-size tile array with a parallel explosion timer array.
========================================================================
Stack:       Python 3.11+ | NumPy

Storage is numpy, indexed [y, x]. Every public method takes (x, y) and is
bounds-checked: reads outside the grid return None, writes are ignored.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

import numpy as np

from world.tiles import Tile


class WorldGrid:
    def __init__(self, size: int, fill: Tile = Tile.FLOOR):
        self.size = size
        self.tiles = np.full((size, size), int(fill), dtype=np.uint8)
        self.explosion_timers = np.zeros((size, size), dtype=np.int16)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        if not self.in_bounds(x, y):
            return None
        return Tile(int(self.tiles[y, x]))

    def set_tile(self, x: int, y: int, tile: Tile) -> None:
        if self.in_bounds(x, y):
            self.tiles[y, x] = int(tile)

    def explosion_timer(self, x: int, y: int) -> Optional[int]:
        """Current countdown, or None when the cell is off-grid or not an explosion."""
        if not self.in_bounds(x, y) or self.tiles[y, x] != Tile.EXPLOSION:
            return None
        return int(self.explosion_timers[y, x])

    def set_explosion_timer(self, x: int, y: int, value: int) -> None:
        if self.in_bounds(x, y):
            self.explosion_timers[y, x] = value

    def count(self, tile: Tile) -> int:
        return int(np.count_nonzero(self.tiles == tile))

    def cells_of(self, tile: Tile) -> Iterator[Tuple[int, int]]:
        """Yields (x, y) for every cell holding `tile`, row by row."""
        ys, xs = np.nonzero(self.tiles == tile)
        for y, x in zip(ys.tolist(), xs.tolist()):
            yield x, y
