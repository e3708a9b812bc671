"""
Fogwalk — world/generator.py
Procedural Generation: region biomes with noisy borders, stamped structures,
biome-driven tile fill and moving-hazard placement.
==========================================================================
Stack:       Python 3.11+ | NumPy | tcod.noise (via RandomSource)
Status:      One synchronous pass per session.

Pass order (later passes overwrite earlier ones):
  biomes → safe zone → rooms → treasure rooms → paths → tile fill → shrines → hazards
The tile filler only touches cells still holding FLOOR, so walls and coins
stamped before it survive.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from engine.data_loader import GameConfig, get_game_config
from world.grid import WorldGrid
from world.hazards import MovingHazard, place_moving_hazards
from world.noise import RandomSource, SeededSource, randrange
from world.tiles import Biome, Tile, BIOME_CODES, BIOME_BY_CODE

logger = logging.getLogger(__name__)


class BiomeSynthesizer:
    """
    Assigns one biome per coarse region, then lets coherent noise pull
    individual cells into the neighbouring region's biome.
    """
    def __init__(self, config: GameConfig, source: RandomSource):
        self.world_size = config.worldgen.world_size
        self.region_size = config.worldgen.region_size
        self.noise_scale = config.worldgen.noise_scale
        self.noise_threshold = config.worldgen.noise_threshold
        self.table = config.region_table()
        self.source = source

    @property
    def regions_per_axis(self) -> int:
        return math.ceil(self.world_size / self.region_size)

    def pick_biome(self, roll: float) -> Biome:
        for upper, biome in self.table:
            if roll < upper:
                return biome
        return self.table[-1][1] # float drift at roll ~ 1.0

    def assign_regions(self) -> List[List[Biome]]:
        """One uniform draw per region, row-major."""
        n = self.regions_per_axis
        return [[self.pick_biome(self.source.random()) for _ in range(n)] for _ in range(n)]

    def _neighbour_region(self, region: int, offset: int) -> int:
        step = 1 if offset > self.region_size / 2 else -1
        return min(max(region + step, 0), self.regions_per_axis - 1)

    def synthesize(self) -> np.ndarray:
        """Returns a [y, x] array of biome codes (see world.tiles.BIOME_CODES)."""
        regions = self.assign_regions()
        size = self.world_size
        biome_map = np.zeros((size, size), dtype=np.uint8)

        # Every region is assigned before any cell is perturbed.
        for y in range(size):
            ry = y // self.region_size
            for x in range(size):
                rx = x // self.region_size
                n = self.source.noise(x * self.noise_scale, y * self.noise_scale)
                if n > self.noise_threshold:
                    nrx = self._neighbour_region(rx, x % self.region_size)
                    nry = self._neighbour_region(ry, y % self.region_size)
                    biome = regions[nry][nrx]
                else:
                    biome = regions[ry][rx]
                biome_map[y, x] = BIOME_CODES[biome]
        return biome_map


@dataclass
class GeneratedWorld:
    grid: WorldGrid
    biomes: np.ndarray
    hazards: List[MovingHazard] = field(default_factory=list)
    seed: Optional[int] = None

    def biome_at(self, x: int, y: int) -> Optional[Biome]:
        if not self.grid.in_bounds(x, y):
            return None
        return BIOME_BY_CODE[int(self.biomes[y, x])]


class WorldGenerator:
    """
    Builds a complete world. Each create_* stamper is usable on its own
    (tests drive them directly); generate() runs them in the fixed order.
    """
    def __init__(self, source: RandomSource, config: Optional[GameConfig] = None):
        self.config = config or get_game_config()
        self.gen = self.config.worldgen
        self.source = source
        self.size = self.gen.world_size
        self.grid = WorldGrid(self.size)
        self.biomes = np.full((self.size, self.size), BIOME_CODES[Biome.VOID], dtype=np.uint8)
        self._fill_tables: Dict[Biome, List[Tuple[float, Tile]]] = self.config.fill_tables()

    # ------------------------------------------------------------------
    # Stampers
    # ------------------------------------------------------------------

    def create_safe_zone(self, cx: int, cy: int, radius: int) -> None:
        for y in range(cy - radius, cy + radius + 1):
            for x in range(cx - radius, cx + radius + 1):
                if self.grid.in_bounds(x, y) and math.dist((x, y), (cx, cy)) <= radius:
                    self.biomes[y, x] = BIOME_CODES[Biome.SAFE_ZONE]
                    self.grid.set_tile(x, y, Tile.FLOOR)

    def create_room(self, x: int, y: int, w: int, h: int) -> None:
        """Walled rectangle; each border cell has a gap_chance of staying open."""
        gap_chance = self.gen.room_gap_chance
        for j in range(y, min(y + h, self.size)):
            for i in range(x, min(x + w, self.size)):
                if i < 0 or j < 0:
                    continue
                if i == x or i == x + w - 1 or j == y or j == y + h - 1:
                    if self.source.random() >= gap_chance:
                        self.grid.set_tile(i, j, Tile.WALL)
                else:
                    self.grid.set_tile(i, j, Tile.FLOOR)

    def create_treasure_room(self, x: int, y: int, radius: Optional[int] = None) -> None:
        """Disc of coins and floor; cells exactly on the radius become wall."""
        size = self.gen.treasure_room_radius if radius is None else radius
        coin_chance = self.gen.treasure_coin_chance
        for j in range(y - size, y + size + 1):
            for i in range(x - size, x + size + 1):
                if not self.grid.in_bounds(i, j):
                    continue
                d = math.dist((i, j), (x, y))
                if d > size:
                    continue
                if math.floor(d) == size:
                    self.grid.set_tile(i, j, Tile.WALL)
                else:
                    self.grid.set_tile(i, j, Tile.COIN if self.source.random() < coin_chance else Tile.FLOOR)

    def create_path(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Two-wide corridor of FLOOR along the straight line between the endpoints."""
        steps = math.floor(math.dist((x1, y1), (x2, y2)))
        if steps == 0:
            return
        for i in range(steps + 1):
            t = i / steps
            x = math.floor(x1 + (x2 - x1) * t)
            y = math.floor(y1 + (y2 - y1) * t)
            if not self.grid.in_bounds(x, y):
                continue
            self.grid.set_tile(x, y, Tile.FLOOR)
            self.grid.set_tile(x + 1, y, Tile.FLOOR)
            self.grid.set_tile(x, y + 1, Tile.FLOOR)

    def create_shrine(self, x: int, y: int) -> None:
        """3x3 floor pad, shrine in the middle, a coin on each side."""
        if not (1 <= x < self.size - 1 and 1 <= y < self.size - 1):
            return
        for j in range(y - 1, y + 2):
            for i in range(x - 1, x + 2):
                self.grid.set_tile(i, j, Tile.FLOOR)
        self.grid.set_tile(x, y, Tile.SHRINE)
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            self.grid.set_tile(x + dx, y + dy, Tile.COIN)

    # ------------------------------------------------------------------
    # Fill
    # ------------------------------------------------------------------

    def _roll_tile(self, biome: Biome, roll: float) -> Tile:
        for below, tile in self._fill_tables.get(biome, []):
            if roll < below:
                return tile
        return Tile.FLOOR

    def _fill_tiles(self) -> None:
        """Turns every remaining FLOOR placeholder into a biome-appropriate tile."""
        low, high = self.gen.explosion_timer_range
        for y in range(self.size):
            for x in range(self.size):
                if self.grid.tiles[y, x] != Tile.FLOOR:
                    continue
                biome = BIOME_BY_CODE[int(self.biomes[y, x])]
                tile = self._roll_tile(biome, self.source.random())
                self.grid.set_tile(x, y, tile)
                if tile == Tile.EXPLOSION:
                    self.grid.set_explosion_timer(x, y, randrange(self.source, low, high))

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------

    def _random_site(self) -> Tuple[int, int]:
        margin = self.gen.placement_margin
        return (randrange(self.source, margin, self.size - margin),
                randrange(self.source, margin, self.size - margin))

    def generate(self) -> GeneratedWorld:
        """Runs every pass in order and returns the finished world."""
        gen = self.gen
        self.biomes = BiomeSynthesizer(self.config, self.source).synthesize()

        sx, sy = gen.start
        self.create_safe_zone(sx, sy, gen.safe_zone_radius)

        lo, hi = gen.room_size_range
        for _ in range(gen.room_count):
            rx, ry = self._random_site()
            rw = randrange(self.source, lo, hi)
            rh = randrange(self.source, lo, hi)
            self.create_room(rx, ry, rw, rh)
        logger.debug("Stamped %d rooms, %d walls so far", gen.room_count, self.grid.count(Tile.WALL))

        for _ in range(gen.treasure_room_count):
            self.create_treasure_room(*self._random_site())
        logger.debug("Stamped %d treasure rooms, %d coins so far", gen.treasure_room_count, self.grid.count(Tile.COIN))

        for _ in range(gen.path_count):
            x1 = randrange(self.source, 0, self.size)
            y1 = randrange(self.source, 0, self.size)
            x2 = randrange(self.source, 0, self.size)
            y2 = randrange(self.source, 0, self.size)
            self.create_path(x1, y1, x2, y2)

        self._fill_tiles()

        for _ in range(gen.shrine_count):
            self.create_shrine(*self._random_site())
        logger.debug("Stamped shrines: %d intact", self.grid.count(Tile.SHRINE))

        hazards = place_moving_hazards(self.grid, self.source, gen, start=(sx, sy))

        seed = getattr(self.source, "seed", None)
        logger.info(
            "Generated %dx%d world (seed=%s): %d coins, %d explosions, %d moving hazards",
            self.size, self.size, seed,
            self.grid.count(Tile.COIN), self.grid.count(Tile.EXPLOSION), len(hazards),
        )
        return GeneratedWorld(grid=self.grid, biomes=self.biomes, hazards=hazards, seed=seed)


def generate_world(seed: Optional[int] = None, config: Optional[GameConfig] = None) -> GeneratedWorld:
    """Convenience wrapper: seeded source + default config."""
    return WorldGenerator(SeededSource(seed), config).generate()
