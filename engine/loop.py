"""
Fogwalk — engine/loop.py
Main Simulation Loop: session state, movement, hazard checks and ticking.
========================================================================
Stack:       Python 3.11+ | bespoke EventBus

One SimulationLoop instance owns one game session: the world grid, reveal
map, moving hazards, player and score. Front-ends read through the query
methods and drive it with start_game(), try_move() and tick().

Tick order
----------
  1. hurt / shake counters decay
  2. explosion timers advance (detonation starts are published)
  3. moving hazards advance
  4. every `hazard_check_interval` ticks: hazard check on the player's tile
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from engine.data_loader import GameConfig, get_game_config
from engine.events import (
    EventBus,
    EVT_WORLD_GENERATED,
    EVT_GAME_STARTED,
    EVT_GAME_RESTARTED,
    EVT_PLAYER_MOVED,
    EVT_COIN_COLLECTED,
    EVT_PLAYER_DAMAGED,
    EVT_PLAYER_RESPAWNED,
    EVT_EXPLOSION_DETONATED,
)
from world.exploration import ExplorationManager
from world.explosions import is_detonating, update_explosions
from world.generator import WorldGenerator
from world.grid import WorldGrid
from world.hazards import MovingHazard, update_moving_hazards
from world.noise import RandomSource, SeededSource
from world.tiles import Tile, DAMAGING_TILES

logger = logging.getLogger(__name__)


class GameState(str, Enum):
    START = "start"
    PLAYING = "playing"


@dataclass
class Player:
    x: int
    y: int
    lives: int
    hurt_timer: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_hurt(self) -> bool:
        return self.hurt_timer > 0


@dataclass
class ShakeEffect:
    """Camera shake request for the renderer; the core only counts it down."""
    duration: int = 0
    magnitude: int = 0

    @property
    def active(self) -> bool:
        return self.duration > 0


class SimulationLoop:
    """
    Core executor for one Fogwalk session.

    An injected `source` drives the first generation pass only; restarts
    always build a SeededSource from the new seed.
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        bus: Optional[EventBus] = None,
        source: Optional[RandomSource] = None,
    ):
        self.config = config or get_game_config()
        self.bus = bus or EventBus()
        self.seed = seed if seed is not None else random.randint(1, 100000)
        self._source = source

        size = self.config.worldgen.world_size
        sx, sy = self.config.worldgen.start
        self.start_position: Tuple[int, int] = (sx, sy)

        self.state = GameState.START
        self.grid = WorldGrid(size)
        self.exploration = ExplorationManager(size)
        self.hazards: List[MovingHazard] = []
        self.player = Player(x=sx, y=sy, lives=self.config.simulation.initial_lives)
        self.score = 0
        self.shake = ShakeEffect()
        self.tick_count = 0

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_game(self) -> bool:
        """START → PLAYING: generate the world once and reveal the start area."""
        if self.state is GameState.PLAYING:
            return False
        self._new_session()
        self.state = GameState.PLAYING
        self.bus.publish(EVT_GAME_STARTED, "SimulationLoop", {"seed": self.seed})
        logger.info("Game started (seed=%d)", self.seed)
        return True

    def restart(self, seed: Optional[int] = None) -> None:
        """Throws the current session away and generates a fresh world."""
        self.seed = seed if seed is not None else self.seed + 1
        self._source = None
        self._new_session()
        self.state = GameState.PLAYING
        self.bus.publish(EVT_GAME_RESTARTED, "SimulationLoop", {"seed": self.seed})
        logger.info("Game restarted (seed=%d)", self.seed)

    def _new_session(self) -> None:
        source = self._source or SeededSource(self.seed)
        world = WorldGenerator(source, self.config).generate()

        sx, sy = self.start_position
        self.grid = world.grid
        self.hazards = world.hazards
        self.exploration = ExplorationManager(self.grid.size)
        self.player = Player(x=sx, y=sy, lives=self.config.simulation.initial_lives)
        self.score = 0
        self.shake = ShakeEffect()
        self.tick_count = 0

        self.exploration.reveal_around(sx, sy)
        self.bus.publish(EVT_WORLD_GENERATED, "WorldGenerator", {
            "seed": self.seed,
            "size": self.grid.size,
            "hazards": len(self.hazards),
        })

    # ------------------------------------------------------------------
    # Queries (read-only surface for renderers)
    # ------------------------------------------------------------------

    @property
    def world_size(self) -> int:
        return self.grid.size

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        return self.grid.get_tile(x, y)

    def is_revealed(self, x: int, y: int) -> bool:
        return self.exploration.is_explored(x, y)

    def explosion_timer(self, x: int, y: int) -> Optional[int]:
        return self.grid.explosion_timer(x, y)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def try_move(self, dx: int, dy: int) -> bool:
        """
        Moves the player by (dx, dy) unless the target is off-grid or a wall.
        A rejected move changes nothing. Returns whether the move happened.
        """
        if self.state is not GameState.PLAYING:
            return False

        nx, ny = self.player.x + dx, self.player.y + dy
        tile = self.grid.get_tile(nx, ny)
        if tile is None or tile == Tile.WALL:
            return False

        self.player.x, self.player.y = nx, ny
        self.exploration.reveal_around(nx, ny)
        self.bus.publish(EVT_PLAYER_MOVED, "Player", {"x": nx, "y": ny})

        self._collect_coin(nx, ny)
        self.check_hazards()
        return True

    def tick(self) -> None:
        """Advance the simulation by one frame."""
        if self.state is not GameState.PLAYING:
            return
        self.tick_count += 1

        if self.player.hurt_timer > 0:
            self.player.hurt_timer -= 1
        if self.shake.duration > 0:
            self.shake.duration -= 1

        detonated = update_explosions(self.grid, self.config.simulation)
        if detonated:
            self.bus.publish(EVT_EXPLOSION_DETONATED, "ExplosionEngine", {
                "cells": detonated,
                "revealed": [c for c in detonated if self.exploration.is_explored(*c)],
            })

        update_moving_hazards(self.grid, self.hazards)

        if self.tick_count % self.config.simulation.hazard_check_interval == 0:
            self.check_hazards()

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _collect_coin(self, x: int, y: int) -> None:
        if self.grid.get_tile(x, y) == Tile.COIN:
            self.grid.set_tile(x, y, Tile.FLOOR)
            self.score += 1
            self.bus.publish(EVT_COIN_COLLECTED, "Player", {"x": x, "y": y, "score": self.score})

    def is_dangerous(self, x: int, y: int) -> bool:
        tile = self.grid.get_tile(x, y)
        if tile in DAMAGING_TILES:
            return True
        if tile == Tile.EXPLOSION:
            return is_detonating(self.grid.explosion_timer(x, y), self.config.simulation)
        return False

    def check_hazards(self) -> bool:
        """Damages the player if their current tile is dangerous. Returns True on damage."""
        if self.is_dangerous(self.player.x, self.player.y):
            self.damage_player()
            return True
        return False

    def damage_player(self) -> None:
        sim = self.config.simulation
        tile = self.grid.get_tile(self.player.x, self.player.y)

        self.player.lives -= 1
        self.player.hurt_timer = sim.hurt_ticks
        self.shake = ShakeEffect(duration=sim.shake_duration, magnitude=sim.shake_magnitude)
        self.bus.publish(EVT_PLAYER_DAMAGED, "Player", {
            "x": self.player.x,
            "y": self.player.y,
            "tile": tile.key if tile is not None else None,
            "lives": self.player.lives,
        })

        if self.player.lives <= 0:
            final_score = self.score
            sx, sy = self.start_position
            self.score = 0
            self.player = Player(x=sx, y=sy, lives=sim.initial_lives, hurt_timer=sim.respawn_hurt_ticks)
            self.bus.publish(EVT_PLAYER_RESPAWNED, "Player", {"x": sx, "y": sy, "final_score": final_score})
            logger.info("Player died with score %d; respawned at (%d, %d)", final_score, sx, sy)
