"""
Fogwalk — tests/test_simulation_loop.py
Movement, pickups, hazard checks and the damage/respawn cycle.
"""

import random

import pytest

from engine.events import (
    EventBus,
    EVT_WORLD_GENERATED,
    EVT_GAME_STARTED,
    EVT_GAME_RESTARTED,
    EVT_PLAYER_MOVED,
    EVT_COIN_COLLECTED,
    EVT_PLAYER_DAMAGED,
    EVT_PLAYER_RESPAWNED,
)
from engine.loop import GameState, SimulationLoop
from world.tiles import Tile

START = (64, 64)


def _clear_start(sim: SimulationLoop, radius: int = 2) -> None:
    sx, sy = START
    for y in range(sy - radius, sy + radius + 1):
        for x in range(sx - radius, sx + radius + 1):
            sim.grid.set_tile(x, y, Tile.FLOOR)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def sim(bus):
    s = SimulationLoop(seed=42, bus=bus)
    s.start_game()
    _clear_start(s)
    return s


def _record(bus, key):
    events = []
    bus.subscribe(key, events.append)
    return events


def test_new_loop_waits_on_start_screen():
    s = SimulationLoop(seed=1)
    assert s.state is GameState.START
    s.tick()
    assert s.tick_count == 0
    assert s.try_move(1, 0) is False


def test_start_generates_once(bus):
    generated = _record(bus, EVT_WORLD_GENERATED)
    started = _record(bus, EVT_GAME_STARTED)
    s = SimulationLoop(seed=5, bus=bus)

    assert s.start_game() is True
    assert s.start_game() is False
    assert len(generated) == 1
    assert len(started) == 1
    assert s.state is GameState.PLAYING
    assert s.player.position == START
    assert s.player.lives == 3
    assert s.score == 0


def test_start_reveals_3x3(sim):
    assert sim.exploration.explored_count() == 9
    assert sim.is_revealed(63, 63)
    assert sim.is_revealed(65, 65)
    assert not sim.is_revealed(66, 64)


def test_coin_pickup(sim, bus):
    coins = _record(bus, EVT_COIN_COLLECTED)
    sim.grid.set_tile(65, 64, Tile.COIN)

    assert sim.try_move(1, 0) is True
    assert sim.player.position == (65, 64)
    assert sim.score == 1
    assert sim.get_tile(65, 64) == Tile.FLOOR
    assert sim.is_revealed(66, 65)
    assert coins[0].data == {"x": 65, "y": 64, "score": 1}


def test_coin_collected_exactly_once(sim):
    sim.grid.set_tile(65, 64, Tile.COIN)
    sim.try_move(1, 0)
    sim.try_move(-1, 0)
    sim.try_move(1, 0)
    assert sim.score == 1


def test_wall_blocks_without_side_effects(sim, bus):
    moved = _record(bus, EVT_PLAYER_MOVED)
    sim.grid.set_tile(65, 64, Tile.WALL)

    assert sim.try_move(1, 0) is False
    assert sim.player.position == START
    assert sim.score == 0
    assert not sim.is_revealed(66, 64)
    assert moved == []


def test_world_edge_blocks(sim):
    sim.player.x, sim.player.y = 0, 0
    assert sim.try_move(-1, 0) is False
    assert sim.try_move(0, -1) is False
    assert sim.player.position == (0, 0)


def test_non_wall_tiles_are_walkable(sim):
    for tile in (Tile.GRASS, Tile.SHRINE):
        sim.grid.set_tile(65, 64, tile)
        assert sim.try_move(1, 0) is True
        assert sim.try_move(-1, 0) is True
    assert sim.player.lives == 3


def test_stepping_on_lava_hurts(sim, bus):
    damaged = _record(bus, EVT_PLAYER_DAMAGED)
    sim.grid.set_tile(65, 64, Tile.LAVA)

    sim.try_move(1, 0)

    assert sim.player.lives == 2
    assert sim.player.hurt_timer == 15
    assert sim.shake.active
    assert (sim.shake.duration, sim.shake.magnitude) == (10, 5)
    assert damaged[0].data["tile"] == "lava"


def test_last_life_respawns_at_start(sim, bus):
    respawned = _record(bus, EVT_PLAYER_RESPAWNED)
    sim.player.lives = 1
    sim.score = 7
    sim.grid.set_tile(65, 64, Tile.LAVA)

    sim.try_move(1, 0)

    assert sim.player.position == START
    assert sim.player.lives == 3
    assert sim.player.hurt_timer == 30
    assert sim.score == 0
    assert respawned[0].data["final_score"] == 7


def test_standing_on_lava_hurts_on_periodic_check(sim):
    sim.grid.set_tile(*START, Tile.LAVA)
    for _ in range(4):
        sim.tick()
    assert sim.player.lives == 3

    sim.tick()
    assert sim.player.lives == 2
    assert sim.player.hurt_timer == 15


def test_hurt_timer_decays_per_tick(sim):
    sim.grid.set_tile(65, 64, Tile.LAVA)
    sim.try_move(1, 0)
    sim.try_move(-1, 0)
    sim.tick()
    sim.tick()
    assert sim.player.hurt_timer == 13
    assert sim.shake.duration == 8


def test_detonating_explosion_hurts(sim):
    sim.grid.set_tile(*START, Tile.EXPLOSION)
    sim.grid.set_explosion_timer(*START, 12)
    for _ in range(5):
        sim.tick()
    assert sim.explosion_timer(*START) == 7
    assert sim.player.lives == 2


def test_charging_explosion_is_harmless(sim):
    sim.grid.set_tile(*START, Tile.EXPLOSION)
    sim.grid.set_explosion_timer(*START, 50)
    for _ in range(5):
        sim.tick()
    assert sim.explosion_timer(*START) == 45
    assert sim.player.lives == 3


def test_stepping_onto_detonating_explosion_hurts(sim):
    sim.grid.set_tile(65, 64, Tile.EXPLOSION)
    sim.grid.set_explosion_timer(65, 64, 4)
    sim.try_move(1, 0)
    assert sim.player.lives == 2


def test_restart_builds_fresh_session(sim, bus):
    restarted = _record(bus, EVT_GAME_RESTARTED)
    sim.score = 4
    sim.player.lives = 2
    old_grid = sim.grid

    sim.restart()

    assert sim.seed == 43
    assert sim.grid is not old_grid
    assert sim.score == 0
    assert sim.player.lives == 3
    assert sim.player.position == START
    assert sim.state is GameState.PLAYING
    assert restarted[0].data == {"seed": 43}


def test_queries_are_bounds_checked(sim):
    assert sim.world_size == 128
    assert sim.get_tile(-1, 0) is None
    assert sim.is_revealed(500, 500) is False
    assert sim.explosion_timer(*START) is None


def test_hazard_invariant_holds_while_ticking(sim):
    for _ in range(400):
        sim.tick()
        assert sim.grid.count(Tile.MOVING_HAZARD) == len(sim.hazards)
        for h in sim.hazards:
            assert sim.get_tile(h.x, h.y) == Tile.MOVING_HAZARD
            assert h.under_tile != Tile.MOVING_HAZARD


def test_random_walk_never_leaves_walkable_cells(sim):
    rng = random.Random(7)
    directions = [(1, 0), (-1, 0), (0, 1), (0, -1)]

    for _ in range(3000):
        before = sim.player.position
        dx, dy = rng.choice(directions)
        moved = sim.try_move(dx, dy)

        x, y = sim.player.position
        assert sim.get_tile(x, y) not in (None, Tile.WALL)
        assert sim.is_revealed(x, y)
        if not moved:
            assert sim.player.position == before
        if rng.random() < 0.1:
            sim.tick()
