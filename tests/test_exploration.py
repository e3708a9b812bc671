"""
Fogwalk — tests/test_exploration.py
Fog-of-war reveal map and bounds-checked grid access.
"""

import pytest
from world.exploration import ExplorationManager
from world.grid import WorldGrid
from world.tiles import Tile

def test_exploration_marking():
    em = ExplorationManager(32)
    assert em.is_explored(10, 10) is False

    em.mark_explored(10, 10)
    assert em.is_explored(10, 10) is True
    assert em.is_explored(11, 10) is False

def test_reveal_around_is_3x3():
    em = ExplorationManager(32)
    em.reveal_around(5, 5)
    assert em.explored_count() == 9
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            assert em.is_explored(5 + dx, 5 + dy)
    assert not em.is_explored(7, 5)

def test_reveal_clipped_at_corner():
    em = ExplorationManager(32)
    em.reveal_around(0, 0)
    assert em.explored_count() == 4
    em.reveal_around(31, 31)
    assert em.explored_count() == 8

def test_reveal_is_monotonic():
    em = ExplorationManager(32)
    em.reveal_around(10, 10)
    before = em.explored.copy()
    for x in range(11, 20):
        em.reveal_around(x, 10)
    assert (em.explored | before == em.explored).all()
    assert em.is_explored(9, 9)

def test_out_of_range_is_quiet():
    em = ExplorationManager(16)
    em.mark_explored(-1, 3)
    em.mark_explored(16, 3)
    assert em.explored_count() == 0
    assert em.is_explored(-1, 3) is False
    assert em.is_explored(100, 100) is False

def test_grid_bounds_checked():
    grid = WorldGrid(8)
    assert grid.get_tile(0, 0) == Tile.FLOOR
    assert grid.get_tile(-1, 0) is None
    assert grid.get_tile(0, 8) is None

    grid.set_tile(8, 8, Tile.WALL)  # ignored
    assert grid.count(Tile.WALL) == 0

    grid.set_tile(3, 2, Tile.WALL)
    assert grid.get_tile(3, 2) == Tile.WALL
    assert grid.tiles[2, 3] == Tile.WALL
    assert list(grid.cells_of(Tile.WALL)) == [(3, 2)]

def test_explosion_timer_only_on_explosions():
    grid = WorldGrid(8)
    grid.set_explosion_timer(1, 1, 50)
    assert grid.explosion_timer(1, 1) is None
    grid.set_tile(1, 1, Tile.EXPLOSION)
    assert grid.explosion_timer(1, 1) == 50
    assert grid.explosion_timer(99, 1) is None
