"""
Fogwalk — tests/test_ui_renderer.py
Console renderer, screen transitions and themes.
"""

import pytest
import tcod

from ui.renderer import Renderer
from ui.screens import PlayingState, StartScreenState, SCREEN_WIDTH, SCREEN_HEIGHT
from ui.states import Engine
from ui.themes import THEMES, AsciiTerminalTheme, Glyph, VaporwaveTheme
from world.tiles import Tile


def _key(sym):
    return tcod.event.KeyDown(sym=sym, scancode=0, mod=tcod.event.Modifier.NONE)


@pytest.fixture
def engine():
    renderer = Renderer(width=SCREEN_WIDTH, height=SCREEN_HEIGHT, title="Test Window")
    return Engine(renderer, StartScreenState, seed=42)


def test_renderer_initialization():
    r = Renderer(width=80, height=50, title="Test Window")
    assert r.width == 80
    assert r.height == 50
    assert r.title == "Test Window"
    assert r.root_console.width == 80
    assert r.root_console.height == 50


def test_renderer_clear():
    r = Renderer(width=80, height=50)
    r.root_console.print(0, 0, "@")
    assert chr(r.root_console.ch[0, 0]) == "@"

    r.clear()
    assert chr(r.root_console.ch[0, 0]) == " "


def test_renderer_put_ignores_offscreen():
    r = Renderer(width=10, height=10)
    r.put(3, 4, Glyph("@", (255, 0, 0)))
    r.put(10, 4, Glyph("#", (255, 0, 0)))
    r.put(-1, 0, Glyph("#", (255, 0, 0)))
    assert chr(r.root_console.ch[4, 3]) == "@"
    assert tuple(r.root_console.fg[4, 3]) == (255, 0, 0)


def test_start_screen_cycles_themes(engine):
    assert isinstance(engine.theme, VaporwaveTheme)
    engine.active_state.dispatch(_key(tcod.event.KeySym.RIGHT))
    assert engine.theme_index == 1
    engine.active_state.dispatch(_key(tcod.event.KeySym.LEFT))
    engine.active_state.dispatch(_key(tcod.event.KeySym.LEFT))
    assert engine.theme_index == len(THEMES) - 1
    assert isinstance(engine.theme, AsciiTerminalTheme)


def test_space_starts_game_and_draws_player(engine):
    engine.active_state.dispatch(_key(tcod.event.KeySym.SPACE))
    state = engine.active_state
    assert isinstance(state, PlayingState)

    engine.step()

    # Player at (64, 64) sits in the middle of a 32-tile view
    assert state.camera() == (48, 48)
    assert chr(engine.renderer.root_console.ch[17, 16]) == "@"
    assert state.sim.tick_count == 1


def test_quit_key_stops_engine(engine):
    engine.active_state.dispatch(_key(tcod.event.KeySym.Q))
    assert engine.running is False


def test_move_keys_and_escape(engine):
    engine.active_state.dispatch(_key(tcod.event.KeySym.SPACE))
    state = engine.active_state
    sim = state.sim
    sim.grid.set_tile(64, 63, Tile.FLOOR)

    state.dispatch(_key(tcod.event.KeySym.W))
    assert sim.player.position == (64, 63)

    state.dispatch(_key(tcod.event.KeySym.ESCAPE))
    assert isinstance(engine.active_state, StartScreenState)
    assert engine.active_state.sim is not sim


def test_hover_info_only_for_revealed_tiles(engine):
    engine.active_state.dispatch(_key(tcod.event.KeySym.SPACE))
    state = engine.active_state
    state.sim.grid.set_tile(64, 64, Tile.FLOOR)

    state.hover = (16, 17)
    assert state.hovered_tile_info() == "floor (64,64)"
    state.hover = (0, 1)
    assert state.hovered_tile_info() is None


@pytest.mark.parametrize("theme_cls", THEMES)
def test_every_theme_draws_every_tile(theme_cls):
    theme = theme_cls()
    for tile in Tile:
        for timer in (None, 100, 20, 5):
            glyph = theme.tile_glyph(tile, 3, 4, 17, timer)
            assert isinstance(glyph, Glyph)
            assert len(glyph.ch) == 1
    assert len(theme.player_glyph(False, 0).ch) == 1
    assert len(theme.player_glyph(True, 0).ch) == 1
    assert isinstance(theme.hidden_glyph(0, 0), Glyph)


def test_ascii_explosion_phases_look_different():
    theme = AsciiTerminalTheme()
    safe = theme.tile_glyph(Tile.EXPLOSION, 0, 0, 0, 100)
    warning = theme.tile_glyph(Tile.EXPLOSION, 0, 0, 0, 20)
    boom = theme.tile_glyph(Tile.EXPLOSION, 0, 0, 3, 5)
    assert warning.ch == "!"
    assert len({safe.ch, warning.ch}) == 2
    assert boom != safe
