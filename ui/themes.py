"""
Fogwalk — ui/themes.py
Themes: interchangeable glyph/colour sets for the terminal renderer.
===================================================================
Stack:       Python 3.11+ | tcod (CP437 glyphs)

A Theme turns simulation state into (char, fg, bg) glyphs. The simulation
never imports this module; themes only read what SimulationLoop exposes.
Glyphs stay inside CP437 so the default tcod tilesets can draw them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional, Tuple

from engine.data_loader import SimulationConfig
from world.explosions import ExplosionPhase, explosion_phase
from world.tiles import Tile

Color = Tuple[int, int, int]


class Glyph(NamedTuple):
    ch: str
    fg: Color
    bg: Color = (0, 0, 0)


def dim(color: Color, factor: float) -> Color:
    return tuple(int(c * factor) for c in color)  # type: ignore[return-value]


class Theme(ABC):
    """Base class every visual style implements."""
    name: str = ""
    colors: Dict[str, Color] = {}

    def __init__(self, sim_config: Optional[SimulationConfig] = None):
        self.sim_config = sim_config or SimulationConfig()

    @property
    def background(self) -> Color:
        return self.colors.get("background", (0, 0, 0))

    def phase(self, timer: Optional[int]) -> ExplosionPhase:
        if timer is None:
            return ExplosionPhase.SAFE
        return explosion_phase(timer, self.sim_config)

    @abstractmethod
    def tile_glyph(self, tile: Tile, x: int, y: int, frame: int, timer: Optional[int] = None) -> Glyph:
        """Glyph for a revealed tile at world (x, y)."""

    @abstractmethod
    def player_glyph(self, hurt: bool, frame: int) -> Glyph:
        ...

    def hidden_glyph(self, x: int, y: int) -> Glyph:
        """Glyph for a tile still under fog of war."""
        return Glyph(" ", self.colors["purple"], self.colors["deepPurple"])

    def text_color(self) -> Color:
        return self.colors.get("text", (255, 255, 255))

    def accent_color(self) -> Color:
        return self.colors["pink"]


class VaporwaveTheme(Theme):
    name = "Vaporwave"
    colors = {
        "pink": (255, 71, 184),
        "purple": (138, 43, 226),
        "cyan": (0, 255, 255),
        "blue": (75, 0, 130),
        "deepPurple": (30, 10, 50),
        "neonPink": (255, 20, 147),
        "background": (20, 6, 40),
        "text": (0, 255, 255),
    }

    def tile_glyph(self, tile, x, y, frame, timer=None):
        bg = self.background
        c = self.colors
        if tile == Tile.FLOOR:
            return Glyph("·", dim(c["cyan"], 0.6), bg)
        if tile == Tile.GRASS:
            return Glyph('"', (0, 255, 150), bg)
        if tile == Tile.LAVA:
            glow = 0.7 + 0.3 * (((frame // 6) + x) % 2)
            return Glyph("≈", dim(c["neonPink"], glow), bg)
        if tile == Tile.COIN:
            return Glyph("o" if (frame // 10 + x) % 2 else "O", (255, 215, 0), bg)
        if tile == Tile.WALL:
            return Glyph("#", c["purple"], dim(c["purple"], 0.3))
        if tile == Tile.SHRINE:
            return Glyph("☼", (255, 255, 255), dim(c["cyan"], 0.3))
        if tile == Tile.EXPLOSION:
            phase = self.phase(timer)
            if phase is ExplosionPhase.DETONATING:
                return Glyph("*", (255, 200, 0), (255, 100, 0))
            if phase is ExplosionPhase.WARNING:
                return Glyph("*", (255, 150, 0), bg)
            return Glyph("+", (255, 200, 0), bg)
        if tile == Tile.MOVING_HAZARD:
            return Glyph("•" if frame % 24 < 12 else "○", (255, 50, 0), bg)
        return Glyph("?", c["pink"], bg)

    def player_glyph(self, hurt, frame):
        if hurt:
            return Glyph("@", self.colors["neonPink"], self.background)
        return Glyph("@", (255, 255, 0), self.background)


class PixelArtTheme(Theme):
    name = "Pixel Art Retro"
    colors = {
        "sky": (92, 148, 252),
        "ground": (188, 148, 92),
        "grass": (0, 168, 0),
        "lava": (248, 56, 0),
        "coin": (252, 188, 0),
        "wall": (80, 80, 80),
        "player": (252, 216, 168),
        "playerOutline": (228, 92, 16),
        "shrine": (160, 120, 252),
        "deepPurple": (40, 40, 60),
        "purple": (100, 80, 140),
        "cyan": (0, 255, 255),
        "pink": (255, 100, 180),
        "background": (92, 148, 252),
        "text": (255, 255, 255),
    }

    def tile_glyph(self, tile, x, y, frame, timer=None):
        c = self.colors
        ground = c["ground"]
        if tile == Tile.FLOOR:
            return Glyph(" ", ground, ground)
        if tile == Tile.GRASS:
            return Glyph("♣", (0, 100, 0), c["grass"])
        if tile == Tile.LAVA:
            return Glyph("~", (252, 188, 0), c["lava"])
        if tile == Tile.COIN:
            return Glyph("$", c["coin"], ground)
        if tile == Tile.WALL:
            return Glyph("▓", (120, 120, 120), c["wall"])
        if tile == Tile.SHRINE:
            return Glyph("♦", (255, 255, 255), c["shrine"])
        if tile == Tile.EXPLOSION:
            phase = self.phase(timer)
            if phase is ExplosionPhase.DETONATING:
                return Glyph("☼", (255, 255, 0), c["lava"])
            if phase is ExplosionPhase.WARNING:
                return Glyph("!", (255, 0, 0) if (timer // 5) % 2 else c["coin"], ground)
            return Glyph("ò", (0, 0, 0), ground)
        if tile == Tile.MOVING_HAZARD:
            return Glyph("☻", c["lava"], ground)
        return Glyph("?", c["pink"], ground)

    def player_glyph(self, hurt, frame):
        if hurt:
            return Glyph("☺", (255, 0, 0), self.colors["ground"])
        return Glyph("☺", self.colors["playerOutline"], self.colors["player"])


class AsciiTerminalTheme(Theme):
    name = "ASCII Terminal"
    colors = {
        "terminal": (0, 255, 0),
        "terminalDim": (0, 180, 0),
        "background": (0, 0, 0),
        "amber": (255, 191, 0),
        "red": (255, 0, 0),
        "white": (255, 255, 255),
        "gray": (128, 128, 128),
        "deepPurple": (0, 50, 0),
        "purple": (0, 120, 0),
        "cyan": (0, 255, 255),
        "pink": (0, 255, 0),
        "text": (0, 255, 0),
    }

    _LAVA = ("≈", "~", "=")
    _COIN = ("○", "◘", "•", "◘")
    _BOOM = ("*", "☼", "#")

    def tile_glyph(self, tile, x, y, frame, timer=None):
        c = self.colors
        bg = c["background"]
        if tile == Tile.FLOOR:
            return Glyph("·" if (x + y) % 3 == 0 else " ", c["terminalDim"], bg)
        if tile == Tile.GRASS:
            return Glyph("≈", c["terminal"], bg)
        if tile == Tile.LAVA:
            return Glyph(self._LAVA[(frame // 10) % 3], c["red"], bg)
        if tile == Tile.COIN:
            return Glyph(self._COIN[(frame // 8) % 4], c["amber"], bg)
        if tile == Tile.WALL:
            return Glyph("█", c["terminal"], bg)
        if tile == Tile.SHRINE:
            return Glyph("☼", c["cyan"], bg)
        if tile == Tile.EXPLOSION:
            phase = self.phase(timer)
            if phase is ExplosionPhase.DETONATING:
                return Glyph(self._BOOM[(frame // 3) % 3], c["amber"], bg)
            if phase is ExplosionPhase.WARNING:
                return Glyph("!", c["red"] if (timer // 5) % 2 else c["amber"], bg)
            return Glyph("*", c["amber"], bg)
        if tile == Tile.MOVING_HAZARD:
            return Glyph("◙" if (frame // 10) % 2 == 0 else "•", c["red"], bg)
        return Glyph("?", c["white"], bg)

    def player_glyph(self, hurt, frame):
        if hurt:
            return Glyph("☻", self.colors["red"], self.background)
        return Glyph("☺", self.colors["terminal"], self.background)


THEMES: List[type[Theme]] = [VaporwaveTheme, PixelArtTheme, AsciiTerminalTheme]
