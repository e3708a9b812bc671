"""
Fogwalk — ui/renderer.py
TCOD Renderer: root console and presentation.
===============================================
Stack:       Python 3.11+ | tcod
"""

from __future__ import annotations
from typing import Optional
import tcod

from ui.themes import Glyph


class Renderer:
    """
    Manages the tcod root console and rendering loop.
    """
    def __init__(self, width: int, height: int, title: str = "Fogwalk"):
        self.width = width
        self.height = height
        self.title = title
        self.root_console = tcod.console.Console(width, height)
        self.context: Optional[tcod.context.Context] = None

    def clear(self) -> None:
        """Clear the console with black."""
        self.root_console.clear()

    def put(self, x: int, y: int, glyph: Glyph) -> None:
        """Draws one glyph; positions outside the console are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.root_console.print(x, y, glyph.ch, fg=glyph.fg, bg=glyph.bg)

    def present(self, context: tcod.context.Context) -> None:
        """Present the current console to the screen."""
        context.present(self.root_console)
