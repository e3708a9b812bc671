"""
Fogwalk — ui/screens.py
Implementations of the UI Screen States: start screen and play screen.
"""
import random
from typing import Optional, Tuple

import tcod
from tcod import libtcodpy

from ui.states import BaseState, Engine
from ui.renderer import Renderer
from engine.loop import SimulationLoop, GameState

VIEW_TILES = 32        # tiles visible across and down
MAP_TOP = 1            # console row where the map starts
SCREEN_WIDTH = VIEW_TILES
SCREEN_HEIGHT = VIEW_TILES + 3

MOVE_KEYS = {
    tcod.event.KeySym.UP: (0, -1),
    tcod.event.KeySym.W: (0, -1),
    tcod.event.KeySym.DOWN: (0, 1),
    tcod.event.KeySym.S: (0, 1),
    tcod.event.KeySym.LEFT: (-1, 0),
    tcod.event.KeySym.A: (-1, 0),
    tcod.event.KeySym.RIGHT: (1, 0),
    tcod.event.KeySym.D: (1, 0),
}


class StartScreenState(BaseState):
    """Title screen: pick a theme, then start a session."""

    def __init__(self, engine: Engine):
        super().__init__(engine)
        self.sim = SimulationLoop(config=engine.config, seed=engine.seed)

    def on_render(self, renderer: Renderer) -> None:
        theme = self.engine.theme
        mid_x = renderer.width // 2
        mid_y = renderer.height // 2
        renderer.root_console.print(mid_x, mid_y - 6, "FOGWALK", fg=theme.accent_color(), alignment=libtcodpy.CENTER)
        renderer.root_console.print(mid_x, mid_y - 2, "Theme:", fg=theme.text_color(), alignment=libtcodpy.CENTER)
        renderer.root_console.print(mid_x, mid_y - 1, f"< {theme.name} >", fg=theme.accent_color(), alignment=libtcodpy.CENTER)
        renderer.root_console.print(mid_x, mid_y + 3, "SPACE to start", fg=theme.text_color(), alignment=libtcodpy.CENTER)
        renderer.root_console.print(mid_x, mid_y + 4, "Q to quit", fg=(150, 150, 150), alignment=libtcodpy.CENTER)

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym == tcod.event.KeySym.LEFT:
            self.engine.cycle_theme(-1)
        elif event.sym == tcod.event.KeySym.RIGHT:
            self.engine.cycle_theme(1)
        elif event.sym in (tcod.event.KeySym.SPACE, tcod.event.KeySym.RETURN):
            self.sim.start_game()
            self.engine.change_state(PlayingState(self.engine, self.sim))
        elif event.sym == tcod.event.KeySym.Q:
            self.engine.running = False


class PlayingState(BaseState):
    """The main gameplay screen."""

    def __init__(self, engine: Engine, sim: SimulationLoop):
        super().__init__(engine)
        self.sim = sim
        self.hover: Optional[Tuple[int, int]] = None
        self._shake_rng = random.Random()

    def on_update(self) -> None:
        self.sim.tick()

    def camera(self) -> Tuple[int, int]:
        """Top-left world tile of the view, clamped so the view never leaves the world."""
        limit = max(0, self.sim.world_size - VIEW_TILES)
        cam_x = min(max(self.sim.player.x - VIEW_TILES // 2, 0), limit)
        cam_y = min(max(self.sim.player.y - VIEW_TILES // 2, 0), limit)
        return cam_x, cam_y

    def on_render(self, renderer: Renderer) -> None:
        """Draws the map with Fog of War, the player and the HUD."""
        if self.sim.state is not GameState.PLAYING:
            return

        theme = self.engine.theme
        frame = self.engine.frame
        cam_x, cam_y = self.camera()

        # Shake nudges the whole view by up to one tile
        off_x = off_y = 0
        if self.sim.shake.active:
            off_x = self._shake_rng.randint(-1, 1)
            off_y = self._shake_rng.randint(-1, 1)

        # 1. Map
        for sy in range(VIEW_TILES):
            wy = cam_y + sy
            for sx in range(VIEW_TILES):
                wx = cam_x + sx
                if self.sim.is_revealed(wx, wy):
                    tile = self.sim.get_tile(wx, wy)
                    glyph = theme.tile_glyph(tile, wx, wy, frame, self.sim.explosion_timer(wx, wy))
                else:
                    glyph = theme.hidden_glyph(wx, wy)
                renderer.put(sx + off_x, MAP_TOP + sy + off_y, glyph)

        # 2. Player
        player = self.sim.player
        renderer.put(
            player.x - cam_x + off_x,
            MAP_TOP + player.y - cam_y + off_y,
            theme.player_glyph(player.is_hurt, frame),
        )

        # 3. HUD
        renderer.root_console.print(0, 0, f"Score: {self.sim.score}", fg=theme.text_color())
        lives = f"Lives: {player.lives}"
        renderer.root_console.print(renderer.width - len(lives), 0, lives, fg=theme.accent_color())

        info = self.hovered_tile_info()
        if info:
            renderer.root_console.print(0, MAP_TOP + VIEW_TILES, info, fg=theme.text_color())
        renderer.root_console.print(0, MAP_TOP + VIEW_TILES + 1, "WASD move R new ESC menu", fg=(150, 150, 150))

    def hovered_tile_info(self) -> Optional[str]:
        """Name and position of the revealed tile under the mouse, if any."""
        if self.hover is None:
            return None
        cam_x, cam_y = self.camera()
        wx = cam_x + self.hover[0]
        wy = cam_y + self.hover[1] - MAP_TOP
        if not self.sim.is_revealed(wx, wy):
            return None
        tile = self.sim.get_tile(wx, wy)
        return f"{tile.key} ({wx},{wy})"

    def ev_mousemotion(self, event: tcod.event.MouseMotion) -> None:
        self.hover = (int(event.position.x), int(event.position.y))

    def ev_keydown(self, event: tcod.event.KeyDown) -> None:
        if event.sym in MOVE_KEYS:
            dx, dy = MOVE_KEYS[event.sym]
            self.sim.try_move(dx, dy)
        elif event.sym == tcod.event.KeySym.R:
            self.sim.restart()
        elif event.sym == tcod.event.KeySym.ESCAPE:
            self.engine.change_state(StartScreenState(self.engine))
