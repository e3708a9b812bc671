"""
Fogwalk — ui/states.py
State Machine defining the UI screens and the fixed-rate frame loop.
"""

from __future__ import annotations
import time
from typing import Optional, Any
import tcod

from engine.data_loader import GameConfig
from ui.renderer import Renderer
from ui.themes import THEMES, Theme

FRAMES_PER_SECOND = 60


class BaseState(tcod.event.EventDispatch[Any]):
    """
    Protocol for a screen state.
    Intercepts tcod events and renders to the console.
    """
    def __init__(self, engine: "Engine"):
        super().__init__()
        self.engine = engine

    def on_update(self) -> None:
        """Called once per frame before rendering."""
        pass

    def on_render(self, renderer: Renderer) -> None:
        """Called every frame to draw to the console."""
        pass


class Engine:
    """
    Central loop controller handling TCOD context, Renderer, theme choice and State tracking.
    """
    def __init__(
        self,
        renderer: Renderer,
        initial_state_cls: type[BaseState],
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
    ):
        self.renderer = renderer
        self.config = config
        self.seed = seed
        self.theme_index = 0
        self.theme: Theme = THEMES[0](config.simulation if config else None)
        self.running = True
        self.frame = 0
        self.active_state: BaseState = initial_state_cls(self)

    def change_state(self, new_state: BaseState) -> None:
        """Transitions to a new Active State."""
        self.active_state = new_state

    def cycle_theme(self, step: int) -> Theme:
        self.theme_index = (self.theme_index + step) % len(THEMES)
        self.theme = THEMES[self.theme_index](self.config.simulation if self.config else None)
        return self.theme

    def step(self) -> None:
        """One frame of simulation + drawing, without presenting."""
        self.frame += 1
        self.active_state.on_update()
        self.renderer.clear()
        self.active_state.on_render(self.renderer)

    def run(self) -> None:
        """Main event loop, paced to FRAMES_PER_SECOND."""
        frame_time = 1.0 / FRAMES_PER_SECOND

        with tcod.context.new_terminal(
            self.renderer.width,
            self.renderer.height,
            title=self.renderer.title,
            vsync=True,
        ) as context:
            self.renderer.context = context

            while self.running:
                started = time.perf_counter()

                # 1. Update + render
                self.step()
                self.renderer.present(context)

                # 2. Handle inputs
                for event in tcod.event.get():
                    event = context.convert_event(event)

                    if isinstance(event, tcod.event.Quit):
                        self.running = False
                        break

                    # Route to active state handler
                    self.active_state.dispatch(event)

                remaining = frame_time - (time.perf_counter() - started)
                if remaining > 0:
                    time.sleep(remaining)
