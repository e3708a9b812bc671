"""
Fogwalk — engine/events.py
Event Bus: typed pub-sub between the simulation core and its consumers.
=======================================================================
Stack:       Python 3.11+ | Pydantic v2 | bespoke pub-sub

Architecture notes
------------------
- Events are Pydantic v2 models. data dict stays flat + JSON-serializable.
- The core emits; renderers, audio and tests subscribe. The core never
  subscribes to its own events.
- Wildcard key "*" receives every emitted event.
- Per-handler errors are logged and swallowed so emission always continues.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ============================================================
# CANONICAL EVENT KEYS
# Never use raw strings. Add new keys here only.
# ============================================================

EVT_WORLD_GENERATED        = "world.generated"
EVT_GAME_STARTED           = "game.started"
EVT_GAME_RESTARTED         = "game.restarted"
EVT_PLAYER_MOVED           = "player.moved"
EVT_COIN_COLLECTED         = "player.coin_collected"
EVT_PLAYER_DAMAGED         = "player.damaged"
EVT_PLAYER_RESPAWNED       = "player.respawned"
EVT_EXPLOSION_DETONATED    = "hazard.explosion_detonated"


class GameEvent(BaseModel):
    """Envelope for everything the simulation reports."""
    event_key: str
    source: str
    data: Dict[str, Any] = Field(default_factory=dict)


HandlerFn = Callable[[GameEvent], None]


class EventBus:
    """
    Bespoke pub-sub. Pass instance at construction; there is no global singleton.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[HandlerFn]] = {}

    def subscribe(self, event_key: str, handler: HandlerFn) -> None:
        self._subscribers.setdefault(event_key, []).append(handler)

    def unsubscribe(self, event_key: str, handler: HandlerFn) -> None:
        if event_key in self._subscribers:
            self._subscribers[event_key] = [
                h for h in self._subscribers[event_key] if h is not handler
            ]

    def emit(self, event: GameEvent) -> None:
        targets = (
            self._subscribers.get(event.event_key, [])
            + self._subscribers.get("*", [])
        )
        for handler in targets:
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Handler error on '%s'", event.event_key)

    def publish(self, event_key: str, source: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Shorthand for emit(GameEvent(...))."""
        self.emit(GameEvent(event_key=event_key, source=source, data=data or {}))
