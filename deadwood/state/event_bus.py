"""
Event bus for Deadwood state changes.

The turn engine publishes a TurnEvent for every change it makes; the REPL,
the simulation runner and tests listen without the engine knowing they
exist.

Usage:
    from .event_bus import get_event_bus, EventType

    def on_wrap(event: TurnEvent):
        print(f"{event.payload['location']} wrapped!")

    get_event_bus().on(EventType.SCENE_WRAPPED, on_wrap)
"""

import logging
from collections import defaultdict, deque
from enum import Enum
from typing import Callable

from .schemas.event import TurnEvent

logger = logging.getLogger(__name__)

HISTORY_SIZE = 100


class EventType(Enum):
    """Everything the engine announces."""

    # Day and game
    DAY_STARTED = "day.started"
    DAY_ENDED = "day.ended"
    SCENE_WRAPPED = "scene.wrapped"
    GAME_OVER = "game.over"

    # Player actions
    PLAYER_MOVED = "player.moved"
    ROLE_TAKEN = "role.taken"
    ROLE_RELEASED = "role.released"
    ACT_RESOLVED = "act.resolved"
    PLAYER_REHEARSED = "player.rehearsed"
    RANK_UPGRADED = "rank.upgraded"
    TURN_ENDED = "turn.ended"


EventHandler = Callable[[TurnEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe.

    Listeners run inside emit(), in the order they subscribed. A listener
    that raises is logged and the rest still run. The last HISTORY_SIZE
    events are kept for late readers such as the REPL's opening banner.
    """

    def __init__(self):
        self._listeners: defaultdict[EventType, list[EventHandler]] = defaultdict(list)
        self._history: deque[TurnEvent] = deque(maxlen=HISTORY_SIZE)

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe a handler. Subscribing twice has no extra effect."""
        handlers = self._listeners[event_type]
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        handlers = self._listeners.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(
        self,
        event_type: EventType,
        player: str | None = None,
        day: int = 1,
        summary: str = "",
        **payload,
    ) -> TurnEvent:
        """
        Record an event and notify its listeners.

        Args:
            event_type: What happened
            player: Acting player, if any
            day: Day the event happened on
            summary: One line for the feed
            **payload: Event-specific data

        Returns:
            The TurnEvent delivered to listeners
        """
        event = TurnEvent(
            event_type=event_type.value,
            player=player,
            day=day,
            summary=summary,
            payload=payload,
        )
        self._history.append(event)

        for handler in tuple(self._listeners.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception("Listener %r failed on %s", handler, event_type.value)
        return event

    def get_history(self, event_type: EventType | None = None) -> list[TurnEvent]:
        """Recent events, oldest first, optionally of one type."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.event_type == event_type.value]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._listeners.get(event_type, ()))

    def clear(self) -> None:
        """Drop every listener. History is kept."""
        self._listeners.clear()


_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """The process-wide bus the engine publishes to by default."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def reset_event_bus() -> None:
    """Replace the process-wide bus on next use. Used between tests."""
    global _event_bus
    _event_bus = None
