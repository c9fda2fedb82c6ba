"""EventBus - observer interface for attitude, person and interaction changes

Callers register handlers instead of polling; services publish after a
transaction commits, never before.

Rules:
- events carry identifiers and small scalar payloads only
- propagation depth is capped at MAX_DEPTH
- a failing handler never breaks the publishing service
"""

import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from companion_bonds.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # max nested emits triggered from handlers

# Subscribing to this receives every event type
ANY_EVENT = "*"


@dataclass
class EngineEvent:
    """Event data container

    Args:
        event_type: event name (see EventTypes)
        data: identifiers and scalar values, no ORM objects
        source: publishing service name
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    # internal bookkeeping, not set by publishers
    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[EngineEvent], None]


class EventBus:
    """Synchronous event bus

    Usage:
        bus = EventBus()
        bus.subscribe(EventTypes.ATTITUDE_CHANGED, ui.refresh_attitudes)
        bus.emit(EngineEvent(event_type="attitude_changed", data={...}, source="attitude_service"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._local = threading.local()

    @property
    def _current_depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @_current_depth.setter
    def _current_depth(self, value: int) -> None:
        self._local.depth = value

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register a handler for one event type (or ANY_EVENT)"""
        self._handlers[event_type].append(handler)
        logger.debug(f"EventBus subscribe: {event_type} → {handler.__qualname__}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are only logged"""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(
                    f"EventBus unsubscribe: {event_type} → {handler.__qualname__}"
                )
            except ValueError:
                logger.warning(
                    f"Handler not registered: {event_type} → {handler.__qualname__}"
                )

    def emit(self, event: EngineEvent) -> None:
        """Publish an event and call its handlers synchronously.

        Events emitted deeper than MAX_DEPTH are dropped with a warning.
        """
        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                f"EventBus depth exceeded ({MAX_DEPTH}): "
                f"{event.source}:{event.event_type} dropped"
            )
            return

        event._depth = self._current_depth

        handlers = list(self._handlers.get(event.event_type, []))
        handlers.extend(self._handlers.get(ANY_EVENT, []))
        if not handlers:
            logger.debug(f"EventBus: no subscribers for {event.event_type}")
            return

        logger.debug(
            f"EventBus emit: {event.event_type} (source={event.source}, "
            f"depth={self._current_depth}, handlers={len(handlers)})"
        )

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"EventBus handler error: {handler.__qualname__} "
                        f"(event={event.event_type})"
                    )
        finally:
            self._current_depth -= 1

    def clear(self) -> None:
        """Drop all subscriptions (tests)"""
        self._handlers.clear()
        self._current_depth = 0

    @property
    def handler_count(self) -> int:
        """Total registered handlers"""
        return sum(len(h) for h in self._handlers.values())
