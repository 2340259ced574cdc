"""Event emitter, listener protocol, and refresh event dataclass."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

logger = logging.getLogger(__name__)

REFRESH_STARTED = "refresh.started"
REFRESH_COMPLETED = "refresh.completed"
REFRESH_FAILED = "refresh.failed"
REFRESH_DISCARDED = "refresh.discarded"

EVENT_TYPES = frozenset({REFRESH_STARTED, REFRESH_COMPLETED, REFRESH_FAILED, REFRESH_DISCARDED})


@dataclass
class RefreshEvent:
    """A typed event emitted around every snapshot fetch."""

    event_type: str  # "refresh.started", "refresh.completed", etc.
    timestamp: datetime
    trigger: str  # "load", "table" or "service"
    sequence: int
    service_name: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat(),
            "trigger": self.trigger,
            "sequence": self.sequence,
            "service_name": self.service_name,
            "data": self.data,
        }


class EventListener(Protocol):
    """Protocol for consuming refresh events."""

    async def on_event(self, event: RefreshEvent) -> None: ...


class EventEmitter:
    """Dispatches refresh events to listeners."""

    def __init__(self) -> None:
        self._listeners: list[EventListener] = []

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    async def emit(self, event: RefreshEvent) -> None:
        for listener in self._listeners:
            try:
                await listener.on_event(event)
            except Exception:
                logger.exception("Event listener error")
