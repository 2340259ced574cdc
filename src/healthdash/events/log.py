"""In-memory ring buffer for recent refresh events."""

from __future__ import annotations

from collections import deque

from healthdash.events.emitter import RefreshEvent


class EventLog:
    """Bounded in-memory event log. Implements EventListener protocol."""

    def __init__(self, max_size: int = 100) -> None:
        self._events: deque[RefreshEvent] = deque(maxlen=max_size)

    def __len__(self) -> int:
        return len(self._events)

    async def on_event(self, event: RefreshEvent) -> None:
        self._events.append(event)

    def get_recent(self, limit: int = 20, event_type: str | None = None) -> list[RefreshEvent]:
        events: list[RefreshEvent]
        if event_type:
            events = [e for e in self._events if e.event_type == event_type]
        else:
            events = list(self._events)
        # Most recent first
        events.reverse()
        return events[:limit]
