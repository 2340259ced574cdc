"""Refresh event system for healthdash."""

from __future__ import annotations

from healthdash.events.emitter import (
    EVENT_TYPES,
    EventEmitter,
    EventListener,
    RefreshEvent,
)
from healthdash.events.log import EventLog

__all__ = [
    "EVENT_TYPES",
    "EventEmitter",
    "EventListener",
    "EventLog",
    "RefreshEvent",
]
