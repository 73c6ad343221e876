#!/usr/bin/env python3
"""
tokenflow Events

Notifications a session sends to its view layer. Listeners are plain
callables; they run synchronously, in subscription order, after the state
they describe has been fully applied.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event names, matching what a view subscribes to"""
    MARKING_CHANGED = "marking-changed"
    TRANSITION_FIRED = "transition-fired"
    TRANSITION_FIRED_SUCCESS = "transition-fired-success"
    TRANSITION_FIRED_BLOCKED = "transition-fired-blocked"
    NODE_DELETED = "node-deleted"
    NODE_MOVED = "node-moved"
    DOCUMENT_CHANGED = "document-changed"


@dataclass(frozen=True)
class NetEvent:
    """
    A single notification.

    Attributes:
        type: What happened
        detail: Payload, e.g. {"id": "t1"} or {"marking": {...}}
    """
    type: EventType
    detail: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[NetEvent], None]


class EventBus:
    """
    Synchronous publish/subscribe for NetEvents.

    A listener that raises is logged and skipped; it never interrupts the
    other listeners or the operation that emitted the event.
    """

    def __init__(self):
        self._listeners: Dict[Optional[EventType], List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: Optional[EventType], listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            event_type: Type to listen for, or None for every event
            listener: Called with each matching NetEvent

        Returns:
            A function that removes the listener again
        """
        self._listeners[event_type].append(listener)

        def unsubscribe():
            try:
                self._listeners[event_type].remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def emit(self, event_type: EventType, **detail: Any) -> NetEvent:
        event = NetEvent(event_type, detail)
        for listener in list(self._listeners[event_type]) + list(self._listeners[None]):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Listener for {event_type.value} failed: {e}")
        return event
