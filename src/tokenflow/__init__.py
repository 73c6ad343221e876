#!/usr/bin/env python3
"""
tokenflow - Execution and persistence engine for token-flow models

A token-flow model is a Petri net with weighted arcs, inhibitor arcs,
per-place capacities and a single token color.

Packages:
    tokenflow.net      - document model, normalizer, marking, firing, edits
    tokenflow.persist  - canonical encoding, undo/redo history, stores
    tokenflow.session  - the façade a view layer drives
"""

import logging

from . import net
from .events import EventBus, EventType, NetEvent
from .exceptions import TokenFlowError, ConfigurationError, SnapshotError
from .session import Session, SessionConfig, load_document

# Library does not configure handlers; callers may configure logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "net",
    "Session",
    "SessionConfig",
    "load_document",
    "EventBus",
    "EventType",
    "NetEvent",
    "TokenFlowError",
    "ConfigurationError",
    "SnapshotError",
]
