#!/usr/bin/env python3
"""
tokenflow net - Structural Edits

Editing commands over a net document. Every command leaves its input alone
and returns an Edit: either a new, normalized document together with a
description of what changed, or a rejection with the original document.
Persisting and recording history is the caller's job (see tokenflow.session).
"""

import copy
import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional

from .specs import (
    NetDocument,
    NodeKind,
    UNBOUNDED,
    coerce_count,
    coerce_coordinate,
    node_kind,
    normalize,
    new_arc,
    new_place,
    new_transition,
    to_number,
)


class ChangeKind(Enum):
    """What a successful edit did"""
    PLACE_ADDED = auto()
    TRANSITION_ADDED = auto()
    ARC_ADDED = auto()
    ARC_REMOVED = auto()
    WEIGHT_SET = auto()
    CAPACITY_SET = auto()
    TOKENS_ADJUSTED = auto()
    NODE_MOVED = auto()
    NODE_DELETED = auto()


class Rejection(Enum):
    """Why an edit was refused"""
    SELF_ARC = auto()
    SAME_KIND = auto()
    UNKNOWN_NODE = auto()
    UNKNOWN_ARC = auto()
    INVALID_VALUE = auto()


@dataclass(frozen=True)
class Change:
    """Descriptor a view can use to update itself"""
    kind: ChangeKind
    node_id: Optional[str] = None
    node_kind: Optional[NodeKind] = None
    arc_index: Optional[int] = None
    value: Any = None


@dataclass
class Edit:
    """Result of an editing command"""
    document: NetDocument
    change: Optional[Change] = None
    rejection: Optional[Rejection] = None

    @property
    def applied(self) -> bool:
        return self.rejection is None


def _rejected(doc: NetDocument, reason: Rejection) -> Edit:
    return Edit(doc, rejection=reason)


def _applied(doc: NetDocument, change: Change) -> Edit:
    return Edit(normalize(doc), change)


# ============================================================================
# Identifiers
# ============================================================================

def generate_id(doc: NetDocument, kind: NodeKind, prefix: str) -> str:
    """
    Pick an identifier not used by any place or transition.

    The base is the prefix followed by one more than the number of nodes of
    that kind; collisions are resolved by suffixing -1, -2, ...
    """
    places = doc.get("places", {})
    transitions = doc.get("transitions", {})
    count = len(places) if kind is NodeKind.PLACE else len(transitions)

    base = f"{prefix}{count + 1}"
    candidate = base
    suffix = 0
    while candidate in places or candidate in transitions:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


# ============================================================================
# Nodes
# ============================================================================

def add_place(doc: NetDocument, x: Any = 0, y: Any = 0, prefix: str = "p") -> Edit:
    """Add an empty, unbounded place at a position."""
    place_id = generate_id(doc, NodeKind.PLACE, prefix)
    edited = copy.deepcopy(doc)
    edited.setdefault("places", {})[place_id] = new_place(x, y)
    return _applied(edited, Change(ChangeKind.PLACE_ADDED, place_id, NodeKind.PLACE))


def add_transition(doc: NetDocument, x: Any = 0, y: Any = 0, prefix: str = "t") -> Edit:
    """Add a transition at a position."""
    transition_id = generate_id(doc, NodeKind.TRANSITION, prefix)
    edited = copy.deepcopy(doc)
    edited.setdefault("transitions", {})[transition_id] = new_transition(x, y)
    return _applied(edited, Change(ChangeKind.TRANSITION_ADDED, transition_id, NodeKind.TRANSITION))


def move_node(doc: NetDocument, node_id: str, x: Any, y: Any, grid: int = 0) -> Edit:
    """
    Reposition a place or transition.

    Coordinates are clamped at zero and, when grid is positive, rounded to
    the nearest multiple of it.
    """
    kind = node_kind(doc, node_id)
    if kind is None:
        return _rejected(doc, Rejection.UNKNOWN_NODE)

    def place_on_grid(value: Any) -> Any:
        value = max(0, coerce_coordinate(value))
        if grid > 0:
            return math.floor(value / grid + 0.5) * grid
        return value

    edited = copy.deepcopy(doc)
    container = "places" if kind is NodeKind.PLACE else "transitions"
    node = edited[container][node_id]
    node["x"] = place_on_grid(x)
    node["y"] = place_on_grid(y)
    return _applied(edited, Change(ChangeKind.NODE_MOVED, node_id, kind, value=(node["x"], node["y"])))


def delete_node(doc: NetDocument, node_id: str) -> Edit:
    """Remove a place or transition and every arc that touches it."""
    kind = node_kind(doc, node_id)
    if kind is None:
        return _rejected(doc, Rejection.UNKNOWN_NODE)

    edited = copy.deepcopy(doc)
    edited.get("places", {}).pop(node_id, None)
    edited.get("transitions", {}).pop(node_id, None)
    edited["arcs"] = [
        arc for arc in edited.get("arcs", [])
        if arc.get("source") != node_id and arc.get("target") != node_id
    ]
    return _applied(edited, Change(ChangeKind.NODE_DELETED, node_id, kind))


def adjust_tokens(doc: NetDocument, place_id: str, delta: Any) -> Edit:
    """Add delta (possibly negative) to a place's initial[0], never below zero."""
    if node_kind(doc, place_id) is not NodeKind.PLACE:
        return _rejected(doc, Rejection.UNKNOWN_NODE)
    step = to_number(delta)
    if step is None or math.isinf(step):
        return _rejected(doc, Rejection.INVALID_VALUE)

    edited = copy.deepcopy(doc)
    place = edited["places"][place_id]
    initial = place.get("initial") or [0]
    initial[0] = max(0, coerce_count(initial[0]) + int(step))
    place["initial"] = initial
    return _applied(edited, Change(ChangeKind.TOKENS_ADJUSTED, place_id, NodeKind.PLACE, value=initial[0]))


def set_capacity(doc: NetDocument, place_id: str, capacity: Any) -> Edit:
    """
    Set a place's capacity[0].

    None means unbounded. Anything that is not a non-negative number (or an
    explicit infinity) is refused and the previous bound stays.
    """
    if node_kind(doc, place_id) is not NodeKind.PLACE:
        return _rejected(doc, Rejection.UNKNOWN_NODE)

    if capacity is UNBOUNDED:
        bound = UNBOUNDED
    else:
        n = to_number(capacity)
        if n is None or n < 0:
            return _rejected(doc, Rejection.INVALID_VALUE)
        bound = UNBOUNDED if math.isinf(n) else math.floor(n)

    edited = copy.deepcopy(doc)
    place = edited["places"][place_id]
    vector = place.get("capacity") or [UNBOUNDED]
    vector[0] = bound
    place["capacity"] = vector
    return _applied(edited, Change(ChangeKind.CAPACITY_SET, place_id, NodeKind.PLACE, value=bound))


# ============================================================================
# Arcs
# ============================================================================

def add_arc(doc: NetDocument, source: str, target: str, weight: Any = 1, inhibit: bool = False) -> Edit:
    """
    Connect a place and a transition.

    Both endpoints must exist, differ, and be of different kinds. A weight
    that is not a positive number becomes 1.
    """
    source_kind = node_kind(doc, source)
    target_kind = node_kind(doc, target)
    if source_kind is None or target_kind is None:
        return _rejected(doc, Rejection.UNKNOWN_NODE)
    if source == target:
        return _rejected(doc, Rejection.SELF_ARC)
    if source_kind is target_kind:
        return _rejected(doc, Rejection.SAME_KIND)

    edited = copy.deepcopy(doc)
    arcs = edited.setdefault("arcs", [])
    arcs.append(new_arc(source, target, weight, inhibit))
    return _applied(edited, Change(ChangeKind.ARC_ADDED, arc_index=len(arcs) - 1))


def remove_arc(doc: NetDocument, index: int) -> Edit:
    arcs = doc.get("arcs", [])
    if not isinstance(index, int) or not 0 <= index < len(arcs):
        return _rejected(doc, Rejection.UNKNOWN_ARC)

    edited = copy.deepcopy(doc)
    del edited["arcs"][index]
    return _applied(edited, Change(ChangeKind.ARC_REMOVED, arc_index=index))


def set_weight(doc: NetDocument, index: int, weight: Any) -> Edit:
    """Set an arc's weight[0]; non-positive or non-numeric input is refused."""
    arcs = doc.get("arcs", [])
    if not isinstance(index, int) or not 0 <= index < len(arcs):
        return _rejected(doc, Rejection.UNKNOWN_ARC)
    n = to_number(weight)
    if n is None or n < 1 or math.isinf(n):
        return _rejected(doc, Rejection.INVALID_VALUE)

    edited = copy.deepcopy(doc)
    arc = edited["arcs"][index]
    vector = arc.get("weight") or [1]
    vector[0] = math.floor(n)
    arc["weight"] = vector
    return _applied(edited, Change(ChangeKind.WEIGHT_SET, arc_index=index, value=vector[0]))
