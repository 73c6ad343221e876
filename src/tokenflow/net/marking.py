#!/usr/bin/env python3
"""
tokenflow net - Marking & Enablement

Side-effect free queries over a normalized net document: the current marking,
the arcs around a transition, and whether a transition may fire. Safe to call
as often as a view needs for highlighting.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from .specs import NetDocument, Marking, UNBOUNDED, coerce_count, coerce_weight, is_place, is_transition


def arc_weight(arc: Dict[str, Any]) -> int:
    """Weight at index 0, falling back to 1."""
    weight = arc.get("weight")
    if isinstance(weight, list) and weight:
        return coerce_weight(weight[0])
    return coerce_weight(weight)


def token_count(place: Dict[str, Any]) -> int:
    """Sum of a place's initial vector."""
    initial = place.get("initial")
    if not isinstance(initial, list):
        initial = [initial]
    return sum(coerce_count(v) for v in initial)


def capacity_of(doc: NetDocument, place_id: str) -> Optional[int]:
    """Capacity bound at index 0, or UNBOUNDED."""
    place = doc.get("places", {}).get(place_id)
    if place is None:
        return UNBOUNDED
    capacity = place.get("capacity")
    if isinstance(capacity, list) and capacity:
        capacity = capacity[0]
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
        return UNBOUNDED
    return capacity


def marking(doc: NetDocument) -> Marking:
    """Current token count of every place."""
    return {
        place_id: token_count(place)
        for place_id, place in doc.get("places", {}).items()
    }


def input_arcs(doc: NetDocument, transition_id: str) -> List[Tuple[int, Dict[str, Any]]]:
    """
    (index, arc) pairs feeding a transition from an existing place.

    Arcs whose source does not name a place are malformed and skipped.
    """
    return [
        (index, arc)
        for index, arc in enumerate(doc.get("arcs", []))
        if arc.get("target") == transition_id and is_place(doc, arc.get("source"))
    ]


def output_arcs(doc: NetDocument, transition_id: str) -> List[Tuple[int, Dict[str, Any]]]:
    """(index, arc) pairs leaving a transition into an existing place."""
    return [
        (index, arc)
        for index, arc in enumerate(doc.get("arcs", []))
        if arc.get("source") == transition_id and is_place(doc, arc.get("target"))
    ]


def arc_checks(
    doc: NetDocument,
    marks: Optional[Marking],
    transition_id: str,
) -> Iterator[Tuple[int, bool]]:
    """
    Every individual firing check of a transition as (arc index, passed).

    - ordinary input arc: source holds at least the weight
    - inhibitor input arc: source holds fewer than the weight
    - output arc: target stays within its capacity after receiving the weight

    Each check reads only the marking, so the checks are independent of one
    another and of their order.
    """
    if marks is None:
        marks = marking(doc)

    for index, arc in input_arcs(doc, transition_id):
        tokens = marks.get(arc["source"], 0)
        weight = arc_weight(arc)
        if arc.get("inhibitTransition"):
            yield index, tokens < weight
        else:
            yield index, tokens >= weight

    for index, arc in output_arcs(doc, transition_id):
        capacity = capacity_of(doc, arc["target"])
        if capacity is UNBOUNDED:
            yield index, True
        else:
            yield index, marks.get(arc["target"], 0) + arc_weight(arc) <= capacity


def blocking_arcs(doc: NetDocument, marks: Optional[Marking], transition_id: str) -> List[int]:
    """Indices of the arcs whose check currently fails."""
    return [index for index, passed in arc_checks(doc, marks, transition_id) if not passed]


def enabled(doc: NetDocument, marks: Optional[Marking], transition_id: str) -> bool:
    """
    Whether a transition may fire under a marking.

    Args:
        doc: Normalized net document
        marks: Marking to evaluate against; computed from doc when None
        transition_id: Transition to test. Unknown ids are never enabled.

    Returns:
        True iff every arc check passes
    """
    if not is_transition(doc, transition_id):
        return False
    return all(passed for _, passed in arc_checks(doc, marks, transition_id))


def enabled_transitions(doc: NetDocument, marks: Optional[Marking] = None) -> List[str]:
    """Ids of all transitions enabled under a marking, in document order."""
    if marks is None:
        marks = marking(doc)
    return [tid for tid in doc.get("transitions", {}) if enabled(doc, marks, tid)]


def at_capacity(doc: NetDocument, marks: Optional[Marking], place_id: str) -> bool:
    """True when a bounded place holds as many tokens as it may."""
    capacity = capacity_of(doc, place_id)
    if capacity is UNBOUNDED:
        return False
    if marks is None:
        marks = marking(doc)
    return marks.get(place_id, 0) >= capacity
