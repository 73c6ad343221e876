#!/usr/bin/env python3
"""
tokenflow net - Firing

Applies a transition to a document. The input document is never mutated: the
effect is computed in full and handed back on a fresh copy, so a caller only
ever sees the state before or after a firing.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from .specs import NetDocument, Marking, coerce_count
from .marking import marking, enabled, input_arcs, output_arcs, arc_weight, token_count

logger = logging.getLogger(__name__)


@dataclass
class FiringResult:
    """
    Outcome of a fire request.

    Attributes:
        transition_id: The transition that was requested
        applied: False when the transition was blocked
        marking: Marking after the firing (the unchanged marking when blocked)
        document: The post-firing document, or the original one when blocked
        delta: Net token change per touched place
    """
    transition_id: str
    applied: bool
    marking: Marking
    document: NetDocument
    delta: Dict[str, int] = field(default_factory=dict)

    @property
    def blocked(self) -> bool:
        return not self.applied


def fire(doc: NetDocument, transition_id: str, marks: Optional[Marking] = None) -> FiringResult:
    """
    Fire a transition if it is enabled.

    Ordinary input arcs take their weight from their source and output arcs
    add their weight to their target. Inhibitor arcs only guard. The net
    change of each touched place is written to initial[0], clamped at zero.

    Args:
        doc: Normalized net document
        transition_id: Transition to fire
        marks: Marking to fire under; recomputed from doc when None

    Returns:
        FiringResult; the document is untouched when blocked
    """
    if marks is None:
        marks = marking(doc)

    if not enabled(doc, marks, transition_id):
        logger.debug(f"Transition {transition_id!r} is not enabled")
        return FiringResult(transition_id, False, dict(marks), doc)

    delta: Dict[str, int] = {}
    for _, arc in input_arcs(doc, transition_id):
        if arc.get("inhibitTransition"):
            continue
        delta[arc["source"]] = delta.get(arc["source"], 0) - arc_weight(arc)
    for _, arc in output_arcs(doc, transition_id):
        delta[arc["target"]] = delta.get(arc["target"], 0) + arc_weight(arc)

    fired = copy.deepcopy(doc)
    for place_id, change in delta.items():
        place = fired["places"][place_id]
        total = max(0, token_count(place) + change)
        initial = place.get("initial")
        if not isinstance(initial, list) or not initial:
            initial = [0]
        head = coerce_count(initial[0]) + change
        if head < 0:
            # Trailing entries cannot absorb a loss; fold them into index 0
            initial = [total] + [0] * (len(initial) - 1)
        else:
            initial[0] = head
        place["initial"] = initial

    return FiringResult(transition_id, True, marking(fired), fired, delta)
