#!/usr/bin/env python3
"""
tokenflow.net - Net document model and execution

Pure functions over a normalized net document: normalization, marking and
enablement, firing, and structural edits.
"""

from .specs import (
    NetDocument,
    Marking,
    NodeKind,
    UNBOUNDED,
    NetDocumentSchema,
    PlaceSchema,
    TransitionSchema,
    ArcSchema,
    normalize,
    empty_document,
    node_kind,
    is_place,
    is_transition,
)

from .marking import (
    marking,
    enabled,
    enabled_transitions,
    arc_checks,
    blocking_arcs,
    at_capacity,
    capacity_of,
    input_arcs,
    output_arcs,
    arc_weight,
)

from .firing import FiringResult, fire

from .edits import (
    Edit,
    Change,
    ChangeKind,
    Rejection,
    generate_id,
    add_place,
    add_transition,
    add_arc,
    remove_arc,
    set_weight,
    set_capacity,
    adjust_tokens,
    move_node,
    delete_node,
)

__all__ = [
    # Model
    'NetDocument',
    'Marking',
    'NodeKind',
    'UNBOUNDED',
    'NetDocumentSchema',
    'PlaceSchema',
    'TransitionSchema',
    'ArcSchema',
    'normalize',
    'empty_document',
    'node_kind',
    'is_place',
    'is_transition',

    # Marking & enablement
    'marking',
    'enabled',
    'enabled_transitions',
    'arc_checks',
    'blocking_arcs',
    'at_capacity',
    'capacity_of',
    'input_arcs',
    'output_arcs',
    'arc_weight',

    # Firing
    'FiringResult',
    'fire',

    # Edits
    'Edit',
    'Change',
    'ChangeKind',
    'Rejection',
    'generate_id',
    'add_place',
    'add_transition',
    'add_arc',
    'remove_arc',
    'set_weight',
    'set_capacity',
    'adjust_tokens',
    'move_node',
    'delete_node',
]
