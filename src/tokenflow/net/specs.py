#!/usr/bin/env python3
"""
tokenflow net - Document Model

The net document (places, transitions, arcs) and the normalizer that turns any
loaded value into a well-formed document. The engine works on the plain dict
produced by dumping these models; the models exist to coerce, never to reject.
"""

import logging
import math
import sys
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tokenflow.common.acyclic import acyclic_copy

logger = logging.getLogger(__name__)


DEFAULT_CONTEXT = "https://pflow.xyz/schema"
DEFAULT_NET_TYPE = "PetriNet"
DEFAULT_TOKEN = "https://pflow.xyz/tokens/black"

# Capacity marker meaning "no limit"; encoded as JSON null.
UNBOUNDED = None

Number = Union[int, float]

_FLOAT_MAX = sys.float_info.max

# Plain-dict exchange form of NetDocumentSchema
NetDocument = Dict[str, Any]
# Place id -> current token count
Marking = Dict[str, int]


class NodeKind(Enum):
    """Kind of node an identifier resolves to"""
    PLACE = "place"
    TRANSITION = "transition"


# ============================================================================
# Coercion
# ============================================================================

def to_number(value: Any) -> Optional[Number]:
    """
    Best-effort numeric reading of a JSON value; None when it has none.

    Integers too large for a float read as signed infinity, so later
    finiteness checks see them as unusable rather than overflowing.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        if abs(value) > _FLOAT_MAX:
            return math.inf if value > 0 else -math.inf
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed
    return None


def coerce_count(value: Any, default: int = 0) -> int:
    """Non-negative integer token count."""
    n = to_number(value)
    if n is None or not math.isfinite(n):
        return default
    return max(0, math.floor(n))


def coerce_weight(value: Any, default: int = 1) -> int:
    """Positive integer arc weight."""
    n = to_number(value)
    if n is None or not math.isfinite(n) or n < 1:
        return default
    return math.floor(n)


def coerce_capacity(value: Any) -> Optional[int]:
    """Non-negative integer bound, or UNBOUNDED for anything else."""
    n = to_number(value)
    if n is None or not math.isfinite(n) or n < 0:
        return UNBOUNDED
    return math.floor(n)


def coerce_coordinate(value: Any) -> Number:
    n = to_number(value)
    if n is None or not math.isfinite(n):
        return 0
    return int(n) if float(n).is_integer() else n


def _vector(value: Any, coerce: Callable[[Any], Any], default: Any) -> List[Any]:
    # Scalars are promoted; an empty sequence still needs index 0
    if isinstance(value, (list, tuple)):
        items = [coerce(item) for item in value]
        return items if items else [default]
    return [coerce(value)]


def _endpoint(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


# ============================================================================
# Schema
# ============================================================================

class PlaceSchema(BaseModel):
    """A token-holding node. Only index 0 of each vector is read by the engine."""
    model_config = ConfigDict(extra="allow")

    type_tag: Any = Field("Place", alias="@type")
    offset: Number = 0
    initial: List[int] = Field(default_factory=lambda: [0])
    capacity: List[Optional[int]] = Field(default_factory=lambda: [UNBOUNDED])
    x: Number = 0
    y: Number = 0

    @field_validator("type_tag", mode="before")
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return value or "Place"

    @field_validator("offset", "x", "y", mode="before")
    @classmethod
    def _coordinate(cls, value: Any) -> Number:
        return coerce_coordinate(value)

    @field_validator("initial", mode="before")
    @classmethod
    def _initial(cls, value: Any) -> List[int]:
        return _vector(value, coerce_count, 0)

    @field_validator("capacity", mode="before")
    @classmethod
    def _capacity(cls, value: Any) -> List[Optional[int]]:
        return _vector(value, coerce_capacity, UNBOUNDED)


class TransitionSchema(BaseModel):
    """An action node; carries only its position."""
    model_config = ConfigDict(extra="allow")

    type_tag: Any = Field("Transition", alias="@type")
    x: Number = 0
    y: Number = 0

    @field_validator("type_tag", mode="before")
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return value or "Transition"

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coordinate(cls, value: Any) -> Number:
        return coerce_coordinate(value)


class ArcSchema(BaseModel):
    """
    A directed weighted edge.

    Its role (input or output of a transition) is derived from which endpoint
    names a place, never stored.
    """
    model_config = ConfigDict(extra="allow")

    type_tag: Any = Field("Arrow", alias="@type")
    source: str = ""
    target: str = ""
    weight: List[int] = Field(default_factory=lambda: [1])
    inhibit_transition: bool = Field(False, alias="inhibitTransition")

    @field_validator("type_tag", mode="before")
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return value or "Arrow"

    @field_validator("source", "target", mode="before")
    @classmethod
    def _endpoint(cls, value: Any) -> str:
        return _endpoint(value)

    @field_validator("weight", mode="before")
    @classmethod
    def _weight(cls, value: Any) -> List[int]:
        return _vector(value, coerce_weight, 1)

    @field_validator("inhibit_transition", mode="before")
    @classmethod
    def _inhibit(cls, value: Any) -> bool:
        return bool(value)


class NetDocumentSchema(BaseModel):
    """Root persisted entity. Unknown fields are carried through untouched."""
    model_config = ConfigDict(extra="allow")

    context: Any = Field(DEFAULT_CONTEXT, alias="@context")
    type_tag: Any = Field(DEFAULT_NET_TYPE, alias="@type")
    token: List[Any] = Field(default_factory=lambda: [DEFAULT_TOKEN])
    places: Dict[str, PlaceSchema] = Field(default_factory=dict)
    transitions: Dict[str, TransitionSchema] = Field(default_factory=dict)
    arcs: List[ArcSchema] = Field(default_factory=list)

    @field_validator("context", mode="before")
    @classmethod
    def _context(cls, value: Any) -> Any:
        return value or DEFAULT_CONTEXT

    @field_validator("type_tag", mode="before")
    @classmethod
    def _tag(cls, value: Any) -> Any:
        return value or DEFAULT_NET_TYPE

    @field_validator("token", mode="before")
    @classmethod
    def _token(cls, value: Any) -> List[Any]:
        # Exactly one token color
        if isinstance(value, (list, tuple)) and value and value[0]:
            return [value[0]]
        if isinstance(value, str) and value:
            return [value]
        return [DEFAULT_TOKEN]

    @field_validator("places", "transitions", mode="before")
    @classmethod
    def _nodes(cls, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            return {}
        return {
            str(node_id): node if isinstance(node, dict) else {}
            for node_id, node in value.items()
        }

    @field_validator("arcs", mode="before")
    @classmethod
    def _arcs(cls, value: Any) -> List[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [arc for arc in value if isinstance(arc, dict)]


# ============================================================================
# Normalizer
# ============================================================================

def normalize(raw: Any) -> NetDocument:
    """
    Coerce any value into a well-formed net document.

    Never raises. Missing containers become empty, vectors are promoted and
    coerced, and anything unusable falls back to its default. The result
    shares no containers with the input.

    Args:
        raw: Parsed JSON (or any other value) purporting to be a net document

    Returns:
        A new normalized document
    """
    source = acyclic_copy(raw)
    if not isinstance(source, dict):
        if raw is not None:
            logger.debug(f"Ignoring non-mapping net document of type {type(raw).__name__}")
        source = {}

    try:
        model = NetDocumentSchema.model_validate(source)
    except ValidationError as e:
        logger.warning(f"Net document could not be normalized, using an empty one: {e}")
        return empty_document()

    return model.model_dump(by_alias=True)


def empty_document() -> NetDocument:
    """A document with default tags and no nodes."""
    return NetDocumentSchema().model_dump(by_alias=True)


def new_place(x: Any = 0, y: Any = 0) -> Dict[str, Any]:
    return PlaceSchema.model_validate({"x": x, "y": y}).model_dump(by_alias=True)


def new_transition(x: Any = 0, y: Any = 0) -> Dict[str, Any]:
    return TransitionSchema.model_validate({"x": x, "y": y}).model_dump(by_alias=True)


def new_arc(source: str, target: str, weight: Any = 1, inhibit: bool = False) -> Dict[str, Any]:
    return ArcSchema.model_validate({
        "source": source,
        "target": target,
        "weight": [weight],
        "inhibitTransition": inhibit,
    }).model_dump(by_alias=True)


# ============================================================================
# Lookups
# ============================================================================

def node_kind(doc: NetDocument, node_id: Any) -> Optional[NodeKind]:
    """Resolve an identifier to the kind of node it names, if any."""
    if not isinstance(node_id, str):
        return None
    if node_id in doc.get("places", {}):
        return NodeKind.PLACE
    if node_id in doc.get("transitions", {}):
        return NodeKind.TRANSITION
    return None


def is_place(doc: NetDocument, node_id: Any) -> bool:
    return node_kind(doc, node_id) is NodeKind.PLACE


def is_transition(doc: NetDocument, node_id: Any) -> bool:
    return node_kind(doc, node_id) is NodeKind.TRANSITION
