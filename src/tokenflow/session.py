#!/usr/bin/env python3
"""
tokenflow Session

The engine façade a view layer talks to. A session owns exactly one net
document and one history. Every command runs to completion before it returns:
the new document is normalized, persisted, recorded in history, and only then
announced to listeners.

Usage:
    from tokenflow import Session, SessionConfig
    from tokenflow.persist import FileStore

    session = Session.open(text=model_json, store=FileStore(".autosave"))
    session.events.subscribe(EventType.MARKING_CHANGED, redraw)

    t = session.add_transition(100, 80)
    p = session.add_place(40, 80)
    session.add_arc(p, t)
    session.adjust_tokens(p, 1)
    session.fire(t)
    session.undo()
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tokenflow import net
from tokenflow.events import EventBus, EventType
from tokenflow.exceptions import ConfigurationError
from tokenflow.net import Edit, FiringResult, Marking, NetDocument
from tokenflow.persist import History, SlotStore, TextSink, content_id, encode

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class SessionConfig:
    """
    Configuration for a Session.

    Attributes:
        session_key: Key of the durable slot the session autosaves into
        history_limit: Maximum number of undo snapshots
        compact: Persist compact canonical text instead of pretty text
        grid: Snap step for moved nodes (0 disables snapping)
        place_prefix: Prefix for generated place ids
        transition_prefix: Prefix for generated transition ids
    """
    session_key: str = "tokenflow:last"
    history_limit: int = 200
    compact: bool = False
    grid: int = 10
    place_prefix: str = "p"
    transition_prefix: str = "t"

    def __post_init__(self):
        """Reject values the session cannot work with."""
        if not self.session_key:
            raise ConfigurationError("session_key must not be empty")
        if self.history_limit < 1:
            raise ConfigurationError(f"history_limit must be at least 1, got {self.history_limit}")
        if self.grid < 0:
            raise ConfigurationError(f"grid must not be negative, got {self.grid}")
        if not self.place_prefix or not self.transition_prefix:
            raise ConfigurationError("id prefixes must not be empty")


# ============================================================================
# Loading
# ============================================================================

def load_document(text: Any) -> NetDocument:
    """
    Turn raw text into a normalized document.

    Absent, blank or unparsable text yields an empty document; this never
    raises.
    """
    if not isinstance(text, (str, bytes, bytearray)) or not text.strip():
        return net.empty_document()
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.warning(f"Ignoring unparsable net document text: {e}")
        return net.empty_document()
    return net.normalize(raw)


def _read(description: str, reader: Callable[[], Optional[str]]) -> Optional[str]:
    try:
        return reader()
    except OSError as e:
        logger.error(f"Failed to read {description}: {e}")
        return None


# ============================================================================
# Session
# ============================================================================

class Session:
    """
    One editing session over one net document.

    Not thread-safe: callers invoke one operation at a time, and each
    operation is applied in full before the next may observe the document.

    Args:
        document: Initial document (normalized on the way in); empty if None
        config: Session configuration
        store: Durable slot store for autosave
        sink: Authoritative text sink kept in sync with the document
    """

    def __init__(
        self,
        document: Any = None,
        config: Optional[SessionConfig] = None,
        store: Optional[SlotStore] = None,
        sink: Optional[TextSink] = None,
    ):
        self.config = config or SessionConfig()
        self.store = store
        self.sink = sink
        self.events = EventBus()
        self.history = History(limit=self.config.history_limit)

        self._document: NetDocument = (
            net.normalize(document) if document is not None else net.empty_document()
        )
        self._last_text: Optional[str] = _read("text sink", sink.read) if sink is not None else None

        self._persist()
        self.history.seed(self._document)
        logger.info(
            f"Session {self.config.session_key!r} opened with "
            f"{len(self._document['places'])} places, "
            f"{len(self._document['transitions'])} transitions, "
            f"{len(self._document['arcs'])} arcs"
        )

    @classmethod
    def open(
        cls,
        text: Optional[str] = None,
        config: Optional[SessionConfig] = None,
        store: Optional[SlotStore] = None,
        sink: Optional[TextSink] = None,
    ) -> "Session":
        """
        Open a session from the best available source.

        The supplied text wins, then the sink's current text, then the
        autosave slot; with none of them the document starts empty.
        """
        config = config or SessionConfig()
        if not text and sink is not None:
            text = _read("text sink", sink.read)
        if not text and store is not None:
            text = _read(f"slot {config.session_key!r}", lambda: store.read(config.session_key))
        return cls(load_document(text), config, store, sink)

    def close(self) -> None:
        """Close the store and sink."""
        for collaborator in (self.store, self.sink):
            if collaborator is not None:
                collaborator.close()

    def __enter__(self):
        """Context manager support."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager support."""
        self.close()

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    def marking(self) -> Marking:
        return net.marking(self._document)

    def enabled(self, transition_id: str) -> bool:
        return net.enabled(self._document, None, transition_id)

    def enabled_transitions(self) -> List[str]:
        return net.enabled_transitions(self._document)

    def blocking_arcs(self, transition_id: str) -> List[int]:
        return net.blocking_arcs(self._document, None, transition_id)

    def at_capacity(self, place_id: str) -> bool:
        return net.at_capacity(self._document, None, place_id)

    def text(self, compact: Optional[bool] = None) -> str:
        """Canonical text of the current document."""
        return encode(self._document, compact=self.config.compact if compact is None else compact)

    def content_id(self) -> str:
        return content_id(self._document)

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # ------------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------------

    def export_json(self) -> NetDocument:
        """Deep, independent copy of the current document."""
        return copy.deepcopy(self._document)

    def import_json(self, doc: Any) -> None:
        """Replace the document with a normalized copy of doc."""
        self._commit(doc)

    def apply_text(self, text: str) -> bool:
        """
        Replace the document from edited JSON text.

        Returns:
            False (leaving the document alone) if the text does not parse
        """
        try:
            parsed = json.loads(text)
        except (TypeError, ValueError, RecursionError) as e:
            logger.info(f"Edited text rejected: {e}")
            return False
        self.import_json(parsed)
        return True

    # ------------------------------------------------------------------------
    # Firing
    # ------------------------------------------------------------------------

    def fire(self, transition_id: str) -> FiringResult:
        """
        Fire a transition.

        Emits transition-fired before evaluating, then either
        transition-fired-blocked, or marking-changed followed by
        transition-fired-success once the new marking is committed.
        """
        self.events.emit(EventType.TRANSITION_FIRED, id=transition_id)

        result = net.fire(self._document, transition_id)
        if not result.applied:
            logger.info(f"Transition {transition_id!r} blocked")
            self.events.emit(EventType.TRANSITION_FIRED_BLOCKED, id=transition_id)
            return result

        self._commit(result.document)
        logger.info(f"Transition {transition_id!r} fired: {result.delta}")
        self.events.emit(EventType.MARKING_CHANGED, marking=dict(result.marking))
        self.events.emit(EventType.TRANSITION_FIRED_SUCCESS, id=transition_id)
        return result

    # ------------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------------

    def add_place(self, x: Any = 0, y: Any = 0) -> str:
        edit = net.add_place(self._document, x, y, prefix=self.config.place_prefix)
        self._apply(edit)
        return edit.change.node_id

    def add_transition(self, x: Any = 0, y: Any = 0) -> str:
        edit = net.add_transition(self._document, x, y, prefix=self.config.transition_prefix)
        self._apply(edit)
        return edit.change.node_id

    def add_arc(self, source: str, target: str, weight: Any = 1, inhibit: bool = False) -> Optional[int]:
        """
        Connect a place and a transition.

        Returns:
            Index of the new arc, or None if the arc was rejected
        """
        edit = net.add_arc(self._document, source, target, weight, inhibit)
        if not self._apply(edit):
            return None
        return edit.change.arc_index

    def remove_arc(self, index: int) -> bool:
        return self._apply(net.remove_arc(self._document, index))

    def set_weight(self, index: int, weight: Any) -> bool:
        return self._apply(net.set_weight(self._document, index, weight))

    def set_capacity(self, place_id: str, capacity: Any) -> bool:
        return self._apply(net.set_capacity(self._document, place_id, capacity))

    def adjust_tokens(self, place_id: str, delta: Any) -> Optional[int]:
        """
        Add or remove tokens by hand.

        Returns:
            The place's new initial[0], or None if the edit was rejected
        """
        edit = net.adjust_tokens(self._document, place_id, delta)
        if not self._apply(edit):
            return None
        self.events.emit(EventType.MARKING_CHANGED, marking=self.marking())
        return edit.change.value

    def move_node(self, node_id: str, x: Any, y: Any) -> bool:
        edit = net.move_node(self._document, node_id, x, y, grid=self.config.grid)
        if not self._apply(edit):
            return False
        self.events.emit(EventType.NODE_MOVED, id=node_id, kind=edit.change.node_kind.value)
        return True

    def delete_node(self, node_id: str) -> bool:
        """Delete a place or transition together with its arcs."""
        if not self._apply(net.delete_node(self._document, node_id)):
            return False
        self.events.emit(EventType.NODE_DELETED, id=node_id)
        return True

    # ------------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------------

    def undo(self) -> Optional[NetDocument]:
        """
        Return to the previous snapshot.

        Returns:
            A copy of the restored document, or None if there is nothing to undo
        """
        return self._restore(self.history.undo())

    def redo(self) -> Optional[NetDocument]:
        return self._restore(self.history.redo())

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------

    def _apply(self, edit: Edit) -> bool:
        if not edit.applied:
            logger.info(f"Edit rejected: {edit.rejection.name}")
            return False
        self._commit(edit.document)
        return True

    def _commit(self, doc: Any) -> None:
        self._document = net.normalize(doc)
        self._persist()
        self.history.record(self._document)

    def _restore(self, doc: Optional[Dict[str, Any]]) -> Optional[NetDocument]:
        if doc is None:
            return None
        self._document = net.normalize(doc)
        self._persist()
        return self.export_json()

    def _persist(self) -> None:
        text = self.text()

        if self.store is not None:
            try:
                self.store.write(self.config.session_key, text)
            except OSError as e:
                logger.error(f"Failed to write slot {self.config.session_key!r}: {e}")

        if text == self._last_text:
            return
        self._last_text = text

        if self.sink is not None:
            try:
                self.sink.write(text)
            except OSError as e:
                logger.error(f"Failed to write text sink: {e}")

        self.events.emit(EventType.DOCUMENT_CHANGED, doc=self.export_json())
