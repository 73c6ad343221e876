#!/usr/bin/env python3
"""
tokenflow History

Linear undo/redo over canonical snapshots of a net document.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from tokenflow.exceptions import ConfigurationError

from .encoder import CanonicalEncoder, Encoder

logger = logging.getLogger(__name__)


class History:
    """
    Bounded undo stack plus redo stack of snapshots.

    The top of the undo stack is always the snapshot of the current document.
    A snapshot identical to the top is never pushed twice, and pushing a new
    one discards any redo entries. When the undo stack exceeds its limit the
    oldest snapshots are dropped first, the seed included.

    Thread-safety: none. A history belongs to exactly one session.

    Example:
        history = History(limit=100)
        history.seed(doc)
        history.record(edited)
        previous = history.undo()

    Args:
        limit: Maximum number of undo snapshots kept
        encoder: Snapshot encoder (compact canonical JSON by default)
    """

    def __init__(self, limit: int = 200, encoder: Optional[Encoder] = None):
        if limit < 1:
            raise ConfigurationError(f"History limit must be at least 1, got {limit}")
        self._limit = limit
        self._encoder = encoder or CanonicalEncoder(compact=True)
        self._undo: Deque[str] = deque(maxlen=limit)
        self._redo: List[str] = []

    def seed(self, doc: Dict[str, Any]) -> None:
        """Start a fresh history whose floor is doc."""
        self._undo.clear()
        self._redo.clear()
        self._undo.append(self._encoder.encode(doc))

    def record(self, doc: Dict[str, Any]) -> bool:
        """
        Push a snapshot of doc unless it matches the current top.

        Returns:
            True when a snapshot was pushed
        """
        snapshot = self._encoder.encode(doc)
        if self._undo and self._undo[-1] == snapshot:
            logger.debug("History unchanged, snapshot skipped")
            return False

        if len(self._undo) == self._limit:
            logger.debug(f"History limit {self._limit} reached, dropping oldest snapshot")
        self._undo.append(snapshot)
        self._redo.clear()
        return True

    def undo(self) -> Optional[Dict[str, Any]]:
        """
        Step back one snapshot.

        Returns:
            The now-current document, or None if there is nothing to undo
        """
        if len(self._undo) < 2:
            return None
        self._redo.append(self._undo.pop())
        return self._encoder.decode(self._undo[-1])

    def redo(self) -> Optional[Dict[str, Any]]:
        """
        Re-apply the most recently undone snapshot.

        Returns:
            The now-current document, or None if there is nothing to redo
        """
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(snapshot)
        return self._encoder.decode(snapshot)

    @property
    def can_undo(self) -> bool:
        return len(self._undo) >= 2

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def limit(self) -> int:
        """Get maximum undo depth."""
        return self._limit

    @property
    def current(self) -> Optional[str]:
        """Snapshot at the top of the undo stack."""
        return self._undo[-1] if self._undo else None

    def __len__(self) -> int:
        return len(self._undo)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get history statistics for monitoring and debugging.

        Returns:
            Dict with undo/redo depth and the configured limit
        """
        return {
            'undo_depth': len(self._undo),
            'redo_depth': len(self._redo),
            'limit': self._limit,
        }
