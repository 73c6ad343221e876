#!/usr/bin/env python3
"""
tokenflow Transport Interface

Protocols for the collaborators a session persists into.
"""

from __future__ import annotations

from typing import Optional, Protocol


class SlotStore(Protocol):
    """
    Protocol for durable key/value slots (autosave).

    A session writes its canonical text under its session key on every
    committed change, and may read it back when it is reopened.
    """

    def read(self, key: str) -> Optional[str]:
        """
        Read the text stored under key.

        Args:
            key: Slot key

        Returns:
            Stored text, or None if the slot is empty
        """
        ...

    def write(self, key: str, text: str) -> None:
        """
        Replace the text stored under key.

        Args:
            key: Slot key
            text: Canonical document text
        """
        ...

    def close(self) -> None:
        """Close the store and release resources."""
        ...


class TextSink(Protocol):
    """
    Protocol for the authoritative text of a document.

    This is the text an author edits (for example an embedded JSON-LD
    block or a model file). A session treats it as the source of truth when
    opening and keeps it in sync afterwards.
    """

    def read(self) -> Optional[str]:
        """Current authoritative text, or None if there is none."""
        ...

    def write(self, text: str) -> None:
        """Replace the authoritative text."""
        ...

    def close(self) -> None:
        """Close the sink and release resources."""
        ...
