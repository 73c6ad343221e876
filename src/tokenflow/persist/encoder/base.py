#!/usr/bin/env python3
"""
tokenflow Encoder Interface

Protocol for encoders that turn a net document into persisted text.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol


class Encoder(Protocol):
    """
    Protocol for document encoders.

    Encoders produce the text written to durable slots, text sinks and
    history snapshots.
    """

    def encode(self, doc: Dict[str, Any]) -> str:
        """
        Encode a document to text.

        Args:
            doc: The net document to encode

        Returns:
            Text representation
        """
        ...

    def decode(self, text: str) -> Dict[str, Any]:
        """
        Decode text produced by encode() back into a document.

        Args:
            text: Previously encoded text

        Returns:
            The decoded document
        """
        ...

    def content_type(self) -> str:
        """
        Return the MIME content type for this encoding.

        Returns:
            Content type string (e.g., "application/json")
        """
        ...
