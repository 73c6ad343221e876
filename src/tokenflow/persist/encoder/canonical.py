#!/usr/bin/env python3
"""
tokenflow Canonical Encoder

Deterministic JSON text for net documents, used for persistence, change
detection and history snapshots.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from multiformats import CID, multihash

from tokenflow.common.acyclic import acyclic_copy, MISSING
from tokenflow.exceptions import SnapshotError

from .base import Encoder


class CanonicalEncoder(Encoder):
    """
    Canonical JSON encoder.

    Mapping keys are sorted at every level and sequence order is kept, so two
    documents holding the same data encode to the same text regardless of
    insertion order. The walk is cycle-safe: a dict or list reached a second
    time is left out (dropped from a mapping, null inside a sequence).

    The unbounded capacity marker (None) is written as null and read back as
    None, so it survives a round trip unchanged.

    Example output (pretty):
        {
          "@context": "https://pflow.xyz/schema",
          "arcs": [],
          ...
        }

    Args:
        compact: Emit no whitespace instead of a two-space indent
    """

    def __init__(self, compact: bool = False):
        self.compact = compact

    def encode(self, doc: Dict[str, Any]) -> str:
        """
        Encode a document to canonical JSON text.

        Args:
            doc: The document (any JSON-like value is accepted)

        Returns:
            Canonical text
        """
        tree = acyclic_copy(doc, sort_keys=True)
        if tree is MISSING:
            tree = None

        if self.compact:
            return json.dumps(tree, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
        return json.dumps(tree, indent=2, ensure_ascii=False, allow_nan=False)

    def decode(self, text: str) -> Dict[str, Any]:
        """
        Decode canonical text back into a document.

        Raises:
            SnapshotError: If the text is not a JSON object
        """
        try:
            value = json.loads(text)
        except (TypeError, ValueError, RecursionError) as e:
            raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
        if not isinstance(value, dict):
            raise SnapshotError(f"Snapshot holds a {type(value).__name__}, not an object")
        return value

    def content_type(self) -> str:
        """Return the JSON content type."""
        return "application/json"


_pretty = CanonicalEncoder()
_compact = CanonicalEncoder(compact=True)


def encode(doc: Dict[str, Any], compact: bool = False) -> str:
    """Canonical text of a document in pretty or compact mode."""
    return (_compact if compact else _pretty).encode(doc)


def decode(text: str) -> Dict[str, Any]:
    return _pretty.decode(text)


def same_content(a: Dict[str, Any], b: Dict[str, Any]) -> bool:
    """Change-detection equality: equal canonical encodings."""
    return encode(a, compact=True) == encode(b, compact=True)


def content_id(doc: Dict[str, Any]) -> str:
    """
    Stable identifier of a document's content.

    A CIDv1 over the compact canonical encoding: dag-json codec, sha2-256
    multihash, base58btc multibase.

    Returns:
        The CID string (starts with "z")
    """
    data = encode(doc, compact=True).encode('utf-8')
    return str(CID("base58btc", 1, "dag-json", multihash.digest(data, "sha2-256")))
