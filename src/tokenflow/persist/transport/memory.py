#!/usr/bin/env python3
"""
tokenflow Memory Transports

In-process stores, for tests and for hosts that persist elsewhere.
"""

from __future__ import annotations

from typing import Dict, List, Optional


class MemoryStore:
    """Slot store backed by a dict."""

    def __init__(self, slots: Optional[Dict[str, str]] = None):
        self.slots: Dict[str, str] = dict(slots or {})
        self.writes = 0

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, text: str) -> None:
        self.slots[key] = text
        self.writes += 1

    def close(self) -> None:
        pass


class MemoryTextSink:
    """Text sink that keeps every version written to it."""

    def __init__(self, text: Optional[str] = None):
        self.text = text
        self.history: List[str] = []

    def read(self) -> Optional[str]:
        return self.text

    def write(self, text: str) -> None:
        self.text = text
        self.history.append(text)

    def close(self) -> None:
        pass
