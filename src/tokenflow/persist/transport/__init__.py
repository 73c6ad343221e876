#!/usr/bin/env python3
"""
tokenflow Transports

Destinations a session persists its canonical text into.
"""

from .base import SlotStore, TextSink
from .memory import MemoryStore, MemoryTextSink
from .file import FileStore, FileTextSink

__all__ = [
    'SlotStore',
    'TextSink',
    'MemoryStore',
    'MemoryTextSink',
    'FileStore',
    'FileTextSink',
]
