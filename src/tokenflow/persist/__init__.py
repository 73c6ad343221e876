#!/usr/bin/env python3
"""
tokenflow.persist - Encoding, history and storage

Canonical text for net documents, the undo/redo history built on it, and the
stores a session writes that text into.
"""

from .encoder import CanonicalEncoder, Encoder, encode, decode, content_id, same_content
from .history import History
from .transport import SlotStore, TextSink, MemoryStore, MemoryTextSink, FileStore, FileTextSink

__all__ = [
    'Encoder',
    'CanonicalEncoder',
    'encode',
    'decode',
    'content_id',
    'same_content',
    'History',
    'SlotStore',
    'TextSink',
    'MemoryStore',
    'MemoryTextSink',
    'FileStore',
    'FileTextSink',
]
