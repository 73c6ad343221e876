#!/usr/bin/env python3
"""
tokenflow Encoders

Encoders for serializing net documents.
"""

from .base import Encoder
from .canonical import CanonicalEncoder, encode, decode, content_id, same_content

__all__ = ['Encoder', 'CanonicalEncoder', 'encode', 'decode', 'content_id', 'same_content']
