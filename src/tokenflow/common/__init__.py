"""
Shared helpers for tokenflow.
"""

from .acyclic import acyclic_copy, MISSING

__all__ = ["acyclic_copy", "MISSING"]
