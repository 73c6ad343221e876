#!/usr/bin/env python3
"""
tokenflow-specific exceptions.

All tokenflow exceptions inherit from TokenFlowError for easy catching.
"""


class TokenFlowError(Exception):
    """Base exception for all tokenflow errors."""


class ConfigurationError(TokenFlowError, ValueError):
    """Invalid session or history configuration."""


class SnapshotError(TokenFlowError):
    """A history snapshot could not be decoded back into a document."""
