"""Error types."""

from __future__ import annotations


class SuccinctError(Exception):
    pass


class ConfigurationError(SuccinctError, ValueError):
    """A configuration value is outside its valid domain."""


class SourceUnavailable(SuccinctError, RuntimeError):
    """The audio input could not be opened."""
