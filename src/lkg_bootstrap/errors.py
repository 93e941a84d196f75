"""Exception hierarchy for the bootstrap resolution engine."""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(BootstrapError):
    """A required value has no override and no fallback path."""


class CacheError(BootstrapError):
    """The persistent key cache could not be read or written."""
