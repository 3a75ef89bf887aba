"""Errors raised by destined itself.

Errors coming from the platform (``OSError`` and friends), from parsers, or
from interpreted modules are passed through untouched and are not listed here.
"""

from __future__ import annotations

__all__ = ["DestinedError", "GlobConfigError", "PathNormalizationError"]


class DestinedError(Exception):
    """Base class for errors manufactured by this package."""

    pass


class GlobConfigError(DestinedError):
    """Glob options that cannot be honoured by an asynchronous listing."""

    pass


class PathNormalizationError(DestinedError, ValueError):
    """Inputs that cannot be joined into a normalised path."""

    pass
