"""Path helpers."""

from __future__ import annotations

import os
from pathlib import PurePath

from destined.errors import PathNormalizationError
from destined.types import PathLike

__all__ = ["directory_only", "localize", "relative_path_join"]


def localize(name: str) -> str:
    """Make a bare name explicitly relative to the current directory.

    Example:
        >>> localize("business")  # on POSIX
        './business'
    """
    return f".{os.sep}{name}"


def directory_only(path: PathLike) -> str:
    """Directory part of ``path``, or an empty string when it has none."""
    return os.path.dirname(os.fspath(path))


def relative_path_join(base: PathLike, other: PathLike) -> str:
    """Join two paths and normalise the result.

    Raises:
        PathNormalizationError: If either input is not a path.
    """
    if not isinstance(base, (str, PurePath)) or not isinstance(other, (str, PurePath)):
        raise PathNormalizationError(f"Cannot normalize bad paths, given ({base}, {other}).")
    return os.path.normpath(os.path.join(base, other))
