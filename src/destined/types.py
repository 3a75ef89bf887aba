"""Shared type aliases for destined."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:
    from destined.future import Future

__all__ = ["Cancel", "Computation", "FileTarget", "NO_OP", "PathLike", "Probe"]

PathLike = Union[str, "os.PathLike[str]"]

# An already open descriptor is accepted wherever a file is read or written.
FileTarget = Union[PathLike, int]

# Procedure invoked when a running computation is abandoned
Cancel = Callable[[], None]

# Start procedure: receives (reject, resolve), starts the work, returns its Cancel
Computation = Callable[[Callable[[Any], None], Callable[[Any], None]], Cancel]

# Turns a lookup candidate into a deferred computation
Probe = Callable[[Any], "Future"]


def NO_OP() -> None:
    """Cancellation procedure that does nothing."""
