"""Lookups across several candidate locations.

Candidates are probed concurrently and the first one to succeed wins. Which
candidate wins when several succeed depends on which I/O completes first, not
on list order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from functools import partial
from pathlib import Path
from typing import Any

import aiofiles.os

from destined.config import DEFAULT_DIG_UP_CONFIG, DigUpConfig, coerce_config
from destined.fs import read_file_with_format_and_cancel, readable
from destined.future import Future, first_success
from destined.types import NO_OP, Cancel, PathLike, Probe

logger = logging.getLogger(__name__)


def find_file(probe: Probe, default: Any, candidates: Iterable[Any]) -> Future[Any, Any]:
    """Race ``probe`` over ``candidates`` and keep the first success.

    A failing candidate only drops out of the race. With no candidates, or
    when every candidate fails, the future succeeds with ``default``; an empty
    candidate list performs no I/O.

    Args:
        probe: Builds a future for one candidate, e.g. :func:`destined.fs.read_file`.
        default: Value used when no candidate succeeds.
        candidates: Inputs to probe.

    Returns:
        Future of the winning candidate's success value, or ``default``.
    """
    probes = [probe(candidate).map_rej(lambda _: False) for candidate in candidates]
    if not probes:
        return Future.resolve(default)
    return first_success(probes).chain_rej(lambda _: Future.resolve(default))


def read_any_or(default: Any, encoding: str | None, candidates: Iterable[PathLike]) -> Future:
    """Content of the first readable candidate file, or ``default``."""
    return find_file(partial(read_file_with_format_and_cancel, NO_OP, encoding), default, candidates)


def read_any(candidates: Iterable[PathLike]) -> Future:
    """UTF-8 content of the first readable candidate file, or None."""
    return read_any_or(None, "utf-8", candidates)


def require_any_or(default: Any, candidates: Iterable[PathLike]) -> Future:
    """First candidate path that is readable, or ``default``."""

    def probe(candidate: PathLike) -> Future:
        return readable(candidate).map(lambda _: candidate)

    return find_file(probe, default, candidates)


def dig_up_with_cancel(
    cancel: Cancel, config: DigUpConfig | dict | None, names: str | Iterable[str]
) -> Future[OSError, str | None]:
    """Find the nearest ancestor directory entry named one of ``names``.

    Starting at ``config.cwd`` (default: the working directory), each
    directory is checked for the names in order, then its parent, up to the
    filesystem root or ``config.stop_at``.

    Args:
        cancel: Invoked if the search is abandoned.
        config: Start directory, stop directory and entry kind.
        names: File or directory name(s) to look for.

    Returns:
        Future of the absolute path found, or None.
    """
    search = coerce_config(DigUpConfig, config)
    wanted = [names] if isinstance(names, str) else list(names)

    async def dig() -> str | None:
        start = Path(search.cwd or os.getcwd()).resolve()
        stop = Path(search.stop_at).resolve() if search.stop_at else None
        for directory in [start, *start.parents]:
            for name in wanted:
                candidate = directory / name
                if await _matches_kind(candidate, search.kind):
                    logger.debug("Found %s at %s", name, candidate)
                    return str(candidate)
            if directory == stop:
                break
        return None

    return Future.from_coroutine(dig, cancel)


dig_up = partial(dig_up_with_cancel, NO_OP, DEFAULT_DIG_UP_CONFIG)


async def _matches_kind(path: Path, kind: str) -> bool:
    if kind == "file":
        return bool(await aiofiles.os.path.isfile(path))
    if kind == "directory":
        return bool(await aiofiles.os.path.isdir(path))
    return bool(await aiofiles.os.path.exists(path))
