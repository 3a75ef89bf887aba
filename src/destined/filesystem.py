"""Async filesystem backend.

This module provides the coroutines every wrapper in :mod:`destined.fs`
delegates to. AioFileSystem wraps aiofiles, and runs blocking standard library
calls (glob, rmtree, access, positioned I/O) through ``aiofiles.os.wrap``.

Errors raised by the platform are never translated.
"""

from __future__ import annotations

import asyncio
import errno
import fnmatch
import glob as globlib
import logging
import os
import shutil
import stat
from functools import partial

import aiofiles
import aiofiles.os

from destined.config import GlobConfig, MkdirConfig, RemoveConfig, WriteConfig
from destined.errors import GlobConfigError
from destined.types import FileTarget, PathLike

logger = logging.getLogger(__name__)

# Error codes worth another removal attempt when max_retries allows it
RETRYABLE_REMOVE_ERRORS = {errno.EBUSY, errno.EMFILE, errno.ENFILE, errno.ENOTEMPTY, errno.EPERM}

SYNC_GLOB_MESSAGE = "callback provided to sync glob"

_access = aiofiles.os.wrap(os.access)
_glob = aiofiles.os.wrap(globlib.glob)
_rmtree = aiofiles.os.wrap(shutil.rmtree)
_preadv = aiofiles.os.wrap(os.preadv)
_readv = aiofiles.os.wrap(os.readv)
_pwrite = aiofiles.os.wrap(os.pwrite)
_write = aiofiles.os.wrap(os.write)


class AioFileSystem:
    """Production filesystem implementation.

    Wraps aiofiles and the standard library.
    Satisfies the AsyncFileSystem protocol structurally.
    """

    async def read(self, target: FileTarget, encoding: str | None = "utf-8") -> str | bytes:
        """Read text, or bytes when ``encoding`` is None."""
        logger.debug("Reading %s", target)
        mode = "rb" if encoding is None else "r"
        async with aiofiles.open(
            target, mode, encoding=encoding, closefd=not isinstance(target, int)
        ) as f:
            return await f.read()

    async def write(self, target: FileTarget, content: str | bytes, config: WriteConfig) -> None:
        """Write content using the flag, mode and encoding in ``config``."""
        logger.debug("Writing %s", target)
        binary = isinstance(content, (bytes, bytearray, memoryview))
        mode = config.flag if not binary or "b" in config.flag else f"{config.flag}b"
        kwargs = {"closefd": not isinstance(target, int)}
        if not binary:
            kwargs["encoding"] = config.encoding
        if not isinstance(target, int):
            kwargs["opener"] = partial(_open_with_mode, config.mode)
        async with aiofiles.open(target, mode, **kwargs) as f:
            await f.write(content)

    async def remove(self, path: PathLike, config: RemoveConfig) -> None:
        """Remove a path, retrying transient failures with linear backoff."""
        attempt = 0
        while True:
            try:
                await self._remove_once(path, config)
                return
            except OSError as e:
                if e.errno not in RETRYABLE_REMOVE_ERRORS or attempt >= config.max_retries:
                    raise
                attempt += 1
                logger.debug(
                    "Removal of %s failed with %s, retry %d of %d",
                    path,
                    errno.errorcode.get(e.errno, e.errno),
                    attempt,
                    config.max_retries,
                )
                await asyncio.sleep(config.retry_delay * attempt / 1000)

    async def _remove_once(self, path: PathLike, config: RemoveConfig) -> None:
        logger.debug("Removing %s", path)
        try:
            info = await aiofiles.os.stat(path, follow_symlinks=False)
        except FileNotFoundError:
            if config.force:
                return
            raise
        if stat.S_ISDIR(info.st_mode):
            if not config.recursive:
                raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), os.fspath(path))
            await _rmtree(path)
        else:
            await aiofiles.os.remove(path)

    async def mkdir(self, path: PathLike, config: MkdirConfig) -> None:
        """Create a directory; recursive creation tolerates an existing one."""
        logger.debug("Creating directory %s", path)
        if config.recursive:
            await aiofiles.os.makedirs(path, mode=config.mode, exist_ok=True)
        else:
            await aiofiles.os.mkdir(path, mode=config.mode)

    async def access(self, path: PathLike, mode: int) -> bool:
        """Check ``mode`` permissions, raising the reason when denied."""
        await aiofiles.os.stat(path)
        if mode != os.F_OK and not await _access(path, mode):
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), os.fspath(path))
        return True

    async def glob(self, pattern: str, config: GlobConfig) -> list[str]:
        """List paths matching ``pattern``.

        Raises:
            GlobConfigError: If synchronous matching was requested.
        """
        if config.sync:
            raise GlobConfigError(SYNC_GLOB_MESSAGE)
        logger.debug("Globbing %s in %s", pattern, config.cwd or os.getcwd())
        root = config.cwd or None
        matches = await _glob(
            pattern, root_dir=root, recursive=True, include_hidden=config.dot
        )
        results = []
        for match in matches:
            stripped = match.rstrip("/" + os.sep) or match
            if _is_ignored(stripped, config.ignore):
                continue
            is_dir = await aiofiles.os.path.isdir(os.path.join(root or "", stripped))
            if config.nodir and is_dir:
                continue
            if config.absolute:
                stripped = os.path.abspath(os.path.join(root or "", stripped))
            if config.mark and is_dir:
                stripped = stripped + os.sep
            results.append(stripped)
        return sorted(results)

    async def pread(
        self, fd: int, buffer: bytearray, offset: int, length: int, position: int | None
    ) -> int:
        """Read into ``buffer[offset:offset + length]``."""
        view = memoryview(buffer)[offset : offset + length]
        if position is None:
            return await _readv(fd, [view])
        return await _preadv(fd, [view], position)

    async def pwrite(
        self, fd: int, buffer: bytes, offset: int, length: int, position: int | None
    ) -> int:
        """Write ``buffer[offset:offset + length]``."""
        chunk = bytes(memoryview(buffer)[offset : offset + length])
        if position is None:
            return await _write(fd, chunk)
        return await _pwrite(fd, chunk, position)


def _open_with_mode(mode: int, path: str, flags: int) -> int:
    """``open`` opener applying permission bits to newly created files."""
    return os.open(path, flags, mode)


def _is_ignored(path: str, patterns: list[str]) -> bool:
    """Whether ``path`` matches an ignore pattern.

    A leading ``**/`` also matches at the top level, and a trailing ``/**``
    also ignores the directory it names.
    """
    return any(
        fnmatch.fnmatchcase(path, form) for pattern in patterns for form in _pattern_forms(pattern)
    )


def _pattern_forms(pattern: str) -> list[str]:
    forms = [pattern]
    if pattern.startswith("**/"):
        forms.append(pattern[3:])
    if pattern.endswith("/**"):
        forms.extend(form[:-3] for form in list(forms))
    return forms


def _default_filesystem() -> AioFileSystem:
    """Create the default filesystem implementation."""
    return AioFileSystem()
