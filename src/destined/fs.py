"""Future-wrapped filesystem operations.

Every operation returns an inert :class:`~destined.future.Future`; nothing
touches the disk until the future runs. Each operation comes in a fully
parameterised form taking a cancellation procedure and a configuration, plus
narrower forms with those fixed:

- ``*_with_config_and_cancel(cancel, config, ...)``
- ``*_with_config(config, ...)``: no-op cancellation
- the bare name: default configuration

Configuration may be a model from :mod:`destined.config` or a plain mapping.
Failures are whatever the underlying call raised.

Example:
    >>> async def main():
    ...     await write_file_with_auto_path("out/nested/file.txt", "hello")
    ...     return await read_file("out/nested/file.txt")
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterable, Mapping
from functools import partial
from typing import Any

import yaml

from destined.config import (
    DEFAULT_GLOB_CONFIG,
    DEFAULT_READ_CONFIG,
    DEFAULT_REMOVAL_CONFIG,
    DEFAULT_REMOVE_CONFIG,
    DEFAULT_WRITE_CONFIG,
    FORCE_REMOVE_CONFIG,
    RECURSIVE_MKDIR_CONFIG,
    GlobConfig,
    MkdirConfig,
    ReadConfig,
    RemovalConfig,
    RemoveConfig,
    WriteConfig,
    coerce_config,
)
from destined.filesystem import _default_filesystem
from destined.future import Future, parallel
from destined.path import directory_only
from destined.protocols import AsyncFileSystem
from destined.types import NO_OP, Cancel, FileTarget, PathLike

ConfigLike = Mapping[str, Any] | None

filesystem: AsyncFileSystem = _default_filesystem()


# ============================================================================
# Reading
# ============================================================================


def read_file_with_format_and_cancel(
    cancel: Cancel, encoding: str | None | ReadConfig | ConfigLike, target: FileTarget
) -> Future[OSError, str | bytes]:
    """Read a whole file.

    Args:
        cancel: Invoked if the read is abandoned.
        encoding: Text encoding, None for bytes, or a read configuration.
        target: Path, or an open descriptor which is left open.

    Returns:
        Future of the file content.
    """
    if encoding is not None and not isinstance(encoding, str):
        encoding = coerce_config(ReadConfig, encoding).encoding
    return Future.from_coroutine(lambda: filesystem.read(target, encoding), cancel)


def read_file_with_cancel(cancel: Cancel, target: FileTarget) -> Future[OSError, str]:
    """Read a UTF-8 file."""
    return read_file_with_format_and_cancel(cancel, DEFAULT_READ_CONFIG, target)


read_file = partial(read_file_with_cancel, NO_OP)


def read_json_file_with_cancel(cancel: Cancel, target: FileTarget) -> Future[Exception, Any]:
    """Read and parse a JSON file. Malformed JSON fails with JSONDecodeError."""
    return read_file_with_cancel(cancel, target).map(json.loads)


read_json_file = partial(read_json_file_with_cancel, NO_OP)


def read_yaml_file_with_cancel(cancel: Cancel, target: FileTarget) -> Future[Exception, Any]:
    """Read and parse a YAML file. Malformed YAML fails with yaml.YAMLError."""
    return read_file_with_cancel(cancel, target).map(yaml.safe_load)


read_yaml_file = partial(read_yaml_file_with_cancel, NO_OP)


def read_dir_with_config_and_cancel(
    cancel: Cancel, config: GlobConfig | ConfigLike, pattern: str
) -> Future[Exception, list[str]]:
    """List the paths matching a glob pattern.

    Asking for ``sync`` fails the future with
    :class:`~destined.errors.GlobConfigError` rather than raising.

    Args:
        cancel: Invoked if the listing is abandoned.
        config: Glob options such as ``ignore`` and ``cwd``.
        pattern: Glob pattern.

    Returns:
        Future of the sorted matches.

    Example:
        >>> read_dir_with_config({"ignore": ["node_modules/**"]}, "src/*")
    """
    return Future.from_coroutine(
        lambda: filesystem.glob(pattern, coerce_config(GlobConfig, config)), cancel
    )


read_dir_with_config = partial(read_dir_with_config_and_cancel, NO_OP)
read_dir = partial(read_dir_with_config, DEFAULT_GLOB_CONFIG)


# ============================================================================
# Writing
# ============================================================================


def write_file_with_config_and_cancel(
    cancel: Cancel, config: WriteConfig | ConfigLike, target: FileTarget, content: str | bytes
) -> Future[OSError, str | bytes]:
    """Write a whole file.

    Unlike a bare write, the success value is the written content.

    Args:
        cancel: Invoked if the write is abandoned.
        config: Encoding, permission mode and open flag.
        target: Path, or an open descriptor which is left open.
        content: Text or bytes to write.

    Returns:
        Future of ``content``.
    """

    async def write() -> str | bytes:
        await filesystem.write(target, content, coerce_config(WriteConfig, config))
        return content

    return Future.from_coroutine(write, cancel)


write_file_with_config = partial(write_file_with_config_and_cancel, NO_OP)
write_file = partial(write_file_with_config, DEFAULT_WRITE_CONFIG)


# ============================================================================
# Removing
# ============================================================================


def remove_file_with_config_and_cancel(
    cancel: Cancel, config: RemoveConfig | ConfigLike, path: PathLike
) -> Future[OSError, PathLike]:
    """Remove a path.

    Args:
        cancel: Invoked if the removal is abandoned.
        config: ``force``, ``recursive``, ``max_retries``, ``retry_delay``.
        path: Path to remove.

    Returns:
        Future of ``path``.
    """

    async def remove() -> PathLike:
        await filesystem.remove(path, coerce_config(RemoveConfig, config))
        return path

    return Future.from_coroutine(remove, cancel)


remove_file_with_config = partial(remove_file_with_config_and_cancel, NO_OP)
rm = partial(remove_file_with_config, DEFAULT_REMOVE_CONFIG)
remove_file = rm
rimraf = partial(remove_file_with_config, FORCE_REMOVE_CONFIG)


def remove_files_with_config_and_cancel(
    cancel: Cancel, config: RemovalConfig | ConfigLike, paths: Iterable[PathLike]
) -> Future[OSError, list[PathLike]]:
    """Remove many paths with at most ``config.parallel`` removals in flight.

    The batch fails on the first failing removal; paths already removed stay
    removed.

    Args:
        cancel: Given to every per-path removal.
        config: Removal options plus ``parallel``.
        paths: Paths to remove.

    Returns:
        Future of the removed paths, in input order.
    """
    removal = coerce_config(RemovalConfig, config)
    per_path = removal.forwarded()
    return parallel(
        removal.parallel,
        [remove_file_with_config_and_cancel(cancel, per_path, path) for path in paths],
    )


remove_files_with_config = partial(remove_files_with_config_and_cancel, NO_OP)
remove_files = partial(remove_files_with_config, DEFAULT_REMOVAL_CONFIG)


# ============================================================================
# Directories and permissions
# ============================================================================


def mkdir_with_cancel(
    cancel: Cancel, config: MkdirConfig | ConfigLike, path: PathLike
) -> Future[OSError, PathLike]:
    """Create a directory. The success value is ``path``."""

    async def make() -> PathLike:
        await filesystem.mkdir(path, coerce_config(MkdirConfig, config))
        return path

    return Future.from_coroutine(make, cancel)


mkdir = partial(mkdir_with_cancel, NO_OP)
mkdirp = partial(mkdir, RECURSIVE_MKDIR_CONFIG)


def access_with_cancel(cancel: Cancel, permissions: int, path: PathLike) -> Future[OSError, bool]:
    """Check a permission bitmask (``os.F_OK``, ``os.R_OK``, ...) against a path."""
    return Future.from_coroutine(lambda: filesystem.access(path, permissions), cancel)


access = partial(access_with_cancel, NO_OP)
exists = partial(access, os.F_OK)
readable = partial(access, os.R_OK)


# ============================================================================
# Composite operations
# ============================================================================


def write_file_with_auto_path(path: PathLike, content: str | bytes) -> Future[OSError, str | bytes]:
    """Write a file, creating any missing parent directories first.

    Only a missing parent triggers creation; any other failure of the
    existence check, such as a permission error, fails the write.

    Example:
        >>> write_file_with_auto_path("folders/you/must/exist/file.biz", "content")
    """
    directory = directory_only(path)
    if not directory:
        return write_file(path, content)

    def create_missing(error: Exception) -> Future:
        if isinstance(error, FileNotFoundError):
            return mkdirp(directory)
        return Future.reject(error)

    return exists(directory).chain_rej(create_missing).chain(lambda _: write_file(path, content))


# ============================================================================
# Positioned I/O on open descriptors
# ============================================================================

IOOperation = Callable[..., Any]


def io_with_cancel(
    cancel: Cancel,
    operation: IOOperation,
    fd: int,
    buffer: Any,
    offset: int,
    length: int,
    position: int | None,
) -> Future[OSError, int]:
    """Run a positioned read or write against an open descriptor.

    Args:
        cancel: Invoked if the transfer is abandoned.
        operation: Coroutine function such as ``filesystem.pread``.
        fd: Open file descriptor.
        buffer: Buffer to fill or drain.
        offset: Start of the slice of ``buffer`` to use.
        length: Number of bytes to transfer.
        position: File offset, or None for the descriptor's current offset.

    Returns:
        Future of the number of bytes transferred.
    """
    return Future.from_coroutine(
        lambda: operation(fd, buffer, offset, length, position), cancel
    )


io = partial(io_with_cancel, NO_OP)


def read(
    fd: int, buffer: bytearray, offset: int, length: int, position: int | None
) -> Future[OSError, int]:
    """Read up to ``length`` bytes into ``buffer[offset:]``."""
    return io(filesystem.pread, fd, buffer, offset, length, position)


def write(
    fd: int, buffer: bytes, offset: int, length: int, position: int | None
) -> Future[OSError, int]:
    """Write ``buffer[offset:offset + length]``."""
    return io(filesystem.pwrite, fd, buffer, offset, length, position)
