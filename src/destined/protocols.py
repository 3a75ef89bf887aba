"""Protocol definitions for core abstractions.

This module defines the async filesystem backend the wrappers delegate to.
Designing to interfaces lets tests substitute a recording backend for the
real one.

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from destined.types import FileTarget, PathLike

if TYPE_CHECKING:
    from destined.config import GlobConfig, MkdirConfig, RemoveConfig, WriteConfig


@runtime_checkable
class AsyncFileSystem(Protocol):
    """Protocol for the async filesystem backend.

    Every method is a coroutine that either returns the natural result of the
    operation or raises the error the platform call produced.
    """

    async def read(self, target: FileTarget, encoding: str | None) -> str | bytes:
        """Read a whole file.

        Args:
            target: Path, or an open descriptor which is left open.
            encoding: Text encoding, or None to read bytes.

        Returns:
            File content.

        Raises:
            FileNotFoundError: If file does not exist.
        """
        ...

    async def write(
        self, target: FileTarget, content: str | bytes, config: WriteConfig
    ) -> None:
        """Write a whole file.

        Args:
            target: Path, or an open descriptor which is left open.
            content: Text or bytes to write.
            config: Encoding, permission mode and open flag.
        """
        ...

    async def remove(self, path: PathLike, config: RemoveConfig) -> None:
        """Remove a file or, when recursive, a directory tree.

        Args:
            path: Path to remove.
            config: Force, recursion and retry behaviour.
        """
        ...

    async def mkdir(self, path: PathLike, config: MkdirConfig) -> None:
        """Create a directory.

        Args:
            path: Path to create.
            config: Recursion and permission mode.
        """
        ...

    async def access(self, path: PathLike, mode: int) -> bool:
        """Check a permission class against a path.

        Args:
            path: Path to check.
            mode: Bitmask of os.F_OK, os.R_OK, os.W_OK, os.X_OK.

        Returns:
            True when every requested permission is granted.

        Raises:
            FileNotFoundError: If path does not exist.
            PermissionError: If a requested permission is denied.
        """
        ...

    async def glob(self, pattern: str, config: GlobConfig) -> list[str]:
        """List paths matching a glob pattern.

        Args:
            pattern: Glob pattern, `**` matching any depth.
            config: Matching options.

        Returns:
            Sorted list of matching paths.
        """
        ...

    async def pread(
        self, fd: int, buffer: bytearray, offset: int, length: int, position: int | None
    ) -> int:
        """Read from a descriptor into a slice of `buffer`.

        Returns:
            Number of bytes read.
        """
        ...

    async def pwrite(
        self, fd: int, buffer: bytes, offset: int, length: int, position: int | None
    ) -> int:
        """Write a slice of `buffer` to a descriptor.

        Returns:
            Number of bytes written.
        """
        ...
