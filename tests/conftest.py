"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from destined import fs
from destined.config import RemoveConfig
from destined.filesystem import AioFileSystem

FIXTURE_DIR = Path(__file__).parent / "fixture"


@pytest.fixture
def fixture_dir() -> Path:
    """Directory holding the static fixture tree."""
    return FIXTURE_DIR


@pytest.fixture
def fixture_root() -> Path:
    """Directory containing ``fixture/``, for globbing relative paths."""
    return FIXTURE_DIR.parent


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small writable tree.

    Layout::

        tmp/a.txt
        tmp/b.txt
        tmp/nested/c.txt
    """
    (tmp_path / "a.txt").write_text("alpha")
    (tmp_path / "b.txt").write_text("bravo")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "c.txt").write_text("charlie")
    return tmp_path


# ============================================================================
# Recording FileSystem Fixture
# ============================================================================


class SlowRemovalFileSystem(AioFileSystem):
    """Real filesystem whose removals take a while and are counted.

    Tracks how many removals are in flight so tests can check batch limits.
    """

    def __init__(self, delay: float = 0.01, fail_on: set[str] | None = None) -> None:
        self.delay = delay
        self.fail_on = fail_on or set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.removed: list[str] = []
        self.cancelled = 0

    async def remove(self, path, config: RemoveConfig) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if str(path) in self.fail_on:
                raise FileNotFoundError(2, "No such file or directory", str(path))
            self.removed.append(str(path))
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        finally:
            self.in_flight -= 1


@pytest.fixture
def slow_filesystem(monkeypatch: pytest.MonkeyPatch) -> SlowRemovalFileSystem:
    """Swap the backend used by destined.fs for a counting one."""
    backend = SlowRemovalFileSystem()
    monkeypatch.setattr(fs, "filesystem", backend)
    return backend
