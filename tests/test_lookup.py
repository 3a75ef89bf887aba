"""Tests for race-based lookups."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from destined.fs import read_file
from destined.future import Future, after, reject_after
from destined.lookup import (
    dig_up,
    dig_up_with_cancel,
    find_file,
    read_any,
    read_any_or,
    require_any_or,
)


class TestFindFile:
    """Tests for find_file."""

    @pytest.mark.asyncio
    async def test_empty_candidates_yield_default(self) -> None:
        """Test no candidates means the default, with no probing."""
        probe = MagicMock()

        assert await find_file(probe, None, []) is None
        probe.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_then_missing(self, sample_tree: Path) -> None:
        """Test the readable candidate wins when listed first."""
        result = await find_file(
            read_file, None, [sample_tree / "a.txt", sample_tree / "missing.txt"]
        )
        assert result == "alpha"

    @pytest.mark.asyncio
    async def test_missing_then_valid(self, sample_tree: Path) -> None:
        """Test the readable candidate wins when listed last."""
        result = await find_file(
            read_file, None, [sample_tree / "missing.txt", sample_tree / "a.txt"]
        )
        assert result == "alpha"

    @pytest.mark.asyncio
    async def test_all_missing_yield_default(self, tmp_path: Path) -> None:
        """Test the default when nothing is readable."""
        result = await find_file(read_file, "fallback", [tmp_path / "x", tmp_path / "y"])
        assert result == "fallback"

    @pytest.mark.asyncio
    async def test_fastest_success_wins(self) -> None:
        """Test list order does not decide the winner."""
        delays = {"slow": 0.05, "fast": 0.001, "broken": None}

        def probe(name: str) -> Future:
            delay = delays[name]
            if delay is None:
                return reject_after(0.0005, OSError(name))
            return after(delay, name)

        assert await find_file(probe, None, ["slow", "broken", "fast"]) == "fast"

    def test_losers_are_cancelled(self) -> None:
        """Test remaining candidates are abandoned once one succeeds."""
        cancel = MagicMock()

        def probe(name: str) -> Future:
            if name == "hit":
                return Future.resolve(name)
            return Future(lambda reject, resolve: cancel)

        on_success = MagicMock()
        find_file(probe, None, ["pending", "hit"]).run(on_success, MagicMock())

        on_success.assert_called_once_with("hit")
        cancel.assert_called_once_with()


class TestReadAny:
    """Tests for read_any and require_any_or."""

    @pytest.mark.asyncio
    async def test_read_any(self, sample_tree: Path) -> None:
        """Test reading the one existing candidate."""
        result = await read_any([sample_tree / "nope.txt", sample_tree / "nested" / "c.txt"])
        assert result == "charlie"

    @pytest.mark.asyncio
    async def test_read_any_none(self, tmp_path: Path) -> None:
        """Test None when no candidate exists."""
        assert await read_any([tmp_path / "nope.txt"]) is None

    @pytest.mark.asyncio
    async def test_read_any_or_bytes(self, sample_tree: Path) -> None:
        """Test reading bytes with a custom default."""
        assert await read_any_or(b"", None, [sample_tree / "b.txt"]) == b"bravo"

    @pytest.mark.asyncio
    async def test_require_any_or(self, sample_tree: Path) -> None:
        """Test the readable candidate's path is the result."""
        target = sample_tree / "b.txt"
        assert await require_any_or(None, [sample_tree / "nope", target]) == target

    @pytest.mark.asyncio
    async def test_require_any_or_default(self, tmp_path: Path) -> None:
        """Test the default when nothing is readable."""
        assert await require_any_or("default.toml", [tmp_path / "nope"]) == "default.toml"


class TestDigUp:
    """Tests for dig_up."""

    @pytest.mark.asyncio
    async def test_finds_file_in_ancestor(self, tmp_path: Path) -> None:
        """Test the nearest ancestor containing the file is found."""
        (tmp_path / "pyproject.toml").write_text("")
        start = tmp_path / "src" / "pkg"
        start.mkdir(parents=True)

        result = await dig_up_with_cancel(MagicMock(), {"cwd": start}, "pyproject.toml")

        assert result == str((tmp_path / "pyproject.toml").resolve())

    @pytest.mark.asyncio
    async def test_prefers_nearest(self, tmp_path: Path) -> None:
        """Test a closer match wins over a farther one."""
        (tmp_path / "setup.cfg").write_text("")
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / "setup.cfg").write_text("")

        result = await dig_up_with_cancel(MagicMock(), {"cwd": inner}, ["setup.cfg"])

        assert result == str((inner / "setup.cfg").resolve())

    @pytest.mark.asyncio
    async def test_stop_at(self, tmp_path: Path) -> None:
        """Test the search stops at stop_at."""
        (tmp_path / "marker").write_text("")
        start = tmp_path / "a" / "b"
        start.mkdir(parents=True)

        config = {"cwd": start, "stopAt": tmp_path / "a"}
        assert await dig_up_with_cancel(MagicMock(), config, "marker") is None

    @pytest.mark.asyncio
    async def test_directory_kind(self, tmp_path: Path) -> None:
        """Test searching for a directory."""
        (tmp_path / ".git").mkdir()
        start = tmp_path / "deep"
        start.mkdir()

        result = await dig_up_with_cancel(MagicMock(), {"cwd": start, "type": "directory"}, ".git")

        assert result == str((tmp_path / ".git").resolve())

    @pytest.mark.asyncio
    async def test_dig_up_from_cwd(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the default start is the working directory."""
        (tmp_path / "marker.txt").write_text("")
        monkeypatch.chdir(tmp_path)

        assert await dig_up("marker.txt") == str((tmp_path / "marker.txt").resolve())
