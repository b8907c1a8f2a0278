"""Unit tests for sequential collision-free naming."""

from __future__ import annotations

from pathlib import Path

from update.naming import next_free_path


def test_next_free_path_starts_at_zero(tmp_path: Path) -> None:
    """An empty directory should yield index zero."""
    assert next_free_path(tmp_path, "update_", 3) == tmp_path / "update_000"


def test_next_free_path_handles_missing_directory(tmp_path: Path) -> None:
    """A directory that does not exist yet has no collisions."""
    assert next_free_path(tmp_path / "new", "update_", 4) == tmp_path / "new" / "update_0000"


def test_next_free_path_skips_existing_entries(tmp_path: Path) -> None:
    """Indexes should continue after the highest existing entry."""
    (tmp_path / "update_000").touch()
    (tmp_path / "update_002").touch()
    (tmp_path / "unrelated").touch()

    assert next_free_path(tmp_path, "update_", 3) == tmp_path / "update_003"


def test_next_free_path_honors_reserved_paths(tmp_path: Path) -> None:
    """Reserved paths should count as used even before they exist."""
    reserved = [tmp_path / "update_0004", Path("/elsewhere/update_0009")]

    assert next_free_path(tmp_path, "update_", 4, reserved) == tmp_path / "update_0005"
