"""Collision-free sequential names inside a directory."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable


def next_free_path(
    directory: Path,
    prefix: str,
    width: int,
    reserved: Iterable[Path] = (),
) -> Path:
    """Return the first ``<prefix><index>`` path not used in ``directory``.

    Indexes start after the highest one found on disk or in ``reserved``,
    so names never come back even after earlier entries were removed.

    Args:
        directory: Parent directory, which may not exist yet.
        prefix: Name prefix, e.g. ``update_``.
        width: Zero-padded index width.
        reserved: Paths already handed out but possibly not yet created.

    Returns:
        Unused path inside ``directory``.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    names = [path.name for path in directory.iterdir()] if directory.is_dir() else []
    names.extend(path.name for path in reserved if path.parent == directory)
    used_indexes = [int(match.group(1)) for match in map(pattern.match, names) if match]
    next_index = max(used_indexes) + 1 if used_indexes else 0
    return directory / f"{prefix}{next_index:0{width}d}"
