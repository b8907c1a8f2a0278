"""Update image tracking and rollback.

This module tracks the squashed images produced for one repository,
their mount records, and the transactional batches used by fetch so a
failed batch never leaves images on disk.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from core.logging_config import get_logger
from core.types import MountRecord

_LOGGER = get_logger(__name__)


class ImageRegistry:
    """Ordered set of image files owned by one update repository."""

    def __init__(self) -> None:
        self._image_files: list[Path] = []
        self._mounts: dict[Path, MountRecord] = {}

    @property
    def image_files(self) -> tuple[Path, ...]:
        """Snapshot of tracked image files in insertion order."""
        return tuple(self._image_files)

    @property
    def mounts(self) -> tuple[MountRecord, ...]:
        """Mount records in the order images were mounted."""
        return tuple(self._mounts.values())

    def __len__(self) -> int:
        return len(self._image_files)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.image_files)

    def add(self, image_file: Path) -> None:
        """Track one image file."""
        if image_file not in self._image_files:
            self._image_files.append(image_file)

    def mount_for(self, image_file: Path) -> MountRecord | None:
        """Return the mount record of an image, if it is mounted."""
        return self._mounts.get(image_file)

    def record_mount(self, record: MountRecord) -> None:
        """Record where an image was mounted.

        Raises:
            ValueError: If the image is untracked or already mounted.
        """
        if record.image_file not in self._image_files:
            raise ValueError(f"Cannot record mount for untracked image {record.image_file}.")
        if record.image_file in self._mounts:
            raise ValueError(f"Image {record.image_file} is already mounted.")
        self._mounts[record.image_file] = record

    def remove_all(self) -> None:
        """Delete every tracked image file and forget it.

        Files already gone are skipped, so repeated calls are safe.
        """
        removed = _remove_files(self._image_files)
        self._image_files.clear()
        self._mounts.clear()
        if removed:
            _LOGGER.info("update_images_removed", count=len(removed))

    @contextmanager
    def batch(self) -> Iterator["ImageBatch"]:
        """Open a batch that commits on success and aborts on any error."""
        image_batch = ImageBatch(self)
        try:
            yield image_batch
        except BaseException:
            image_batch.abort()
            raise
        image_batch.commit()


class ImageBatch:
    """Images produced by one fetch call, pending commit."""

    def __init__(self, registry: ImageRegistry) -> None:
        self._registry = registry
        self._pending: list[Path] = []
        self._closed = False

    @property
    def image_files(self) -> tuple[Path, ...]:
        """Images produced so far in this batch."""
        return tuple(self._pending)

    def add(self, image_file: Path) -> None:
        """Record an image produced in this batch.

        Raises:
            RuntimeError: If the batch was already committed or aborted.
        """
        if self._closed:
            raise RuntimeError("Cannot add images to a closed batch.")
        self._pending.append(image_file)

    def commit(self) -> tuple[Path, ...]:
        """Move pending images into the registry."""
        if self._closed:
            return ()
        committed = tuple(self._pending)
        for image_file in committed:
            self._registry.add(image_file)
        self._pending.clear()
        self._closed = True
        return committed

    def abort(self) -> None:
        """Delete the images produced in this batch."""
        if self._closed:
            return
        removed = _remove_files(self._pending)
        self._pending.clear()
        self._closed = True
        _LOGGER.warning("fetch_batch_aborted", removed_count=len(removed))


def _remove_files(paths: list[Path]) -> list[Path]:
    removed: list[Path] = []
    for path in paths:
        if path.exists():
            removed.append(path)
        path.unlink(missing_ok=True)
    return removed
