"""Mounting update images into the running installation system.

Each image is mounted read-only at a fresh mount point, spliced into
the root with ``adddir``, and recorded in the ``instsys.parts`` manifest.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import MOUNT_POINT_INDEX_WIDTH, MOUNT_POINT_NAME_PREFIX, ROOT_DIR
from core.errors import CouldNotBeApplied, CouldNotMountUpdate
from core.logging_config import get_logger
from core.types import MountRecord
from update.commands import adddir_command, mount_command
from update.image_registry import ImageRegistry
from update.naming import next_free_path
from update.process_runner import ProcessRunner

_LOGGER = get_logger(__name__)


class ApplyEngine:
    """Applies the images of a registry to the live root."""

    def __init__(self, runner: ProcessRunner, manifest_path: Path) -> None:
        self._runner = runner
        self._manifest_path = manifest_path

    def apply(self, registry: ImageRegistry, updates_root: Path) -> tuple[MountRecord, ...]:
        """Mount and register every image that is not mounted yet.

        Already completed mounts and manifest lines stay in place when a
        later image fails.

        Args:
            registry: Images to apply, in insertion order.
            updates_root: Directory holding the mount points.

        Returns:
            Mount records created by this call.

        Raises:
            CouldNotMountUpdate: If an image cannot be mounted.
            CouldNotBeApplied: If a mounted image cannot be spliced into the root.
        """
        applied: list[MountRecord] = []
        for image_file in registry.image_files:
            if registry.mount_for(image_file) is not None:
                continue
            used_mount_points = [record.mount_point for record in registry.mounts]
            mount_point = next_free_path(
                updates_root,
                MOUNT_POINT_NAME_PREFIX,
                MOUNT_POINT_INDEX_WIDTH,
                reserved=used_mount_points,
            )
            record = MountRecord(image_file=image_file, mount_point=mount_point)
            self._mount(record)
            registry.record_mount(record)
            self._splice(record)
            applied.append(record)
            _LOGGER.info(
                "update_applied",
                image_file=str(image_file),
                mount_point=str(mount_point),
            )
        return tuple(applied)

    def _mount(self, record: MountRecord) -> None:
        try:
            record.mount_point.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise CouldNotMountUpdate(
                f"Could not create mount point {record.mount_point}: {error}."
            ) from error
        result = self._runner.run(mount_command(record.image_file, record.mount_point))
        if not result.succeeded:
            raise CouldNotMountUpdate(
                f"Could not mount {record.image_file} at {record.mount_point} "
                f"(exit {result.exit_code}): {result.stderr.strip()}"
            )

    def _splice(self, record: MountRecord) -> None:
        result = self._runner.run(adddir_command(record.mount_point, ROOT_DIR))
        if not result.succeeded:
            raise CouldNotBeApplied(
                f"Could not add {record.mount_point} to the installation system "
                f"(exit {result.exit_code}): {result.stderr.strip()}"
            )
        self._append_manifest_line(record)

    def _append_manifest_line(self, record: MountRecord) -> None:
        line = f"{manifest_image_path(record.image_file)} {record.mount_point}\n"
        try:
            self._manifest_path.parent.mkdir(parents=True, exist_ok=True)
            with self._manifest_path.open("a", encoding="utf-8") as manifest:
                manifest.write(line)
        except OSError as error:
            raise CouldNotBeApplied(
                f"Could not record {record.mount_point} in {self._manifest_path}: {error}."
            ) from error


def manifest_image_path(image_file: Path) -> Path:
    """Return an image path relative to the filesystem root."""
    absolute_path = image_file.absolute()
    return absolute_path.relative_to(absolute_path.anchor)
