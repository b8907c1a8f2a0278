"""Typed builders for the external filesystem tools.

Commands are argument vectors, never shell strings, so paths with
spaces or metacharacters reach the tools verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.constants import (
    ADDDIR_BINARY,
    EXTRACT_BINARY,
    MKSQUASHFS_BINARY,
    MOUNT_BINARY,
    ROOT_DIR,
)


@dataclass(frozen=True)
class Command:
    """One external program invocation.

    Attributes:
        program: Executable name or path.
        args: Arguments passed to the program.
    """

    program: str
    args: tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector."""
        return [self.program, *self.args]

    def describe(self) -> str:
        """Render the command for logs and error messages."""
        return " ".join(self.argv)


def squashfs_command(source_dir: Path, image_file: Path) -> Command:
    """Compress a directory into a new squashfs image."""
    return Command(
        MKSQUASHFS_BINARY,
        (str(source_dir), str(image_file), "-noappend", "-no-progress"),
    )


def mount_command(image_file: Path, mount_point: Path) -> Command:
    """Mount an image read-only through a loop device."""
    return Command(MOUNT_BINARY, ("-o", "ro,loop", str(image_file), str(mount_point)))


def adddir_command(mount_point: Path, target_dir: Path = ROOT_DIR) -> Command:
    """Splice a mounted tree into the running root filesystem."""
    return Command(ADDDIR_BINARY, (str(mount_point), str(target_dir)))


def extract_command(package_file: Path, destination_dir: Path) -> Command:
    """Unpack a package archive (rpm, tar, cpio) into a directory."""
    return Command(EXTRACT_BINARY, ("-x", "-f", str(package_file), "-C", str(destination_dir)))
