"""Shared typed models.

This module defines immutable data models used by the repository,
materialization, and apply layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from core.constants import REPOSITORY_ALIAS, REPOSITORY_NAME, REPOSITORY_PRODUCT_DIR


class RepositoryOrigin(str, Enum):
    """How an update repository was introduced."""

    DEFAULT = "default"
    USER = "user"


@dataclass(frozen=True)
class PackageDescriptor:
    """One package contributed by a resolver source.

    Attributes:
        name: Package name, used for sorting and download.
        path: Package path relative to the repository root.
        source_id: Resolver handle of the contributing source.
    """

    name: str
    path: str
    source_id: int


@dataclass(frozen=True)
class SourceConfig:
    """Registration payload for a resolver source.

    Attributes:
        base_urls: Repository base URLs.
        repo_type: Probed repository type.
        product_dir: Fixed product directory inside the repository.
        name: Display name of the source.
        alias: Unique resolver alias.
    """

    base_urls: tuple[str, ...]
    repo_type: str
    product_dir: str = REPOSITORY_PRODUCT_DIR
    name: str = REPOSITORY_NAME
    alias: str = REPOSITORY_ALIAS


@dataclass(frozen=True)
class MountRecord:
    """An update image mounted into the live file tree."""

    image_file: Path
    mount_point: Path


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of one external command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """Return whether the command exited with status zero."""
        return self.exit_code == 0
