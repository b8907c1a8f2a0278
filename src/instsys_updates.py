"""Public SDK surface for installer updates.

This module provides a stable import path for installer workflows.
It re-exports the update repository facade, its collaborator
contracts, and the error taxonomy callers are expected to handle.
"""

from __future__ import annotations

from core.config import UpdatesConfig
from core.errors import (
    CouldNotBeApplied,
    CouldNotFetchUpdate,
    CouldNotMountUpdate,
    CouldNotProbeRepo,
    CouldNotRefreshRepo,
    NotValidRepo,
    PackageDownloadError,
    PackageExtractionError,
    UpdateRepositoryError,
    UpdatesError,
)
from core.types import MountRecord, PackageDescriptor, RepositoryOrigin
from repository.resolver import Resolver
from repository.update_repository import UpdateRepository
from update.package_io import PackageDownloader, PackageExtractor
from update.process_runner import ProcessRunner, SubprocessRunner

__all__ = [
    "CouldNotBeApplied",
    "CouldNotFetchUpdate",
    "CouldNotMountUpdate",
    "CouldNotProbeRepo",
    "CouldNotRefreshRepo",
    "MountRecord",
    "NotValidRepo",
    "PackageDescriptor",
    "PackageDownloadError",
    "PackageDownloader",
    "PackageExtractionError",
    "PackageExtractor",
    "ProcessRunner",
    "RepositoryOrigin",
    "Resolver",
    "SubprocessRunner",
    "UpdateRepository",
    "UpdateRepositoryError",
    "UpdatesConfig",
    "UpdatesError",
]
