"""Update repository facade.

This module composes source registration, catalog queries, package
materialization, image tracking, and apply into the small surface the
installer uses: list packages, fetch them, apply them, clean up.
"""

from __future__ import annotations

from pathlib import Path

from core.config import UpdatesConfig
from core.errors import UpdatesConfigError
from core.logging_config import get_logger
from core.types import MountRecord, PackageDescriptor, RepositoryOrigin
from core.uri_redaction import redact_uri, uri_scheme
from repository.catalog import PackageCatalog
from repository.resolver import Resolver
from repository.session import RepositorySession
from update.apply_engine import ApplyEngine
from update.image_registry import ImageRegistry
from update.materializer import PackageMaterializer
from update.package_io import (
    DownloaderFactory,
    ExtractorFactory,
    archive_extractor_factory,
    resolver_downloader_factory,
)
from update.process_runner import ProcessRunner, SubprocessRunner

_LOGGER = get_logger(__name__)


class UpdateRepository:
    """An external source of installer updates.

    Collaborators are injected; defaults download through the resolver,
    extract with an archive tool, and run tools with subprocess.
    """

    def __init__(
        self,
        uri: str,
        origin: RepositoryOrigin | str = RepositoryOrigin.DEFAULT,
        *,
        resolver: Resolver,
        config: UpdatesConfig | None = None,
        downloader_factory: DownloaderFactory | None = None,
        extractor_factory: ExtractorFactory | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        """Initialize the repository and its pipeline components.

        Args:
            uri: Repository location; may embed credentials.
            origin: ``default`` for installer-provided, ``user`` for user-supplied.
            resolver: Package resolver service.
            config: Runtime configuration; read from environment when omitted.
            downloader_factory: Builds a downloader per (source id, package name).
            extractor_factory: Builds an extractor per downloaded package file.
            runner: Executes external filesystem tools.

        Raises:
            UpdatesConfigError: If ``origin`` is not a known origin.
        """
        self._uri = uri
        self._origin = _parse_origin(origin)
        self._resolver = resolver
        self._config = config or UpdatesConfig.from_env()
        process_runner = runner or SubprocessRunner(timeout=self._config.command_timeout)
        self._session = RepositorySession(uri, resolver)
        self._catalog = PackageCatalog(self._session, resolver)
        self._registry = ImageRegistry()
        self._materializer = PackageMaterializer(
            downloader_factory=downloader_factory or resolver_downloader_factory(resolver),
            extractor_factory=extractor_factory or archive_extractor_factory(process_runner),
            runner=process_runner,
            tmp_dir=self._config.tmp_dir,
        )
        self._apply_engine = ApplyEngine(process_runner, self._config.instsys_parts_path)

    @property
    def uri(self) -> str:
        """Repository URI, credentials included."""
        return self._uri

    @property
    def origin(self) -> RepositoryOrigin:
        return self._origin

    @property
    def source_id(self) -> int | None:
        return self._session.source_id

    @property
    def update_files(self) -> tuple[Path, ...]:
        """Image files fetched and not yet removed."""
        return self._registry.image_files

    @property
    def mounts(self) -> tuple[MountRecord, ...]:
        return self._registry.mounts

    @property
    def user_defined(self) -> bool:
        """Return whether the user supplied this repository."""
        return self._origin is RepositoryOrigin.USER

    @property
    def remote(self) -> bool:
        """Return whether the resolver classifies the URI scheme as remote."""
        return self._resolver.url_scheme_is_remote(uri_scheme(self._uri))

    def packages(self) -> tuple[PackageDescriptor, ...]:
        """Return the packages of this repository sorted by name."""
        return self._catalog.packages()

    def fetch(self, destination_dir: Path | None = None) -> tuple[Path, ...]:
        """Build one squashed image per repository package.

        Args:
            destination_dir: Directory receiving images; config default when omitted.

        Returns:
            Image files produced by this call.

        Raises:
            CouldNotFetchUpdate: If any package fails; this call's images are removed.
        """
        target_dir = destination_dir or self._config.download_dir
        packages = self.packages()
        _LOGGER.info(
            "fetch_started",
            uri=redact_uri(self._uri),
            package_count=len(packages),
            destination_dir=str(target_dir),
        )
        return self._materializer.fetch_all(packages, target_dir, self._registry)

    def apply(self, updates_root: Path | None = None) -> tuple[MountRecord, ...]:
        """Mount fetched images and splice them into the running system.

        Args:
            updates_root: Directory holding mount points; config default when omitted.

        Returns:
            Mount records created by this call.

        Raises:
            CouldNotMountUpdate: If an image cannot be mounted.
            CouldNotBeApplied: If a mounted image cannot be added to the root.
        """
        return self._apply_engine.apply(self._registry, updates_root or self._config.updates_dir)

    def remove_update_files(self) -> None:
        """Delete every fetched image file."""
        self._registry.remove_all()

    def cleanup(self) -> None:
        """Remove fetched images and release the resolver source."""
        try:
            self.remove_update_files()
        finally:
            self._session.release()

    def __str__(self) -> str:
        return redact_uri(self._uri)

    def __repr__(self) -> str:
        return (
            f"<UpdateRepository uri={redact_uri(self._uri)!r} "
            f"origin={self._origin.value} source_id={self._session.source_id}>"
        )


def _parse_origin(origin: RepositoryOrigin | str) -> RepositoryOrigin:
    try:
        return RepositoryOrigin(origin)
    except ValueError as error:
        supported = ", ".join(item.value for item in RepositoryOrigin)
        raise UpdatesConfigError(
            f"Unknown repository origin '{origin}'. Use one of: {supported}."
        ) from error
