"""Package materialization into squashed update images.

This module downloads one package, extracts its payload, and compresses
the payload into a single read-only squashfs image. Temporary resources
are released on every exit path and a failing batch is rolled back.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import os
from pathlib import Path
import tempfile
from typing import Sequence

from core.constants import (
    IMAGE_INDEX_WIDTH,
    IMAGE_NAME_PREFIX,
    TEMP_DIR_PREFIX,
    TEMP_FILE_PREFIX,
)
from core.errors import CouldNotFetchUpdate, PackageDownloadError, PackageExtractionError
from core.logging_config import get_logger
from core.types import PackageDescriptor
from update.commands import squashfs_command
from update.image_registry import ImageRegistry
from update.naming import next_free_path
from update.package_io import DownloaderFactory, ExtractorFactory
from update.process_runner import ProcessRunner

_LOGGER = get_logger(__name__)


class PackageMaterializer:
    """Builds one squashfs image per package."""

    def __init__(
        self,
        downloader_factory: DownloaderFactory,
        extractor_factory: ExtractorFactory,
        runner: ProcessRunner,
        tmp_dir: Path | None = None,
    ) -> None:
        self._downloader_factory = downloader_factory
        self._extractor_factory = extractor_factory
        self._runner = runner
        self._tmp_dir = tmp_dir

    def fetch(self, package: PackageDescriptor, destination_dir: Path) -> Path:
        """Download, extract, and squash one package.

        Args:
            package: Package to materialize.
            destination_dir: Directory receiving the image file.

        Returns:
            Path of the new image file.

        Raises:
            CouldNotFetchUpdate: If download, extraction, or compression fails.
        """
        try:
            destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise CouldNotFetchUpdate(
                f"Could not create update directory {destination_dir}: {error}."
            ) from error
        with self._scoped_temp_file() as package_file:
            self._download(package, package_file)
            with self._scoped_work_dir() as work_dir:
                self._extract(package, package_file, work_dir)
                image_file = self._squash(package, work_dir, destination_dir)
        _LOGGER.info("package_materialized", package=package.name, image_file=str(image_file))
        return image_file

    def fetch_all(
        self,
        packages: Sequence[PackageDescriptor],
        destination_dir: Path,
        registry: ImageRegistry,
    ) -> tuple[Path, ...]:
        """Materialize a batch of packages, all or nothing.

        Images are committed to ``registry`` only when every package
        succeeds; otherwise the images of this batch are deleted.

        Args:
            packages: Packages to materialize in order.
            destination_dir: Directory receiving the image files.
            registry: Registry receiving the committed images.

        Returns:
            Images produced by this batch.

        Raises:
            CouldNotFetchUpdate: If any package fails.
        """
        with registry.batch() as batch:
            for package in packages:
                batch.add(self.fetch(package, destination_dir))
            produced = batch.image_files
        _LOGGER.info("fetch_batch_committed", image_count=len(produced))
        return produced

    def _download(self, package: PackageDescriptor, package_file: Path) -> None:
        downloader = self._downloader_factory(package.source_id, package.name)
        try:
            downloader.download(package_file)
        except PackageDownloadError as error:
            raise CouldNotFetchUpdate(
                f"Could not download update package '{package.name}': {error}"
            ) from error

    def _extract(self, package: PackageDescriptor, package_file: Path, work_dir: Path) -> None:
        extractor = self._extractor_factory(package_file)
        try:
            extractor.extract(work_dir)
        except PackageExtractionError as error:
            raise CouldNotFetchUpdate(
                f"Could not extract update package '{package.name}': {error}"
            ) from error

    def _squash(self, package: PackageDescriptor, work_dir: Path, destination_dir: Path) -> Path:
        image_file = next_free_path(destination_dir, IMAGE_NAME_PREFIX, IMAGE_INDEX_WIDTH)
        result = self._runner.run(squashfs_command(work_dir, image_file))
        if not result.succeeded:
            image_file.unlink(missing_ok=True)
            raise CouldNotFetchUpdate(
                f"Could not squash update package '{package.name}' into {image_file} "
                f"(exit {result.exit_code}): {result.stderr.strip()}"
            )
        return image_file

    @contextmanager
    def _scoped_temp_file(self) -> Iterator[Path]:
        try:
            file_descriptor, file_name = tempfile.mkstemp(
                prefix=TEMP_FILE_PREFIX, dir=self._tmp_dir
            )
        except OSError as error:
            raise CouldNotFetchUpdate(
                f"Could not create temporary package file in {self._tmp_dir}: {error}."
            ) from error
        os.close(file_descriptor)
        package_file = Path(file_name)
        try:
            yield package_file
        finally:
            package_file.unlink(missing_ok=True)

    @contextmanager
    def _scoped_work_dir(self) -> Iterator[Path]:
        try:
            work_dir = tempfile.TemporaryDirectory(prefix=TEMP_DIR_PREFIX, dir=self._tmp_dir)
        except OSError as error:
            raise CouldNotFetchUpdate(
                f"Could not create temporary extraction directory in {self._tmp_dir}: {error}."
            ) from error
        with work_dir as work_dir_name:
            yield Path(work_dir_name)
