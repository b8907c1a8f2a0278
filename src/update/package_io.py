"""Package download and extraction facilities.

This module defines the narrow download/extract contracts used by the
materializer together with default implementations backed by the
resolver and by an archive extraction tool.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol

from core.errors import PackageDownloadError, PackageExtractionError
from repository.resolver import Resolver
from update.commands import extract_command
from update.process_runner import ProcessRunner


class PackageDownloader(Protocol):
    """Downloads one package payload."""

    def download(self, destination: Path) -> None:
        """Write the package to ``destination`` or raise PackageDownloadError."""


class PackageExtractor(Protocol):
    """Extracts one downloaded package."""

    def extract(self, destination: Path) -> None:
        """Unpack into ``destination`` or raise PackageExtractionError."""


DownloaderFactory = Callable[[int, str], PackageDownloader]
ExtractorFactory = Callable[[Path], PackageExtractor]


class ResolverPackageDownloader:
    """Downloads a package through the resolver's package provider."""

    def __init__(self, resolver: Resolver, source_id: int, package_name: str) -> None:
        self._resolver = resolver
        self._source_id = source_id
        self._package_name = package_name

    def download(self, destination: Path) -> None:
        """Download the package into ``destination``.

        Raises:
            PackageDownloadError: If the resolver cannot provide the package.
        """
        if not self._resolver.provide_package(self._source_id, self._package_name, destination):
            raise PackageDownloadError(
                f"Could not download package '{self._package_name}' "
                f"from source {self._source_id} to {destination}."
            )


class ArchiveExtractor:
    """Extracts package archives with an external archive tool."""

    def __init__(self, package_file: Path, runner: ProcessRunner) -> None:
        self._package_file = package_file
        self._runner = runner

    def extract(self, destination: Path) -> None:
        """Unpack the package archive into ``destination``.

        Raises:
            PackageExtractionError: If the archive tool exits non-zero.
        """
        result = self._runner.run(extract_command(self._package_file, destination))
        if not result.succeeded:
            raise PackageExtractionError(
                f"Could not extract {self._package_file} into {destination} "
                f"(exit {result.exit_code}): {result.stderr.strip()}"
            )


def resolver_downloader_factory(resolver: Resolver) -> DownloaderFactory:
    """Build a downloader factory bound to ``resolver``."""

    def _factory(source_id: int, package_name: str) -> PackageDownloader:
        return ResolverPackageDownloader(resolver, source_id, package_name)

    return _factory


def archive_extractor_factory(runner: ProcessRunner) -> ExtractorFactory:
    """Build an extractor factory running archive tools through ``runner``."""

    def _factory(package_file: Path) -> PackageExtractor:
        return ArchiveExtractor(package_file, runner)

    return _factory
