"""Update repository exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type so callers can tell
format problems from availability problems and fetch from apply failures.
"""

from __future__ import annotations


class UpdatesError(Exception):
    """Base exception for all update repository failures."""


class UpdatesConfigError(UpdatesError):
    """Raised for invalid runtime configuration."""


class UpdatesDependencyError(UpdatesError):
    """Raised when an optional runtime dependency is missing."""


class ResolverPayloadError(UpdatesError):
    """Raised when the resolver returns a malformed resolvable payload."""


class PackageDownloadError(UpdatesError):
    """Raised by download facilities on transport or resolution problems."""


class PackageExtractionError(UpdatesError):
    """Raised by extraction facilities on malformed or incomplete archives."""


class UpdateRepositoryError(UpdatesError):
    """Base exception for update repository lifecycle failures."""


class NotValidRepo(UpdateRepositoryError):
    """Raised when probing recognizes the source but not a usable format."""


class CouldNotProbeRepo(UpdateRepositoryError):
    """Raised when probing returns no signal at all."""


class CouldNotRefreshRepo(UpdateRepositoryError):
    """Raised when a registered source cannot be refreshed."""


class CouldNotFetchUpdate(UpdateRepositoryError):
    """Raised when a package cannot be downloaded, extracted or compressed."""


class CouldNotMountUpdate(UpdateRepositoryError):
    """Raised when an update image cannot be mounted."""


class CouldNotBeApplied(UpdateRepositoryError):
    """Raised when a mounted update cannot be spliced into the root."""
