"""Resolver source registration lifecycle.

This module probes, registers, refreshes, and releases one update
source. The source id it caches is the key for every catalog and
download query made on behalf of the update repository.
"""

from __future__ import annotations

from core.constants import REPOSITORY_PRODUCT_DIR, REPOSITORY_TYPE_NONE
from core.errors import CouldNotProbeRepo, CouldNotRefreshRepo, NotValidRepo
from core.logging_config import get_logger
from core.types import SourceConfig
from core.uri_redaction import redact_uri
from repository.resolver import Resolver

_LOGGER = get_logger(__name__)


class RepositorySession:
    """Owns one resolver source registration.

    The source id is set once by a successful ``add`` and stays
    immutable until ``release`` drops the registration.
    """

    def __init__(self, uri: str, resolver: Resolver) -> None:
        self._uri = uri
        self._resolver = resolver
        self._source_id: int | None = None

    @property
    def source_id(self) -> int | None:
        """Resolver source id, or None before a successful add."""
        return self._source_id

    @property
    def is_added(self) -> bool:
        """Return whether the source is currently registered."""
        return self._source_id is not None

    def add(self) -> int:
        """Register and refresh the source, returning its id.

        Returns:
            Resolver source id; cached after the first successful call.

        Raises:
            NotValidRepo: If the repository type is unknown.
            CouldNotProbeRepo: If probing returns no signal.
            CouldNotRefreshRepo: If the registered source cannot be refreshed.
        """
        if self._source_id is not None:
            return self._source_id
        repo_type = self._probe()
        config = SourceConfig(base_urls=(self._uri,), repo_type=repo_type)
        source_id = self._resolver.add_source(config)
        if not self._resolver.refresh(source_id):
            try:
                self._resolver.delete_source(source_id)
            finally:
                raise CouldNotRefreshRepo(
                    f"Could not refresh update repository {redact_uri(self._uri)}. "
                    "Check the repository metadata and network access."
                )
        self._resolver.load_sources()
        self._source_id = source_id
        _LOGGER.info(
            "repository_added",
            uri=redact_uri(self._uri),
            source_id=source_id,
            repo_type=repo_type,
        )
        return source_id

    def release(self) -> None:
        """Delete the registration, release handles and persist source state.

        Handles are released and state saved even when deletion fails;
        the deletion error is still propagated.
        """
        source_id = self._source_id
        try:
            if source_id is not None:
                self._resolver.delete_source(source_id)
                self._source_id = None
        finally:
            self._resolver.release_all()
            self._resolver.save_all()
        _LOGGER.info("repository_released", uri=redact_uri(self._uri), source_id=source_id)

    def _probe(self) -> str:
        repo_type = self._resolver.probe(self._uri, REPOSITORY_PRODUCT_DIR)
        if repo_type is None:
            raise CouldNotProbeRepo(
                f"Could not probe update repository {redact_uri(self._uri)}. "
                "Check that the location is reachable."
            )
        if repo_type == REPOSITORY_TYPE_NONE:
            raise NotValidRepo(
                f"Update repository {redact_uri(self._uri)} has an unknown format. "
                "Point the installer at a valid package repository."
            )
        return repo_type
