"""Package resolver service contract.

The resolver owns repository metadata, refresh, and package retrieval.
This layer only depends on the narrow protocol below, so tests and
alternative resolver bindings can be injected without global state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol, Sequence

from core.types import SourceConfig


class Resolver(Protocol):
    """Operations the update repository needs from the package resolver."""

    def probe(self, url: str, product_dir: str) -> str | None:
        """Return the repository type, ``"NONE"`` when unknown, None when unreachable."""

    def add_source(self, config: SourceConfig) -> int:
        """Register a source and return its id."""

    def refresh(self, source_id: int) -> bool:
        """Refresh source metadata; return False on failure."""

    def load_sources(self) -> bool:
        """Load resolvables of all enabled sources."""

    def list_resolvables(self, kind: str) -> Sequence[Mapping[str, object]]:
        """Return resolvable payloads with ``name``, ``path`` and ``source`` keys."""

    def provide_package(self, source_id: int, name: str, destination: Path) -> bool:
        """Download one package from a source into ``destination``."""

    def delete_source(self, source_id: int) -> bool:
        """Remove a source registration."""

    def release_all(self) -> bool:
        """Release handles held for all sources."""

    def save_all(self) -> bool:
        """Persist source state to disk."""

    def url_scheme_is_remote(self, scheme: str) -> bool:
        """Return whether a URL scheme refers to a network location."""
