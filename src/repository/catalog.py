"""Package catalog of one update source."""

from __future__ import annotations

from typing import Mapping

from core.constants import RESOLVABLE_KIND_PACKAGE
from core.errors import ResolverPayloadError
from core.types import PackageDescriptor
from repository.resolver import Resolver
from repository.session import RepositorySession


class PackageCatalog:
    """Lists the packages a registered source contributes."""

    def __init__(self, session: RepositorySession, resolver: Resolver) -> None:
        self._session = session
        self._resolver = resolver

    def packages(self) -> tuple[PackageDescriptor, ...]:
        """Return this source's packages sorted by name.

        Returns:
            Packages of the session source; ties keep resolver order.

        Raises:
            ResolverPayloadError: If a payload of this source is malformed.
        """
        source_id = self._session.add()
        payloads = self._resolver.list_resolvables(RESOLVABLE_KIND_PACKAGE)
        own_packages = [
            descriptor_from_payload(payload)
            for payload in payloads
            if payload.get("source") == source_id
        ]
        return tuple(sorted(own_packages, key=lambda item: item.name))


def descriptor_from_payload(payload: Mapping[str, object]) -> PackageDescriptor:
    """Deserialize a resolver resolvable payload.

    Args:
        payload: Mapping with ``name``, ``path`` and ``source`` keys.

    Returns:
        Typed package descriptor.

    Raises:
        ResolverPayloadError: If keys are missing or have the wrong type.
    """
    name = payload.get("name")
    path = payload.get("path")
    source = payload.get("source")
    if not isinstance(name, str) or not isinstance(path, str):
        raise ResolverPayloadError(
            f"Invalid resolvable payload {dict(payload)!r}: expected string name and path."
        )
    if not isinstance(source, int) or isinstance(source, bool):
        raise ResolverPayloadError(
            f"Invalid resolvable payload for '{name}': expected integer source, got {source!r}."
        )
    return PackageDescriptor(name=name, path=path, source_id=source)
