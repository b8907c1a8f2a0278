"""Repository URI helpers.

This module centralizes credential redaction and scheme extraction so
repository URIs never reach logs or reprs with passwords in them.
"""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from core.constants import REDACTED_USERINFO


def redact_uri(uri: str) -> str:
    """Replace the whole userinfo component of a URI.

    Args:
        uri: Repository URI, possibly carrying ``user:password@`` or ``token@``.

    Returns:
        URI safe for display; unchanged when no userinfo is present.
    """
    parts = urlsplit(uri)
    if parts.username is None:
        return uri
    _, _, hostinfo = parts.netloc.rpartition("@")
    netloc = f"{REDACTED_USERINFO}@{hostinfo}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def uri_scheme(uri: str) -> str:
    """Return the lowercase scheme of a URI (``cd``, ``http``, ...)."""
    return urlsplit(uri).scheme.lower()
