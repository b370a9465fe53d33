"""
Canonical Identity Keys
=======================

Two dependency references that normalize to the same key are treated as the
same download, whatever their surface spelling.
"""

import posixpath
import re
from enum import Enum
from typing import NamedTuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from winefonts.core.exceptions import InvalidUrlError
from winefonts.core.models import Installation

DEFAULT_PORTS = {"http": 80, "https": 443}

# Tracking parameters never change the served bytes
TRACKING_PARAMETER = re.compile(r"^utm_\w+$", re.IGNORECASE)


class KeyKind(Enum):
    """Where a dependency lives."""

    LOCAL_FILE = "localFile"
    URL = "url"


class CanonicalKey(NamedTuple):
    kind: KeyKind
    value: str


def normalize_local_path(path: str) -> str:
    """Normalize a catalog-relative path to a platform-neutral form."""
    unified = path.replace("\\", "/")
    return posixpath.normpath(unified)


def normalize_url(url: str) -> str:
    """
    Normalize an absolute http(s) URL.

    Lowercases scheme and host, strips default ports and a leading ``www.``,
    drops the fragment and tracking parameters, sorts the query, collapses
    duplicate slashes and dot segments and removes a trailing slash.
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError:
        raise InvalidUrlError(url) from None

    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS or not parts.hostname:
        raise InvalidUrlError(url)

    host = parts.hostname.lower()
    if host.startswith("www."):
        host = host[4:]
    if ":" in host:
        host = f"[{host}]"

    netloc = host
    if port is not None and port != DEFAULT_PORTS[scheme]:
        netloc = f"{host}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = re.sub(r"/{2,}", "/", parts.path)
    if path:
        path = posixpath.normpath(path)
    path = path.rstrip("/")

    query_pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if not TRACKING_PARAMETER.match(key)
    ]
    query = urlencode(sorted(query_pairs))

    return urlunsplit((scheme, netloc, path, query, ""))


def canonical_key(installation: Installation) -> CanonicalKey | None:
    """Return the identity key of an installation's dependency, if it has one."""
    if installation.local_path is not None:
        return CanonicalKey(KeyKind.LOCAL_FILE, normalize_local_path(installation.local_path))
    if installation.url is not None:
        return CanonicalKey(KeyKind.URL, normalize_url(installation.url))
    return None
