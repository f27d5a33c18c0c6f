"""Article identity helpers shared by the normalizer, enrichment and caches."""

from __future__ import annotations

import hashlib
from urllib.parse import urlparse


def article_id(title: str, url: str) -> str:
    """Return a stable identifier for an article.

    The id is derived only from the title and URL, so repeated fetches of
    the same content produce the same id and client-side read/bookmark
    state keyed by it survives a refresh.

    Args:
        title: The article headline
        url: The article URL

    Returns:
        First 16 characters of the SHA-256 hex digest of "title-url"
    """
    return hashlib.sha256(f"{title}-{url}".encode("utf-8")).hexdigest()[:16]


def extract_domain(url: str) -> str:
    """Return the host of a URL with any leading "www." removed.

    Bare domains ("www.cnn.com") are accepted as well as full URLs.
    Unparseable input yields an empty string.
    """
    if not url:
        return ""
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        host = urlparse(candidate).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def cache_key(*parts: str) -> str:
    """Join key parts into a lower-cased cache key."""
    return ":".join(part.strip().lower() for part in parts)
