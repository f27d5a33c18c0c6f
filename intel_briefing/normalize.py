"""
Normalization of upstream records into the canonical Article shape.

Each provider produces records in its own shape (feedparser entries for
RSS, JSON objects for the news APIs). normalize_record maps one record to
an Article using the field mapper registered for the provider tag, then
applies the same validity rules to every provider:

- title and url must be non-empty
- the publish date must parse and may not lie more than a minute ahead
- live-blog URLs are rejected
- the description is plain text truncated to 300 characters

A rejected record yields None; rejection is filtered data, not an error.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
import logging
import re
import time
from typing import Any, Callable, Mapping
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .core.identity import extract_domain
from .core.types import Article

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_CHARS = 300
FUTURE_TOLERANCE = timedelta(minutes=1)

# "2026-02-25 12:30:00 +0000" as served by some JSON APIs, or "...T12:30:00+0000";
# rewritten to an offset fromisoformat accepts on every supported Python
_ISO_LIKE_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[T\s](\d{2}:\d{2}:\d{2}(?:\.\d+)?)\s?([+-]\d{2}:?\d{2}|Z|UTC)?$"
)
_LIVE_BLOG_RE = re.compile(
    r"(/live/|/live-news/|/live-updates?\b|/liveblog|/live-blog|-live-updates?\b|/live-coverage)",
    re.IGNORECASE,
)
_IMG_SRC_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"']", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

# Aggregator feeds that append " - Source Name" to every headline
_SOURCE_SUFFIX_PROVIDERS = {"google_news"}


def normalize_record(
    raw: Mapping[str, Any],
    provider: str,
    source_name: str | None = None,
    now: datetime | None = None,
) -> Article | None:
    """Map one upstream record to an Article.

    Args:
        raw: The record as delivered by the provider
        provider: Provider tag selecting the field mapper ("rss", "google_news",
                  "bing_news", "currents", "thenewsapi", "newsapi")
        source_name: Outlet name known by the caller (e.g. the configured
                     feed name); overrides anything found in the record
        now: Reference time for the future-date check (defaults to utcnow)

    Returns:
        The Article, or None if the record is invalid

    Raises:
        ValueError: If no mapper is registered for the provider tag
    """
    mapper = _MAPPERS.get(provider)
    if mapper is None:
        raise ValueError(f"No normalizer registered for provider {provider!r}")
    if not isinstance(raw, Mapping):
        logger.debug("Skipping %s record of type %s", provider, type(raw).__name__)
        return None

    fields = mapper(raw)
    title = _clean_text(fields.get("title"))
    url = (_as_str(fields.get("url")) or "").strip()
    if not title or not url or title == "[Removed]":
        return None
    if is_live_blog(url):
        logger.debug("Rejecting live blog %s", url)
        return None

    published_at = fields.get("published_at")
    if not isinstance(published_at, datetime):
        published_at = parse_published(published_at)
    if published_at is None:
        return None
    now = now or datetime.now(timezone.utc)
    if published_at > now + FUTURE_TOLERANCE:
        logger.debug("Rejecting future-dated record %s (%s)", url, published_at.isoformat())
        return None

    name = source_name or fields.get("source_name")
    if provider in _SOURCE_SUFFIX_PROVIDERS:
        title, suffix = split_title_source(title)
        name = source_name or suffix or name
    if not name:
        name = source_name_from_url(url)

    return Article(
        title=title,
        url=url,
        published_at=published_at,
        source_name=name,
        description=_truncate(fields.get("description")),
        image_url=_as_str(fields.get("image_url")) or None,
        author=_clean_text(fields.get("author")) or None,
        content=fields.get("content") or None,
    )


def parse_published(value: Any) -> datetime | None:
    """Parse a provider timestamp into an aware UTC datetime.

    Accepts ISO-8601 (with or without "Z"), the space-separated
    "YYYY-MM-DD HH:MM:SS +ZZZZ" form, RFC 822 dates as used in RSS, and
    time.struct_time values from feedparser. Naive values are taken as UTC.

    Returns:
        The parsed datetime, or None if the value cannot be parsed
    """
    if value is None:
        return None
    if isinstance(value, time.struct_time):
        return datetime(*value[:6], tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    if not cleaned:
        return None

    iso_like = _ISO_LIKE_RE.match(cleaned)
    if iso_like:
        offset = iso_like.group(3)
        if not offset or offset in ("Z", "UTC"):
            offset = "+00:00"
        elif ":" not in offset:
            offset = f"{offset[:3]}:{offset[3:]}"
        cleaned = f"{iso_like.group(1)}T{iso_like.group(2)}{offset}"

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(cleaned)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def is_live_blog(url: str) -> bool:
    """True for live-blog / live-updates pages, whose content keeps changing."""
    try:
        path = urlparse(url).path
    except ValueError:
        return False
    return bool(_LIVE_BLOG_RE.search(path))


def split_title_source(title: str) -> tuple[str, str | None]:
    """Split "Headline - Source" into ("Headline", "Source").

    Only the last " - " is treated as the delimiter; titles without one
    come back unchanged with no source.
    """
    dash = title.rfind(" - ")
    if dash <= 0:
        return title, None
    head = title[:dash].strip()
    suffix = title[dash + 3 :].strip()
    if not head or not suffix:
        return title, None
    return head, suffix


def strip_html(html: str | None) -> str:
    """Return the visible text of an HTML fragment."""
    if not html or not isinstance(html, str):
        return ""
    if "<" not in html:
        return _clean_text(html)
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return _clean_text(soup.get_text(separator=" "))


def extract_image(entry: Mapping[str, Any]) -> str | None:
    """Find the lead image of a feed entry.

    Tries, in order: an enclosure with an image MIME type, media:content,
    media:thumbnail, then the first <img src> in the embedded HTML.
    """
    for enclosure in _as_list(entry.get("enclosures")):
        href = enclosure.get("href") or enclosure.get("url")
        if href and str(enclosure.get("type", "")).startswith("image"):
            return href

    for key in ("media_content", "media_thumbnail"):
        for media in _as_list(entry.get(key)):
            url = media.get("url")
            if url:
                return url

    html = _entry_html(entry)
    match = _IMG_SRC_RE.search(html)
    if match:
        return match.group(1)
    return None


def source_name_from_url(url: str) -> str:
    """Guess a display name from the URL's second-level domain label."""
    domain = extract_domain(url)
    if not domain:
        return "Unknown"
    labels = domain.split(".")
    name = labels[-2] if len(labels) >= 2 else labels[0]
    return name[:1].upper() + name[1:]


def _map_feed_entry(entry: Mapping[str, Any]) -> dict[str, Any]:
    summary = entry.get("summary") or entry.get("description")
    description = strip_html(summary) or strip_html(_entry_html(entry))
    published = entry.get("published") or entry.get("updated")
    published_at = parse_published(published)
    if published_at is None:
        published_at = parse_published(entry.get("published_parsed") or entry.get("updated_parsed"))
    source = entry.get("source")
    source_title = source.get("title") if isinstance(source, Mapping) else None
    return {
        "title": entry.get("title"),
        "url": entry.get("link"),
        "description": description,
        "image_url": extract_image(entry),
        "published_at": published_at,
        "author": entry.get("author"),
        "source_name": source_title,
    }


def _map_currents(record: Mapping[str, Any]) -> dict[str, Any]:
    image = record.get("image")
    return {
        "title": record.get("title"),
        "url": record.get("url"),
        "description": strip_html(record.get("description")),
        "image_url": image if image and image != "None" else None,
        "published_at": record.get("published"),
        "author": record.get("author"),
        "source_name": source_name_from_url(_as_str(record.get("url")) or ""),
    }


def _map_thenewsapi(record: Mapping[str, Any]) -> dict[str, Any]:
    source = _as_str(record.get("source"))
    return {
        "title": record.get("title"),
        "url": record.get("url"),
        "description": strip_html(record.get("description") or record.get("snippet")),
        "image_url": record.get("image_url"),
        "published_at": record.get("published_at"),
        "source_name": display_name_for_domain(source) if source else None,
        "content": record.get("snippet"),
    }


def _map_newsapi(record: Mapping[str, Any]) -> dict[str, Any]:
    source = record.get("source") or {}
    return {
        "title": record.get("title"),
        "url": record.get("url"),
        "description": strip_html(record.get("description")),
        "image_url": record.get("urlToImage"),
        "published_at": record.get("publishedAt"),
        "author": record.get("author"),
        "source_name": source.get("name") if isinstance(source, Mapping) else None,
        "content": record.get("content"),
    }


_MAPPERS: dict[str, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    "rss": _map_feed_entry,
    "google_news": _map_feed_entry,
    "bing_news": _map_feed_entry,
    "currents": _map_currents,
    "thenewsapi": _map_thenewsapi,
    "newsapi": _map_newsapi,
}


_KNOWN_NAMES = {
    "nytimes": "The New York Times",
    "washingtonpost": "The Washington Post",
    "foxnews": "Fox News",
    "nbcnews": "NBC News",
    "cbsnews": "CBS News",
    "abcnews": "ABC News",
    "cnn": "CNN",
    "bbc": "BBC",
    "reuters": "Reuters",
    "apnews": "Associated Press",
    "theguardian": "The Guardian",
    "wsj": "Wall Street Journal",
    "bloomberg": "Bloomberg",
    "cnbc": "CNBC",
    "nypost": "New York Post",
    "usatoday": "USA Today",
    "politico": "Politico",
    "thehill": "The Hill",
    "axios": "Axios",
    "npr": "NPR",
    "msnbc": "MSNBC",
    "breitbart": "Breitbart",
    "dailywire": "The Daily Wire",
    "huffpost": "HuffPost",
    "vox": "Vox",
    "theatlantic": "The Atlantic",
    "techcrunch": "TechCrunch",
    "theverge": "The Verge",
    "arstechnica": "Ars Technica",
    "wired": "Wired",
    "espn": "ESPN",
    "usmagazine": "US Magazine",
}


def display_name_for_domain(domain: str) -> str:
    """Map a bare domain such as "nytimes.com" to a display name."""
    cleaned = domain.strip().lower()
    if cleaned.startswith("www."):
        cleaned = cleaned[4:]
    label = cleaned.split(".")[0]
    if not label:
        return "Unknown"
    return _KNOWN_NAMES.get(label, label[:1].upper() + label[1:])


def _entry_html(entry: Mapping[str, Any]) -> str:
    for content in _as_list(entry.get("content")):
        value = content.get("value") if isinstance(content, Mapping) else None
        if value:
            return value
    return entry.get("summary") or ""


def _as_list(value: Any) -> list[Mapping[str, Any]]:
    if not value:
        return []
    if isinstance(value, Mapping):
        return [value]
    return [item for item in value if isinstance(item, Mapping)]


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _clean_text(value: Any) -> str:
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


def _truncate(text: str | None) -> str | None:
    if not text:
        return None
    return text[:DESCRIPTION_MAX_CHARS]
