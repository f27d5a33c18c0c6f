"""
RSS feed provider.

Fetches the configured feeds for a category concurrently and parses them
with feedparser. A failing feed contributes nothing; it never blocks or
fails its siblings.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
import logging
from pathlib import Path

import feedparser

from ..core.types import Article
from ..fetcher import HttpFetcher
from ..normalize import normalize_record
from ..stats import ProviderCallTracker
from .base import NewsProvider

logger = logging.getLogger(__name__)

DEFAULT_FEEDS = Path(__file__).resolve().parent.parent / "data" / "rss_feeds.json"

FEED_HEADERS = {"Accept": "application/rss+xml, application/xml, text/xml, */*"}


@dataclass(frozen=True)
class FeedSource:
    """One configured feed: display name, feed URL and outlet domain."""
    name: str
    url: str
    domain: str


def load_feed_sources(path: Path | str | None = None) -> dict[str, list[FeedSource]]:
    """Load the per-category feed list; None selects the bundled file."""
    with open(path or DEFAULT_FEEDS, encoding="utf-8") as f:
        raw = json.load(f)
    return {
        category: [FeedSource(**item) for item in items]
        for category, items in raw.items()
    }


class RssProvider(NewsProvider):
    """Primary, unmetered provider backed by publishers' RSS feeds."""

    name = "rss"

    def __init__(
        self,
        http: HttpFetcher,
        feeds: dict[str, list[FeedSource]],
        tracker: ProviderCallTracker | None = None,
        items_per_feed: int = 10,
    ):
        super().__init__(http, tracker)
        self.feeds = feeds
        self.items_per_feed = items_per_feed

    def sources_for(self, category: str) -> list[FeedSource]:
        return self.feeds.get(category) or self.feeds.get("general", [])

    async def _fetch(self, category: str, region: str) -> list[Article]:
        sources = self.sources_for(category)
        if not sources:
            return []
        self._track()

        results = await asyncio.gather(
            *(self._fetch_feed(source) for source in sources),
            return_exceptions=True,
        )

        articles: list[Article] = []
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.warning("Feed %s failed: %s: %s", source.name, type(result).__name__, result)
                continue
            articles.extend(result)
        return articles

    async def _fetch_feed(self, source: FeedSource) -> list[Article]:
        result = await self.http.get_text(source.url, headers=FEED_HEADERS)
        if not result.ok:
            logger.warning("Feed %s failed: %s", source.name, result.error)
            return []
        return parse_feed(result.content or b"", "rss", source.name, self.items_per_feed)


def parse_feed(
    body: bytes | str,
    provider: str,
    source_name: str | None = None,
    limit: int | None = None,
) -> list[Article]:
    """Parse an RSS/Atom document into normalized articles.

    Args:
        body: The raw feed document
        provider: Normalizer tag for the entries ("rss", "google_news", ...)
        source_name: Outlet name applied to every entry, if known
        limit: Maximum number of entries considered

    Returns:
        Valid articles in feed order
    """
    parsed = feedparser.parse(body)
    if parsed.bozo and not parsed.entries:
        logger.debug("Unparseable feed for %s: %s", source_name or provider, parsed.get("bozo_exception"))
        return []
    entries = parsed.entries[:limit] if limit else parsed.entries

    articles: list[Article] = []
    for entry in entries:
        article = normalize_record(entry, provider, source_name=source_name)
        if article is not None:
            articles.append(article)
    return articles
