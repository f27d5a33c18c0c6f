"""
Local news for a city via news-search RSS feeds.

Lookup order for a (city, state) pair:
1. Google News search for "<city> <state> local news"
2. Bing News search for "<city> <state> news"
3. The same two searches for each of the state's major cities, in order

The first query that yields recent articles wins. Articles older than
48 hours are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import json
import logging
from pathlib import Path
import time
from typing import Any, Callable

from ..bias import BiasTable, load_bias_table
from ..cache import TimedCache
from ..config import AppConfig
from ..core.identity import cache_key
from ..core.types import Article, EnrichedArticle
from ..enrich import enrich_articles
from ..fetcher import HttpFetcher
from ..logging_utils import log_event
from ..providers.rss import FEED_HEADERS, parse_feed

logger = logging.getLogger(__name__)

GOOGLE_NEWS_URL = "https://news.google.com/rss/search"
BING_NEWS_URL = "https://www.bing.com/news/search"
MAJOR_CITIES_PATH = Path(__file__).resolve().parent.parent / "data" / "state_major_cities.json"

MAX_AGE = timedelta(hours=48)
MAX_ITEMS = 30


@lru_cache(maxsize=1)
def load_major_cities() -> dict[str, list[str]]:
    with open(MAJOR_CITIES_PATH, encoding="utf-8") as f:
        return json.load(f)


@dataclass
class LocalNewsResult:
    """Local articles plus which search produced them.

    Attributes:
        feed_source: "google", "bing", "fallback" (a major city matched)
                     or "none"
        fallback_city: The major city used when feed_source is "fallback"
    """
    city: str
    state: str
    articles: list[EnrichedArticle] = field(default_factory=list)
    feed_source: str = "none"
    fallback_city: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [article.to_dict() for article in self.articles],
            "total": len(self.articles),
            "category": "local",
            "location": {"city": self.city, "state": self.state},
            "feedSource": self.feed_source,
            "fallbackCity": self.fallback_city,
        }


class LocalNewsService:
    """Cached local news keyed by lower-cased "city-state"."""

    def __init__(
        self,
        http: HttpFetcher,
        bias_table: BiasTable,
        cache: TimedCache[LocalNewsResult],
        major_cities: dict[str, list[str]] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.http = http
        self.bias_table = bias_table
        self.cache = cache
        self.major_cities = major_cities if major_cities is not None else load_major_cities()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        http: HttpFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> LocalNewsService:
        return cls(
            http or HttpFetcher(cfg.fetch),
            load_bias_table(cfg.bias.dataset_path),
            TimedCache(cfg.cache.local_news_ttl_seconds, cfg.cache.max_entries, clock=clock),
            clock=clock,
        )

    async def fetch(self, city: str, state: str) -> LocalNewsResult:
        """Return recent local articles for a city, newest first.

        Raises:
            ValueError: If city or state is empty
        """
        if not city or not state:
            raise ValueError("Missing city or state")

        key = cache_key(f"{city}-{state}")
        cached, fresh = self.cache.get(key)
        if cached is not None and fresh:
            return cached

        result = LocalNewsResult(city=city, state=state)
        articles, source = await self._search(f"{city} {state}")
        if articles:
            result.feed_source = source
        else:
            for major_city in self.major_cities.get(state, []):
                if major_city.lower() == city.lower():
                    continue
                articles, _ = await self._search(f"{major_city} {state}")
                if articles:
                    result.feed_source = "fallback"
                    result.fallback_city = major_city
                    break

        enriched = enrich_articles(articles, self.bias_table)
        enriched.sort(key=lambda article: article.published_at, reverse=True)
        result.articles = enriched
        self.cache.set(key, result)
        log_event(
            logger,
            "Local news fetched",
            event="local_news",
            city=city,
            state=state,
            feed_source=result.feed_source,
            fallback_city=result.fallback_city,
            count=len(enriched),
        )
        return result

    async def _search(self, query: str) -> tuple[list[Article], str]:
        articles = await self._fetch_feed(
            GOOGLE_NEWS_URL,
            {"q": f"{query} local news", "hl": "en-US", "gl": "US", "ceid": "US:en"},
            "google_news",
        )
        if articles:
            return articles, "google"
        articles = await self._fetch_feed(
            BING_NEWS_URL,
            {"q": f"{query} news", "format": "rss"},
            "bing_news",
        )
        return articles, "bing"

    async def _fetch_feed(self, url: str, params: dict[str, str], provider: str) -> list[Article]:
        result = await self.http.get_text(url, params=params, headers=FEED_HEADERS)
        if not result.ok:
            logger.warning("%s search failed: %s", provider, result.error)
            return []
        articles = parse_feed(result.content or b"", provider, limit=MAX_ITEMS)
        cutoff = datetime.fromtimestamp(self._clock(), tz=timezone.utc) - MAX_AGE
        return [article for article in articles if article.published_at >= cutoff]
