"""Currents API provider (real-time, daily quota)."""

from __future__ import annotations

from ..core.types import Article
from ..fetcher import HttpFetcher
from ..normalize import normalize_record
from ..stats import ProviderCallTracker
from .base import NewsProvider, ProviderError


class CurrentsProvider(NewsProvider):
    name = "currents"
    base_url = "https://api.currentsapi.services/v1/latest-news"
    categories = {
        "general": "general",
        "politics": "politics",
        "technology": "technology",
        "business": "business",
        "science": "science",
        "health": "health",
        "sports": "sports",
        "entertainment": "entertainment",
    }

    def __init__(self, http: HttpFetcher, api_key: str | None, tracker: ProviderCallTracker | None = None):
        super().__init__(http, tracker)
        self.api_key = api_key

    async def _fetch(self, category: str, region: str) -> list[Article]:
        if not self.api_key:
            return []
        params = {
            "language": "en",
            "category": self.map_category(category),
            "apiKey": self.api_key,
        }
        self._track()
        result = await self.http.get_json(self.base_url, params=params)
        if not result.ok:
            raise ProviderError(result.error)

        records = (result.data or {}).get("news") or []
        articles = []
        for record in records:
            article = normalize_record(record, self.name)
            if article is not None:
                articles.append(article)
        return articles
