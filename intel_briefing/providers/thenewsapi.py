"""TheNewsAPI provider (real-time top stories, small page size on the free tier)."""

from __future__ import annotations

from ..core.types import Article
from ..fetcher import HttpFetcher
from ..normalize import normalize_record
from ..stats import ProviderCallTracker
from .base import NewsProvider, ProviderError


class TheNewsApiProvider(NewsProvider):
    name = "thenewsapi"
    base_url = "https://api.thenewsapi.com/v1/news/top"
    categories = {
        "general": "general",
        "politics": "politics",
        "technology": "tech",
        "business": "business",
        "science": "science",
        "health": "health",
        "sports": "sports",
        "entertainment": "entertainment",
    }

    def __init__(
        self,
        http: HttpFetcher,
        api_key: str | None,
        tracker: ProviderCallTracker | None = None,
        limit: int = 3,
    ):
        super().__init__(http, tracker)
        self.api_key = api_key
        self.limit = limit

    async def _fetch(self, category: str, region: str) -> list[Article]:
        if not self.api_key:
            return []
        params = {
            "api_token": self.api_key,
            "locale": region,
            "language": "en",
            "categories": self.map_category(category),
            "limit": self.limit,
        }
        self._track()
        result = await self.http.get_json(self.base_url, params=params)
        if not result.ok:
            raise ProviderError(result.error)

        records = (result.data or {}).get("data") or []
        articles = []
        for record in records:
            article = normalize_record(record, self.name)
            if article is not None:
                articles.append(article)
        return articles
