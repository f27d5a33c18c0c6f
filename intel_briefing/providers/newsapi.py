"""NewsAPI.org provider.

Used as the last tier: the free plan is rate limited and its results can
lag by hours. Categories without a native NewsAPI category are served by
a keyword search over the last day instead of top headlines.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from ..core.types import Article
from ..fetcher import HttpFetcher
from ..normalize import normalize_record
from ..stats import ProviderCallTracker
from .base import NewsProvider, ProviderError


SEARCH_QUERIES = {
    "politics": "politics OR congress OR senate OR president OR legislation",
}


class NewsApiProvider(NewsProvider):
    name = "newsapi"
    headlines_url = "https://newsapi.org/v2/top-headlines"
    search_url = "https://newsapi.org/v2/everything"
    categories = {
        "general": "general",
        "technology": "technology",
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
        page_size: int = 40,
    ):
        super().__init__(http, tracker)
        self.api_key = api_key
        self.page_size = page_size

    def build_request(self, category: str, region: str) -> tuple[str, dict[str, str | int]]:
        query = SEARCH_QUERIES.get(category)
        if query:
            since = (datetime.now(timezone.utc) - timedelta(days=1)).date().isoformat()
            return self.search_url, {
                "q": query,
                "language": "en",
                "sortBy": "publishedAt",
                "from": since,
                "pageSize": self.page_size,
                "apiKey": self.api_key or "",
            }
        return self.headlines_url, {
            "country": region,
            "category": self.map_category(category),
            "pageSize": self.page_size,
            "apiKey": self.api_key or "",
        }

    async def _fetch(self, category: str, region: str) -> list[Article]:
        if not self.api_key:
            return []
        url, params = self.build_request(category, region)
        self._track()
        result = await self.http.get_json(url, params=params)
        if not result.ok:
            raise ProviderError(result.error)

        data = result.data or {}
        if data.get("status") == "error":
            raise ProviderError(data.get("message") or data.get("code") or "NewsAPI error")
        articles = []
        for record in data.get("articles") or []:
            article = normalize_record(record, self.name)
            if article is not None:
                articles.append(article)
        return articles
