"""
Abstract base class for news providers.

New providers should inherit from NewsProvider and implement _fetch.
The public fetch wraps it so that a provider never raises past its own
boundary: timeouts, HTTP errors and malformed payloads are logged and
turn into an empty result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

import httpx

from ..core.types import Article
from ..fetcher import HttpFetcher
from ..stats import ProviderCallTracker

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Raised inside an adapter when an upstream response is unusable."""


class NewsProvider(ABC):
    """Interchangeable upstream adapter used by the aggregator.

    Attributes:
        name: Provider key used in config tiers and call stats
        categories: Logical category -> provider vocabulary; unknown
                    categories fall back to the "general" entry
    """

    name: str = ""
    categories: dict[str, str] = {}

    def __init__(self, http: HttpFetcher, tracker: ProviderCallTracker | None = None):
        self.http = http
        self.tracker = tracker

    def map_category(self, category: str) -> str:
        return self.categories.get(category) or self.categories.get("general", "general")

    async def fetch(self, category: str, region: str = "us") -> list[Article]:
        """Fetch normalized articles for a category.

        Returns:
            Articles in provider order; an empty list on any failure
        """
        try:
            articles = await self._fetch(category, region)
        except (httpx.HTTPError, ProviderError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning(
                "%s fetch failed for %s: %s: %s",
                self.name,
                category,
                type(exc).__name__,
                exc,
            )
            return []
        logger.info("%s returned %d articles for %s", self.name, len(articles), category)
        return articles

    def _track(self) -> None:
        if self.tracker is not None:
            self.tracker.record(self.name)

    @abstractmethod
    async def _fetch(self, category: str, region: str) -> list[Article]:
        """Provider-specific fetch; may raise, fetch() contains it."""
        raise NotImplementedError
