"""
Multi-provider news aggregation with cascading fallback.

For a (category, region) key the aggregator:
1. Serves a fresh cache entry if there is one (no network calls)
2. Runs provider tiers in priority order; providers inside a tier run
   concurrently, and a tier only runs if the tiers before it produced
   fewer than min_articles distinct articles
3. Merges results, keeping the first copy of each URL (higher priority wins)
4. Falls back to a fixed sample set when nothing came back at all
5. Enriches, sorts newest first, caches and returns
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
import time
from typing import Callable

from .bias import BiasTable, load_bias_table
from .cache import TimedCache
from .config import AppConfig, validate_config
from .core.dedup import dedup_articles
from .core.identity import cache_key
from .core.types import Article, CacheEntry, EnrichedArticle
from .enrich import enrich_articles
from .fetcher import HttpFetcher
from .logging_utils import log_event
from .providers.base import NewsProvider
from .providers.factory import build_tiers
from .samples import sample_articles
from .stats import ProviderCallTracker

logger = logging.getLogger(__name__)

SAMPLE_PROVIDER = "sample"


@dataclass
class AggregationResult:
    """Articles for one request plus where they came from.

    Attributes:
        articles: Enriched articles, newest first
        providers_used: Providers that contributed articles, or ["sample"]
        from_cache: True when served from a fresh cache entry
        degraded: True when the sample fallback was served
    """
    articles: list[EnrichedArticle]
    providers_used: list[str] = field(default_factory=list)
    from_cache: bool = False
    degraded: bool = False


class Aggregator:
    """Owns the provider tiers, news cache and call tracker for one process.

    Args:
        tiers: Providers grouped by priority, highest first
        bias_table: Static bias lookup used for enrichment
        cache: Cache of CacheEntry values keyed by "category:region"
        tracker: Call tracker shared with the providers
        min_articles: Distinct-article count that stops the cascade
        title_similarity_threshold: Optional fuzzy title dedup threshold
        max_age_hours: Optional recency window; older articles are dropped
        clock: Epoch-seconds clock, injectable for tests
    """

    def __init__(
        self,
        tiers: list[list[NewsProvider]],
        bias_table: BiasTable,
        cache: TimedCache[CacheEntry],
        tracker: ProviderCallTracker | None = None,
        min_articles: int = 10,
        title_similarity_threshold: int | None = None,
        max_age_hours: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.tiers = [list(tier) for tier in tiers if tier]
        self.bias_table = bias_table
        self.cache = cache
        self.tracker = tracker or ProviderCallTracker()
        self.min_articles = min_articles
        self.title_similarity_threshold = title_similarity_threshold
        self.max_age_hours = max_age_hours
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        http: HttpFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> Aggregator:
        """Build an aggregator with providers, cache and tracker from config."""
        validate_config(cfg)
        http = http or HttpFetcher(cfg.fetch)
        tracker = ProviderCallTracker(
            [name for tier in cfg.providers.tiers for name in tier],
            clock=clock,
        )
        return cls(
            tiers=build_tiers(cfg, http, tracker),
            bias_table=load_bias_table(cfg.bias.dataset_path),
            cache=TimedCache(cfg.cache.news_ttl_seconds, cfg.cache.max_entries, clock=clock),
            tracker=tracker,
            min_articles=cfg.providers.min_articles,
            title_similarity_threshold=cfg.dedup.title_similarity_threshold,
            clock=clock,
        )

    async def fetch_articles(self, category: str, region: str = "us") -> list[EnrichedArticle]:
        """Return enriched articles for a category, newest first. Never raises
        for upstream problems; the sample set stands in when nothing loads."""
        result = await self.fetch_result(category, region)
        return result.articles

    async def fetch_result(self, category: str, region: str = "us") -> AggregationResult:
        key = cache_key(category, region)
        cached, fresh = self.cache.get(key)
        if cached is not None and fresh:
            logger.debug("Cache hit for %s", key)
            return AggregationResult(
                articles=cached.data,
                providers_used=list(cached.provider_used),
                from_cache=True,
            )

        merged, origin = await self._collect(category, region)
        merged = self._apply_recency(merged)

        if not merged:
            log_event(
                logger,
                "All providers returned nothing, serving sample articles",
                event="sample_fallback",
                category=category,
                region=region,
            )
            return AggregationResult(
                articles=sample_articles(
                    category,
                    self.bias_table,
                    now=datetime.fromtimestamp(self._clock(), tz=timezone.utc),
                ),
                providers_used=[SAMPLE_PROVIDER],
                degraded=True,
            )

        enriched = enrich_articles(merged, self.bias_table)
        enriched.sort(key=lambda article: article.published_at, reverse=True)
        used = self._providers_used(merged, origin)
        entry = CacheEntry(key=key, data=enriched, timestamp=self._clock(), provider_used=used)
        self.cache.set(key, entry)
        log_event(
            logger,
            "Aggregated articles",
            event="aggregated",
            category=category,
            region=region,
            count=len(enriched),
            providers=used,
        )
        return AggregationResult(articles=enriched, providers_used=used)

    def provider_call_stats(self) -> dict[str, dict[str, float | int]]:
        return self.tracker.snapshot()

    def cache_stats(self) -> dict[str, float | int]:
        return {"ttlSeconds": self.cache.ttl_seconds, "entries": len(self.cache)}

    async def _collect(self, category: str, region: str) -> tuple[list[Article], dict[str, str]]:
        """Run provider tiers until enough distinct articles are collected.

        Returns:
            (merged articles in priority order, url -> first provider name)
        """
        merged: list[Article] = []
        origin: dict[str, str] = {}

        for level, tier in enumerate(self.tiers):
            if level > 0:
                if len(merged) >= self.min_articles:
                    break
                log_event(
                    logger,
                    "Escalating to next provider tier",
                    event="tier_escalation",
                    category=category,
                    tier=[provider.name for provider in tier],
                    collected=len(merged),
                )

            results = await asyncio.gather(
                *(provider.fetch(category, region) for provider in tier),
                return_exceptions=True,
            )
            for provider, result in zip(tier, results):
                if isinstance(result, BaseException):
                    logger.warning(
                        "%s raised past its boundary: %s: %s",
                        provider.name,
                        type(result).__name__,
                        result,
                    )
                    continue
                for article in result:
                    origin.setdefault(article.url.strip(), provider.name)
                merged = dedup_articles(merged + result, self.title_similarity_threshold)

        return merged, origin

    def _apply_recency(self, articles: list[Article]) -> list[Article]:
        if self.max_age_hours is None:
            return articles
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        cutoff = now - timedelta(hours=self.max_age_hours)
        return [article for article in articles if article.published_at >= cutoff]

    def _providers_used(self, articles: list[Article], origin: dict[str, str]) -> list[str]:
        contributed = {origin.get(article.url.strip()) for article in articles}
        ordered = [provider.name for tier in self.tiers for provider in tier]
        return [name for name in dict.fromkeys(ordered) if name in contributed]
