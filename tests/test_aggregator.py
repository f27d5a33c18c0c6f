"""Tests for cascading aggregation, caching and the sample fallback."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

from intel_briefing.aggregator import SAMPLE_PROVIDER, Aggregator
from intel_briefing.bias import load_bias_table
from intel_briefing.cache import TimedCache
from intel_briefing.config import AppConfig
from intel_briefing.core.types import Article
from intel_briefing.providers.base import NewsProvider, ProviderError
from intel_briefing.stats import ProviderCallTracker


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: float = NOW.timestamp()):
        self.now = now

    def __call__(self) -> float:
        return self.now


class StubProvider(NewsProvider):
    def __init__(self, name, articles=None, error=None, tracker=None):
        super().__init__(http=None, tracker=tracker)
        self.name = name
        self.articles = articles or []
        self.error = error
        self.calls = 0

    async def _fetch(self, category, region):
        self.calls += 1
        self._track()
        if self.error is not None:
            raise self.error
        return list(self.articles)


def _article(slug, minutes_ago=0, title=None, domain="example.com"):
    return Article(
        title=title or f"Story {slug}",
        url=f"https://{domain}/{slug}",
        published_at=NOW - timedelta(minutes=minutes_ago),
        source_name="Example",
    )


def _aggregator(tiers, clock=None, min_articles=1, **kwargs):
    clock = clock or FakeClock()
    return Aggregator(
        tiers=tiers,
        bias_table=load_bias_table(),
        cache=TimedCache(900, clock=clock),
        min_articles=min_articles,
        clock=clock,
        **kwargs,
    )


def test_higher_priority_provider_wins_url_collision():
    first = StubProvider("first", [_article("shared", title="From first")])
    second = StubProvider("second", [_article("shared", title="From second"), _article("only-second")])
    aggregator = _aggregator([[first, second]])

    result = asyncio.run(aggregator.fetch_result("general"))

    titles = {a.url: a.title for a in result.articles}
    assert titles["https://example.com/shared"] == "From first"
    assert len(result.articles) == 2
    assert result.providers_used == ["first", "second"]


def test_result_is_sorted_newest_first_and_enriched():
    provider = StubProvider(
        "rss",
        [
            _article("old", minutes_ago=90),
            _article("new", minutes_ago=5, domain="www.cnn.com"),
            _article("mid", minutes_ago=30),
        ],
    )
    articles = asyncio.run(_aggregator([[provider]]).fetch_articles("politics"))

    assert [a.url.rsplit("/", 1)[-1] for a in articles] == ["new", "mid", "old"]
    assert articles[0].bias == "left"
    assert articles[1].bias is None
    assert all(a.id for a in articles)


def test_fresh_cache_hit_skips_providers():
    provider = StubProvider("rss", [_article("a")])
    aggregator = _aggregator([[provider]])

    first = asyncio.run(aggregator.fetch_result("general", "us"))
    second = asyncio.run(aggregator.fetch_result("general", "us"))

    assert provider.calls == 1
    assert not first.from_cache
    assert second.from_cache
    assert second.providers_used == ["rss"]
    assert [a.id for a in second.articles] == [a.id for a in first.articles]


def test_stale_entry_triggers_refetch():
    clock = FakeClock()
    provider = StubProvider("rss", [_article("a")])
    aggregator = _aggregator([[provider]], clock=clock)

    asyncio.run(aggregator.fetch_articles("general"))
    clock.now += 901
    asyncio.run(aggregator.fetch_articles("general"))

    assert provider.calls == 2


def test_cache_is_keyed_by_category_and_region():
    provider = StubProvider("rss", [_article("a")])
    aggregator = _aggregator([[provider]])

    asyncio.run(aggregator.fetch_articles("general", "us"))
    asyncio.run(aggregator.fetch_articles("general", "gb"))
    asyncio.run(aggregator.fetch_articles("sports", "us"))

    assert provider.calls == 3
    assert aggregator.cache_stats()["entries"] == 3


def test_cascade_stops_once_enough_articles_are_collected():
    primary = StubProvider("rss", [_article("a"), _article("b")])
    backup = StubProvider("newsapi", [_article("c")])

    result = asyncio.run(_aggregator([[primary], [backup]], min_articles=2).fetch_result("general"))

    assert backup.calls == 0
    assert result.providers_used == ["rss"]


def test_cascade_escalates_when_tier_falls_short():
    primary = StubProvider("rss", [_article("a")])
    backup = StubProvider("newsapi", [_article("a"), _article("c")])

    result = asyncio.run(_aggregator([[primary], [backup]], min_articles=3).fetch_result("general"))

    assert backup.calls == 1
    assert sorted(a.url for a in result.articles) == ["https://example.com/a", "https://example.com/c"]
    assert result.providers_used == ["rss", "newsapi"]


def test_provider_contributing_only_duplicates_is_not_listed():
    primary = StubProvider("rss", [_article("a")])
    backup = StubProvider("newsapi", [_article("a")])

    result = asyncio.run(_aggregator([[primary], [backup]], min_articles=5).fetch_result("general"))

    assert result.providers_used == ["rss"]


def test_failing_provider_is_contained():
    broken = StubProvider("currents", error=ProviderError("HTTP 500"))
    crashing = StubProvider("thenewsapi", error=RuntimeError("boom"))
    healthy = StubProvider("newsapi", [_article("a")])

    result = asyncio.run(_aggregator([[broken, crashing, healthy]]).fetch_result("general"))

    assert [a.url for a in result.articles] == ["https://example.com/a"]
    assert result.providers_used == ["newsapi"]
    assert not result.degraded


def test_all_providers_empty_serves_uncached_samples():
    empty = StubProvider("rss")
    broken = StubProvider("newsapi", error=ProviderError("HTTP 429"))
    aggregator = _aggregator([[empty], [broken]])

    result = asyncio.run(aggregator.fetch_result("technology"))

    assert result.degraded
    assert result.providers_used == [SAMPLE_PROVIDER]
    assert result.articles
    assert all(a.id for a in result.articles)
    assert result.articles[0].published_at == NOW
    assert len(aggregator.cache) == 0

    asyncio.run(aggregator.fetch_result("technology"))
    assert empty.calls == 2


def test_samples_for_unknown_category_use_general_set():
    aggregator = _aggregator([[StubProvider("rss")]])
    general = asyncio.run(aggregator.fetch_articles("general"))
    unknown = asyncio.run(aggregator.fetch_articles("weather"))

    assert [a.title for a in unknown] == [a.title for a in general]


def test_max_age_drops_old_articles():
    provider = StubProvider("rss", [_article("fresh", minutes_ago=60), _article("stale", minutes_ago=60 * 30)])
    articles = asyncio.run(_aggregator([[provider]], max_age_hours=24).fetch_articles("general"))

    assert [a.url for a in articles] == ["https://example.com/fresh"]


def test_call_stats_follow_tracker():
    clock = FakeClock()
    tracker = ProviderCallTracker(["rss", "newsapi"], clock=clock)
    provider = StubProvider("rss", [_article("a")], tracker=tracker)
    aggregator = _aggregator([[provider]], clock=clock, tracker=tracker)

    asyncio.run(aggregator.fetch_articles("general"))

    stats = aggregator.provider_call_stats()
    assert stats["rss"]["count"] == 1
    assert stats["newsapi"]["count"] == 0


def test_from_config_builds_configured_tiers():
    aggregator = Aggregator.from_config(AppConfig())

    assert [[p.name for p in tier] for tier in aggregator.tiers] == [
        ["rss"],
        ["currents", "thenewsapi"],
        ["newsapi"],
    ]
    assert aggregator.cache.ttl_seconds == 900
    assert aggregator.min_articles == 10


class Rendezvous:
    """Releases waiters only once `parties` of them have arrived."""

    def __init__(self, parties: int):
        self.parties = parties
        self.arrived = 0
        self._event: asyncio.Event | None = None

    async def arrive(self) -> None:
        if self._event is None:
            self._event = asyncio.Event()
        self.arrived += 1
        if self.arrived >= self.parties:
            self._event.set()
        await asyncio.wait_for(self._event.wait(), timeout=1)


class GatedProvider(NewsProvider):
    def __init__(self, name, gate, log, articles):
        super().__init__(http=None)
        self.name = name
        self.gate = gate
        self.log = log
        self.articles = articles

    async def _fetch(self, category, region):
        self.log.append(("start", self.name))
        await self.gate.arrive()
        self.log.append(("end", self.name))
        return list(self.articles)


def test_providers_in_a_tier_run_concurrently_and_tiers_in_order():
    log = []
    both = Rendezvous(2)
    first = GatedProvider("currents", both, log, [_article("a")])
    second = GatedProvider("thenewsapi", both, log, [_article("b")])
    backup = GatedProvider("newsapi", Rendezvous(1), log, [_article("c")])

    result = asyncio.run(_aggregator([[first, second], [backup]], min_articles=5).fetch_result("general"))

    assert set(log[:2]) == {("start", "currents"), ("start", "thenewsapi")}
    assert set(log[2:4]) == {("end", "currents"), ("end", "thenewsapi")}
    assert log[4:] == [("start", "newsapi"), ("end", "newsapi")]
    assert result.providers_used == ["currents", "thenewsapi", "newsapi"]
