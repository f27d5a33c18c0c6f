"""Provider factory and registry for the cascading fetch tiers."""

from __future__ import annotations

from typing import Callable

from ..config import AppConfig, get_api_key
from ..fetcher import HttpFetcher
from ..stats import ProviderCallTracker
from .base import NewsProvider
from .currents import CurrentsProvider
from .newsapi import NewsApiProvider
from .rss import RssProvider, load_feed_sources
from .thenewsapi import TheNewsApiProvider


ProviderBuilder = Callable[[AppConfig, HttpFetcher, ProviderCallTracker], NewsProvider]


def _build_rss(cfg: AppConfig, http: HttpFetcher, tracker: ProviderCallTracker) -> NewsProvider:
    feeds = load_feed_sources(cfg.providers.feeds_path)
    return RssProvider(http, feeds, tracker, items_per_feed=cfg.fetch.items_per_feed)


def _build_currents(cfg: AppConfig, http: HttpFetcher, tracker: ProviderCallTracker) -> NewsProvider:
    return CurrentsProvider(http, get_api_key(cfg.providers.currents_api_key_env), tracker)


def _build_thenewsapi(cfg: AppConfig, http: HttpFetcher, tracker: ProviderCallTracker) -> NewsProvider:
    return TheNewsApiProvider(http, get_api_key(cfg.providers.thenewsapi_key_env), tracker)


def _build_newsapi(cfg: AppConfig, http: HttpFetcher, tracker: ProviderCallTracker) -> NewsProvider:
    return NewsApiProvider(http, get_api_key(cfg.providers.newsapi_key_env), tracker)


_PROVIDER_REGISTRY: dict[str, ProviderBuilder] = {
    "rss": _build_rss,
    "currents": _build_currents,
    "thenewsapi": _build_thenewsapi,
    "newsapi": _build_newsapi,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(
    name: str,
    cfg: AppConfig,
    http: HttpFetcher,
    tracker: ProviderCallTracker,
) -> NewsProvider:
    """Build a provider instance from runtime config."""
    builder = _PROVIDER_REGISTRY.get(name.lower().strip())
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {name}. Supported: {supported}")
    return builder(cfg, http, tracker)


def build_tiers(
    cfg: AppConfig,
    http: HttpFetcher,
    tracker: ProviderCallTracker,
) -> list[list[NewsProvider]]:
    """Instantiate the configured provider tiers, preserving priority order."""
    return [
        [create_provider(name, cfg, http, tracker) for name in tier]
        for tier in cfg.providers.tiers
        if tier
    ]
