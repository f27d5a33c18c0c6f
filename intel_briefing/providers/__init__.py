"""
Upstream news provider adapters.

This package contains the abstract base class and one adapter per upstream
(RSS feed set, Currents, TheNewsAPI, NewsAPI.org). Every adapter exposes
the same fetch(category, region) capability and soft-fails to [].

To add a new provider:
1. Inherit from NewsProvider and implement _fetch()
2. Register a builder in factory._PROVIDER_REGISTRY
3. Add the name to config.KNOWN_PROVIDERS and to a tier in config
"""

from .base import NewsProvider, ProviderError
from .currents import CurrentsProvider
from .factory import available_providers, build_tiers, create_provider
from .newsapi import NewsApiProvider
from .rss import FeedSource, RssProvider, load_feed_sources, parse_feed
from .thenewsapi import TheNewsApiProvider

__all__ = [
    "NewsProvider",
    "ProviderError",
    "CurrentsProvider",
    "NewsApiProvider",
    "RssProvider",
    "TheNewsApiProvider",
    "FeedSource",
    "load_feed_sources",
    "parse_feed",
    "available_providers",
    "build_tiers",
    "create_provider",
]
