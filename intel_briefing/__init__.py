"""
Intel Briefing - multi-source news aggregation with media-bias enrichment.

Fetches headlines from RSS feeds and news APIs through a cascading
provider fallback, deduplicates and enriches them with outlet bias and
reliability, caches results per category and groups related headlines
into story clusters.

Main entry point is the CLI via the `intel-briefing` command. Library
callers that need isolation (tests, several configs in one process)
construct their own Aggregator with Aggregator.from_config. The
module-level functions below are a convenience layer over one lazily
built Aggregator; configure() replaces it, and lookup_bias reads the
bias table of whichever Aggregator is current.

Example:
    $ intel-briefing headlines --category politics
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "Aggregator",
    "AggregationResult",
    "Article",
    "EnrichedArticle",
    "StoryCluster",
    "CATEGORIES",
    "configure",
    "fetch_articles",
    "cluster_articles",
    "lookup_bias",
    "get_provider_call_stats",
]
__version__ = "0.1.0"

from .aggregator import AggregationResult, Aggregator
from .clustering import cluster_articles
from . import bias as _bias
from .config import AppConfig
from .core.types import CATEGORIES, Article, EnrichedArticle, StoryCluster

_aggregator: Aggregator | None = None


def configure(cfg: AppConfig | None = None) -> Aggregator:
    """Replace the shared aggregator (and its cache, call counters and bias table)."""
    global _aggregator
    _aggregator = Aggregator.from_config(cfg or AppConfig())
    return _aggregator


def _shared() -> Aggregator:
    return _aggregator if _aggregator is not None else configure()


async def fetch_articles(category: str, region: str = "us") -> list[EnrichedArticle]:
    """Enriched articles for a category, newest first (see Aggregator)."""
    return await _shared().fetch_articles(category, region)


def lookup_bias(domain: str, name: str | None = None) -> dict[str, object] | None:
    """{"bias", "reliability"} for an outlet from the configured bias dataset."""
    return _bias.lookup_bias(domain, name, _shared().bias_table)


def get_provider_call_stats() -> dict[str, dict[str, float | int]]:
    return _shared().provider_call_stats()
