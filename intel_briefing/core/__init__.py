"""
Core domain models and helpers.

This package contains data types and pure helpers that are
independent of any specific provider or pipeline stage.
"""

from .types import (
    BIAS_RATINGS,
    CATEGORIES,
    Article,
    CacheEntry,
    EnrichedArticle,
    SourceBiasRecord,
    StoryCluster,
)
from .identity import article_id, cache_key, extract_domain
from .dedup import dedup_articles

__all__ = [
    "BIAS_RATINGS",
    "CATEGORIES",
    "Article",
    "CacheEntry",
    "EnrichedArticle",
    "SourceBiasRecord",
    "StoryCluster",
    "article_id",
    "cache_key",
    "extract_domain",
    "dedup_articles",
]
