"""
Core data types for the Intel Briefing aggregator.

This module defines the fundamental data structures used throughout the pipeline:
- Article: Canonical article shape produced by the normalizer
- EnrichedArticle: Article with identity and bias/reliability data attached
- SourceBiasRecord: One row of the static media-bias dataset
- StoryCluster: Group of articles covering the same story
- CacheEntry: Stored aggregation result with its creation time
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Literal

BiasRating = Literal[
    "far-left",
    "left",
    "center-left",
    "center",
    "center-right",
    "right",
    "far-right",
]
BiasDirection = Literal["left", "center", "right"]

BIAS_RATINGS: tuple[str, ...] = (
    "far-left",
    "left",
    "center-left",
    "center",
    "center-right",
    "right",
    "far-right",
)

CATEGORIES: tuple[str, ...] = (
    "general",
    "politics",
    "technology",
    "business",
    "science",
    "sports",
    "health",
    "entertainment",
)


@dataclass(frozen=True)
class Article:
    """Canonical article shape shared by every provider.

    Attributes:
        title: The article headline (never empty)
        url: Link to the article, used as identity for deduplication
        published_at: Timezone-aware UTC publish time
        source_name: Display name of the publishing outlet
        description: Plain-text teaser, at most 300 characters
        image_url: Lead image if one could be found
        author: Byline if the provider supplied one
        content: Article body; the pipeline does not fetch bodies
    """
    title: str
    url: str
    published_at: datetime
    source_name: str
    description: str | None = None
    image_url: str | None = None
    author: str | None = None
    content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "imageUrl": self.image_url,
            "publishedAt": self.published_at.isoformat(),
            "sourceName": self.source_name,
            "author": self.author,
            "content": self.content,
        }


@dataclass(frozen=True)
class EnrichedArticle(Article):
    """Article with identity and media-bias data attached.

    Attributes:
        id: Stable hash of (title, url) so client state survives re-fetch
        source_domain: Host of the article URL without "www."
        bias: 7-point bias rating, or None for unknown sources
        bias_direction: Bias collapsed to left/center/right, None when bias is None
        reliability: 0-100 reliability score, or None for unknown sources
    """
    id: str = ""
    source_domain: str = ""
    bias: BiasRating | None = None
    bias_direction: BiasDirection | None = None
    reliability: int | None = None

    @classmethod
    def from_article(cls, article: Article, **extra: Any) -> EnrichedArticle:
        base = {f.name: getattr(article, f.name) for f in fields(Article)}
        return cls(**base, **extra)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "id": self.id,
                "sourceDomain": self.source_domain,
                "bias": self.bias,
                "biasDirection": self.bias_direction,
                "reliability": self.reliability,
            }
        )
        return payload


@dataclass(frozen=True)
class SourceBiasRecord:
    """One outlet from the bundled media-bias dataset."""
    name: str
    domain: str
    bias: BiasRating
    reliability: int
    country: str = ""


@dataclass
class StoryCluster:
    """Articles from different outlets judged to cover the same story.

    Attributes:
        id: Identifier derived from the seed article
        lead: Most reliable member (first-formed member on ties)
        articles: Members in input order, seed first
        keywords: Representative headline keywords
    """
    id: str
    lead: EnrichedArticle
    articles: list[EnrichedArticle] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "lead": self.lead.to_dict(),
            "articles": [article.to_dict() for article in self.articles],
            "keywords": list(self.keywords),
        }


@dataclass
class CacheEntry:
    """Aggregated result stored under a (category, region) key.

    Attributes:
        key: The cache key
        data: Enriched articles, newest first
        timestamp: Epoch seconds when the entry was stored
        provider_used: Providers that contributed surviving articles
    """
    key: str
    data: list[EnrichedArticle]
    timestamp: float
    provider_used: list[str] = field(default_factory=list)
