"""Attach identity and media-bias data to normalized articles."""

from __future__ import annotations

from .bias import BiasTable, bias_direction
from .core.identity import article_id, extract_domain
from .core.types import Article, EnrichedArticle


def enrich_article(article: Article, table: BiasTable) -> EnrichedArticle:
    """Return the enriched form of an article.

    Pure given the table: identical (title, url, source_name) input always
    yields an identical result. Unknown outlets get None for bias,
    bias_direction and reliability.
    """
    record = table.lookup(article.url, article.source_name)
    return EnrichedArticle.from_article(
        article,
        id=article_id(article.title, article.url),
        source_domain=extract_domain(article.url),
        bias=record.bias if record else None,
        bias_direction=bias_direction(record.bias) if record else None,
        reliability=record.reliability if record else None,
    )


def enrich_articles(articles: list[Article], table: BiasTable) -> list[EnrichedArticle]:
    return [enrich_article(article, table) for article in articles]
