"""
Article deduplication using URL matching and optional fuzzy title comparison.

This module removes duplicate articles based on:
1. Exact URL matches (the URL is the article's identity)
2. Fuzzy title similarity within one outlet (same story republished under
   a second URL), only when a threshold is configured
"""

from __future__ import annotations

from typing import Iterable

from rapidfuzz import fuzz

from .identity import extract_domain
from .types import Article


def dedup_articles(
    articles: Iterable[Article],
    title_threshold: int | None = None,
) -> list[Article]:
    """Remove duplicate articles, keeping the first-seen copy.

    Input order is priority order: when two records share a URL, the one
    that appears first wins and later copies are dropped silently.

    Args:
        articles: Articles in priority order
        title_threshold: Optional rapidfuzz ratio (0-100). When set, an
                         article whose title is at least this similar to a
                         kept article from the same domain is dropped too.

    Returns:
        Deduplicated list of articles, preserving original order
    """
    seen_urls: set[str] = set()
    kept: list[Article] = []
    titles_by_domain: dict[str, list[str]] = {}

    for article in articles:
        url = article.url.strip()
        if url in seen_urls:
            continue
        if title_threshold is not None:
            domain = extract_domain(url)
            existing = titles_by_domain.setdefault(domain, [])
            if _is_similar_title(article.title, existing, title_threshold):
                continue
            existing.append(article.title)
        seen_urls.add(url)
        kept.append(article)

    return kept


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio on lower-cased titles so casing differences
    between syndicated copies do not hide a match.
    """
    lowered = title.lower()
    for existing in titles:
        if fuzz.ratio(lowered, existing.lower()) >= threshold:
            return True
    return False
