"""Tests for article deduplication."""

from __future__ import annotations

from datetime import datetime, timezone

from intel_briefing.core.dedup import dedup_articles
from intel_briefing.core.types import Article


def _article(title, url, source="Example"):
    return Article(
        title=title,
        url=url,
        published_at=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
        source_name=source,
    )


def test_first_copy_of_a_url_wins():
    articles = [
        _article("Primary headline", "https://example.com/a", source="Primary"),
        _article("Secondary headline", "https://example.com/a", source="Secondary"),
        _article("Other story", "https://example.com/b"),
    ]

    kept = dedup_articles(articles)

    assert [a.url for a in kept] == ["https://example.com/a", "https://example.com/b"]
    assert kept[0].source_name == "Primary"


def test_surrounding_whitespace_does_not_defeat_url_match():
    kept = dedup_articles(
        [_article("One", "https://example.com/a"), _article("Two", " https://example.com/a ")]
    )
    assert len(kept) == 1


def test_same_title_under_different_urls_is_kept_without_threshold():
    kept = dedup_articles(
        [_article("Same story", "https://example.com/a"), _article("Same story", "https://example.com/b")]
    )
    assert len(kept) == 2


def test_fuzzy_title_dedup_applies_within_one_domain_only():
    articles = [
        _article("Senate passes sweeping climate bill", "https://example.com/a"),
        _article("Senate Passes Sweeping Climate Bill!", "https://example.com/a-amp"),
        _article("Senate passes sweeping climate bill", "https://another.example.net/x"),
    ]

    kept = dedup_articles(articles, title_threshold=90)

    assert [a.url for a in kept] == ["https://example.com/a", "https://another.example.net/x"]
