"""Tests for article enrichment."""

from __future__ import annotations

from datetime import datetime, timezone

from intel_briefing.bias import load_bias_table
from intel_briefing.core.identity import article_id, extract_domain
from intel_briefing.core.types import Article
from intel_briefing.enrich import enrich_article, enrich_articles


def _article(title="Senate passes climate bill", url="https://www.cnn.com/2026/03/01/climate", source="CNN"):
    return Article(
        title=title,
        url=url,
        published_at=datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc),
        source_name=source,
    )


def test_known_outlet_gets_bias_and_reliability():
    enriched = enrich_article(_article(), load_bias_table())

    assert enriched.source_domain == "cnn.com"
    assert enriched.bias == "left"
    assert enriched.bias_direction == "left"
    assert enriched.reliability == 62
    assert enriched.title == "Senate passes climate bill"


def test_id_is_stable_across_refetches():
    table = load_bias_table()
    first = enrich_article(_article(), table)
    second = enrich_article(_article(), table)

    assert first.id == second.id
    assert first.id == article_id("Senate passes climate bill", "https://www.cnn.com/2026/03/01/climate")
    assert len(first.id) == 16


def test_id_changes_with_title_or_url():
    table = load_bias_table()
    base = enrich_article(_article(), table)

    assert enrich_article(_article(title="Senate rejects climate bill"), table).id != base.id
    assert enrich_article(_article(url="https://www.cnn.com/other"), table).id != base.id


def test_unknown_outlet_has_no_bias_fields():
    enriched = enrich_article(
        _article(url="https://example.org/story", source="Example Gazette"),
        load_bias_table(),
    )

    assert enriched.bias is None
    assert enriched.bias_direction is None
    assert enriched.reliability is None
    assert enriched.source_domain == "example.org"


def test_enrich_articles_preserves_order_and_serializes_camel_case():
    articles = [_article(url=f"https://example.org/{i}", source="Example") for i in range(3)]
    enriched = enrich_articles(articles, load_bias_table())

    assert [item.url for item in enriched] == [item.url for item in articles]
    payload = enriched[0].to_dict()
    assert payload["sourceDomain"] == "example.org"
    assert payload["publishedAt"] == "2026-03-01T10:00:00+00:00"
    assert payload["biasDirection"] is None


def test_extract_domain_edge_cases():
    assert extract_domain("https://WWW.Example.COM/path") == "example.com"
    assert extract_domain("www.bbc.co.uk") == "bbc.co.uk"
    assert extract_domain("") == ""
