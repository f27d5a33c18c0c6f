"""Tests for record normalization across provider shapes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import time

import pytest

from intel_briefing.normalize import (
    extract_image,
    is_live_blog,
    normalize_record,
    parse_published,
    split_title_source,
)


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _newsapi_record(**overrides):
    record = {
        "source": {"id": None, "name": "Reuters"},
        "author": "Jane Doe",
        "title": "Senate passes sweeping climate bill",
        "description": "Lawmakers approved the measure late on Friday.",
        "url": "https://www.reuters.com/world/us/senate-climate-bill",
        "urlToImage": "https://img.reuters.com/climate.jpg",
        "publishedAt": "2026-03-01T10:00:00Z",
        "content": None,
    }
    record.update(overrides)
    return record


def test_newsapi_record_maps_to_article():
    article = normalize_record(_newsapi_record(), "newsapi", now=NOW)

    assert article is not None
    assert article.title == "Senate passes sweeping climate bill"
    assert article.source_name == "Reuters"
    assert article.image_url == "https://img.reuters.com/climate.jpg"
    assert article.author == "Jane Doe"
    assert article.published_at == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


def test_rejects_record_more_than_a_minute_in_the_future():
    future = (NOW + timedelta(minutes=3)).isoformat()
    assert normalize_record(_newsapi_record(publishedAt=future), "newsapi", now=NOW) is None


def test_accepts_record_published_exactly_now():
    article = normalize_record(_newsapi_record(publishedAt=NOW.isoformat()), "newsapi", now=NOW)
    assert article is not None
    assert article.published_at == NOW


def test_rejects_missing_title_url_and_removed_placeholder():
    assert normalize_record(_newsapi_record(title=""), "newsapi", now=NOW) is None
    assert normalize_record(_newsapi_record(url=""), "newsapi", now=NOW) is None
    assert normalize_record(_newsapi_record(title="[Removed]"), "newsapi", now=NOW) is None


def test_rejects_unparseable_date():
    assert normalize_record(_newsapi_record(publishedAt="yesterday-ish"), "newsapi", now=NOW) is None


def test_rejects_live_blog_urls():
    url = "https://www.cnn.com/politics/live-news/election-results"
    assert is_live_blog(url)
    assert normalize_record(_newsapi_record(url=url), "newsapi", now=NOW) is None
    assert not is_live_blog("https://www.cnn.com/2026/03/01/politics/delivery-drivers")


def test_currents_spaced_date_and_source_from_url():
    record = {
        "title": "New battery chemistry doubles range",
        "description": "<p>Researchers report a breakthrough.</p>",
        "url": "https://www.example.com/tech/battery",
        "author": "Staff",
        "image": "None",
        "published": "2026-03-01 11:30:00 +0000",
    }
    article = normalize_record(record, "currents", now=NOW)

    assert article is not None
    assert article.published_at == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)
    assert article.source_name == "Example"
    assert article.image_url is None
    assert article.description == "Researchers report a breakthrough."


def test_thenewsapi_known_domain_gets_display_name():
    record = {
        "title": "Markets rally on rate cut hopes",
        "description": "Stocks rose broadly.",
        "snippet": "Stocks rose broadly on Friday.",
        "url": "https://www.nytimes.com/2026/03/01/business/markets.html",
        "image_url": "https://static.nytimes.com/markets.jpg",
        "published_at": "2026-03-01T09:15:00.000000Z",
        "source": "nytimes.com",
    }
    article = normalize_record(record, "thenewsapi", now=NOW)

    assert article is not None
    assert article.source_name == "The New York Times"
    assert article.published_at == datetime(2026, 3, 1, 9, 15, tzinfo=timezone.utc)


def test_google_news_title_suffix_becomes_source():
    entry = {
        "title": "Senate passes sweeping climate bill - Reuters",
        "link": "https://news.google.com/rss/articles/abc123",
        "published": "Sun, 01 Mar 2026 11:00:00 GMT",
    }
    article = normalize_record(entry, "google_news", now=NOW)

    assert article is not None
    assert article.title == "Senate passes sweeping climate bill"
    assert article.source_name == "Reuters"


def test_split_title_source_uses_last_delimiter():
    assert split_title_source("Q&A - the budget - AP News") == ("Q&A - the budget", "AP News")
    assert split_title_source("No delimiter here") == ("No delimiter here", None)


def test_rss_description_is_plain_text_and_truncated():
    entry = {
        "title": "Long story",
        "link": "https://feeds.example.com/long",
        "published": "Sun, 01 Mar 2026 11:00:00 GMT",
        "summary": "<p>" + "word " * 100 + "</p>",
    }
    article = normalize_record(entry, "rss", source_name="Example Feed", now=NOW)

    assert article is not None
    assert article.source_name == "Example Feed"
    assert "<p>" not in article.description
    assert len(article.description) == 300


def test_extract_image_prefers_image_enclosure():
    entry = {
        "enclosures": [
            {"href": "https://cdn.example.com/audio.mp3", "type": "audio/mpeg"},
            {"href": "https://cdn.example.com/lead.jpg", "type": "image/jpeg"},
        ],
        "media_content": [{"url": "https://cdn.example.com/media.jpg"}],
    }
    assert extract_image(entry) == "https://cdn.example.com/lead.jpg"


def test_extract_image_falls_back_to_media_then_html():
    assert extract_image({"media_thumbnail": [{"url": "https://cdn.example.com/thumb.jpg"}]}) == (
        "https://cdn.example.com/thumb.jpg"
    )
    entry = {"summary": '<p><img src="https://cdn.example.com/inline.png" alt=""> Text</p>'}
    assert extract_image(entry) == "https://cdn.example.com/inline.png"
    assert extract_image({"summary": "No images"}) is None


def test_parse_published_variants():
    assert parse_published("2026-03-01T10:00:00") == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_published("2026-03-01T12:00:00+02:00") == datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_published(time.struct_time((2026, 3, 1, 10, 0, 0, 6, 60, 0))) == datetime(
        2026, 3, 1, 10, 0, tzinfo=timezone.utc
    )
    assert parse_published("") is None
    assert parse_published(None) is None


def test_unknown_provider_tag_raises():
    with pytest.raises(ValueError):
        normalize_record(_newsapi_record(), "carrier-pigeon", now=NOW)


def test_parse_published_accepts_offsets_without_colon():
    expected = datetime(2026, 3, 1, 10, 30, tzinfo=timezone.utc)

    assert parse_published("2026-03-01T12:30:00+0200") == expected
    assert parse_published("2026-03-01T10:30:00+0000") == expected
    assert parse_published("2026-03-01 10:30:00 +0000") == expected
    assert parse_published("2026-03-01T10:30:00.000Z") == expected


def test_non_mapping_record_is_dropped():
    assert normalize_record(None, "newsapi", now=NOW) is None
    assert normalize_record("headline", "currents", now=NOW) is None
    assert normalize_record(_newsapi_record(url=12345), "newsapi", now=NOW) is None
