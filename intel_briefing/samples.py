"""Built-in sample articles served when every provider comes back empty."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
import json
from pathlib import Path
from typing import Any

from .bias import BiasTable
from .core.types import Article, EnrichedArticle
from .enrich import enrich_article

SAMPLES_PATH = Path(__file__).parent / "data" / "sample_articles.json"
SAMPLE_SPACING = timedelta(minutes=45)


@lru_cache(maxsize=1)
def _load_samples() -> dict[str, list[dict[str, Any]]]:
    with open(SAMPLES_PATH, encoding="utf-8") as f:
        return json.load(f)


def sample_articles(
    category: str,
    table: BiasTable,
    now: datetime | None = None,
) -> list[EnrichedArticle]:
    """Return the fixed sample set for a category, newest first.

    Unknown categories get the "general" set. Publish times are spaced
    45 minutes apart counting back from now.
    """
    stories = _load_samples()
    chosen = stories.get(category) or stories["general"]
    now = now or datetime.now(timezone.utc)

    articles = []
    for i, story in enumerate(chosen):
        article = Article(
            title=story["title"],
            url=story["url"],
            published_at=now - i * SAMPLE_SPACING,
            source_name=story["source"],
            description=story.get("description"),
            image_url=story.get("image"),
        )
        articles.append(enrich_article(article, table))
    return articles
