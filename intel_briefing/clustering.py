"""
Story clustering by headline keyword overlap.

Articles are grouped greedily in input order: each unassigned article seeds
a cluster and absorbs every later unassigned article whose headline keywords
have a Jaccard index with the seed's of at least the threshold. Membership
is final once assigned. Pairwise comparison is O(n^2), which is fine for a
category result set of tens to low hundreds of articles.
"""

from __future__ import annotations

import re
from typing import Sequence

from .core.types import EnrichedArticle, StoryCluster


SIMILARITY_THRESHOLD = 0.25
MAX_KEYWORDS = 5

STOP_WORDS = frozenset(
    """
    a an the and or but in on at to for of with by from is it its as are was
    were be been has have had do does did will would could should may might
    can this that these those he she they we you i my his her our their your
    who what which when where how why not no so if than then just also about
    up out more some only other new over after into all says said get got
    back now one two first last year years day time most being make like
    before between each under here own through during both same off way
    still many even because against while per via report reports show shows
    according latest need
    """.split()
)

_NON_WORD_RE = re.compile(r"[^a-z0-9\s'-]")


def extract_keywords(title: str) -> list[str]:
    """Return the distinct headline keywords in order of first appearance.

    Lower-cases, drops punctuation other than hyphens and apostrophes, then
    discards tokens of two characters or fewer, stop words and numbers.
    """
    cleaned = _NON_WORD_RE.sub("", title.lower())
    keywords: dict[str, None] = {}
    for token in cleaned.split():
        if len(token) <= 2 or token in STOP_WORDS or token.isdigit():
            continue
        keywords.setdefault(token, None)
    return list(keywords)


def jaccard_similarity(a: set[str], b: set[str]) -> float:
    """|A & B| / |A | B|, defined as 0 when either set is empty."""
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    union = len(a) + len(b) - intersection
    return intersection / union if union else 0.0


def cluster_articles(
    articles: Sequence[EnrichedArticle],
    threshold: float = SIMILARITY_THRESHOLD,
    max_keywords: int = MAX_KEYWORDS,
) -> list[StoryCluster]:
    """Partition articles into story clusters.

    Args:
        articles: Enriched articles, typically newest first
        threshold: Minimum similarity to the seed for joining its cluster
        max_keywords: Number of representative keywords kept per cluster

    Returns:
        Clusters ordered by member count, largest first; equal-sized
        clusters keep the order in which they were formed
    """
    if not articles:
        return []

    ordered_keywords = [extract_keywords(article.title) for article in articles]
    keyword_sets = [set(words) for words in ordered_keywords]
    assigned = [False] * len(articles)
    clusters: list[StoryCluster] = []

    for i, seed in enumerate(articles):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [i]

        for j in range(i + 1, len(articles)):
            if assigned[j]:
                continue
            if jaccard_similarity(keyword_sets[i], keyword_sets[j]) >= threshold:
                members.append(j)
                assigned[j] = True

        member_articles = [articles[idx] for idx in members]
        lead = member_articles[0]
        for candidate in member_articles[1:]:
            if (candidate.reliability or 0) > (lead.reliability or 0):
                lead = candidate

        keywords: dict[str, None] = {}
        for idx in members:
            for word in ordered_keywords[idx]:
                keywords.setdefault(word, None)

        clusters.append(
            StoryCluster(
                id=f"cluster-{seed.id or i}",
                lead=lead,
                articles=member_articles,
                keywords=list(keywords)[:max_keywords],
            )
        )

    # sorted() is stable, so equal-sized clusters keep formation order
    return sorted(clusters, key=lambda cluster: len(cluster.articles), reverse=True)
