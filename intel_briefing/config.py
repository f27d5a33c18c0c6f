"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings shared by every upstream call
- ProvidersConfig: Provider priority tiers, quota threshold and API keys
- CacheConfig: TTL per cache and the optional size bound
- ClusteringConfig: Story clustering threshold and keyword count
- DedupConfig: Optional fuzzy title deduplication
- BiasConfig: Media-bias dataset location
- WeatherConfig: Weather widget API key
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


KNOWN_PROVIDERS = ("rss", "currents", "thenewsapi", "newsapi")


@dataclass
class FetchConfig:
    """Configuration for upstream HTTP calls.

    Attributes:
        timeout_seconds: Per-call timeout; exceeding it is a soft failure
        user_agent: HTTP User-Agent header string
        trust_env: Whether to respect system proxy settings
        items_per_feed: Maximum items taken from a single RSS feed
    """

    timeout_seconds: float = 8.0
    user_agent: str = "Mozilla/5.0 (compatible; IntelBriefing/1.0)"
    trust_env: bool = True
    items_per_feed: int = 10


@dataclass
class ProvidersConfig:
    """Configuration for the cascading provider fallback.

    Attributes:
        tiers: Provider names grouped by priority; a tier runs only if the
               tiers before it returned fewer than min_articles
        min_articles: Distinct-article count that stops the cascade
        currents_api_key_env: Environment variable holding the Currents key
        thenewsapi_key_env: Environment variable holding the TheNewsAPI key
        newsapi_key_env: Environment variable holding the NewsAPI key
        feeds_path: Optional JSON file replacing the bundled RSS feed list
    """

    tiers: list[list[str]] = field(
        default_factory=lambda: [["rss"], ["currents", "thenewsapi"], ["newsapi"]]
    )
    min_articles: int = 10
    currents_api_key_env: str = "CURRENTS_API_KEY"
    thenewsapi_key_env: str = "THENEWSAPI_KEY"
    newsapi_key_env: str = "NEWSAPI_KEY"
    feeds_path: str | None = None


@dataclass
class CacheConfig:
    """Configuration for the in-memory time-decay caches.

    Attributes:
        news_ttl_seconds: TTL for aggregated news results
        markets_ttl_seconds: TTL for market quotes
        scores_ttl_seconds: TTL for league scoreboards
        weather_ttl_seconds: TTL for current weather
        local_news_ttl_seconds: TTL for local news results
        max_entries: Optional bound per cache; None keeps every key
    """

    news_ttl_seconds: int = 900
    markets_ttl_seconds: int = 300
    scores_ttl_seconds: int = 120
    weather_ttl_seconds: int = 900
    local_news_ttl_seconds: int = 900
    max_entries: int | None = None


@dataclass
class ClusteringConfig:
    """Configuration for story clustering.

    Attributes:
        similarity_threshold: Minimum Jaccard index to join a cluster
        max_keywords: Number of representative keywords kept per cluster
    """

    similarity_threshold: float = 0.25
    max_keywords: int = 5


@dataclass
class DedupConfig:
    """Configuration for article deduplication.

    Attributes:
        title_similarity_threshold: Fuzzy match threshold (0-100) for titles
                                    from the same domain; None disables it
    """

    title_similarity_threshold: int | None = None


@dataclass
class BiasConfig:
    """Configuration for the media-bias dataset.

    Attributes:
        dataset_path: Optional JSON file replacing the bundled dataset
    """

    dataset_path: str | None = None


@dataclass
class WeatherConfig:
    """Configuration for the weather widget.

    Attributes:
        api_key_env: Environment variable holding the OpenWeather key
    """

    api_key_env: str = "OPENWEATHER_API_KEY"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "intel_briefing.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    providers: ProvidersConfig = field(default_factory=ProvidersConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    bias: BiasConfig = field(default_factory=BiasConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        providers=ProvidersConfig(**data["providers"]),
        cache=CacheConfig(**data["cache"]),
        clustering=ClusteringConfig(**data["clustering"]),
        dedup=DedupConfig(**data["dedup"]),
        bias=BiasConfig(**data["bias"]),
        weather=WeatherConfig(**data["weather"]),
        logging=LoggingConfig(**data["logging"]),
    )


def validate_config(cfg: AppConfig) -> None:
    """Reject configurations the pipeline cannot run with.

    Raises:
        ValueError: On empty or unknown provider tiers, non-positive TTLs or
            a cache bound below one entry
    """
    tiers = cfg.providers.tiers
    if not tiers or not any(tiers):
        raise ValueError("providers.tiers must name at least one provider")
    for tier in tiers:
        for name in tier:
            if name not in KNOWN_PROVIDERS:
                raise ValueError(f"Unknown provider in providers.tiers: {name!r}")
    ttls = {
        "news_ttl_seconds": cfg.cache.news_ttl_seconds,
        "markets_ttl_seconds": cfg.cache.markets_ttl_seconds,
        "scores_ttl_seconds": cfg.cache.scores_ttl_seconds,
        "weather_ttl_seconds": cfg.cache.weather_ttl_seconds,
        "local_news_ttl_seconds": cfg.cache.local_news_ttl_seconds,
    }
    for name, value in ttls.items():
        if value <= 0:
            raise ValueError(f"cache.{name} must be positive, got {value}")
    if cfg.cache.max_entries is not None and cfg.cache.max_entries < 1:
        raise ValueError(f"cache.max_entries must be at least 1, got {cfg.cache.max_entries}")


def get_api_key(env_name: str) -> str | None:
    """Get an API key from the environment.

    Empty values and unedited placeholders (containing "your_") count as
    absent so a provider without a real key is skipped.
    """
    value = os.getenv(env_name)
    if not value or "your_" in value:
        return None
    return value
