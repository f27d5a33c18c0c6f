"""Dashboard widgets served next to the news pipeline: markets, scores,
weather and local news. Each service owns its own TTL cache."""

from .local_news import LocalNewsResult, LocalNewsService
from .markets import MarketQuote, MarketsService
from .scores import GameScore, League, ScoresService, TeamInfo
from .weather import WeatherData, WeatherService

__all__ = [
    "LocalNewsResult",
    "LocalNewsService",
    "MarketQuote",
    "MarketsService",
    "GameScore",
    "League",
    "ScoresService",
    "TeamInfo",
    "WeatherData",
    "WeatherService",
]
