"""Current conditions from the OpenWeather API."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable

from ..cache import TimedCache
from ..config import AppConfig, get_api_key
from ..fetcher import HttpFetcher

logger = logging.getLogger(__name__)

WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


@dataclass
class WeatherData:
    """Rounded imperial readings for one location."""
    temp: int
    feels_like: int
    high: int
    low: int
    description: str
    icon: str
    city: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "temp": self.temp,
            "feelsLike": self.feels_like,
            "high": self.high,
            "low": self.low,
            "description": self.description,
            "icon": self.icon,
            "city": self.city,
        }


def parse_weather(data: dict[str, Any]) -> WeatherData:
    main = data.get("main") or {}
    conditions = (data.get("weather") or [{}])[0] or {}
    return WeatherData(
        temp=round(main.get("temp") or 0),
        feels_like=round(main.get("feels_like") or 0),
        high=round(main.get("temp_max") or 0),
        low=round(main.get("temp_min") or 0),
        description=conditions.get("description") or "",
        icon=conditions.get("icon") or "01d",
        city=data.get("name") or "",
    )


class WeatherService:
    """Cached current weather keyed by "lat,lon" or zip code."""

    def __init__(self, http: HttpFetcher, api_key: str | None, cache: TimedCache[WeatherData]):
        self.http = http
        self.api_key = api_key
        self.cache = cache

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        http: HttpFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> WeatherService:
        return cls(
            http or HttpFetcher(cfg.fetch),
            get_api_key(cfg.weather.api_key_env),
            TimedCache(cfg.cache.weather_ttl_seconds, cfg.cache.max_entries, clock=clock),
        )

    async def current(
        self,
        lat: float | str | None = None,
        lon: float | str | None = None,
        zip_code: str | None = None,
    ) -> WeatherData | None:
        """Return current conditions for a coordinate pair or a US zip code.

        Returns:
            The weather, or None when no API key is configured or the
            upstream call fails

        Raises:
            ValueError: If neither lat/lon nor zip_code is given
        """
        if lat is not None and lon is not None:
            key = f"{lat},{lon}"
            params = {"lat": lat, "lon": lon}
        elif zip_code:
            key = zip_code
            params = {"zip": f"{zip_code},US"}
        else:
            raise ValueError("Missing lat/lon or zip")

        if not self.api_key:
            logger.warning("Weather API key is not configured")
            return None

        cached, fresh = self.cache.get(key)
        if cached is not None and fresh:
            return cached

        result = await self.http.get_json(
            WEATHER_URL,
            params={**params, "units": "imperial", "appid": self.api_key},
        )
        if not result.ok or not isinstance(result.data, dict):
            logger.warning("Weather fetch failed for %s: %s", key, result.error)
            return None

        weather = parse_weather(result.data)
        self.cache.set(key, weather)
        return weather
