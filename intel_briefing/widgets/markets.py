"""Market quotes from the Yahoo Finance chart endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import math
import time
from typing import Any, Callable
from urllib.parse import quote

from ..cache import TimedCache
from ..config import AppConfig
from ..fetcher import HttpFetcher

logger = logging.getLogger(__name__)

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"

SYMBOLS = [
    ("^GSPC", "S&P 500"),
    ("^IXIC", "NASDAQ"),
    ("^DJI", "DOW"),
    ("^RUT", "RUSSELL 2000"),
    ("GC=F", "GOLD"),
    ("CL=F", "OIL"),
    ("BTC-USD", "BTC"),
]

ALLOWED_RANGES = ("1d", "5d", "1mo")
DEFAULT_RANGE = "1d"
CHART_POINTS = 30


@dataclass
class MarketQuote:
    symbol: str
    label: str
    price: float
    change: float
    change_percent: float
    chart_data: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "label": self.label,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "chartData": list(self.chart_data),
        }


def normalize_range(value: str | None) -> str:
    """Restrict a requested chart range to the supported set."""
    return value if value in ALLOWED_RANGES else DEFAULT_RANGE


def parse_chart(data: Any, symbol: str, label: str) -> MarketQuote | None:
    """Build a quote from a chart response.

    The price falls back to the last close and the previous close to the
    second-to-last close when the response metadata lacks them.

    Returns:
        The quote, or None when the response carries no chart metadata
    """
    results = ((data or {}).get("chart") or {}).get("result") or []
    if not results:
        return None
    result = results[0] or {}
    meta = result.get("meta")
    if not meta:
        return None

    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = [
        float(value)
        for value in (quotes[0] or {}).get("close") or []
        if isinstance(value, (int, float)) and math.isfinite(value)
    ]

    price = meta.get("regularMarketPrice") or (closes[-1] if closes else 0) or 0
    prev_close = (
        meta.get("previousClose")
        or meta.get("chartPreviousClose")
        or (closes[-2] if len(closes) >= 2 else 0)
        or price
    )
    change = price - prev_close
    change_percent = change / prev_close * 100 if prev_close > 0 else 0.0

    return MarketQuote(
        symbol=symbol,
        label=label,
        price=round(price, 2),
        change=round(change, 2),
        change_percent=round(change_percent, 2),
        chart_data=[round(value, 2) for value in closes[-CHART_POINTS:]],
    )


class MarketsService:
    """Cached market quotes, one cache entry per chart range."""

    def __init__(self, http: HttpFetcher, cache: TimedCache[list[MarketQuote]]):
        self.http = http
        self.cache = cache

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        http: HttpFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> MarketsService:
        return cls(
            http or HttpFetcher(cfg.fetch),
            TimedCache(cfg.cache.markets_ttl_seconds, cfg.cache.max_entries, clock=clock),
        )

    async def quotes(self, range_: str | None = DEFAULT_RANGE) -> list[MarketQuote]:
        """Return quotes for the fixed symbol list, in list order.

        Symbols that fail are left out. A result is cached only when at
        least one symbol succeeded.
        """
        chart_range = normalize_range(range_)
        cached, fresh = self.cache.get(chart_range)
        if cached is not None and fresh:
            return cached

        results = await asyncio.gather(
            *(self._fetch_quote(symbol, label, chart_range) for symbol, label in SYMBOLS)
        )
        quotes = [quote_ for quote_ in results if quote_ is not None]
        if quotes:
            self.cache.set(chart_range, quotes)
        else:
            logger.warning("No market quotes available for range %s", chart_range)
        return quotes

    async def _fetch_quote(self, symbol: str, label: str, chart_range: str) -> MarketQuote | None:
        url = CHART_URL.format(symbol=quote(symbol, safe=""))
        result = await self.http.get_json(url, params={"interval": "1d", "range": chart_range})
        if not result.ok:
            logger.warning("Market fetch %s failed: %s", symbol, result.error)
            return None
        try:
            return parse_chart(result.data, symbol, label)
        except (AttributeError, TypeError, IndexError) as exc:
            logger.warning("Market fetch %s returned an unusable chart: %s", symbol, exc)
            return None
