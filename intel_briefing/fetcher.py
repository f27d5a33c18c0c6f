"""
HTTP access shared by every provider and widget.

Every upstream call goes through HttpFetcher, which applies the configured
timeout and headers and never raises: timeouts, transport errors, non-2xx
responses and undecodable JSON all come back as a FetchResult with error set.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any

import httpx

from .config import FetchConfig


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        content: The raw response body, or None on error
        data: Decoded JSON body for get_json calls
        error: Error message if fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None = None
    content: bytes | None = None
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HttpFetcher:
    """Issues bounded GET requests with the configured client settings.

    Args:
        cfg: Fetch configuration (timeout, user agent, proxy handling)
        transport: Optional httpx transport, used by tests to serve canned
                   responses without touching the network
    """

    def __init__(self, cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg
        self._transport = transport

    def _client(self, headers: dict[str, str] | None) -> httpx.AsyncClient:
        merged = {"User-Agent": self.cfg.user_agent}
        if headers:
            merged.update(headers)
        return httpx.AsyncClient(
            timeout=self.cfg.timeout_seconds,
            headers=merged,
            follow_redirects=True,
            trust_env=self.cfg.trust_env,
            transport=self._transport,
        )

    async def get_text(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """GET a URL and return its body.

        Returns:
            FetchResult with text and content on 2xx, error otherwise
        """
        try:
            async with self._client(headers) as client:
                resp = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            return FetchResult(url=url, status_code=None, error=f"TimeoutError: {exc}")
        except httpx.HTTPError as exc:
            return FetchResult(url=url, status_code=None, error=f"{type(exc).__name__}: {exc}")

        if not resp.is_success:
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                error=f"HTTP {resp.status_code}",
            )
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            text=resp.text,
            content=resp.content,
        )

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResult:
        """GET a URL and decode its JSON body into result.data."""
        result = await self.get_text(url, params=params, headers=headers)
        if not result.ok:
            return result
        try:
            result.data = json.loads(result.text or "")
        except json.JSONDecodeError as exc:
            return FetchResult(
                url=url,
                status_code=result.status_code,
                error=f"JSONDecodeError: {exc}",
            )
        return result
