"""
In-memory time-decay cache.

Entries are considered fresh for a fixed TTL after they were stored.
Stale entries stay in place until the next successful fetch overwrites
them; nothing is persisted across process restarts.
"""

from __future__ import annotations

from collections import OrderedDict
import time
from typing import Callable, Generic, TypeVar


V = TypeVar("V")


class TimedCache(Generic[V]):
    """Process-local cache whose entries expire after a fixed TTL.

    One instance is owned by each consumer (the aggregator and every widget
    service), so tests can construct an isolated cache per case.

    Attributes:
        ttl_seconds: How long a stored value counts as fresh
        max_entries: Optional bound; the oldest stored key is evicted first
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[V, float]] = OrderedDict()

    def get(self, key: str) -> tuple[V | None, bool]:
        """Look up a key.

        Returns:
            (value, is_fresh). A miss is (None, False); a stale hit returns
            the stored value with is_fresh False.
        """
        item = self._entries.get(key)
        if item is None:
            return None, False
        value, stored_at = item
        return value, self._clock() - stored_at < self.ttl_seconds

    def set(self, key: str, value: V) -> None:
        """Store a value under key, stamping it with the current time."""
        self._entries.pop(key, None)
        self._entries[key] = (value, self._clock())
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def stored_at(self, key: str) -> float | None:
        item = self._entries.get(key)
        return item[1] if item else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
