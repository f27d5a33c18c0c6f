"""Per-provider daily call counters, kept for observability only."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
import time
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass
class CallCounter:
    count: int = 0
    reset_at: float = 0.0


class ProviderCallTracker:
    """Counts upstream calls per provider, resetting at local midnight.

    The counters never influence whether a fetch is attempted or succeeds.
    """

    def __init__(self, providers: Iterable[str] = (), clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counters: dict[str, CallCounter] = {name: CallCounter() for name in providers}

    def record(self, provider: str) -> int:
        """Count one call for provider and return today's total."""
        counter = self._counters.setdefault(provider, CallCounter())
        day_start = _local_midnight(self._clock())
        if counter.reset_at < day_start:
            counter.count = 0
            counter.reset_at = day_start
        counter.count += 1
        logger.debug("%s call #%d today", provider, counter.count)
        return counter.count

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        """Return {provider: {"count": n, "resetAt": epoch_seconds}}."""
        day_start = _local_midnight(self._clock())
        result: dict[str, dict[str, float | int]] = {}
        for name, counter in self._counters.items():
            # A counter last touched before today reads as zero.
            count = counter.count if counter.reset_at >= day_start else 0
            result[name] = {"count": count, "resetAt": counter.reset_at}
        return result


def _local_midnight(timestamp: float) -> float:
    moment = datetime.fromtimestamp(timestamp)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0).timestamp()
