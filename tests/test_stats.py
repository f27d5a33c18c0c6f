"""Tests for per-provider call counters."""

from __future__ import annotations

from datetime import datetime

from intel_briefing.stats import ProviderCallTracker


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_counts_accumulate_within_a_day():
    clock = FakeClock(datetime(2026, 3, 1, 9, 0).timestamp())
    tracker = ProviderCallTracker(["currents"], clock=clock)

    tracker.record("currents")
    clock.now += 3600
    assert tracker.record("currents") == 2

    snapshot = tracker.snapshot()
    assert snapshot["currents"]["count"] == 2
    assert snapshot["currents"]["resetAt"] == datetime(2026, 3, 1).timestamp()


def test_counter_resets_at_local_midnight():
    clock = FakeClock(datetime(2026, 3, 1, 23, 0).timestamp())
    tracker = ProviderCallTracker(clock=clock)
    for _ in range(3):
        tracker.record("newsapi")

    clock.now = datetime(2026, 3, 2, 0, 30).timestamp()
    assert tracker.snapshot()["newsapi"]["count"] == 0
    assert tracker.record("newsapi") == 1
    assert tracker.snapshot()["newsapi"]["resetAt"] == datetime(2026, 3, 2).timestamp()


def test_untouched_providers_report_zero():
    tracker = ProviderCallTracker(["rss", "newsapi"])
    assert tracker.snapshot() == {
        "rss": {"count": 0, "resetAt": 0.0},
        "newsapi": {"count": 0, "resetAt": 0.0},
    }
