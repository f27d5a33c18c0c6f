"""Tests for the time-decay cache."""

from __future__ import annotations

import pytest

from intel_briefing.cache import TimedCache


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_miss_returns_none_and_not_fresh():
    cache = TimedCache(60, clock=FakeClock())
    assert cache.get("general:us") == (None, False)


def test_entry_is_fresh_until_ttl_elapses():
    clock = FakeClock()
    cache = TimedCache(60, clock=clock)
    cache.set("general:us", ["a"])

    clock.now += 59
    assert cache.get("general:us") == (["a"], True)

    clock.now += 1
    assert cache.get("general:us") == (["a"], False)


def test_set_overwrites_and_restamps():
    clock = FakeClock()
    cache = TimedCache(60, clock=clock)
    cache.set("k", "old")
    clock.now += 120
    cache.set("k", "new")

    assert cache.get("k") == ("new", True)
    assert cache.stored_at("k") == clock.now
    assert len(cache) == 1


def test_max_entries_evicts_least_recently_stored():
    clock = FakeClock()
    cache = TimedCache(60, max_entries=2, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert "b" not in cache
    assert "a" in cache and "c" in cache


def test_non_positive_ttl_is_rejected():
    with pytest.raises(ValueError):
        TimedCache(0)


@pytest.mark.parametrize("bound", [0, -1])
def test_bound_below_one_entry_is_rejected(bound):
    with pytest.raises(ValueError, match="max_entries"):
        TimedCache(60, max_entries=bound)


def test_single_entry_bound_keeps_latest():
    cache = TimedCache(60, max_entries=1, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)

    assert len(cache) == 1
    assert cache.get("b") == (2, True)
