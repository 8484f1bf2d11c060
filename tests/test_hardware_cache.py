"""Tests for the hardware telemetry TTL cache."""

from crusty_agent.core.hardware_cache import HardwareCache
from crusty_agent.core.models import HardwareReport


class CountingQuery:
    def __init__(self, error=None):
        self.calls = 0
        self.error = error

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return HardwareReport(
            power_summary=f"Power State: AC Power (query {self.calls})\n",
            thermal_summary="Thermal Status: Normal\n",
            suggestions=["💡 tip"],
        )


def test_first_call_queries():
    query = CountingQuery()
    cache = HardwareCache(query)

    snapshot = cache.get_snapshot(now=1000.0)

    assert query.calls == 1
    assert snapshot.last_refreshed == 1000.0
    assert snapshot.power_summary == "Power State: AC Power (query 1)\n"
    assert snapshot.suggestions == ["💡 tip"]


def test_one_query_per_window():
    query = CountingQuery()
    cache = HardwareCache(query, ttl_seconds=60)

    first = cache.get_snapshot(now=1000.0)
    for offset in range(0, 61, 5):
        assert cache.get_snapshot(now=1000.0 + offset) is first
    assert query.calls == 1

    refreshed = cache.get_snapshot(now=1060.5)
    assert query.calls == 2
    assert refreshed is not first
    assert refreshed.last_refreshed == 1060.5

    cache.get_snapshot(now=1061.0)
    assert query.calls == 2


def test_failed_query_is_cached():
    query = CountingQuery(error=RuntimeError("sensor bus offline"))
    cache = HardwareCache(query, ttl_seconds=60)

    snapshot = cache.get_snapshot(now=10.0)

    assert snapshot.power_summary == "Error querying hardware: sensor bus offline"
    assert snapshot.thermal_summary == "Error querying hardware: sensor bus offline"
    assert snapshot.suggestions == []
    assert snapshot.last_refreshed == 10.0

    cache.get_snapshot(now=30.0)
    assert query.calls == 1

    cache.get_snapshot(now=71.0)
    assert query.calls == 2


def test_uses_clock_when_now_omitted():
    ticks = iter([0.0, 30.0, 90.0])
    query = CountingQuery()
    cache = HardwareCache(query, ttl_seconds=60, clock=lambda: next(ticks))

    cache.get_snapshot()
    cache.get_snapshot()
    cache.get_snapshot()

    assert query.calls == 2


def test_invalidate_forces_refresh():
    query = CountingQuery()
    cache = HardwareCache(query)

    cache.get_snapshot(now=0.0)
    cache.invalidate()
    cache.get_snapshot(now=1.0)

    assert query.calls == 2
