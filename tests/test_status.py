"""Tests for status report assembly and degradation of failing sections."""

from crusty_agent.core.hardware_cache import HardwareCache
from crusty_agent.core.models import HardwareReport
from crusty_agent.web.status import StatusAssembler

from conftest import FakeCollector


class BrokenDisks(FakeCollector):
    def disks(self):
        raise OSError("mount table unreadable")


class NoComponents(FakeCollector):
    def components(self):
        return []


def assemble(collector, query=None):
    cache = HardwareCache(query or collector.query_hardware)
    return StatusAssembler(collector, cache, traffic_interval=0).assemble()


def test_sections_in_order():
    report = assemble(FakeCollector())

    headings = [
        "System name: TestOS",
        "Memory in Use: 2048 MB",
        "CPU usage: 12.5%",
        "=== Power Information ===",
        "=== Thermal Information ===",
        "Network Statistics (Total):",
        "Current Network Traffic:",
        "Components:",
        "Disks:",
    ]
    positions = [report.index(h) for h in headings]
    assert positions == sorted(positions)
    assert "  eth0: 10 MB (down) / 2 MB (Up)\n" in report


def test_failing_collector_degrades_one_section():
    report = assemble(BrokenDisks())

    assert "Error getting disks: mount table unreadable" in report
    assert "Components:\n  coretemp: 45.0°C" in report
    assert "CPU usage: 12.5%" in report


def test_empty_components():
    report = assemble(NoComponents())
    assert "Components:\nNo Components Found\n" in report


def test_hardware_error_rendered():
    def failing_query():
        raise RuntimeError("no sensors")

    report = assemble(FakeCollector(), failing_query)

    assert "=== Power Information ===\nError querying hardware: no sensors" in report
    assert "=== Thermal Information ===\nError querying hardware: no sensors" in report
    assert "Optimization Suggestions" not in report


def test_suggestions_listed():
    def query():
        return HardwareReport(
            power_summary=None,
            thermal_summary="Max Temperature: 92.0°C\n",
            suggestions=["🚨 Thermal alert: severe"],
        )

    report = assemble(FakeCollector(), query)

    assert "Power info not available" in report
    assert "=== Optimization Suggestions ===\n🚨 Thermal alert: severe\n" in report
