"""
Tests for the local system collector.

Runs the real psutil-backed collection on the test machine and checks the
shape of each reading rather than its values.
"""

import re

from crusty_agent.collectors.local_collector import (
    LocalCollector,
    cooling_suggestions,
    thermal_status,
)
from crusty_agent.core.models import HardwareReport


def test_basic_readings():
    collector = LocalCollector()

    assert collector.system_name()
    assert collector.memory_used_mb() >= 0
    assert 0.0 <= collector.cpu_usage() <= 100.0


def test_network_lines():
    collector = LocalCollector()

    for line in collector.network_info():
        assert re.match(r"^.+: \d+ MB \(down\) / \d+ MB \(Up\)$", line)

    for line in collector.network_traffic(interval=0.05):
        assert re.match(r"^.+: \d+\.\d kB/s ↓ / \d+\.\d kB/s ↑$", line)


def test_components_never_empty():
    assert LocalCollector().components()


def test_disks_are_strings():
    assert all(isinstance(d, str) for d in LocalCollector().disks())


def test_query_hardware_report():
    report = LocalCollector().query_hardware()

    assert isinstance(report, HardwareReport)
    assert report.power_summary.endswith("\n")
    assert report.thermal_summary.endswith("\n")
    assert all(isinstance(s, str) for s in report.suggestions)


def test_thermal_bands():
    assert thermal_status(40.0) == "Normal"
    assert thermal_status(72.0) == "Warm"
    assert thermal_status(85.0) == "Hot"
    assert thermal_status(95.0) == "Critical"


def test_cooling_suggestions():
    assert cooling_suggestions(50.0) == []
    assert len(cooling_suggestions(72.0)) == 2
    assert cooling_suggestions(85.0)[0].startswith("Reduce sustained CPU load")
