"""
Status report assembly.

Builds the plain-text report served at /api/status from the system
collector and the hardware cache. Every section is collected on its own;
a failing collector turns into one error line instead of a failed request.
"""

import logging
from typing import Callable, List

from ..collectors.local_collector import LocalCollector
from ..core.hardware_cache import HardwareCache


logger = logging.getLogger(__name__)


class StatusAssembler:
    """Composes the status report text."""

    def __init__(
        self,
        collector: LocalCollector,
        hardware_cache: HardwareCache,
        traffic_interval: float = 1.0,
    ):
        self.collector = collector
        self.hardware_cache = hardware_cache
        self.traffic_interval = traffic_interval

    def assemble(self) -> str:
        out: List[str] = []

        out.append(self._line("System name", lambda: f"System name: {self.collector.system_name()}\n"))
        out.append(self._line("memory usage", lambda: f"Memory in Use: {self.collector.memory_used_mb()} MB\n"))
        out.append(self._line("CPU usage", lambda: f"CPU usage: {self.collector.cpu_usage():.1f}%\n"))

        out.append(self._hardware_section())

        out.append(self._list_section(
            "network stats", "Network Statistics (Total):", self.collector.network_info,
        ))
        out.append(self._list_section(
            "network traffic", "Current Network Traffic:",
            lambda: self.collector.network_traffic(self.traffic_interval),
        ))
        out.append(self._list_section(
            "components", "Components:", self.collector.components, empty="No Components Found",
        ))
        out.append(self._list_section(
            "disks", "Disks:", self.collector.disks, empty="No Disks Found",
        ))

        return "".join(out)

    def _line(self, what: str, render: Callable[[], str]) -> str:
        try:
            return render()
        except Exception as e:
            logger.warning(f"Error getting {what}: {e}")
            return f"Error getting {what}: {e}\n"

    def _list_section(
        self,
        what: str,
        heading: str,
        fetch: Callable[[], List[str]],
        empty: str = "",
    ) -> str:
        try:
            items = fetch()
        except Exception as e:
            logger.warning(f"Error getting {what}: {e}")
            return f"\nError getting {what}: {e}\n"

        lines = [f"\n{heading}\n"]
        if not items and empty:
            lines.append(f"{empty}\n")
        lines.extend(f"  {item}\n" for item in items)
        return "".join(lines)

    def _hardware_section(self) -> str:
        try:
            snapshot = self.hardware_cache.get_snapshot()
        except Exception as e:
            logger.warning(f"Error getting hardware status: {e}")
            return f"\nError getting hardware status: {e}\n"

        out = ["\n=== Power Information ===\n"]
        out.append(snapshot.power_summary or "Power info not available\n")
        out.append("\n=== Thermal Information ===\n")
        out.append(snapshot.thermal_summary or "Thermal info not available\n")

        if snapshot.suggestions:
            out.append("\n=== Optimization Suggestions ===\n")
            out.extend(f"{s}\n" for s in snapshot.suggestions)
        return "".join(out)
