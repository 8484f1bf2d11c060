"""
Local System Collector.

Collects system telemetry from the local machine using psutil and renders
it as the short text lines the status report is made of.
"""

import logging
import platform
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import psutil

from ..core.models import HardwareReport


logger = logging.getLogger(__name__)

# Thermal bands in degrees Celsius
WARM_CELSIUS = 70.0
HOT_CELSIUS = 80.0
THROTTLE_CELSIUS = 90.0

LOW_BATTERY_PERCENT = 20


class LocalCollector:
    """
    Collects telemetry from the local machine.

    Uses psutil for cross-platform hardware monitoring.
    """

    def system_name(self) -> str:
        """Operating system name, e.g. "Linux"."""
        return platform.system() or "unknown"

    def memory_used_mb(self) -> int:
        """Memory in use, in megabytes."""
        mem = psutil.virtual_memory()
        return mem.used // 1024 // 1024

    def cpu_usage(self) -> float:
        """Global CPU usage percentage."""
        return psutil.cpu_percent(interval=0.1)

    def network_info(self) -> List[str]:
        """Total traffic per interface since boot."""
        stats = psutil.net_io_counters(pernic=True)
        return [
            f"{name}: {io.bytes_recv // 1024 // 1024} MB (down) / "
            f"{io.bytes_sent // 1024 // 1024} MB (Up)"
            for name, io in stats.items()
        ]

    def network_traffic(self, interval: float = 1.0) -> List[str]:
        """Current traffic rate per interface, measured over `interval` seconds."""
        before = self._io_totals()
        time.sleep(interval)
        after = self._io_totals()

        results = []
        for name, (recv, sent) in after.items():
            if name not in before:
                continue
            prev_recv, prev_sent = before[name]
            recv_rate = max(recv - prev_recv, 0) / 1024 / interval
            sent_rate = max(sent - prev_sent, 0) / 1024 / interval
            results.append(f"{name}: {recv_rate:.1f} kB/s ↓ / {sent_rate:.1f} kB/s ↑")
        return results

    def _io_totals(self) -> Dict[str, Tuple[int, int]]:
        stats = psutil.net_io_counters(pernic=True)
        return {name: (io.bytes_recv, io.bytes_sent) for name, io in stats.items()}

    def components(self) -> List[str]:
        """Temperature sensors, one line per reading."""
        result = []
        for name, readings in self._temperatures().items():
            for reading in readings:
                label = reading.label or name
                if reading.current is None:
                    result.append(f"{label}: Temperature Unavailable")
                else:
                    result.append(f"{label}: {reading.current:.1f}°C")

        if not result:
            result.append("No system components were detected.")
        return result

    def disks(self) -> List[str]:
        """Mounted block devices."""
        result = []
        for partition in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except (PermissionError, OSError) as e:
                logger.debug(f"Could not access {partition.mountpoint}: {e}")
                result.append(f"{partition.device} on {partition.mountpoint}")
                continue
            result.append(
                f"{partition.device} on {partition.mountpoint} ({partition.fstype}): "
                f"{usage.used / (1024 ** 3):.1f}/{usage.total / (1024 ** 3):.1f} GB "
                f"({usage.percent:.1f}%)"
            )
        return result

    def _temperatures(self) -> Dict[str, list]:
        # sensors_temperatures only exists on Linux/FreeBSD
        sensors = getattr(psutil, "sensors_temperatures", None)
        if sensors is None:
            return {}
        try:
            return sensors() or {}
        except (OSError, RuntimeError) as e:
            logger.debug(f"Temperature sensors unavailable: {e}")
            return {}

    def _get_cpu_power(self) -> Optional[float]:
        """
        Attempt to get CPU power draw using Intel RAPL.

        Note: Requires root privileges on most systems.
        """
        if platform.system() != "Linux":
            return None
        rapl_path = Path("/sys/class/powercap/intel-rapl")
        try:
            if not rapl_path.exists():
                return None
            for domain in rapl_path.iterdir():
                if domain.name.startswith("intel-rapl:"):
                    energy_file = domain / "energy_uj"
                    if energy_file.exists():
                        # Two samples give the average power over the gap
                        energy1 = int(energy_file.read_text())
                        time.sleep(0.1)
                        energy2 = int(energy_file.read_text())
                        return (energy2 - energy1) / 0.1 / 1_000_000
        except (OSError, ValueError) as e:
            logger.debug(f"RAPL read failed: {e}")
        return None

    def query_hardware(self) -> HardwareReport:
        """Power and thermal analysis with optimization suggestions."""
        suggestions = []

        power_lines = []
        battery = None
        sensors_battery = getattr(psutil, "sensors_battery", None)
        if sensors_battery is not None:
            try:
                battery = sensors_battery()
            except (OSError, RuntimeError) as e:
                logger.debug(f"Battery sensor unavailable: {e}")
        power_draw = self._get_cpu_power()

        if battery is not None:
            state = "AC Power" if battery.power_plugged else "Battery"
            power_lines.append(f"Power State: {state}")
            power_lines.append(f"Battery: {battery.percent:.0f}%")
            if not battery.power_plugged:
                if battery.percent < LOW_BATTERY_PERCENT:
                    suggestions.append("💡 Battery is low; connect the charger")
                suggestions.append("💡 Running on battery; a power-saving profile extends runtime")
        elif power_draw is not None:
            power_lines.append("Power State: AC Power")
        if power_draw is not None:
            power_lines.append(f"Current Power Draw: {power_draw:.1f}W")

        if power_lines:
            power_summary = "\n".join(power_lines) + "\n"
        else:
            power_summary = "Power information not available\n"

        readings = [
            r.current
            for values in self._temperatures().values()
            for r in values
            if r.current is not None
        ]
        if readings:
            max_temp = max(readings)
            thermal_lines = [
                f"Max Temperature: {max_temp:.1f}°C",
                f"Thermal Status: {thermal_status(max_temp)}",
            ]
            if max_temp >= THROTTLE_CELSIUS:
                thermal_lines.append("⚠️ Thermal throttling predicted: severe")
                suggestions.append("🚨 Thermal alert: severe")
            suggestions.extend(f"🌡️ {rec}" for rec in cooling_suggestions(max_temp)[:2])
            thermal_summary = "\n".join(thermal_lines) + "\n"
        else:
            thermal_summary = "Thermal information not available\n"

        return HardwareReport(
            power_summary=power_summary,
            thermal_summary=thermal_summary,
            suggestions=suggestions,
        )


def thermal_status(celsius: float) -> str:
    if celsius >= THROTTLE_CELSIUS:
        return "Critical"
    if celsius >= HOT_CELSIUS:
        return "Hot"
    if celsius >= WARM_CELSIUS:
        return "Warm"
    return "Normal"


def cooling_suggestions(celsius: float) -> List[str]:
    """Cooling advice for the hottest sensor reading, most urgent first."""
    if celsius < WARM_CELSIUS:
        return []
    recs = []
    if celsius >= HOT_CELSIUS:
        recs.append("Reduce sustained CPU load or lower the performance profile")
    recs.append("Check that fans are running and air vents are not blocked")
    recs.append("Clean dust from heatsinks and intake filters")
    return recs
