"""
Hardware Cache - TTL memoization of the hardware telemetry query.

The query (power profile, thermal analysis) is expensive, so its result is
kept for a fixed window. A failed query is cached as well: its error text
becomes both summaries until the window expires.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .models import HardwareReport, HardwareSnapshot


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


class HardwareCache:
    """Holds the latest HardwareSnapshot and refreshes it when stale."""

    def __init__(
        self,
        query: Callable[[], HardwareReport],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._query = query
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[HardwareSnapshot] = None

    def get_snapshot(self, now: Optional[float] = None) -> HardwareSnapshot:
        """Return the cached snapshot, querying the hardware first if it is stale."""
        with self._lock:
            if now is None:
                now = self._clock()
            if self._snapshot is None or now - self._snapshot.last_refreshed > self.ttl_seconds:
                self._snapshot = self._refresh(now)
            return self._snapshot

    def _refresh(self, now: float) -> HardwareSnapshot:
        logger.debug("Refreshing hardware snapshot")
        try:
            report = self._query()
        except Exception as e:
            logger.warning(f"Hardware query failed: {e}")
            error_msg = f"Error querying hardware: {e}"
            return HardwareSnapshot(
                power_summary=error_msg,
                thermal_summary=error_msg,
                suggestions=[],
                last_refreshed=now,
            )

        return HardwareSnapshot(
            power_summary=report.power_summary,
            thermal_summary=report.thermal_summary,
            suggestions=list(report.suggestions),
            last_refreshed=now,
        )

    def invalidate(self):
        """Drop the cached snapshot so the next call queries again."""
        with self._lock:
            self._snapshot = None
