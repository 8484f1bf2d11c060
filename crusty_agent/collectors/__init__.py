"""Collectors module for gathering local system telemetry."""

from .local_collector import LocalCollector

__all__ = [
    "LocalCollector",
]
