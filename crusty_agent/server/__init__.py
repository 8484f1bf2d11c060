"""HTTP listener lifecycle."""

from .lifecycle import ServerLifecycle, ShutdownSignal

__all__ = ["ServerLifecycle", "ShutdownSignal"]
