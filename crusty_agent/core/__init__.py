"""Core module containing the credential store, caches, models and configuration."""

from .models import (
    User,
    NotifierConfig,
    AuthConfig,
    HardwareSnapshot,
    HardwareReport,
    ServerState,
)
from .config import Config
from .credential_store import CredentialStore
from .hardware_cache import HardwareCache

__all__ = [
    "User",
    "NotifierConfig",
    "AuthConfig",
    "HardwareSnapshot",
    "HardwareReport",
    "ServerState",
    "Config",
    "CredentialStore",
    "HardwareCache",
]
