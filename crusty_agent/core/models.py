"""
Data models for credentials, hardware telemetry and server state.

Persisted records are pydantic models so the auth file is validated on
load. Runtime values are plain dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """A registered user as stored in the auth file."""

    username: str
    email: str
    password_hash: str
    access_token: str
    created_at: str


class NotifierConfig(BaseModel):
    """Outbound mail settings used for credential recovery."""

    server: str
    port: int = Field(ge=0, le=65535)
    username: str
    password: str
    use_tls: bool = True


class AuthConfig(BaseModel):
    """On-disk shape of the auth file."""

    users: Dict[str, User] = Field(default_factory=dict)
    smtp_config: Optional[NotifierConfig] = None


@dataclass(frozen=True)
class HardwareSnapshot:
    """Power and thermal summaries from one hardware query."""

    power_summary: Optional[str] = None
    thermal_summary: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
    last_refreshed: float = 0.0


@dataclass(frozen=True)
class HardwareReport:
    """Raw result of a hardware query, before it is stamped by the cache."""

    power_summary: Optional[str] = None
    thermal_summary: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


class ServerState(str, Enum):
    """Listener lifecycle states."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"

    @property
    def is_running(self) -> bool:
        return self in (ServerState.STARTING, ServerState.RUNNING)
