"""
Configuration management for Crusty Agent.

Loads configuration from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class ServerConfig:
    """HTTP listener configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"


@dataclass
class AuthSettings:
    """Credential store configuration."""

    file_path: str = "crusty_auth.json"
    bcrypt_rounds: int = 12


@dataclass
class HardwareConfig:
    """Hardware telemetry cache configuration."""

    cache_ttl_seconds: float = 60.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration container."""

    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthSettings = field(default_factory=AuthSettings)
    hardware: HardwareConfig = field(default_factory=HardwareConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            config = cls()
            config._apply_env_overrides()
            return config

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        config = cls()

        if "server" in data:
            config.server = ServerConfig(**data["server"])

        if "auth" in data:
            config.auth = AuthSettings(**data["auth"])

        if "hardware" in data:
            config.hardware = HardwareConfig(**data["hardware"])

        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        # Override with environment variables
        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if os.getenv("CRUSTY_HOST"):
            self.server.host = os.getenv("CRUSTY_HOST")
        if os.getenv("CRUSTY_PORT"):
            self.server.port = int(os.getenv("CRUSTY_PORT"))
        if os.getenv("CRUSTY_STATIC_DIR"):
            self.server.static_dir = os.getenv("CRUSTY_STATIC_DIR")

        if os.getenv("CRUSTY_AUTH_FILE"):
            self.auth.file_path = os.getenv("CRUSTY_AUTH_FILE")

        # Logging
        if os.getenv("LOG_LEVEL"):
            self.logging.level = os.getenv("LOG_LEVEL")
        if os.getenv("LOG_FILE"):
            self.logging.file_path = os.getenv("LOG_FILE")

    def to_yaml(self, path: str):
        """Save configuration to YAML file."""
        data = {
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "static_dir": self.server.static_dir,
            },
            "auth": {
                "file_path": self.auth.file_path,
                "bcrypt_rounds": self.auth.bcrypt_rounds,
            },
            "hardware": {
                "cache_ttl_seconds": self.hardware.cache_ttl_seconds,
            },
            "logging": {
                "level": self.logging.level,
                "file_path": self.logging.file_path,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    # Check common locations
    candidates = [
        Path("config/crusty.yaml"),
        Path("crusty.yaml"),
        Path.home() / ".crusty-agent" / "config.yaml",
        Path("/etc/crusty-agent/config.yaml"),
    ]

    for path in candidates:
        if path.exists():
            return str(path)

    # Return the first candidate as default
    return str(candidates[0])
