"""Shared fixtures for the Crusty Agent test suite."""

import socket

import pytest

from crusty_agent.context import build_context
from crusty_agent.core.config import Config
from crusty_agent.core.credential_store import CredentialStore
from crusty_agent.core.models import HardwareReport
from crusty_agent.services.notifier import RecoveryNotifier


# Lowest cost bcrypt accepts; keeps hashing fast in tests
TEST_ROUNDS = 4


class RecordingNotifier(RecoveryNotifier):
    """Notifier that remembers what it was asked to send."""

    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, user, config):
        if self.error is not None:
            raise self.error
        self.sent.append((user, config))


class FakeCollector:
    """Stands in for LocalCollector with fixed readings."""

    def __init__(self):
        self.hardware_queries = 0

    def system_name(self):
        return "TestOS"

    def memory_used_mb(self):
        return 2048

    def cpu_usage(self):
        return 12.5

    def network_info(self):
        return ["eth0: 10 MB (down) / 2 MB (Up)"]

    def network_traffic(self, interval=1.0):
        return ["eth0: 1.5 kB/s ↓ / 0.5 kB/s ↑"]

    def components(self):
        return ["coretemp: 45.0°C"]

    def disks(self):
        return ["/dev/sda1 on / (ext4): 10.0/100.0 GB (10.0%)"]

    def query_hardware(self):
        self.hardware_queries += 1
        return HardwareReport(
            power_summary="Power State: AC Power\n",
            thermal_summary="Max Temperature: 45.0°C\nThermal Status: Normal\n",
            suggestions=[],
        )


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def auth_path(tmp_path):
    return tmp_path / "crusty_auth.json"


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store(auth_path, notifier):
    return CredentialStore(str(auth_path), notifier=notifier, bcrypt_rounds=TEST_ROUNDS)


@pytest.fixture
def alice(store):
    store.register("alice", "password1", "a@x.com", "tok12345")
    return store


@pytest.fixture
def config(tmp_path):
    config = Config()
    config.server.host = "127.0.0.1"
    config.server.port = free_port()
    config.server.static_dir = str(tmp_path / "public")
    config.auth.file_path = str(tmp_path / "crusty_auth.json")
    config.auth.bcrypt_rounds = TEST_ROUNDS
    return config


@pytest.fixture
def context(config, notifier):
    return build_context(config, notifier=notifier, collector=FakeCollector())
