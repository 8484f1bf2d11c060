"""
Agent context - the shared objects handlers and the CLI operate on.

Built once per process and passed explicitly instead of living in
module-level globals.
"""

from dataclasses import dataclass
from typing import Optional

from .collectors.local_collector import LocalCollector
from .core.config import Config
from .core.credential_store import CredentialStore
from .core.hardware_cache import HardwareCache
from .services.notifier import ConsoleNotifier, RecoveryNotifier
from .web.status import StatusAssembler
from .web.token_gate import TokenGate


@dataclass
class AgentContext:
    config: Config
    store: CredentialStore
    collector: LocalCollector
    hardware_cache: HardwareCache
    gate: TokenGate
    assembler: StatusAssembler


def build_context(
    config: Config,
    notifier: Optional[RecoveryNotifier] = None,
    collector: Optional[LocalCollector] = None,
) -> AgentContext:
    """Wire the credential store, caches and collectors from a Config."""
    store = CredentialStore(
        config.auth.file_path,
        notifier=notifier or ConsoleNotifier(),
        bcrypt_rounds=config.auth.bcrypt_rounds,
    )
    collector = collector or LocalCollector()
    hardware_cache = HardwareCache(
        collector.query_hardware,
        ttl_seconds=config.hardware.cache_ttl_seconds,
    )
    return AgentContext(
        config=config,
        store=store,
        collector=collector,
        hardware_cache=hardware_cache,
        gate=TokenGate(store),
        assembler=StatusAssembler(collector, hardware_cache),
    )
