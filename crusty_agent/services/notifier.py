"""
Recovery notifier.

Delivers a user's username and access token to their email address. The
transport is a stub: the message is written to a stream and logged rather
than sent over SMTP.
"""

import logging
import sys
import time
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from ..core.errors import NotifierError
from ..core.models import NotifierConfig, User


logger = logging.getLogger(__name__)

RECOVERY_SUBJECT = "Crusty Server Credentials Recovery"


def build_recovery_message(user: User) -> str:
    """Render the recovery email body. Never includes the password."""
    return "\n".join([
        f"To: {user.email}",
        f"Subject: {RECOVERY_SUBJECT}",
        "",
        f"Hello {user.username},",
        "",
        "Here are your Crusty Server credentials:",
        f"Username: {user.username}",
        f"Access Token: {user.access_token}",
        "",
        "Use the username and password to log into the application.",
        "Use the access token to access the web interface.",
        "",
        "If you didn't request this, please ignore this message.",
    ])


class RecoveryNotifier(ABC):
    """Interface for credential recovery channels."""

    @abstractmethod
    def send(self, user: User, config: NotifierConfig):
        """Deliver the recovery message for `user`, or raise NotifierError."""


class ConsoleNotifier(RecoveryNotifier):
    """Writes recovery messages to a text stream instead of a mail server."""

    def __init__(self, stream: Optional[TextIO] = None, delay_seconds: float = 0.0):
        self._stream = stream
        self.delay_seconds = delay_seconds

    def send(self, user: User, config: NotifierConfig):
        stream = self._stream or sys.stdout
        message = build_recovery_message(user)
        try:
            stream.write("=== RECOVERY EMAIL ===\n")
            stream.write(message + "\n")
            stream.write("=== END EMAIL ===\n")
            stream.flush()
        except (OSError, ValueError) as e:
            raise NotifierError(f"Could not write recovery message: {e}") from e

        if self.delay_seconds:
            # Simulated transport latency
            time.sleep(self.delay_seconds)

        logger.info(
            f"Recovery message for {user.username} handed to "
            f"{config.server}:{config.port} (tls={config.use_tls})"
        )
