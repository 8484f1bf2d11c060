"""
Credential Store - durable user registry and recovery settings.

Owns the registered users and the optional notifier configuration and
keeps them in a single JSON file. Every mutation is validated, written to
disk, and only then committed to memory, so a failed write never leaves
the in-memory view ahead of the file.
"""

import logging
import os
import secrets
import string
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import bcrypt
from pydantic import ValidationError as ModelValidationError

from .errors import (
    InvalidPassword,
    InvalidToken,
    NoSuchEmail,
    NotifierError,
    NotifierUnconfigured,
    PersistenceError,
    UserNotFound,
    ValidationError,
)
from .models import AuthConfig, NotifierConfig, User


logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_letters + string.digits
SUGGESTED_TOKEN_LENGTH = 16

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8
MIN_TOKEN_LENGTH = 8
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


class CredentialStore:
    """
    Single-tenant user store backed by a JSON file.

    All public operations take the store lock for their full duration,
    except recover(), which releases it before calling the notifier.
    """

    def __init__(
        self,
        path: str = "crusty_auth.json",
        notifier=None,
        bcrypt_rounds: int = 12,
    ):
        self.path = Path(path)
        self._notifier = notifier
        self._rounds = bcrypt_rounds
        self._lock = threading.Lock()
        self._config = self._load()

    def _load(self) -> AuthConfig:
        """Load the auth file, creating an empty one if it is absent."""
        if not self.path.exists():
            config = AuthConfig()
            self._write(config)
            logger.info(f"Created new auth file at {self.path}")
            return config

        try:
            config = AuthConfig.model_validate_json(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            logger.error(f"Failed to read auth file {self.path}: {e}")
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        except ModelValidationError as e:
            logger.error(f"Auth file {self.path} is malformed: {e}")
            raise PersistenceError(f"Malformed auth file {self.path}: {e}") from e

        logger.info(f"Loaded {len(config.users)} user(s) from {self.path}")
        return config

    def _write(self, config: AuthConfig):
        """Write the whole store to disk, replacing the previous file."""
        data = config.model_dump_json(indent=2)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(directory)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to write auth file {self.path}: {e}")
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e

    def _commit(self, candidate: AuthConfig):
        self._write(candidate)
        self._config = candidate

    def register(self, username: str, password: str, email: str, access_token: str):
        """
        Register a new user.

        Raises ValidationError without touching state when any precondition
        fails, and PersistenceError if the file cannot be written (the user
        is then not added in memory either).
        """
        with self._lock:
            users = self._config.users

            if username in users:
                raise ValidationError("Username already exists")
            if len(username) < MIN_USERNAME_LENGTH:
                raise ValidationError("Username must be at least 3 characters")
            if len(password) < MIN_PASSWORD_LENGTH:
                raise ValidationError("Password must be at least 8 characters")
            if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
                raise ValidationError("Password must be at most 72 bytes")
            if len(access_token) < MIN_TOKEN_LENGTH:
                raise ValidationError("Access token must be at least 8 characters")
            for user in users.values():
                if user.access_token == access_token:
                    raise ValidationError("Access token already in use")
            if "@" not in email:
                raise ValidationError("Invalid email address")

            password_hash = bcrypt.hashpw(
                password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)
            ).decode("ascii")

            user = User(
                username=username,
                email=email,
                password_hash=password_hash,
                access_token=access_token,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            candidate = self._config.model_copy(update={"users": {**users, username: user}})
            self._commit(candidate)

        logger.info(f"Registered user {username}")

    def authenticate(self, username: str, password: str) -> str:
        """Verify a username/password pair and return the user's access token."""
        with self._lock:
            user = self._config.users.get(username)
            if user is None:
                raise UserNotFound()

            try:
                matches = bcrypt.checkpw(
                    password.encode("utf-8"), user.password_hash.encode("ascii")
                )
            except ValueError as e:
                logger.error(f"Stored password hash for {username} is unusable: {e}")
                raise PersistenceError(f"Stored password hash for {username} is unusable") from e

            if not matches:
                raise InvalidPassword()
            return user.access_token

    def validate_token(self, token: str) -> str:
        """Return the username owning an access token."""
        with self._lock:
            # Exact-match linear scan, not constant-time.
            for user in self._config.users.values():
                if user.access_token == token:
                    return user.username
        raise InvalidToken()

    def configure_notifier(self, config: NotifierConfig):
        """Replace the notifier configuration and persist it."""
        with self._lock:
            candidate = self._config.model_copy(update={"smtp_config": config})
            self._commit(candidate)
        logger.info(f"Notifier configured for {config.server}:{config.port}")

    def recover(self, email: str):
        """
        Send a user's username and access token through the notifier.

        The store lock is not held while the notifier runs.
        """
        with self._lock:
            user = next((u for u in self._config.users.values() if u.email == email), None)
            if user is None:
                raise NoSuchEmail()
            notifier_config = self._config.smtp_config
            if notifier_config is None or self._notifier is None:
                raise NotifierUnconfigured()

        try:
            self._notifier.send(user, notifier_config)
        except NotifierError:
            raise
        except Exception as e:
            logger.error(f"Notifier failed for {user.username}: {e}")
            raise NotifierError(f"Failed to send recovery message: {e}") from e

        logger.info(f"Recovery message sent for {user.username}")

    def has_users(self) -> bool:
        with self._lock:
            return bool(self._config.users)

    def user_count(self) -> int:
        with self._lock:
            return len(self._config.users)

    def notifier_configured(self) -> bool:
        with self._lock:
            return self._config.smtp_config is not None

    def get_user(self, username: str) -> Optional[User]:
        with self._lock:
            return self._config.users.get(username)

    @staticmethod
    def suggest_token() -> str:
        """Random 16-character alphanumeric token."""
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(SUGGESTED_TOKEN_LENGTH))
