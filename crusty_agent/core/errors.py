"""
Error taxonomy for Crusty Agent.

Validation and auth errors are user-correctable and carry a human-readable
message. Persistence, bind and notifier errors are operator-correctable.
"""


class CrustyError(Exception):
    """Base class for all agent errors."""


class ValidationError(CrustyError):
    """Input failed a shape or length check."""


class AuthError(CrustyError):
    """Credential or token rejected."""


class UserNotFound(AuthError):
    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class InvalidPassword(AuthError):
    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class InvalidToken(AuthError):
    def __init__(self, message: str = "Invalid access token"):
        super().__init__(message)


class Unauthorized(AuthError):
    """Request did not carry a valid access token."""

    def __init__(self, message: str = "Invalid access token"):
        super().__init__(message)


class MissingToken(Unauthorized):
    def __init__(self, message: str = "Access token required"):
        super().__init__(message)


class PersistenceError(CrustyError):
    """Reading, parsing or writing the auth file failed."""


class LifecycleError(CrustyError):
    """Server lifecycle transition rejected."""


class AlreadyRunning(LifecycleError):
    def __init__(self, message: str = "Server is already running"):
        super().__init__(message)


class NotRunning(LifecycleError):
    def __init__(self, message: str = "Server is not running"):
        super().__init__(message)


class BindError(LifecycleError):
    """Listener could not bind its port."""


class RecoveryError(CrustyError):
    """Credential recovery could not be completed."""


class NoSuchEmail(RecoveryError):
    def __init__(self, message: str = "No user found with that email address"):
        super().__init__(message)


class NotifierUnconfigured(RecoveryError):
    def __init__(
        self,
        message: str = "Email configuration not set up. Please contact administrator.",
    ):
        super().__init__(message)


class NotifierError(RecoveryError):
    """The notifier itself failed to deliver the message."""
