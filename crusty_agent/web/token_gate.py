"""Access-token check in front of the HTTP handlers."""

import logging
from typing import Optional

from ..core.credential_store import CredentialStore
from ..core.errors import InvalidToken, MissingToken, Unauthorized


logger = logging.getLogger(__name__)


class TokenGate:
    """
    Authorizes requests by the `token` query parameter.

    Read-only: consults the CredentialStore and never mutates it.
    """

    def __init__(self, store: CredentialStore):
        self._store = store

    def authorize(self, token: Optional[str]) -> str:
        """Return the username owning `token`, or raise Unauthorized."""
        if not token:
            raise MissingToken()
        try:
            return self._store.validate_token(token)
        except InvalidToken:
            logger.debug("Rejected request with unknown access token")
            raise Unauthorized() from None
