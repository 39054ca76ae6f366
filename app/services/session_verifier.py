"""Session verification: resolve a bearer credential to an identity via the directory."""

import logging

from app.core.errors import AuthenticationError, UpstreamError
from app.schemas.identity import Identity
from app.services.directory import IdentityDirectory

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL_MESSAGE = "Authentication token required."
INVALID_CREDENTIAL_MESSAGE = "Invalid or expired token."


class SessionVerifier:
    """Single access-control choke point for protected operations."""

    def __init__(self, directory: IdentityDirectory) -> None:
        self._directory = directory

    async def verify(self, credential: str | None) -> Identity:
        """
        Return the identity the credential belongs to.

        Absent credential fails without calling the directory; a directory rejection
        or error fails as AuthenticationError.
        """
        if credential is None or not credential.strip():
            raise AuthenticationError(MISSING_CREDENTIAL_MESSAGE)
        try:
            identity = await self._directory.resolve_session(credential.strip())
        except UpstreamError as e:
            logger.warning("Session lookup failed", extra={"reason": e.message})
            raise AuthenticationError(INVALID_CREDENTIAL_MESSAGE) from e
        if identity is None:
            raise AuthenticationError(INVALID_CREDENTIAL_MESSAGE)
        return identity
