"""Access token authentication."""

import logging
from dataclasses import dataclass
from typing import Protocol

from diet_tracker.domain.auth import AuthUser

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when a request cannot be tied to a user."""


class AuthGateway(Protocol):
    """Interface to the identity provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning the token, or None when it is invalid."""


@dataclass
class AuthService:
    """Service that resolves bearer tokens into users."""

    gateway: AuthGateway

    def authenticate(self, access_token: str | None) -> AuthUser:
        """Return the authenticated user or raise AuthenticationError."""
        if not access_token:
            raise AuthenticationError("Missing access token")
        try:
            user = self.gateway.get_user(access_token)
        except Exception as exc:
            logger.warning("Token verification failed: %s", exc)
            raise AuthenticationError("Invalid access token") from exc
        if user is None:
            raise AuthenticationError("Invalid access token")
        return user
