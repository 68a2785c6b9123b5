"""Supabase Auth gateway for access token verification."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from diet_tracker.domain.auth import AuthUser
from diet_tracker.services.auth import AuthGateway


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Resolve access tokens through Supabase Auth."""

    client: Client

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for a JWT issued by Supabase Auth."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return AuthUser(id=UUID(str(response.user.id)), email=response.user.email)
