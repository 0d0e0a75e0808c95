"""Verifies Supabase access tokens."""

from dataclasses import dataclass

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from neurostack.domain.entries import SessionUser
from neurostack.services.logs import IdentityVerifier


@dataclass
class SupabaseIdentityVerifier(IdentityVerifier):
    """Resolves access tokens through Supabase auth."""

    client: Client

    def verify(self, access_token: str) -> SessionUser | None:
        """Return the token's user, or None when Supabase rejects it."""
        try:
            response = self.client.auth.get_user(access_token)
        except SupabaseAuthError:
            return None
        user = response.user if response is not None else None
        if user is None:
            return None
        return SessionUser(id=str(user.id), email=user.email)
