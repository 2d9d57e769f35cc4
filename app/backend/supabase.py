import asyncio

from supabase import Client

from app.backend.abstract import AbstractIdentityProvider
from app.lib.logger import configure_logger
from app.services.screening.exceptions import AuthError

logger = configure_logger(__name__)


class SupabaseIdentityProvider(AbstractIdentityProvider):
    """Identity provider backed by Supabase Auth session tokens."""

    def __init__(self, client: Client):
        self.client = client

    async def verify_credential(self, credential: str) -> str:
        scheme, _, token = credential.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthError("Invalid authorization format. Use 'Bearer <token>'")

        try:
            # supabase-py's auth client is synchronous
            response = await asyncio.to_thread(self.client.auth.get_user, token.strip())
        except Exception as e:
            raise AuthError("Session token rejected", {"reason": str(e)}) from e

        user = getattr(response, "user", None) if response else None
        if user is None:
            raise AuthError("Session token did not resolve to a user")

        account_id = user.email or user.id
        if not account_id:
            raise AuthError("Verified user has no account identifier")
        return str(account_id)
