from supabase import Client, create_client

from app.backend.abstract import AbstractIdentityProvider
from app.backend.supabase import SupabaseIdentityProvider
from app.config import config
from app.lib.logger import configure_logger
from app.services.screening.exceptions import AuthError

logger = configure_logger(__name__)


class DisabledIdentityProvider(AbstractIdentityProvider):
    """Used when no identity backend is configured; every caller is anonymous."""

    async def verify_credential(self, credential: str) -> str:
        raise AuthError("No identity provider is configured")


def get_identity_provider() -> AbstractIdentityProvider:
    """Get the identity provider implementation based on configuration."""
    if config.identity.backend == "disabled":
        return DisabledIdentityProvider()
    if config.identity.backend == "supabase":
        if not config.identity.supabase_url or not config.identity.supabase_key:
            logger.warning(
                "Supabase identity backend selected but not configured; "
                "all callers will be treated as anonymous"
            )
            return DisabledIdentityProvider()
        return _get_supabase_identity_provider()
    raise ValueError(f"Unsupported identity backend: {config.identity.backend}")


def _get_supabase_identity_provider() -> SupabaseIdentityProvider:
    client: Client = create_client(
        config.identity.supabase_url, config.identity.supabase_key
    )
    return SupabaseIdentityProvider(client=client)
