"""Caller identity: optional authentication and the rate-limit key."""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from app.backend.abstract import AbstractIdentityProvider
from app.lib.logger import configure_logger

logger = configure_logger(__name__)

UNKNOWN_CLIENT = "unknown"


@dataclass(frozen=True)
class IdentityResult:
    authenticated: bool
    account_id: Optional[str] = None


ANONYMOUS = IdentityResult(authenticated=False)


class IdentityResolver:
    """Upgrades callers with a valid credential; everyone else is anonymous.

    Authentication only lifts the anonymous rate limit, so a missing, broken
    or expired credential never fails the request.
    """

    def __init__(self, provider: AbstractIdentityProvider):
        self.provider = provider

    async def resolve(self, credential: Optional[str]) -> IdentityResult:
        if not credential or not credential.strip():
            return ANONYMOUS

        try:
            account_id = await self.provider.verify_credential(credential)
        except Exception as e:
            logger.warning(
                "Credential verification failed, treating caller as anonymous",
                extra={"event_type": "auth_degraded", "reason": str(e)},
            )
            return ANONYMOUS

        return IdentityResult(authenticated=True, account_id=account_id)


def merge_headers(header_items: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Lowercase header names, joining repeated headers with ``", "``.

    Repeated ``X-Forwarded-For`` lines are one list of hops, so the first
    hop stays first no matter how the proxy chain split it.
    """
    merged: Dict[str, str] = {}
    for key, value in header_items:
        key = key.lower()
        merged[key] = f"{merged[key]}, {value}" if key in merged else value
    return merged


def derive_client_identity(
    headers: Mapping[str, str], connection_address: Optional[str]
) -> str:
    """Best-effort network origin used as the anonymous rate-limit key.

    Prefers the first ``X-Forwarded-For`` hop, then ``X-Real-IP``, then the
    socket peer address. Proxy headers are client-controlled and spoofable,
    so the result is a throttling heuristic and never an authorization
    boundary.

    Args:
        headers: Request headers (case-insensitive mapping, or lowercase keys)
        connection_address: The transport-level peer address, if known

    Returns:
        The derived identity, or ``"unknown"`` when nothing is available
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return connection_address or UNKNOWN_CLIENT
