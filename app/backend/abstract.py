from abc import ABC, abstractmethod


class AbstractIdentityProvider(ABC):
    """Verifies opaque caller credentials against an external identity service."""

    @abstractmethod
    async def verify_credential(self, credential: str) -> str:
        """Verify a credential and return the account identifier it belongs to.

        Args:
            credential: The raw value of the caller's Authorization header

        Returns:
            The verified account identifier

        Raises:
            AuthError: If the credential is malformed, expired or rejected
        """
        pass
