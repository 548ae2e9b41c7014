"""Bearer token verification contract."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """Identity extracted from a verified token."""
    uid: str
    email: Optional[str] = None
    name: Optional[str] = None


class ITokenVerifier(ABC):
    """Interface for the authentication provider."""

    @abstractmethod
    async def verify(self, token: str) -> AuthenticatedPrincipal:
        """
        Verify an ID token.

        Raises:
            AuthenticationError: If the token is invalid or expired
        """
        pass
