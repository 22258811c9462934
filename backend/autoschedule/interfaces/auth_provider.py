"""
Authentication provider interface.

Implementations: Mock (local)
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(ABC):
    """Abstract interface for authentication."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """
        Verify an authentication token.

        Args:
            token: Bearer token from the Authorization header

        Returns:
            Authenticated user
        """
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """Check if authentication is enabled."""
        pass
