"""
Mock authentication provider for local development.
"""

from autoschedule.interfaces.auth_provider import IAuthProvider, User


class MockAuthProvider(IAuthProvider):
    """Mock auth provider that treats the bearer token as the user ID."""

    def __init__(self, enabled: bool = False):
        """
        Initialize mock auth provider.

        Args:
            enabled: Whether an Authorization header is required
        """
        self._enabled = enabled

    async def verify_token(self, token: str) -> User:
        if "@" in token:
            return User(id=token, email=token, display_name=token)
        return User(id=token, email=f"{token}@example.com", display_name=token)

    def is_enabled(self) -> bool:
        return self._enabled
