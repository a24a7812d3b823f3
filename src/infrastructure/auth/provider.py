"""Auth provider contract and the user it yields."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID

from domain.entities.identity import AuthenticatedIdentity


@dataclass
class TokenUser:
    """Claims of a verified access token."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None

    def to_identity(self) -> AuthenticatedIdentity:
        """The identity a view session is opened for."""
        return AuthenticatedIdentity(
            user_id=self.id,
            email=self.email,
            display_name=self.display_name,
            avatar_url=self.avatar_url,
        )


class IAuthProvider(Protocol):
    """Verifies bearer tokens and, for tests, issues them."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's user, or None when the token is not acceptable."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Sign a token carrying the user's claims."""
        ...
