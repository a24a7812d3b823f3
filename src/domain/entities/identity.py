"""Identity of the party driving a view session."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """A signed-in user. Writes go to the remote store."""

    user_id: UUID
    email: str = ""
    display_name: str | None = None
    avatar_url: str | None = None

    @property
    def collaborator_name(self) -> str:
        """Name recorded when this user enrolls as a collaborator."""
        return self.display_name or self.email or "Anonymous"


@dataclass(frozen=True)
class GuestIdentity:
    """An unauthenticated trial session. Nothing it does is persisted."""

    session_id: UUID = field(default_factory=uuid4)


Identity = AuthenticatedIdentity | GuestIdentity


def user_id_of(identity: Identity) -> UUID | None:
    """Return the stable user id, or None for guests."""
    if isinstance(identity, AuthenticatedIdentity):
        return identity.user_id
    return None
