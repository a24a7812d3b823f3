"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities.

    Implementations apply the store's access policy for the viewer the
    repository is bound to: unreadable rows look missing, forbidden writes
    raise PolicyViolationError.
    """

    async def get(self, id: UUID, with_image: bool = False) -> Profile | None:
        """Get a profile by ID (at most one row)."""
        ...

    async def get_image(self, id: UUID) -> str | None:
        """Get only the encoded image of a profile."""
        ...

    async def get_owned(self, owner_id: UUID) -> list[Profile]:
        """Get profiles owned by a user, newest first, without images."""
        ...

    async def get_many(self, ids: list[UUID]) -> list[Profile]:
        """Get the readable profiles among the given IDs, newest first, without images."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a profile and return the created row."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update name, description, visibility and image; return the updated row."""
        ...

    async def update_counters(self, id: UUID, **counters: int) -> Profile:
        """Set one or more counter columns; return the updated row."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a profile (notes and collaborators cascade)."""
        ...
