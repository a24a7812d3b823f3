"""Collaborator repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.collaborator import Collaborator


class ICollaboratorRepository(Protocol):
    """Repository interface for Collaborator entities."""

    async def get_for_profile(self, profile_id: UUID) -> list[Collaborator]:
        """Get collaborators of a profile in enrollment order."""
        ...

    async def get_profile_ids_for_user(self, user_id: UUID) -> list[UUID]:
        """Get IDs of the profiles a user collaborates on."""
        ...

    async def get_membership(self, profile_id: UUID, user_id: UUID) -> Collaborator | None:
        """Get the collaborator record of a user on a profile."""
        ...

    async def create(self, collaborator: Collaborator) -> Collaborator:
        """Insert a collaborator record."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a collaborator record by ID."""
        ...

    async def delete_for_profile(self, profile_id: UUID) -> int:
        """Delete every collaborator of a profile and return the count."""
        ...
