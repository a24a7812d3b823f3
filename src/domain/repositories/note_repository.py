"""Note repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.note import Note


class INoteRepository(Protocol):
    """Repository interface for Note entities."""

    async def get_for_profile(self, profile_id: UUID) -> list[Note]:
        """Get notes of a profile ordered by created_at descending."""
        ...

    async def create(self, note: Note) -> Note:
        """Insert a note and return the created row."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a note by ID."""
        ...
