"""Collaborator domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Collaborator:
    """A non-owner enrolled on a profile through its share link."""

    profile_id: UUID
    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
