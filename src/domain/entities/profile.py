"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from core.exceptions import ProfileValidationError

MAX_NAME_LENGTH = 30
MAX_DESCRIPTION_LENGTH = 50


class Visibility(StrEnum):
    """Who may read a profile besides its owner and collaborators."""

    PUBLIC = "public"
    PRIVATE = "private"


class InteractionKind(StrEnum):
    """Animated interactions, each backed by one profile counter."""

    PUNCH = "punch"
    HUG = "hug"
    KISS = "kiss"

    @property
    def counter_field(self) -> str:
        """Name of the Profile attribute this interaction increments."""
        return f"{self.value}_count"


@dataclass
class Profile:
    """Domain entity for a person the user interacts with."""

    owner_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    visibility: Visibility = Visibility.PRIVATE
    created_at: datetime = field(default_factory=datetime.utcnow)
    punch_count: int = 0
    hug_count: int = 0
    kiss_count: int = 0
    notes_count: int = 0
    image_data: str | None = None

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    def is_owned_by(self, user_id: UUID | None) -> bool:
        """Check whether the given user owns this profile."""
        return user_id is not None and self.owner_id == user_id

    def counter(self, kind: InteractionKind) -> int:
        return int(getattr(self, kind.counter_field))


def validate_profile_fields(name: str, description: str | None) -> tuple[str, str | None]:
    """Trim and validate profile name/description.

    Returns:
        Tuple of (name, description) with the description collapsed to None
        when blank.

    Raises:
        ProfileValidationError: If the name is empty or a field is too long.
    """
    name = name.strip()
    if not name:
        raise ProfileValidationError("Profile name is required", "name")
    if len(name) > MAX_NAME_LENGTH:
        raise ProfileValidationError(
            f"Profile name must be {MAX_NAME_LENGTH} characters or less", "name"
        )

    description = (description or "").strip() or None
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ProfileValidationError(
            f"Profile description must be {MAX_DESCRIPTION_LENGTH} characters or less",
            "description",
        )
    return name, description
