"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, Profile, Visibility


class ProfileCreate(BaseModel):
    """Schema for creating a Profile."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    visibility: Visibility = Visibility.PRIVATE
    image_data: str | None = None


class ProfileUpdate(BaseModel):
    """Schema for updating a Profile. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    visibility: Visibility | None = None
    image_data: str | None = None


class ProfileResponse(BaseModel):
    """Schema for Profile response. Images are served separately."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "owner_id": "987e6543-e21b-12d3-a456-426614174000",
                "name": "Alex",
                "description": "College roommate",
                "visibility": "public",
                "created_at": "2026-01-28T10:00:00",
                "punch_count": 2,
                "hug_count": 14,
                "kiss_count": 0,
                "notes_count": 3,
                "has_image": True,
            }
        },
    )

    id: UUID
    owner_id: UUID
    name: str
    description: str | None = None
    visibility: Visibility
    created_at: datetime
    punch_count: int = 0
    hug_count: int = 0
    kiss_count: int = 0
    notes_count: int = 0
    has_image: bool = False

    @classmethod
    def from_entity(cls, profile: Profile, has_image: bool = False) -> "ProfileResponse":
        return cls(
            id=profile.id,
            owner_id=profile.owner_id,
            name=profile.name,
            description=profile.description,
            visibility=profile.visibility,
            created_at=profile.created_at,
            punch_count=profile.punch_count,
            hug_count=profile.hug_count,
            kiss_count=profile.kiss_count,
            notes_count=profile.notes_count,
            has_image=has_image or bool(profile.image_data),
        )


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile."""

    data: ProfileResponse


class ProfileImage(BaseModel):
    profile_id: UUID
    image_data: str | None = None


class ProfileImageResponse(BaseModel):
    """Schema for a lazily loaded profile image."""

    data: ProfileImage
