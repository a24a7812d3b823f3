"""Pydantic schemas for sharing and collaborators."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ShareLinkResponseData(BaseModel):
    url: str
    title: str
    text: str


class ShareLinkResponse(BaseModel):
    """Schema for a profile share link."""

    data: ShareLinkResponseData


class CollaboratorResponse(BaseModel):
    """Schema for Collaborator response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    profile_id: UUID
    user_id: UUID
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime


class CollaboratorListResponse(BaseModel):
    """Schema for list of Collaborators."""

    data: list[CollaboratorResponse]
