"""Pydantic schemas for guest sessions."""

from uuid import UUID

from pydantic import BaseModel

from api.v1.schemas.view import ViewResponse


class GuestSession(BaseModel):
    session_id: UUID
    view: ViewResponse


class GuestSessionResponse(BaseModel):
    """Schema for a started guest session. Send ``session_id`` as X-Guest-Session."""

    data: GuestSession
