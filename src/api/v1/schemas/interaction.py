"""Pydantic schemas for interactions."""

from uuid import UUID

from pydantic import BaseModel

from domain.entities.profile import InteractionKind


class InteractionAccepted(BaseModel):
    kind: InteractionKind
    accepted: bool
    profile_id: UUID | None = None
    duration_ms: int = 0


class InteractionResponse(BaseModel):
    """Schema for an interaction request.

    ``accepted`` is false when another interaction or a note save was
    already running; nothing is counted then.
    """

    data: InteractionAccepted
