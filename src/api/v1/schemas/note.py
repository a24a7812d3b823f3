"""Pydantic schemas for Note API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.note import EmotionType, Note, format_note_date, header_text


class NoteCreate(BaseModel):
    """Schema for writing a Note on the active profile."""

    text: str = Field(..., min_length=1)
    emotion_type: EmotionType = EmotionType.FEELINGS


class NoteResponse(BaseModel):
    """Schema for Note response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "456e4567-e89b-12d3-a456-426614174000",
                "profile_id": "123e4567-e89b-12d3-a456-426614174000",
                "author_id": "987e6543-e21b-12d3-a456-426614174000",
                "text": "Thanks for yesterday",
                "emotion_type": "appreciation",
                "created_at": "2026-01-28T10:00:00",
                "header": "lets go!!",
                "display_date": "Today",
            }
        },
    )

    id: UUID
    profile_id: UUID
    author_id: UUID
    text: str
    emotion_type: EmotionType
    created_at: datetime | None = None
    header: str
    display_date: str

    @classmethod
    def from_entity(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            profile_id=note.profile_id,
            author_id=note.author_id,
            text=note.text,
            emotion_type=note.emotion_type,
            created_at=note.created_at,
            header=header_text(note.emotion_type),
            display_date=format_note_date(note.created_at),
        )


class NoteListResponse(BaseModel):
    """Schema for the notes of the active profile."""

    data: list[NoteResponse]
    loading: bool = False


class NoteDetailResponse(BaseModel):
    """Schema for single Note."""

    data: NoteResponse
