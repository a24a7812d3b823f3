"""Note domain entity and ordering helpers."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4


class EmotionType(StrEnum):
    """Emotion tag attached to a note."""

    ANGER = "anger"
    FEELINGS = "feelings"
    APPRECIATION = "appreciation"

    @classmethod
    def parse(cls, value: str | None) -> "EmotionType":
        """Map a stored value to an EmotionType, defaulting to FEELINGS."""
        try:
            return cls(value) if value else cls.FEELINGS
        except ValueError:
            return cls.FEELINGS


_HEADER_TEXT = {
    EmotionType.ANGER: "messed up",
    EmotionType.APPRECIATION: "lets go!!",
    EmotionType.FEELINGS: "just saying",
}


@dataclass
class Note:
    """Domain entity for a note left on a profile."""

    profile_id: UUID
    author_id: UUID
    text: str
    id: UUID = field(default_factory=uuid4)
    emotion_type: EmotionType = EmotionType.FEELINGS
    created_at: datetime | None = field(default_factory=datetime.utcnow)


def sort_notes(notes: list[Note]) -> list[Note]:
    """Return notes newest first.

    Notes without a timestamp go after every timestamped note. The sort is
    stable, so ties keep their original relative order.
    """
    timestamped = [note for note in notes if note.created_at is not None]
    undated = [note for note in notes if note.created_at is None]
    timestamped.sort(key=lambda note: note.created_at, reverse=True)  # type: ignore[arg-type,return-value]
    return timestamped + undated


def header_text(emotion_type: EmotionType | None) -> str:
    """Short label shown above a note."""
    return _HEADER_TEXT.get(emotion_type or EmotionType.FEELINGS, "just saying")


def format_note_date(created_at: datetime | None, now: datetime | None = None) -> str:
    """Human date for a note: Today, Yesterday or e.g. "04 Mar"."""
    if created_at is None:
        return "—"
    now = now or datetime.utcnow()
    diff_days = (now.date() - created_at.date()).days
    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    return created_at.strftime("%d %b")
