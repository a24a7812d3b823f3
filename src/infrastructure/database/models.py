"""SQLAlchemy ORM models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """A person tracked by its owner (``owner_id`` is a Supabase auth user)."""

    __tablename__ = "profiles"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    owner_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[str | None] = mapped_column(String(50))
    visibility: Mapped[str] = mapped_column(String(10), nullable=False, default="private")
    # Large encoded image; list queries never load it
    image_data: Mapped[str | None] = mapped_column(Text, deferred=True)
    punch_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hug_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    kiss_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    notes: Mapped[list["NoteModel"]] = relationship(
        "NoteModel",
        back_populates="profile",
        cascade="all, delete-orphan",
    )
    collaborators: Mapped[list["CollaboratorModel"]] = relationship(
        "CollaboratorModel",
        back_populates="profile",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("visibility IN ('public', 'private')", name="check_profile_visibility"),
        CheckConstraint(
            "punch_count >= 0 AND hug_count >= 0 AND kiss_count >= 0 AND notes_count >= 0",
            name="check_profile_counters",
        ),
    )


class NoteModel(Base):
    """Emotion-tagged note left on a profile."""

    __tablename__ = "profile_notes"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    profile_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    emotion_type: Mapped[str | None] = mapped_column(String(20), default="feelings")
    created_at: Mapped[datetime | None] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    profile: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="notes")


class CollaboratorModel(Base):
    """A user enrolled on a profile through its share link."""

    __tablename__ = "profile_collaborators"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    profile_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    profile: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="collaborators")

    __table_args__ = (
        UniqueConstraint("profile_id", "user_id", name="uq_profile_collaborator"),
    )
