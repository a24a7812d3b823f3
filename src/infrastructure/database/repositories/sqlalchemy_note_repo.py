"""SQLAlchemy implementation of Note repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PolicyViolationError
from domain.entities.note import EmotionType, Note
from infrastructure.database.models import NoteModel, ProfileModel
from infrastructure.database.policies import profile_readable


class SQLAlchemyNoteRepository:
    """SQLAlchemy implementation of INoteRepository for one viewer."""

    def __init__(self, session: AsyncSession, viewer_id: UUID | None) -> None:
        self._session = session
        self._viewer_id = viewer_id

    def _readable_profile_ids(self):  # type: ignore[no-untyped-def]
        return select(ProfileModel.id).where(profile_readable(self._viewer_id))

    async def get_for_profile(self, profile_id: UUID) -> list[Note]:
        """Get notes of a readable profile, newest first."""
        stmt = (
            select(NoteModel)
            .where(
                NoteModel.profile_id == profile_id,
                NoteModel.profile_id.in_(self._readable_profile_ids()),
            )
            .order_by(NoteModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, note: Note) -> Note:
        """Insert a note written by the viewer on a readable profile."""
        if self._viewer_id is None or note.author_id != self._viewer_id:
            raise PolicyViolationError("profile_notes", "insert")
        stmt = select(ProfileModel.id).where(
            ProfileModel.id == note.profile_id, profile_readable(self._viewer_id)
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise PolicyViolationError("profile_notes", "insert")

        model = self._to_model(note)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a note written by the viewer."""
        stmt = select(NoteModel).where(
            NoteModel.id == id,
            NoteModel.profile_id.in_(self._readable_profile_ids()),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False
        if model.user_id != self._viewer_id:
            raise PolicyViolationError("profile_notes", "delete")

        await self._session.delete(model)
        await self._session.flush()
        return True

    @staticmethod
    def _to_entity(model: NoteModel) -> Note:
        """Convert ORM model to domain entity."""
        return Note(
            id=model.id,
            profile_id=model.profile_id,
            author_id=model.user_id,
            text=model.text,
            emotion_type=EmotionType.parse(model.emotion_type),
            created_at=model.created_at,
        )

    @staticmethod
    def _to_model(entity: Note) -> NoteModel:
        """Convert domain entity to ORM model."""
        return NoteModel(
            id=entity.id,
            profile_id=entity.profile_id,
            user_id=entity.author_id,
            text=entity.text,
            emotion_type=entity.emotion_type.value,
            created_at=entity.created_at,
        )
