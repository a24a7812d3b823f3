"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from core.exceptions import PolicyViolationError
from domain.entities.profile import Profile, Visibility
from infrastructure.database.models import ProfileModel
from infrastructure.database.policies import profile_readable

_COUNTER_FIELDS = frozenset({"punch_count", "hug_count", "kiss_count", "notes_count"})


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository for one viewer."""

    def __init__(self, session: AsyncSession, viewer_id: UUID | None) -> None:
        self._session = session
        self._viewer_id = viewer_id

    async def _get_model(self, id: UUID, with_image: bool = False) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.id == id, profile_readable(self._viewer_id))
        if with_image:
            stmt = stmt.options(undefer(ProfileModel.image_data))
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, id: UUID, with_image: bool = False) -> Profile | None:
        """Get a readable profile by ID."""
        model = await self._get_model(id, with_image)
        if not model:
            return None
        return self._to_entity(model, model.image_data if with_image else None)

    async def get_image(self, id: UUID) -> str | None:
        """Get the encoded image of a readable profile."""
        stmt = select(ProfileModel.image_data).where(
            ProfileModel.id == id, profile_readable(self._viewer_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, owner_id: UUID) -> list[Profile]:
        """Get profiles owned by a user, newest first."""
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.owner_id == owner_id, profile_readable(self._viewer_id))
            .order_by(ProfileModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_many(self, ids: list[UUID]) -> list[Profile]:
        """Get the readable profiles among the given IDs, newest first."""
        if not ids:
            return []
        stmt = (
            select(ProfileModel)
            .where(ProfileModel.id.in_(ids), profile_readable(self._viewer_id))
            .order_by(ProfileModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, profile: Profile) -> Profile:
        """Insert a profile owned by the viewer."""
        if self._viewer_id is None or profile.owner_id != self._viewer_id:
            raise PolicyViolationError("profiles", "insert")
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model, profile.image_data)

    async def update(self, profile: Profile) -> Profile:
        """Update the editable fields of an owned profile."""
        model = await self._get_model(profile.id, with_image=True)
        if not model or model.owner_id != self._viewer_id:
            raise PolicyViolationError("profiles", "update")

        model.name = profile.name
        model.description = profile.description
        model.visibility = profile.visibility.value
        model.image_data = profile.image_data

        await self._session.flush()
        return self._to_entity(model, model.image_data)

    async def update_counters(self, id: UUID, **counters: int) -> Profile:
        """Set counter columns on any readable profile."""
        unknown = set(counters) - _COUNTER_FIELDS
        if unknown:
            raise ValueError(f"Not counter fields: {sorted(unknown)}")

        model = await self._get_model(id)
        if not model:
            raise PolicyViolationError("profiles", "update")

        for name, value in counters.items():
            setattr(model, name, max(0, value))

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an owned profile (cascade deletes notes and collaborators)."""
        model = await self._get_model(id)
        if not model:
            return False
        if model.owner_id != self._viewer_id:
            raise PolicyViolationError("profiles", "delete")

        await self._session.delete(model)
        await self._session.flush()
        return True

    @staticmethod
    def _to_entity(model: ProfileModel, image_data: str | None = None) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            visibility=Visibility(model.visibility),
            created_at=model.created_at,
            punch_count=model.punch_count or 0,
            hug_count=model.hug_count or 0,
            kiss_count=model.kiss_count or 0,
            notes_count=model.notes_count or 0,
            image_data=image_data,
        )

    @staticmethod
    def _to_model(entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            owner_id=entity.owner_id,
            name=entity.name,
            description=entity.description,
            visibility=entity.visibility.value,
            image_data=entity.image_data,
            created_at=entity.created_at,
            punch_count=entity.punch_count,
            hug_count=entity.hug_count,
            kiss_count=entity.kiss_count,
            notes_count=entity.notes_count,
        )
