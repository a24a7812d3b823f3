"""SQLAlchemy implementation of Collaborator repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PolicyViolationError
from domain.entities.collaborator import Collaborator
from infrastructure.database.models import CollaboratorModel, ProfileModel
from infrastructure.database.policies import PUBLIC, collaborator_readable


class SQLAlchemyCollaboratorRepository:
    """SQLAlchemy implementation of ICollaboratorRepository for one viewer."""

    def __init__(self, session: AsyncSession, viewer_id: UUID | None) -> None:
        self._session = session
        self._viewer_id = viewer_id

    async def get_for_profile(self, profile_id: UUID) -> list[Collaborator]:
        """Get readable collaborators of a profile in enrollment order."""
        stmt = (
            select(CollaboratorModel)
            .where(
                CollaboratorModel.profile_id == profile_id,
                collaborator_readable(self._viewer_id),
            )
            .order_by(CollaboratorModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_profile_ids_for_user(self, user_id: UUID) -> list[UUID]:
        """Get IDs of the profiles a user collaborates on."""
        stmt = select(CollaboratorModel.profile_id).where(
            CollaboratorModel.user_id == user_id,
            collaborator_readable(self._viewer_id),
        )
        result = await self._session.execute(stmt)
        return list(result.scalars())

    async def get_membership(self, profile_id: UUID, user_id: UUID) -> Collaborator | None:
        """Get the collaborator record of a user on a profile."""
        stmt = select(CollaboratorModel).where(
            CollaboratorModel.profile_id == profile_id,
            CollaboratorModel.user_id == user_id,
            collaborator_readable(self._viewer_id),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, collaborator: Collaborator) -> Collaborator:
        """Enroll the viewer on a public profile."""
        if self._viewer_id is None or collaborator.user_id != self._viewer_id:
            raise PolicyViolationError("profile_collaborators", "insert")
        stmt = select(ProfileModel.id).where(
            ProfileModel.id == collaborator.profile_id,
            ProfileModel.visibility == PUBLIC,
        )
        result = await self._session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise PolicyViolationError("profile_collaborators", "insert")

        model = self._to_model(collaborator)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a collaborator record (profile owner or the collaborator)."""
        stmt = select(CollaboratorModel).where(
            CollaboratorModel.id == id,
            collaborator_readable(self._viewer_id),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def delete_for_profile(self, profile_id: UUID) -> int:
        """Delete every collaborator of an owned profile."""
        owner = await self._session.execute(
            select(ProfileModel.owner_id).where(ProfileModel.id == profile_id)
        )
        if owner.scalar_one_or_none() != self._viewer_id or self._viewer_id is None:
            raise PolicyViolationError("profile_collaborators", "delete")

        stmt = select(CollaboratorModel).where(CollaboratorModel.profile_id == profile_id)
        result = await self._session.execute(stmt)
        models = list(result.scalars())
        for model in models:
            await self._session.delete(model)
        await self._session.flush()
        return len(models)

    @staticmethod
    def _to_entity(model: CollaboratorModel) -> Collaborator:
        """Convert ORM model to domain entity."""
        return Collaborator(
            id=model.id,
            profile_id=model.profile_id,
            user_id=model.user_id,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            created_at=model.created_at,
        )

    @staticmethod
    def _to_model(entity: Collaborator) -> CollaboratorModel:
        """Convert domain entity to ORM model."""
        return CollaboratorModel(
            id=entity.id,
            profile_id=entity.profile_id,
            user_id=entity.user_id,
            display_name=entity.display_name,
            avatar_url=entity.avatar_url,
            created_at=entity.created_at,
        )
