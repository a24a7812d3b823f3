"""Create, edit and delete owned profiles."""

import logging
from collections.abc import Callable
from uuid import UUID

from core.exceptions import GuestModeError, NotProfileOwnerError, ProfileNotFoundError
from domain.entities.identity import AuthenticatedIdentity, Identity
from domain.entities.profile import Profile, Visibility, validate_profile_fields
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cache_store import LocalCacheStore
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for owner-side profile management."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state: ViewState,
        identity: Identity,
        cache: LocalCacheStore | None,
    ) -> None:
        self._uow_factory = uow_factory
        self._state = state
        self._identity = identity
        self._cache = cache

    def _require_user(self) -> AuthenticatedIdentity:
        if not isinstance(self._identity, AuthenticatedIdentity):
            raise GuestModeError("Sign in to manage profiles")
        return self._identity

    def _owned(self, profile_id: UUID, user: AuthenticatedIdentity) -> Profile:
        profile = self._state.find_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        if not profile.is_owned_by(user.user_id):
            raise NotProfileOwnerError(str(profile_id))
        return profile

    async def create(
        self,
        name: str,
        description: str | None = None,
        visibility: Visibility = Visibility.PRIVATE,
        image_data: str | None = None,
    ) -> Profile:
        """Create a profile, put it first in the list and select it."""
        user = self._require_user()
        name, description = validate_profile_fields(name, description)

        profile = Profile(
            owner_id=user.user_id,
            name=name,
            description=description,
            visibility=visibility,
            image_data=image_data,
        )
        async with self._uow_factory() as uow:
            created = await uow.profiles.create(profile)
            await uow.commit()

        logger.info("Created profile %s for user %s", created.id, user.user_id)
        state = self._state
        state.prepend_profile(created)
        if created.image_data:
            state.put_image(created.id, created.image_data)
        state.select_profile(created.id)
        state.replace_notes(created.id, [])
        state.set_collaborators([])
        state.prompt_create = False
        self._persist_cache(created.id)
        return created

    async def update(
        self,
        profile_id: UUID,
        name: str | None = None,
        description: str | None = None,
        visibility: Visibility | None = None,
        image_data: str | None = None,
    ) -> Profile:
        """Edit an owned profile.

        Omitted fields keep their value. Turning a profile private drops
        every collaborator it had.
        """
        user = self._require_user()
        current = self._owned(profile_id, user)
        name, description = validate_profile_fields(
            current.name if name is None else name,
            current.description if description is None else description,
        )
        new_visibility = visibility or current.visibility
        going_private = current.is_public and new_visibility == Visibility.PRIVATE

        async with self._uow_factory() as uow:
            existing = await uow.profiles.get(profile_id, with_image=True)
            if existing is None:
                raise ProfileNotFoundError(str(profile_id))
            existing.name = name
            existing.description = description
            existing.visibility = new_visibility
            if image_data is not None:
                existing.image_data = image_data
            updated = await uow.profiles.update(existing)
            removed = 0
            if going_private:
                removed = await uow.collaborators.delete_for_profile(profile_id)
            await uow.commit()

        if removed:
            logger.info("Removed %d collaborators from now private profile %s", removed, profile_id)

        state = self._state
        state.update_profile(
            profile_id,
            name=updated.name,
            description=updated.description,
            visibility=updated.visibility,
            image_data=updated.image_data,
        )
        if updated.image_data:
            state.put_image(profile_id, updated.image_data)
        if going_private and state.active_profile_id == profile_id:
            state.set_collaborators([])
        self._persist_cache(state.active_profile_id)
        return state.find_profile(profile_id) or updated

    async def delete(self, profile_id: UUID) -> UUID | None:
        """Delete an owned profile.

        Returns:
            The profile that should become active next, if the deleted one
            was active and another profile remains.
        """
        user = self._require_user()
        self._owned(profile_id, user)

        async with self._uow_factory() as uow:
            deleted = await uow.profiles.delete(profile_id)
            if not deleted:
                raise ProfileNotFoundError(str(profile_id))
            await uow.commit()

        logger.info("Deleted profile %s", profile_id)
        state = self._state
        was_active = state.active_profile_id == profile_id
        state.remove_profile(profile_id)
        if self._cache is not None:
            self._cache.forget_notes(profile_id)

        next_id: UUID | None = None
        if was_active:
            if state.profiles:
                next_id = state.profiles[0].id
                state.select_profile(next_id)
            else:
                state.clear_selection()
        self._persist_cache(state.active_profile_id)
        return next_id

    def _persist_cache(self, active_profile_id: UUID | None) -> None:
        if self._cache is None:
            return
        self._cache.write_profiles(self._state.profiles)
        self._cache.write_images(self._state.images)
        self._cache.write_active_profile_id(active_profile_id)
