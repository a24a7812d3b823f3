"""Loads the profile list a user can see and picks the active profile."""

import asyncio
import logging
import random
from collections.abc import Callable
from uuid import UUID, uuid4

from core.exceptions import RemoteStoreError
from domain.entities.identity import Identity, user_id_of
from domain.entities.profile import Profile, Visibility
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cache_store import LocalCacheStore
from domain.services.sharing import SharingService
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)

GUEST_PROFILE_NAME = "John Doe"
GUEST_PROFILE_DESCRIPTION = "Guest mode"
GUEST_IMAGE_COUNT = 70


def merge_profiles(*groups: list[Profile]) -> list[Profile]:
    """Union profile groups by id, later groups winning, newest first."""
    merged: dict[UUID, Profile] = {}
    for group in groups:
        for profile in group:
            merged[profile.id] = profile
    return sorted(merged.values(), key=lambda p: p.created_at, reverse=True)


def guest_profile(image_template: str, seed: int | None = None) -> Profile:
    """Build the synthetic profile shown to guests. Never persisted."""
    if seed is None:
        seed = random.randrange(1_000_000)
    return Profile(
        owner_id=uuid4(),
        name=GUEST_PROFILE_NAME,
        description=GUEST_PROFILE_DESCRIPTION,
        visibility=Visibility.PRIVATE,
        image_data=image_template.format(index=(seed % GUEST_IMAGE_COUNT) + 1),
    )


class ProfileSynchronizer:
    """Cache-first loader for owned, shared and linked profiles."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state: ViewState,
        identity: Identity,
        cache: LocalCacheStore | None,
        sharing: SharingService,
        guest_image_template: str,
    ) -> None:
        self._uow_factory = uow_factory
        self._state = state
        self._identity = identity
        self._cache = cache
        self._sharing = sharing
        self._guest_image_template = guest_image_template

    async def load(self, shared_profile_id: UUID | None = None) -> None:
        """Paint cached profiles, then fetch, merge and select.

        Raises:
            RemoteStoreError: If the owned profiles cannot be read. Failures
                on the collaborator side only degrade the list.
        """
        user_id = user_id_of(self._identity)
        if user_id is None:
            return

        state = self._state
        state.access_denied = False
        self._paint_from_cache(select=shared_profile_id is None)
        state.profiles_loading = not state.profiles

        try:
            owned, collaborator_ids = await asyncio.gather(
                self._fetch_owned(user_id),
                self._fetch_collaborator_ids(user_id),
            )
        except RemoteStoreError as exc:
            logger.error("Failed to load profiles for user %s: %s", user_id, exc)
            state.profiles_loading = False
            raise

        shared = await self._fetch_shared(collaborator_ids)

        linked: list[Profile] = []
        if shared_profile_id is not None:
            link_profile = await self._resolve_link(shared_profile_id, user_id, collaborator_ids)
            if link_profile is None:
                logger.info("Access denied to shared profile %s for user %s", shared_profile_id, user_id)
                state.deny_access()
                state.profiles_loading = False
                return
            linked.append(link_profile)
            if not link_profile.is_owned_by(user_id):
                await self._sharing.enroll(link_profile)

        merged = merge_profiles(owned, shared, linked)
        state.replace_profiles(merged)
        images = {pid: img for pid, img in state.images.items() if state.find_profile(pid)}
        images.update({p.id: p.image_data for p in merged if p.image_data})
        state.set_images(images)
        state.profiles_loading = False

        if self._cache is not None:
            self._cache.write_profiles(merged)
            self._cache.write_images(images)

        self._select_after_load(linked[0].id if linked else None)

    def _paint_from_cache(self, select: bool) -> None:
        if self._cache is None:
            return
        cached = self._cache.read_profiles()
        if not cached:
            return
        self._state.replace_profiles(cached)
        self._state.set_images(self._cache.read_images() or {})
        if not select:
            return
        pointer = self._cache.read_active_profile_id()
        target = self._state.find_profile(pointer) or cached[0]
        if target.id != self._state.active_profile_id:
            self._state.select_profile(target.id)

    def _select_after_load(self, link_profile_id: UUID | None) -> None:
        state = self._state
        # Without a cache the in-memory selection is the remembered pointer
        if self._cache is not None:
            remembered = self._cache.read_active_profile_id()
        else:
            remembered = state.active_profile_id
        candidates = [link_profile_id, remembered]
        target = next((pid for pid in candidates if state.find_profile(pid)), None)
        if target is None and state.profiles:
            target = state.profiles[0].id

        if target is None:
            state.clear_selection()
        elif target != state.active_profile_id or link_profile_id is not None:
            state.select_profile(target)

        if self._cache is not None:
            self._cache.write_active_profile_id(target)

    async def _fetch_owned(self, user_id: UUID) -> list[Profile]:
        async with self._uow_factory() as uow:
            return await uow.profiles.get_owned(user_id)  # type: ignore[no-any-return]

    async def _fetch_collaborator_ids(self, user_id: UUID) -> list[UUID]:
        try:
            async with self._uow_factory() as uow:
                return await uow.collaborators.get_profile_ids_for_user(user_id)  # type: ignore[no-any-return]
        except RemoteStoreError as exc:
            logger.warning("Failed to load collaborator profile ids: %s", exc)
            return []

    async def _fetch_shared(self, profile_ids: list[UUID]) -> list[Profile]:
        if not profile_ids:
            return []
        try:
            async with self._uow_factory() as uow:
                return await uow.profiles.get_many(profile_ids)  # type: ignore[no-any-return]
        except RemoteStoreError as exc:
            logger.warning("Failed to load shared profiles: %s", exc)
            return []

    async def _resolve_link(
        self,
        profile_id: UUID,
        user_id: UUID,
        collaborator_ids: list[UUID],
    ) -> Profile | None:
        """Fetch a linked profile, or None when the viewer may not see it."""
        try:
            async with self._uow_factory() as uow:
                profile = await uow.profiles.get(profile_id)
        except RemoteStoreError as exc:
            logger.warning("Failed to load shared profile %s: %s", profile_id, exc)
            return None

        if profile is None:
            return None
        if (
            not profile.is_public
            and not profile.is_owned_by(user_id)
            and profile.id not in collaborator_ids
        ):
            return None
        return profile

    def enter_guest_mode(self, seed: int | None = None) -> Profile:
        """Replace the view with the single guest profile."""
        profile = guest_profile(self._guest_image_template, seed)
        state = self._state
        state.access_denied = False
        state.profiles_loading = False
        state.replace_profiles([profile])
        state.set_images({profile.id: profile.image_data or ""})
        state.select_profile(profile.id)
        state.replace_notes(profile.id, [])
        return profile

    async def load_image(self, profile_id: UUID) -> str | None:
        """Fetch a profile image on demand; cached images are returned as is."""
        known = self._state.image_for(profile_id)
        if known:
            return known
        if user_id_of(self._identity) is None:
            return None

        try:
            async with self._uow_factory() as uow:
                image_data = await uow.profiles.get_image(profile_id)
        except RemoteStoreError as exc:
            logger.warning("Failed to load image of profile %s: %s", profile_id, exc)
            return None
        if not image_data:
            return None

        self._state.put_image(profile_id, image_data)
        self._state.update_profile(profile_id, image_data=image_data)
        if self._cache is not None:
            self._cache.write_images(self._state.images)
        return image_data
