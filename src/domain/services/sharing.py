"""Share links and collaborator management for owned profiles."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import quote
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    CollaboratorNotFoundError,
    NoActiveProfileError,
    NotProfileOwnerError,
    ProfileNotFoundError,
    RemoteStoreError,
)
from domain.entities.collaborator import Collaborator
from domain.entities.identity import AuthenticatedIdentity, Identity, user_id_of
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)

SHARE_TEXT = "View this profile on Feelability"


@dataclass(frozen=True)
class ShareLink:
    """Payload handed to a share sheet or copied to the clipboard."""

    url: str
    title: str
    text: str = SHARE_TEXT


def build_share_url(site_url: str, profile_id: UUID) -> str:
    """Login URL that lands on the profile after sign-in."""
    redirect = quote(f"/?profile={profile_id}", safe="")
    return f"{site_url.rstrip('/')}/login?redirect={redirect}"


class SharingService:
    """Owner-side sharing plus visitor self-enrollment."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state: ViewState,
        identity: Identity,
        site_url: str,
    ) -> None:
        self._uow_factory = uow_factory
        self._state = state
        self._identity = identity
        self._site_url = site_url

    def _owned_profile(self, profile_id: UUID | None) -> Profile:
        profile_id = profile_id or self._state.active_profile_id
        if profile_id is None:
            raise NoActiveProfileError()
        profile = self._state.find_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(str(profile_id))
        if not profile.is_owned_by(user_id_of(self._identity)):
            raise NotProfileOwnerError(str(profile_id))
        return profile

    def share_link(self, profile_id: UUID | None = None) -> ShareLink:
        """Build the share link of an owned profile (the active one by default)."""
        profile = self._owned_profile(profile_id)
        return ShareLink(
            url=build_share_url(self._site_url, profile.id),
            title=f"Feelability - {profile.name}",
        )

    async def list_collaborators(self, profile_id: UUID | None = None) -> list[Collaborator]:
        """Load collaborators of an owned profile in enrollment order.

        The owner's own record, if any, is never listed.
        """
        profile = self._owned_profile(profile_id)
        async with self._uow_factory() as uow:
            collaborators = await uow.collaborators.get_for_profile(profile.id)

        collaborators = [c for c in collaborators if c.user_id != profile.owner_id]
        if profile.id == self._state.active_profile_id:
            self._state.set_collaborators(collaborators)
        return collaborators

    async def remove_collaborator(self, collaborator_id: UUID) -> None:
        """Remove a collaborator of the active profile.

        The remote delete happens first; local state changes only on success.
        """
        profile = self._owned_profile(None)
        if not any(c.id == collaborator_id for c in self._state.collaborators):
            raise CollaboratorNotFoundError(str(collaborator_id))

        async with self._uow_factory() as uow:
            deleted = await uow.collaborators.delete(collaborator_id)
            if not deleted:
                raise CollaboratorNotFoundError(str(collaborator_id))
            await uow.commit()

        logger.info("Removed collaborator %s from profile %s", collaborator_id, profile.id)
        self._state.remove_collaborator(collaborator_id)

    async def enroll(self, profile: Profile) -> bool:
        """Record the current user as a collaborator of a visited profile.

        Idempotent: an existing record, or a concurrent insert losing the
        unique-constraint race, both count as enrolled. Failures are logged
        and reported as False, never raised.

        Returns:
            True when the user is enrolled after the call.
        """
        if not isinstance(self._identity, AuthenticatedIdentity):
            return False
        identity = self._identity
        if profile.is_owned_by(identity.user_id):
            return False

        try:
            async with self._uow_factory() as uow:
                existing = await uow.collaborators.get_membership(profile.id, identity.user_id)
                if existing:
                    return True

                collaborator = Collaborator(
                    profile_id=profile.id,
                    user_id=identity.user_id,
                    display_name=identity.collaborator_name,
                    avatar_url=identity.avatar_url,
                )
                try:
                    await uow.collaborators.create(collaborator)
                    await uow.commit()
                except IntegrityError as exc:
                    await uow.rollback()
                    orig = str(exc.orig).lower() if exc.orig else ""
                    if "unique" in orig or "duplicate" in orig:
                        logger.debug(
                            "Collaborator already enrolled (race condition) on profile %s",
                            profile.id,
                        )
                        return True
                    raise
        except RemoteStoreError as exc:
            logger.warning("Failed to enroll collaborator on profile %s: %s", profile.id, exc)
            return False

        logger.info("Enrolled user %s as collaborator on profile %s", identity.user_id, profile.id)
        return True
