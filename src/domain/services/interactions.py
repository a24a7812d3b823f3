"""Punch, hug and kiss: animated, single-flight counter increments."""

import asyncio
import logging
from collections.abc import Callable
from uuid import UUID

from core.exceptions import RemoteStoreError
from domain.entities.identity import GuestIdentity, Identity
from domain.entities.profile import InteractionKind
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cache_store import LocalCacheStore
from domain.state.gate import ActionGate, Activity
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)

DEFAULT_DURATIONS: dict[InteractionKind, float] = {
    InteractionKind.KISS: 0.8,
    InteractionKind.HUG: 1.0,
    InteractionKind.PUNCH: 1.3,
}


class InteractionService:
    """Runs one interaction animation at a time and bumps its counter."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state: ViewState,
        identity: Identity,
        cache: LocalCacheStore | None,
        gate: ActionGate,
        durations: dict[InteractionKind, float] | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._state = state
        self._identity = identity
        self._cache = cache
        self._gate = gate
        self._durations = {**DEFAULT_DURATIONS, **(durations or {})}
        self._pending: tuple[InteractionKind, UUID] | None = None

    @property
    def animating(self) -> InteractionKind | None:
        """The interaction currently playing, if any."""
        current = self._gate.current
        if current is None:
            return None
        try:
            return InteractionKind(current.value)
        except ValueError:
            return None

    def duration(self, kind: InteractionKind) -> float:
        return self._durations[kind]

    def start(self, kind: InteractionKind) -> bool:
        """Claim the gate for an interaction on the active profile.

        Returns:
            False when there is no active profile or the gate is busy; the
            request is then dropped.
        """
        profile = self._state.active_profile
        if profile is None:
            return False
        if not self._gate.acquire(Activity(kind.value)):
            return False
        self._pending = (kind, profile.id)
        return True

    async def run(self) -> int | None:
        """Play the started interaction and count it.

        The counter only moves once the animation has finished. A failed
        remote write is logged and the local count is kept.
        """
        if self._pending is None:
            return None
        kind, profile_id = self._pending
        activity = Activity(kind.value)
        try:
            await asyncio.sleep(self._durations[kind])
        finally:
            self._pending = None
            self._gate.release(activity)

        current = self._state.find_profile(profile_id)
        if current is None:
            return None
        value = current.counter(kind) + 1
        self._state.update_profile(profile_id, **{kind.counter_field: value})
        if self._cache is not None:
            self._cache.write_profiles(self._state.profiles)

        if not isinstance(self._identity, GuestIdentity):
            await self._persist(profile_id, kind, value)
        return value

    async def trigger(self, kind: InteractionKind) -> int | None:
        """Start and play an interaction.

        Returns:
            The new counter value, or None when nothing was triggered.
        """
        if not self.start(kind):
            return None
        return await self.run()

    async def _persist(self, profile_id: UUID, kind: InteractionKind, value: int) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.profiles.update_counters(profile_id, **{kind.counter_field: value})
                await uow.commit()
        except RemoteStoreError as exc:
            logger.warning("Failed to persist %s count of profile %s: %s", kind, profile_id, exc)
