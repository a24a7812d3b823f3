"""Notes of the active profile: cache-first loads, writes and optimistic deletes."""

import logging
from collections.abc import Callable
from uuid import UUID

from core.exceptions import (
    ActionInProgressError,
    NoActiveProfileError,
    NoteNotFoundError,
    NotNoteAuthorError,
    NoteValidationError,
    RemoteStoreError,
)
from domain.entities.identity import GuestIdentity, Identity, user_id_of
from domain.entities.note import EmotionType, Note
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.cache_store import LocalCacheStore
from domain.state.gate import ActionGate, Activity
from domain.state.optimistic import optimistic_update
from domain.state.view_state import ViewState

logger = logging.getLogger(__name__)


class NotesSynchronizer:
    """Keeps ``ViewState.notes`` in sync with the remote notes table."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        state: ViewState,
        identity: Identity,
        cache: LocalCacheStore | None,
        gate: ActionGate,
    ) -> None:
        self._uow_factory = uow_factory
        self._state = state
        self._identity = identity
        self._cache = cache
        self._gate = gate
        self._deleting: dict[UUID, bool] = {}

    @property
    def _is_guest(self) -> bool:
        return isinstance(self._identity, GuestIdentity)

    def is_deleting(self, profile_id: UUID) -> bool:
        """Whether a note delete on the profile has not settled yet."""
        return self._deleting.get(profile_id, False)

    async def load(self, profile_id: UUID | None = None) -> list[Note]:
        """Paint cached notes of a profile, then replace them with fresh ones.

        A response that arrives after the selection moved on is dropped.
        A failed fetch leaves whatever is already displayed.
        """
        state = self._state
        profile_id = profile_id or state.active_profile_id
        if self._is_guest or profile_id is None:
            return state.notes

        generation = state.generation
        cached = self._cache.read_notes(profile_id) if self._cache else None
        if cached is not None and state.is_current(profile_id, generation):
            state.replace_notes(profile_id, cached)
        elif state.is_current(profile_id, generation) and state.notes_profile_id != profile_id:
            state.replace_notes(profile_id, [])
        state.notes_loading = cached is None

        try:
            async with self._uow_factory() as uow:
                notes = await uow.notes.get_for_profile(profile_id)
        except RemoteStoreError as exc:
            logger.warning("Failed to load notes of profile %s: %s", profile_id, exc)
            if state.is_current(profile_id, generation):
                state.notes_loading = False
            return state.notes

        if not state.is_current(profile_id, generation):
            logger.debug("Discarding stale notes response for profile %s", profile_id)
            return state.notes

        state.replace_notes(profile_id, notes)
        state.notes_loading = False
        if self._cache is not None:
            self._cache.write_notes(profile_id, state.notes)
        return state.notes

    async def create(
        self,
        text: str,
        emotion_type: EmotionType = EmotionType.FEELINGS,
    ) -> Note:
        """Write a note on the active profile.

        Raises:
            NoteValidationError: If the text is blank.
            NoActiveProfileError: If no profile is selected.
            ActionInProgressError: If another save or interaction is running.
            RemoteStoreError: If the insert fails; nothing changes locally.
        """
        text = text.strip()
        if not text:
            raise NoteValidationError()
        profile = self._state.active_profile
        if profile is None:
            raise NoActiveProfileError()
        if not self._gate.acquire(Activity.NOTE_SAVE):
            raise ActionInProgressError(str(self._gate.current))

        try:
            if isinstance(self._identity, GuestIdentity):
                note = Note(
                    profile_id=profile.id,
                    author_id=self._identity.session_id,
                    text=text,
                    emotion_type=emotion_type,
                )
                self._state.add_note(note)
                self._state.update_profile(profile.id, notes_count=profile.notes_count + 1)
                return note

            note = Note(
                profile_id=profile.id,
                author_id=self._identity.user_id,
                text=text,
                emotion_type=emotion_type,
            )
            async with self._uow_factory() as uow:
                created = await uow.notes.create(note)
                await uow.commit()
        finally:
            self._gate.release(Activity.NOTE_SAVE)

        logger.info("Created note %s on profile %s", created.id, profile.id)
        if self._state.notes_profile_id == profile.id:
            self._state.add_note(created)
            if self._cache is not None:
                self._cache.write_notes(profile.id, self._state.notes)

        current = self._state.find_profile(profile.id) or profile
        updated = self._state.update_profile(profile.id, notes_count=current.notes_count + 1)
        await self._persist_notes_count(updated or current)
        return created

    async def delete(self, note_id: UUID) -> bool:
        """Delete a note of the active profile, optimistically.

        Returns:
            False when another delete on the same profile is still settling.

        Raises:
            NoteNotFoundError: If the note is not displayed.
            NotNoteAuthorError: If the current user did not write it.
            RemoteStoreError: If the remote delete fails; the notes list, the
                counter and the cache are put back first.
        """
        state = self._state
        profile = state.active_profile
        if profile is None:
            raise NoActiveProfileError()
        note = state.find_note(note_id)
        if note is None:
            raise NoteNotFoundError(str(note_id))
        if not self._is_guest and note.author_id != user_id_of(self._identity):
            raise NotNoteAuthorError(str(note_id))
        if self.is_deleting(profile.id):
            return False

        def snapshot() -> tuple[list[Note], int]:
            current = state.find_profile(profile.id) or profile
            return state.notes, current.notes_count

        def apply() -> None:
            state.remove_note(note_id)
            current = state.find_profile(profile.id) or profile
            state.update_profile(profile.id, notes_count=max(0, current.notes_count - 1))
            if self._cache is not None:
                self._cache.write_notes(profile.id, state.notes)

        def restore(saved: tuple[list[Note], int]) -> None:
            notes, notes_count = saved
            state.replace_notes(profile.id, notes)
            state.update_profile(profile.id, notes_count=notes_count)
            if self._cache is not None:
                self._cache.write_notes(profile.id, notes)

        if self._is_guest:
            apply()
            return True

        self._deleting[profile.id] = True
        try:
            async with optimistic_update(snapshot, apply, restore):
                async with self._uow_factory() as uow:
                    await uow.notes.delete(note_id)
                    await uow.commit()
        except RemoteStoreError as exc:
            logger.warning("Failed to delete note %s, restored: %s", note_id, exc)
            raise
        finally:
            self._deleting[profile.id] = False

        logger.info("Deleted note %s from profile %s", note_id, profile.id)
        updated = state.find_profile(profile.id)
        if updated is not None:
            await self._persist_notes_count(updated)
        return True

    async def _persist_notes_count(self, profile: Profile) -> None:
        try:
            async with self._uow_factory() as uow:
                await uow.profiles.update_counters(profile.id, notes_count=profile.notes_count)
                await uow.commit()
        except RemoteStoreError as exc:
            logger.warning("Failed to persist notes count of profile %s: %s", profile.id, exc)
