"""Unit tests for NotesSynchronizer."""

import asyncio
from uuid import UUID, uuid4

import pytest

from core.exceptions import (
    ActionInProgressError,
    NoActiveProfileError,
    NoteNotFoundError,
    NotNoteAuthorError,
    NoteValidationError,
    RemoteStoreError,
)
from domain.entities.identity import AuthenticatedIdentity, GuestIdentity
from domain.entities.note import EmotionType, Note
from domain.entities.profile import Profile
from domain.services.cache_store import LocalCacheStore
from domain.services.notes_sync import NotesSynchronizer
from domain.state.gate import ActionGate, Activity
from domain.state.view_state import ViewState
from tests.unit.conftest import FakeUnitOfWork, make_note, make_profile


@pytest.fixture
def active_state(state: ViewState, owned_profile: Profile) -> ViewState:
    state.replace_profiles([owned_profile])
    state.select_profile(owned_profile.id)
    return state


@pytest.fixture
def sync(
    uow: FakeUnitOfWork,
    active_state: ViewState,
    identity: AuthenticatedIdentity,
    cache: LocalCacheStore,
    gate: ActionGate,
) -> NotesSynchronizer:
    return NotesSynchronizer(lambda: uow, active_state, identity, cache, gate)


class TestLoad:
    @pytest.mark.asyncio
    async def test_replaces_notes_and_writes_cache(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        cache: LocalCacheStore,
        owned_profile: Profile,
        user_id: UUID,
    ):
        older = make_note(owned_profile.id, user_id, "older", minutes=1)
        newer = make_note(owned_profile.id, user_id, "newer", minutes=5)
        uow.notes.get_for_profile.return_value = [older, newer]

        await sync.load()

        assert [n.text for n in active_state.notes] == ["newer", "older"]
        assert active_state.notes_profile_id == owned_profile.id
        assert not active_state.notes_loading
        assert [n.text for n in cache.read_notes(owned_profile.id) or []] == ["newer", "older"]

    @pytest.mark.asyncio
    async def test_paints_cached_notes_before_fetch(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        cache: LocalCacheStore,
        owned_profile: Profile,
        user_id: UUID,
    ):
        cache.write_notes(owned_profile.id, [make_note(owned_profile.id, user_id, "cached")])
        seen: list[list[str]] = []

        async def fetch(profile_id: UUID) -> list[Note]:
            seen.append([n.text for n in active_state.notes])
            assert not active_state.notes_loading
            return [make_note(owned_profile.id, user_id, "fresh")]

        uow.notes.get_for_profile.side_effect = fetch

        await sync.load()

        assert seen == [["cached"]]
        assert [n.text for n in active_state.notes] == ["fresh"]

    @pytest.mark.asyncio
    async def test_without_cache_shows_loading(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
    ):
        flags: list[bool] = []

        async def fetch(profile_id: UUID) -> list[Note]:
            flags.append(active_state.notes_loading)
            return []

        uow.notes.get_for_profile.side_effect = fetch

        await sync.load()

        assert flags == [True]
        assert not active_state.notes_loading

    @pytest.mark.asyncio
    async def test_fetch_error_keeps_displayed_notes(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
        user_id: UUID,
    ):
        shown = make_note(owned_profile.id, user_id, "shown")
        active_state.replace_notes(owned_profile.id, [shown])
        uow.notes.get_for_profile.side_effect = RemoteStoreError()

        result = await sync.load()

        assert result == [shown]
        assert not active_state.notes_loading

    @pytest.mark.asyncio
    async def test_discards_response_after_selection_moved(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
        user_id: UUID,
    ):
        other = make_profile(user_id, "Other")
        active_state.replace_profiles([owned_profile, other])
        release = asyncio.Event()

        async def slow_fetch(profile_id: UUID) -> list[Note]:
            await release.wait()
            return [make_note(profile_id, user_id, "stale")]

        uow.notes.get_for_profile.side_effect = slow_fetch

        task = asyncio.create_task(sync.load(owned_profile.id))
        await asyncio.sleep(0)
        active_state.select_profile(other.id)
        active_state.replace_notes(other.id, [make_note(other.id, user_id, "other")])
        release.set()
        await task

        assert [n.text for n in active_state.notes] == ["other"]
        assert active_state.notes_profile_id == other.id

    @pytest.mark.asyncio
    async def test_guest_is_noop(
        self,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        guest: GuestIdentity,
        gate: ActionGate,
    ):
        sync = NotesSynchronizer(lambda: uow, active_state, guest, None, gate)

        await sync.load()

        uow.notes.get_for_profile.assert_not_called()


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_remote_note_and_bumps_counter(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
        user_id: UUID,
        gate: ActionGate,
    ):
        active_state.replace_notes(owned_profile.id, [])
        uow.notes.create.side_effect = lambda note: note

        note = await sync.create("  you were great  ", EmotionType.APPRECIATION)

        assert note.text == "you were great"
        assert note.author_id == user_id
        assert note.emotion_type == EmotionType.APPRECIATION
        assert uow.committed
        assert active_state.notes == [note]
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 1
        uow.profiles.update_counters.assert_awaited_once_with(owned_profile.id, notes_count=1)
        assert not gate.busy

    @pytest.mark.asyncio
    async def test_rejects_blank_text(self, sync: NotesSynchronizer, uow: FakeUnitOfWork):
        with pytest.raises(NoteValidationError):
            await sync.create("   ")
        uow.notes.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_active_profile(self, sync: NotesSynchronizer, active_state: ViewState):
        active_state.clear_selection()
        with pytest.raises(NoActiveProfileError):
            await sync.create("hello")

    @pytest.mark.asyncio
    async def test_rejected_while_gate_busy(
        self, sync: NotesSynchronizer, gate: ActionGate, uow: FakeUnitOfWork
    ):
        gate.acquire(Activity.HUG)

        with pytest.raises(ActionInProgressError):
            await sync.create("hello")

        uow.notes.create.assert_not_called()
        assert gate.current == Activity.HUG

    @pytest.mark.asyncio
    async def test_remote_failure_changes_nothing(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
        gate: ActionGate,
    ):
        active_state.replace_notes(owned_profile.id, [])
        uow.notes.create.side_effect = RemoteStoreError()

        with pytest.raises(RemoteStoreError):
            await sync.create("hello")

        assert active_state.notes == []
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 0
        assert not gate.busy

    @pytest.mark.asyncio
    async def test_counter_persist_failure_keeps_note(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
    ):
        active_state.replace_notes(owned_profile.id, [])
        uow.notes.create.side_effect = lambda note: note
        uow.profiles.update_counters.side_effect = RemoteStoreError()

        note = await sync.create("hello")

        assert active_state.notes == [note]
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 1

    @pytest.mark.asyncio
    async def test_guest_note_stays_local(
        self,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        guest: GuestIdentity,
        gate: ActionGate,
    ):
        sync = NotesSynchronizer(lambda: uow, active_state, guest, None, gate)

        note = await sync.create("hi")

        assert note.author_id == guest.session_id
        assert active_state.notes == [note]
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 1
        uow.notes.create.assert_not_called()
        uow.profiles.update_counters.assert_not_called()


class TestDelete:
    @pytest.fixture
    def with_notes(
        self,
        active_state: ViewState,
        owned_profile: Profile,
        user_id: UUID,
    ) -> list[Note]:
        notes = [
            make_note(owned_profile.id, user_id, "mine", minutes=2),
            make_note(owned_profile.id, uuid4(), "theirs", minutes=1),
        ]
        active_state.replace_notes(owned_profile.id, notes)
        active_state.update_profile(owned_profile.id, notes_count=2)
        return notes

    @pytest.mark.asyncio
    async def test_deletes_and_decrements(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        cache: LocalCacheStore,
        owned_profile: Profile,
        with_notes: list[Note],
    ):
        mine = with_notes[0]

        assert await sync.delete(mine.id)

        uow.notes.delete.assert_awaited_once_with(mine.id)
        assert active_state.find_note(mine.id) is None
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 1
        assert [n.text for n in cache.read_notes(owned_profile.id) or []] == ["theirs"]
        uow.profiles.update_counters.assert_awaited_once_with(owned_profile.id, notes_count=1)

    @pytest.mark.asyncio
    async def test_remote_failure_restores_everything(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        cache: LocalCacheStore,
        owned_profile: Profile,
        with_notes: list[Note],
    ):
        uow.notes.delete.side_effect = RemoteStoreError()

        with pytest.raises(RemoteStoreError):
            await sync.delete(with_notes[0].id)

        assert [n.text for n in active_state.notes] == ["mine", "theirs"]
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 2
        assert [n.text for n in cache.read_notes(owned_profile.id) or []] == ["mine", "theirs"]
        assert not sync.is_deleting(owned_profile.id)

    @pytest.mark.asyncio
    async def test_counter_never_goes_negative(
        self,
        sync: NotesSynchronizer,
        active_state: ViewState,
        owned_profile: Profile,
        with_notes: list[Note],
    ):
        active_state.update_profile(owned_profile.id, notes_count=0)

        await sync.delete(with_notes[0].id)

        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 0

    @pytest.mark.asyncio
    async def test_only_author_may_delete(
        self, sync: NotesSynchronizer, uow: FakeUnitOfWork, with_notes: list[Note]
    ):
        with pytest.raises(NotNoteAuthorError):
            await sync.delete(with_notes[1].id)
        uow.notes.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_note(self, sync: NotesSynchronizer, with_notes: list[Note]):
        with pytest.raises(NoteNotFoundError):
            await sync.delete(uuid4())

    @pytest.mark.asyncio
    async def test_second_delete_while_pending_is_noop(
        self,
        sync: NotesSynchronizer,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        owned_profile: Profile,
        user_id: UUID,
        with_notes: list[Note],
    ):
        another = make_note(owned_profile.id, user_id, "another", minutes=3)
        active_state.add_note(another)
        release = asyncio.Event()

        async def slow_delete(note_id: UUID) -> bool:
            await release.wait()
            return True

        uow.notes.delete.side_effect = slow_delete

        first = asyncio.create_task(sync.delete(with_notes[0].id))
        await asyncio.sleep(0)
        assert sync.is_deleting(owned_profile.id)

        assert await sync.delete(another.id) is False

        release.set()
        assert await first
        assert active_state.find_note(another.id) is not None
        assert uow.notes.delete.await_count == 1

    @pytest.mark.asyncio
    async def test_guest_deletes_locally(
        self,
        uow: FakeUnitOfWork,
        active_state: ViewState,
        guest: GuestIdentity,
        gate: ActionGate,
        owned_profile: Profile,
    ):
        note = make_note(owned_profile.id, uuid4(), "guest note")
        active_state.replace_notes(owned_profile.id, [note])
        active_state.update_profile(owned_profile.id, notes_count=1)
        sync = NotesSynchronizer(lambda: uow, active_state, guest, None, gate)

        assert await sync.delete(note.id)

        assert active_state.notes == []
        assert active_state.active_profile is not None
        assert active_state.active_profile.notes_count == 0
        uow.notes.delete.assert_not_called()
