"""Unit tests for ViewState transitions."""

from uuid import UUID, uuid4

from domain.entities.profile import Profile
from domain.state.view_state import ViewState
from tests.unit.conftest import make_note, make_profile


class TestProfiles:
    def test_update_profile_replaces_with_copy(self, state: ViewState, user_id: UUID):
        profile = make_profile(user_id)
        state.replace_profiles([profile])
        before = state.profiles

        updated = state.update_profile(profile.id, hug_count=4)

        assert updated is not None and updated.hug_count == 4
        assert profile.hug_count == 0
        assert before[0] is profile
        assert state.profiles is not before

    def test_update_unknown_profile_returns_none(self, state: ViewState):
        assert state.update_profile(uuid4(), hug_count=1) is None

    def test_prepend_profile_deduplicates(self, state: ViewState, user_id: UUID):
        a = make_profile(user_id, "A")
        b = make_profile(user_id, "B")
        state.replace_profiles([a, b])

        state.prepend_profile(b)

        assert [p.name for p in state.profiles] == ["B", "A"]

    def test_remove_profile_drops_image(self, state: ViewState, user_id: UUID):
        profile = make_profile(user_id)
        state.replace_profiles([profile])
        state.put_image(profile.id, "data:image/png;base64,AAA")

        state.remove_profile(profile.id)

        assert state.profiles == []
        assert profile.id not in state.images

    def test_active_profile(self, state: ViewState, user_id: UUID):
        profile = make_profile(user_id)
        state.replace_profiles([profile])

        assert state.active_profile is None
        state.select_profile(profile.id)
        assert state.active_profile == profile


class TestSelection:
    def test_select_bumps_generation(self, state: ViewState):
        pid = uuid4()
        first = state.select_profile(pid)
        second = state.select_profile(pid)

        assert second == first + 1
        assert state.is_current(pid, second)
        assert not state.is_current(pid, first)

    def test_clear_selection_empties_notes(self, state: ViewState, user_id: UUID):
        pid = uuid4()
        state.select_profile(pid)
        state.replace_notes(pid, [make_note(pid, user_id)])

        state.clear_selection()

        assert state.active_profile_id is None
        assert state.notes == []
        assert state.notes_profile_id is None


class TestImages:
    def test_image_for_prefers_profile_data(self, state: ViewState, user_id: UUID):
        profile = make_profile(user_id, image_data="inline")
        other = make_profile(user_id, "Other")
        state.replace_profiles([profile, other])
        state.set_images({profile.id: "cached", other.id: "cached-other"})

        assert state.image_for(profile.id) == "inline"
        assert state.image_for(other.id) == "cached-other"
        assert state.image_for(uuid4()) is None


class TestNotes:
    def test_replace_and_add_keep_order(self, state: ViewState, user_id: UUID):
        pid = uuid4()
        older = make_note(pid, user_id, "older", minutes=1)
        newer = make_note(pid, user_id, "newer", minutes=9)

        state.replace_notes(pid, [older])
        state.add_note(newer)

        assert [n.text for n in state.notes] == ["newer", "older"]
        assert state.notes_profile_id == pid

    def test_remove_note(self, state: ViewState, user_id: UUID):
        pid = uuid4()
        note = make_note(pid, user_id)
        state.replace_notes(pid, [note])

        state.remove_note(note.id)

        assert state.find_note(note.id) is None


class TestDenyAccess:
    def test_clears_every_profile_field(self, state: ViewState, user_id: UUID):
        profile: Profile = make_profile(user_id)
        state.replace_profiles([profile])
        state.select_profile(profile.id)
        state.put_image(profile.id, "img")
        state.replace_notes(profile.id, [make_note(profile.id, user_id)])

        state.deny_access()

        assert state.access_denied
        assert state.profiles == []
        assert state.images == {}
        assert state.notes == []
        assert state.active_profile_id is None
        assert state.collaborators == []
