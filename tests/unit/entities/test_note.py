"""Unit tests for Note ordering and display helpers."""

from datetime import datetime
from uuid import uuid4

from domain.entities.note import EmotionType, format_note_date, header_text, sort_notes
from tests.unit.conftest import make_note


class TestEmotionType:
    def test_parse_known_values(self):
        assert EmotionType.parse("anger") == EmotionType.ANGER
        assert EmotionType.parse("appreciation") == EmotionType.APPRECIATION

    def test_parse_defaults_to_feelings(self):
        assert EmotionType.parse(None) == EmotionType.FEELINGS
        assert EmotionType.parse("") == EmotionType.FEELINGS
        assert EmotionType.parse("joy") == EmotionType.FEELINGS


class TestSortNotes:
    def test_newest_first(self):
        pid, author = uuid4(), uuid4()
        old = make_note(pid, author, "old", minutes=1)
        new = make_note(pid, author, "new", minutes=5)
        mid = make_note(pid, author, "mid", minutes=3)

        assert [n.text for n in sort_notes([old, new, mid])] == ["new", "mid", "old"]

    def test_undated_notes_go_last(self):
        pid, author = uuid4(), uuid4()
        undated = make_note(pid, author, "undated", minutes=None)
        dated = make_note(pid, author, "dated", minutes=1)

        assert [n.text for n in sort_notes([undated, dated])] == ["dated", "undated"]

    def test_ties_keep_original_order(self):
        pid, author = uuid4(), uuid4()
        first = make_note(pid, author, "first", minutes=2)
        second = make_note(pid, author, "second", minutes=2)
        third = make_note(pid, author, "third", minutes=None)
        fourth = make_note(pid, author, "fourth", minutes=None)

        result = sort_notes([first, third, second, fourth])

        assert [n.text for n in result] == ["first", "second", "third", "fourth"]

    def test_does_not_mutate_input(self):
        pid, author = uuid4(), uuid4()
        notes = [make_note(pid, author, "a", minutes=1), make_note(pid, author, "b", minutes=2)]

        sort_notes(notes)

        assert [n.text for n in notes] == ["a", "b"]


class TestDisplayHelpers:
    def test_header_text(self):
        assert header_text(EmotionType.ANGER) == "messed up"
        assert header_text(EmotionType.APPRECIATION) == "lets go!!"
        assert header_text(EmotionType.FEELINGS) == "just saying"
        assert header_text(None) == "just saying"

    def test_format_note_date(self):
        now = datetime(2026, 3, 10, 9, 0)

        assert format_note_date(None, now) == "—"
        assert format_note_date(datetime(2026, 3, 10, 1, 0), now) == "Today"
        assert format_note_date(datetime(2026, 3, 9, 23, 0), now) == "Yesterday"
        assert format_note_date(datetime(2026, 3, 4, 12, 0), now) == "04 Mar"
