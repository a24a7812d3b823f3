"""Single-flight gate shared by interactions, note saves and profile switches."""

from enum import StrEnum


class Activity(StrEnum):
    """Things that occupy a profile view exclusively."""

    PUNCH = "punch"
    HUG = "hug"
    KISS = "kiss"
    NOTE_SAVE = "note_save"
    PROFILE_SWITCH = "profile_switch"


class ActionGate:
    """At most one activity at a time per view.

    Not a lock: acquiring while busy returns False and callers treat the
    request as a no-op.
    """

    def __init__(self) -> None:
        self._current: Activity | None = None

    @property
    def current(self) -> Activity | None:
        return self._current

    @property
    def busy(self) -> bool:
        return self._current is not None

    def acquire(self, activity: Activity) -> bool:
        if self._current is not None:
            return False
        self._current = activity
        return True

    def release(self, activity: Activity) -> None:
        if self._current == activity:
            self._current = None
