"""Explicit state container for a profile view.

All mutations go through the transitions below. Collections are replaced
wholesale (read-modify-write on a copy) instead of being mutated in place,
so readers holding a previous list never observe a half-applied change.
"""

from dataclasses import dataclass, field, replace
from typing import Any
from uuid import UUID

from domain.entities.collaborator import Collaborator
from domain.entities.note import Note, sort_notes
from domain.entities.profile import Profile


@dataclass
class ViewState:
    """Profile list, active-profile pointer and the active profile's notes."""

    profiles: list[Profile] = field(default_factory=list)
    active_profile_id: UUID | None = None
    images: dict[UUID, str] = field(default_factory=dict)
    notes: list[Note] = field(default_factory=list)
    notes_profile_id: UUID | None = None
    collaborators: list[Collaborator] = field(default_factory=list)
    access_denied: bool = False
    profiles_loading: bool = False
    notes_loading: bool = False
    prompt_create: bool = False
    # Bumped on every selection; async results tagged with an older value are stale.
    generation: int = 0

    # --- Profiles ---

    def replace_profiles(self, profiles: list[Profile]) -> None:
        self.profiles = list(profiles)

    def prepend_profile(self, profile: Profile) -> None:
        self.profiles = [profile, *[p for p in self.profiles if p.id != profile.id]]

    def update_profile(self, profile_id: UUID, **changes: Any) -> Profile | None:
        """Replace one profile by a modified copy. Returns the new copy."""
        updated: Profile | None = None

        def apply(profile: Profile) -> Profile:
            nonlocal updated
            if profile.id != profile_id:
                return profile
            updated = replace(profile, **changes)
            return updated

        self.profiles = [apply(p) for p in self.profiles]
        return updated

    def remove_profile(self, profile_id: UUID) -> None:
        self.profiles = [p for p in self.profiles if p.id != profile_id]
        self.drop_image(profile_id)

    def find_profile(self, profile_id: UUID | None) -> Profile | None:
        if profile_id is None:
            return None
        return next((p for p in self.profiles if p.id == profile_id), None)

    @property
    def active_profile(self) -> Profile | None:
        return self.find_profile(self.active_profile_id)

    # --- Selection ---

    def select_profile(self, profile_id: UUID) -> int:
        """Point the view at a profile and return the new generation token."""
        self.active_profile_id = profile_id
        self.generation += 1
        return self.generation

    def clear_selection(self) -> None:
        self.active_profile_id = None
        self.generation += 1
        self.notes = []
        self.notes_profile_id = None
        self.collaborators = []

    def is_current(self, profile_id: UUID, generation: int) -> bool:
        """Check a result tagged (profile_id, generation) still applies."""
        return self.active_profile_id == profile_id and self.generation == generation

    # --- Images ---

    def set_images(self, images: dict[UUID, str]) -> None:
        self.images = dict(images)

    def put_image(self, profile_id: UUID, image_data: str) -> None:
        self.images = {**self.images, profile_id: image_data}

    def drop_image(self, profile_id: UUID) -> None:
        self.images = {k: v for k, v in self.images.items() if k != profile_id}

    def image_for(self, profile_id: UUID) -> str | None:
        profile = self.find_profile(profile_id)
        if profile and profile.image_data:
            return profile.image_data
        return self.images.get(profile_id)

    # --- Notes ---

    def replace_notes(self, profile_id: UUID | None, notes: list[Note]) -> None:
        self.notes_profile_id = profile_id
        self.notes = sort_notes(notes)

    def add_note(self, note: Note) -> None:
        self.notes = sort_notes([*self.notes, note])

    def remove_note(self, note_id: UUID) -> None:
        self.notes = [n for n in self.notes if n.id != note_id]

    def find_note(self, note_id: UUID) -> Note | None:
        return next((n for n in self.notes if n.id == note_id), None)

    # --- Collaborators ---

    def set_collaborators(self, collaborators: list[Collaborator]) -> None:
        self.collaborators = list(collaborators)

    def remove_collaborator(self, collaborator_id: UUID) -> None:
        self.collaborators = [c for c in self.collaborators if c.id != collaborator_id]

    # --- Access ---

    def deny_access(self) -> None:
        """Terminal state for a forbidden shared link; nothing else is shown."""
        self.access_denied = True
        self.profiles = []
        self.images = {}
        self.active_profile_id = None
        self.generation += 1
        self.notes = []
        self.notes_profile_id = None
        self.collaborators = []
