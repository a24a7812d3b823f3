"""Per-identity local cache mirroring the last known server data.

Entries are performance hints only: anything missing or malformed is a
cache miss, and a failed write never interrupts the caller.
"""

import logging
from typing import Any, TypeVar
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from domain.entities.note import Note
from domain.entities.profile import Profile
from domain.repositories.cache_backend import ICacheBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PROFILES = TypeAdapter(list[Profile])
_IMAGES = TypeAdapter(dict[UUID, str])
_NOTES = TypeAdapter(list[Note])

PROFILES_KEY = "profilesCache"
IMAGES_KEY = "profileImagesCache"
CURRENT_PROFILE_KEY = "currentProfileId"


class LocalCacheStore:
    """Namespaced key/value view over a cache backend for one user."""

    def __init__(self, backend: ICacheBackend, user_id: UUID) -> None:
        self._backend = backend
        self._user_id = user_id

    def key(self, base: str) -> str:
        """Build the user-scoped key for a base name."""
        return f"u:{self._user_id}:{base}"

    @staticmethod
    def notes_key(profile_id: UUID) -> str:
        return f"notesCache:{profile_id}"

    # --- Profiles ---

    def read_profiles(self) -> list[Profile] | None:
        return self._read(PROFILES_KEY, _PROFILES)

    def write_profiles(self, profiles: list[Profile]) -> None:
        self._write(PROFILES_KEY, _PROFILES, profiles)

    # --- Images ---

    def read_images(self) -> dict[UUID, str] | None:
        return self._read(IMAGES_KEY, _IMAGES)

    def write_images(self, images: dict[UUID, str]) -> None:
        self._write(IMAGES_KEY, _IMAGES, images)

    # --- Notes ---

    def read_notes(self, profile_id: UUID) -> list[Note] | None:
        return self._read(self.notes_key(profile_id), _NOTES)

    def write_notes(self, profile_id: UUID, notes: list[Note]) -> None:
        self._write(self.notes_key(profile_id), _NOTES, notes)

    def forget_notes(self, profile_id: UUID) -> None:
        self._delete(self.notes_key(profile_id))

    # --- Active profile pointer ---

    def read_active_profile_id(self) -> UUID | None:
        try:
            raw = self._backend.get(self.key(CURRENT_PROFILE_KEY))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read active profile pointer: %s", exc)
            return None
        if not raw:
            return None
        try:
            return UUID(raw)
        except ValueError:
            logger.warning("Ignoring malformed active profile pointer %r", raw)
            return None

    def write_active_profile_id(self, profile_id: UUID | None) -> None:
        if profile_id is None:
            self._delete(CURRENT_PROFILE_KEY)
            return
        try:
            self._backend.set(self.key(CURRENT_PROFILE_KEY), str(profile_id))
        except OSError as exc:
            logger.warning("Failed to write active profile pointer: %s", exc)

    # --- Internal helpers ---

    def _read(self, base: str, adapter: TypeAdapter[T]) -> T | None:
        key = self.key(base)
        try:
            raw = self._backend.get(key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read cache entry %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding malformed cache entry %s", key)
            return None

    def _write(self, base: str, adapter: TypeAdapter[Any], value: Any) -> None:
        key = self.key(base)
        try:
            self._backend.set(key, adapter.dump_json(value).decode())
        except (OSError, ValueError) as exc:
            logger.warning("Failed to write cache entry %s: %s", key, exc)

    def _delete(self, base: str) -> None:
        key = self.key(base)
        try:
            self._backend.delete(key)
        except OSError as exc:
            logger.warning("Failed to delete cache entry %s: %s", key, exc)
