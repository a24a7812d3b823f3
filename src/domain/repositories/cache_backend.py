"""Local key/value cache backend protocol."""

from typing import Protocol


class ICacheBackend(Protocol):
    """Persistent string key/value facility backing the local cache."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when missing."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...
