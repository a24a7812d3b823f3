"""Unit tests for FileCacheBackend."""

from pathlib import Path
from uuid import uuid4

from domain.services.cache_store import LocalCacheStore
from infrastructure.cache.file_backend import FileCacheBackend


class TestFileCacheBackend:
    def test_missing_key(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)

        assert backend.get("nope") is None

    def test_set_then_get(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path / "nested")

        backend.set("u:1:profilesCache", "[]")

        assert backend.get("u:1:profilesCache") == "[]"

    def test_overwrite_leaves_no_temp_file(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)

        backend.set("key", "one")
        backend.set("key", "two")

        assert backend.get("key") == "two"
        assert not list(tmp_path.glob("*.tmp"))

    def test_file_names_do_not_contain_key(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)

        backend.set("u:../secret", "x")

        [written] = list(tmp_path.iterdir())
        assert "secret" not in written.name
        assert written.suffix == ".json"

    def test_delete(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)
        backend.set("key", "value")

        backend.delete("key")
        backend.delete("key")

        assert backend.get("key") is None

    def test_users_do_not_share_entries(self, tmp_path: Path):
        backend = FileCacheBackend(tmp_path)
        first = LocalCacheStore(backend, uuid4())
        second = LocalCacheStore(backend, uuid4())
        profile_id = uuid4()

        first.write_active_profile_id(profile_id)

        assert first.read_active_profile_id() == profile_id
        assert second.read_active_profile_id() is None
