"""Tests for storage backends."""

import pytest

from podcastpro.store import JsonFileStorage, MemoryStorage
from podcastpro.utils.errors import StorageError


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_read_missing_key(self) -> None:
        assert MemoryStorage().read("nothing") is None

    def test_values_are_copied(self) -> None:
        storage = MemoryStorage()
        value = [{"id": "a"}]
        storage.write("k", value)

        value.append({"id": "b"})
        storage.read("k").append({"id": "c"})

        assert storage.read("k") == [{"id": "a"}]

    def test_delete(self) -> None:
        storage = MemoryStorage({"k": 1})
        storage.delete("k")
        storage.delete("k")

        assert not storage.exists("k")
        assert storage.keys() == []


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_creates_data_dir(self, tmp_path) -> None:
        data_dir = tmp_path / "nested" / "data"
        JsonFileStorage(data_dir)
        assert data_dir.is_dir()

    def test_write_then_read(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.write("podcast_pro_users", [{"id": "u1"}])

        assert (tmp_path / "podcast_pro_users.json").exists()
        assert storage.read("podcast_pro_users") == [{"id": "u1"}]

    def test_write_leaves_no_temp_file(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.write("k", {"a": 1})

        assert list(tmp_path.glob("*.tmp")) == []

    def test_corrupted_file_raises(self, tmp_path) -> None:
        (tmp_path / "k.json").write_text("{not json")

        with pytest.raises(StorageError) as exc_info:
            JsonFileStorage(tmp_path).read("k")

        assert exc_info.value.suggestion is not None

    def test_delete_missing_is_noop(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.delete("missing")
        assert not storage.exists("missing")
