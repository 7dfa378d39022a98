#!/usr/bin/env python3
"""Tests for storage backends."""

import pytest

from garage import FileStorage, MemoryStorage, StorageError, StorageQuotaExceeded


class TestMemoryStorage:
    def test_get_set_remove(self):
        storage = MemoryStorage()
        assert storage.get("k") is None
        storage.set("k", "[]")
        assert storage.get("k") == "[]"
        storage.remove("k")
        storage.remove("k")
        assert storage.get("k") is None

    def test_quota(self):
        storage = MemoryStorage(quota_bytes=4)
        storage.set("k", "1234")
        with pytest.raises(StorageQuotaExceeded):
            storage.set("k", "12345")
        assert storage.get("k") == "1234"

    def test_quota_counts_utf8_bytes(self):
        storage = MemoryStorage(quota_bytes=3)
        with pytest.raises(StorageQuotaExceeded):
            storage.set("k", "éé")


class TestFileStorage:
    """Tests for FileStorage using tmp_path."""

    def test_missing_key(self, tmp_path):
        assert FileStorage(tmp_path).get("garage") is None

    def test_set_creates_directory(self, tmp_path):
        storage = FileStorage(tmp_path / "nested" / "dir")
        storage.set("garage", '[{"model": "Fusca"}]')
        assert (tmp_path / "nested" / "dir" / "garage.json").exists()
        assert storage.get("garage") == '[{"model": "Fusca"}]'

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage.set("garage", "[1]")
        storage.set("garage", "[2]")
        assert storage.get("garage") == "[2]"
        assert [p.name for p in tmp_path.iterdir()] == ["garage.json"]

    def test_remove(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage.set("garage", "[]")
        storage.remove("garage")
        storage.remove("garage")
        assert storage.get("garage") is None

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", "with space"])
    def test_invalid_key(self, tmp_path, key):
        with pytest.raises(StorageError):
            FileStorage(tmp_path).get(key)

    def test_quota(self, tmp_path):
        storage = FileStorage(tmp_path, quota_bytes=10)
        with pytest.raises(StorageQuotaExceeded):
            storage.set("garage", "x" * 11)
        assert storage.get("garage") is None

    def test_unreadable_is_storage_error(self, tmp_path):
        (tmp_path / "garage.json").write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(StorageError):
            FileStorage(tmp_path).get("garage")

    def test_expands_user(self):
        assert "~" not in str(FileStorage("~/garagem").directory)
