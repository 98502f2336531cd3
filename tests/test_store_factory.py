"""Tests for the open_database() factory."""

import pytest

from kvsh import open_database
from kvsh.kv.disk import Disk
from kvsh.kv.memory import Memory


class TestOpenDatabase:
    def test_memory(self):
        db = open_database(storage="memory")
        assert isinstance(db, Memory)
        assert not db.read_only

    def test_memory_read_only(self):
        assert open_database(storage="memory", read_only=True).read_only

    def test_disk(self, tmp_path):
        with open_database(str(tmp_path / "db")) as db:
            assert isinstance(db, Disk)
            db.update(lambda txn: txn.set(b"k", b"v"))
            assert db.view(lambda txn: txn.get(b"k")) == b"v"
        assert db.closed

    def test_disk_requires_path(self):
        with pytest.raises(ValueError, match="path is required"):
            open_database(storage="disk")

    def test_unknown_storage(self):
        with pytest.raises(ValueError, match="Unknown storage"):
            open_database(storage="nope")
