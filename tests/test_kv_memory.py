"""Tests for the Memory database."""

import threading

import pytest

from kvsh.errors import (
    DatabaseClosedError,
    KeyNotFoundError,
    ReadOnlyError,
    TransactionClosedError,
)
from kvsh.kv.memory import Memory


class TestMemoryBasic:
    def test_set_get(self):
        m = Memory()
        m.update(lambda txn: txn.set(b"k", b"v"))
        assert m.view(lambda txn: txn.get(b"k")) == b"v"

    def test_get_missing(self):
        m = Memory()
        with pytest.raises(KeyNotFoundError) as exc:
            m.view(lambda txn: txn.get(b"nope"))
        assert str(exc.value) == "Key not found"
        assert exc.value.key == b"nope"

    def test_overwrite(self):
        m = Memory()
        m.update(lambda txn: txn.set(b"k", b"old"))
        m.update(lambda txn: txn.set(b"k", b"new"))
        assert m.view(lambda txn: txn.get(b"k")) == b"new"

    def test_delete(self):
        m = Memory()
        m.update(lambda txn: txn.set(b"k", b"v"))
        m.update(lambda txn: txn.delete(b"k"))
        with pytest.raises(KeyNotFoundError):
            m.view(lambda txn: txn.get(b"k"))
        assert m.view(lambda txn: list(txn.keys())) == []

    def test_delete_missing(self):
        m = Memory()
        m.update(lambda txn: txn.delete(b"nope"))  # should not raise

    def test_empty_key_rejected(self):
        m = Memory()
        with pytest.raises(ValueError):
            m.update(lambda txn: txn.set(b"", b"v"))

    def test_type_error_on_non_bytes(self):
        m = Memory()
        with pytest.raises(TypeError, match="Expected bytes"):
            m.update(lambda txn: txn.set(b"k", "not bytes"))  # type: ignore
        with pytest.raises(TypeError, match="Expected bytes key"):
            m.view(lambda txn: txn.get("k"))  # type: ignore


class TestMemoryOrdering:
    def test_keys_bytewise_ascending(self):
        m = Memory()
        m.load({b"b": b"", b"\xff": b"", b"ab": b"", b"a": b"", b"B": b""})
        assert m.view(lambda txn: list(txn.keys())) == [b"B", b"a", b"ab", b"b", b"\xff"]

    def test_prefix(self):
        m = Memory()
        m.load({b"user:1": b"", b"user:2": b"", b"admin:1": b"", b"users": b""})
        keys = m.view(lambda txn: list(txn.keys(b"user:")))
        assert keys == [b"user:1", b"user:2"]

    def test_prefix_no_match(self):
        m = Memory()
        m.load({b"a": b"1"})
        assert m.view(lambda txn: list(txn.keys(b"z"))) == []

    def test_keys_include_staged_writes(self):
        m = Memory()
        m.load({b"a": b"1", b"c": b"3"})

        def fn(txn):
            txn.set(b"b", b"2")
            txn.set(b"c", b"33")
            txn.delete(b"a")
            return list(txn.keys())

        assert m.update(fn) == [b"b", b"c"]


class TestMemoryTransactions:
    def test_reads_see_own_writes(self):
        m = Memory()

        def fn(txn):
            txn.set(b"k", b"v")
            return txn.get(b"k")

        assert m.update(fn) == b"v"

    def test_rollback_on_error(self):
        m = Memory()
        m.load({b"keep": b"1"})

        def fn(txn):
            txn.set(b"k", b"v")
            txn.delete(b"keep")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            m.update(fn)
        assert m.view(lambda txn: list(txn.keys())) == [b"keep"]

    def test_write_in_view_rejected(self):
        m = Memory()
        with pytest.raises(ReadOnlyError):
            m.view(lambda txn: txn.set(b"k", b"v"))

    def test_transaction_unusable_after_release(self):
        m = Memory()
        txn = m.view(lambda txn: txn)
        assert txn.released
        with pytest.raises(TransactionClosedError):
            txn.get(b"k")

    def test_iterator_unusable_after_release(self):
        m = Memory()
        m.load({b"a": b"1", b"b": b"2"})
        keys = m.view(lambda txn: txn.keys())
        with pytest.raises(TransactionClosedError):
            next(keys)

    def test_read_only_database(self):
        m = Memory(read_only=True)
        with pytest.raises(ReadOnlyError):
            m.update(lambda txn: txn.set(b"k", b"v"))
        assert m.view(lambda txn: list(txn.keys())) == []

    def test_closed_database(self):
        m = Memory()
        m.close()
        m.close()  # idempotent
        assert m.closed
        with pytest.raises(DatabaseClosedError):
            m.view(lambda txn: None)

    def test_context_manager_closes(self):
        with Memory() as m:
            pass
        assert m.closed

    def test_concurrent_commits(self):
        m = Memory()

        def write(i):
            m.update(lambda txn: txn.set(f"k{i:02d}".encode(), b"v"))

        threads = [threading.Thread(target=write, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        keys = m.view(lambda txn: list(txn.keys()))
        assert keys == [f"k{i:02d}".encode() for i in range(20)]
