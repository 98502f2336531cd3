"""Disk-backed database using diskcache."""

import logging
import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from ..errors import KeyNotFoundError, OpenError, StorageError
from .base import Database, Transaction

logger = logging.getLogger(__name__)

_MISSING = object()


def _to_bytes(obj: Any) -> bytes:
    """Coerce a stored key or value to bytes.

    kvsh only ever writes bytes, which diskcache keeps as raw BLOBs.
    Caches written by other programs may hold text or pickled objects.
    """
    if isinstance(obj, bytes):
        return obj
    if isinstance(obj, str):
        return obj.encode("utf-8", "surrogateescape")
    return str(obj).encode("utf-8")


class DiskTransaction(Transaction):
    def __init__(self, store: Any, writable: bool) -> None:
        super().__init__(writable)
        self.store = store

    def _get(self, key: bytes) -> bytes:
        value = self.store.get(key, default=_MISSING)
        if value is _MISSING:
            raise KeyNotFoundError(key)
        return _to_bytes(value)

    def _set(self, key: bytes, value: bytes) -> None:
        self.store.set(key, value)

    def _delete(self, key: bytes) -> None:
        self.store.delete(key)

    def _keys(self, prefix: bytes) -> Iterator[bytes]:
        # iterkeys walks the Cache table in SQLite order; BLOBs compare
        # with memcmp, so this is byte-wise ascending. diskcache has no
        # public seek, so every key sorting before the prefix is still
        # walked: cost is linear in the keys below the prefix range.
        for raw in self.store.iterkeys():
            if prefix and not isinstance(raw, bytes):
                # foreign TEXT/INTEGER keys sort before all BLOBs
                continue
            key = _to_bytes(raw)
            if key < prefix:
                continue
            if not key.startswith(prefix):
                break
            yield key


class Disk(Database):
    """Database backed by diskcache (SQLite + files).

    Eviction is disabled so the cache behaves as a plain persistent
    store. Each transaction runs inside ``Cache.transact()``, which
    rolls back on error.
    """

    def __init__(self, directory: str, *, read_only: bool = False) -> None:
        from diskcache import Cache as DiskCache
        from diskcache.core import DBNAME

        super().__init__(read_only=read_only)
        self.directory = directory
        if read_only and not os.path.isfile(os.path.join(directory, DBNAME)):
            raise OpenError(f"No database found at {directory}")
        try:
            self.store = DiskCache(directory, eviction_policy="none")
        except (OSError, sqlite3.Error) as e:
            raise OpenError(str(e)) from e
        logger.debug("Opened disk database at %s (read_only=%s)", directory, read_only)

    @contextmanager
    def _begin(self, writable: bool) -> Iterator[Transaction]:
        from diskcache import Timeout

        txn = DiskTransaction(self.store, writable)
        try:
            with self.store.transact():
                yield txn
        except (OSError, sqlite3.Error, Timeout) as e:
            raise StorageError(str(e) or type(e).__name__) from e

    def _close(self) -> None:
        self.store.close()
