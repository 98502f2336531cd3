"""In-memory ordered database."""

import bisect
import heapq
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ..errors import KeyNotFoundError
from .base import Database, Transaction


class MemoryTransaction(Transaction):
    """Buffers writes until the owning ``Memory`` commits them.

    Reads see the committed state overlaid with this transaction's own
    staged updates and removals.
    """

    def __init__(self, db: "Memory", writable: bool) -> None:
        super().__init__(writable)
        self._db = db
        self._updates: dict[bytes, bytes] = {}
        self._removals: set[bytes] = set()

    @property
    def has_changes(self) -> bool:
        return bool(self._updates or self._removals)

    def _get(self, key: bytes) -> bytes:
        if key in self._removals:
            raise KeyNotFoundError(key)
        if key in self._updates:
            return self._updates[key]
        value = self._db.memory.get(key)
        if value is None:
            raise KeyNotFoundError(key)
        return value

    def _set(self, key: bytes, value: bytes) -> None:
        self._removals.discard(key)
        self._updates[key] = value

    def _delete(self, key: bytes) -> None:
        self._updates.pop(key, None)
        self._removals.add(key)

    def _keys(self, prefix: bytes) -> Iterator[bytes]:
        staged = sorted(k for k in self._updates if k.startswith(prefix))
        last = None
        for key in heapq.merge(self._db.scan(prefix), staged):
            if key == last or key in self._removals:
                continue
            last = key
            yield key


class Memory(Database):
    """A memory-backed ordered database.

    Keys are kept in a sorted list next to the value dict. Commits swap
    in a new list, so an iteration already in progress keeps walking the
    order it started with.
    """

    def __init__(self, *, read_only: bool = False) -> None:
        super().__init__(read_only=read_only)
        self.memory: dict[bytes, bytes] = {}
        self._order: list[bytes] = []
        self._lock = threading.Lock()

    def scan(self, prefix: bytes = b"") -> Iterator[bytes]:
        """Committed keys starting with ``prefix``, ascending."""
        order = self._order
        i = bisect.bisect_left(order, prefix)
        while i < len(order) and order[i].startswith(prefix):
            yield order[i]
            i += 1

    def load(self, items: dict[bytes, bytes]) -> None:
        """Seed committed state directly, bypassing transactions."""
        txn = MemoryTransaction(self, writable=True)
        for key, value in items.items():
            txn.set(key, value)
        self._commit(txn)

    @contextmanager
    def _begin(self, writable: bool) -> Iterator[Transaction]:
        txn = MemoryTransaction(self, writable)
        yield txn
        if txn.has_changes:
            self._commit(txn)

    def _commit(self, txn: MemoryTransaction) -> None:
        with self._lock:
            order = list(self._order)
            for key in txn._removals:
                if self.memory.pop(key, None) is not None:
                    del order[bisect.bisect_left(order, key)]
            for key, value in txn._updates.items():
                if key not in self.memory:
                    bisect.insort(order, key)
                self.memory[key] = value
            self._order = order

    def _close(self) -> None:
        self.memory.clear()
        self._order = []
