"""Abstract ordered KV database interface."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Callable, TypeVar

from ..errors import DatabaseClosedError, ReadOnlyError, TransactionClosedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_key(key: bytes) -> None:
    if not isinstance(key, bytes):
        raise TypeError(f"Expected bytes key, got {type(key).__name__}")
    if not key:
        raise ValueError("Key must not be empty")


class Transaction(ABC):
    """A unit of read or read-write access to a ``Database``.

    Transactions are handed out by ``Database.transaction()`` (or the
    ``view``/``update`` helpers) and become unusable once released.
    Keys and values are bytes only.
    """

    def __init__(self, writable: bool) -> None:
        self.writable = writable
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Mark the transaction as finished. Further use raises."""
        self._released = True

    def _check_usable(self) -> None:
        if self._released:
            raise TransactionClosedError("Transaction has already been released")

    def _check_writable(self) -> None:
        self._check_usable()
        if not self.writable:
            raise ReadOnlyError("Cannot write in a read-only transaction")

    # -- Public API --

    def get(self, key: bytes) -> bytes:
        """Return the value for key.

        Raises:
            KeyNotFoundError: If the key does not exist.
        """
        check_key(key)
        self._check_usable()
        return self._get(key)

    def set(self, key: bytes, value: bytes) -> None:
        """Set bytes value for key."""
        check_key(key)
        if not isinstance(value, bytes):
            raise TypeError(f"Expected bytes, got {type(value).__name__}")
        self._check_writable()
        self._set(key, value)

    def delete(self, key: bytes) -> None:
        """Remove a key if present."""
        check_key(key)
        self._check_writable()
        self._delete(key)

    def keys(self, prefix: bytes = b"") -> Iterator[bytes]:
        """Iterate keys in ascending byte order, without loading values.

        Only keys starting with ``prefix`` are produced, and iteration
        stops at the first key sorting past the prefix range.
        """
        if not isinstance(prefix, bytes):
            raise TypeError(f"Expected bytes prefix, got {type(prefix).__name__}")
        self._check_usable()
        for key in self._keys(prefix):
            self._check_usable()
            yield key

    # -- Backend hooks --

    @abstractmethod
    def _get(self, key: bytes) -> bytes: ...

    @abstractmethod
    def _set(self, key: bytes, value: bytes) -> None: ...

    @abstractmethod
    def _delete(self, key: bytes) -> None: ...

    @abstractmethod
    def _keys(self, prefix: bytes) -> Iterator[bytes]: ...


class Database(ABC):
    """Handle to an ordered key-value store with transactional access.

    Every read goes through ``view`` and every write through ``update``,
    so each logical operation sees exactly one transaction. A database
    opened with ``read_only=True`` refuses read-write transactions.
    """

    def __init__(self, *, read_only: bool = False) -> None:
        self.read_only = read_only
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def transaction(self, writable: bool = False) -> Iterator[Transaction]:
        """Open a transaction scoped to the ``with`` block.

        A writable transaction commits when the block exits normally and
        discards every write when it raises. The transaction is released
        on every path.
        """
        if self._closed:
            raise DatabaseClosedError("Database is closed")
        if writable and self.read_only:
            raise ReadOnlyError("Database is open in read-only mode")
        mode = "read-write" if writable else "read-only"
        with self._begin(writable) as txn:
            try:
                yield txn
            except BaseException:
                logger.debug("Discarding %s transaction", mode)
                raise
            finally:
                txn.release()
        logger.debug("Finished %s transaction", mode)

    def view(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` inside a read-only transaction and return its result.

        ``fn`` must finish reading before it returns; a lazy iterator
        escaping the transaction is unusable.
        """
        with self.transaction(writable=False) as txn:
            return fn(txn)

    def update(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` inside a read-write transaction.

        Commits when ``fn`` returns, discards all writes if it raises.
        """
        with self.transaction(writable=True) as txn:
            return fn(txn)

    def close(self) -> None:
        """Release the underlying storage. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._close()
        logger.debug("Closed %s", type(self).__name__)

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @abstractmethod
    def _begin(self, writable: bool) -> AbstractContextManager[Transaction]:
        """Return a context manager yielding a fresh transaction.

        It must commit on normal exit and roll back when the body raises.
        """

    @abstractmethod
    def _close(self) -> None: ...
