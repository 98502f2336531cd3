"""kvsh error types."""


class KvshError(Exception):
    """Base class for all kvsh errors."""


class OpenError(KvshError):
    """Raised when a database cannot be opened.

    This is the only fatal error: the shell has nothing to operate on
    without its database.
    """


class PatternError(KvshError):
    """Raised when a glob pattern is malformed.

    Attributes:
        pattern: The pattern that failed to compile.
        position: Index into ``pattern`` where the problem was found.
    """

    def __init__(self, pattern: str, position: int, reason: str) -> None:
        self.pattern = pattern
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at position {position} in {pattern!r}")


class EngineError(KvshError):
    """Recoverable failure reported by the storage engine."""


class KeyNotFoundError(EngineError, KeyError):
    """Raised by ``Transaction.get`` when the key does not exist."""

    def __init__(self, key: bytes) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return "Key not found"


class ReadOnlyError(EngineError):
    """Raised when a write is attempted through a read-only handle."""


class DatabaseClosedError(EngineError):
    """Raised when the database handle has already been closed."""


class TransactionClosedError(EngineError):
    """Raised when a transaction is used after it was released."""


class StorageError(EngineError):
    """Wraps an I/O or backend failure. The underlying exception is chained."""
