"""Read-only, keys-only iteration over a transaction's key space."""

from collections.abc import Iterator
from typing import Callable

from .kv.base import Transaction

KeyPredicate = Callable[[bytes], bool]


def scan(txn: Transaction, predicate: KeyPredicate | None = None) -> Iterator[bytes]:
    """Yield every key in ascending byte order, optionally filtered.

    Values are never loaded. The iterator is bound to ``txn`` and must
    be consumed before the transaction is released.
    """
    for key in txn.keys():
        if predicate is None or predicate(key):
            yield key


def scan_prefix(txn: Transaction, prefix: bytes) -> Iterator[bytes]:
    """Yield keys starting with ``prefix``, stopping once past them."""
    return txn.keys(prefix)


def key_text(key: bytes) -> str:
    """Render a key (or value) for display."""
    return key.decode("utf-8", "backslashreplace")


def to_bytes(text: str) -> bytes:
    """Encode a command argument, keeping undecodable input bytes intact."""
    return text.encode("utf-8", "surrogateescape")


def from_bytes(key: bytes) -> str:
    """Decode a key as a command argument; the inverse of ``to_bytes``."""
    return key.decode("utf-8", "surrogateescape")
