"""kvsh: interactive shell for an embedded ordered key-value store."""

from .completion import Completer
from .config import Settings, ShellConfig
from .console import LineReader, Session
from .errors import (
    DatabaseClosedError,
    EngineError,
    KeyNotFoundError,
    KvshError,
    OpenError,
    PatternError,
    ReadOnlyError,
    StorageError,
    TransactionClosedError,
)
from .glob import Matcher
from .interpreter import Command, Interpreter, State
from .kv.base import Database, Transaction
from .store import open_database

__all__ = [
    "Command",
    "Completer",
    "Database",
    "DatabaseClosedError",
    "EngineError",
    "Interpreter",
    "KeyNotFoundError",
    "KvshError",
    "LineReader",
    "Matcher",
    "OpenError",
    "PatternError",
    "ReadOnlyError",
    "Session",
    "Settings",
    "ShellConfig",
    "State",
    "StorageError",
    "Transaction",
    "TransactionClosedError",
    "open_database",
]
