"""Command interpreter: parse, validate, gate and dispatch one line at a time."""

import logging
import sys
from enum import Enum
from typing import Callable, TextIO

from . import glob
from .config import ShellConfig
from .errors import EngineError, PatternError
from .keyspace import key_text, scan, to_bytes
from .kv.base import Database, Transaction

logger = logging.getLogger(__name__)

READ_ONLY_MESSAGE = "Error: operation not permitted in read-only mode"
NO_MATCHES_MESSAGE = "No matching keys found"


class Command(Enum):
    GET = "get"
    SET = "set"
    DELETE = "delete"
    LIST = "list"
    EXIT = "exit"

    @property
    def mutating(self) -> bool:
        return self in (Command.SET, Command.DELETE)

    @property
    def takes_key(self) -> bool:
        """Whether the command's arguments start with a key."""
        return self in (Command.GET, Command.SET, Command.DELETE)


# (min args, max args, usage)
_SIGNATURES: dict[Command, tuple[int, int, str]] = {
    Command.GET: (1, 1, "Usage: get <key>"),
    Command.SET: (2, 2, "Usage: set <key> <value>"),
    Command.DELETE: (1, 1, "Usage: delete <key>"),
    Command.LIST: (0, 1, "Usage: list [pattern]"),
    Command.EXIT: (0, 0, "Usage: exit"),
}


def available_commands(read_only: bool) -> list[Command]:
    """Commands offered in the given mode, in display order."""
    return [c for c in Command if not (read_only and c.mutating)]


def parse(line: str) -> tuple[str, list[str]] | None:
    """Split a line into command name and arguments. None for a blank line."""
    parts = line.split()
    if not parts:
        return None
    return parts[0], parts[1:]


class State(Enum):
    INTERACTIVE = "interactive"
    TERMINATED = "terminated"


class Interpreter:
    """Executes shell commands against a database.

    One instance serves every mode: ``config.read_only`` decides whether
    mutating commands are dispatched at all. Results and errors are
    written to ``out`` one line each; no command error escapes
    ``execute``.
    """

    def __init__(
        self,
        db: Database,
        config: ShellConfig = ShellConfig(),
        out: TextIO | None = None,
    ) -> None:
        self.db = db
        self.config = config
        self.out = out if out is not None else sys.stdout
        self.state = State.INTERACTIVE
        self._handlers: dict[Command, Callable[..., None]] = {
            Command.GET: self._get,
            Command.SET: self._set,
            Command.DELETE: self._delete,
            Command.LIST: self._list,
            Command.EXIT: self._exit,
        }

    @property
    def running(self) -> bool:
        return self.state is State.INTERACTIVE

    def execute(self, line: str) -> bool:
        """Run one input line. Returns whether the session continues."""
        if not self.running:
            return False
        parsed = parse(line)
        if parsed is None:
            return True
        name, args = parsed

        try:
            command = Command(name)
        except ValueError:
            self._print(self.unknown_command_message())
            return True

        # Checked before arity: a read-only session rejects every mutation.
        if self.config.read_only and command.mutating:
            self._print(READ_ONLY_MESSAGE)
            return True

        min_args, max_args, usage = _SIGNATURES[command]
        if not min_args <= len(args) <= max_args:
            self._print(usage)
            return True

        logger.debug("Executing %s with %d argument(s)", command.value, len(args))
        self._handlers[command](*args)
        return self.running

    def unknown_command_message(self) -> str:
        names = ", ".join(c.value for c in available_commands(self.config.read_only))
        return f"Unknown command. Available commands: {names}"

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    # -- Handlers --

    def _get(self, key: str) -> None:
        try:
            value = self.db.view(lambda txn: txn.get(to_bytes(key)))
        except EngineError as e:
            self._print(f"Error getting value: {e}")
            return
        self._print(key_text(value))

    def _set(self, key: str, value: str) -> None:
        try:
            self.db.update(lambda txn: txn.set(to_bytes(key), to_bytes(value)))
        except EngineError as e:
            self._print(f"Error setting value: {e}")
            return
        self._print("Value set successfully")

    def _delete(self, key: str) -> None:
        try:
            self.db.update(lambda txn: txn.delete(to_bytes(key)))
        except EngineError as e:
            self._print(f"Error deleting value: {e}")
            return
        self._print("Value deleted successfully")

    def _list(self, pattern: str = glob.DEFAULT_PATTERN) -> None:
        try:
            matcher = glob.compile(pattern)
        except PatternError as e:
            self._print(f"Invalid pattern: {e}")
            return

        def print_matches(txn: Transaction) -> int:
            count = 0
            for key in scan(txn, matcher.matches):
                self._print(key_text(key))
                count += 1
            return count

        try:
            count = self.db.view(print_matches)
        except EngineError as e:
            self._print(f"Error listing keys: {e}")
            return
        if not count:
            self._print(NO_MATCHES_MESSAGE)

    def _exit(self) -> None:
        self.state = State.TERMINATED
