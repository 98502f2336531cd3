"""Prefix completion of keys for the line reader."""

import logging

from .config import ShellConfig
from .errors import EngineError
from .interpreter import Command, available_commands, parse
from .keyspace import from_bytes, scan_prefix, to_bytes
from .kv.base import Database

logger = logging.getLogger(__name__)


class Completer:
    """Turns the current input line into ordered completion candidates.

    Safe to call on every keystroke: a failed database read yields no
    candidates instead of an error.
    """

    def __init__(self, db: Database, config: ShellConfig = ShellConfig()) -> None:
        self.db = db
        self.config = config

    def __call__(self, line: str) -> list[str]:
        return self.complete(line)

    def complete(self, line: str) -> list[str]:
        # No separator yet: the command name itself is being typed.
        head = line.lstrip()
        if " " not in head:
            return [
                c.value
                for c in available_commands(self.config.read_only)
                if c.value.startswith(head)
            ]

        parsed = parse(line)
        if parsed is None or not self._offers_keys(parsed[0]):
            return []

        fragment = line[line.rfind(" ") + 1 :]
        prefix = to_bytes(fragment)
        try:
            return self.db.view(lambda txn: [from_bytes(k) for k in scan_prefix(txn, prefix)])
        except EngineError as e:
            logger.debug("Completion for %r failed: %s", line, e)
            return []

    def _offers_keys(self, name: str) -> bool:
        try:
            command = Command(name)
        except ValueError:
            return False
        if not command.takes_key:
            return False
        return not (self.config.read_only and command.mutating)
