"""Session and process configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HISTORY_FILE = "~/.kvsh_history"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ShellConfig:
    """Immutable per-session settings shared by the interpreter and completer.

    Attributes:
        read_only: When true, ``set`` and ``delete`` are never dispatched.
        completion: Whether key completion is offered to the line reader.
    """

    read_only: bool = False
    completion: bool = True


@dataclass(frozen=True)
class Settings:
    """Everything the entry point needs to start a session."""

    path: str
    storage: str = "disk"
    read_only: bool = False
    completion: bool = True
    history_file: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_args(cls, args: Any, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from parsed CLI args layered over the environment.

        Environment variables:
            KVSH_READ_ONLY: truthy value forces read-only mode.
            KVSH_HISTORY: history file path; empty disables history.
            KVSH_LOG_LEVEL: logging level name.
        """
        env = os.environ if environ is None else environ

        read_only = bool(args.read_only) or env.get("KVSH_READ_ONLY", "").strip().lower() in _TRUTHY

        history = args.history
        if history is None:
            history = env.get("KVSH_HISTORY", DEFAULT_HISTORY_FILE)
        history_file = os.path.expanduser(history) if history else None

        log_level = (args.log_level or env.get("KVSH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

        return cls(
            path=args.path,
            storage=args.storage,
            read_only=read_only,
            completion=not args.no_complete,
            history_file=history_file,
            log_level=log_level,
        )

    def shell_config(self) -> ShellConfig:
        return ShellConfig(read_only=self.read_only, completion=self.completion)
