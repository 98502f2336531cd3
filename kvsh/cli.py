"""Command-line entry point."""

import argparse
import io
import logging
import sys

from .completion import Completer
from .config import Settings
from .console import LineReader, Session
from .errors import OpenError
from .store import open_database

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kvsh",
        description="Interactive shell for an embedded key-value database.",
    )
    parser.add_argument("path", help="database directory")
    parser.add_argument(
        "-r",
        "--read-only",
        action="store_true",
        help="disable set and delete",
    )
    parser.add_argument(
        "--storage",
        choices=["disk", "memory"],
        default="disk",
        help="storage backend (default: disk)",
    )
    parser.add_argument(
        "--no-complete",
        action="store_true",
        help="disable tab completion of keys",
    )
    parser.add_argument(
        "--history",
        default=None,
        metavar="FILE",
        help="readline history file (default: $KVSH_HISTORY or ~/.kvsh_history; empty disables)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="logging level (default: $KVSH_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_args(args)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        db = open_database(
            settings.path,
            storage=settings.storage,
            read_only=settings.read_only,
        )
    except OpenError as e:
        print(f"Error opening database: {e}", file=sys.stderr)
        return 1

    # Undecodable input bytes survive as surrogates and reach the store unchanged.
    if isinstance(sys.stdin, io.TextIOWrapper):
        sys.stdin.reconfigure(errors="surrogateescape")

    config = settings.shell_config()
    with db:
        completer = Completer(db, config) if config.completion else None
        with LineReader(completer, settings.history_file) as reader:
            Session(db, config, reader).run()
    logger.debug("Session ended")
    return 0


if __name__ == "__main__":
    sys.exit(main())
