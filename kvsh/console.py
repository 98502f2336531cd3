"""Line input and the interactive read-eval-print loop."""

import logging
import sys
from typing import Callable, TextIO

try:
    import readline
except ImportError:  # pragma: no cover - no line editing on this platform
    readline = None  # type: ignore[assignment]

from .config import ShellConfig
from .interpreter import Interpreter
from .kv.base import Database

logger = logging.getLogger(__name__)

PROMPT = "> "
READ_ONLY_PROMPT = "(read-only) > "

CompleteFn = Callable[[str], list[str]]


def prompt_for(config: ShellConfig) -> str:
    return READ_ONLY_PROMPT if config.read_only else PROMPT


class LineReader:
    """Reads input lines through readline, with optional completion and history.

    ``completer`` receives the line up to the cursor and returns full
    replacement candidates for the text after the last space. Use as a
    context manager so readline state is restored and history saved.
    """

    def __init__(
        self,
        completer: CompleteFn | None = None,
        history_file: str | None = None,
        input_fn: Callable[[str], str] | None = None,
    ) -> None:
        self.completer = completer
        self.history_file = history_file
        self._input = input_fn or input
        self._matches: list[str] = []
        self._saved: tuple | None = None

    def __enter__(self) -> "LineReader":
        self.install()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.uninstall()

    def install(self) -> None:
        if readline is None:
            return
        self._saved = (readline.get_completer(), readline.get_completer_delims())
        if self.completer is not None:
            readline.set_completer(self._complete)
            readline.set_completer_delims(" ")
            readline.parse_and_bind("tab: complete")
        if self.history_file:
            try:
                readline.read_history_file(self.history_file)
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.warning("Could not read history from %s: %s", self.history_file, e)

    def uninstall(self) -> None:
        if readline is None or self._saved is None:
            return
        if self.history_file:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.warning("Could not write history to %s: %s", self.history_file, e)
        completer, delims = self._saved
        readline.set_completer(completer)
        readline.set_completer_delims(delims)
        self._saved = None

    def read_line(self, prompt: str) -> str:
        """Read one line. Raises ``EOFError`` at end of input."""
        return self._input(prompt)

    def _complete(self, text: str, state: int) -> str | None:
        if state == 0:
            line = readline.get_line_buffer()[: readline.get_endidx()]
            self._matches = self.completer(line) if self.completer else []
        if state < len(self._matches):
            return self._matches[state]
        return None


class Session:
    """Runs the interpreter over lines from a ``LineReader`` until exit or EOF."""

    def __init__(
        self,
        db: Database,
        config: ShellConfig = ShellConfig(),
        reader: LineReader | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.interpreter = Interpreter(db, config, self.out)
        self.reader = reader if reader is not None else LineReader()
        self.prompt = prompt_for(config)

    def run(self) -> None:
        while self.interpreter.running:
            try:
                line = self.reader.read_line(self.prompt)
            except EOFError:
                logger.debug("End of input")
                break
            except KeyboardInterrupt:
                print("^C", file=self.out)
                continue
            except UnicodeDecodeError as e:
                print(f"Error reading input: {e}", file=self.out)
                continue
            try:
                self.interpreter.execute(line)
            except Exception as e:
                logger.exception("Unexpected error running %r", line)
                print(f"Error: {e}", file=self.out)
