"""Tests for settings resolution."""

import os

import pytest

from kvsh.cli import build_parser
from kvsh.config import DEFAULT_LOG_LEVEL, Settings, ShellConfig


def settings(*argv, **environ):
    args = build_parser().parse_args(list(argv))
    return Settings.from_args(args, environ)


class TestSettings:
    def test_defaults(self):
        s = settings("data")
        assert s.path == "data"
        assert s.storage == "disk"
        assert not s.read_only
        assert s.completion
        assert s.history_file == os.path.expanduser("~/.kvsh_history")
        assert s.log_level == DEFAULT_LOG_LEVEL

    def test_flags(self):
        s = settings(
            "data", "-r", "--storage", "memory", "--no-complete",
            "--history", "/tmp/h", "--log-level", "debug",
        )
        assert s.read_only
        assert s.storage == "memory"
        assert not s.completion
        assert s.history_file == "/tmp/h"
        assert s.log_level == "DEBUG"

    @pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("TRUE", True), ("0", False), ("", False)])
    def test_read_only_from_environment(self, value, expected):
        assert settings("data", KVSH_READ_ONLY=value).read_only is expected

    def test_environment(self):
        s = settings("data", KVSH_HISTORY="/tmp/env_history", KVSH_LOG_LEVEL="info")
        assert s.history_file == "/tmp/env_history"
        assert s.log_level == "INFO"

    def test_flags_override_environment(self):
        s = settings("data", "--history", "/tmp/flag", "--log-level", "error",
                     KVSH_HISTORY="/tmp/env", KVSH_LOG_LEVEL="info")
        assert s.history_file == "/tmp/flag"
        assert s.log_level == "ERROR"

    def test_empty_history_disables(self):
        assert settings("data", "--history", "").history_file is None
        assert settings("data", KVSH_HISTORY="").history_file is None

    def test_shell_config(self):
        assert settings("data", "-r", "--no-complete").shell_config() == ShellConfig(
            read_only=True, completion=False
        )

    def test_shell_config_is_frozen(self):
        config = ShellConfig()
        with pytest.raises(AttributeError):
            config.read_only = True  # type: ignore[misc]
