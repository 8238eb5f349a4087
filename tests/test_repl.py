"""Tests for the REPL (Read-Eval-Print Loop).

The loop itself is driven by patching ``input`` with a scripted list
of lines, so the real read/print wiring is exercised without a
terminal.
"""

from unittest.mock import patch

import pytest

from jobsh.config import ENV_LOG_LEVEL, ENV_PROMPT, ShellConfig
from jobsh.logging import LogLevel
from jobsh.repl import build_prompt, create_shell, run
from jobsh.shell import JOBS_HEADER


class TestREPLHelpers:
    """Verify REPL helper functions."""

    def test_default_prompt(self) -> None:
        """The default prompt is ``Shell> ``."""
        assert build_prompt(ShellConfig()) == "Shell> "

    def test_custom_prompt(self) -> None:
        """The prompt follows the config."""
        assert build_prompt(ShellConfig(prompt="% ")) == "% "

    def test_create_shell_without_echo(self, capsys: pytest.CaptureFixture[str]) -> None:
        """With no echo level, log entries stay out of stderr."""
        shell = create_shell(ShellConfig())
        shell.logger.log(LogLevel.ERROR, "boom", source="shell")
        assert "boom" not in capsys.readouterr().err

    def test_create_shell_with_echo(self, capsys: pytest.CaptureFixture[str]) -> None:
        """With an echo level, matching entries are printed to stderr."""
        shell = create_shell(ShellConfig(log_echo_level=LogLevel.INFO))
        shell.logger.log(LogLevel.INFO, "hello", source="shell")
        assert "[INFO] shell: hello" in capsys.readouterr().err


class TestRun:
    """Verify the loop with scripted input."""

    def test_exit_ends_loop(self, capsys: pytest.CaptureFixture[str]) -> None:
        """``exit`` stops reading further lines."""
        with patch("builtins.input", side_effect=["myjobs", "exit", "myjobs"]) as mock_input:
            run()
        assert mock_input.call_count == 2
        assert capsys.readouterr().out.count(JOBS_HEADER) == 1

    def test_prompt_is_passed_to_input(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Each read uses the configured prompt."""
        monkeypatch.setenv(ENV_PROMPT, "jobsh$ ")
        with patch("builtins.input", side_effect=["exit"]) as mock_input:
            run()
        mock_input.assert_called_once_with("jobsh$ ")

    def test_eof_ends_loop(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+D ends the session cleanly."""
        with patch("builtins.input", side_effect=EOFError):
            run()
        assert capsys.readouterr().out == "\n"

    def test_interrupt_ends_loop(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+C ends the session with a message."""
        with patch("builtins.input", side_effect=KeyboardInterrupt):
            run()
        assert "Interrupted." in capsys.readouterr().out

    def test_bad_config_exits(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An invalid setting aborts before the loop starts."""
        monkeypatch.setenv(ENV_LOG_LEVEL, "shouting")
        with pytest.raises(SystemExit) as info:
            run()
        assert info.value.code == 2
        assert ENV_LOG_LEVEL in capsys.readouterr().err
