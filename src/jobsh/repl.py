"""Interactive REPL (Read-Eval-Print Loop) for the interpreter.

The REPL is the terminal interface.  It reads settings from the
environment, creates a shell, and enters the classic loop:

    1. **Read** — display the prompt and read a line.
    2. **Eval** — pass the line to ``shell.execute()``.
    3. **Print** — display whatever the shell returned.
    4. **Loop** — repeat until the shell returns the exit sentinel.

This module keeps the I/O loop separate from the dispatch logic.  The
shell returns strings; the REPL is the thin wrapper that connects it to
``stdin``/``stdout``.  ``build_prompt`` and ``echo_to_stderr`` are pure
enough to test; ``run()`` is the entrypoint.
"""

import readline
import sys

from jobsh.completer import Completer
from jobsh.config import ConfigError, ShellConfig
from jobsh.env import Environment
from jobsh.logging import LogEntry, Logger
from jobsh.shell import Shell


def build_prompt(config: ShellConfig) -> str:
    """Return the prompt string for *config*."""
    return config.prompt


def echo_to_stderr(entry: LogEntry) -> None:
    """Log sink that prints an entry to stderr."""
    print(entry, file=sys.stderr)  # noqa: T201


def create_shell(config: ShellConfig) -> Shell:
    """Create a shell whose log echoes to stderr when configured to."""
    if config.log_echo_level is None:
        logger = Logger()
    else:
        logger = Logger(sink=echo_to_stderr, sink_level=config.log_echo_level)
    return Shell(config=config, logger=logger)


def run() -> None:
    """Run the interactive REPL.

    This is the ``jobsh`` console entrypoint.  It handles:
    - Configuration from ``JOBSH_*`` environment variables.
    - Tab completion via readline.
    - The read-eval-print loop.
    - Ctrl+D and Ctrl+C, which end the session like ``exit``.
    """
    try:
        config = ShellConfig.from_environment(Environment.from_os())
    except ConfigError as e:
        print(f"jobsh: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(2)

    shell = create_shell(config)

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(config.delimiter + "\t")
    readline.parse_and_bind("tab: complete")

    try:
        while True:
            try:
                line = input(build_prompt(config))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(line)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201
