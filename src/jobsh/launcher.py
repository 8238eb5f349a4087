"""Process launcher — fork, wire up the standard streams, exec.

Starting a program on Unix is a two-step dance:

1. ``fork()`` clones the interpreter.  Both copies continue from the
   same point; the child sees a return value of 0, the parent sees the
   child's PID.
2. The child rewires its standard streams (``dup2`` a freshly opened
   file onto fd 0 or fd 1) and then calls ``exec`` to replace its own
   image with the target program.

``spawn()`` hides the fork behind a tagged result.  In the parent it
returns a ``ParentHandle``; in the child it never returns at all — the
child either becomes the target program or exits with a failure
status.  Nothing the child does can leak back into the interpreter.

Child exit statuses:
    - ``EXIT_REDIRECTION_FAILURE`` (1) — a redirection file could not
      be opened.
    - ``EXIT_CANNOT_EXECUTE`` (126) — the program exists but could not
      be executed.
    - ``EXIT_NOT_FOUND`` (127) — no such program, or no program named.
"""

import contextlib
import os
import sys
from dataclasses import dataclass
from typing import NoReturn

from jobsh.redirection import ParsedCommand

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

# rw-r--r--
OUTPUT_FILE_MODE = 0o644

EXIT_REDIRECTION_FAILURE = 1
EXIT_CANNOT_EXECUTE = 126
EXIT_NOT_FOUND = 127


class SpawnError(Exception):
    """Raise when the OS refuses to create a new process."""


class RedirectionTargetError(Exception):
    """Raise when a redirection file cannot be opened."""


class ExecutionError(Exception):
    """Raise when the target program cannot replace the child's image."""

    def __init__(self, message: str, *, exit_status: int = EXIT_NOT_FOUND) -> None:
        """Create the error with the status the child should exit with."""
        super().__init__(message)
        self.exit_status = exit_status


@dataclass(frozen=True)
class ParentHandle:
    """The supervisor's side of a successful spawn."""

    pid: int
    command: str

    def wait(self) -> int:
        """Block until this exact child exits and return its exit status.

        A child killed by a signal reports the negated signal number.
        """
        _pid, status = os.waitpid(self.pid, 0)
        return os.waitstatus_to_exitcode(status)


def redirect_stream(
    path: str, target_fd: int, flags: int, *, label: str, mode: int = 0o777
) -> None:
    """Open *path* and install it as *target_fd*.

    *mode* only matters when *flags* include ``O_CREAT``.

    Raises:
        RedirectionTargetError: If the file cannot be opened.

    """
    try:
        fd = os.open(path, flags, mode)
    except OSError as e:
        msg = f"Failed to open {label} file: {path}"
        raise RedirectionTargetError(msg) from e
    if fd != target_fd:
        os.dup2(fd, target_fd)
        os.close(fd)


def apply_redirections(parsed: ParsedCommand) -> None:
    """Point stdin/stdout of the current process at the parsed targets."""
    if parsed.input_path:
        redirect_stream(parsed.input_path, STDIN_FILENO, os.O_RDONLY, label="input")
    if parsed.output_path:
        redirect_stream(
            parsed.output_path,
            STDOUT_FILENO,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            label="output",
            mode=OUTPUT_FILE_MODE,
        )


def exec_program(arguments: list[str], *, command: str) -> NoReturn:
    """Replace the current process image with ``arguments[0]``.

    The program is looked up on ``PATH`` and inherits the environment.

    Raises:
        ExecutionError: If there is no program to run or exec fails.

    """
    msg = f"Failed to execute command: {command}"
    if not arguments or not arguments[0]:
        raise ExecutionError(msg, exit_status=EXIT_NOT_FOUND)
    try:
        os.execvp(arguments[0], arguments)
    except FileNotFoundError as e:
        raise ExecutionError(msg, exit_status=EXIT_NOT_FOUND) from e
    except (OSError, ValueError) as e:
        raise ExecutionError(msg, exit_status=EXIT_CANNOT_EXECUTE) from e


def _report(message: str) -> None:
    """Write *message* straight to fd 2, bypassing Python's buffers."""
    with contextlib.suppress(OSError):
        os.write(STDERR_FILENO, f"{message}\n".encode(errors="replace"))


def run_child(parsed: ParsedCommand, *, command: str) -> NoReturn:
    """Body of the forked child: redirect, exec, or die trying."""
    status = EXIT_NOT_FOUND
    try:
        apply_redirections(parsed)
        exec_program(parsed.arguments, command=command)
    except RedirectionTargetError as e:
        _report(str(e))
        status = EXIT_REDIRECTION_FAILURE
    except ExecutionError as e:
        _report(str(e))
        status = e.exit_status
    except Exception as e:  # noqa: BLE001
        _report(f"{command}: {e}")
    finally:
        # Never unwind back into the interpreter from the child.
        os._exit(status)


def spawn(parsed: ParsedCommand, *, command: str) -> ParentHandle:
    """Fork a child that runs *parsed*.

    Args:
        parsed: The argument vector and redirection targets.
        command: The original command text, used in error reports.

    Returns:
        A handle on the child (only ever returned in the parent).

    Raises:
        SpawnError: If the process could not be created.

    """
    # Buffered text would otherwise be written twice, once by each copy.
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        pid = os.fork()
    except OSError as e:
        msg = f"Failed to create child process: {e}"
        raise SpawnError(msg) from e
    if pid == 0:
        run_child(parsed, command=command)
    return ParentHandle(pid=pid, command=command)
