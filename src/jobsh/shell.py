"""The shell — command dispatcher for the interpreter.

The shell takes one raw line at a time and decides what to do with it:

1. **Reap** — sweep the job table for background children that have
   finished.  This always happens first, so ``myjobs`` and any new
   spawn see an up-to-date table.
2. **Built-ins** — ``exit`` ends the session; ``myjobs`` lists the
   job table.  Both must match the whole line exactly.
3. **External programs** — everything else.  A trailing ``&`` marks a
   background command.  The line is tokenized, its redirections are
   extracted, and a child is forked to run it.  A foreground child is
   waited for; a background child goes into the job table.

Design choices:
    - **Returns strings, not prints.**  Normal output is returned to the
      caller (the REPL or the web API) to display.  Errors and warnings
      go to the ``err`` stream given at construction, and every event is
      also recorded in the shell's ``Logger``.
    - **No failure ends the session.**  A bad redirection, an unknown
      program, a failed fork — each is reported and the shell goes back
      to waiting for the next line.  Only ``exit`` stops it, and even
      then background jobs are left running.
"""

import sys
from typing import TextIO

from jobsh.config import ShellConfig
from jobsh.jobs import JobTable, ReapResult, reap
from jobsh.launcher import SpawnError, spawn
from jobsh.logging import Logger, LogLevel
from jobsh.redirection import parse_command

JOBS_HEADER = "Background processes:"


class Shell:
    """Command dispatcher that owns the job table for one session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(
        self,
        *,
        config: ShellConfig | None = None,
        err: TextIO | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a shell with an empty job table.

        Args:
            config: Interpreter settings (defaults if omitted).
            err: Stream for error and warning messages (``sys.stderr``
                at call time if omitted).
            logger: Event log (a fresh one if omitted).

        """
        self._config = config or ShellConfig()
        self._err = err
        self._logger = logger or Logger()
        self._jobs = JobTable()

    @property
    def config(self) -> ShellConfig:
        """Return the session settings."""
        return self._config

    @property
    def jobs(self) -> JobTable:
        """Return the job table."""
        return self._jobs

    @property
    def logger(self) -> Logger:
        """Return the event log."""
        return self._logger

    @property
    def command_names(self) -> list[str]:
        """Return the names of the built-in directives."""
        return [self._config.exit_command, self._config.jobs_command]

    def execute(self, line: str) -> str:
        """Interpret one line of input.

        Args:
            line: The raw line (without its trailing newline).

        Returns:
            Text for the normal output channel (possibly empty), or
            ``EXIT_SENTINEL`` when the session should end.

        """
        self.reap_jobs()

        if line == self._config.exit_command:
            self._logger.log(LogLevel.INFO, "exit requested", source="shell")
            return self.EXIT_SENTINEL
        if line == self._config.jobs_command:
            return self.format_jobs()

        command = line.strip()
        background = command.endswith(self._config.background_marker)
        if background:
            command = command[: -len(self._config.background_marker)].rstrip()
        return self._run_external(command, background=background)

    def reap_jobs(self) -> ReapResult:
        """Sweep the job table, reporting any failed status checks."""
        result = reap(self._jobs)
        for finished in result.finished:
            self._logger.log(
                LogLevel.INFO,
                f"reaped '{finished.job.command}' (exit status {finished.exit_code})",
                source="reaper",
                pid=finished.job.pid,
            )
        for error in result.errors:
            self._error(str(error), source="reaper", pid=error.pid)
        return result

    def format_jobs(self) -> str:
        """Render the job table as a header plus one line per job."""
        lines = [JOBS_HEADER]
        lines.extend(str(job) for job in self._jobs)
        return "\n".join(lines)

    # -- external commands -------------------------------------------------

    def _run_external(self, command: str, *, background: bool) -> str:
        """Spawn *command*, then wait for it or register it as a job."""
        parsed, problems = parse_command(command, self._config.delimiter)
        for problem in problems:
            self._error(str(problem), source="shell")

        try:
            handle = spawn(parsed, command=command)
        except SpawnError as e:
            self._error(str(e), source="launcher")
            return ""

        if background:
            if self._jobs.get_by_pid(handle.pid) is not None:
                # The old entry's process is gone and the OS has reused its PID.
                self._error(
                    f"PID {handle.pid} was still tracked; replacing the stale job entry",
                    source="shell",
                    pid=handle.pid,
                )
                self._jobs.remove(handle.pid)
            self._jobs.add(pid=handle.pid, command=command)
            self._logger.log(
                LogLevel.INFO,
                f"started '{command}' in the background",
                source="launcher",
                pid=handle.pid,
            )
            return f"Background process started: {command}"

        self._logger.log(LogLevel.DEBUG, f"started '{command}'", source="launcher", pid=handle.pid)
        try:
            exit_code = handle.wait()
        except OSError as e:
            message = f"Could not collect exit status of {command}: {e.strerror or e}"
            self._write_err(f"Warning: {message}")
            self._logger.log(LogLevel.WARNING, message, source="shell", pid=handle.pid)
            return ""
        if exit_code != 0:
            message = f"Command exited with non-zero status {exit_code}: {command}"
            self._write_err(message)
            self._logger.log(LogLevel.WARNING, message, source="shell", pid=handle.pid)
        return ""

    def _error(self, message: str, *, source: str, pid: int = 0) -> None:
        """Report an error on the error channel and in the log."""
        self._write_err(f"Error: {message}")
        self._logger.log(LogLevel.ERROR, message, source=source, pid=pid)

    def _write_err(self, message: str) -> None:
        stream = self._err if self._err is not None else sys.stderr
        print(message, file=stream)  # noqa: T201
        stream.flush()
