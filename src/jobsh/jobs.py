"""Background jobs — the job table and its reaper.

When you run ``sleep 60 &`` the interpreter forks a child and, instead
of waiting for it, records the child in a **job table** and goes back
to the prompt.  Somebody still has to collect the child's exit status
when it finishes, otherwise it lingers as a zombie.  That somebody is
the **reaper**, which sweeps the table once per input line.

Key ideas:
    - **A flat list** — entries are kept in start order and identified
      only by PID; there are no job numbers and no fg/bg toggling.
    - **Entries are immutable** — a ``BackgroundProcess`` is created on
      spawn and discarded on reap, never edited in between.
    - **The reaper never blocks** — every status check uses
      ``WNOHANG``, so a long-running job can't freeze the prompt.
    - **Errors keep the entry** — if the status check itself fails, the
      entry stays and is retried on the next sweep rather than silently
      forgotten.

Design choices:
    - ``JobTable`` is owned by the shell, not a module global.
    - ``reap()`` takes the ``waitpid`` function as a parameter so the
      sweep logic can be exercised without real children.
"""

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TypeAlias

WaitPid: TypeAlias = Callable[[int, int], tuple[int, int]]


class ReapError(Exception):
    """Raise when the status of a tracked process cannot be checked."""

    def __init__(self, pid: int, reason: str) -> None:
        """Create the error for *pid*."""
        super().__init__(f"Failed to check background process status: PID {pid} ({reason})")
        self.pid = pid


@dataclass(frozen=True)
class BackgroundProcess:
    """A child running detached from the prompt.

    Attributes:
        pid: The OS process id assigned at spawn time.
        command: The command text as typed, minus the ``&`` marker.

    """

    pid: int
    command: str

    def __str__(self) -> str:
        """Format as ``PID: <n>, Command: <text>``."""
        return f"PID: {self.pid}, Command: {self.command}"


class JobTable:
    """Ordered collection of live background processes."""

    def __init__(self) -> None:
        """Create an empty job table."""
        self._jobs: list[BackgroundProcess] = []

    def add(self, *, pid: int, command: str) -> BackgroundProcess:
        """Track a newly started background process.

        Raises:
            ValueError: If *pid* is already tracked.

        """
        if self.get_by_pid(pid) is not None:
            msg = f"PID {pid} is already in the job table"
            raise ValueError(msg)
        job = BackgroundProcess(pid=pid, command=command)
        self._jobs.append(job)
        return job

    def get_by_pid(self, pid: int) -> BackgroundProcess | None:
        """Return the job with *pid*, or None."""
        return next((j for j in self._jobs if j.pid == pid), None)

    def remove(self, pid: int) -> None:
        """Stop tracking *pid* (no-op if it isn't tracked)."""
        self._jobs = [j for j in self._jobs if j.pid != pid]

    def list_jobs(self) -> list[BackgroundProcess]:
        """Return all tracked jobs in start order."""
        return list(self._jobs)

    def __iter__(self) -> Iterator[BackgroundProcess]:
        """Iterate over a snapshot of the tracked jobs."""
        return iter(self.list_jobs())

    def __len__(self) -> int:
        """Return the number of tracked jobs."""
        return len(self._jobs)


@dataclass(frozen=True)
class FinishedJob:
    """A job the reaper collected, with its exit status."""

    job: BackgroundProcess
    exit_code: int


@dataclass
class ReapResult:
    """Outcome of one sweep over the job table."""

    finished: list[FinishedJob] = field(default_factory=list)
    errors: list[ReapError] = field(default_factory=list)


def reap(jobs: JobTable, *, waitpid: WaitPid = os.waitpid) -> ReapResult:
    """Remove every job whose process has exited, without blocking.

    Args:
        jobs: The table to sweep.  Finished entries are removed in place.
        waitpid: Status check, called as ``waitpid(pid, os.WNOHANG)``.

    Returns:
        Which jobs finished and which status checks failed.

    """
    result = ReapResult()
    for job in jobs:
        try:
            pid, status = waitpid(job.pid, os.WNOHANG)
        except OSError as e:
            result.errors.append(ReapError(job.pid, e.strerror or str(e)))
            continue
        if pid == 0:
            continue  # still running
        jobs.remove(job.pid)
        result.finished.append(FinishedJob(job=job, exit_code=os.waitstatus_to_exitcode(status)))
    return result
