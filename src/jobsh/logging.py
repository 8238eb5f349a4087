"""Shell event log.

The logger records structured entries for what the interpreter did:
which children it spawned, which ones it reaped, and which commands
failed along the way.  It is the shell's counterpart of ``dmesg`` —
an in-memory buffer that can be queried after the fact.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, pid).
- **Logger** — a bounded append-only log with filtering and an
  optional sink that sees entries as they arrive.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records are immutable.
    - **Bounded buffer** — an interactive session can run for days, so
      only the newest ``capacity`` entries are kept.
"""

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias

DEFAULT_CAPACITY = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries.

    Using IntEnum means levels compare with ``<`` / ``>`` naturally,
    which makes minimum-level filtering trivial.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        """Return the level called *name* (case-insensitive).

        Raises:
            ValueError: If *name* is not a level name.

        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(level.name.lower() for level in cls)
            msg = f"unknown log level '{name}' (expected one of: {valid})"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "reaper").
        pid: The child process the event concerns (0 = none).

    """

    level: LogLevel
    message: str
    source: str
    pid: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


LogSink: TypeAlias = Callable[[LogEntry], None]


class Logger:
    """Bounded append-only log buffer with filtering.

    When a *sink* is given, every entry at or above *sink_level* is
    also handed to it as soon as it is logged.  The REPL uses this to
    echo entries to stderr.
    """

    def __init__(
        self,
        *,
        capacity: int = DEFAULT_CAPACITY,
        sink: LogSink | None = None,
        sink_level: LogLevel = LogLevel.WARNING,
    ) -> None:
        """Create an empty logger."""
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._sink = sink
        self._sink_level = sink_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return all retained log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        pid: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            pid: Child process associated with the event.

        """
        entry = LogEntry(level=level, message=message, source=source, pid=pid)
        self._entries.append(entry)
        if self._sink is not None and level >= self._sink_level:
            self._sink(entry)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result
