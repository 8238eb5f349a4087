"""Context-aware tab completer for the interpreter.

The completer separates **what to complete** (pure logic, testable)
from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the line so far
and returns candidate strings:

- first word → built-in directives and executables found on ``PATH``;
- any later word, including the target of ``<`` or ``>`` → filesystem
  paths.
"""

from __future__ import annotations

import os
import readline
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jobsh.shell import Shell


class Completer:
    """Context-aware tab completer for the interpreter."""

    def __init__(self, shell: Shell, *, path: str | None = None) -> None:
        """Create a completer attached to a shell instance.

        Args:
            shell: The shell whose built-in names are offered.
            path: Search path for programs (``$PATH`` at call time if
                omitted).

        """
        self._shell = shell
        self._path = path

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return self._complete_commands(text)

        return self._complete_paths(text)

    # -- private completers ------------------------------------------------

    def _complete_commands(self, text: str) -> list[str]:
        """Complete built-ins and programs on the search path."""
        if "/" in text:
            return self._complete_paths(text)
        names = {name for name in self._shell.command_names if name.startswith(text)}
        names.update(self._executables(text))
        return sorted(names)

    def _executables(self, prefix: str) -> set[str]:
        """Return executable names on the search path starting with *prefix*."""
        search_path = self._path if self._path is not None else os.environ.get("PATH", "")
        found: set[str] = set()
        for directory in search_path.split(os.pathsep):
            if not directory:
                continue
            try:
                entries = list(os.scandir(directory))
            except OSError:
                continue
            for entry in entries:
                if (
                    entry.name.startswith(prefix)
                    and entry.is_file()
                    and os.access(entry.path, os.X_OK)
                ):
                    found.add(entry.name)
        return found

    @staticmethod
    def _complete_paths(text: str) -> list[str]:
        """Complete filesystem paths relative to the working directory.

        Split the partial path into a directory and a name prefix, list
        the directory, and filter by prefix.  Directories get a trailing
        ``/`` suffix.
        """
        last_slash = text.rfind("/")
        directory = text[: last_slash + 1]
        prefix = text[last_slash + 1 :]

        try:
            entries = list(os.scandir(directory or "."))
        except OSError:
            return []

        candidates: list[str] = []
        for entry in entries:
            if not entry.name.startswith(prefix):
                continue
            # Hidden files only when asked for explicitly
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            full = directory + entry.name
            if entry.is_dir():
                full += "/"
            candidates.append(full)
        return sorted(candidates)
