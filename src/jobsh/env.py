"""Environment variables — the interpreter's view of its own environment.

Every Unix process carries a set of ``KEY=VALUE`` string pairs inherited
from its parent.  The interpreter reads its settings from there (see
``jobsh.config``) and its children inherit the real environment
unchanged when their image is replaced.

``Environment`` is a read-only snapshot of those pairs, so configuration
code can be handed a fixed set of variables in tests instead of poking
at ``os.environ``.
"""

import os
from collections.abc import Mapping


class Environment:
    """A read-only snapshot of environment variables.

    Each instance holds its own copy, so later changes to the source
    mapping or the real process environment do not show through.
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        """Create an environment, optionally pre-populated.

        Args:
            initial: Starting variables (copied, not referenced).

        """
        self._vars: dict[str, str] = dict(initial) if initial else {}

    @classmethod
    def from_os(cls) -> "Environment":
        """Return a snapshot of the current process environment."""
        return cls(os.environ)

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if not set."""
        return self._vars.get(key, default)
