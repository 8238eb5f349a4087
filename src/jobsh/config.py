"""Interpreter settings.

A ``ShellConfig`` holds the handful of knobs the interpreter exposes:
the prompt, the names of the two built-in directives, and how loudly
the REPL echoes its event log.  Defaults reproduce the classic
behaviour (``Shell> `` prompt, ``exit`` and ``myjobs``); each can be
overridden through an environment variable:

- ``JOBSH_PROMPT`` — prompt string.
- ``JOBSH_EXIT_COMMAND`` — directive that ends the session.
- ``JOBSH_JOBS_COMMAND`` — directive that lists background jobs.
- ``JOBSH_LOG_LEVEL`` — echo log entries at or above this level
  (``debug``, ``info``, ``warning``, ``error``) to stderr.
"""

from dataclasses import dataclass

from jobsh.env import Environment
from jobsh.logging import LogLevel

ENV_PROMPT = "JOBSH_PROMPT"
ENV_EXIT_COMMAND = "JOBSH_EXIT_COMMAND"
ENV_JOBS_COMMAND = "JOBSH_JOBS_COMMAND"
ENV_LOG_LEVEL = "JOBSH_LOG_LEVEL"


class ConfigError(ValueError):
    """Raise when a configuration value is unusable."""


@dataclass(frozen=True)
class ShellConfig:
    """Settings for one interpreter session.

    Attributes:
        prompt: Text shown before each line is read.
        exit_command: Exact line that ends the session.
        jobs_command: Exact line that lists the job table.
        background_marker: Trailing character that detaches a command.
        delimiter: Character the tokenizer splits on.
        log_echo_level: Echo log entries at or above this level, or
            ``None`` to keep the log silent.

    """

    prompt: str = "Shell> "
    exit_command: str = "exit"
    jobs_command: str = "myjobs"
    background_marker: str = "&"
    delimiter: str = " "
    log_echo_level: LogLevel | None = None

    def __post_init__(self) -> None:
        """Validate the settings."""
        if len(self.background_marker) != 1:
            msg = f"background marker must be one character, got {self.background_marker!r}"
            raise ConfigError(msg)
        if len(self.delimiter) != 1:
            msg = f"delimiter must be one character, got {self.delimiter!r}"
            raise ConfigError(msg)
        for name in ("exit_command", "jobs_command"):
            value: str = getattr(self, name)
            if not value or value != value.strip():
                msg = f"{name} must be a non-empty word, got {value!r}"
                raise ConfigError(msg)
        if self.exit_command == self.jobs_command:
            msg = f"exit and jobs commands must differ (both are {self.exit_command!r})"
            raise ConfigError(msg)

    @classmethod
    def from_environment(cls, env: Environment) -> "ShellConfig":
        """Build a config from ``JOBSH_*`` variables, falling back to defaults.

        Raises:
            ConfigError: If a variable holds an unusable value.

        """
        defaults = cls()
        level_name = env.get(ENV_LOG_LEVEL)
        level: LogLevel | None = None
        if level_name:
            try:
                level = LogLevel.parse(level_name)
            except ValueError as e:
                msg = f"{ENV_LOG_LEVEL}: {e}"
                raise ConfigError(msg) from e
        return cls(
            prompt=env.get(ENV_PROMPT, defaults.prompt) or defaults.prompt,
            exit_command=env.get(ENV_EXIT_COMMAND) or defaults.exit_command,
            jobs_command=env.get(ENV_JOBS_COMMAND) or defaults.jobs_command,
            log_echo_level=level,
        )
