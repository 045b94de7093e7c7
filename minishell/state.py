"""The shell's environment and last exit status."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass
class ShellState:
    """Environment variables, in insertion order, and the last exit status."""

    env: dict[str, str] = field(default_factory=dict)
    exit_status: int = 0

    def __post_init__(self) -> None:
        self.env = dict(self.env) if isinstance(self.env, Mapping) else dict()

    def getenv(self, name: str) -> str | None:
        """Value of a variable, or None when it is not set."""
        return self.env.get(name)

    def setenv(self, name: str, value: str) -> None:
        """Set a variable; an existing one keeps its place, a new one goes last."""
        self.env[name] = value

    def unsetenv(self, name: str) -> None:
        """Remove a variable if it is set."""
        self.env.pop(name, None)

    def putenv(self, string: str) -> None:
        """Set a variable from ``NAME=value``; a string without `=` is ignored."""
        name, sep, value = string.partition("=")
        if sep:
            self.setenv(name, value)

    def env_lines(self) -> list[str]:
        """The environment as ``NAME=value`` lines, in order."""
        return [f"{name}={value}" for name, value in self.env.items()]