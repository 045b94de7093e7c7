"""Errors the shell reports, with their messages and exit statuses."""

from __future__ import annotations

import os
from enum import Enum, auto


class ErrorKind(Enum):
    """What went wrong, which decides the message and the exit status."""

    CMD_NOT_FOUND = auto()
    CMD_PERMISSION = auto()
    FILE = auto()
    SYNTAX = auto()
    BUILTIN_CD = auto()


_EXIT_STATUS = {
    ErrorKind.CMD_NOT_FOUND: 127,
    ErrorKind.CMD_PERMISSION: 126,
    ErrorKind.FILE: 1,
    ErrorKind.SYNTAX: 127,
    ErrorKind.BUILTIN_CD: 1,
}


class ShellError(Exception):
    """An error tied to the text of a token: a command, a file or an operator.

    ``error_number`` is the system error code behind the failure, or 0 when
    there is none.
    """

    def __init__(self, kind: ErrorKind, name: str, error_number: int = 0) -> None:
        self.kind = kind
        self.name = name
        self.error_number = error_number
        super().__init__(self.message())

    def _description(self) -> str:
        if self.kind is ErrorKind.CMD_NOT_FOUND:
            return "command not found"
        if self.kind is ErrorKind.BUILTIN_CD and self.error_number == 0:
            return "too many arguments"
        return os.strerror(self.error_number)

    def message(self) -> str:
        """The line printed to standard error, without its newline."""
        if self.kind is ErrorKind.SYNTAX:
            return f"msh: syntax error near `{self.name}'"
        return f"msh: {self.name}: {self._description()}"

    def exit_status(self) -> int:
        """The status the shell or the failing child ends with."""
        return _EXIT_STATUS[self.kind]