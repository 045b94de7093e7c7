"""Input and output redirection: files, appending output and here-documents."""

from __future__ import annotations

import errno
import os
import stat
import tempfile
from collections.abc import Iterable, Iterator, Mapping, MutableMapping

from .ast import Node
from .errors import ErrorKind, ShellError
from .expand import expand_line
from .state import ShellState
from .tokens import TokenType

_FLAGS = {
    TokenType.LESS: os.O_RDWR,
    TokenType.GREAT: os.O_RDWR | os.O_CREAT,
    TokenType.DGREAT: os.O_RDWR | os.O_CREAT | os.O_APPEND,
}
_MODE = stat.S_IRWXU | stat.S_IRWXG
# Failures that are reported as file errors; any other failure leaves the
# stream as it was.
_REPORTED = frozenset({errno.ENOENT, errno.EACCES, errno.EISDIR})
_OUTPUT_KINDS = frozenset({TokenType.GREAT, TokenType.DGREAT})


def open_redirect(kind: TokenType, path: str) -> int:
    """Open ``path`` for a `<`, `>` or `>>` redirection and return the descriptor.

    `>` removes an existing file first, so the new output never keeps the old
    tail. Raises OSError when the file cannot be opened.
    """
    if kind not in _FLAGS:
        raise ValueError(f"not a file redirection: {kind}")
    if kind is TokenType.GREAT:
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
    return os.open(path, _FLAGS[kind], _MODE)


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input("heredoc> ")
        except EOFError:
            return


def read_here_document(
    delimiter: str, env: Mapping[str, str], lines: Iterable[str] | None = None
) -> str:
    """Read lines up to ``delimiter`` and return them expanded, one per line.

    Without ``lines`` the user is prompted. Reading also stops at the end of
    the input.
    """
    source = _prompt_lines() if lines is None else lines
    body: list[str] = []
    for line in source:
        if line.endswith("\n"):
            line = line[:-1]
        if line == delimiter:
            break
        body.append(expand_line(line, env) + "\n")
    return "".join(body)


def _temporary_input(text: str) -> int:
    with tempfile.TemporaryFile() as tmp:
        tmp.write(text.encode())
        tmp.seek(0)
        return os.dup(tmp.fileno())


def apply_redirection(
    node: Node,
    streams: MutableMapping[int, int],
    state: ShellState,
    lines: Iterable[str] | None = None,
) -> int | None:
    """Apply one redirection node to ``streams`` (0 for input, 1 for output).

    Returns the descriptor that was opened, which the caller closes, or None
    when the node is not a redirection or the failure is one that is ignored.
    Raises ShellError for a missing, forbidden or directory file.
    """
    operator = node.token
    if operator is None or not operator.is_redirection() or node.target is None:
        return None
    path = node.target.text
    try:
        if operator.type is TokenType.DLESS:
            fd = _temporary_input(read_here_document(path, state.env, lines))
        else:
            fd = open_redirect(operator.type, path)
    except OSError as err:
        if err.errno in _REPORTED:
            raise ShellError(ErrorKind.FILE, path, err.errno) from err
        return None
    streams[1 if operator.type in _OUTPUT_KINDS else 0] = fd
    return fd