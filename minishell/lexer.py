"""Splitting a command line into tokens."""

from __future__ import annotations

from collections.abc import Mapping

from .expand import expand_word, quote_open
from .tokens import Token

# Longer operators first so that `>>` wins over `>`.
_OPERATORS = (">>", "<<", "|", ">", "<")


class QuoteError(ValueError):
    """Raised when a command line leaves a quote open."""


def is_blank(line: str) -> bool:
    """True if the line holds only spaces and control whitespace (tab to CR)."""
    return all(ch == " " or "\t" <= ch <= "\r" for ch in line)


def _skip_space(line: str, i: int) -> int:
    while i < len(line) and line[i] in " \t":
        i += 1
    return i


def _operator_at(line: str, i: int) -> str | None:
    for op in _OPERATORS:
        if line.startswith(op, i):
            return op
    return None


def tokenize(
    line: str, env: Mapping[str, str] | None = None, exit_status: int = 0
) -> list[Token]:
    """Turn a command line into tokens, expanding words as they are read.

    Words that expand to nothing are dropped. The list always ends with an
    empty newline token.
    """
    if env is None:
        env = {}
    if quote_open(line):
        raise QuoteError("quote error")
    tokens: list[Token] = []
    i = 0
    while i < len(line):
        i = _skip_space(line, i)
        if i >= len(line):
            break
        word, i = expand_word(line, i, env, exit_status)
        if word:
            tokens.append(Token(word))
        op = _operator_at(line, i)
        if op is not None:
            tokens.append(Token(op))
            i += len(op)
    tokens.append(Token(""))
    return tokens