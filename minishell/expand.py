"""Quote handling and `$` variable expansion for words and here-document lines."""

from __future__ import annotations

from collections.abc import Mapping

# Characters that end a variable name after `$`.
_NAME_END = frozenset(" '\"<>$")
# Characters that end an unquoted word.
_WORD_END = frozenset(" |<>")


def lookup(name: str, env: Mapping[str, str]) -> str:
    """Value of an environment variable, or an empty string when unset or unnamed."""
    if not name:
        return ""
    return env.get(name, "")


def expand_variable(line: str, start: int, env: Mapping[str, str]) -> tuple[str, int]:
    """Expand the `$NAME` whose `$` sits at ``start``.

    Returns the value and the index of the first character after the name.
    """
    end = start + 1
    while end < len(line) and line[end] not in _NAME_END:
        end += 1
    return lookup(line[start + 1 : end], env), end


def quote_open(line: str) -> bool:
    """True if the line holds a single or double quote that is never closed."""
    i = 0
    while i < len(line):
        ch = line[i]
        if ch in "'\"":
            close = line.find(ch, i + 1)
            if close == -1:
                return True
            i = close + 1
        else:
            i += 1
    return False


def _closing_quote(line: str, start: int) -> int:
    close = line.find(line[start], start + 1)
    if close == -1:
        raise ValueError(f"unclosed quote at position {start}")
    return close


def expand_word(
    line: str, start: int, env: Mapping[str, str], exit_status: int = 0
) -> tuple[str, int]:
    """Read one word from ``start``, removing quotes and expanding variables.

    The word ends at a space, a pipe, a redirection operator or the end of the
    line. `$?` is replaced by ``exit_status`` outside quotes only. Returns the
    expanded text and the index where reading stopped.
    """
    parts: list[str] = []
    i = start
    while i < len(line) and line[i] not in _WORD_END:
        ch = line[i]
        if ch == "'":
            close = _closing_quote(line, i)
            parts.append(line[i + 1 : close])
            i = close + 1
        elif ch == '"':
            close = _closing_quote(line, i)
            j = i + 1
            while j < close:
                if line[j] == "$":
                    value, j = expand_variable(line, j, env)
                    parts.append(value)
                else:
                    parts.append(line[j])
                    j += 1
            i = close + 1
        elif ch == "$":
            if line[i + 1 : i + 2] == "?":
                parts.append(str(exit_status))
                i += 2
            else:
                value, i = expand_variable(line, i, env)
                parts.append(value)
        else:
            parts.append(ch)
            i += 1
    return "".join(parts), i


def expand_line(line: str, env: Mapping[str, str]) -> str:
    """Expand every `$NAME` in a here-document line, leaving quotes as they are."""
    parts: list[str] = []
    i = 0
    while i < len(line):
        if line[i] == "$":
            value, i = expand_variable(line, i, env)
            parts.append(value)
        else:
            parts.append(line[i])
            i += 1
    return "".join(parts)