"""Token kinds and the token record produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kinds of token the shell grammar distinguishes."""

    WORD = auto()
    PIPE = auto()
    LESS = auto()
    GREAT = auto()
    DLESS = auto()
    DGREAT = auto()
    NEWLINE = auto()
    ASSIGNWORD = auto()


_OPERATOR_TYPES = {
    "<": TokenType.LESS,
    ">": TokenType.GREAT,
    "|": TokenType.PIPE,
    ">>": TokenType.DGREAT,
    "<<": TokenType.DLESS,
    "": TokenType.NEWLINE,
}

_REDIRECTIONS = frozenset(
    {TokenType.LESS, TokenType.GREAT, TokenType.DLESS, TokenType.DGREAT}
)


def token_type(text: str) -> TokenType:
    """Classify a token by its text; anything that is not an operator is a word."""
    return _OPERATOR_TYPES.get(text, TokenType.WORD)


@dataclass
class Token:
    """One token of a command line; its type follows from its text unless given."""

    text: str
    type: TokenType | None = None

    def __post_init__(self) -> None:
        if self.type is None:
            self.type = token_type(self.text)

    def is_redirection(self) -> bool:
        """True for the four redirection operators."""
        return self.type in _REDIRECTIONS