"""Syntax tree nodes and the parsers for words, redirections and prefixes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

from .errors import ErrorKind, ShellError
from .tokens import Token, TokenType


class NodeType(Enum):
    """Kinds of syntax tree node."""

    PIPE_SEQUENCE = auto()
    SIMPLE_COMMAND = auto()
    CMD_PREFIX = auto()
    CMD_SUFFIX = auto()
    IO_FILE = auto()
    IO_HERE = auto()
    WORD = auto()
    ASSIGN_WORD = auto()
    PAIR = auto()


@dataclass
class Node:
    """A syntax tree node.

    ``child`` links the next item of a prefix or suffix chain; ``left`` and
    ``right`` are used by pair nodes; ``target`` is the word a redirection
    operator applies to.
    """

    type: NodeType
    token: Token | None = None
    child: Node | None = None
    left: Node | None = None
    right: Node | None = None
    target: Token | None = None


class TokenStream:
    """A cursor over a list of tokens."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = list(tokens)
        self.position = 0

    def peek(self) -> Token | None:
        """The current token, or None past the end."""
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def advance(self) -> None:
        """Move to the next token."""
        if self.position < len(self.tokens):
            self.position += 1


def _syntax_error(token: Token | None) -> ShellError:
    return ShellError(ErrorKind.SYNTAX, token.text if token is not None else "")


def _parse_single(stream: TokenStream, wanted: TokenType, kind: NodeType) -> Node:
    token = stream.peek()
    stream.advance()
    if token is None or token.type is not wanted:
        raise _syntax_error(token)
    return Node(kind, token)


def parse_word(stream: TokenStream) -> Node:
    """Consume one token, which must be a word."""
    return _parse_single(stream, TokenType.WORD, NodeType.WORD)


def parse_assign_word(stream: TokenStream) -> Node:
    """Consume one token, which must be an assignment word."""
    return _parse_single(stream, TokenType.ASSIGNWORD, NodeType.ASSIGN_WORD)


def _parse_redirect(stream: TokenStream, kind: NodeType) -> Node:
    operator = stream.peek()
    stream.advance()
    target = stream.peek()
    if target is None or target.type is not TokenType.WORD:
        raise _syntax_error(operator)
    stream.advance()
    return Node(kind, operator, target=target)


def parse_io_redirect(stream: TokenStream) -> Node | None:
    """Parse a redirection operator and its word; None if none starts here."""
    token = stream.peek()
    if token is None:
        return None
    if token.type in (TokenType.LESS, TokenType.GREAT, TokenType.DGREAT):
        return _parse_redirect(stream, NodeType.IO_FILE)
    if token.type is TokenType.DLESS:
        return _parse_redirect(stream, NodeType.IO_HERE)
    return None


def parse_cmd_prefix(stream: TokenStream) -> Node | None:
    """Parse assignments and redirections before a command into a chain."""
    items: list[Node] = []
    while True:
        token = stream.peek()
        if token is None:
            break
        if token.type is TokenType.ASSIGNWORD:
            items.append(parse_assign_word(stream))
        elif token.is_redirection():
            node = parse_io_redirect(stream)
            if node is None:
                break
            items.append(node)
        else:
            break
    for node, following in zip(items, items[1:]):
        node.child = following
    return items[0] if items else None


def make_pipe_sequence(pipe: Token, left: Node, right: Node) -> Node:
    """A pipe node whose pair child holds the commands on either side."""
    return Node(
        NodeType.PIPE_SEQUENCE,
        pipe,
        child=Node(NodeType.PAIR, left=left, right=right),
    )