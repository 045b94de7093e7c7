import pytest

from minishell.ast import (
    Node,
    NodeType,
    TokenStream,
    make_pipe_sequence,
    parse_assign_word,
    parse_cmd_prefix,
    parse_io_redirect,
    parse_word,
)
from minishell.errors import ErrorKind, ShellError
from minishell.tokens import Token, TokenType


def stream_of(*texts):
    return TokenStream([Token(t) for t in texts])


def test_stream_peek_and_advance():
    stream = stream_of("ls", "")
    assert stream.peek().text == "ls"
    stream.advance()
    assert stream.peek().type is TokenType.NEWLINE
    stream.advance()
    assert stream.peek() is None
    stream.advance()
    assert stream.peek() is None


def test_parse_word():
    stream = stream_of("echo", "")
    node = parse_word(stream)
    assert node.type is NodeType.WORD
    assert node.token.text == "echo"
    assert stream.peek().text == ""


def test_parse_word_rejects_operator_and_consumes_it():
    stream = stream_of("|", "")
    with pytest.raises(ShellError) as info:
        parse_word(stream)
    assert info.value.kind is ErrorKind.SYNTAX
    assert info.value.name == "|"
    assert stream.peek().text == ""


def test_parse_assign_word():
    stream = TokenStream([Token("A=1", TokenType.ASSIGNWORD)])
    node = parse_assign_word(stream)
    assert node.type is NodeType.ASSIGN_WORD
    assert node.token.text == "A=1"


def test_parse_assign_word_rejects_plain_word():
    with pytest.raises(ShellError):
        parse_assign_word(stream_of("word"))


@pytest.mark.parametrize("op", ["<", ">", ">>"])
def test_io_file(op):
    stream = stream_of(op, "out.txt", "")
    node = parse_io_redirect(stream)
    assert node.type is NodeType.IO_FILE
    assert node.token.text == op
    assert node.target.text == "out.txt"
    assert stream.peek().text == ""


def test_io_here():
    node = parse_io_redirect(stream_of("<<", "EOF", ""))
    assert node.type is NodeType.IO_HERE
    assert node.target.text == "EOF"


def test_redirect_without_word_reports_operator():
    with pytest.raises(ShellError) as info:
        parse_io_redirect(stream_of(">", ""))
    assert info.value.name == ">"


def test_io_redirect_not_at_operator():
    stream = stream_of("word")
    assert parse_io_redirect(stream) is None
    assert stream.peek().text == "word"


def test_cmd_prefix_chain():
    stream = TokenStream(
        [
            Token("<"),
            Token("in"),
            Token("X=1", TokenType.ASSIGNWORD),
            Token(">"),
            Token("out"),
            Token("cat"),
        ]
    )
    head = parse_cmd_prefix(stream)
    kinds = []
    node = head
    while node is not None:
        kinds.append(node.type)
        node = node.child
    assert kinds == [NodeType.IO_FILE, NodeType.ASSIGN_WORD, NodeType.IO_FILE]
    assert stream.peek().text == "cat"


def test_cmd_prefix_empty():
    stream = stream_of("cat")
    assert parse_cmd_prefix(stream) is None
    assert stream.peek().text == "cat"


def test_make_pipe_sequence():
    pipe = Token("|")
    left = Node(NodeType.SIMPLE_COMMAND, Token("ls"))
    right = Node(NodeType.SIMPLE_COMMAND, Token("wc"))
    node = make_pipe_sequence(pipe, left, right)
    assert node.type is NodeType.PIPE_SEQUENCE
    assert node.token is pipe
    assert node.child.type is NodeType.PAIR
    assert node.child.left is left
    assert node.child.right is right