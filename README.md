# minishell

The pieces of a small POSIX-style command shell as a Python library. It
splits a command line into tokens, expanding quotes and variables as it
goes. It gives syntax tree nodes for commands, pipelines and redirections,
and runs such trees. Builtins run inside the shell and other commands run as
child processes.

## Tokenizing

```python
from minishell.lexer import tokenize

tokens = tokenize('echo "$USER" > out.txt', {"USER": "alice"})
[t.text for t in tokens]   # ['echo', 'alice', '>', 'out.txt', '']
```

- Single quotes keep their contents literally. Double quotes expand `$NAME`
  inside them.
- `$NAME` outside quotes is expanded from the mapping you pass. An unset
  name expands to nothing. `$?` is replaced by the `exit_status` argument,
  and only outside quotes.
- A variable name ends at a space, a quote, `<`, `>` or another `$`.
- Words end at spaces, `|`, `<` and `>`. The operators `|`, `<`, `>`, `<<`
  and `>>` become tokens of their own.
- A word that expands to nothing is dropped. The list always ends with an
  empty token of type `TokenType.NEWLINE`.
- A line with an unclosed quote raises `minishell.lexer.QuoteError`.
- `minishell.lexer.is_blank(line)` tells you whether a line holds only
  whitespace.

`minishell.tokens` holds `TokenType`, `Token` and `token_type(text)`:

- `token_type(text)` maps operator text to its type. The empty string maps
  to `NEWLINE`, and anything else maps to `WORD`.
- `Token.is_redirection()` is true for `<`, `>`, `<<` and `>>`.

`minishell.expand` has the lower-level pieces:

- `quote_open`
- `lookup`
- `expand_variable`
- `expand_word`
- `expand_line`, which expands `$NAME` in a here-document line and leaves
  its quotes alone.

## Syntax tree

`minishell.ast` defines `NodeType`, `Node` and `TokenStream` (`peek`,
`advance`). It also has these parsers:

- `parse_word` and `parse_assign_word` each read one token of the expected
  type. Any other token raises a syntax `ShellError`.
- `parse_io_redirect` reads an operator and the word after it, giving an
  `IO_FILE` node (or `IO_HERE` for `<<`) with the word in `target`.
- `parse_cmd_prefix` reads a run of assignment words and redirections,
  linked through `child`.
- `make_pipe_sequence(pipe, left, right)` builds a `PIPE_SEQUENCE` node whose
  `PAIR` child holds the two sides.

A simple command is a `SIMPLE_COMMAND` node with the following parts:

- its `token` is the command name;
- its `child` is a `PAIR` node;
- the pair's `left` is the prefix chain and its `right` is the suffix chain.

In the suffix chain, items whose token is a word are the arguments. Items
that are redirection nodes are applied before the command runs.

## Running commands

```python
from minishell.ast import Node, NodeType
from minishell.executor import Executor
from minishell.state import ShellState
from minishell.tokens import Token

suffix = Node(NodeType.CMD_SUFFIX, Token("hello"),
              child=Node(NodeType.IO_FILE, Token(">"), target=Token("out.txt")))
command = Node(NodeType.SIMPLE_COMMAND, Token("echo"),
               child=Node(NodeType.PAIR, right=suffix))

executor = Executor(ShellState({"PATH": "/bin:/usr/bin"}))
status = executor.run(command)   # writes "hello\n" to out.txt, returns 0
```

`Executor.run(node)` runs a simple command or a pipeline, waits for every
stage and returns the exit status. The status is also stored in
`executor.state.exit_status`. Other parts of the executor:

- `run_pipeline` connects stages with pipes.
- `run_simple_command` chooses between a builtin and an external program.
- `run_builtin` runs the builtins.
- `collect_args(node)` returns the command word followed by its argument
  words.
- `find_executable(name, env)` uses `name` as it is when that file exists.
  Otherwise it searches each directory of the environment's `PATH`.

The builtins are these:

- `echo` writes its arguments joined by spaces, then a newline.
- `pwd` writes the current directory.
- `cd` takes exactly one argument. With any other number of arguments it
  reports "too many arguments" and sets status 1.
- `export NAME=value` sets a variable. An argument without `=` is ignored.
- `unset NAME` removes a variable.
- `env` lists the environment as `NAME=value` lines, leaving out the first
  variable.
- `exit` raises `SystemExit(0)`.

Inside a pipeline, builtins act on a copy of the state. There, `exit` ends
only its own stage and `cd` does not change directory.

## Redirections

`minishell.redirection` has the following functions:

- `open_redirect(kind, path)` opens a file for `<`, `>` or `>>`. For `>` it
  removes an existing file first. New files are created with read, write and
  execute permission for user and group.
- `read_here_document(delimiter, env, lines)` collects lines up to the
  delimiter and expands variables in them. It stops early at the end of the
  input. Without `lines` it prompts with `heredoc> `.
- `apply_redirection` applies one redirection node to a command's input and
  output.

To feed here-documents without prompting, give the lines to
`Executor(here_lines=...)`.

## Environment and errors

`minishell.state.ShellState` keeps the environment, in insertion order, and
the last exit status. Its methods are:

- `getenv`
- `setenv`
- `unsetenv`
- `putenv`
- `env_lines`

`minishell.errors.ShellError` carries an `ErrorKind`, the name it concerns
and an optional system error number. Its `message()` and `exit_status()`
give the following:

| Kind | Message | Status |
| --- | --- | --- |
| command not found | `msh: NAME: command not found` | 127 |
| command cannot be executed | `msh: NAME: <system error>` | 126 |
| syntax error | ``msh: syntax error near `TOKEN'`` | 127 |
| file error | `msh: PATH: <system error>` | 1 |
| failing `cd` | `msh: cd: <system error or "too many arguments">` | 1 |

## What it does not do

- There is no command to start and no interactive prompt loop. The package
  does not read lines from the terminal and run them in turn, and it has no
  line history or signal handling. Only here-documents prompt, with
  `heredoc> `.
- There is no parser that turns a whole token list into a command or
  pipeline tree. Build `SIMPLE_COMMAND` and `PIPE_SEQUENCE` nodes yourself,
  as shown above, using `make_pipe_sequence` for pipelines.
- `tokenize` never produces assignment-word tokens.