"""Running parsed commands: builtins in the shell, utilities as child processes."""

from __future__ import annotations

import errno
import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from .ast import Node, NodeType
from .errors import ErrorKind, ShellError
from .redirection import apply_redirection
from .state import ShellState
from .tokens import TokenType

BUILTINS = frozenset({"exit", "cd", "pwd", "echo", "export", "env", "unset"})
PATH_DELIMITER = ":"


@dataclass
class Context:
    """Where a command reads and writes, and whether it runs apart from the shell.

    An isolated command stands for a child process: builtins that change the
    shell's state act on a copy, and `exit` ends only that command.
    """

    stdin: int = 0
    stdout: int = 1
    isolated: bool = False


class _Job:
    """A started command that can be waited for."""

    def __init__(self, process=None, thread=None, status: int = 0) -> None:
        self.process = process
        self.thread = thread
        self.status = status

    def wait(self) -> int:
        if self.process is not None:
            code = self.process.wait()
            return code if code >= 0 else 0
        if self.thread is not None:
            self.thread.join()
        return self.status


def _chain(node: Node | None) -> Iterator[Node]:
    while node is not None:
        yield node
        node = node.child


def _parts(node: Node) -> tuple[Node | None, Node | None]:
    pair = node.child
    if pair is None:
        return None, None
    return pair.left, pair.right


def _close_all(fds: Iterable[int]) -> None:
    for fd in fds:
        try:
            os.close(fd)
        except OSError:
            pass


def _write_all(fd: int, data: bytes) -> None:
    view = memoryview(data)
    while view:
        view = view[os.write(fd, view):]


def _emit(fd: int, text: str, opened: list[int]) -> None:
    try:
        _write_all(fd, text.encode())
    except OSError:
        pass
    finally:
        _close_all(opened)


def _finish_stage(job: _Job | None, write_fd: int) -> None:
    try:
        if job is not None:
            job.wait()
    finally:
        os.close(write_fd)


def _report(err: ShellError) -> _Job:
    print(err.message(), file=sys.stderr)
    return _Job(status=err.exit_status())


def find_executable(name: str, env: Mapping[str, str]) -> str:
    """Resolve a command name to the file that runs it.

    A name that names an existing file is used as it is; otherwise each
    directory of PATH is searched. Raises ShellError when the file cannot be
    run or nothing is found.
    """
    if os.path.exists(name):
        if os.path.isfile(name) and os.access(name, os.X_OK):
            return name
        raise ShellError(ErrorKind.CMD_PERMISSION, name, errno.EACCES)
    search = env.get("PATH")
    if search is None:
        raise ShellError(ErrorKind.CMD_NOT_FOUND, name, errno.ENOENT)
    for directory in filter(None, search.split(PATH_DELIMITER)):
        candidate = f"{directory}/{name}"
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    raise ShellError(ErrorKind.CMD_NOT_FOUND, name, errno.ENOENT)


def collect_args(node: Node) -> list[str]:
    """The command word of a simple command followed by its argument words."""
    _, suffix = _parts(node)
    words = [node.token.text] if node.token is not None else []
    words.extend(
        item.token.text
        for item in _chain(suffix)
        if item.token is not None and item.token.type is TokenType.WORD
    )
    return words


class Executor:
    """Evaluates syntax trees against a shell state."""

    def __init__(
        self,
        state: ShellState | None = None,
        stdin: int = 0,
        stdout: int = 1,
        here_lines: Iterable[str] | None = None,
    ) -> None:
        self.state = state if state is not None else ShellState()
        self.stdin = stdin
        self.stdout = stdout
        self._here_lines = iter(here_lines) if here_lines is not None else None
        self._waiters: list[_Job] = []

    def run(self, node: Node) -> int:
        """Run a command or pipeline, wait for it and return the exit status."""
        self._waiters = []
        context = Context(self.stdin, self.stdout)
        if node.type is NodeType.PIPE_SEQUENCE:
            last = self.run_pipeline(node, context)
        elif node.type is NodeType.SIMPLE_COMMAND:
            last = self.run_simple_command(node, context)
        else:
            last = None
        status = last.wait() if last is not None else None
        for waiter in self._waiters:
            waiter.wait()
        self._waiters = []
        if status is not None:
            self.state.exit_status = status
        return self.state.exit_status

    def run_simple_command(self, node: Node, context: Context) -> _Job | None:
        """Start one command; None when it ran inside the shell."""
        if node.token is not None and node.token.text in BUILTINS:
            return self.run_builtin(node, context)
        return self._run_utility(node, context)

    def run_pipeline(self, node: Node, context: Context) -> _Job | None:
        """Start every stage of a pipeline and return the job of the last one."""
        pair = node.child
        if pair is None or pair.right is None:
            raise ValueError("pipe sequence without commands")
        read_fd, write_fd = os.pipe()
        left_job = None
        if pair.left is not None:
            left_job = self.run_simple_command(
                pair.left, Context(context.stdin, write_fd, isolated=True)
            )
        closer = threading.Thread(
            target=_finish_stage, args=(left_job, write_fd), daemon=True
        )
        closer.start()
        self._waiters.append(_Job(thread=closer))
        right_context = Context(read_fd, context.stdout, context.isolated)
        try:
            if pair.right.type is NodeType.SIMPLE_COMMAND:
                return self.run_simple_command(pair.right, right_context)
            return self.run_pipeline(pair.right, right_context)
        finally:
            os.close(read_fd)

    def run_builtin(self, node: Node, context: Context) -> _Job | None:
        """Run a builtin; `echo` and `pwd` give a job, the others run in place."""
        name = node.token.text if node.token is not None else ""
        if name not in BUILTINS:
            raise ValueError(f"not a builtin: {name!r}")
        args = collect_args(node)[1:]
        if context.isolated:
            state = ShellState(dict(self.state.env), self.state.exit_status)
        else:
            state = self.state
        if name == "exit":
            if context.isolated:
                return _Job()
            raise SystemExit(0)
        if name == "cd":
            self._change_directory(name, args, context.isolated, state)
            return None
        if name in ("pwd", "echo"):
            try:
                streams, opened = self._open_streams(node, context)
            except ShellError as err:
                return _report(err)
            text = os.getcwd() + "\n" if name == "pwd" else " ".join(args) + "\n"
            thread = threading.Thread(
                target=_emit, args=(streams[1], text, opened), daemon=True
            )
            thread.start()
            return _Job(thread=thread)
        if name == "export":
            for arg in args:
                state.putenv(arg)
        elif name == "unset":
            for arg in args:
                state.unsetenv(arg)
        else:
            # The first variable is left out of the listing.
            lines = state.env_lines()[1:]
            _write_all(self.stdout, "".join(f"{line}\n" for line in lines).encode())
        return None

    def _change_directory(
        self, name: str, args: list[str], isolated: bool, state: ShellState
    ) -> None:
        try:
            if len(args) != 1:
                raise ShellError(ErrorKind.BUILTIN_CD, name, 0)
            if not isolated:
                try:
                    os.chdir(args[0])
                except OSError as err:
                    raise ShellError(ErrorKind.BUILTIN_CD, name, err.errno or 0) from err
        except ShellError as err:
            print(err.message(), file=sys.stderr)
            state.exit_status = err.exit_status()

    def _open_streams(
        self, node: Node, context: Context
    ) -> tuple[dict[int, int], list[int]]:
        prefix, suffix = _parts(node)
        streams = {0: context.stdin, 1: context.stdout}
        opened: list[int] = []
        try:
            for item in [*_chain(prefix), *_chain(suffix)]:
                fd = apply_redirection(item, streams, self.state, self._here_lines)
                if fd is not None:
                    opened.append(fd)
        except BaseException:
            _close_all(opened)
            raise
        return streams, opened

    def _run_utility(self, node: Node, context: Context) -> _Job:
        try:
            streams, opened = self._open_streams(node, context)
        except ShellError as err:
            return _report(err)
        try:
            if node.token is None:
                return _Job()
            argv = collect_args(node)
            try:
                path = find_executable(argv[0], self.state.env)
                process = subprocess.Popen(
                    argv,
                    executable=path,
                    stdin=streams[0],
                    stdout=streams[1],
                    env=dict(self.state.env),
                )
            except ShellError as err:
                return _report(err)
            except OSError as err:
                kind = (
                    ErrorKind.CMD_PERMISSION
                    if err.errno == errno.EACCES
                    else ErrorKind.CMD_NOT_FOUND
                )
                return _report(ShellError(kind, argv[0], err.errno or 0))
            return _Job(process=process)
        finally:
            _close_all(opened)