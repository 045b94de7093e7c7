import errno
import os

from minishell.errors import ErrorKind, ShellError


def test_command_not_found_message_and_status():
    err = ShellError(ErrorKind.CMD_NOT_FOUND, "nosuchcmd")
    assert err.message() == "msh: nosuchcmd: command not found"
    assert err.exit_status() == 127


def test_permission_uses_system_description():
    err = ShellError(ErrorKind.CMD_PERMISSION, "script", errno.EACCES)
    assert err.message() == "msh: script: " + os.strerror(errno.EACCES)
    assert err.exit_status() == 126


def test_file_error():
    err = ShellError(ErrorKind.FILE, "missing.txt", errno.ENOENT)
    assert err.message() == "msh: missing.txt: " + os.strerror(errno.ENOENT)
    assert err.exit_status() == 1


def test_syntax_error_names_token():
    err = ShellError(ErrorKind.SYNTAX, "|")
    assert err.message() == "msh: syntax error near `|'"
    assert err.exit_status() == 127


def test_cd_without_errno_means_too_many_arguments():
    err = ShellError(ErrorKind.BUILTIN_CD, "cd")
    assert err.message() == "msh: cd: too many arguments"
    assert err.exit_status() == 1


def test_cd_with_errno():
    err = ShellError(ErrorKind.BUILTIN_CD, "cd", errno.ENOTDIR)
    assert err.message().endswith(os.strerror(errno.ENOTDIR))


def test_str_is_message():
    err = ShellError(ErrorKind.SYNTAX, ">")
    assert str(err) == "msh: syntax error near `>'"
    assert err.message() == str(err)
    assert err.kind is ErrorKind.SYNTAX
    assert err.exit_status() == 127