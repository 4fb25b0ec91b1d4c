"""Run a syntax tree: commands, pipelines, subshells and logical lists."""

from __future__ import annotations

import functools
import os
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import BinaryIO, TextIO

from .cmdpath import CommandNotFoundError, resolve_cmd_path
from .command_expansion import (
    AmbiguousRedirectError,
    ExpandedRedirection,
    expand_child,
)
from .env import PROGRAM_NAME, Environment
from .parser import Command, Node, Operator, OperatorType, Subshell
from .process import exit_status
from .redirections import RedirectionError, resolve_redirections

Builtin = Callable[["Executor", list[str], TextIO], int]
"""A command run inside the shell: ``builtin(executor, argv, out) -> status``."""

Expanded = tuple[list[str], list[ExpandedRedirection]]

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _pipeline_members(node: Node) -> Iterator[Node]:
    if isinstance(node, Operator) and node.type is OperatorType.PIPE:
        yield from _pipeline_members(node.left)
        yield from _pipeline_members(node.right)
    else:
        yield node


def _flush_std() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def _exec_failure_status(exc: OSError) -> int:
    return 127 if isinstance(exc, FileNotFoundError) else 126


def _close(*streams: BinaryIO | None) -> None:
    for stream in streams:
        if stream is not None:
            stream.close()


class Executor:
    """Executes syntax trees and keeps the status of the last command.

    Commands named in :attr:`builtins` run inside the shell process; any
    other command is looked up in PATH and started as a child process.
    A builtin may set :attr:`finished` to stop the rest of a list.
    """

    def __init__(self, env: Environment, interactive: bool = False) -> None:
        self.env = env
        self.interactive = interactive
        self.last_status = 0
        self.finished = False
        self.builtins: dict[str, Builtin] = {}

    def execute(self, node: Node) -> int:
        """Run ``node`` and return the resulting status."""
        if isinstance(node, Command):
            self._execute_command(node)
        elif isinstance(node, Subshell):
            self._execute_subshell(node)
        elif isinstance(node, Operator):
            if node.type is OperatorType.PIPE:
                self._execute_pipeline(node)
            else:
                self._execute_logical(node)
        else:
            raise TypeError(f"cannot execute {type(node).__name__}")
        return self.last_status

    # Reporting

    def _report(self, exc: Exception) -> int:
        print(f"{PROGRAM_NAME}: {exc}", file=sys.stderr)
        self.last_status = getattr(exc, "status", 1) & 0xFF
        return self.last_status

    def _report_exec(self, name: str, exc: OSError) -> int:
        print(f"{PROGRAM_NAME}: {name}: {exc.strerror or exc}", file=sys.stderr)
        self.last_status = _exec_failure_status(exc)
        return self.last_status

    def _report_syscall(self, what: str, exc: OSError) -> None:
        print(f"{PROGRAM_NAME}: {what}: {exc.strerror or exc}", file=sys.stderr)
        self.last_status = 1

    # Signals and waiting

    @staticmethod
    def _default_child_signals() -> None:
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.signal(signal.SIGQUIT, signal.SIG_DFL)

    @contextmanager
    def _waiting(self) -> Iterator[None]:
        if not self.interactive or threading.current_thread() is not threading.main_thread():
            yield
            return
        interrupted: list[int] = []
        previous = signal.signal(signal.SIGINT, lambda signum, frame: interrupted.append(signum))
        try:
            yield
        finally:
            signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
            if interrupted:
                sys.stdout.write("\n")
                sys.stdout.flush()

    def _wait_pid(self, pid: int) -> int:
        with self._waiting():
            _, raw = os.waitpid(pid, 0)
        return exit_status(os.waitstatus_to_exitcode(raw))

    def _fork(self, body: Callable[[], int]) -> int | None:
        _flush_std()
        try:
            pid = os.fork()
        except OSError as exc:
            self._report_syscall("fork", exc)
            return None
        if pid:
            return pid
        status = 1
        try:
            if self.interactive:
                self._default_child_signals()
            status = body()
        except Exception as exc:  # the child must never return to the caller
            print(f"{PROGRAM_NAME}: {exc}", file=sys.stderr)
        finally:
            _flush_std()
            os._exit(status & 0xFF)

    # Logical lists

    def _execute_logical(self, node: Operator) -> None:
        self.execute(node.left)
        if self.finished:
            return
        if (self.last_status == 0) == (node.type is OperatorType.AND_IF):
            self.execute(node.right)

    # Expansion and redirections

    def _expand(self, node: Node) -> Expanded | None:
        try:
            return expand_child(node, self.env, self.last_status)
        except AmbiguousRedirectError as exc:
            self._report(exc)
            return None

    def _apply_redirections(self, redirections: list[ExpandedRedirection]) -> bool:
        """Point the process's stdin and stdout at the redirections."""
        try:
            stdin, stdout = resolve_redirections(redirections)
        except RedirectionError as exc:
            self._report(exc)
            return False
        _flush_std()
        for stream, target in ((stdin, 0), (stdout, 1)):
            if stream is not None:
                os.dup2(stream.fileno(), target)
                stream.close()
        return True

    # Simple commands

    def _execute_command(self, node: Command) -> None:
        expanded = self._expand(node)
        if expanded is None:
            return
        argv, redirections = expanded
        if not argv:
            return
        builtin = self.builtins.get(argv[0])
        if builtin is not None:
            self.last_status = self._run_builtin(builtin, argv, redirections)
            return
        self._run_external(argv, redirections)

    def _run_builtin(self, builtin: Builtin, argv: list[str],
                     redirections: list[ExpandedRedirection]) -> int:
        try:
            stdin, stdout = resolve_redirections(redirections)
        except RedirectionError as exc:
            return self._report(exc)
        _close(stdin)
        _flush_std()
        if stdout is None:
            out = open(os.dup(1), "w", encoding=_ENCODING, errors=_ERRORS)
        else:
            out = open(stdout.fileno(), "w", encoding=_ENCODING, errors=_ERRORS,
                       closefd=False)
        try:
            with out:
                status = builtin(self, argv, out)
        finally:
            _close(stdout)
        return status & 0xFF

    def _run_external(self, argv: list[str],
                      redirections: list[ExpandedRedirection]) -> None:
        try:
            path = resolve_cmd_path(argv[0], self.env.path())
        except CommandNotFoundError as exc:
            self._report(exc)
            return
        try:
            stdin, stdout = resolve_redirections(redirections)
        except RedirectionError as exc:
            self._report(exc)
            return
        _flush_std()
        try:
            proc = subprocess.Popen(
                argv,
                executable=path,
                env=self.env.as_dict(),
                stdin=stdin,
                stdout=stdout,
                preexec_fn=self._default_child_signals if self.interactive else None,
            )
        except OSError as exc:
            self._report_exec(argv[0], exc)
            return
        finally:
            _close(stdin, stdout)
        with self._waiting():
            returncode = proc.wait()
        self.last_status = exit_status(returncode)

    def _exec_external(self, argv: list[str],
                       redirections: list[ExpandedRedirection]) -> int:
        """Replace the current (child) process with the command."""
        try:
            path = resolve_cmd_path(argv[0], self.env.path())
        except CommandNotFoundError as exc:
            return self._report(exc)
        if not self._apply_redirections(redirections):
            return self.last_status
        if hasattr(signal, "SIGPIPE"):
            signal.signal(signal.SIGPIPE, signal.SIG_DFL)
        _flush_std()
        try:
            os.execve(path, argv, self.env.as_dict())
        except OSError as exc:
            return self._report_exec(argv[0], exc)
        return self.last_status

    # Subshells

    def _run_subshell(self, node: Subshell,
                      redirections: list[ExpandedRedirection]) -> int:
        if self._apply_redirections(redirections):
            self.execute(node.child)
        return self.last_status

    def _execute_subshell(self, node: Subshell) -> None:
        expanded = self._expand(node)
        if expanded is None:
            return
        _, redirections = expanded
        pid = self._fork(functools.partial(self._run_subshell, node, redirections))
        if pid is not None:
            self.last_status = self._wait_pid(pid)

    # Pipelines

    def _run_member(self, node: Node, expanded: Expanded) -> int:
        argv, redirections = expanded
        if isinstance(node, Subshell):
            return self._run_subshell(node, redirections)
        if isinstance(node, Command):
            if not argv:
                return self.last_status
            builtin = self.builtins.get(argv[0])
            if builtin is not None:
                return self._run_builtin(builtin, argv, redirections)
            return self._exec_external(argv, redirections)
        return self.execute(node)

    def _pipeline_child(self, node: Node, expanded: Expanded, stdin_fd: int | None,
                        stdout_fd: int | None, spare_fd: int | None) -> int:
        if spare_fd is not None:
            os.close(spare_fd)
        for fd, target in ((stdin_fd, 0), (stdout_fd, 1)):
            if fd is not None:
                os.dup2(fd, target)
                os.close(fd)
        return self._run_member(node, expanded)

    def _execute_pipeline(self, node: Operator) -> None:
        members = list(_pipeline_members(node))
        pids: list[int] = []
        previous_read: int | None = None
        completed = True
        for index, member in enumerate(members):
            read_fd: int | None = None
            write_fd: int | None = None
            if index < len(members) - 1:
                try:
                    read_fd, write_fd = os.pipe()
                except OSError as exc:
                    self._report_syscall("pipe", exc)
                    completed = False
                    break
            expanded = self._expand(member)
            pid = None
            if expanded is not None:
                pid = self._fork(functools.partial(
                    self._pipeline_child, member, expanded,
                    previous_read, write_fd, read_fd))
            for fd in (previous_read, write_fd):
                if fd is not None:
                    os.close(fd)
            previous_read = read_fd
            if pid is None:
                completed = False
                break
            pids.append(pid)
        if previous_read is not None:
            os.close(previous_read)
        if completed and pids:
            self.last_status = self._wait_pid(pids.pop())
        with self._waiting():
            for pid in pids:
                try:
                    os.waitpid(pid, 0)
                except ChildProcessError:
                    pass