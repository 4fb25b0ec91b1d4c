"""The read-evaluate loop and the command entry point."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Iterable, Mapping
from typing import TextIO

from .env import PROGRAM_NAME, init_environment
from .executor import Executor
from .heredoc import read_heredoc
from .lexer import UnclosedQuoteError, tokenize
from .parser import ShellSyntaxError, parse
from .signals import install_repl_handlers, take_pending_signal

PROMPT = "MiniYeska$ "
WELCOME = "Welcome to MiniYeska!"
USAGE_STATUS = 2
INTERRUPTED_STATUS = 130


class Shell:
    """Shell state: environment, last status and the executor that runs lines."""

    def __init__(
        self,
        environ: Mapping[str, str] | Iterable[str] | None = None,
        interactive: bool = False,
    ) -> None:
        self.interactive = interactive
        self.env = init_environment(environ)
        self.executor = Executor(self.env, interactive)
        self._input: TextIO | None = None
        if interactive:
            print(WELCOME)

    @property
    def last_status(self) -> int:
        return self.executor.last_status

    @last_status.setter
    def last_status(self, status: int) -> None:
        self.executor.last_status = status & 0xFF

    @property
    def finished(self) -> bool:
        return self.executor.finished

    def _heredoc(self, delimiter: str, quoted: bool) -> str:
        return read_heredoc(delimiter, quoted, self.env, self.last_status,
                            self._input)

    def evaluate(self, line: str) -> bool:
        """Run one command line; return whether the shell should stop."""
        try:
            tokens = tokenize(line)
            if not tokens:
                return False
            tree = parse(tokens, self._heredoc)
        except (UnclosedQuoteError, ShellSyntaxError) as exc:
            print(f"{PROGRAM_NAME}: {exc}", file=sys.stderr)
            self.last_status = exc.status
            return False
        self.executor.execute(tree)
        return self.finished

    def _read_line(self, stdin: TextIO) -> str | None:
        if self.interactive and stdin is sys.stdin:
            try:
                return input(PROMPT)
            except EOFError:
                return None
        line = stdin.readline()
        if line == "":
            return None
        return line[:-1] if line.endswith("\n") else line

    def run(self, stdin: TextIO | None = None) -> int:
        """Read and run lines from ``stdin`` until end of input; return the last status."""
        stdin = sys.stdin if stdin is None else stdin
        self._input = stdin
        install_repl_handlers(self.interactive)
        try:
            while True:
                try:
                    line = self._read_line(stdin)
                except KeyboardInterrupt:
                    take_pending_signal()
                    self.last_status = INTERRUPTED_STATUS
                    continue
                if take_pending_signal() == signal.SIGINT:
                    self.last_status = INTERRUPTED_STATUS
                if line is None:
                    break
                try:
                    if self.evaluate(line):
                        break
                except KeyboardInterrupt:
                    take_pending_signal()
                    self.last_status = INTERRUPTED_STATUS
        finally:
            self._input = None
            if self.interactive:
                sys.stderr.write("exit\n")
                sys.stderr.flush()
        return self.last_status


def main(argv: list[str] | None = None) -> int:
    """Start the shell; it takes no arguments."""
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        print(f"{PROGRAM_NAME}: usage: {PROGRAM_NAME} (no arguments)", file=sys.stderr)
        return USAGE_STATUS
    shell = Shell(os.environ, sys.stdin.isatty())
    return shell.run(sys.stdin)