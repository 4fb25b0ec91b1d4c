"""Build a syntax tree from tokens."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .heredoc import is_quoted_word, simple_expansion
from .lexer import Token, TokenType


class RedirType(Enum):
    """Kind of redirection."""

    INFILE = auto()
    OUTFILE = auto()
    APPEND = auto()
    HEREDOC = auto()


@dataclass
class Redirection:
    """A redirection; ``word`` names the file, ``heredoc`` holds a document body."""

    type: RedirType
    word: Token | None = None
    heredoc: str | None = None


@dataclass
class Command:
    """A simple command: its words and redirections in order."""

    words: list[Token] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)


@dataclass
class Subshell:
    """A parenthesised list with its own redirections."""

    child: Node
    redirections: list[Redirection] = field(default_factory=list)


class OperatorType(Enum):
    """Binary operators."""

    PIPE = auto()
    AND_IF = auto()
    OR_IF = auto()


@dataclass
class Operator:
    """A pipe, ``&&`` or ``||`` joining two nodes."""

    type: OperatorType
    left: Node
    right: Node

    @property
    def wait_count(self) -> int:
        """Number of processes a pipeline starts; 2 for logical operators."""
        if self.type is not OperatorType.PIPE:
            return 2
        count = 0
        if isinstance(self.left, Operator) and self.left.type is OperatorType.PIPE:
            count += self.left.wait_count
        elif isinstance(self.left, (Command, Subshell)):
            count += 1
        if isinstance(self.right, (Command, Subshell)):
            count += 1
        return count


Node = Union[Command, Subshell, Operator]

HeredocHandler = Callable[[str, bool], str]


class ShellSyntaxError(SyntaxError):
    """The token sequence does not form a valid command line."""

    status = 2

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"syntax error near unexpected token `{token}'")


_REDIR_TYPES = {
    TokenType.INFILE: RedirType.INFILE,
    TokenType.OUTFILE: RedirType.OUTFILE,
    TokenType.APPEND: RedirType.APPEND,
    TokenType.HEREDOC: RedirType.HEREDOC,
}
_LOGICAL = {
    TokenType.AND_IF: OperatorType.AND_IF,
    TokenType.OR_IF: OperatorType.OR_IF,
}
_INPUTS = (RedirType.INFILE, RedirType.HEREDOC)


def _unexpected(token: Token | None) -> ShellSyntaxError:
    return ShellSyntaxError("newline" if token is None else token.type.value)


class _Parser:
    def __init__(self, tokens: list[Token], heredoc_handler: HeredocHandler) -> None:
        self.tokens = tokens
        self.pos = 0
        self.heredoc_handler = heredoc_handler

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def and_or(self) -> Node:
        node = self.pipeline()
        while (tok := self.peek()) is not None and tok.type in _LOGICAL:
            self.pos += 1
            node = Operator(_LOGICAL[tok.type], node, self.pipeline())
        return node

    def pipeline(self) -> Node:
        node = self.command_or_subshell()
        while (tok := self.peek()) is not None and tok.type is TokenType.PIPE:
            self.pos += 1
            node = Operator(OperatorType.PIPE, node, self.command_or_subshell())
        return node

    def command_or_subshell(self) -> Node:
        tok = self.peek()
        if tok is not None and tok.type is TokenType.LPAREN:
            return self.subshell()
        return self.command()

    def _redirection_word(self) -> Token:
        word = self.peek()
        if word is None or word.type is not TokenType.WORD:
            raise _unexpected(word)
        self.pos += 1
        return word

    def command(self) -> Command:
        tok = self.peek()
        if tok is None or (tok.type is not TokenType.WORD and tok.type not in _REDIR_TYPES):
            raise _unexpected(tok)
        cmd = Command()
        pending: list[tuple[Token, Token]] = []
        while (tok := self.peek()) is not None and (
                tok.type is TokenType.WORD or tok.type in _REDIR_TYPES):
            self.pos += 1
            if tok.type is TokenType.WORD:
                cmd.words.append(tok)
            else:
                pending.append((tok, self._redirection_word()))
        cmd.redirections = self.build_redirections(pending)
        return cmd

    def subshell(self) -> Subshell:
        self.pos += 1
        child = self.and_or()
        tok = self.peek()
        if tok is None or tok.type is not TokenType.RPAREN:
            raise _unexpected(tok)
        self.pos += 1
        return Subshell(child, self.build_redirections(self.stream_pairs()))

    def stream_pairs(self) -> Iterator[tuple[Token, Token]]:
        while (op := self.peek()) is not None and op.type in _REDIR_TYPES:
            self.pos += 1
            yield op, self._redirection_word()

    def build_redirections(self, pairs: Iterable[tuple[Token, Token]]) -> list[Redirection]:
        result: list[Redirection] = []
        last_input: Redirection | None = None
        for op, word in pairs:
            redir = Redirection(_REDIR_TYPES[op.type], word)
            if redir.type is RedirType.HEREDOC:
                redir.heredoc = self.heredoc_handler(
                    simple_expansion(word), is_quoted_word(word))
                redir.word = None
            result.append(redir)
            if redir.type in _INPUTS:
                if last_input is not None and last_input.type is RedirType.HEREDOC:
                    result = [r for r in result if r is not last_input]
                last_input = redir
        return result


def parse(tokens: list[Token], heredoc_handler: HeredocHandler) -> Node:
    """Parse ``tokens`` into a tree.

    ``heredoc_handler(delimiter, quoted)`` is called for each here-document,
    as soon as it is met, and returns its body. Raises
    :class:`ShellSyntaxError` on malformed input.
    """
    parser = _Parser(list(tokens), heredoc_handler)
    node = parser.and_or()
    leftover = parser.peek()
    if leftover is not None:
        raise _unexpected(leftover)
    return node