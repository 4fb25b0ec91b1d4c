"""Split a command line into words and operators."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto


class SegmentType(Enum):
    """Kind of a piece of a word."""

    TEXT = auto()
    PARAM = auto()
    WILDCARD = auto()


@dataclass(frozen=True)
class Segment:
    """A piece of a word: literal text, a parameter name or a ``*``."""

    type: SegmentType
    text: str
    quoted: bool = False
    double: bool = False
    start: int = 0

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class TokenType(Enum):
    """Token kinds; operator values are their spelling."""

    WORD = ""
    PIPE = "|"
    OR_IF = "||"
    AND_IF = "&&"
    INFILE = "<"
    OUTFILE = ">"
    HEREDOC = "<<"
    APPEND = ">>"
    LPAREN = "("
    RPAREN = ")"


@dataclass
class Token:
    """A word made of segments, or an operator."""

    type: TokenType
    segments: list[Segment] = field(default_factory=list)
    raw: str = ""

    @property
    def text(self) -> str:
        """The word as written, or the operator's spelling."""
        if self.type is TokenType.WORD:
            return self.raw
        return self.type.value


class UnclosedQuoteError(ValueError):
    """The line ended inside a quoted string."""

    status = 2

    def __init__(self, quote: str) -> None:
        self.quote = quote
        super().__init__(f"unexpected EOF while looking for matching `{quote}'")


_SPACES = frozenset(" \t\n\v\f\r")
_WORD_BREAKS = frozenset("|<>*()'\"")
_DOUBLE_OPS = {
    "||": TokenType.OR_IF,
    "&&": TokenType.AND_IF,
    "<<": TokenType.HEREDOC,
    ">>": TokenType.APPEND,
}
_SINGLE_OPS = {
    "|": TokenType.PIPE,
    "<": TokenType.INFILE,
    ">": TokenType.OUTFILE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


def _is_space(c: str) -> bool:
    return c in _SPACES


def _is_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_name_char(c: str) -> bool:
    return c == "_" or (c.isascii() and c.isalnum())


def is_param_start(text: str, pos: int = 0) -> bool:
    """Whether a parameter reference (``$?``, ``$_``, ``$NAME``) starts at ``pos``."""
    if text[pos:pos + 1] != "$":
        return False
    following = text[pos + 1:pos + 2]
    return following in ("?", "_") or _is_alpha(following)


class _State(Enum):
    GENERAL = auto()
    SINGLE_Q = auto()
    DOUBLE_Q = auto()
    PARAM = auto()
    EOL = auto()
    DIE = auto()


class _Lexer:
    def __init__(self, line: str) -> None:
        self.line = line
        self.pos = 0
        self.tokens: list[Token] = []
        self.word: Token | None = None
        self.prev = _State.GENERAL
        self.handlers: dict[_State, Callable[[], _State]] = {
            _State.GENERAL: self._general,
            _State.SINGLE_Q: self._single_quote,
            _State.DOUBLE_Q: self._double_quote,
            _State.PARAM: self._param,
        }

    def run(self) -> list[Token]:
        state = _State.GENERAL
        while state not in (_State.EOL, _State.DIE):
            following = self.handlers[state]()
            self.prev = state
            state = following
        self._emit_word()
        if state is _State.DIE:
            raise UnclosedQuoteError("'" if self.prev is _State.SINGLE_Q else '"')
        return self.tokens

    def _char(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.line[index:index + 1]

    def _advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, len(self.line))

    def _start_word(self) -> None:
        if self.word is None:
            self.word = Token(TokenType.WORD)

    def _add_segment(self, kind: SegmentType, start: int, end: int,
                     quoted: bool = False, double: bool = False) -> None:
        assert self.word is not None
        self.word.segments.append(
            Segment(kind, self.line[start:end], quoted, double, start))

    def _emit_word(self) -> None:
        if self.word is None:
            return
        segments = self.word.segments
        if segments:
            head, tail = segments[0], segments[-1]
            first = head.start
            if head.type is SegmentType.PARAM:
                first -= 1
            if head.quoted:
                first -= 1
            last = tail.end + (1 if tail.quoted else 0)
            self.word.raw = self.line[first:last]
        self.tokens.append(self.word)
        self.word = None

    def _emit_op(self, kind: TokenType) -> _State:
        self._emit_word()
        self.tokens.append(Token(kind))
        self._advance(len(kind.value))
        return _State.GENERAL

    def _general(self) -> _State:
        if _is_space(self._char()):
            self._emit_word()
            while _is_space(self._char()):
                self._advance()
        c = self._char()
        if c == "":
            return _State.EOL
        pair = self.line[self.pos:self.pos + 2]
        if pair in _DOUBLE_OPS:
            return self._emit_op(_DOUBLE_OPS[pair])
        if c in _SINGLE_OPS:
            return self._emit_op(_SINGLE_OPS[c])
        if c == "'":
            self._advance()
            return _State.SINGLE_Q
        if c == '"':
            self._advance()
            return _State.DOUBLE_Q
        if is_param_start(self.line, self.pos):
            self._start_word()
            self._advance()
            return _State.PARAM
        if c == "*":
            self._start_word()
            self._add_segment(SegmentType.WILDCARD, self.pos, self.pos + 1)
            self._advance()
            return _State.GENERAL
        return self._general_word()

    def _general_word(self) -> _State:
        start = self.pos
        self._start_word()
        while (c := self._char()) != "":
            if (_is_space(c) or c in _WORD_BREAKS
                    or (c == "&" and self._char(1) == "&")
                    or is_param_start(self.line, self.pos)):
                break
            self._advance()
        self._add_segment(SegmentType.TEXT, start, self.pos)
        return _State.GENERAL

    def _single_quote(self) -> _State:
        start = self.pos
        while self._char() not in ("", "'"):
            self._advance()
        if self._char() == "":
            return _State.DIE
        self._start_word()
        self._add_segment(SegmentType.TEXT, start, self.pos, quoted=True)
        self._advance()
        return _State.GENERAL

    def _double_quote(self) -> _State:
        start = self.pos
        while self._char() not in ("", '"'):
            if is_param_start(self.line, self.pos):
                break
            self._advance()
        if self._char() == "":
            return _State.DIE
        self._start_word()
        self._add_segment(SegmentType.TEXT, start, self.pos, quoted=True, double=True)
        self._advance()
        if self.line[self.pos - 1] == "$":
            return _State.PARAM
        return _State.GENERAL

    def _param(self) -> _State:
        start = self.pos
        if self._char() == "?":
            self._advance()
        else:
            while _is_name_char(self._char()):
                self._advance()
        in_double = self.prev is _State.DOUBLE_Q
        self._add_segment(SegmentType.PARAM, start, self.pos,
                          quoted=in_double, double=in_double)
        return self.prev


def tokenize(line: str) -> list[Token]:
    """Split ``line`` into tokens.

    Raises :class:`UnclosedQuoteError` when a quote is left open.
    """
    return _Lexer(line).run()