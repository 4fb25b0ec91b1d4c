"""Here-document delimiters and bodies."""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from typing import TextIO

from .env import PROGRAM_NAME, Environment
from .lexer import SegmentType, Token

HEREDOC_PROMPT = "> "

_PARAM = re.compile(r"\$(\?|[A-Za-z_][A-Za-z0-9_]*)", re.ASCII)


def simple_expansion(word: Token) -> str:
    """Join a word's segments with quotes removed and nothing expanded."""
    pieces = []
    for segment in word.segments:
        if segment.type is SegmentType.TEXT:
            pieces.append(segment.text)
        elif segment.type is SegmentType.PARAM:
            pieces.append("$" + segment.text)
        else:
            pieces.append("*")
    return "".join(pieces)


def literal_expansion(word: Token) -> str:
    """Return the word exactly as it was written, quotes included."""
    return word.raw


def is_quoted_word(word: Token) -> bool:
    """Whether any part of the word was quoted."""
    return any(segment.quoted for segment in word.segments)


def expand_heredoc_line(
    line: str,
    env: Environment | Mapping[str, str],
    last_status: int,
) -> str:
    """Replace ``$?`` and ``$NAME`` references in one line of a here-document."""

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == "?":
            return str(last_status)
        return env.get(name) or ""

    return _PARAM.sub(substitute, line)


def read_heredoc(
    delimiter: str,
    quoted: bool,
    env: Environment | Mapping[str, str],
    last_status: int,
    stream: TextIO | None = None,
    prompt_stream: TextIO | None = None,
) -> str:
    """Read lines from ``stream`` up to a line holding only ``delimiter``.

    Unless ``quoted``, parameters in each line are expanded. Reaching the end
    of input before the delimiter prints a warning and ends the document.
    """
    stream = sys.stdin if stream is None else stream
    prompt_stream = sys.stdout if prompt_stream is None else prompt_stream
    terminator = delimiter + "\n"
    body = []
    while True:
        prompt_stream.write(HEREDOC_PROMPT)
        prompt_stream.flush()
        line = stream.readline()
        if line == "":
            print(
                f"{PROGRAM_NAME}: warning: here-document delimited by "
                f"end-of-file (wanted `{delimiter}')",
                file=sys.stderr,
            )
            break
        if line == terminator:
            break
        body.append(line if quoted else expand_heredoc_line(line, env, last_status))
    return "".join(body)