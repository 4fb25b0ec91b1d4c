"""Parameter and wildcard expansion of a single word."""

from __future__ import annotations

from collections.abc import Mapping

from .atoms import AtomType, WordBuilder
from .env import Environment
from .lexer import Segment, SegmentType, Token
from .wildcards import expand_wildcards

_SPACES = frozenset(" \t\n\v\f\r")


def _split_value(builder: WordBuilder, value: str) -> None:
    i = 0
    start = 0
    n = len(value)
    while i < n:
        c = value[i]
        if c in _SPACES:
            if i > start:
                builder.append(AtomType.LIT, value[start:i])
            if builder.words[-1].atoms:
                builder.words[-1].finish = True
            while i < n and value[i] in _SPACES:
                i += 1
            start = i
        elif c == "*":
            if i > start:
                builder.append(AtomType.LIT, value[start:i])
            start = i
            while i < n and value[i] == "*":
                i += 1
            builder.append(AtomType.WILD, "", i - start)
            start = i
        else:
            i += 1
    if i > start and value[start] not in _SPACES:
        builder.append(AtomType.LIT, value[start:i])


def _solve_param(
    builder: WordBuilder,
    segment: Segment,
    env: Environment | Mapping[str, str],
    last_status: int,
) -> None:
    if segment.text == "?":
        builder.append(AtomType.LIT, str(last_status))
        return
    value = env.get(segment.text)
    if not value:
        return
    if segment.quoted or builder.words[-1].eq:
        builder.append(AtomType.LIT, value)
    else:
        _split_value(builder, value)


def expand_word(
    token: Token,
    env: Environment | Mapping[str, str],
    last_status: int,
    is_assign: bool = False,
) -> list[str]:
    """Expand ``token`` into the list of fields it produces.

    Unquoted parameters are split on blanks, and fields holding unquoted
    ``*`` are matched against the current directory. With ``is_assign``,
    what follows ``NAME=`` is neither split nor matched.
    """
    builder = WordBuilder(is_assign)
    builder.new_word()
    for segment in token.segments:
        if segment.type is SegmentType.TEXT:
            builder.append(AtomType.LIT, segment.text)
        elif segment.type is SegmentType.WILDCARD:
            builder.append(AtomType.WILD, "", 1)
        else:
            _solve_param(builder, segment, env, last_status)
    if not builder.words[0].atoms:
        return []
    last = builder.words[-1]
    fields: list[str] = []
    for word in builder.words:
        if word.wild and not last.eq:
            fields.extend(expand_wildcards(word))
        else:
            fields.append(word.literal())
    return fields