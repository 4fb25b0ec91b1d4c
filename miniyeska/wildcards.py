"""Pathname expansion of ``*`` against the entries of a directory."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable

from .atoms import AtomType, Word

PatternItem = tuple[AtomType, str]


def _items(pattern: Word | Iterable[PatternItem]) -> list[PatternItem]:
    if isinstance(pattern, Word):
        return pattern.chars()
    return list(pattern)


def _regex(items: list[PatternItem]) -> re.Pattern[str]:
    parts: list[str] = []
    previous_wild = False
    for kind, c in items:
        if kind is AtomType.WILD:
            if not previous_wild:
                parts.append(".*")
            previous_wild = True
        else:
            parts.append(re.escape(c))
            previous_wild = False
    return re.compile("".join(parts), re.DOTALL)


def wildcard_match(name: str, pattern: Word | Iterable[PatternItem]) -> bool:
    """Whether the directory entry ``name`` matches ``pattern``.

    ``.`` and ``..`` never match, and other hidden names only match a
    pattern that starts with a literal dot.
    """
    items = _items(pattern)
    if name.startswith(".") and (
            name in (".", "..") or (items and items[0][1] != ".")):
        return False
    return _regex(items).fullmatch(name) is not None


def _pattern_start(items: list[PatternItem]) -> list[PatternItem] | None:
    k = 0
    while (k + 1 < len(items) and items[k][1] == "."
           and items[k + 1][1] == "/"):
        k += 2
        while k < len(items) and items[k][1] == "/":
            k += 1
    rest = items[k:]
    if any(c == "/" for _, c in rest):
        return None
    return rest


def expand_wildcards(word: Word, directory: str | os.PathLike[str] = ".") -> list[str]:
    """Return the entries of ``directory`` matching ``word``, in byte order.

    Leading ``./`` is ignored; a pattern holding any other ``/``, an
    unreadable directory or no match leaves the word as it is.
    """
    items = _pattern_start(word.chars())
    matches: list[str] = []
    if items is not None:
        try:
            names = os.listdir(directory)
        except OSError:
            names = []
        matches = sorted(
            (name for name in names if wildcard_match(name, items)),
            key=os.fsencode,
        )
    return matches or [word.literal()]