"""Building blocks for expanded words: literal runs and wildcard runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class AtomType(Enum):
    """Kind of an atom; ``END`` marks the end of a word."""

    END = auto()
    LIT = auto()
    WILD = auto()


@dataclass
class Atom:
    """A literal string, or a run of ``length`` unquoted ``*`` characters."""

    type: AtomType
    value: str = ""
    length: int = 0


@dataclass
class Word:
    """One field of an expansion, made of atoms, with its assignment state."""

    atoms: list[Atom] = field(default_factory=list)
    assign: bool = False
    left: bool = False
    eq: bool = False
    wild: bool = False
    finish: bool = False

    def chars(self) -> list[tuple[AtomType, str]]:
        """Return the word one character at a time, each with its atom kind."""
        items: list[tuple[AtomType, str]] = []
        for atom in self.atoms:
            if atom.type is AtomType.WILD:
                items.extend([(AtomType.WILD, "*")] * atom.length)
            else:
                items.extend((AtomType.LIT, c) for c in atom.value)
        return items

    def literal(self) -> str:
        """Join the atoms, writing each wildcard run as ``*`` characters."""
        return "".join(
            "*" * atom.length if atom.type is AtomType.WILD else atom.value
            for atom in self.atoms
        )

    def _check_assignment(self, text: str) -> None:
        if self.eq:
            return
        for c in text:
            if self.left:
                if c == "=":
                    self.eq = True
                    return
            elif c == "_" or (c.isascii() and c.isalpha()):
                self.left = True


class WordBuilder:
    """Collects atoms into words while a single token is expanded."""

    def __init__(self, is_assign: bool = False) -> None:
        self.is_assign = is_assign
        self.words: list[Word] = []

    def new_word(self) -> Word:
        """Start a new, empty word and return it."""
        word = Word(assign=self.is_assign)
        self.words.append(word)
        return word

    def append(self, kind: AtomType, value: str = "", length: int | None = None) -> None:
        """Add an atom to the current word, starting a new word when needed.

        For literals ``length`` defaults to the length of ``value``; for
        wildcards it is the number of ``*`` and defaults to one.
        """
        if kind is AtomType.END:
            raise ValueError("cannot append an end marker")
        word = self.words[-1] if self.words else None
        if word is None or word.finish:
            word = self.new_word()
        if length is None:
            length = len(value) if kind is AtomType.LIT else 1
        atoms = word.atoms
        if kind is AtomType.WILD and atoms and atoms[-1].type is AtomType.WILD:
            atoms[-1].length += length
            return
        if kind is AtomType.LIT and length == 0 and atoms:
            return
        if atoms and atoms[0].type is AtomType.LIT and atoms[0].length == 0:
            del atoms[0]
        atom = Atom(kind, value[:length] if kind is AtomType.LIT else "", length)
        atoms.append(atom)
        if kind is AtomType.WILD and not word.eq:
            word.wild = True
        if word.assign and kind is AtomType.LIT:
            word._check_assignment(atom.value)