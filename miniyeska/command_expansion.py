"""Expansion of a command's words and of redirection targets."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .env import Environment
from .expansion import expand_word
from .heredoc import literal_expansion
from .parser import Command, Node, Redirection, RedirType, Subshell

ExpandedRedirection = tuple[RedirType, str]
"""A redirection ready to open: its kind and its file name or document body."""

EnvLike = Environment | Mapping[str, str]


class AmbiguousRedirectError(ValueError):
    """A redirection target expanded to no field or to several fields."""

    status = 1

    def __init__(self, word: str) -> None:
        self.word = word
        super().__init__(f"{word}: ambiguous redirect")


def _expand_redirection(
    redirection: Redirection, env: EnvLike, last_status: int
) -> ExpandedRedirection:
    if redirection.type is RedirType.HEREDOC:
        return redirection.type, redirection.heredoc or ""
    if redirection.word is None:
        raise AmbiguousRedirectError("")
    fields = expand_word(redirection.word, env, last_status)
    if len(fields) != 1:
        raise AmbiguousRedirectError(literal_expansion(redirection.word))
    return redirection.type, fields[0]


def expand_redirections(
    redirections: Iterable[Redirection], env: EnvLike, last_status: int
) -> list[ExpandedRedirection]:
    """Expand every redirection target, in order.

    Here-documents keep their body. Raises :class:`AmbiguousRedirectError`
    when a file target does not expand to exactly one field.
    """
    return [_expand_redirection(r, env, last_status) for r in redirections]


def expand_command(
    command: Command, env: EnvLike, last_status: int
) -> tuple[list[str], list[ExpandedRedirection]]:
    """Expand a simple command into its argument list and redirections.

    Redirections are expanded first. When the first word expands to
    ``export``, the following words are expanded as assignments.
    """
    redirections = expand_redirections(command.redirections, env, last_status)
    argv: list[str] = []
    is_assign = False
    for index, word in enumerate(command.words):
        argv.extend(expand_word(word, env, last_status, is_assign))
        if index == 0:
            is_assign = bool(argv) and argv[0] == "export"
    return argv, redirections


def expand_child(
    node: Node, env: EnvLike, last_status: int
) -> tuple[list[str], list[ExpandedRedirection]]:
    """Expand a pipeline member: a command fully, a subshell's redirections only.

    Operators have nothing to expand and give two empty lists.
    """
    if isinstance(node, Command):
        return expand_command(node, env, last_status)
    if isinstance(node, Subshell):
        return [], expand_redirections(node.redirections, env, last_status)
    return [], []