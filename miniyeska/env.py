"""Shell environment variables, kept in the order they were defined."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable, Iterator, Mapping

PROGRAM_NAME = "minishell"


class Environment:
    """Ordered collection of environment variables."""

    def __init__(self, variables: Mapping[str, str] | None = None) -> None:
        self._vars: dict[str, str] = dict(variables or {})

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or ``None`` when it is not set."""
        return self._vars.get(key)

    def upsert(self, key: str, value: str) -> None:
        """Set ``key`` to ``value``, keeping its position if it already exists."""
        self._vars[key] = value

    def remove(self, key: str) -> bool:
        """Remove ``key``; return whether it was present."""
        return self._vars.pop(key, None) is not None

    def as_dict(self) -> dict[str, str]:
        """Return a copy of the variables, suitable for a child process."""
        return dict(self._vars)

    def path(self) -> str | None:
        """Return the value of PATH, or ``None`` when it is not set."""
        return self._vars.get("PATH")

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"Environment({self._vars!r})"


def _entries(envp: Mapping[str, str] | Iterable[str]) -> Iterator[tuple[str, str]]:
    if isinstance(envp, Mapping):
        yield from envp.items()
        return
    for entry in envp:
        key, sep, value = entry.partition("=")
        if sep:
            yield key, value


def init_environment(
    envp: Mapping[str, str] | Iterable[str] | None = None,
    cwd: str | None = None,
) -> Environment:
    """Build the shell environment from ``envp`` and make sure PWD is set.

    ``envp`` may be a mapping or an iterable of ``KEY=VALUE`` strings; it
    defaults to the process environment. ``cwd`` defaults to the current
    working directory.
    """
    if envp is None:
        envp = os.environ
    env = Environment(dict(_entries(envp)))
    if cwd is None:
        try:
            cwd = os.getcwd()
        except OSError as exc:
            print(f"{PROGRAM_NAME}: init: getcwd: {exc.strerror}", file=sys.stderr)
            return env
    env.upsert("PWD", cwd)
    return env