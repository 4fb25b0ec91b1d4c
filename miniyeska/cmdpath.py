"""Locate the executable for a command name."""

from __future__ import annotations

import os


class CommandNotFoundError(LookupError):
    """No executable was found for the command."""

    status = 127

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"{command}: command not found")


def resolve_cmd_path(cmd: str, path_value: str | None) -> str:
    """Return the path to run for ``cmd``.

    A name holding ``/`` is used as it is; otherwise each non-empty directory
    of ``path_value`` is tried in order and the first existing entry wins.
    """
    if "/" in cmd:
        return cmd
    if path_value is None:
        raise CommandNotFoundError(cmd)
    for directory in filter(None, path_value.split(":")):
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.F_OK):
            return candidate
    raise CommandNotFoundError(cmd)