"""Opening redirection targets and choosing the final input and output."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from typing import BinaryIO

from .command_expansion import ExpandedRedirection
from .parser import RedirType

_OUTPUT_FLAGS = {
    RedirType.OUTFILE: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    RedirType.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}
_INPUTS = (RedirType.INFILE, RedirType.HEREDOC)


class RedirectionError(Exception):
    """A redirection target could not be opened."""

    status = 1

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}")


def open_redirection(redirection: ExpandedRedirection) -> BinaryIO:
    """Open one redirection and return a binary file object for it.

    Output files are created with mode 0644; a here-document is served from
    a temporary file positioned at its start.
    """
    kind, target = redirection
    if kind is RedirType.HEREDOC:
        document = tempfile.TemporaryFile()
        document.write(target.encode("utf-8", "surrogateescape"))
        document.seek(0)
        return document
    try:
        if kind is RedirType.INFILE:
            return open(target, "rb")
        fd = os.open(target, _OUTPUT_FLAGS[kind], 0o644)
    except OSError as exc:
        raise RedirectionError(target, exc.strerror or str(exc)) from exc
    return os.fdopen(fd, "wb")


def resolve_redirections(
    redirections: Iterable[ExpandedRedirection],
) -> tuple[BinaryIO | None, BinaryIO | None]:
    """Open redirections in order and return the final ``(stdin, stdout)``.

    The last input and the last output win; earlier ones are closed once
    replaced. ``None`` means the standard stream is left alone. On error
    everything opened so far is closed and :class:`RedirectionError` raised.
    """
    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None
    try:
        for redirection in redirections:
            opened = open_redirection(redirection)
            if redirection[0] in _INPUTS:
                if stdin is not None:
                    stdin.close()
                stdin = opened
            else:
                if stdout is not None:
                    stdout.close()
                stdout = opened
    except RedirectionError:
        for stream in (stdin, stdout):
            if stream is not None:
                stream.close()
        raise
    return stdin, stdout