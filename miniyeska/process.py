"""Turning a child's end into the shell's exit status."""

from __future__ import annotations

import signal
import sys
from typing import TextIO


def exit_status(returncode: int | None, out: TextIO | None = None) -> int:
    """Return the shell status for a finished child.

    ``returncode`` follows :mod:`subprocess`: negative values are the signal
    that killed the child, giving ``128 + signal``; a quit signal also
    prints ``Quit`` to ``out``. An unknown end (``None``) gives 1.
    """
    if returncode is None:
        return 1
    if returncode >= 0:
        return returncode & 0xFF
    sig = -returncode
    if sig == signal.SIGQUIT:
        out = sys.stdout if out is None else out
        out.write("Quit\n")
        out.flush()
    return (128 + sig) & 0xFF