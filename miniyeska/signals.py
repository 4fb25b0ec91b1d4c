"""Signal dispositions for the prompt, for waiting on children and for children."""

from __future__ import annotations

import signal
import sys
import threading
from types import FrameType

_pending = 0


def _record(signum: int, frame: FrameType | None) -> None:
    global _pending
    _pending = signum


def _repl_sigint(signum: int, frame: FrameType | None) -> None:
    _record(signum, frame)
    sys.stdout.write("\n")
    sys.stdout.flush()
    raise KeyboardInterrupt


def _can_install(interactive: bool) -> bool:
    return interactive and threading.current_thread() is threading.main_thread()


def take_pending_signal() -> int:
    """Return the last signal caught since the previous call (0 if none) and clear it."""
    global _pending
    signum, _pending = _pending, 0
    return signum


def install_repl_handlers(interactive: bool) -> None:
    """At the prompt, interrupt abandons the current line and quit is ignored.

    An interrupt that arrived while waiting for a child is consumed here and
    ends the line it interrupted.
    """
    global _pending
    if not _can_install(interactive):
        return
    if _pending == signal.SIGINT:
        _pending = 0
        sys.stdout.write("\n")
        sys.stdout.flush()
    signal.signal(signal.SIGINT, _repl_sigint)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def install_wait_handlers(interactive: bool) -> None:
    """While waiting for a child, interrupts are only recorded and quit is ignored."""
    if not _can_install(interactive):
        return
    signal.signal(signal.SIGINT, _record)
    signal.signal(signal.SIGQUIT, signal.SIG_IGN)


def restore_default_handlers(interactive: bool) -> None:
    """Give interrupt and quit their default behaviour, as a child expects."""
    if not _can_install(interactive):
        return
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    signal.signal(signal.SIGQUIT, signal.SIG_DFL)