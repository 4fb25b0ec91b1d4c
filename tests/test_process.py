import io
import signal

import pytest

from miniyeska.process import exit_status


@pytest.mark.parametrize("code", [0, 1, 127])
def test_normal_exit(code):
    assert exit_status(code, io.StringIO()) == code


def test_sigint_gives_130():
    out = io.StringIO()
    assert exit_status(-signal.SIGINT, out) == 130
    assert out.getvalue() == ""


def test_signal_adds_128():
    assert exit_status(-signal.SIGTERM, io.StringIO()) == 128 + signal.SIGTERM


def test_sigquit_prints_quit():
    out = io.StringIO()
    assert exit_status(-signal.SIGQUIT, out) == 128 + signal.SIGQUIT
    assert out.getvalue() == "Quit\n"


def test_unknown_end():
    assert exit_status(None, io.StringIO()) == 1


def test_status_fits_a_byte():
    assert exit_status(255 + 256, io.StringIO()) == 255