import pytest

from miniyeska.parser import RedirType
from miniyeska.redirections import (
    RedirectionError,
    open_redirection,
    resolve_redirections,
)


def test_outfile_creates_and_truncates(tmp_path):
    target = tmp_path / "out"
    target.write_bytes(b"old content")
    with open_redirection((RedirType.OUTFILE, str(target))) as f:
        f.write(b"new")
    assert target.read_bytes() == b"new"


def test_append_keeps_content(tmp_path):
    target = tmp_path / "log"
    target.write_bytes(b"one\n")
    with open_redirection((RedirType.APPEND, str(target))) as f:
        f.write(b"two\n")
    assert target.read_bytes() == b"one\ntwo\n"


def test_infile_reads(tmp_path):
    source = tmp_path / "in"
    source.write_bytes(b"data")
    with open_redirection((RedirType.INFILE, str(source))) as f:
        assert f.read() == b"data"


def test_heredoc_reads_body():
    with open_redirection((RedirType.HEREDOC, "line\n")) as f:
        assert f.read() == b"line\n"


def test_missing_infile_raises(tmp_path):
    missing = str(tmp_path / "missing")
    with pytest.raises(RedirectionError) as info:
        open_redirection((RedirType.INFILE, missing))
    assert info.value.name == missing
    assert info.value.status == 1


def test_resolve_nothing():
    assert resolve_redirections([]) == (None, None)


def test_last_output_wins(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    stdin, stdout = resolve_redirections([
        (RedirType.OUTFILE, str(first)),
        (RedirType.OUTFILE, str(second)),
    ])
    assert stdin is None
    stdout.write(b"x")
    stdout.close()
    assert first.read_bytes() == b""
    assert second.read_bytes() == b"x"


def test_last_input_wins(tmp_path):
    source = tmp_path / "in"
    source.write_bytes(b"file")
    stdin, stdout = resolve_redirections([
        (RedirType.INFILE, str(source)),
        (RedirType.HEREDOC, "doc"),
    ])
    assert stdout is None
    assert stdin.read() == b"doc"
    stdin.close()


def test_error_stops_processing(tmp_path):
    missing = str(tmp_path / "missing")
    later = tmp_path / "later"
    with pytest.raises(RedirectionError):
        resolve_redirections([
            (RedirType.INFILE, missing),
            (RedirType.OUTFILE, str(later)),
        ])
    assert not later.exists()