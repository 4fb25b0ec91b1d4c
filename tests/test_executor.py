import os
import signal

import pytest

from miniyeska.cmdpath import CommandNotFoundError
from miniyeska.command_expansion import AmbiguousRedirectError
from miniyeska.env import Environment
from miniyeska.executor import Executor
from miniyeska.lexer import tokenize
from miniyeska.parser import parse
from miniyeska.redirections import RedirectionError


def _no_heredoc(delimiter, quoted):
    return ""


def run(executor, line, heredoc=_no_heredoc):
    return executor.execute(parse(tokenize(line), heredoc))


@pytest.fixture
def executor(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return Executor(Environment(dict(os.environ)), interactive=False)


def _say(executor, argv, out):
    out.write(" ".join(argv[1:]) + "\n")
    return 0


def test_simple_command_output_redirected(executor, tmp_path):
    assert run(executor, "echo hello > out") == 0
    assert (tmp_path / "out").read_text() == "hello\n"


def test_append_redirection(executor, tmp_path):
    assert run(executor, "echo one > out") == 0
    assert run(executor, "echo two >> out") == 0
    assert (tmp_path / "out").read_text() == "one\ntwo\n"


def test_and_runs_right_only_after_success(executor, tmp_path):
    assert run(executor, "true && echo yes > a") == 0
    assert (tmp_path / "a").read_text() == "yes\n"
    assert run(executor, "false && echo no > b") == 1
    assert not (tmp_path / "b").exists()


def test_or_runs_right_only_after_failure(executor, tmp_path):
    assert run(executor, "false || echo yes > a") == 0
    assert (tmp_path / "a").read_text() == "yes\n"
    assert run(executor, "true || echo no > b") == 0
    assert not (tmp_path / "b").exists()


def test_pipeline_connects_members(executor, tmp_path):
    assert run(executor, "printf 'a\\nb\\n' | wc -l > out") == 0
    assert int((tmp_path / "out").read_text().strip()) == 2


def test_three_member_pipeline(executor, tmp_path):
    assert run(executor, "echo abc | cat | cat > out") == 0
    assert (tmp_path / "out").read_text() == "abc\n"


def test_pipeline_status_is_that_of_last_member(executor):
    assert run(executor, "true | false") == 1
    assert run(executor, "false | true") == 0


def test_command_not_found(executor, capsys):
    assert run(executor, "nosuchcommandxyz") == CommandNotFoundError.status
    assert "nosuchcommandxyz: command not found" in capsys.readouterr().err


def test_missing_input_file(executor, capsys):
    assert run(executor, "cat < missing.txt") == RedirectionError.status
    assert "missing.txt" in capsys.readouterr().err


def test_ambiguous_redirect(executor, tmp_path, capsys):
    executor.env.upsert("F", "a b")
    assert run(executor, "echo x > $F") == AmbiguousRedirectError.status
    assert "ambiguous redirect" in capsys.readouterr().err
    assert not (tmp_path / "a").exists()


def test_heredoc_feeds_command(executor, tmp_path):
    seen = []

    def handler(delimiter, quoted):
        seen.append((delimiter, quoted))
        return "line one\n"

    assert run(executor, "cat << EOF > out", handler) == 0
    assert seen == [("EOF", False)]
    assert (tmp_path / "out").read_text() == "line one\n"


def test_last_status_is_expanded(executor, tmp_path):
    assert run(executor, "false") == 1
    assert run(executor, "echo $? > out") == 0
    assert (tmp_path / "out").read_text() == "1\n"


def test_empty_command_keeps_status(executor, tmp_path):
    executor.last_status = 5
    assert run(executor, "> out") == 5
    assert not (tmp_path / "out").exists()


def test_exit_code_of_external(executor):
    assert run(executor, "sh -c 'exit 7'") == 7


def test_killed_by_signal(executor):
    assert run(executor, "sh -c 'kill -TERM $$'") == 128 + signal.SIGTERM


def test_subshell_with_redirection(executor, tmp_path):
    assert run(executor, "(echo sub) > out") == 0
    assert (tmp_path / "out").read_text() == "sub\n"
    assert run(executor, "(false)") == 1


def test_subshell_does_not_change_parent_state(executor):
    def setvar(ex, argv, out):
        ex.env.upsert("XVAR", "1")
        return 0

    executor.builtins["setvar"] = setvar
    run(executor, "(setvar)")
    assert "XVAR" not in executor.env
    run(executor, "setvar")
    assert executor.env.get("XVAR") == "1"


def test_builtin_output_redirected(executor, tmp_path):
    executor.builtins["say"] = _say
    assert run(executor, "say hi there > out") == 0
    assert (tmp_path / "out").read_text() == "hi there\n"


def test_builtin_in_pipeline(executor, tmp_path):
    executor.builtins["say"] = _say
    assert run(executor, "say piped | cat > out") == 0
    assert (tmp_path / "out").read_text() == "piped\n"


def test_builtin_status_is_kept(executor):
    executor.builtins["fail"] = lambda ex, argv, out: 3
    assert run(executor, "fail") == 3


def test_finished_stops_list(executor, tmp_path):
    def quit_builtin(ex, argv, out):
        ex.finished = True
        return 0

    executor.builtins["quit"] = quit_builtin
    run(executor, "quit && echo x > out")
    assert executor.finished is True
    assert not (tmp_path / "out").exists()


def test_execute_rejects_unknown_node(executor):
    with pytest.raises(TypeError):
        executor.execute("echo")