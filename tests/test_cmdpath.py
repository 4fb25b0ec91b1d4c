import pytest

from miniyeska.cmdpath import CommandNotFoundError, resolve_cmd_path


def make_file(directory, name):
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / name
    target.write_text("")
    return target


def test_name_with_slash_is_returned_unchanged():
    assert resolve_cmd_path("./nope/prog", None) == "./nope/prog"


def test_found_in_path(tmp_path):
    make_file(tmp_path / "bin", "tool")
    assert resolve_cmd_path("tool", str(tmp_path / "bin")) == f"{tmp_path / 'bin'}/tool"


def test_first_match_wins(tmp_path):
    make_file(tmp_path / "one", "tool")
    make_file(tmp_path / "two", "tool")
    path_value = f"{tmp_path / 'two'}:{tmp_path / 'one'}"
    assert resolve_cmd_path("tool", path_value) == f"{tmp_path / 'two'}/tool"


def test_empty_components_are_skipped(tmp_path):
    make_file(tmp_path / "bin", "tool")
    path_value = f"::{tmp_path / 'bin'}:"
    assert resolve_cmd_path("tool", path_value) == f"{tmp_path / 'bin'}/tool"


def test_missing_command_raises(tmp_path):
    (tmp_path / "bin").mkdir()
    with pytest.raises(CommandNotFoundError) as info:
        resolve_cmd_path("absent", str(tmp_path / "bin"))
    assert info.value.command == "absent"
    assert info.value.status == 127


@pytest.mark.parametrize("path_value", [None, ""])
def test_no_path_raises(path_value):
    with pytest.raises(CommandNotFoundError):
        resolve_cmd_path("ls", path_value)