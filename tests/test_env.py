import os

from miniyeska.env import Environment, init_environment


def test_init_from_strings_keeps_order_and_adds_pwd():
    env = init_environment(["A=1", "B=two", "PATH=/bin:/usr/bin"], "/somewhere")
    assert list(env) == ["A", "B", "PATH", "PWD"]
    assert env.get("A") == "1"
    assert env.get("PWD") == "/somewhere"


def test_value_split_at_first_equals():
    env = init_environment(["X=a=b=c"], "/d")
    assert env.get("X") == "a=b=c"


def test_entries_without_equals_are_skipped():
    env = init_environment(["NOVALUE", "Y=1"], "/d")
    assert "NOVALUE" not in env
    assert env.get("Y") == "1"


def test_existing_pwd_is_replaced_in_place():
    env = init_environment(["PWD=/old", "Z=9"], "/new")
    assert list(env) == ["PWD", "Z"]
    assert env.get("PWD") == "/new"


def test_init_from_mapping():
    env = init_environment({"K": "v"}, "/x")
    assert sorted(env.as_dict().items()) == [("K", "v"), ("PWD", "/x")]


def test_default_cwd_is_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = init_environment([], None)
    assert env.get("PWD") == os.getcwd()


def test_upsert_and_remove():
    env = Environment()
    env.upsert("A", "1")
    env.upsert("B", "2")
    env.upsert("A", "3")
    assert list(env) == ["A", "B"]
    assert env.get("A") == "3"
    assert env.remove("A") is True
    assert env.remove("A") is False
    assert env.get("A") is None
    assert len(env) == 1


def test_path_lookup():
    env = Environment({"PATH": "/bin"})
    assert env.path() == "/bin"
    env.remove("PATH")
    assert env.path() is None


def test_as_dict_is_a_copy():
    env = Environment({"A": "1"})
    copy = env.as_dict()
    copy["A"] = "changed"
    assert env.get("A") == "1"