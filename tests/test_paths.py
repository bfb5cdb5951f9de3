from __future__ import annotations

from pathlib import Path

import pytest

from pic_sorter.actions import MkDir
from pic_sorter.paths import BindingError, parse_binding_arg, parse_key_mapping


def test_existing_file_destination_is_rejected(tmp_path: Path) -> None:
    existing = tmp_path / "existingFile"
    existing.write_text("not a directory", encoding="utf-8")

    with pytest.raises(BindingError, match="existingFile"):
        parse_key_mapping([("a", existing)])


def test_missing_destination_is_planned(tmp_path: Path) -> None:
    new_dir = tmp_path / "newDir"

    mapping, actions = parse_key_mapping([("a", new_dir)])

    assert mapping == {"a": new_dir}
    assert actions == [MkDir(new_dir)]
    assert not new_dir.exists()


def test_existing_directory_needs_no_mkdir(tmp_path: Path) -> None:
    mapping, actions = parse_key_mapping([("k", tmp_path)])
    assert mapping == {"k": tmp_path}
    assert actions == []


def test_mkdir_actions_follow_binding_order(tmp_path: Path) -> None:
    first, second = tmp_path / "first", tmp_path / "second"

    _, actions = parse_key_mapping([("x", second), ("y", tmp_path), ("z", first)])

    assert actions == [MkDir(second), MkDir(first)]


def test_later_binding_wins(tmp_path: Path) -> None:
    cats, dogs = tmp_path / "cats", tmp_path / "dogs"

    mapping, actions = parse_key_mapping([("a", cats), ("a", dogs)])

    assert mapping == {"a": dogs}
    assert actions == [MkDir(cats), MkDir(dogs)]


@pytest.mark.parametrize("key", ["", "ab", " ", "\t"])
def test_bad_trigger_is_rejected(key: str, tmp_path: Path) -> None:
    with pytest.raises(BindingError):
        parse_key_mapping([(key, tmp_path)])


def test_parse_binding_arg() -> None:
    key, path = parse_binding_arg("c=/tmp/cats=and=dogs")
    assert key == "c"
    assert path == Path("/tmp/cats=and=dogs")


def test_parse_binding_arg_expands_home() -> None:
    _, path = parse_binding_arg("k=~/keep")
    assert path == Path("~/keep").expanduser()


@pytest.mark.parametrize("value", ["c", "c=", "=path", "cd=/tmp"])
def test_parse_binding_arg_rejects_malformed(value: str) -> None:
    with pytest.raises(BindingError):
        parse_binding_arg(value)
