from __future__ import annotations

import json
from pathlib import Path

import pytest

from pic_sorter.config import AppSettings, ConfigError, load_settings, save_settings


def test_defaults_when_no_file(isolated_config: Path) -> None:
    settings = load_settings()

    assert settings == AppSettings()
    assert settings.output == "sort.sh"
    assert settings.max_images_per_root == 500
    assert not isolated_config.exists()


def test_save_and_load_round_trip(isolated_config: Path) -> None:
    settings = AppSettings(output="/tmp/triage.sh", recurse=True, bindings={"k": "/tmp/keep"})

    save_settings(settings)

    assert json.loads(isolated_config.read_text(encoding="utf-8"))["bindings"] == {"k": "/tmp/keep"}
    assert load_settings() == settings


def test_unknown_keys_are_ignored(isolated_config: Path) -> None:
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"recurse": True, "theme": "dark"}), encoding="utf-8")

    assert load_settings() == AppSettings(recurse=True)


def test_broken_file_falls_back_to_defaults(isolated_config: Path) -> None:
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("{not json", encoding="utf-8")

    assert load_settings() == AppSettings()


def test_save_failure_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr("pic_sorter.config.get_config_path", lambda: blocker / "settings.json")

    with pytest.raises(ConfigError):
        save_settings(AppSettings())


def test_binding_pairs_expand_home() -> None:
    settings = AppSettings(bindings={"a": "~/cats"})
    assert settings.binding_pairs() == [("a", Path("~/cats").expanduser())]
