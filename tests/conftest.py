from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a tiny real image; the format follows ``fmt``, not the suffix."""

    def _make(path: Path, fmt: str = "PNG") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (2, 2), (255, 0, 0)).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings file into the test's temp directory."""

    config_path = tmp_path / "config" / "settings.json"
    monkeypatch.setattr("pic_sorter.config.get_config_path", lambda: config_path)
    return config_path
