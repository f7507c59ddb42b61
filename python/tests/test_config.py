"""Settings file and data-directory resolution."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from backend.config import (
    DATA_DIR_ENV,
    GameSettings,
    load_settings,
    resolve_data_dir,
    save_settings,
)
from backend.models.mode import GameMode


def test_defaults_when_no_file(tmp_path: Path) -> None:
    settings = load_settings(tmp_path)
    assert settings.size == 5
    assert settings.mode is GameMode.CLASSIC
    assert settings.data_dir == tmp_path
    assert settings.records_path == tmp_path / "records.json"


def test_save_then_load(tmp_path: Path) -> None:
    data_dir = tmp_path / "fresh"
    save_settings(GameSettings(size=7, mode=GameMode.PERFECT, data_dir=data_dir))

    saved = json.loads((data_dir / "settings.json").read_text(encoding="utf-8"))
    assert saved == {"mode": "perfect", "size": 7}

    settings = load_settings(data_dir)
    assert (settings.size, settings.mode) == (7, GameMode.PERFECT)


@pytest.mark.parametrize(
    "content",
    ["{broken", "[5]", json.dumps({"size": 4}), json.dumps({"size": True}),
     json.dumps({"mode": "zen"}), json.dumps({"mode": 3})],
)
def test_invalid_settings_fall_back_to_defaults(tmp_path: Path, content: str) -> None:
    (tmp_path / "settings.json").write_text(content, encoding="utf-8")
    settings = load_settings(tmp_path)
    assert (settings.size, settings.mode) == (5, GameMode.CLASSIC)


def test_valid_fields_survive_invalid_neighbours(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "settings.json").write_text(
        json.dumps({"size": 3, "mode": "zen"}), encoding="utf-8"
    )
    with caplog.at_level(logging.WARNING):
        settings = load_settings(tmp_path)
    assert settings.size == 3
    assert settings.mode is GameMode.CLASSIC
    assert "unknown mode" in caplog.text


def test_data_dir_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_dir = tmp_path / "env"
    monkeypatch.setenv(DATA_DIR_ENV, str(env_dir))
    assert resolve_data_dir() == env_dir
    assert resolve_data_dir(tmp_path / "cli") == tmp_path / "cli"

    monkeypatch.delenv(DATA_DIR_ENV)
    assert resolve_data_dir().name == "data"
