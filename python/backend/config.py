"""Game settings stored at ``<data dir>/settings.json``."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

from backend.models.mode import GRID_SIZES, GameMode

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "LIGHTS_OUT_DATA_DIR"
SETTINGS_FILE = "settings.json"
RECORDS_FILE = "records.json"


def _default_data_dir() -> Path:
    """``data/`` at the project root (two levels up from this file)."""
    return Path(__file__).resolve().parents[2] / "data"


@dataclass
class GameSettings:
    """Startup defaults. Command-line options take precedence."""

    size: int = 5
    mode: GameMode = GameMode.CLASSIC
    data_dir: Path = field(default_factory=_default_data_dir)

    @property
    def records_path(self) -> Path:
        return self.data_dir / RECORDS_FILE

    @property
    def settings_path(self) -> Path:
        return self.data_dir / SETTINGS_FILE


def resolve_data_dir(override: Path | None = None) -> Path:
    if override is not None:
        return override
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env)
    return _default_data_dir()


def load_settings(data_dir: Path | None = None) -> GameSettings:
    """Read settings, falling back to defaults for anything missing or invalid."""
    settings = GameSettings(data_dir=resolve_data_dir(data_dir))
    path = settings.settings_path
    if not path.exists():
        return settings
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings %s: %s", path, exc)
        return settings
    if not isinstance(raw, dict):
        return settings

    size = raw.get("size")
    if isinstance(size, int) and not isinstance(size, bool) and size in GRID_SIZES:
        settings.size = size
    elif size is not None:
        logger.warning("Ignoring unsupported grid size %r in settings", size)

    mode = raw.get("mode")
    if isinstance(mode, str):
        try:
            settings.mode = GameMode(mode)
        except ValueError:
            logger.warning("Ignoring unknown mode %r in settings", mode)
    return settings


def save_settings(settings: GameSettings) -> None:
    data = asdict(settings)
    data.pop("data_dir")
    data["mode"] = settings.mode.value
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.settings_path.write_text(
        json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8"
    )
