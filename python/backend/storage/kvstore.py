"""Durable key-value storage used to persist best records.

The game only needs ``get``/``set`` of string values under string keys, the
same contract a browser's local storage offers. ``JsonFileStorage`` keeps all
keys in one JSON object on disk; ``MemoryStorage`` is the in-process stand-in
used by tests.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage that lives only as long as the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStorage:
    """Stores every key as a string value inside a single JSON object file."""

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath

    # -- persistence ----------------------------------------------------------

    def _read_all(self) -> dict[str, str]:
        if not self.filepath.exists():
            return {}
        try:
            raw = json.loads(self.filepath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.filepath, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.filepath)
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.filepath.with_name(
            f"{self.filepath.name}.{os.getpid()}.{secrets.token_hex(4)}.tmp"
        )
        try:
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
            tmp.replace(self.filepath)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
