"""Best-record persistence and management."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass

from backend.models.mode import GRID_SIZES, GameMode
from backend.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "lightsOutBestRecords"


@dataclass
class BestRecord:
    moves: int
    time: int
    score: int
    date: str

    @classmethod
    def from_dict(cls, data: object) -> BestRecord | None:
        """Parse a stored entry, returning None if it is malformed."""
        if not isinstance(data, dict):
            return None
        values: dict[str, int] = {}
        for name in ("moves", "time", "score"):
            val = data.get(name)
            if isinstance(val, bool) or not isinstance(val, (int, float)):
                return None
            if isinstance(val, float) and not math.isfinite(val):
                return None
            values[name] = int(val)
        date = data.get("date")
        if not isinstance(date, str):
            return None
        return cls(date=date, **values)


class BestRecordStore:
    """Loads, saves, and queries best records keyed by ``"{mode}-{size}"``.

    The whole mapping is serialized as one JSON object under
    :data:`STORAGE_KEY`. Loading never fails: missing or malformed data
    yields an empty store. Saving is best-effort; a failed write is logged
    and the in-memory records stay authoritative.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self._records: dict[str, BestRecord] = {}
        self._load()

    # -- persistence ----------------------------------------------------------

    def _load(self) -> None:
        try:
            saved = self.storage.get(STORAGE_KEY)
        except OSError as exc:
            logger.warning("Could not read best records: %s", exc)
            return
        if not saved:
            return
        try:
            data = json.loads(saved)
        except ValueError:
            logger.warning("Discarding malformed best records")
            return
        if not isinstance(data, dict):
            logger.warning("Discarding best records: expected an object")
            return
        for key, entry in data.items():
            record = BestRecord.from_dict(entry)
            if record is None:
                logger.debug("Skipping malformed record %r", key)
                continue
            self._records[str(key)] = record

    def save(self) -> bool:
        """Write every record to storage. Returns False if the write failed."""
        data = {key: asdict(record) for key, record in self._records.items()}
        try:
            self.storage.set(STORAGE_KEY, json.dumps(data))
        except OSError as exc:
            logger.warning("Could not save best records: %s", exc)
            return False
        return True

    # -- queries --------------------------------------------------------------

    def get(self, mode: GameMode, size: int) -> BestRecord | None:
        return self._records.get(mode.record_key(size))

    def put(self, mode: GameMode, size: int, record: BestRecord) -> None:
        self._records[mode.record_key(size)] = record

    def as_dict(self) -> dict[str, BestRecord]:
        return dict(self._records)

    def ordered(self) -> list[tuple[GameMode, int, BestRecord]]:
        """Records in panel order: modes in declaration order, then sizes."""
        rows: list[tuple[GameMode, int, BestRecord]] = []
        for mode in GameMode:
            for size in GRID_SIZES:
                record = self.get(mode, size)
                if record is not None:
                    rows.append((mode, size, record))
        return rows

    def __len__(self) -> int:
        return len(self._records)
