from backend.models.board import Board
from backend.models.mode import GameMode
from backend.models.records import BestRecord, BestRecordStore

__all__ = ["BestRecord", "BestRecordStore", "Board", "GameMode"]
