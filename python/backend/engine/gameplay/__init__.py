from backend.engine.gameplay.events import (
    GameEvent,
    GameStarted,
    LevelCleared,
    MoveLimitReached,
    TimeExpired,
)
from backend.engine.gameplay.game import GameSession

__all__ = [
    "GameEvent",
    "GameSession",
    "GameStarted",
    "LevelCleared",
    "MoveLimitReached",
    "TimeExpired",
]
