from backend.engine.gamestate.state import GameState, SessionStatus, TimeAttackStats

__all__ = ["GameState", "SessionStatus", "TimeAttackStats"]
