from backend.engine.scoring.score import ScoreKeeper

__all__ = ["ScoreKeeper"]
