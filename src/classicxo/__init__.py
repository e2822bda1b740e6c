"""ClassicXO package exposing game logic, the minimax AI, sessions, and the web application."""

from .ai import DifficultyConfig, MinimaxAI, score
from .game import Board, GameStatus, IllegalMoveAttempt, InvalidMove, NoLegalMove, evaluate
from .session import GameSession, SessionView
from .ui import app

__all__ = [
    "Board",
    "DifficultyConfig",
    "GameSession",
    "GameStatus",
    "IllegalMoveAttempt",
    "InvalidMove",
    "MinimaxAI",
    "NoLegalMove",
    "SessionView",
    "app",
    "evaluate",
    "score",
]
