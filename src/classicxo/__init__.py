"""ClassicXO package exposing board evaluation, the computer opponent, and the web application."""

from .ai import Difficulty, MoveSelector, select_move
from .game import ClassicXOGame, Outcome, empty_cells, evaluate
from .ui import app

__all__ = [
    "ClassicXOGame",
    "Difficulty",
    "MoveSelector",
    "Outcome",
    "app",
    "empty_cells",
    "evaluate",
    "select_move",
]
