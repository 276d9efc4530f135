"""Computer opponent for classic tic-tac-toe: random, heuristic and minimax policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence, Union
import logging
import random

from .game import EMPTY, WINNING_LINES, Player, empty_cells, evaluate, opponent

logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SearchResult(NamedTuple):
    """Minimax value from the maximizing player's side and the move that gets it."""

    score: int
    index: Optional[int]


# ---- search ----


def minimax(board: Sequence[str], maximizing: bool, player: Player = "O") -> SearchResult:
    """Exhaustive minimax with ``player`` as the maximizing side.

    Terminal nodes score +1 for a ``player`` win, -1 for an opponent win and 0
    for a draw, regardless of depth. Children are tried in ascending cell order
    and only a strictly better score replaces the current best, so the first
    move wins ties. The search runs on a private copy of ``board``.
    """
    other = opponent(player)
    scratch: List[str] = list(board)
    nodes = 0

    def search(is_max: bool) -> SearchResult:
        nonlocal nodes
        nodes += 1

        outcome = evaluate(scratch)
        if outcome.is_win:
            return SearchResult(1 if outcome.winner == player else -1, None)
        if outcome.is_draw:
            return SearchResult(0, None)

        mark = player if is_max else other
        best_score: Optional[int] = None
        best_index: Optional[int] = None
        for i in range(9):
            if scratch[i] != EMPTY:
                continue
            scratch[i] = mark
            score, _ = search(not is_max)
            scratch[i] = EMPTY
            if (
                best_score is None
                or (is_max and score > best_score)
                or (not is_max and score < best_score)
            ):
                best_score, best_index = score, i
        # Unreachable for a non-terminal board, which always has an empty cell
        if best_score is None:
            return SearchResult(0, None)
        return SearchResult(best_score, best_index)

    result = search(maximizing)
    logger.debug("minimax for %s searched %d nodes -> %s", player, nodes, result)
    return result


# ---- heuristics ----


def find_line_completion(board: Sequence[str], player: Player) -> Optional[int]:
    """Empty cell of the first line holding two ``player`` marks and one gap."""
    for a, b, c in WINNING_LINES:
        trio = [board[a], board[b], board[c]]
        if trio.count(player) == 2 and trio.count(EMPTY) == 1:
            return (a, b, c)[trio.index(EMPTY)]
    return None


@dataclass
class MoveSelector:
    """Chooses the computer's move for a given difficulty.

    ``rng`` only needs a ``choice(seq)`` method, so tests can pass a
    deterministic stand-in for ``random.Random``.
    """

    player: Player = "O"
    rng: Any = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        opponent(self.player)

    # ---- public API ----

    def select_move(
        self, board: Sequence[str], difficulty: Union[Difficulty, str]
    ) -> Optional[int]:
        difficulty = Difficulty(difficulty)
        empties = empty_cells(board)
        if not empties:
            return None

        if difficulty is Difficulty.EASY:
            move = self._random(empties)
        elif difficulty is Difficulty.MEDIUM:
            move = self._heuristic(board, empties)
        else:
            move = minimax(board, True, self.player).index
            if move is None:
                move = self._random(empties)

        logger.debug("%s move for %s: %d", difficulty.value, self.player, move)
        return move

    # ---- policies ----

    def _random(self, empties: List[int]) -> int:
        return self.rng.choice(empties)

    def _heuristic(self, board: Sequence[str], empties: List[int]) -> int:
        move = find_line_completion(board, self.player)
        if move is None:
            move = find_line_completion(board, opponent(self.player))
        if move is None:
            move = self._random(empties)
        return move


def select_move(
    board: Sequence[str],
    difficulty: Union[Difficulty, str],
    player: Player = "O",
    rng: Any = None,
) -> Optional[int]:
    """One-shot wrapper around :class:`MoveSelector`."""
    selector = MoveSelector(player=player, rng=rng if rng is not None else random.Random())
    return selector.select_move(board, difficulty)
