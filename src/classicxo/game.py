"""Core rules for classic 3x3 tic-tac-toe: board evaluation and turn state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


# ---------- Outcome ----------


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a board: in progress, a win for one mark, or a draw."""

    kind: str
    winner: Optional[Player] = None

    IN_PROGRESS_KIND = "in_progress"
    WIN_KIND = "win"
    DRAW_KIND = "draw"

    @classmethod
    def win(cls, mark: Player) -> "Outcome":
        return cls(kind=cls.WIN_KIND, winner=mark)

    @property
    def is_terminal(self) -> bool:
        return self.kind != self.IN_PROGRESS_KIND

    @property
    def is_win(self) -> bool:
        return self.kind == self.WIN_KIND

    @property
    def is_draw(self) -> bool:
        return self.kind == self.DRAW_KIND


IN_PROGRESS = Outcome(kind=Outcome.IN_PROGRESS_KIND)
DRAW = Outcome(kind=Outcome.DRAW_KIND)


# ---------- Board evaluation ----------


def new_board() -> List[str]:
    return [EMPTY] * 9


def opponent(player: Player) -> Player:
    if player not in PLAYERS:
        raise ValueError(f"Unknown player mark {player!r}")
    return "O" if player == "X" else "X"


def _check_board(board: Sequence[str]) -> None:
    if len(board) != 9:
        raise ValueError(f"Board must have exactly 9 cells, got {len(board)}")


def winning_line(board: Sequence[str]) -> Optional[Tuple[int, int, int]]:
    """First line, in fixed scan order, whose three cells share a non-empty mark."""
    _check_board(board)
    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return line
    return None


def evaluate(board: Sequence[str]) -> Outcome:
    """Classify any 9-cell board.

    Lines are scanned in the fixed order of ``WINNING_LINES`` and the first
    completed one decides the winner. A full board without a completed line is
    a draw; anything else is still in progress. The board does not need to come
    from legal alternating play.
    """
    line = winning_line(board)
    if line is not None:
        return Outcome.win(board[line[0]])
    if all(c != EMPTY for c in board):
        return DRAW
    return IN_PROGRESS


def empty_cells(board: Sequence[str]) -> List[int]:
    """Indices of empty cells in ascending order (empty list when full)."""
    _check_board(board)
    return [i for i, c in enumerate(board) if c == EMPTY]


# ---------- Game ----------


@dataclass
class ClassicXOGame:
    """Authoritative board and turn state for one round.

    X always moves first and turns alternate strictly. The outcome is derived
    from the board on every access.
    """

    board: List[str] = field(default_factory=new_board)
    current_player: Player = "X"

    def __post_init__(self) -> None:
        _check_board(self.board)
        opponent(self.current_player)

    @property
    def outcome(self) -> Outcome:
        return evaluate(self.board)

    @property
    def winner(self) -> Optional[Player]:
        return self.outcome.winner

    @property
    def finished(self) -> bool:
        return self.outcome.is_terminal

    def available_moves(self) -> List[int]:
        if self.finished:
            return []
        return empty_cells(self.board)

    def play_move(self, index: int) -> None:
        """Mark ``index`` for the player to move and pass the turn."""
        if self.finished:
            raise ValueError("Game already finished")
        if not 0 <= index < 9:
            raise ValueError(f"Cell index {index} is out of range")
        if self.board[index] != EMPTY:
            raise ValueError("Cell already occupied")
        self.board[index] = self.current_player
        self.current_player = opponent(self.current_player)

    def reset(self) -> None:
        """Start a new round: empty board, X to move."""
        self.board = new_board()
        self.current_player = "X"

    def clone(self) -> "ClassicXOGame":
        return ClassicXOGame(board=self.board.copy(), current_player=self.current_player)
