"""Unit tests for classic tic-tac-toe board evaluation and turn state."""

import itertools

import pytest

from classicxo.game import (
    DRAW,
    EMPTY,
    IN_PROGRESS,
    WINNING_LINES,
    ClassicXOGame,
    Outcome,
    empty_cells,
    evaluate,
    new_board,
    opponent,
    winning_line,
)


def board_from(text: str):
    return [EMPTY if c == "." else c for c in text]


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("mark", ["X", "O"])
def test_every_line_wins(line, mark):
    board = new_board()
    for i in line:
        board[i] = mark
    assert evaluate(board) == Outcome.win(mark)
    assert winning_line(board) == line


def test_full_board_without_line_is_draw():
    board = board_from("XOXXOOOXX")
    assert evaluate(board) == DRAW
    assert evaluate(board).is_terminal


def test_win_on_full_board_beats_draw():
    board = board_from("XXXOOXOXO")
    assert evaluate(board) == Outcome.win("X")


def test_partial_board_in_progress():
    assert evaluate(new_board()) == IN_PROGRESS
    assert evaluate(board_from("XO..X...O")) == IN_PROGRESS
    assert not IN_PROGRESS.is_terminal


def test_first_line_in_scan_order_decides():
    # Two completed lines cannot happen in legal play.
    board = board_from("XXXOOO...")
    assert winning_line(board) == (0, 1, 2)
    assert evaluate(board) == Outcome.win("X")
    board = board_from("XX.OOOXXX")
    assert winning_line(board) == (3, 4, 5)
    assert evaluate(board) == Outcome.win("O")


def test_evaluate_handles_arbitrary_boards():
    for cells in itertools.product("XO ", repeat=9):
        outcome = evaluate(list(cells))
        assert outcome.kind in ("in_progress", "win", "draw")


def test_evaluate_rejects_wrong_length():
    with pytest.raises(ValueError):
        evaluate(["X"] * 8)


def test_empty_cells():
    assert empty_cells(new_board()) == list(range(9))
    assert empty_cells(board_from("XOXXOOOXX")) == []
    assert empty_cells(board_from("X.O.X.O..")) == [1, 3, 5, 7, 8]


def test_opponent():
    assert opponent("X") == "O"
    assert opponent("O") == "X"
    with pytest.raises(ValueError):
        opponent("Z")


def test_play_move_alternates_turns():
    game = ClassicXOGame()
    game.play_move(4)
    assert game.board[4] == "X"
    assert game.current_player == "O"
    game.play_move(0)
    assert game.board[0] == "O"
    assert game.current_player == "X"
    assert game.available_moves() == [1, 2, 3, 5, 6, 7, 8]


def test_play_move_rejects_illegal_moves():
    game = ClassicXOGame()
    game.play_move(0)
    with pytest.raises(ValueError):
        game.play_move(0)
    with pytest.raises(ValueError):
        game.play_move(9)


def test_outcome_is_recomputed_from_board():
    game = ClassicXOGame()
    for index in (0, 3, 1, 4, 2):
        game.play_move(index)
    assert game.winner == "X"
    assert game.finished
    assert game.available_moves() == []
    with pytest.raises(ValueError):
        game.play_move(8)


def test_reset_starts_new_round():
    game = ClassicXOGame()
    game.play_move(0)
    game.reset()
    assert game.board == new_board()
    assert game.current_player == "X"
    assert game.outcome == IN_PROGRESS


def test_clone_does_not_share_board():
    game = ClassicXOGame()
    copy = game.clone()
    copy.play_move(0)
    assert game.board[0] == EMPTY
