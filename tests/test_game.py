"""Unit tests for ClassicXO board and outcome logic."""

import pytest

from classicxo.game import (
    EMPTY,
    WINNING_LINES,
    Board,
    GameStatus,
    InvalidMove,
    evaluate,
    opponent,
    winner,
)


def test_new_board_is_empty():
    board = Board()
    assert board.is_empty()
    assert not board.is_full()
    assert board.empty_cells() == list(range(9))


def test_place_returns_new_board():
    board = Board()
    placed = board.place(4, "X")
    assert placed.cells[4] == "X"
    assert board.is_empty()
    assert placed.empty_cells() == [0, 1, 2, 3, 5, 6, 7, 8]


def test_place_rejects_occupied_cell():
    board = Board().place(0, "O")
    with pytest.raises(InvalidMove):
        board.place(0, "X")
    assert board.cells[0] == "O"


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_place_rejects_out_of_range(index):
    with pytest.raises(InvalidMove):
        Board().place(index, "X")


def test_place_rejects_unknown_mark():
    with pytest.raises(InvalidMove):
        Board().place(0, "Z")


def test_board_validates_cells():
    with pytest.raises(InvalidMove):
        Board(cells=[EMPTY] * 8)
    with pytest.raises(InvalidMove):
        Board(cells=["?"] + [EMPTY] * 8)


def test_from_cells_accepts_wire_values():
    board = Board.from_cells(["X", "", None, " ", "O", "", "", "", ""])
    assert board.cells[0] == "X"
    assert board.cells[4] == "O"
    assert board.empty_cells() == [1, 2, 3, 5, 6, 7, 8]


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("player", ["X", "O"])
def test_every_line_wins(line, player):
    cells = [EMPTY] * 9
    for i in line:
        cells[i] = player
    assert evaluate(Board(cells=cells)) == GameStatus.won(player)


def test_full_board_without_line_is_drawn():
    board = Board(cells=["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    status = evaluate(board)
    assert status == GameStatus.drawn()
    assert status.is_terminal


def test_partial_board_is_in_progress():
    board = Board().place(4, "X").place(0, "O")
    status = evaluate(board)
    assert status.state == GameStatus.IN_PROGRESS
    assert status.winner is None
    assert not status.is_terminal


def test_winning_full_board_is_won_not_drawn():
    board = Board(cells=["X", "X", "X", "O", "O", "X", "X", "O", "O"])
    assert evaluate(board) == GameStatus.won("X")


def test_first_line_in_order_is_reported():
    cells = ["O", "O", "O", "X", "X", "X", EMPTY, EMPTY, EMPTY]
    assert winner(cells) == "O"


def test_opponent():
    assert opponent("X") == "O"
    assert opponent("O") == "X"
    with pytest.raises(InvalidMove):
        opponent(EMPTY)
