"""Tests for the ClassicXO minimax search and move selector."""

import pytest

from classicxo.ai import DifficultyConfig, MinimaxAI, score
from classicxo.game import Board, NoLegalMove, evaluate


class StubRandom:
    """Deterministic stand-in for random.Random."""

    def __init__(self, roll, pick=-1):
        self.roll = roll
        self.pick = pick
        self.choices = []

    def random(self):
        return self.roll

    def choice(self, seq):
        self.choices.append(list(seq))
        return seq[self.pick]


def _board(text):
    return Board.from_cells([" " if c == "." else c for c in text])


def _perfect(player="O"):
    return MinimaxAI(
        player=player, difficulty=DifficultyConfig(0.0), rng=StubRandom(0.5)
    )


def test_score_computer_win_at_depth_one():
    board = _board("OOOXX....")
    assert score(board, 1, True) == 9


def test_score_human_win_at_depth_one():
    board = _board("XXXOO....")
    assert score(board, 1, False) == -9


def test_score_full_draw_is_zero():
    board = _board("XOXXOOOXX")
    assert score(board, 9, True) == 0


def test_score_is_parametric_over_maximised_mark():
    board = _board("XXXOO....")
    assert score(board, 1, True, player="X") == 9
    assert score(board, 1, True, player="O") == -9


def test_score_prefers_faster_win():
    # O to move can win immediately at 5
    board = _board("XX.OO.X..")
    assert score(board, 0, True) == 9


def test_score_does_not_mutate_board():
    board = _board("X...O...X")
    before = list(board.cells)
    score(board, 0, True)
    score(board, 0, False)
    assert board.cells == before


def test_ai_takes_immediate_win_over_block():
    board = _board("XX.OO....")
    ai = _perfect()
    assert ai.best_move(board) == 5
    assert ai.choose(board) == 5


def test_ai_blocks_immediate_threat():
    board = _board("XX..O....")
    assert _perfect().best_move(board) == 2


def test_ai_plays_either_mark():
    board = _board("OO.XX....")
    assert _perfect(player="X").best_move(board) == 5


def test_best_move_tie_breaks_to_lowest_index():
    # Either remaining cell ends in a draw
    board = _board("..XXOOOXX")
    assert _perfect().best_move(board) == 0


def test_best_move_avoids_losing_cell():
    # Playing 3 lets X complete 2-5-8
    board = _board("XOX.OXOX.")
    assert _perfect().best_move(board) == 8


def test_best_move_on_full_board_raises():
    board = _board("XOXXOOOXX")
    with pytest.raises(NoLegalMove):
        _perfect().best_move(board)
    with pytest.raises(NoLegalMove):
        _perfect().choose(board)


def test_random_branch_picks_from_empty_cells():
    board = _board("XX.OO....")
    rng = StubRandom(0.0, pick=-1)
    ai = MinimaxAI(player="O", difficulty=DifficultyConfig(0.2), rng=rng)

    move = ai.choose(board)

    assert move == 8
    assert rng.choices == [board.empty_cells()]


def test_roll_at_threshold_keeps_best_move():
    board = _board("XX.OO....")
    rng = StubRandom(0.2)
    ai = MinimaxAI(player="O", difficulty=DifficultyConfig(0.2), rng=rng)

    assert ai.choose(board) == 5
    assert rng.choices == []


def test_zero_probability_never_randomises():
    board = _board("XX.OO....")
    rng = StubRandom(0.0)
    ai = MinimaxAI(player="O", difficulty=DifficultyConfig(0.0), rng=rng)

    assert ai.choose(board) == 5
    assert rng.choices == []


@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_difficulty_rejects_out_of_range(value):
    with pytest.raises(ValueError):
        DifficultyConfig(value)


def test_difficulty_default():
    assert DifficultyConfig().random_move_probability == 0.2


def _human_cannot_win(board, ai):
    """Explore every human line of play against the AI's replies."""
    for cell in board.empty_cells():
        after_human = board.place(cell, "X")
        status = evaluate(after_human)
        if status.is_terminal:
            if status.winner == "X":
                return False
            continue
        after_ai = after_human.place(ai.choose(after_human), "O")
        if evaluate(after_ai).is_terminal:
            continue
        if not _human_cannot_win(after_ai, ai):
            return False
    return True


def test_perfect_ai_never_loses_when_human_opens():
    assert _human_cannot_win(Board(), _perfect())
