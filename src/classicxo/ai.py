"""Exhaustive minimax search and the difficulty-aware move selector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol, Sequence, TypeVar
import logging
import random

from .game import EMPTY, Board, NoLegalMove, Player, opponent, winner

logger = logging.getLogger(__name__)

DEFAULT_RANDOM_MOVE_PROBABILITY = 0.2

T = TypeVar("T")


class RandomSource(Protocol):
    """The slice of ``random.Random`` the selector relies on."""

    def random(self) -> float:
        ...

    def choice(self, seq: Sequence[T]) -> T:
        ...


@dataclass
class DifficultyConfig:
    # Chance that the computer ignores its best move and plays a random one
    random_move_probability: float = DEFAULT_RANDOM_MOVE_PROBABILITY

    def __post_init__(self) -> None:
        p = float(self.random_move_probability)
        if not 0.0 <= p <= 1.0:
            raise ValueError(
                f"random_move_probability must be within [0, 1], got {p}"
            )
        self.random_move_probability = p


# ---- core search ----


def score(board: Board, depth: int, maximizing: bool, player: Player = "O") -> int:
    """Minimax value of ``board`` for ``player``, with no pruning.

    ``player`` is always the maximised side, its opponent the minimiser.
    Wins are worth ``10 - depth`` and losses ``depth - 10`` so faster wins
    and slower losses score better. The caller's board is left untouched.
    """
    return _minimax(board.cells.copy(), depth, maximizing, player, opponent(player))


def _minimax(
    cells: List[str], depth: int, maximizing: bool, me: Player, opp: Player
) -> int:
    # Terminal/leaf
    w = winner(cells)
    if w == me:
        return 10 - depth
    if w == opp:
        return depth - 10
    if EMPTY not in cells:
        return 0

    mark = me if maximizing else opp
    best = None
    for i, c in enumerate(cells):
        if c != EMPTY:
            continue
        cells[i] = mark
        value = _minimax(cells, depth + 1, not maximizing, me, opp)
        cells[i] = EMPTY
        if best is None:
            best = value
        elif maximizing:
            best = max(best, value)
        else:
            best = min(best, value)
    return best  # type: ignore[return-value]


# ---- selector ----


@dataclass
class MinimaxAI:
    """Computer opponent: full minimax plus a random-move handicap.

      - MinimaxAI(player="O", difficulty=DifficultyConfig(0.2))
      - choose(board) -> cell_index
    """

    player: Player = "O"
    difficulty: DifficultyConfig = field(default_factory=DifficultyConfig)
    rng: RandomSource = field(default_factory=random.Random, repr=False)

    def best_move(self, board: Board) -> int:
        moves = board.empty_cells()
        if not moves:
            raise NoLegalMove("No valid moves available")

        best_score = None
        best_index = moves[0]
        for index in moves:
            # Only the position after our placement is scored, from the
            # opponent's turn.
            child = board.place(index, self.player)
            value = score(child, 0, False, self.player)
            if best_score is None or value > best_score:
                best_score, best_index = value, index
        return best_index

    def choose(self, board: Board) -> int:
        move = self.best_move(board)
        roll = self.rng.random()
        if roll < self.difficulty.random_move_probability:
            random_move = self.rng.choice(board.empty_cells())
            logger.debug(
                "random move %d instead of best %d (roll=%.3f)",
                random_move,
                move,
                roll,
            )
            return random_move
        logger.debug("best move %d for %s", move, self.player)
        return move
