"""Turn-taking state machine for one human-versus-computer match."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import random
import threading

from .ai import DifficultyConfig, MinimaxAI, RandomSource
from .game import (
    EMPTY,
    MARKS,
    Board,
    GameStatus,
    IllegalMoveAttempt,
    InvalidMove,
    Player,
    evaluate,
)

logger = logging.getLogger(__name__)


class SessionState:
    AWAITING_HUMAN = "awaiting_human_move"
    AWAITING_COMPUTER = "awaiting_computer_move"
    WON = "won"
    DRAWN = "drawn"


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to the UI layer."""

    board: List[str]
    status: str
    winner: Optional[Player]
    state: str
    current_player: Player
    first_player: Player
    wins_x: int
    wins_o: int
    move_count: int
    move_log: List[Dict[str, object]]
    random_move_probability: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "board": list(self.board),
            "status": self.status,
            "winner": self.winner,
            "state": self.state,
            "currentPlayer": self.current_player,
            "firstPlayer": self.first_player,
            "winsX": self.wins_x,
            "winsO": self.wins_o,
            "moveCount": self.move_count,
            "moveLog": [dict(entry) for entry in self.move_log],
            "randomMoveProbability": self.random_move_probability,
        }


@dataclass
class GameSession:
    """Container for the current board, whose turn it is and the tallies.

    Every public method holds ``lock`` for its whole duration, computer
    reply included, so one session is one unit of work.
    """

    difficulty: DifficultyConfig = field(default_factory=DifficultyConfig)
    rng: RandomSource = field(default_factory=random.Random, repr=False)
    ai: Optional[MinimaxAI] = None
    human: Player = "X"
    computer: Player = "O"
    board: Board = field(default_factory=Board)
    current_player: Player = "X"
    first_player: Player = "X"
    move_count: int = 0
    wins: Dict[Player, int] = field(default_factory=lambda: {"X": 0, "O": 0})
    move_log: List[Dict[str, object]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        if {self.human, self.computer} != set(MARKS):
            raise ValueError("Human and computer must use different marks")
        if self.ai is None:
            self.ai = MinimaxAI(
                player=self.computer, difficulty=self.difficulty, rng=self.rng
            )
        elif self.ai.player != self.computer:
            raise ValueError("AI must play the computer's mark")
        else:
            self.difficulty = self.ai.difficulty

    # ---- derived state ----

    @property
    def status(self) -> GameStatus:
        return evaluate(self.board)

    @property
    def state(self) -> str:
        status = self.status
        if status.state == GameStatus.WON:
            return SessionState.WON
        if status.state == GameStatus.DRAWN:
            return SessionState.DRAWN
        if self.current_player == self.human:
            return SessionState.AWAITING_HUMAN
        return SessionState.AWAITING_COMPUTER

    # ---- API used by UI ----

    def start_new_game(self, first_player: Optional[Player] = None) -> SessionView:
        """Reset the board and pick who opens; tallies are kept."""
        if first_player is not None and first_player not in MARKS:
            raise InvalidMove(f"Unknown mark {first_player!r}")
        with self.lock:
            if first_player is None:
                # Fair coin flip, once per game
                coin = self.rng.random()
                first_player = self.human if coin < 0.5 else self.computer
            self.board = Board()
            self.move_count = 0
            self.move_log = []
            self.current_player = first_player
            self.first_player = first_player
            logger.info("new game, %s moves first", first_player)
            if self.current_player == self.computer:
                self._play_computer_turn()
            return self._view()

    def human_move(self, cell: int) -> SessionView:
        with self.lock:
            if self.status.is_terminal:
                raise IllegalMoveAttempt("Game already finished")
            if self.current_player != self.human:
                raise IllegalMoveAttempt("It is not the human player's turn")
            self._apply(cell, self.human)
            if self.state == SessionState.AWAITING_COMPUTER:
                self._play_computer_turn()
            return self._view()

    def configure(self, random_move_probability: float) -> SessionView:
        config = DifficultyConfig(random_move_probability=random_move_probability)
        with self.lock:
            # Shared with the AI, so update in place
            self.difficulty.random_move_probability = config.random_move_probability
            logger.info(
                "random move probability set to %.2f",
                config.random_move_probability,
            )
            return self._view()

    def view(self) -> SessionView:
        with self.lock:
            return self._view()

    # ---- helpers ----

    def _play_computer_turn(self) -> None:
        assert self.ai is not None
        cell = self.ai.choose(self.board)
        self._apply(cell, self.computer)

    def _apply(self, cell: int, player: Player) -> None:
        # Board.place validates and copies, so a rejected move changes nothing
        board = self.board.place(cell, player)
        self.board = board
        self.move_count += 1
        self.move_log.append({"player": player, "cell": cell})

        status = evaluate(board)
        if status.state == GameStatus.WON:
            self.wins[status.winner] += 1  # type: ignore[index]
            logger.info("%s wins after %d moves", status.winner, self.move_count)
        elif status.state == GameStatus.DRAWN:
            logger.info("game drawn")
        else:
            self.current_player = (
                self.computer if player == self.human else self.human
            )

    def _view(self) -> SessionView:
        status = self.status
        return SessionView(
            board=["" if c == EMPTY else c for c in self.board.cells],
            status=status.state,
            winner=status.winner,
            state=self.state,
            current_player=self.current_player,
            first_player=self.first_player,
            wins_x=self.wins["X"],
            wins_o=self.wins["O"],
            move_count=self.move_count,
            move_log=[dict(entry) for entry in self.move_log],
            random_move_probability=self.difficulty.random_move_probability,
        )
