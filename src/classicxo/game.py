"""Core rules for ClassicXO: the 3x3 board and outcome evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
MARKS: Tuple[Player, Player] = ("X", "O")

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


# ---------- Errors ----------


class InvalidMove(ValueError):
    """Cell index out of range, cell already occupied, or unknown mark."""


class IllegalMoveAttempt(ValueError):
    """A move was submitted while it is not that side's turn."""


class NoLegalMove(RuntimeError):
    """Search was asked for a move on a full board."""


def opponent(player: Player) -> Player:
    if player not in MARKS:
        raise InvalidMove(f"Unknown mark {player!r}")
    return "O" if player == "X" else "X"


# ---------- Board ----------


@dataclass
class Board:
    # Server-internal: 'X', 'O', or ' ' (space) for empty
    cells: List[str] = field(default_factory=lambda: [EMPTY] * 9)

    def __post_init__(self) -> None:
        if len(self.cells) != 9:
            raise InvalidMove(f"A board has 9 cells, got {len(self.cells)}")
        for c in self.cells:
            if c != EMPTY and c not in MARKS:
                raise InvalidMove(f"Unknown cell value {c!r}")

    @classmethod
    def from_cells(cls, values: Iterable[Optional[str]]) -> "Board":
        """Build a board from wire values; '', None and ' ' all mean empty."""
        return cls(cells=[EMPTY if v in (None, "", EMPTY) else v for v in values])

    def is_empty(self) -> bool:
        return all(c == EMPTY for c in self.cells)

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self.cells)

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def count(self, player: Player) -> int:
        return self.cells.count(player)

    def place(self, index: int, player: Player) -> "Board":
        """Return a new board with ``player`` placed at ``index``."""
        if player not in MARKS:
            raise InvalidMove(f"Unknown mark {player!r}")
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidMove(f"Cell index must be an integer, got {index!r}")
        if not 0 <= index < 9:
            raise InvalidMove(f"Cell index {index} is out of range")
        if self.cells[index] != EMPTY:
            raise InvalidMove("Cell already occupied")
        cells = self.cells.copy()
        cells[index] = player
        return Board(cells=cells)

    def copy(self) -> "Board":
        return Board(cells=self.cells.copy())


# ---------- Outcome ----------


@dataclass(frozen=True)
class GameStatus:
    IN_PROGRESS = "in_progress"
    WON = "won"
    DRAWN = "drawn"

    state: str
    winner: Optional[Player] = None

    @classmethod
    def in_progress(cls) -> "GameStatus":
        return cls(cls.IN_PROGRESS)

    @classmethod
    def won(cls, player: Player) -> "GameStatus":
        return cls(cls.WON, player)

    @classmethod
    def drawn(cls) -> "GameStatus":
        return cls(cls.DRAWN)

    @property
    def is_terminal(self) -> bool:
        return self.state != self.IN_PROGRESS


def winner(cells: Sequence[str]) -> Optional[Player]:
    """First completed line in WINNING_LINES order, or None."""
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return v
    return None


def evaluate(board: Board) -> GameStatus:
    w = winner(board.cells)
    if w is not None:
        return GameStatus.won(w)
    if board.is_full():
        return GameStatus.drawn()
    return GameStatus.in_progress()
