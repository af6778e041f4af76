"""
Board - The fixed 3x3 grid and its result classification.

A board is a sequence of 9 cells in row-major order:

     0 | 1 | 2
    ---+---+---
     3 | 4 | 5
    ---+---+---
     6 | 7 | 8

Each cell is either EMPTY ("") or the identifier of the player who
marked it. Classification is O(1): 8 fixed triples over 9 cells.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Sequence


BOARD_SIZE = 9
EMPTY = ""

# Rows, columns, diagonals. Order matters only for degenerate boards.
WINNING_TRIPLES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

Board = tuple[str, ...]


class Outcome(Enum):
    """Outcome category of a board."""
    PENDING = "pending"
    DRAWN = "drawn"
    WON = "won"


@dataclass(frozen=True)
class Classification:
    """Outcome of a board, with the winner when there is one."""
    outcome: Outcome
    winner: str | None = None

    @classmethod
    def pending(cls) -> Classification:
        return cls(Outcome.PENDING)

    @classmethod
    def drawn(cls) -> Classification:
        return cls(Outcome.DRAWN)

    @classmethod
    def won(cls, winner: str) -> Classification:
        return cls(Outcome.WON, winner)

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not Outcome.PENDING

    def __str__(self) -> str:
        if self.outcome is Outcome.WON:
            return f"won {self.winner}"
        return self.outcome.value


def empty_board() -> Board:
    """A fresh board with every cell empty."""
    return (EMPTY,) * BOARD_SIZE


def find_winner(board: Sequence[str]) -> str | None:
    """Return the value on the first complete triple, or None."""
    for a, b, c in WINNING_TRIPLES:
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return board[a]
    return None


def classify_board(board: Sequence[str]) -> Classification:
    """
    Classify a board as won, pending or drawn.

    Checked in that order: a complete triple wins even on a full board,
    and any empty cell without a win keeps the game pending.
    """
    winner = find_winner(board)
    if winner is not None:
        return Classification.won(winner)
    if any(cell == EMPTY for cell in board):
        return Classification.pending()
    return Classification.drawn()


def changed_cells(old: Sequence[str], new: Sequence[str]) -> list[int]:
    """Indices whose value differs between two boards of equal length."""
    return [i for i, (before, after) in enumerate(zip(old, new)) if before != after]


def validate_move_delta(old: Sequence[str], new: Sequence[str], mover: str) -> str | None:
    """
    Check that `new` is `old` plus exactly one placement by `mover`.

    Returns an error message if the delta is illegal, None if it is legal.
    Assumes both boards have BOARD_SIZE cells and differ somewhere.
    """
    changed = changed_cells(old, new)
    if len(changed) != 1:
        return f"Place exactly one mark per move ({len(changed)} cells changed)"
    index = changed[0]
    if old[index] != EMPTY:
        return f"Cell {index} is already taken"
    if new[index] != mover:
        return f"Cell {index} must be marked with your own id"
    return None


def parse_board(text: str, empty_char: str = ".") -> Board:
    """
    Parse a compact 9-character board such as "XX.O.O...".

    `empty_char` marks an empty cell; any other character is a player mark.
    """
    cells = text.strip()
    if len(cells) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(cells)}")
    return tuple(EMPTY if ch == empty_char else ch for ch in cells)
