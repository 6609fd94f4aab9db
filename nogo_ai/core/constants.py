"""
Constants for the NoGo game.

This module defines the game constants used throughout the NoGo implementation,
including piece types, placement results, board dimensions and search defaults.
"""
from enum import IntEnum
from typing import Dict, Final, Tuple


class PieceType(IntEnum):
    """Enum representing the contents of a board point."""
    BLACK = 0
    WHITE = 1
    EMPTY = 2

    @property
    def opponent(self) -> 'PieceType':
        """The other side (EMPTY has no opponent)."""
        if self == PieceType.BLACK:
            return PieceType.WHITE
        if self == PieceType.WHITE:
            return PieceType.BLACK
        raise ValueError("EMPTY has no opponent")


class PlaceResult(IntEnum):
    """Outcome of trying to place a stone."""
    LEGAL = 0
    ILLEGAL_TURN = -1      # Not this side's turn
    ILLEGAL_POSITION = -2  # Off the board
    ILLEGAL_PIECE = -3     # Point already occupied
    ILLEGAL_TAKE = -4      # Would remove the last liberty of an opponent group
    ILLEGAL_SUICIDE = -5   # Would leave the own group without liberties


# Board dimensions
BOARD_WIDTH: Final[int] = 9
BOARD_HEIGHT: Final[int] = 9

# Column labels for rendering moves, "I" is skipped as on a Go board
COLUMN_LABELS: Final[str] = "ABCDEFGHJKLMNOPQRSTUVWXYZ"

# Cardinal offsets as (dx, dy)
DIRECTIONS: Final[Tuple[Tuple[int, int], ...]] = (
    (0, -1),  # up
    (0, 1),   # down
    (-1, 0),  # left
    (1, 0),   # right
)

PIECE_SYMBOLS: Final[Dict[PieceType, str]] = {
    PieceType.BLACK: "X",
    PieceType.WHITE: "O",
    PieceType.EMPTY: ".",
}

# Agent names end up in tournament logs and must not contain these
RESERVED_NAME_CHARS: Final[str] = "[]():; "

# AI and simulation settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 1000
DEFAULT_MCTS_EXPLORATION: Final[float] = 1.41  # UCT exploration parameter (sqrt(2))

# Local-shape bonus indexed by the number of open/cluster directions
DEFAULT_SHAPE_WEIGHTS: Final[Tuple[float, ...]] = (0.0, 0.03, 0.07, 0.1)

# Seconds of thinking per ply. Plies past the end reuse the last entry.
TIME_SCHEDULES: Final[Dict[str, Tuple[float, ...]]] = {
    "blitz": (0.1,) * 4 + (0.2,) * 30 + (0.1,),
    "standard": (0.3,) * 4 + (1.0,) * 20 + (1.5,) * 20 + (0.8,) * 16 + (0.4,),
    "long": (1.0,) * 4 + (3.0,) * 20 + (4.0,) * 20 + (2.0,) * 16 + (1.0,),
}
