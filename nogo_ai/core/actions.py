"""
Moves for the NoGo game.

A move is a single stone placement: a flat board position plus the side
placing the stone. Moves are small frozen values so they can be hashed into
the search statistics table and compared for deterministic ordering.
"""
from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, List, Tuple

from nogo_ai.core.constants import (
    PieceType, PlaceResult, BOARD_WIDTH, BOARD_HEIGHT, COLUMN_LABELS
)

if TYPE_CHECKING:
    from nogo_ai.core.board import Board


@dataclass(frozen=True, order=True)
class Move:
    """
    Place a stone of `side` at flat `position` (row-major, top-left is 0).
    """
    position: int
    side: PieceType

    def __post_init__(self):
        side = PieceType(self.side)
        if side == PieceType.EMPTY:
            raise ValueError("a move must be made by BLACK or WHITE")
        if self.position < 0:
            raise ValueError("position must be non-negative")
        object.__setattr__(self, "side", side)

    def apply(self, board: 'Board') -> Tuple['Board', PlaceResult]:
        """
        Apply the move to a board.

        Args:
            board: Board to play on

        Returns:
            Tuple of (resulting board, placement result)
        """
        return board.apply(self)

    def to_text(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> str:
        """
        Render as "B C3" style text: side letter, column letter, row number
        counted from the bottom edge.
        """
        x, y = self.position % width, self.position // width
        return f"{self.side.name[0]} {COLUMN_LABELS[x]}{height - y}"

    @classmethod
    def parse(cls, text: str, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> 'Move':
        """
        Parse the text form produced by `to_text`.

        Args:
            text: Text such as "W E5"
            width: Board width
            height: Board height

        Returns:
            Parsed move
        """
        try:
            side_text, point = text.split()
            side = {"B": PieceType.BLACK, "W": PieceType.WHITE}[side_text.upper()[0]]
            x = COLUMN_LABELS.index(point[0].upper())
            y = height - int(point[1:])
        except (KeyError, ValueError, IndexError) as e:
            raise ValueError(f"cannot parse move: {text!r}") from e

        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"move off the board: {text!r}")
        return cls(y * width + x, side)

    def __str__(self) -> str:
        return f"{self.side.name.lower()}@{self.position}"


@lru_cache(maxsize=None)
def _move_space(side: PieceType, width: int, height: int) -> Tuple[Move, ...]:
    return tuple(Move(position, side) for position in range(width * height))


def all_moves(
    side: PieceType,
    width: int = BOARD_WIDTH,
    height: int = BOARD_HEIGHT,
) -> List[Move]:
    """
    Every placement for one side, legal or not, in position order.

    The returned list is a fresh copy so callers may shuffle it in place.

    Args:
        side: BLACK or WHITE
        width: Board width
        height: Board height

    Returns:
        List of width * height moves
    """
    return list(_move_space(PieceType(side), width, height))
