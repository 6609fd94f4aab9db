"""
Board state and placement rules for NoGo.

NoGo is played on a Go board, but capturing is forbidden: a placement that
would remove the last liberty of any group, the opponent's or the mover's
own, is illegal. The player who cannot make a legal placement loses.

The Board is a value type. Its cell array is read-only, and `apply` returns a
new Board rather than modifying the current one, so boards can be shared
freely between search nodes.
"""
from __future__ import annotations
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from nogo_ai.core.constants import (
    PieceType, PlaceResult, BOARD_WIDTH, BOARD_HEIGHT, COLUMN_LABELS,
    DIRECTIONS, PIECE_SYMBOLS
)
from nogo_ai.core.actions import Move

_EMPTY = int(PieceType.EMPTY)

@lru_cache(maxsize=None)
def neighbor_table(width: int, height: int) -> Tuple[Tuple[int, ...], ...]:
    """
    Precompute the on-board cardinal neighbours of every point.

    Args:
        width: Board width
        height: Board height

    Returns:
        Tuple indexed by position, each entry a tuple of neighbour positions
    """
    table = []
    for position in range(width * height):
        x, y = position % width, position // width
        neighbors = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height:
                neighbors.append(ny * width + nx)
        table.append(tuple(neighbors))
    return tuple(table)


class Board:
    """
    Immutable NoGo position: stones on the board plus the side to move.
    """

    __slots__ = ("width", "height", "cells", "to_move", "_neighbors", "_points")

    def __init__(
        self,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        cells: Optional[np.ndarray] = None,
        to_move: PieceType = PieceType.BLACK,
    ):
        if width <= 0 or height <= 0:
            raise ValueError("board dimensions must be positive")
        if to_move == PieceType.EMPTY:
            raise ValueError("to_move must be BLACK or WHITE")

        if cells is None:
            cells = np.full(width * height, PieceType.EMPTY, dtype=np.int8)
        else:
            cells = np.array(cells, dtype=np.int8).reshape(-1)
            if cells.size != width * height:
                raise ValueError(
                    f"expected {width * height} cells, got {cells.size}"
                )
        cells.flags.writeable = False

        self.width = width
        self.height = height
        self.cells = cells
        self.to_move = PieceType(to_move)
        self._neighbors = neighbor_table(width, height)
        # Plain ints for scalar reads in the rule checks
        self._points = tuple(cells.tolist())

    @classmethod
    def _derive(
        cls,
        parent: 'Board',
        points: List[int],
        to_move: PieceType,
    ) -> 'Board':
        """Build a board of the same shape from already validated points."""
        board = cls.__new__(cls)
        cells = np.array(points, dtype=np.int8)
        cells.flags.writeable = False
        board.width = parent.width
        board.height = parent.height
        board.cells = cells
        board.to_move = to_move
        board._neighbors = parent._neighbors
        board._points = tuple(points)
        return board

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[str],
        to_move: PieceType = PieceType.BLACK,
    ) -> 'Board':
        """
        Build a board from text rows using the X / O / . symbols.

        Args:
            rows: One string per row, top row first
            to_move: Side to move

        Returns:
            Board with the given stones
        """
        symbol_to_piece = {symbol: piece for piece, symbol in PIECE_SYMBOLS.items()}
        height = len(rows)
        width = len(rows[0]) if rows else 0
        cells = []
        for row in rows:
            if len(row) != width:
                raise ValueError("all rows must have the same length")
            for symbol in row:
                if symbol not in symbol_to_piece:
                    raise ValueError(f"unknown board symbol: {symbol!r}")
                cells.append(symbol_to_piece[symbol])
        return cls(width, height, np.array(cells, dtype=np.int8), to_move)

    @property
    def size(self) -> int:
        """Number of points on the board."""
        return self.width * self.height

    def index(self, x: int, y: int) -> int:
        """Flat position of column x, row y."""
        return y * self.width + x

    def coordinates(self, position: int) -> Tuple[int, int]:
        """(x, y) of a flat position."""
        return position % self.width, position // self.width

    def on_board(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, position: int) -> PieceType:
        return PieceType(self._points[position])

    def neighbors(self, position: int) -> Tuple[int, ...]:
        return self._neighbors[position]

    def empty_count(self) -> int:
        """Number of empty points."""
        return int(np.count_nonzero(self.cells == PieceType.EMPTY))

    def empty_points(self) -> List[int]:
        """Positions of the empty points, in board order."""
        return [position for position, value in enumerate(self._points) if value == _EMPTY]

    def _has_liberty(self, start: int, color: int, placed: int, placed_color: int) -> bool:
        """
        Whether the group of `color` containing `start` touches an empty
        point, reading `placed` as if it already held `placed_color`.
        """
        points = self._points
        neighbors = self._neighbors
        stack = [start]
        seen = {start}
        while stack:
            position = stack.pop()
            for neighbor in neighbors[position]:
                value = placed_color if neighbor == placed else points[neighbor]
                if value == _EMPTY:
                    return True
                if value == color and neighbor not in seen:
                    seen.add(neighbor)
                    stack.append(neighbor)
        return False

    def check(self, position: int, side: PieceType) -> PlaceResult:
        """
        Classify a placement by `side` at `position`, ignoring whose turn it is.

        Args:
            position: Flat board position
            side: BLACK or WHITE

        Returns:
            PlaceResult describing whether the placement is legal
        """
        if not 0 <= position < self.size:
            return PlaceResult.ILLEGAL_POSITION
        points = self._points
        if points[position] != _EMPTY:
            return PlaceResult.ILLEGAL_PIECE

        mine = int(side)
        theirs = int(PieceType(side).opponent)

        for neighbor in self._neighbors[position]:
            if (points[neighbor] == theirs
                    and not self._has_liberty(neighbor, theirs, position, mine)):
                return PlaceResult.ILLEGAL_TAKE

        if not self._has_liberty(position, mine, position, mine):
            return PlaceResult.ILLEGAL_SUICIDE

        return PlaceResult.LEGAL

    def apply(self, move: Move) -> Tuple['Board', PlaceResult]:
        """
        Apply a move for the side to move.

        Args:
            move: Move to play

        Returns:
            Tuple of (resulting board, result). The board is this board
            unchanged when the result is not LEGAL.
        """
        if move.side != self.to_move:
            return self, PlaceResult.ILLEGAL_TURN

        result = self.check(move.position, move.side)
        if result != PlaceResult.LEGAL:
            return self, result

        points = list(self._points)
        points[move.position] = int(move.side)
        return Board._derive(self, points, move.side.opponent), result

    def legal_moves(self, side: Optional[PieceType] = None) -> List[Move]:
        """
        All legal placements for `side` (default: the side to move).
        """
        side = self.to_move if side is None else PieceType(side)
        return [
            Move(position, side)
            for position in range(self.size)
            if self.check(position, side) == PlaceResult.LEGAL
        ]

    def has_legal_move(self, side: Optional[PieceType] = None) -> bool:
        """Whether `side` (default: the side to move) can still play."""
        side = self.to_move if side is None else PieceType(side)
        return any(
            self.check(position, side) == PlaceResult.LEGAL
            for position in range(self.size)
        )

    def play(self, moves: Iterable[Move]) -> 'Board':
        """
        Apply a sequence of moves, raising ValueError on the first illegal one.
        """
        board = self
        for move in moves:
            board, result = board.apply(move)
            if result != PlaceResult.LEGAL:
                raise ValueError(f"illegal move {move}: {result.name}")
        return board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.to_move == other.to_move
            and np.array_equal(self.cells, other.cells)
        )

    def __hash__(self) -> int:
        return hash((self.width, self.height, int(self.to_move), self.cells.tobytes()))

    def __str__(self) -> str:
        header = "   " + " ".join(COLUMN_LABELS[:self.width])
        lines = [header]
        for y in range(self.height):
            row = " ".join(
                PIECE_SYMBOLS[self.at(self.index(x, y))]
                for x in range(self.width)
            )
            lines.append(f"{self.height - y:2d} {row}")
        lines.append(f"{self.to_move.name.lower()} to move")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"Board(width={self.width}, height={self.height}, "
                f"to_move={self.to_move.name}, empty={self.empty_count()})")
