"""
NoGo AI Core Package

This package contains the core game logic for NoGo, including:
- Board representation and placement rules
- Moves and the move enumerator
- Episode flow between two agents
- Constants and enums

All core components can be imported directly from this package.
"""

# Board and moves
from nogo_ai.core.board import Board
from nogo_ai.core.actions import Move, all_moves

# Game flow
from nogo_ai.core.game import (
    Game, GameResult, EpisodeResult, IllegalMoveError
)

# Constants
from nogo_ai.core.constants import (
    PieceType, PlaceResult,
    BOARD_WIDTH, BOARD_HEIGHT, TIME_SCHEDULES
)

__all__ = [
    # Board
    'Board', 'Move', 'all_moves',

    # Game
    'Game', 'GameResult', 'EpisodeResult', 'IllegalMoveError',

    # Constants
    'PieceType', 'PlaceResult',
    'BOARD_WIDTH', 'BOARD_HEIGHT', 'TIME_SCHEDULES'
]
