"""
NoGo AI - A Monte Carlo Tree Search player for the board game NoGo.

This package provides the NoGo rules, an episode runner, and an MCTS agent
that searches with shared move statistics and a local-shape bonus.
"""

__version__ = "0.1.0"
__author__ = "NoGo AI Team"

# Make key components available at package level
from nogo_ai.core.board import Board
from nogo_ai.core.actions import Move
from nogo_ai.core.game import Game
from nogo_ai.mcts.agent import MCTSAgent

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))

# Default configuration
DEFAULT_CONFIG = {
    "board_width": 9,
    "board_height": 9,
}
