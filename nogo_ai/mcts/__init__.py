"""
Monte Carlo Tree Search (MCTS) implementation for NoGo.

This package provides the MCTS agent that plays NoGo without any training.
Each decision builds a fresh tree and repeats:

1. Selection: From the root, descend into the child with the best UCT score
   computed over move statistics shared across the whole tree, plus a
   local-shape bonus. Moves never tried before are taken first.
2. Expansion: Add every legal continuation of the selected leaf.
3. Simulation: Play uniformly random legal moves until a side cannot move.
4. Backpropagation: Add the result to the shared statistics of every move on
   the path and to the root.

The tree is discarded after the move is chosen; the shared statistics last
for the whole episode.
"""

from nogo_ai.mcts.node import (
    TreeNode,
    SearchTree,
    ActionStatistics,
    ActionTable,
    TreeDestroyedError
)
from nogo_ai.mcts.policy import select_node, score_child, shape_bonus
from nogo_ai.mcts.search import (
    SearchPhase,
    mcts_search,
    simulate_game,
    backpropagate,
    random_legal_move
)
from nogo_ai.mcts.agent import Agent, MCTSAgent
from nogo_ai.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=1000,           # Number of MCTS iterations per move
    exploration_weight=1.41,   # UCT exploration parameter (sqrt(2))
    time_schedule=None,        # Optional seconds per ply (None = iteration budget)
)

__all__ = [
    'Agent',
    'MCTSAgent',
    'MCTSConfig',
    'TreeNode',
    'SearchTree',
    'ActionStatistics',
    'ActionTable',
    'TreeDestroyedError',
    'SearchPhase',
    'mcts_search',
    'select_node',
    'score_child',
    'shape_bonus',
    'simulate_game',
    'backpropagate',
    'random_legal_move',
    'DEFAULT_CONFIG'
]
