"""
Tree policy for the NoGo MCTS agent.

Children are scored with UCT computed over the shared ActionTable rather
than per-node counters:

    score = win / total + c * sqrt(ln(parent_total) / total) + shape_bonus

`parent_total` is the root's visit count for children of the root and the
parent move's shared total everywhere else. A move whose shared total is
still zero is always tried before any scored move.
"""
from __future__ import annotations
import math
import random
from typing import Sequence

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PlaceResult, DIRECTIONS
from nogo_ai.mcts.config import MCTSConfig
from nogo_ai.mcts.node import ActionTable, SearchTree, TreeNode


def shape_bonus(state: Board, move: Move, weights: Sequence[float]) -> float:
    """
    Local-shape correction for `move`, evaluated on the position after it.

    Each cardinal direction is probed one and two steps away from the
    placement:
    - a same-colour stone on the first step, or on the second step behind an
      empty first step, makes the direction a cluster direction;
    - an empty first step that the opponent may not play but we may is an
      open direction, a liberty only we can use.

    Args:
        state: Board after `move` was applied
        move: The placement being scored
        weights: Four weights indexed by min(count, 3)

    Returns:
        weights[open] - weights[cluster]
    """
    side = move.side
    opponent = side.opponent
    x, y = state.coordinates(move.position)

    open_dirs = 0
    cluster_dirs = 0
    for dx, dy in DIRECTIONS:
        x1, y1 = x + dx, y + dy
        if not state.on_board(x1, y1):
            continue
        first = state.index(x1, y1)

        probe = state.check(first, side)
        if probe == PlaceResult.ILLEGAL_PIECE:
            if state.at(first) == side:
                cluster_dirs += 1
            continue

        x2, y2 = x1 + dx, y1 + dy
        if state.on_board(x2, y2) and state.at(state.index(x2, y2)) == side:
            cluster_dirs += 1
            continue

        if probe == PlaceResult.LEGAL and state.check(first, opponent) != PlaceResult.LEGAL:
            open_dirs += 1

    return weights[min(open_dirs, 3)] - weights[min(cluster_dirs, 3)]


def node_shape_bonus(node: TreeNode, config: MCTSConfig) -> float:
    """Shape bonus of a non-root node, computed once and cached on the node."""
    if node.shape is None:
        node.shape = shape_bonus(node.state, node.move, config.shape_weights)
    return node.shape


def score_child(
    tree: SearchTree,
    table: ActionTable,
    child: TreeNode,
    config: MCTSConfig,
) -> float:
    """
    Calculate the selection score of a non-root node.

    A zero shared total scores +inf instead of being divided by.

    Args:
        tree: Tree containing `child`
        table: Shared move statistics
        child: Node to score
        config: Supplies the exploration constant and shape weights

    Returns:
        Selection score
    """
    stats = table.get(child.move)
    if stats.total <= 0:
        return float('inf')

    parent = tree.parent(child)
    if parent.is_root:
        reference_total = parent.visits
    else:
        reference_total = table.total(parent.move)

    exploitation = stats.win / stats.total
    exploration = 0.0
    if reference_total > 0:
        exploration = math.sqrt(math.log(reference_total) / stats.total)

    return (exploitation
            + config.exploration_weight * exploration
            + node_shape_bonus(child, config))


def best_child(
    tree: SearchTree,
    table: ActionTable,
    node: TreeNode,
    config: MCTSConfig,
    rng: random.Random,
) -> TreeNode:
    """
    Pick the child of `node` to descend into.

    Children are visited in shuffled order; the first one whose move has no
    shared statistics yet is returned at once, otherwise the highest score
    wins and ties go to the earlier child in the shuffled order.
    """
    children = tree.children(node)
    if not children:
        raise ValueError("Cannot select child from node with no children")
    rng.shuffle(children)

    best = children[0]
    best_score = -math.inf
    for child in children:
        if table.total(child.move) == 0:
            return child
        score = score_child(tree, table, child, config)
        if score > best_score:
            best_score = score
            best = child
    return best


def select_node(
    tree: SearchTree,
    table: ActionTable,
    config: MCTSConfig,
    rng: random.Random,
) -> TreeNode:
    """
    Descend from the root to a node without children.

    The side to move alternates at every level, which each node's state
    already records; the returned node is either unexpanded or terminal.

    Args:
        tree: Search tree
        table: Shared move statistics
        config: MCTS configuration
        rng: The agent's random generator

    Returns:
        Leaf node to expand and simulate
    """
    current = tree.root
    while current.children:
        current = best_child(tree, table, current, config, rng)
    return current
