"""
Monte Carlo Tree Search (MCTS) algorithm for NoGo.

This module implements the search loop with the four standard phases:
1. Selection: descend the tree with the shared-statistics UCT score
2. Expansion: add every legal continuation of the selected leaf
3. Simulation: play uniformly random moves until one side cannot move
4. Backpropagation: record the result for every move on the path

A fresh tree is built for every decision and destroyed before the move is
returned, while the ActionTable passed in outlives the tree and keeps
accumulating across the decisions of one episode.
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import random
import time

from nogo_ai.core.actions import Move, all_moves
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PieceType, PlaceResult
from nogo_ai.mcts.config import MCTSConfig
from nogo_ai.mcts.node import ActionTable, SearchTree, TreeNode
from nogo_ai.mcts.policy import score_child, select_node

logger = logging.getLogger(__name__)

MoveSpace = Dict[PieceType, List[Move]]


class SearchPhase(Enum):
    """Lifecycle of one decision."""
    IDLE = auto()
    TREE_BUILT = auto()
    SEARCHING = auto()
    DECIDED = auto()
    TORN_DOWN = auto()


def build_move_space(width: int, height: int) -> MoveSpace:
    """Full move lists for both sides, indexed by position, reused by playouts."""
    return {
        PieceType.BLACK: all_moves(PieceType.BLACK, width, height),
        PieceType.WHITE: all_moves(PieceType.WHITE, width, height),
    }


def random_legal_move(
    state: Board,
    rng: random.Random,
    space: Optional[List[Move]] = None,
) -> Optional[Move]:
    """
    Shuffle the side-to-move's moves and return the first legal one.

    Args:
        state: Position to move from
        rng: Random generator
        space: Move list of the side to move, shuffled in place

    Returns:
        A uniformly random legal move, or None if there is none
    """
    if space is None:
        space = all_moves(state.to_move, state.width, state.height)
    rng.shuffle(space)
    for move in space:
        if state.apply(move)[1] == PlaceResult.LEGAL:
            return move
    return None


def simulate_game(
    state: Board,
    rng: random.Random,
    move_space: Optional[MoveSpace] = None,
) -> Tuple[PieceType, int]:
    """
    Play uniformly random moves until the side to move has no legal move.

    The side that cannot move loses. Every ply fills one empty point, so a
    playout never exceeds the number of points on the board.

    Args:
        state: Position to start from
        rng: Random generator
        move_space: Per-side move lists from build_move_space

    Returns:
        Tuple of (winner, number of plies played)
    """
    if move_space is None:
        move_space = build_move_space(state.width, state.height)

    board = state
    empties = board.empty_points()
    plies = 0
    while True:
        side = board.to_move
        # Lazy Fisher-Yates: draw candidates in random order until one is legal
        count = len(empties)
        chosen = -1
        for i in range(count):
            j = rng.randrange(i, count)
            empties[i], empties[j] = empties[j], empties[i]
            if board.check(empties[i], side) == PlaceResult.LEGAL:
                chosen = i
                break
        if chosen < 0:
            return side.opponent, plies

        position = empties[chosen]
        empties[chosen] = empties[-1]
        empties.pop()
        board, _ = board.apply(move_space[side][position])
        plies += 1


def backpropagate(
    tree: SearchTree,
    table: ActionTable,
    node: TreeNode,
    result: int,
) -> None:
    """
    Record a simulation result along the path from `node` to the root.

    Every non-root node on the path adds the result to its move's shared
    statistics and to its own counters; the root then counts it once.

    Args:
        tree: Search tree
        table: Shared move statistics
        node: Node the simulation started from
        result: 1 if the root's side won, else 0
    """
    for current in tree.path_to_root(node):
        if current.is_root:
            break
        table.record(current.move, result)
        current.visits += 1
        current.wins += result

    root = tree.root
    root.visits += 1
    root.wins += result


def run_iteration(
    tree: SearchTree,
    table: ActionTable,
    config: MCTSConfig,
    rng: random.Random,
    move_space: MoveSpace,
) -> Tuple[int, int]:
    """
    One select -> expand -> simulate -> backpropagate cycle.

    Returns:
        Tuple of (depth of the simulated node, playout length)
    """
    root_side = tree.root.state.to_move

    leaf = select_node(tree, table, config, rng)
    tree.expand(leaf)

    target = leaf
    if leaf.children:
        target = tree.node(rng.choice(leaf.children))

    winner, plies = simulate_game(target.state, rng, move_space)
    backpropagate(tree, table, target, 1 if winner == root_side else 0)

    depth = sum(1 for _ in tree.path_to_root(target)) - 1
    return depth, plies


def choose_root_move(
    tree: SearchTree,
    table: ActionTable,
    config: MCTSConfig,
    rng: random.Random,
) -> Tuple[Optional[Move], bool]:
    """
    Pick the root child with the best selection score.

    Only children whose shared total is at least 1 are scored. If none
    qualifies, the first child in shuffled order is returned.

    Returns:
        Tuple of (chosen move or None without children, whether the fallback
        was used)
    """
    children = tree.children(tree.root)
    if not children:
        return None, False
    rng.shuffle(children)

    best: Optional[TreeNode] = None
    best_score = float('-inf')
    for child in children:
        if table.total(child.move) < 1:
            continue
        score = score_child(tree, table, child, config)
        if score > best_score:
            best_score = score
            best = child

    if best is None:
        return children[0].move, True
    return best.move, False


def mcts_search(
    state: Board,
    table: ActionTable,
    config: MCTSConfig,
    rng: random.Random,
    ply: int = 0,
    on_phase: Optional[Callable[[SearchPhase], None]] = None,
) -> Tuple[Optional[Move], Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    This function runs the full MCTS algorithm:
    1. Create a tree rooted at `state` and expand the root
    2. Repeat search iterations until the budget is spent (at least once)
    3. Return the root move with the best selection score
    The tree is destroyed on every exit path.

    Args:
        state: Current position; its side to move is the searching side
        table: Shared move statistics for the current episode
        config: MCTS configuration parameters
        rng: The agent's random generator
        ply: Index into the time schedule
        on_phase: Called on every SearchPhase transition

    Returns:
        Tuple of (best move or None when there is no legal move, search
        statistics)
    """
    def enter(phase: SearchPhase) -> None:
        if on_phase is not None:
            on_phase(phase)

    time_limit = config.time_limit(ply)
    stats: Dict[str, Any] = {
        "iterations": 0,
        "max_depth": 0,
        "total_simulation_steps": 0,
        "time_elapsed": 0.0,
        "time_limit": time_limit,
        "node_count": 1,
        "root_visits": 0,
        "used_fallback": False,
        "action_visits": {},
        "action_rewards": {},
        "principal_variation": [],
    }

    start_time = time.time()
    tree = SearchTree.create_root(state)
    enter(SearchPhase.TREE_BUILT)
    best_move: Optional[Move] = None

    try:
        tree.expand(tree.root)
        if not tree.root.children:
            logger.debug("no legal move for %s", state.to_move.name.lower())
            enter(SearchPhase.DECIDED)
            return None, stats

        move_space = build_move_space(state.width, state.height)
        enter(SearchPhase.SEARCHING)
        while True:
            depth, plies = run_iteration(tree, table, config, rng, move_space)
            stats["iterations"] += 1
            stats["total_simulation_steps"] += plies
            stats["max_depth"] = max(stats["max_depth"], depth)

            if time_limit is not None:
                if time.time() - start_time >= time_limit:
                    break
            elif stats["iterations"] >= config.iterations:
                break

        best_move, stats["used_fallback"] = choose_root_move(tree, table, config, rng)
        enter(SearchPhase.DECIDED)

        stats["node_count"] = tree.size
        stats["root_visits"] = tree.root.visits
        for move, action_stats in get_action_statistics(tree, table).items():
            stats["action_visits"][move] = action_stats["total"]
            stats["action_rewards"][move] = action_stats["value"]
        stats["principal_variation"] = get_principal_variation(tree, table)
    finally:
        tree.destroy()
        enter(SearchPhase.TORN_DOWN)

        stats["time_elapsed"] = time.time() - start_time
        stats["iterations_per_second"] = stats["iterations"] / max(0.001, stats["time_elapsed"])
        stats["average_simulation_steps"] = (
            stats["total_simulation_steps"] / max(1, stats["iterations"])
        )

    logger.debug(
        "%s: %d iterations in %.3fs, %d nodes, chose %s",
        state.to_move.name.lower(), stats["iterations"], stats["time_elapsed"],
        stats["node_count"], best_move,
    )
    return best_move, stats


def get_principal_variation(
    tree: SearchTree,
    table: ActionTable,
    max_depth: int = 10,
) -> List[Tuple[Move, float]]:
    """
    Get the principal variation (most visited path) from the root.

    This is useful for analysis and debugging.

    Args:
        tree: Search tree (not yet destroyed)
        table: Shared move statistics
        max_depth: Maximum depth to explore

    Returns:
        List of (move, shared win rate) pairs
    """
    result = []
    current = tree.root

    while current.children and len(result) < max_depth:
        best = max(tree.children(current), key=lambda c: (c.visits, table.total(c.move)))
        if best.visits == 0:
            break
        result.append((best.move, table.get(best.move).win_rate))
        current = best

    return result


def get_action_statistics(
    tree: SearchTree,
    table: ActionTable,
) -> Dict[Move, Dict[str, float]]:
    """
    Get statistics for all moves from the root.

    Args:
        tree: Search tree (not yet destroyed)
        table: Shared move statistics

    Returns:
        Dictionary mapping root moves to their statistics
    """
    result = {}
    for child in tree.children(tree.root):
        action_stats = table.get(child.move)
        result[child.move] = {
            "total": action_stats.total,
            "win": action_stats.win,
            "value": action_stats.win_rate,
            "visits": child.visits,
        }
    return result
