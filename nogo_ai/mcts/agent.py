"""
Monte Carlo Tree Search Agent for NoGo.

This module provides the agents that take part in NoGo episodes:
- Agent: argument-string metadata (name, role, ...) shared by all agents
- MCTSAgent: plays one side with Monte Carlo Tree Search, or with uniformly
  random legal moves when configured with the `random` flag

Agents are described by argument strings such as
"name=mcts role=black c=0.5 n=2000 seed=7".
"""
from typing import Any, Dict, List, Optional, Tuple
import json
import logging
import random

from nogo_ai.core.actions import Move, all_moves
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PieceType, RESERVED_NAME_CHARS
from nogo_ai.mcts.config import MCTSConfig, parse_agent_args
from nogo_ai.mcts.node import ActionTable
from nogo_ai.mcts.search import SearchPhase, mcts_search, random_legal_move

logger = logging.getLogger(__name__)

ROLES: Dict[str, PieceType] = {
    "black": PieceType.BLACK,
    "white": PieceType.WHITE,
}


class Agent:
    """
    Base class holding the key=value metadata of an agent.

    Every agent starts with name=unknown and role=unknown; later pairs in the
    argument string override earlier ones.
    """

    def __init__(self, args: str = ""):
        self.meta: Dict[str, str] = parse_agent_args("name=unknown role=unknown " + args)

    def open_episode(self, flag: str = "") -> None:
        pass

    def close_episode(self, flag: str = "") -> None:
        pass

    def take_action(self, state: Board) -> Optional[Move]:
        return None

    def property(self, key: str) -> str:
        return self.meta[key]

    def notify(self, message: str) -> None:
        """Set one "key=value" pair after construction."""
        key, _, value = message.partition("=")
        self.meta[key] = value

    def name(self) -> str:
        return self.property("name")

    def role(self) -> str:
        return self.property("role")


class MCTSAgent(Agent):
    """
    Monte Carlo Tree Search agent for one side of a NoGo game.

    The agent owns everything a search needs across decisions: its random
    generator, the shared move statistics of the current episode and the
    ply counter that indexes the time schedule. Two agents never share any of
    these, so several can play in one process.
    """

    def __init__(
        self,
        args: str = "",
        config: Optional[MCTSConfig] = None,
        verbose: bool = False,
    ):
        """
        Initialize an MCTS agent.

        Args:
            args: Argument string; must contain role=black or role=white
            config: MCTS configuration, overriding c/n/seed/time/random in args
            verbose: Whether to print a summary after each search

        Raises:
            ValueError: For a reserved character in the name, an unknown role
                or invalid search parameters
        """
        super().__init__("name=mcts role=unknown " + args)

        if any(ch in RESERVED_NAME_CHARS for ch in self.name()):
            raise ValueError(f"invalid name: {self.name()}")
        if self.role() not in ROLES:
            raise ValueError(f"invalid role: {self.role()}")

        self.who = ROLES[self.role()]
        self.config = config or MCTSConfig.from_meta(self.meta)
        self.verbose = verbose

        self.rng = random.Random(self.config.seed)
        self.table = ActionTable()
        self.ply = 0
        self.phase = SearchPhase.IDLE

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.action_history: List[Tuple[Optional[Move], Dict[str, Any]]] = []

    def open_episode(self, flag: str = "") -> None:
        """Start a new game: forget move statistics and restart the ply count."""
        self.table.clear()
        self.ply = 0
        self.phase = SearchPhase.IDLE

    def close_episode(self, flag: str = "") -> None:
        logger.debug("%s closes episode after %d decisions", self.name(), self.ply)

    def _set_phase(self, phase: SearchPhase) -> None:
        self.phase = phase

    def take_action(self, state: Board) -> Optional[Move]:
        """
        Choose a move for this agent's side.

        Args:
            state: Current position; must be this agent's turn

        Returns:
            Chosen move, or None when no legal move exists
        """
        if state.to_move != self.who:
            raise ValueError(f"Not {self.role()}'s turn")

        if self.config.random_player:
            move = random_legal_move(
                state, self.rng, all_moves(self.who, state.width, state.height)
            )
            stats: Dict[str, Any] = {"iterations": 0, "random_player": True}
        else:
            move, stats = mcts_search(
                state, self.table, self.config, self.rng,
                ply=self.ply, on_phase=self._set_phase,
            )
            self.phase = SearchPhase.IDLE

        self.ply += 1
        self.last_stats = stats
        self.action_history.append((move, stats))

        if self.verbose:
            self._print_search_info(state, move, stats)

        return move

    def _print_search_info(self, state: Board, move: Optional[Move], stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            state: Position that was searched
            move: Selected move
            stats: Search statistics
        """
        text = move.to_text(state.width, state.height) if move else "pass"
        print(f"\n{self.name()} ({self.role()}) selected: {text}")
        if stats.get("random_player"):
            return
        print(f"Iterations: {stats['iterations']}")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")
        print(f"Max depth: {stats['max_depth']}")

        if stats.get("action_visits"):
            print("\nTop moves:")
            by_visits = sorted(stats["action_visits"].items(), key=lambda x: x[1], reverse=True)
            for i, (candidate, visits) in enumerate(by_visits[:5]):
                win_rate = stats["action_rewards"].get(candidate, 0.0)
                print(f"{i+1}. {candidate.to_text(state.width, state.height)}"
                      f" - {visits} visits, {win_rate:.3f} value")

    def get_last_statistics(self) -> Dict[str, Any]:
        """
        Get statistics from the most recent search.

        Returns:
            Dictionary of search statistics
        """
        return self.last_stats

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.action_history = []

    def save_statistics(self, filename: str) -> None:
        """
        Save the per-move search statistics to a JSON file.

        Args:
            filename: Name of the file to save to
        """
        history = []
        for move, stats in self.action_history:
            history.append({
                "move": str(move) if move is not None else None,
                "stats": {k: v for k, v in stats.items()
                          if isinstance(v, (int, float, bool, str)) or v is None},
            })

        config = self.config.to_dict()
        config["time_schedule"] = (list(self.config.time_schedule)
                                   if self.config.time_schedule else None)
        config["shape_weights"] = list(self.config.shape_weights)

        data = {
            "agent_name": self.name(),
            "role": self.role(),
            "config": config,
            "history": history,
            "total_actions": len(self.action_history),
        }

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def __str__(self) -> str:
        if self.config.random_player:
            return f"{self.name()} ({self.role()}, random)"
        budget = ("timed" if self.config.timed
                  else f"{self.config.iterations} iterations")
        return f"{self.name()} ({self.role()}, MCTS, {budget})"
