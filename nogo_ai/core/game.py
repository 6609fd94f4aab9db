"""
Game flow management for NoGo.

This module runs episodes between two agents:
- Game: alternates the black and white agents on a shared board
- EpisodeResult: the outcome and bookkeeping of one finished episode
- IllegalMoveError: raised in strict mode when an agent plays an illegal move

An episode ends when the side to move has no move to offer (the agent
returns None) or, outside strict mode, when an agent plays an illegal move.
In both cases the side to move loses.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Protocol, Tuple
import logging
import time

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PieceType, PlaceResult, BOARD_WIDTH, BOARD_HEIGHT

logger = logging.getLogger(__name__)


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()   # The loser had no move left
    FORFEIT = auto()  # The loser played an illegal move


class IllegalMoveError(ValueError):
    """An agent produced a move the board rejected."""

    def __init__(self, move: Move, result: PlaceResult):
        super().__init__(f"illegal move {move}: {result.name}")
        self.move = move
        self.result = result


class EpisodeAgent(Protocol):
    """What the Game needs from a player."""

    def name(self) -> str: ...

    def open_episode(self, flag: str = "") -> None: ...

    def close_episode(self, flag: str = "") -> None: ...

    def take_action(self, state: Board) -> Optional[Move]: ...


@dataclass
class EpisodeResult:
    """Outcome of a finished episode."""
    winner: PieceType
    result: GameResult
    moves: List[Move] = field(default_factory=list)
    move_times: Dict[PieceType, List[float]] = field(default_factory=dict)
    duration: float = 0.0
    final_state: Optional[Board] = None

    @property
    def plies(self) -> int:
        return len(self.moves)

    @property
    def loser(self) -> PieceType:
        return self.winner.opponent

    def average_move_time(self, side: PieceType) -> float:
        times = self.move_times.get(side, [])
        return sum(times) / len(times) if times else 0.0


class Game:
    """
    Manager for NoGo game flow.

    The black agent always moves first. Agents keep their own per-episode
    state, which the Game resets through open_episode/close_episode.
    """

    def __init__(
        self,
        black: EpisodeAgent,
        white: EpisodeAgent,
        width: int = BOARD_WIDTH,
        height: int = BOARD_HEIGHT,
        strict: bool = False,
    ):
        """
        Initialize a new NoGo game.

        Args:
            black: Agent playing black
            white: Agent playing white
            width: Board width
            height: Board height
            strict: Raise IllegalMoveError instead of forfeiting
        """
        self.agents: Dict[PieceType, EpisodeAgent] = {
            PieceType.BLACK: black,
            PieceType.WHITE: white,
        }
        self.width = width
        self.height = height
        self.strict = strict

        self.state = Board(width, height)
        self.moves: List[Move] = []
        self.move_times: Dict[PieceType, List[float]] = {
            PieceType.BLACK: [], PieceType.WHITE: []
        }
        self.winner: Optional[PieceType] = None
        self.result = GameResult.IN_PROGRESS
        self._start_time = time.time()

    @property
    def game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    def reset(self) -> Board:
        """
        Reset the game to an empty board.

        Returns:
            New game state
        """
        self.state = Board(self.width, self.height)
        self.moves = []
        self.move_times = {PieceType.BLACK: [], PieceType.WHITE: []}
        self.winner = None
        self.result = GameResult.IN_PROGRESS
        self._start_time = time.time()
        return self.state

    def step(self) -> Tuple[Board, bool]:
        """
        Ask the side to move for a move and apply it.

        Returns:
            Tuple of (new game state, whether the game is over)
        """
        if self.game_over:
            return self.state, True

        side = self.state.to_move
        agent = self.agents[side]

        start = time.time()
        move = agent.take_action(self.state)
        self.move_times[side].append(time.time() - start)

        if move is None:
            self._finish(side.opponent, GameResult.WINNER)
            return self.state, True

        after, result = self.state.apply(move)
        if result != PlaceResult.LEGAL:
            if self.strict:
                raise IllegalMoveError(move, result)
            logger.warning("%s forfeits with %s (%s)", agent.name(), move, result.name)
            self._finish(side.opponent, GameResult.FORFEIT)
            return self.state, True

        self.state = after
        self.moves.append(move)
        return self.state, False

    def _finish(self, winner: PieceType, result: GameResult) -> None:
        self.winner = winner
        self.result = result

    def play_episode(self) -> EpisodeResult:
        """
        Play one full episode from an empty board.

        Returns:
            EpisodeResult for the finished game
        """
        self.reset()
        for agent in self.agents.values():
            agent.open_episode()

        try:
            while not self.game_over:
                self.step()
        finally:
            for agent in self.agents.values():
                agent.close_episode()

        episode = EpisodeResult(
            winner=self.winner,
            result=self.result,
            moves=list(self.moves),
            move_times={side: list(times) for side, times in self.move_times.items()},
            duration=time.time() - self._start_time,
            final_state=self.state,
        )
        logger.info(
            "%s (%s) wins after %d plies",
            self.agents[episode.winner].name(), episode.winner.name.lower(), episode.plies
        )
        return episode

    def get_game_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about the game.

        Returns:
            Dictionary of game statistics
        """
        stats: Dict[str, Any] = {
            "plies": len(self.moves),
            "duration": time.time() - self._start_time,
            "result": self.result.name,
            "empty_points": self.state.empty_count(),
        }
        if self.winner is not None:
            stats["winner"] = self.winner.name.lower()
            stats["winner_name"] = self.agents[self.winner].name()
        for side, times in self.move_times.items():
            stats[f"{side.name.lower()}_move_time"] = sum(times) / len(times) if times else 0.0
        return stats

    def __str__(self) -> str:
        status = "in progress" if not self.game_over else f"{self.winner.name.lower()} won"
        return (f"NoGo {self.width}x{self.height} "
                f"({self.agents[PieceType.BLACK].name()} vs "
                f"{self.agents[PieceType.WHITE].name()}, ply {len(self.moves)}, {status})\n"
                f"{self.state}")
