#!/usr/bin/env python
"""
Command-line arena for NoGo agents.

Runs a series of episodes between two agents described by argument strings
and prints a summary table.

Example usage:
    # MCTS against the random policy
    nogo-play --black "name=mcts n=500 seed=1" --white "name=rand random seed=2"

    # Two timed MCTS agents on a 7x7 board
    nogo-play --black "time=blitz" --white "c=0.8 time=blitz" --size 7 --episodes 5
"""
import argparse
import logging
from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from nogo_ai.core.constants import PieceType, BOARD_WIDTH, COLUMN_LABELS
from nogo_ai.core.game import EpisodeResult, Game
from nogo_ai.mcts.agent import MCTSAgent

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the arena."""
    parser = argparse.ArgumentParser(description="Play NoGo episodes between two agents")

    parser.add_argument("--black", type=str, default="name=mcts-black",
                        help="Argument string for the black agent")
    parser.add_argument("--white", type=str, default="name=random-white random",
                        help="Argument string for the white agent")
    parser.add_argument("--episodes", type=int, default=1,
                        help="Number of episodes to play")
    parser.add_argument("--size", type=int, default=BOARD_WIDTH,
                        help="Board width and height")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed both agents (seed+1 for white) unless their strings set one")
    parser.add_argument("--show-board", action="store_true",
                        help="Print the final board of every episode")
    parser.add_argument("--verbose", action="store_true",
                        help="Print a search summary for every move")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")

    args = parser.parse_args(argv)
    if args.episodes <= 0:
        parser.error("--episodes must be positive")
    if not 0 < args.size <= len(COLUMN_LABELS):
        parser.error(f"--size must be between 1 and {len(COLUMN_LABELS)}")
    return args


def create_agent(agent_args: str, role: str, seed: Optional[int], verbose: bool) -> MCTSAgent:
    """
    Build an agent for `role`, adding the shared seed if the string has none.
    """
    if seed is not None and "seed=" not in agent_args:
        agent_args = f"{agent_args} seed={seed}"
    return MCTSAgent(f"{agent_args} role={role}", verbose=verbose)


def summarize(results: List[EpisodeResult], black: MCTSAgent, white: MCTSAgent) -> Table:
    """
    Build a rich table summarizing a series of episodes.
    """
    wins = Counter(result.winner for result in results)
    plies = [result.plies for result in results]

    table = Table(title=f"NoGo results ({len(results)} episodes)")
    table.add_column("Side")
    table.add_column("Agent")
    table.add_column("Wins", justify="right")
    table.add_column("Win rate", justify="right")
    table.add_column("Avg move time (s)", justify="right")

    for side, agent in ((PieceType.BLACK, black), (PieceType.WHITE, white)):
        move_times = [result.average_move_time(side) for result in results]
        table.add_row(
            side.name.lower(),
            str(agent),
            str(wins[side]),
            f"{wins[side] / len(results):.1%}",
            f"{sum(move_times) / len(move_times):.3f}",
        )

    table.caption = f"average plies: {sum(plies) / len(plies):.1f}"
    return table


def play(args: argparse.Namespace) -> List[EpisodeResult]:
    """
    Play the requested episodes.

    Returns:
        One EpisodeResult per episode
    """
    console = Console()
    seed = args.seed
    black = create_agent(args.black, "black", seed, args.verbose)
    white = create_agent(args.white, "white", None if seed is None else seed + 1, args.verbose)

    game = Game(black, white, width=args.size, height=args.size)
    results = []
    for episode in tqdm(range(args.episodes), desc="Episodes", disable=args.episodes == 1):
        result = game.play_episode()
        results.append(result)
        logger.info("episode %d: %s wins in %d plies",
                    episode, result.winner.name.lower(), result.plies)
        if args.show_board:
            console.print(str(result.final_state))

    console.print(summarize(results, black, white))
    return results


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the nogo-play console script."""
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    try:
        play(args)
    except ValueError as e:
        logger.error("%s", e)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
