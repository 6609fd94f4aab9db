"""
Configuration for Monte Carlo Tree Search (MCTS).

This module defines the configuration parameters for the MCTS agent:
the exploration constant, the search budget (iteration count or per-ply time
schedule), the random seed, the local-shape weights and the plain-random
fallback flag. Configurations can also be built from the "key=value"
argument strings used to describe agents on the command line.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from nogo_ai.core.constants import (
    DEFAULT_MCTS_ITERATIONS, DEFAULT_MCTS_EXPLORATION, DEFAULT_SHAPE_WEIGHTS,
    TIME_SCHEDULES
)


def parse_agent_args(args: str) -> Dict[str, str]:
    """
    Split an argument string such as "name=mcts c=0.5 random" into a dict.

    A bare word without "=" maps to itself, so flags can be tested with `in`.
    Later keys override earlier ones.

    Args:
        args: Whitespace separated key=value pairs

    Returns:
        Dictionary of raw string values
    """
    meta = {}
    for pair in args.split():
        key, sep, value = pair.partition("=")
        meta[key] = value if sep else key
    return meta


def parse_time_schedule(value: str) -> Tuple[float, ...]:
    """
    Resolve a schedule name from TIME_SCHEDULES or a comma-separated list of
    seconds per ply.
    """
    if value in TIME_SCHEDULES:
        return TIME_SCHEDULES[value]
    try:
        schedule = tuple(float(item) for item in value.split(",") if item)
    except ValueError as e:
        raise ValueError(f"invalid time schedule: {value!r}") from e
    if not schedule:
        raise ValueError(f"invalid time schedule: {value!r}")
    return schedule


@dataclass
class MCTSConfig:
    """
    Configuration parameters for Monte Carlo Tree Search.

    The budget is a fixed iteration count unless a time schedule is given,
    in which case each decision searches for the schedule's allowance at the
    current ply.
    """
    # Search parameters
    iterations: int = DEFAULT_MCTS_ITERATIONS
    """Number of MCTS iterations per move when no time schedule is set"""

    exploration_weight: float = DEFAULT_MCTS_EXPLORATION
    """UCT exploration constant c"""

    time_schedule: Optional[Tuple[float, ...]] = None
    """Seconds per ply, indexed by ply; the last entry covers later plies"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed for the agent's random generator (None = nondeterministic)"""

    # Strategy parameters
    random_player: bool = False
    """Play a uniformly random legal move instead of searching"""

    shape_weights: Tuple[float, ...] = field(default=DEFAULT_SHAPE_WEIGHTS)
    """Local-shape bonus indexed by min(direction count, 3)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.iterations <= 0:
            raise ValueError("iterations must be positive")

        if self.exploration_weight < 0:
            raise ValueError("exploration_weight must be non-negative")

        if self.time_schedule is not None:
            self.time_schedule = tuple(float(t) for t in self.time_schedule)
            if not self.time_schedule:
                raise ValueError("time_schedule must not be empty")
            if any(t <= 0 for t in self.time_schedule):
                raise ValueError("time_schedule entries must be positive")

        self.shape_weights = tuple(float(w) for w in self.shape_weights)
        if len(self.shape_weights) != 4:
            raise ValueError("shape_weights must have exactly 4 entries")

    @property
    def timed(self) -> bool:
        """Whether the budget is wall-clock rather than an iteration count."""
        return self.time_schedule is not None

    def time_limit(self, ply: int) -> Optional[float]:
        """
        Seconds allowed for the decision at `ply` (0-based).

        Returns:
            The allowance, or None when the budget is an iteration count
        """
        if self.time_schedule is None:
            return None
        return self.time_schedule[min(max(ply, 0), len(self.time_schedule) - 1)]

    @classmethod
    def default(cls) -> 'MCTSConfig':
        """
        Get the default configuration.

        Returns:
            Default MCTSConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for speed (fewer iterations).

        Returns:
            Fast MCTSConfig object
        """
        return cls(iterations=100)

    @classmethod
    def deep(cls) -> 'MCTSConfig':
        """
        Get a configuration optimized for deep search.

        Returns:
            Deep MCTSConfig object
        """
        return cls(iterations=5000, exploration_weight=1.2)

    @classmethod
    def timed_preset(cls, schedule: str = "standard") -> 'MCTSConfig':
        """
        Get a configuration that searches against a named time schedule.

        Returns:
            Timed MCTSConfig object
        """
        return cls(time_schedule=parse_time_schedule(schedule))

    @classmethod
    def from_args(cls, args: str) -> 'MCTSConfig':
        """
        Create a configuration from an agent argument string.

        Recognized keys are c (exploration), n (iterations), seed,
        time (schedule name or seconds list) and the bare flag random.
        Other keys (name, role, ...) are ignored here.

        Args:
            args: Argument string such as "c=0.5 n=2000 seed=1"

        Returns:
            MCTSConfig object
        """
        return cls.from_meta(parse_agent_args(args))

    @classmethod
    def from_meta(cls, meta: Dict[str, str]) -> 'MCTSConfig':
        """
        Create a configuration from already split agent arguments.
        """
        params: Dict[str, Any] = {}
        try:
            if "c" in meta:
                params["exploration_weight"] = float(meta["c"])
            if "n" in meta:
                params["iterations"] = int(meta["n"])
            if "seed" in meta:
                params["seed"] = int(meta["seed"])
        except ValueError as e:
            raise ValueError(f"invalid numeric agent argument: {e}") from e
        if "time" in meta:
            params["time_schedule"] = parse_time_schedule(meta["time"])
        if "random" in meta:
            params["random_player"] = True
        return cls(**params)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'MCTSConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            MCTSConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __str__(self) -> str:
        budget = (f"time_schedule[{len(self.time_schedule)}]" if self.timed
                  else f"iterations={self.iterations}")
        return (f"MCTSConfig({budget}, c={self.exploration_weight}, "
                f"seed={self.seed}, random_player={self.random_player})")
