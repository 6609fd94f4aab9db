"""
Tests for MCTS configuration and the MCTS agent.
"""
import json

import pytest

from nogo_ai.core.actions import Move
from nogo_ai.core.board import Board
from nogo_ai.core.constants import PieceType, PlaceResult, TIME_SCHEDULES
from nogo_ai.mcts.agent import Agent, MCTSAgent
from nogo_ai.mcts.config import MCTSConfig, parse_agent_args
from nogo_ai.mcts.search import SearchPhase


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_parse_agent_args():
    meta = parse_agent_args("name=a c=0.5 random name=b")
    assert meta == {"name": "b", "c": "0.5", "random": "random"}


def test_config_from_args():
    config = MCTSConfig.from_args("name=x c=0.3 n=250 seed=9 random")
    assert config.exploration_weight == 0.3
    assert config.iterations == 250
    assert config.seed == 9
    assert config.random_player
    assert not config.timed


def test_config_time_schedule():
    config = MCTSConfig.from_args("time=blitz")
    assert config.time_schedule == TIME_SCHEDULES["blitz"]
    assert config.time_limit(0) == TIME_SCHEDULES["blitz"][0]
    assert config.time_limit(10_000) == TIME_SCHEDULES["blitz"][-1]

    custom = MCTSConfig.from_args("time=0.5,1.5")
    assert custom.time_schedule == (0.5, 1.5)
    assert custom.time_limit(1) == 1.5
    assert MCTSConfig().time_limit(3) is None


@pytest.mark.parametrize("args", [
    "n=0",
    "n=ten",
    "c=-1",
    "c=abc",
    "seed=1.5",
    "time=fast-ish",
    "time=0,1",
])
def test_config_rejects_invalid_values(args):
    with pytest.raises(ValueError):
        MCTSConfig.from_args(args)


def test_config_shape_weights_length():
    with pytest.raises(ValueError):
        MCTSConfig(shape_weights=(0.0, 0.1))


def test_config_dict_round_trip():
    config = MCTSConfig(iterations=10, seed=3)
    data = config.to_dict()
    assert data["iterations"] == 10
    assert MCTSConfig.from_dict({**data, "unknown": 1}) == config


def test_presets():
    assert MCTSConfig.fast().iterations < MCTSConfig.default().iterations < MCTSConfig.deep().iterations
    assert MCTSConfig.timed_preset("long").timed


# ---------------------------------------------------------------------------
# Agent construction
# ---------------------------------------------------------------------------

def test_agent_metadata():
    agent = Agent("name=alpha")
    assert agent.name() == "alpha"
    assert agent.role() == "unknown"
    agent.notify("role=black")
    assert agent.property("role") == "black"
    assert agent.take_action(Board()) is None


def test_mcts_agent_defaults():
    agent = MCTSAgent("role=white")
    assert agent.name() == "mcts"
    assert agent.who == PieceType.WHITE
    assert agent.phase == SearchPhase.IDLE


@pytest.mark.parametrize("args", ["role=red", "", "role=black name=bad;name", "role=white name=(x)"])
def test_mcts_agent_rejects_bad_arguments(args):
    with pytest.raises(ValueError):
        MCTSAgent(args)


def test_explicit_config_wins():
    agent = MCTSAgent("role=black n=5", config=MCTSConfig(iterations=7))
    assert agent.config.iterations == 7


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

def test_take_action_returns_legal_move_and_counts_plies():
    agent = MCTSAgent("role=black n=30 seed=1")
    agent.open_episode()
    state = Board(4, 4)

    move = agent.take_action(state)

    assert move is not None and move.side == PieceType.BLACK
    assert state.apply(move)[1] == PlaceResult.LEGAL
    assert agent.ply == 1
    assert agent.phase == SearchPhase.IDLE
    assert agent.get_last_statistics()["iterations"] == 30
    assert len(agent.table) > 0


def test_take_action_wrong_turn():
    agent = MCTSAgent("role=white n=5")
    with pytest.raises(ValueError):
        agent.take_action(Board(3, 3))


def test_take_action_without_legal_move():
    agent = MCTSAgent("role=black n=5")
    assert agent.take_action(Board(1, 1)) is None

    random_agent = MCTSAgent("role=black random")
    assert random_agent.take_action(Board(1, 1)) is None


def test_random_player_plays_legal_moves():
    agent = MCTSAgent("role=black random seed=4")
    state = Board.from_rows([".X.", "X..", "..."], to_move=PieceType.BLACK)
    for _ in range(10):
        move = agent.take_action(state)
        assert state.apply(move)[1] == PlaceResult.LEGAL
    assert agent.get_last_statistics()["random_player"]


def test_open_episode_resets_statistics_and_ply():
    agent = MCTSAgent("role=black n=10 seed=2")
    agent.open_episode()
    agent.take_action(Board(3, 3))
    assert agent.ply == 1 and len(agent.table) > 0

    agent.open_episode()
    assert agent.ply == 0
    assert len(agent.table) == 0


def test_same_seed_same_decisions():
    state = Board(4, 4).play([Move(0, PieceType.BLACK)])
    moves = []
    for _ in range(2):
        agent = MCTSAgent("role=white n=40 seed=77")
        agent.open_episode()
        moves.append(agent.take_action(state))
    assert moves[0] == moves[1]


def test_independent_agents_do_not_share_state():
    a = MCTSAgent("role=black n=10 seed=1")
    b = MCTSAgent("role=black n=10 seed=1")
    a.take_action(Board(3, 3))
    assert len(a.table) > 0
    assert len(b.table) == 0
    assert a.rng is not b.rng


def test_verbose_output(capsys):
    agent = MCTSAgent("name=talker role=black n=5 seed=0", verbose=True)
    agent.take_action(Board(3, 3))
    out = capsys.readouterr().out
    assert "talker (black) selected" in out
    assert "Iterations: 5" in out


def test_save_statistics(tmp_path):
    agent = MCTSAgent("name=saver role=black n=5 seed=0 time=0.01")
    agent.take_action(Board(3, 3))
    path = tmp_path / "stats.json"
    agent.save_statistics(str(path))

    data = json.loads(path.read_text())
    assert data["agent_name"] == "saver"
    assert data["total_actions"] == 1
    assert data["config"]["time_schedule"] == [0.01]
    assert data["history"][0]["move"].startswith("black@")


def test_str():
    assert "random" in str(MCTSAgent("role=black random"))
    assert "20 iterations" in str(MCTSAgent("role=black n=20"))


def test_time_schedule_follows_decisions():
    agent = MCTSAgent("role=black time=0.01,0.02 seed=1")
    agent.open_episode()
    first = Board(3, 3)
    agent.take_action(first)
    assert agent.get_last_statistics()["time_limit"] == 0.01

    second = first.play([Move(0, PieceType.BLACK), Move(8, PieceType.WHITE)])
    agent.take_action(second)
    assert agent.get_last_statistics()["time_limit"] == 0.02

    third = second.play([Move(2, PieceType.BLACK), Move(6, PieceType.WHITE)])
    agent.take_action(third)
    assert agent.ply == 3
    assert agent.get_last_statistics()["time_limit"] == 0.02


def test_reset_statistics_keeps_search_table():
    agent = MCTSAgent("role=black n=5 seed=0")
    agent.take_action(Board(3, 3))
    agent.reset_statistics()

    assert agent.get_last_statistics() == {}
    assert agent.action_history == []
    assert len(agent.table) > 0
