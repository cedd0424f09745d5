"""Tests for headless matches and simulation summaries."""
import random

import pytest

from truco.agents import LowestCardAgent, RandomAgent
from truco.config import MatchConfig
from truco.play import Winner
from truco.simulate import run_headless_match, simulate_matches


def test_headless_match_reaches_threshold():
    record = run_headless_match(
        RandomAgent(seed=1),
        RandomAgent(seed=2),
        rng=random.Random(3),
        config=MatchConfig.instant(points_to_win=5),
    )
    assert record.winner in (Winner.PLAYER, Winner.OPPONENT)
    assert max(record.score.player_points, record.score.opponent_points) == 5
    decisive = record.score.player_points + record.score.opponent_points
    assert record.hands_played == decisive + record.tied_hands
    assert 2 * record.hands_played <= record.tricks_played <= 3 * record.hands_played


def test_simulation_is_reproducible():
    a = simulate_matches(5, seed=42, config=MatchConfig.instant(points_to_win=4))
    b = simulate_matches(5, seed=42, config=MatchConfig.instant(points_to_win=4))
    assert a.as_dict() == b.as_dict()
    assert [r.score for r in a.records] == [r.score for r in b.records]


def test_simulation_summary_ranges():
    summary = simulate_matches(
        20,
        seed=0,
        player_policy=RandomAgent(seed=1),
        opponent_policy=LowestCardAgent(),
        config=MatchConfig.instant(points_to_win=3),
    )
    assert summary.num_matches == 20
    assert len(summary.records) == 20
    assert 0.0 <= summary.player_win_rate <= 1.0
    assert summary.mean_hands_per_match >= 3.0
    assert summary.std_hands_per_match >= 0.0
    assert 0.0 <= summary.tied_hand_rate < 1.0
    assert 2.0 <= summary.mean_tricks_per_hand <= 3.0


def test_simulation_needs_matches():
    with pytest.raises(ValueError):
        simulate_matches(0)
