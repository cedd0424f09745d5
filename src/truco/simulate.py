"""
Headless matches: both seats driven by policies, no real time involved.

Useful to sanity-check the engine over thousands of hands and to compare
opponent policies. The controller runs on a ManualScheduler, so a full match
to 12 points takes milliseconds.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from .agents import Policy, RandomAgent
from .config import MatchConfig
from .events import GameEvent, HandResolved, TrickResolved
from .match import MatchController
from .play import Seat, Winner
from .scheduler import ManualScheduler
from .scoring import MatchScore

log = logging.getLogger(__name__)


@dataclass
class MatchRecord:
    """Outcome of one headless match."""

    winner: Winner
    score: MatchScore
    hands_played: int
    tied_hands: int
    tricks_played: int


@dataclass
class SimulationSummary:
    num_matches: int
    player_win_rate: float
    mean_hands_per_match: float
    std_hands_per_match: float
    tied_hand_rate: float
    mean_tricks_per_hand: float
    records: List[MatchRecord] = field(default_factory=list, repr=False)

    def as_dict(self) -> Dict[str, float]:
        return {
            "num_matches": self.num_matches,
            "player_win_rate": self.player_win_rate,
            "mean_hands_per_match": self.mean_hands_per_match,
            "std_hands_per_match": self.std_hands_per_match,
            "tied_hand_rate": self.tied_hand_rate,
            "mean_tricks_per_hand": self.mean_tricks_per_hand,
        }


def run_headless_match(
    player_policy: Policy,
    opponent_policy: Policy,
    rng: random.Random | None = None,
    config: MatchConfig | None = None,
    max_steps: int = 100_000,
) -> MatchRecord:
    """Play one full match; ``player_policy`` stands in for the human seat."""
    scheduler = ManualScheduler()
    ctrl = MatchController(
        config=config or MatchConfig.instant(),
        rng=rng or random.Random(),
        policy=opponent_policy,
        scheduler=scheduler,
    )

    counts = {"hands": 0, "tied": 0, "tricks": 0}

    def on_event(event: GameEvent) -> None:
        if isinstance(event, HandResolved):
            counts["hands"] += 1
            if event.winner is Winner.TIE:
                counts["tied"] += 1
        elif isinstance(event, TrickResolved):
            counts["tricks"] += 1

    ctrl.subscribe(on_event)
    ctrl.start_match()

    steps = 0
    while not ctrl.is_match_over():
        steps += 1
        if steps > max_steps:
            raise RuntimeError(f"Match did not finish within {max_steps} steps")
        playable = ctrl.playable_cards()
        if playable:
            ctrl.play_card(Seat.PLAYER, player_policy.choose_card(playable))
            continue
        if not scheduler.run_next():
            raise RuntimeError("Match stalled: no playable card and no pending step")

    if ctrl.match_winner is None:
        raise RuntimeError("Match ended without a winner")
    return MatchRecord(
        winner=ctrl.match_winner,
        score=ctrl.score,
        hands_played=counts["hands"],
        tied_hands=counts["tied"],
        tricks_played=counts["tricks"],
    )


def simulate_matches(
    num_matches: int,
    seed: int = 0,
    player_policy: Policy | None = None,
    opponent_policy: Policy | None = None,
    config: MatchConfig | None = None,
) -> SimulationSummary:
    """Run ``num_matches`` headless matches and aggregate the results."""
    if num_matches < 1:
        raise ValueError("num_matches must be at least 1")
    rng = random.Random(seed)
    player_policy = player_policy or RandomAgent(seed=rng.randrange(2**32))
    opponent_policy = opponent_policy or RandomAgent(seed=rng.randrange(2**32))

    records: List[MatchRecord] = []
    for i in range(num_matches):
        match_rng = random.Random(rng.randrange(2**32))
        record = run_headless_match(player_policy, opponent_policy, rng=match_rng, config=config)
        records.append(record)
        log.debug("match %d: %s %s", i + 1, record.winner.value, record.score)

    hands = np.array([r.hands_played for r in records], dtype=float)
    tied = np.array([r.tied_hands for r in records], dtype=float)
    tricks = np.array([r.tricks_played for r in records], dtype=float)
    player_wins = np.array([r.winner is Winner.PLAYER for r in records], dtype=float)

    total_hands = float(hands.sum())
    return SimulationSummary(
        num_matches=num_matches,
        player_win_rate=float(player_wins.mean()),
        mean_hands_per_match=float(hands.mean()),
        std_hands_per_match=float(hands.std()),
        tied_hand_rate=float(tied.sum() / total_hands) if total_hands else 0.0,
        mean_tricks_per_hand=float(tricks.sum() / total_hands) if total_hands else 0.0,
        records=records,
    )


__all__ = ["MatchRecord", "SimulationSummary", "run_headless_match", "simulate_matches"]
