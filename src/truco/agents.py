"""
Opponent policies and the generic policy interface.

The small ``Policy`` protocol is the only thing the match controller knows
about the computer player: ``choose_card(hand) -> card``. Any object with
that method can be swapped in without touching the hand state machine.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, Sequence

from .deck import Card
from .errors import EmptyHand


class Policy(Protocol):
    """Decision policy for one seat."""

    def choose_card(self, hand: Sequence[Card]) -> Card:
        """
        Choose a card to play from ``hand``.

        Implementations must return a card present in ``hand`` and raise
        EmptyHand when there is nothing to choose from.
        """


@dataclass
class RandomAgent:
    """
    Baseline policy that picks uniformly among the cards in hand.

    Usage:
        agent = RandomAgent(seed=42)
        card = agent.choose_card(hand)
    """

    seed: int | None = None
    rng: random.Random | None = None

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = random.Random(self.seed)

    def choose_card(self, hand: Sequence[Card]) -> Card:
        if not hand:
            raise EmptyHand("RandomAgent asked to choose from an empty hand")
        return self.rng.choice(list(hand))


@dataclass
class LowestCardAgent:
    """Deterministic policy: always plays its weakest card (first one on ties)."""

    def choose_card(self, hand: Sequence[Card]) -> Card:
        if not hand:
            raise EmptyHand("LowestCardAgent asked to choose from an empty hand")
        return min(hand, key=lambda c: c.strength)


POLICY_NAMES = ("random", "lowest")


def make_policy(name: str, seed: int | None = None) -> Policy:
    """Construct a policy by name (``"random"`` or ``"lowest"``)."""
    if name == "random":
        return RandomAgent(seed=seed)
    if name == "lowest":
        return LowestCardAgent()
    raise ValueError(f"Unknown policy {name!r}; expected one of {', '.join(POLICY_NAMES)}")


__all__ = ["Policy", "RandomAgent", "LowestCardAgent", "make_policy", "POLICY_NAMES"]
