"""
Distribution for one hand: fresh 40-card deck, shuffled, 3 cards each.
Player receives the first block of cards, opponent the next one; the rest of
the pack is not used in this variant.
"""
from __future__ import annotations

import random
from typing import NamedTuple

from .deck import Card, deal_cards, make_deck_40, shuffle_deck

HAND_SIZE = 3


class Deal(NamedTuple):
    """Result of dealing one hand. Hands are fresh lists owned by the caller."""
    player_hand: list[Card]
    opponent_hand: list[Card]
    remaining: list[Card]


def deal_hand_pair(
    rng: random.Random | None = None,
    hand_size: int = HAND_SIZE,
    deck: list[Card] | None = None,
) -> Deal:
    """
    Shuffle a deck (a new canonical one unless ``deck`` is given) and deal
    ``hand_size`` cards to each player.
    """
    if deck is None:
        deck = make_deck_40()
    deck = shuffle_deck(deck, rng)
    player_hand, deck = deal_cards(deck, hand_size)
    opponent_hand, deck = deal_cards(deck, hand_size)
    return Deal(player_hand=player_hand, opponent_hand=opponent_hand, remaining=deck)
