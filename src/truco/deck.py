"""
Truco deck: 40 cards (4 suits × 10 ranks, no 8s, 9s or 10s).
Rank order is fixed and ignores suit: 4 weakest, 3 strongest.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum

from .errors import InsufficientCards


class Rank(str, Enum):
    """Declared weakest to strongest; declaration order is the strength order."""
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    QUEEN = "Q"
    JACK = "J"
    KING = "K"
    ACE = "A"
    TWO = "2"
    THREE = "3"

    @property
    def strength(self) -> int:
        return RANK_STRENGTH[self]


class Suit(str, Enum):
    """Paus, Ouros, Copas, Espadas. Cosmetic only: never affects strength."""
    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"


RANKS: tuple[Rank, ...] = tuple(Rank)
SUITS: tuple[Suit, ...] = tuple(Suit)

# Higher index = stronger card
RANK_STRENGTH: dict[Rank, int] = {rank: i for i, rank in enumerate(RANKS)}

DECK_SIZE: int = len(RANKS) * len(SUITS)

# ASCII fallbacks for terminal input
_SUIT_LETTERS: dict[str, Suit] = {
    "C": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "S": Suit.SPADES,
}


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    @property
    def strength(self) -> int:
        return RANK_STRENGTH[self.rank]

    @classmethod
    def parse(cls, text: str) -> "Card":
        """
        Parse ``"3♠"``, ``"3s"`` or ``"q h"`` into a Card.
        Raises ValueError for anything else.
        """
        s = text.strip().replace(" ", "").upper()
        if len(s) != 2:
            raise ValueError(f"Cannot parse card {text!r}")
        rank_ch, suit_ch = s[0], s[1]
        try:
            rank = Rank(rank_ch)
        except ValueError:
            raise ValueError(f"Unknown rank {rank_ch!r} in {text!r}") from None
        suit = _SUIT_LETTERS.get(suit_ch)
        if suit is None:
            try:
                suit = Suit(suit_ch)
            except ValueError:
                raise ValueError(f"Unknown suit {suit_ch!r} in {text!r}") from None
        return cls(rank, suit)

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"

    def __repr__(self) -> str:
        return str(self)


def make_deck_40() -> list[Card]:
    """Full deck in canonical order: rank-major (weakest first), suit-minor."""
    return [Card(rank, suit) for rank in RANKS for suit in SUITS]


def shuffle_deck(deck: list[Card], rng: random.Random | None = None) -> list[Card]:
    """
    Return a uniformly shuffled copy of ``deck`` (Fisher-Yates).
    The input list is left untouched.
    """
    if rng is None:
        rng = random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal_cards(deck: list[Card], n: int) -> tuple[list[Card], list[Card]]:
    """Split off the first ``n`` cards. Returns (dealt, remaining)."""
    if n < 0 or n > len(deck):
        raise InsufficientCards(requested=n, available=len(deck))
    return list(deck[:n]), list(deck[n:])
