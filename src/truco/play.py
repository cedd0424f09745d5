"""
Trick-taking: seats, card comparison, trick winner.
Only rank strength matters; two cards of equal rank tie whatever their suits.
"""
from __future__ import annotations

from enum import Enum

from .deck import Card


class Seat(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    def other(self) -> "Seat":
        return Seat.OPPONENT if self is Seat.PLAYER else Seat.PLAYER


class Winner(str, Enum):
    """Outcome of a trick, a hand or a match from the table's point of view."""
    PLAYER = "player"
    OPPONENT = "opponent"
    TIE = "tie"

    @classmethod
    def of(cls, seat: Seat) -> "Winner":
        return cls(seat.value)

    def seat(self) -> Seat | None:
        """The winning seat, or None on a tie."""
        if self is Winner.TIE:
            return None
        return Seat(self.value)


class TrickOutcome(Enum):
    A_WINS = 1
    B_WINS = -1
    TIE = 0

    def inverse(self) -> "TrickOutcome":
        return TrickOutcome(-self.value)


def compare_cards(card_a: Card, card_b: Card) -> TrickOutcome:
    """Compare two cards by rank strength only."""
    if card_a.strength > card_b.strength:
        return TrickOutcome.A_WINS
    if card_b.strength > card_a.strength:
        return TrickOutcome.B_WINS
    return TrickOutcome.TIE


def trick_winner(player_card: Card, opponent_card: Card) -> Winner:
    """Winner of a trick given both table cards (player card is side A)."""
    outcome = compare_cards(player_card, opponent_card)
    if outcome is TrickOutcome.A_WINS:
        return Winner.PLAYER
    if outcome is TrickOutcome.B_WINS:
        return Winner.OPPONENT
    return Winner.TIE
