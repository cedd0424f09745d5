"""
Events emitted by MatchController for a presentation layer to react to.
Listeners receive one of the dataclasses below; all are immutable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from .deck import Card
from .game import TrickTally
from .play import Seat, Winner
from .scoring import MatchScore


@dataclass(frozen=True)
class HandStarted:
    hand_number: int
    first_turn: Seat
    player_hand: tuple[Card, ...]


@dataclass(frozen=True)
class TurnChanged:
    turn: Seat
    trick_number: int


@dataclass(frozen=True)
class CardPlayed:
    seat: Seat
    card: Card
    trick_number: int


@dataclass(frozen=True)
class TrickResolved:
    trick_number: int
    winner: Winner
    player_card: Card
    opponent_card: Card
    tally: TrickTally

    @property
    def is_tie(self) -> bool:
        return self.winner is Winner.TIE


@dataclass(frozen=True)
class HandResolved:
    hand_number: int
    winner: Winner
    tally: TrickTally
    score: MatchScore


@dataclass(frozen=True)
class MatchResolved:
    winner: Winner
    score: MatchScore


GameEvent = Union[HandStarted, TurnChanged, CardPlayed, TrickResolved, HandResolved, MatchResolved]
Listener = Callable[[GameEvent], None]


__all__ = [
    "HandStarted",
    "TurnChanged",
    "CardPlayed",
    "TrickResolved",
    "HandResolved",
    "MatchResolved",
    "GameEvent",
    "Listener",
]
