"""
Single hand state machine: up to three tricks between player and opponent.

A hand goes through these phases:

    AWAITING_FIRST_PLAY -> AWAITING_SECOND_PLAY -> RESOLVING_TRICK
        -> AWAITING_NEXT_TRICK -> AWAITING_FIRST_PLAY ...   (next trick)
        -> HAND_COMPLETE                                    (terminal)

Every transition is a plain synchronous method call. Rejected plays raise
IllegalMove and leave the hand exactly as it was.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .deck import Card
from .errors import IllegalMove, InvalidTransition
from .play import Seat, Winner, trick_winner

log = logging.getLogger(__name__)

TRICKS_PER_HAND = 3
TRICKS_TO_WIN_HAND = 2


class HandPhase(str, Enum):
    AWAITING_FIRST_PLAY = "awaiting_first_play"
    AWAITING_SECOND_PLAY = "awaiting_second_play"
    RESOLVING_TRICK = "resolving_trick"
    AWAITING_NEXT_TRICK = "awaiting_next_trick"
    HAND_COMPLETE = "hand_complete"


@dataclass(frozen=True)
class TableState:
    player_card: Card | None = None
    opponent_card: Card | None = None

    def card_of(self, seat: Seat) -> Card | None:
        return self.player_card if seat is Seat.PLAYER else self.opponent_card

    def is_full(self) -> bool:
        return self.player_card is not None and self.opponent_card is not None

    def is_empty(self) -> bool:
        return self.player_card is None and self.opponent_card is None


@dataclass(frozen=True)
class TrickTally:
    player_wins: int = 0
    opponent_wins: int = 0

    def wins_of(self, seat: Seat) -> int:
        return self.player_wins if seat is Seat.PLAYER else self.opponent_wins

    def __str__(self) -> str:
        return f"{self.player_wins}-{self.opponent_wins}"


@dataclass(frozen=True)
class TrickResult:
    """Outcome of one resolved trick."""

    trick_number: int
    player_card: Card
    opponent_card: Card
    winner: Winner
    first_player: Seat
    tally: TrickTally
    hand_complete: bool

    @property
    def is_tie(self) -> bool:
        return self.winner is Winner.TIE


@dataclass(frozen=True)
class HandSnapshot:
    """Immutable copy of everything a hand holds, for rendering and comparisons."""

    phase: HandPhase
    trick_number: int
    current_turn: Seat
    first_player: Seat
    player_hand: tuple[Card, ...]
    opponent_hand: tuple[Card, ...]
    table: TableState
    tally: TrickTally


class HandSession:
    """Mutable state for one hand: both hands, the table, trick number, tally and turn."""

    def __init__(
        self,
        player_hand: Iterable[Card],
        opponent_hand: Iterable[Card],
        first_turn: Seat,
    ) -> None:
        self._hands: dict[Seat, list[Card]] = {
            Seat.PLAYER: list(player_hand),
            Seat.OPPONENT: list(opponent_hand),
        }
        self._table: dict[Seat, Card | None] = {Seat.PLAYER: None, Seat.OPPONENT: None}
        self._wins: dict[Seat, int] = {Seat.PLAYER: 0, Seat.OPPONENT: 0}
        self.phase: HandPhase = HandPhase.AWAITING_FIRST_PLAY
        self.trick_number: int = 1
        self.current_turn: Seat = first_turn
        # Who led the current (or last resolved) trick
        self.first_player: Seat = first_turn
        self.tricks: list[TrickResult] = []

    # ---- Queries ----

    def hand_of(self, seat: Seat) -> list[Card]:
        return list(self._hands[seat])

    @property
    def table(self) -> TableState:
        return TableState(
            player_card=self._table[Seat.PLAYER],
            opponent_card=self._table[Seat.OPPONENT],
        )

    @property
    def tally(self) -> TrickTally:
        return TrickTally(
            player_wins=self._wins[Seat.PLAYER],
            opponent_wins=self._wins[Seat.OPPONENT],
        )

    def accepts_play(self) -> bool:
        return self.phase in (HandPhase.AWAITING_FIRST_PLAY, HandPhase.AWAITING_SECOND_PLAY)

    def can_play(self, seat: Seat) -> bool:
        return (
            self.accepts_play()
            and seat is self.current_turn
            and self._table[seat] is None
            and bool(self._hands[seat])
        )

    def playable_cards(self, seat: Seat) -> list[Card]:
        """Cards ``seat`` may play right now (empty when it cannot move)."""
        if not self.can_play(seat):
            return []
        return list(self._hands[seat])

    def is_trick_in_progress(self) -> bool:
        """True once a card is on the table and the trick has not been resolved yet."""
        return self.phase in (HandPhase.AWAITING_SECOND_PLAY, HandPhase.RESOLVING_TRICK)

    def is_hand_complete(self) -> bool:
        return self.phase is HandPhase.HAND_COMPLETE

    def hand_winner(self) -> Winner:
        if not self.is_hand_complete():
            raise InvalidTransition("Hand is not complete yet")
        p, o = self._wins[Seat.PLAYER], self._wins[Seat.OPPONENT]
        if p > o:
            return Winner.PLAYER
        if o > p:
            return Winner.OPPONENT
        return Winner.TIE

    def snapshot(self) -> HandSnapshot:
        return HandSnapshot(
            phase=self.phase,
            trick_number=self.trick_number,
            current_turn=self.current_turn,
            first_player=self.first_player,
            player_hand=tuple(self._hands[Seat.PLAYER]),
            opponent_hand=tuple(self._hands[Seat.OPPONENT]),
            table=self.table,
            tally=self.tally,
        )

    # ---- Transitions ----

    def play_card(self, who: Seat, card: Card) -> None:
        # All checks come before any mutation.
        if not self.accepts_play():
            raise IllegalMove(f"Cannot play during phase {self.phase.value}")
        if who is not self.current_turn:
            raise IllegalMove(f"Not {who.value}'s turn")
        if self._table[who] is not None:
            raise IllegalMove(f"{who.value} already has a card on the table")
        hand = self._hands[who]
        if card not in hand:
            raise IllegalMove(f"Card {card} not in {who.value}'s hand")

        hand.remove(card)
        self._table[who] = card
        log.debug("trick %d: %s plays %s", self.trick_number, who.value, card)

        if self._table[who.other()] is None:
            self.current_turn = who.other()
            self.phase = HandPhase.AWAITING_SECOND_PLAY
        else:
            self.phase = HandPhase.RESOLVING_TRICK

    def resolve_trick(self) -> TrickResult:
        if self.phase is not HandPhase.RESOLVING_TRICK:
            raise InvalidTransition(f"No trick to resolve during phase {self.phase.value}")

        player_card = self._table[Seat.PLAYER]
        opponent_card = self._table[Seat.OPPONENT]
        if player_card is None or opponent_card is None:
            raise InvalidTransition("Both cards must be on the table to resolve a trick")

        winner = trick_winner(player_card, opponent_card)
        winning_seat = winner.seat()
        if winning_seat is not None:
            self._wins[winning_seat] += 1

        self._table[Seat.PLAYER] = None
        self._table[Seat.OPPONENT] = None

        clinched = max(self._wins.values()) >= TRICKS_TO_WIN_HAND
        hand_complete = clinched or self.trick_number >= TRICKS_PER_HAND

        result = TrickResult(
            trick_number=self.trick_number,
            player_card=player_card,
            opponent_card=opponent_card,
            winner=winner,
            first_player=self.first_player,
            tally=self.tally,
            hand_complete=hand_complete,
        )
        self.tricks.append(result)
        log.debug("trick %d resolved: %s (tally %s)", self.trick_number, winner.value, result.tally)

        if hand_complete:
            self.phase = HandPhase.HAND_COMPLETE
            return result

        # Winner leads the next trick; after a tie the lead passes to the other side.
        if winning_seat is not None:
            self.current_turn = winning_seat
        else:
            self.current_turn = self.first_player.other()
        self.trick_number += 1
        self.phase = HandPhase.AWAITING_NEXT_TRICK
        return result

    def start_next_trick(self) -> None:
        if self.phase is not HandPhase.AWAITING_NEXT_TRICK:
            raise InvalidTransition(f"Cannot start a trick during phase {self.phase.value}")
        self.first_player = self.current_turn
        self.phase = HandPhase.AWAITING_FIRST_PLAY


__all__ = [
    "HandPhase",
    "HandSession",
    "HandSnapshot",
    "TableState",
    "TrickResult",
    "TrickTally",
    "TRICKS_PER_HAND",
    "TRICKS_TO_WIN_HAND",
]
