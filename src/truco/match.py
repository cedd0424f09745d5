"""
Match orchestration: scores, hand sequencing, computer moves and events.

``MatchController`` owns every piece of match state; nothing is global, so
several matches can run side by side. Delayed steps (the computer "thinking",
the pause before a trick or hand is resolved, the next deal) are handed to a
Scheduler. Each scheduled step remembers the epoch it was created in and is
dropped if ``start_match()`` has run since.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, List

from .agents import Policy, RandomAgent
from .config import MatchConfig
from .deal import Deal, deal_hand_pair
from .deck import Card
from .errors import IllegalMove, InvalidTransition
from .events import (
    CardPlayed,
    GameEvent,
    HandResolved,
    HandStarted,
    Listener,
    MatchResolved,
    TrickResolved,
    TurnChanged,
)
from .game import HandPhase, HandSession, HandSnapshot, TableState, TrickTally
from .play import Seat, Winner
from .scheduler import ManualScheduler, Scheduler
from .scoring import MatchScore

log = logging.getLogger(__name__)


class MatchController:
    """
    One human-vs-computer match played to ``config.points_to_win``.

    Public API:
      - start_match()                  # reset scores, deal the first hand
      - play_card(who, card)           # raises IllegalMove when rejected
      - subscribe(listener)            # receive GameEvent objects
      - queries: score, current_turn, trick_number, table, playable_cards(), ...

    ``start_hand()`` and ``on_hand_complete()`` are normally triggered by the
    controller's own scheduled steps.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        rng: random.Random | None = None,
        policy: Policy | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.rng = rng or random.Random()
        # Seeded from the match rng so one seed reproduces the whole match
        self.policy: Policy = policy or RandomAgent(seed=self.rng.randrange(2**32))
        self.scheduler: Scheduler = scheduler or ManualScheduler()

        self._listeners: List[Listener] = []
        self._epoch: int = 0
        self._score = MatchScore()
        self._hand: HandSession | None = None
        self._hand_scored: bool = False
        self._hand_number: int = 0
        self._match_over: bool = False
        self._winner: Winner | None = None

    # ---- Events ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # ---- Scheduling ----

    def _schedule(self, delay: float, fn: Callable[..., None], *args: object) -> None:
        epoch = self._epoch

        def run() -> None:
            if epoch != self._epoch:
                log.debug("dropping stale step %s (epoch %d, now %d)", fn.__name__, epoch, self._epoch)
                return
            fn(*args)

        self.scheduler.call_later(delay, run)

    # ---- Queries ----

    @property
    def score(self) -> MatchScore:
        return self._score

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def hand_number(self) -> int:
        return self._hand_number

    @property
    def current_turn(self) -> Seat | None:
        return self._hand.current_turn if self._hand is not None else None

    @property
    def trick_number(self) -> int:
        return self._hand.trick_number if self._hand is not None else 0

    @property
    def table(self) -> TableState:
        return self._hand.table if self._hand is not None else TableState()

    @property
    def tally(self) -> TrickTally:
        return self._hand.tally if self._hand is not None else TrickTally()

    @property
    def phase(self) -> HandPhase | None:
        return self._hand.phase if self._hand is not None else None

    def is_trick_in_progress(self) -> bool:
        return self._hand is not None and self._hand.is_trick_in_progress()

    def is_hand_complete(self) -> bool:
        return self._hand is not None and self._hand.is_hand_complete()

    def is_match_over(self) -> bool:
        return self._match_over

    @property
    def match_winner(self) -> Winner | None:
        return self._winner

    def player_hand(self) -> list[Card]:
        return self._hand.hand_of(Seat.PLAYER) if self._hand is not None else []

    def opponent_card_count(self) -> int:
        return len(self._hand.hand_of(Seat.OPPONENT)) if self._hand is not None else 0

    def playable_cards(self) -> list[Card]:
        """Cards the human player may click right now."""
        if self._match_over or self._hand is None:
            return []
        return self._hand.playable_cards(Seat.PLAYER)

    def snapshot(self) -> HandSnapshot | None:
        return self._hand.snapshot() if self._hand is not None else None

    # ---- Commands ----

    def start_match(self) -> None:
        self._epoch += 1
        self.scheduler.cancel_all()
        self._score = MatchScore()
        self._hand = None
        self._hand_scored = False
        self._hand_number = 0
        self._match_over = False
        self._winner = None
        log.info("new match (epoch %d), first to %d points", self._epoch, self.config.points_to_win)
        self.start_hand()

    def start_hand(self, deal: Deal | None = None, first_turn: Seat | None = None) -> HandSession | None:
        """
        Deal a new hand, or end the match if a score already reached the target.

        ``deal`` and ``first_turn`` default to a fresh shuffled deal and a coin
        flip from the match rng. The previous hand must have been scored by
        ``on_hand_complete()`` first.
        """
        if self._score.reached(self.config.points_to_win):
            if not self._match_over:
                self._finish_match()
            return None
        if self._hand is not None and not self._hand_scored:
            raise InvalidTransition("Current hand has not been scored yet")

        if deal is None:
            deal = deal_hand_pair(self.rng)
        if first_turn is None:
            first_turn = Seat.PLAYER if self.rng.random() < 0.5 else Seat.OPPONENT

        self._hand = HandSession(deal.player_hand, deal.opponent_hand, first_turn)
        self._hand_scored = False
        self._hand_number += 1
        log.debug("hand %d dealt, %s leads", self._hand_number, first_turn.value)

        self._emit(
            HandStarted(
                hand_number=self._hand_number,
                first_turn=first_turn,
                player_hand=tuple(deal.player_hand),
            )
        )
        self._emit(TurnChanged(turn=first_turn, trick_number=1))
        if first_turn is Seat.OPPONENT:
            self._schedule(self.config.opponent_lead_delay, self._opponent_move)
        return self._hand

    def play_card(self, who: Seat, card: Card) -> None:
        if self._match_over:
            raise IllegalMove("Match is over")
        if self._hand is None:
            raise IllegalMove("No hand in progress")
        hand = self._hand
        hand.play_card(who, card)
        self._emit(CardPlayed(seat=who, card=card, trick_number=hand.trick_number))

        if hand.phase is HandPhase.RESOLVING_TRICK:
            self._schedule(self.config.resolve_delay, self._resolve_trick)
            return

        self._emit(TurnChanged(turn=hand.current_turn, trick_number=hand.trick_number))
        if hand.current_turn is Seat.OPPONENT:
            self._schedule(self.config.opponent_reply_delay, self._opponent_move)

    def on_hand_complete(self, winner: Winner) -> None:
        """Score the finished current hand once; ``winner`` must match its outcome."""
        if self._match_over:
            raise InvalidTransition("Match is over")
        if self._hand is None or not self._hand.is_hand_complete():
            raise InvalidTransition("No finished hand to score")
        if self._hand_scored:
            raise InvalidTransition(f"Hand {self._hand_number} was already scored")
        if winner is not self._hand.hand_winner():
            raise InvalidTransition(
                f"Hand {self._hand_number} was won by {self._hand.hand_winner().value}, not {winner.value}"
            )
        self._hand_scored = True
        self._score = self._score.award(winner)
        log.info("hand %d: %s (score %s)", self._hand_number, winner.value, self._score)
        self._emit(
            HandResolved(
                hand_number=self._hand_number,
                winner=winner,
                tally=self.tally,
                score=self._score,
            )
        )
        if self._score.reached(self.config.points_to_win):
            self._finish_match()
        else:
            self._schedule(self.config.next_hand_delay, self.start_hand)

    # ---- Scheduled steps ----

    def _opponent_move(self) -> None:
        hand = self._hand
        if hand is None or not hand.can_play(Seat.OPPONENT):
            return
        card = self.policy.choose_card(hand.hand_of(Seat.OPPONENT))
        self.play_card(Seat.OPPONENT, card)

    def _resolve_trick(self) -> None:
        hand = self._hand
        if hand is None:
            raise InvalidTransition("No hand in progress")
        result = hand.resolve_trick()
        self._emit(
            TrickResolved(
                trick_number=result.trick_number,
                winner=result.winner,
                player_card=result.player_card,
                opponent_card=result.opponent_card,
                tally=result.tally,
            )
        )
        if result.hand_complete:
            self._schedule(self.config.hand_end_delay, self._finish_hand)
            return

        hand.start_next_trick()
        self._emit(TurnChanged(turn=hand.current_turn, trick_number=hand.trick_number))
        if hand.current_turn is Seat.OPPONENT:
            self._schedule(self.config.opponent_lead_delay, self._opponent_move)

    def _finish_hand(self) -> None:
        if self._hand is None:
            raise InvalidTransition("No hand in progress")
        self.on_hand_complete(self._hand.hand_winner())

    def _finish_match(self) -> None:
        self._match_over = True
        self._winner = self._score.leader()
        log.info("match over: %s wins %s", self._winner.value, self._score)
        self._emit(MatchResolved(winner=self._winner, score=self._score))


__all__ = ["MatchController"]
