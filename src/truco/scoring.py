"""
Match scoring: one point per hand won, nothing for a tied hand.
First side to reach the target (12 by default) wins the match.
"""
from __future__ import annotations

from dataclasses import dataclass

from .play import Seat, Winner

POINTS_TO_WIN = 12


@dataclass(frozen=True)
class MatchScore:
    player_points: int = 0
    opponent_points: int = 0

    def points_of(self, seat: Seat) -> int:
        return self.player_points if seat is Seat.PLAYER else self.opponent_points

    def award(self, winner: Winner) -> "MatchScore":
        """Score after a hand won by ``winner`` (unchanged on a tie)."""
        if winner is Winner.PLAYER:
            return MatchScore(self.player_points + 1, self.opponent_points)
        if winner is Winner.OPPONENT:
            return MatchScore(self.player_points, self.opponent_points + 1)
        return self

    def reached(self, target: int = POINTS_TO_WIN) -> bool:
        return self.player_points >= target or self.opponent_points >= target

    def leader(self) -> Winner:
        if self.player_points > self.opponent_points:
            return Winner.PLAYER
        if self.opponent_points > self.player_points:
            return Winner.OPPONENT
        return Winner.TIE

    def __str__(self) -> str:
        return f"{self.player_points} x {self.opponent_points}"
