"""Simplified two-player Truco engine (human vs. computer, first to 12)."""

__version__ = "0.1.0"

from .deck import Card, Rank, Suit, RANK_STRENGTH, make_deck_40, shuffle_deck, deal_cards
from .deal import Deal, deal_hand_pair
from .errors import (
    TrucoError,
    IllegalMove,
    InsufficientCards,
    EmptyHand,
    InvalidTransition,
    ConfigError,
)
from .play import Seat, Winner, TrickOutcome, compare_cards, trick_winner
from .game import HandPhase, HandSession, HandSnapshot, TableState, TrickResult, TrickTally
from .scoring import MatchScore, POINTS_TO_WIN
from .config import MatchConfig, load_config
from .agents import Policy, RandomAgent, LowestCardAgent, make_policy
from .scheduler import ManualScheduler, RealtimeScheduler, Scheduler
from .match import MatchController
