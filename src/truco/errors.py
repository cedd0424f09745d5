"""
Exceptions raised by the truco engine.

Move and deck errors subclass ``ValueError`` so callers that only care about
"bad input" can keep catching that; state-machine misuse subclasses
``RuntimeError``.
"""
from __future__ import annotations


class TrucoError(Exception):
    """Base class for all engine errors."""


class IllegalMove(TrucoError, ValueError):
    """A play was rejected (wrong turn, occupied slot, card not held, trick resolving)."""


class InsufficientCards(TrucoError, ValueError):
    """Tried to deal more cards than the deck holds."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(f"Cannot deal {requested} cards, only {available} left in deck")
        self.requested = requested
        self.available = available


class EmptyHand(TrucoError, ValueError):
    """An opponent policy was asked to choose from an empty hand."""


class InvalidTransition(TrucoError, RuntimeError):
    """A state transition was requested in a phase that does not allow it."""


class ConfigError(TrucoError, ValueError):
    """Invalid match configuration."""


__all__ = [
    "TrucoError",
    "IllegalMove",
    "InsufficientCards",
    "EmptyHand",
    "InvalidTransition",
    "ConfigError",
]
