"""
Match configuration and its JSON form.

Delays are in seconds and only matter to the scheduler driving the
controller; headless runs and tests typically use ``MatchConfig.instant()``.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError
from .scoring import POINTS_TO_WIN

CONFIG_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class MatchConfig:
    """Configuration for one match."""

    points_to_win: int = POINTS_TO_WIN
    # Pauses between steps so a human can follow the table
    opponent_lead_delay: float = 0.8
    opponent_reply_delay: float = 0.6
    resolve_delay: float = 0.8
    hand_end_delay: float = 1.0
    next_hand_delay: float = 1.5

    def __post_init__(self) -> None:
        if self.points_to_win < 1:
            raise ConfigError(f"points_to_win must be positive, got {self.points_to_win}")
        for name in _DELAY_FIELDS:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")

    @classmethod
    def instant(cls, points_to_win: int = POINTS_TO_WIN) -> "MatchConfig":
        """Same rules with every delay set to zero."""
        return cls(points_to_win=points_to_win, **{name: 0.0 for name in _DELAY_FIELDS})

    def with_points_to_win(self, points_to_win: int) -> "MatchConfig":
        return replace(self, points_to_win=points_to_win)


_DELAY_FIELDS = (
    "opponent_lead_delay",
    "opponent_reply_delay",
    "resolve_delay",
    "hand_end_delay",
    "next_hand_delay",
)


def config_to_dict(cfg: MatchConfig) -> Dict[str, Any]:
    d: Dict[str, Any] = {"schema_version": CONFIG_SCHEMA_VERSION}
    d.update(asdict(cfg))
    return d


def config_from_dict(d: Dict[str, Any]) -> MatchConfig:
    """Build a MatchConfig from a (possibly partial) dict; missing keys keep defaults."""
    defaults = MatchConfig()
    unknown = set(d) - set(asdict(defaults)) - {"schema_version"}
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    try:
        return MatchConfig(
            points_to_win=int(d.get("points_to_win", defaults.points_to_win)),
            **{name: float(d.get(name, getattr(defaults, name))) for name in _DELAY_FIELDS},
        )
    except (TypeError, ValueError) as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid config value: {exc}") from exc


def load_config(path: Path | str) -> MatchConfig:
    with Path(path).open("r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return config_from_dict(payload)


def save_config(cfg: MatchConfig, path: Path | str) -> None:
    with Path(path).open("w", encoding="utf-8") as f:
        json.dump(config_to_dict(cfg), f, indent=2)


__all__ = [
    "MatchConfig",
    "config_to_dict",
    "config_from_dict",
    "load_config",
    "save_config",
    "CONFIG_SCHEMA_VERSION",
]
