# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Centralized configuration for environment variables and game rules."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

SEED_ENV = "BASEBALL_SIM_SEED"
MAX_INNINGS_ENV = "BASEBALL_SIM_MAX_INNINGS"
LOG_LEVEL_ENV = "BASEBALL_SIM_LOG_LEVEL"

DEFAULT_MAX_INNINGS = 20
DEFAULT_LOG_LEVEL = "WARNING"


class GameRules(BaseModel):
    """Tunable rules for one game."""
    regulation_innings: int = Field(default=9, ge=1)
    max_innings: int = Field(default=DEFAULT_MAX_INNINGS, ge=1,
                             description="Hard cap; the game is forced over past this inning")
    count_pitches: bool = Field(default=True,
                                description="Accumulate balls/strikes; False resolves each at-bat on one pitch")
    balls_for_walk: int = Field(default=4, ge=1, le=4)
    strikes_for_strikeout: int = Field(default=3, ge=1, le=3)
    foul_share: float = Field(default=0.30, ge=0.0, le=1.0,
                              description="Share of contact that goes foul")
    fielding_affects_outs: bool = False
    score_from_first_on_double: bool = Field(default=False,
                                             description="Runner on first scores on a double instead of stopping at third")


def get_seed() -> int | None:
    """Return the seed from the environment, or None if unset or malformed."""
    raw = os.environ.get(SEED_ENV, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def get_max_innings() -> int:
    """Return the innings safety cap from the environment."""
    raw = os.environ.get(MAX_INNINGS_ENV, "").strip()
    try:
        value = int(raw) if raw else DEFAULT_MAX_INNINGS
    except ValueError:
        return DEFAULT_MAX_INNINGS
    return value if value >= 1 else DEFAULT_MAX_INNINGS


def get_log_level() -> str:
    """Return the configured log level name."""
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL


def load_rules(**overrides) -> GameRules:
    """Build GameRules from the environment, with explicit overrides on top."""
    values = {"max_innings": get_max_innings()}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return GameRules(**values)
