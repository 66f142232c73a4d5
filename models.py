# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the pitch-by-pitch game engine."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from errors import UnknownStatError


RATING_MIN = 1
RATING_MAX = 99


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Half(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class Side(str, Enum):
    HOME = "HOME"
    AWAY = "AWAY"

    @property
    def opponent(self) -> Side:
        return Side.AWAY if self is Side.HOME else Side.HOME


class PitchOutcome(str, Enum):
    BALL = "BALL"
    STRIKE_SWINGING = "STRIKE_SWINGING"
    STRIKE_LOOKING = "STRIKE_LOOKING"
    FOUL = "FOUL"
    BALL_IN_PLAY = "BALL_IN_PLAY"

    @property
    def is_strike(self) -> bool:
        return self in (PitchOutcome.STRIKE_SWINGING, PitchOutcome.STRIKE_LOOKING)


class BattedBallOutcome(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    HOME_RUN = "HOME_RUN"
    OUT = "OUT"

    @property
    def bases(self) -> int:
        """Bases awarded to the batter (0 for an out)."""
        return _BASES_FOR_HIT[self]


_BASES_FOR_HIT = {
    BattedBallOutcome.SINGLE: 1,
    BattedBallOutcome.DOUBLE: 2,
    BattedBallOutcome.TRIPLE: 3,
    BattedBallOutcome.HOME_RUN: 4,
    BattedBallOutcome.OUT: 0,
}


class Decision(str, Enum):
    WIN = "W"
    LOSS = "L"
    SAVE = "S"


class StatKind(str, Enum):
    """Closed set of per-game stats the ledger can report."""
    # Batting
    AT_BATS = "AB"
    HITS = "H"
    DOUBLES = "2B"
    TRIPLES = "3B"
    HOME_RUNS = "HR"
    RBI = "RBI"
    WALKS = "BB"
    STRIKEOUTS = "K"
    RUNS = "R"
    # Pitching
    INNINGS_PITCHED = "IP"
    HITS_ALLOWED = "HA"
    RUNS_ALLOWED = "RA"
    EARNED_RUNS = "ER"
    WALKS_ALLOWED = "BBA"
    PITCHER_STRIKEOUTS = "SO"

    @property
    def is_pitching(self) -> bool:
        return self in _PITCHING_KINDS

    @classmethod
    def parse(cls, name: str) -> StatKind:
        """Map a user-supplied stat name (value or member name) to a kind."""
        if isinstance(name, cls):
            return name
        key = str(name).strip()
        for kind in cls:
            if key.upper() in (kind.value.upper(), kind.name):
                return kind
        raise UnknownStatError(key)


_PITCHING_KINDS = frozenset({
    StatKind.INNINGS_PITCHED, StatKind.HITS_ALLOWED, StatKind.RUNS_ALLOWED,
    StatKind.EARNED_RUNS, StatKind.WALKS_ALLOWED, StatKind.PITCHER_STRIKEOUTS,
})


# ---------------------------------------------------------------------------
# Rating snapshots
# ---------------------------------------------------------------------------

def _rating(description: str):
    return Field(default=50, ge=RATING_MIN, le=RATING_MAX, description=description)


class BatterRatings(BaseModel):
    """Batting ratings (1-99).

    The outcome model reads contact, power and plate_discipline. ``speed`` is
    carried by the roster schema for callers outside the engine.
    """
    contact: int = _rating("Contact ability")
    power: int = _rating("Power")
    plate_discipline: int = _rating("Plate discipline / eye")
    speed: int = _rating("Running speed")


class PitcherRatings(BaseModel):
    """Pitching ratings (1-99).

    The outcome model reads velocity and control. ``movement`` and
    ``stamina`` are carried by the roster schema for callers outside the
    engine; one starter works the whole game.
    """
    velocity: int = _rating("Fastball velocity")
    control: int = _rating("Command of the strike zone")
    movement: int = _rating("Pitch movement")
    stamina: int = _rating("Stamina")


class FieldingRatings(BaseModel):
    """Fielding ratings, only consulted when fielding affects outs."""
    range: int = _rating("Fielding range")
    arm: int = _rating("Arm accuracy")
    reaction: int = _rating("Reaction time")

    @property
    def composite(self) -> float:
        return (self.range + self.arm + self.reaction) / 3.0


# ---------------------------------------------------------------------------
# Situational context
# ---------------------------------------------------------------------------

class PitchContext(BaseModel):
    """Ball/strike count and pitch-call flags for the current at-bat."""
    balls: int = Field(default=0, ge=0, le=3)
    strikes: int = Field(default=0, ge=0, le=2)
    intentional_walk: bool = False
    pitch_out: bool = False


class ParkContext(BaseModel):
    """Fence distances (feet) and the hit bands measured against them."""
    name: str = "Neutral Park"
    left_field: float = Field(default=330.0, gt=0)
    center_field: float = Field(default=400.0, gt=0)
    right_field: float = Field(default=330.0, gt=0)
    # Fractions of the farthest fence at which each hit type begins.
    single_band: float = Field(default=0.70, gt=0.0, lt=1.0)
    double_band: float = Field(default=0.78, gt=0.0, lt=1.0)
    triple_band: float = Field(default=0.95, gt=0.0, lt=1.0)

    @property
    def farthest_fence(self) -> float:
        return max(self.left_field, self.center_field, self.right_field)
