# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Pitch-level outcome model.

Maps a pitcher/batter rating pairing and the situational context to a
discrete outcome: first the pitch result, then, when the ball is put in
play, the batted-ball result. The model keeps no game state; the only
thing it mutates is its own random source, which is seeded per instance
so a game can be replayed exactly.

All probability formulas are monotonic in their rating inputs and are
clamped into [0, 1] before use. Out-of-range values are never an error.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable

from errors import InvalidPlayerError, ReplayExhaustedError
from models import (
    RATING_MAX,
    BattedBallOutcome,
    BatterRatings,
    FieldingRatings,
    ParkContext,
    PitchContext,
    PitchOutcome,
    PitcherRatings,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Model constants
# ---------------------------------------------------------------------------

STRIKE_BASE = 0.45
STRIKE_CONTROL_WEIGHT = 0.30
STRIKE_VELOCITY_WEIGHT = 0.15
STRIKE_DISCIPLINE_DISCOUNT = 0.20
PITCH_OUT_DEDUCTION = 0.35

CONTACT_BASE = 0.40
CONTACT_WEIGHT = 0.45
LOOKING_SHARE = 0.5
DEFAULT_FOUL_SHARE = 0.30

DISTANCE_BASE = 180.0
DISTANCE_POWER_WEIGHT = 2.4
DISTANCE_VELOCITY_DAMPING = 0.6
DISTANCE_NOISE = 60.0

FIELDING_OUT_WEIGHT = 0.15


def _clamp(v: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, v))


def _scale(rating: int) -> float:
    """Normalize a 1-99 rating to (0, 1]."""
    return rating / RATING_MAX


def _require(ratings, role: str) -> None:
    if ratings is None:
        raise InvalidPlayerError(f"No {role} ratings supplied")


# ---------------------------------------------------------------------------
# Probability helpers
# ---------------------------------------------------------------------------

def strike_probability(pitcher: PitcherRatings, batter: BatterRatings,
                       pitch_out: bool = False) -> float:
    """Probability the pitch is in the strike zone."""
    p = (STRIKE_BASE
         + STRIKE_CONTROL_WEIGHT * _scale(pitcher.control)
         + STRIKE_VELOCITY_WEIGHT * _scale(pitcher.velocity)
         - STRIKE_DISCIPLINE_DISCOUNT * _scale(batter.plate_discipline))
    if pitch_out:
        p -= PITCH_OUT_DEDUCTION
    return _clamp(p)


def contact_probability(batter: BatterRatings) -> float:
    """Probability the batter makes contact on a pitch in the zone."""
    return _clamp(CONTACT_BASE + CONTACT_WEIGHT * _scale(batter.contact))


def expected_distance(pitcher: PitcherRatings, batter: BatterRatings) -> float:
    """Mean batted-ball distance in feet, before noise."""
    return (DISTANCE_BASE
            + DISTANCE_POWER_WEIGHT * batter.power
            - DISTANCE_VELOCITY_DAMPING * pitcher.velocity)


def classify_distance(distance: float, park: ParkContext) -> BattedBallOutcome:
    """Bucket a hit distance against the park's fences."""
    fence = park.farthest_fence
    if distance >= fence:
        return BattedBallOutcome.HOME_RUN
    ratio = distance / fence
    if ratio >= park.triple_band:
        return BattedBallOutcome.TRIPLE
    if ratio >= park.double_band:
        return BattedBallOutcome.DOUBLE
    if ratio >= park.single_band:
        return BattedBallOutcome.SINGLE
    return BattedBallOutcome.OUT


# ---------------------------------------------------------------------------
# Outcome model
# ---------------------------------------------------------------------------

class Simulator:
    """Resolves pitches and batted balls from rating snapshots.

    Args:
        seed: Seed for the private RNG. A random seed is chosen and kept
            on ``self.seed`` when omitted, so any game can be replayed.
        rng: An existing ``random.Random`` to draw from instead.
        foul_share: Share of contact that goes foul rather than in play.
        fielding_affects_outs: When True, a supplied defense rating can
            turn a single or double into an out.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None,
                 foul_share: float = DEFAULT_FOUL_SHARE,
                 fielding_affects_outs: bool = False):
        if rng is None:
            if seed is None:
                seed = random.randint(0, 2**31 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng
        self.foul_share = _clamp(foul_share)
        self.fielding_affects_outs = fielding_affects_outs

    # -------------------------------------------------------------------
    # Pitch resolution
    # -------------------------------------------------------------------

    def resolve_pitch(self, pitcher: PitcherRatings, batter: BatterRatings,
                      context: PitchContext | None = None) -> PitchOutcome:
        """Resolve a single pitch."""
        _require(pitcher, "pitcher")
        _require(batter, "batter")
        context = context or PitchContext()

        if context.intentional_walk:
            return PitchOutcome.BALL

        p_strike = strike_probability(pitcher, batter, context.pitch_out)
        if self.rng.random() >= p_strike:
            return PitchOutcome.BALL

        if self.rng.random() >= contact_probability(batter):
            if self.rng.random() < LOOKING_SHARE:
                return PitchOutcome.STRIKE_LOOKING
            return PitchOutcome.STRIKE_SWINGING

        if self.rng.random() < self.foul_share:
            return PitchOutcome.FOUL
        return PitchOutcome.BALL_IN_PLAY

    # -------------------------------------------------------------------
    # Ball-in-play resolution
    # -------------------------------------------------------------------

    def resolve_batted_ball(self, pitcher: PitcherRatings, batter: BatterRatings,
                            park: ParkContext | None = None,
                            defense: FieldingRatings | None = None
                            ) -> BattedBallOutcome:
        """Resolve a ball put in play into a hit type or an out."""
        _require(pitcher, "pitcher")
        _require(batter, "batter")
        park = park or ParkContext()

        noise = self.rng.uniform(-DISTANCE_NOISE, DISTANCE_NOISE)
        distance = max(0.0, expected_distance(pitcher, batter) + noise)
        outcome = classify_distance(distance, park)

        if (self.fielding_affects_outs and defense is not None
                and outcome in (BattedBallOutcome.SINGLE, BattedBallOutcome.DOUBLE)):
            p_out = _clamp(FIELDING_OUT_WEIGHT * defense.composite / RATING_MAX)
            if self.rng.random() < p_out:
                logger.debug("Defense converts %s at %.0f ft into an out",
                             outcome.value, distance)
                return BattedBallOutcome.OUT

        logger.debug("Batted ball %.0f ft -> %s", distance, outcome.value)
        return outcome


# ---------------------------------------------------------------------------
# Scripted replay
# ---------------------------------------------------------------------------

class ScriptedSimulator:
    """Outcome model that returns a fixed, pre-recorded outcome sequence.

    Used to replay a finished game from its play log, or to drive the game
    manager through an exact scenario. Rating inputs are ignored.
    """

    def __init__(self, pitches: Iterable[PitchOutcome | str],
                 batted_balls: Iterable[BattedBallOutcome | str] = (),
                 seed: int | None = None):
        self._pitches = [PitchOutcome(p) for p in pitches]
        self._batted_balls = [BattedBallOutcome(b) for b in batted_balls]
        self._pitch_pos = 0
        self._batted_pos = 0
        self.seed = seed

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[PitchOutcome | BattedBallOutcome | str],
                      seed: int | None = None) -> ScriptedSimulator:
        """Build from a flat sequence where a batted-ball outcome stands for
        BALL_IN_PLAY followed by that result.

        ``["SINGLE", "BALL", "OUT"]`` becomes pitches
        ``[BALL_IN_PLAY, BALL, BALL_IN_PLAY]`` and batted balls
        ``[SINGLE, OUT]``.
        """
        pitches: list[PitchOutcome] = []
        batted: list[BattedBallOutcome] = []
        for o in outcomes:
            value = o.value if hasattr(o, "value") else str(o)
            if value in BattedBallOutcome.__members__:
                pitches.append(PitchOutcome.BALL_IN_PLAY)
                batted.append(BattedBallOutcome(value))
            else:
                pitches.append(PitchOutcome(value))
        return cls(pitches, batted, seed=seed)

    @classmethod
    def from_play_log(cls, events, seed: int | None = None) -> ScriptedSimulator:
        """Rebuild the outcome sequence recorded in a game's play log."""
        pitches = [e.pitch_outcome for e in events if e.pitch_outcome is not None]
        batted = [e.batted_ball for e in events if e.batted_ball is not None]
        return cls(pitches, batted, seed=seed)

    @property
    def remaining(self) -> int:
        return len(self._pitches) - self._pitch_pos

    def resolve_pitch(self, pitcher, batter, context=None) -> PitchOutcome:
        if self._pitch_pos >= len(self._pitches):
            raise ReplayExhaustedError(
                f"Scripted pitch sequence exhausted after {len(self._pitches)} pitches")
        outcome = self._pitches[self._pitch_pos]
        self._pitch_pos += 1
        return outcome

    def resolve_batted_ball(self, pitcher, batter, park=None, defense=None) -> BattedBallOutcome:
        if self._batted_pos >= len(self._batted_balls):
            raise ReplayExhaustedError(
                f"Scripted batted-ball sequence exhausted after {len(self._batted_balls)} balls")
        outcome = self._batted_balls[self._batted_pos]
        self._batted_pos += 1
        return outcome
