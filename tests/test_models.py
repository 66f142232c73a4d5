# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for the shared enums and rating models."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from errors import GameEngineError, UnknownStatError
from models import (
    BattedBallOutcome,
    BatterRatings,
    FieldingRatings,
    PitchContext,
    PitchOutcome,
    Side,
    StatKind,
)


def test_side_opponent():
    assert Side.HOME.opponent == Side.AWAY
    assert Side.AWAY.opponent == Side.HOME


def test_batted_ball_bases():
    assert [o.bases for o in BattedBallOutcome] == [1, 2, 3, 4, 0]


def test_strike_outcomes():
    assert PitchOutcome.STRIKE_LOOKING.is_strike
    assert PitchOutcome.STRIKE_SWINGING.is_strike
    assert not PitchOutcome.FOUL.is_strike
    assert not PitchOutcome.BALL_IN_PLAY.is_strike


def test_stat_kind_parse():
    assert StatKind.parse("RBI") == StatKind.RBI
    assert StatKind.parse(" so ") == StatKind.PITCHER_STRIKEOUTS
    assert StatKind.parse("innings_pitched") == StatKind.INNINGS_PITCHED
    assert StatKind.parse(StatKind.HITS) is StatKind.HITS
    assert StatKind.EARNED_RUNS.is_pitching
    assert not StatKind.HOME_RUNS.is_pitching


def test_stat_kind_parse_unknown():
    with pytest.raises(UnknownStatError) as exc_info:
        StatKind.parse("WAR")
    assert isinstance(exc_info.value, GameEngineError)
    assert "WAR" in str(exc_info.value)


def test_ratings_default_and_bounds():
    assert BatterRatings().contact == 50
    with pytest.raises(ValidationError):
        BatterRatings(power=0)
    with pytest.raises(ValidationError):
        BatterRatings(speed=100)


def test_fielding_composite():
    assert FieldingRatings(range=90, arm=60, reaction=30).composite == pytest.approx(60.0)


def test_pitch_context_count_limits():
    assert PitchContext().balls == 0
    with pytest.raises(ValidationError):
        PitchContext(balls=4)
    with pytest.raises(ValidationError):
        PitchContext(strikes=3)
