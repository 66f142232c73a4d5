# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for environment configuration and game rules."""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import (
    DEFAULT_MAX_INNINGS,
    LOG_LEVEL_ENV,
    MAX_INNINGS_ENV,
    SEED_ENV,
    GameRules,
    get_log_level,
    get_max_innings,
    get_seed,
    load_rules,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (SEED_ENV, MAX_INNINGS_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


def test_seed_unset_is_none():
    assert get_seed() is None


def test_seed_from_env(monkeypatch):
    monkeypatch.setenv(SEED_ENV, "1234")
    assert get_seed() == 1234


def test_malformed_seed_ignored(monkeypatch):
    monkeypatch.setenv(SEED_ENV, "abc")
    assert get_seed() is None


def test_max_innings(monkeypatch):
    assert get_max_innings() == DEFAULT_MAX_INNINGS
    monkeypatch.setenv(MAX_INNINGS_ENV, "12")
    assert get_max_innings() == 12
    monkeypatch.setenv(MAX_INNINGS_ENV, "0")
    assert get_max_innings() == DEFAULT_MAX_INNINGS
    monkeypatch.setenv(MAX_INNINGS_ENV, "many")
    assert get_max_innings() == DEFAULT_MAX_INNINGS


def test_log_level(monkeypatch):
    assert get_log_level() == "WARNING"
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert get_log_level() == "DEBUG"


def test_rule_defaults():
    rules = GameRules()
    assert rules.regulation_innings == 9
    assert rules.max_innings == 20
    assert rules.count_pitches is True
    assert (rules.balls_for_walk, rules.strikes_for_strikeout) == (4, 3)
    assert rules.foul_share == pytest.approx(0.30)
    assert rules.fielding_affects_outs is False
    assert rules.score_from_first_on_double is False


def test_rule_validation():
    with pytest.raises(ValidationError):
        GameRules(max_innings=0)
    with pytest.raises(ValidationError):
        GameRules(foul_share=1.5)


def test_load_rules_env_and_overrides(monkeypatch):
    monkeypatch.setenv(MAX_INNINGS_ENV, "15")
    assert load_rules().max_innings == 15
    rules = load_rules(max_innings=11, count_pitches=False, foul_share=None)
    assert rules.max_innings == 11
    assert rules.count_pitches is False
    assert rules.foul_share == pytest.approx(0.30)
