# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for the box score ledger."""

import sys
from pathlib import Path

import pytest

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from box_score import BattingLine, BoxScoreLedger, PitchingLine, format_box_score
from errors import InvalidPlayerError, UnknownStatError
from models import BattedBallOutcome, Decision, Side, StatKind


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_ledger():
    return BoxScoreLedger(home_name="Harbor City Herons", away_name="Riverton Foxes")


# ===========================================================================
# Batting
# ===========================================================================

def test_lines_are_created_on_first_touch():
    ledger = make_ledger()
    assert ledger.batting_lines(Side.HOME) == []
    line = ledger.ensure_batting_line(Side.HOME, "h1")
    assert line == BattingLine(player_id="h1")
    assert ledger.ensure_batting_line(Side.HOME, "h1") is line
    assert ledger.batting_lines(Side.AWAY) == []


def test_record_hit_kinds():
    ledger = make_ledger()
    ledger.record_hit(Side.AWAY, "a1", BattedBallOutcome.SINGLE)
    ledger.record_hit(Side.AWAY, "a1", BattedBallOutcome.DOUBLE)
    ledger.record_hit(Side.AWAY, "a1", BattedBallOutcome.HOME_RUN, rbi=2, runs=1)
    line = ledger.ensure_batting_line(Side.AWAY, "a1")
    assert (line.at_bats, line.hits, line.doubles, line.home_runs) == (3, 3, 1, 1)
    assert line.singles == 1
    assert line.rbi == 2
    assert line.runs == 1


def test_record_hit_rejects_out():
    with pytest.raises(ValueError):
        make_ledger().record_hit(Side.AWAY, "a1", BattedBallOutcome.OUT)


def test_walk_is_not_an_at_bat():
    ledger = make_ledger()
    ledger.record_walk(Side.HOME, "h1", rbi=1)
    line = ledger.ensure_batting_line(Side.HOME, "h1")
    assert line.walks == 1
    assert line.at_bats == 0
    assert line.plate_appearances == 1
    assert line.rbi == 1


def test_strikeout_counts_as_at_bat():
    ledger = make_ledger()
    ledger.record_strikeout(Side.HOME, "h1")
    assert ledger.stat(Side.HOME, "h1", StatKind.AT_BATS) == 1
    assert ledger.stat(Side.HOME, "h1", StatKind.STRIKEOUTS) == 1


def test_team_runs_sum_batting_lines():
    ledger = make_ledger()
    ledger.record_run(Side.HOME, "h1")
    ledger.record_run(Side.HOME, "h2")
    ledger.record_hit(Side.HOME, "h3", BattedBallOutcome.HOME_RUN, rbi=2, runs=1)
    ledger.record_run(Side.AWAY, "a1")
    assert ledger.team_runs(Side.HOME) == 3
    assert ledger.team_runs(Side.AWAY) == 1
    assert ledger.team_hits(Side.HOME) == 1
    assert ledger.team_runs(Side.HOME) == sum(l.runs for l in ledger.batting_lines(Side.HOME))


def test_blank_player_rejected():
    ledger = make_ledger()
    with pytest.raises(InvalidPlayerError):
        ledger.record_walk(Side.HOME, "")
    with pytest.raises(InvalidPlayerError) as exc_info:
        ledger.record_pitching(Side.HOME, None, strikeouts=1)
    assert exc_info.value.player_id is None
    assert ledger.batting_lines(Side.HOME) == []


# ===========================================================================
# Pitching
# ===========================================================================

def test_innings_accumulate_in_thirds():
    ledger = make_ledger()
    for _ in range(19):
        ledger.record_pitching(Side.HOME, "p1", innings_delta=1 / 3)
    line = ledger.ensure_pitching_line(Side.HOME, "p1")
    assert line.outs_recorded == 19
    assert line.ip_display == "6.1"
    assert line.innings_pitched == pytest.approx(19 / 3)


def test_pitching_counters():
    ledger = make_ledger()
    ledger.record_pitching(Side.AWAY, "p1", hits=1, runs=2, earned_runs=2)
    ledger.record_pitching(Side.AWAY, "p1", walks=1, strikeouts=1, innings_delta=1 / 3)
    assert ledger.stat(Side.AWAY, "p1", "HA") == 1
    assert ledger.stat(Side.AWAY, "p1", "RA") == 2
    assert ledger.stat(Side.AWAY, "p1", "ER") == 2
    assert ledger.stat(Side.AWAY, "p1", "BBA") == 1
    assert ledger.stat(Side.AWAY, "p1", "SO") == 1


def test_decisions_are_exclusive():
    ledger = make_ledger()
    ledger.assign_decision(Side.HOME, "p1", Decision.WIN)
    ledger.assign_decision(Side.HOME, "p1", Decision.SAVE)
    line = ledger.ensure_pitching_line(Side.HOME, "p1")
    assert line.save and not line.win and not line.loss
    ledger.assign_decision(Side.HOME, "p1", "L")
    assert line.loss and not line.save
    ledger.clear_decision(Side.HOME, "p1")
    assert line.decision is None


def test_pitching_line_defaults():
    line = PitchingLine(player_id="p9")
    assert line.ip_display == "0.0"
    assert not (line.win or line.loss or line.save)


# ===========================================================================
# Stat lookup
# ===========================================================================

def test_stat_accepts_names_and_kinds():
    ledger = make_ledger()
    ledger.record_hit(Side.AWAY, "a1", BattedBallOutcome.TRIPLE)
    assert ledger.stat(Side.AWAY, "a1", "3B") == 1
    assert ledger.stat(Side.AWAY, "a1", "triples") == 1
    assert ledger.stat(Side.AWAY, "a1", StatKind.TRIPLES) == 1
    assert ledger.stat(Side.AWAY, "a1", "hr") == 0


def test_unknown_stat_raises():
    ledger = make_ledger()
    with pytest.raises(UnknownStatError) as exc_info:
        ledger.stat(Side.AWAY, "a1", "OPS")
    assert exc_info.value.name == "OPS"


# ===========================================================================
# Output
# ===========================================================================

def test_to_dict():
    ledger = make_ledger()
    ledger.record_hit(Side.HOME, "h1", BattedBallOutcome.SINGLE, runs=1)
    ledger.assign_decision(Side.AWAY, "a_p", Decision.LOSS)
    d = ledger.to_dict()
    assert d["home"]["team_name"] == "Harbor City Herons"
    assert d["home"]["runs"] == 1
    assert d["home"]["batting"][0]["player_id"] == "h1"
    assert d["away"]["pitching"][0]["decision"] == "L"


def test_format_box_score():
    ledger = make_ledger()
    ledger.record_hit(Side.AWAY, "a1", BattedBallOutcome.HOME_RUN, runs=1)
    ledger.record_pitching(Side.HOME, "h_p", innings_delta=1.0, hits=1, runs=1, earned_runs=1)
    ledger.assign_decision(Side.HOME, "h_p", Decision.LOSS)
    text = format_box_score(
        ledger,
        line_score={Side.AWAY: [1, 0], Side.HOME: [0]},
        names={"a1": "Jalen Brooks", "h_p": "Victor Lane"},
    )
    assert "FINAL BOX SCORE" in text
    assert "Jalen Brooks" in text
    assert "Victor Lane" in text
    assert "Riverton Foxes Batting:" in text
    assert "   x" in text
    assert "1.0" in text


def test_stat_lookup_does_not_create_lines():
    ledger = make_ledger()
    ledger.record_strikeout(Side.AWAY, "b1")
    assert ledger.stat(Side.AWAY, "b1", "IP") == 0
    assert ledger.stat(Side.AWAY, "nobody", "H") == 0
    assert ledger.pitching_lines(Side.AWAY) == []
    assert [l.player_id for l in ledger.batting_lines(Side.AWAY)] == ["b1"]
    assert ledger.to_dict()["away"]["pitching"] == []


def test_partial_out_innings_delta_rejected():
    ledger = make_ledger()
    with pytest.raises(ValueError):
        ledger.record_pitching(Side.HOME, "p1", innings_delta=0.1)
    with pytest.raises(ValueError):
        ledger.record_pitching(Side.HOME, "p1", innings_delta=0.5)
    assert ledger.pitching_lines(Side.HOME) == []
    ledger.record_pitching(Side.HOME, "p1", innings_delta=2 / 3)
    assert ledger.ensure_pitching_line(Side.HOME, "p1").outs_recorded == 2
