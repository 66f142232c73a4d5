# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Per-game box score ledger.

Holds one batting line and one pitching line per (side, player) and
accumulates them incrementally as the game manager records events. Team
run totals are always summed from the batting lines rather than kept as a
separate counter, so they cannot drift from the underlying lines.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from errors import InvalidPlayerError
from models import BattedBallOutcome, Decision, Side, StatKind


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

@dataclass
class BattingLine:
    player_id: str
    at_bats: int = 0
    hits: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    rbi: int = 0
    walks: int = 0
    strikeouts: int = 0
    runs: int = 0

    @property
    def singles(self) -> int:
        return self.hits - self.doubles - self.triples - self.home_runs

    @property
    def plate_appearances(self) -> int:
        return self.at_bats + self.walks

    def to_dict(self) -> dict:
        return {
            "AB": self.at_bats, "H": self.hits, "R": self.runs,
            "RBI": self.rbi, "BB": self.walks, "K": self.strikeouts,
            "2B": self.doubles, "3B": self.triples, "HR": self.home_runs,
        }


@dataclass
class PitchingLine:
    player_id: str
    outs_recorded: int = 0  # thirds of an inning
    hits: int = 0
    runs: int = 0
    earned_runs: int = 0
    walks: int = 0
    strikeouts: int = 0
    decision: Decision | None = None

    @property
    def innings_pitched(self) -> float:
        return self.outs_recorded / 3.0

    @property
    def ip_display(self) -> str:
        """Innings in box score notation: 6.1 means six and one third."""
        return f"{self.outs_recorded // 3}.{self.outs_recorded % 3}"

    @property
    def win(self) -> bool:
        return self.decision is Decision.WIN

    @property
    def loss(self) -> bool:
        return self.decision is Decision.LOSS

    @property
    def save(self) -> bool:
        return self.decision is Decision.SAVE

    def to_dict(self) -> dict:
        return {
            "IP": self.ip_display, "H": self.hits, "R": self.runs,
            "ER": self.earned_runs, "BB": self.walks, "K": self.strikeouts,
            "DEC": self.decision.value if self.decision else "",
        }


_BATTING_ATTRS = {
    StatKind.AT_BATS: "at_bats",
    StatKind.HITS: "hits",
    StatKind.DOUBLES: "doubles",
    StatKind.TRIPLES: "triples",
    StatKind.HOME_RUNS: "home_runs",
    StatKind.RBI: "rbi",
    StatKind.WALKS: "walks",
    StatKind.STRIKEOUTS: "strikeouts",
    StatKind.RUNS: "runs",
}

_PITCHING_ATTRS = {
    StatKind.INNINGS_PITCHED: "innings_pitched",
    StatKind.HITS_ALLOWED: "hits",
    StatKind.RUNS_ALLOWED: "runs",
    StatKind.EARNED_RUNS: "earned_runs",
    StatKind.WALKS_ALLOWED: "walks",
    StatKind.PITCHER_STRIKEOUTS: "strikeouts",
}


def _check_player(player_id: str | None) -> str:
    if player_id is None or not str(player_id).strip():
        raise InvalidPlayerError("Player reference is null or blank", player_id)
    return player_id


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class BoxScoreLedger:
    """Batting and pitching lines for both sides of one game.

    Every record operation auto-creates the line it touches, so there is no
    not-found failure mode. Use one ledger per game.
    """

    def __init__(self, home_name: str = "Home", away_name: str = "Away"):
        self.team_names = {Side.HOME: home_name, Side.AWAY: away_name}
        self._batting: dict[Side, dict[str, BattingLine]] = {Side.HOME: {}, Side.AWAY: {}}
        self._pitching: dict[Side, dict[str, PitchingLine]] = {Side.HOME: {}, Side.AWAY: {}}

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------

    def ensure_batting_line(self, side: Side, player_id: str) -> BattingLine:
        lines = self._batting[Side(side)]
        pid = _check_player(player_id)
        if pid not in lines:
            lines[pid] = BattingLine(player_id=pid)
        return lines[pid]

    def ensure_pitching_line(self, side: Side, player_id: str) -> PitchingLine:
        lines = self._pitching[Side(side)]
        pid = _check_player(player_id)
        if pid not in lines:
            lines[pid] = PitchingLine(player_id=pid)
        return lines[pid]

    def batting_lines(self, side: Side) -> list[BattingLine]:
        return list(self._batting[Side(side)].values())

    def pitching_lines(self, side: Side) -> list[PitchingLine]:
        return list(self._pitching[Side(side)].values())

    # -------------------------------------------------------------------
    # Batting
    # -------------------------------------------------------------------

    def record_at_bat(self, side: Side, player_id: str, at_bats: int = 0,
                      hits: int = 0, doubles: int = 0, triples: int = 0,
                      home_runs: int = 0, rbi: int = 0, walks: int = 0,
                      strikeouts: int = 0, runs: int = 0) -> BattingLine:
        """Add deltas to a batting line. Callers keep the deltas consistent."""
        line = self.ensure_batting_line(side, player_id)
        line.at_bats += at_bats
        line.hits += hits
        line.doubles += doubles
        line.triples += triples
        line.home_runs += home_runs
        line.rbi += rbi
        line.walks += walks
        line.strikeouts += strikeouts
        line.runs += runs
        return line

    def record_walk(self, side: Side, player_id: str, rbi: int = 0) -> BattingLine:
        return self.record_at_bat(side, player_id, walks=1, rbi=rbi)

    def record_strikeout(self, side: Side, player_id: str) -> BattingLine:
        return self.record_at_bat(side, player_id, at_bats=1, strikeouts=1)

    def record_hit(self, side: Side, player_id: str,
                   kind: BattedBallOutcome = BattedBallOutcome.SINGLE,
                   rbi: int = 0, runs: int = 0) -> BattingLine:
        kind = BattedBallOutcome(kind)
        if kind is BattedBallOutcome.OUT:
            raise ValueError("An out is not a hit")
        return self.record_at_bat(
            side, player_id, at_bats=1, hits=1,
            doubles=int(kind is BattedBallOutcome.DOUBLE),
            triples=int(kind is BattedBallOutcome.TRIPLE),
            home_runs=int(kind is BattedBallOutcome.HOME_RUN),
            rbi=rbi, runs=runs,
        )

    def record_run(self, side: Side, player_id: str) -> BattingLine:
        """Credit a run scored to a baserunner."""
        return self.record_at_bat(side, player_id, runs=1)

    # -------------------------------------------------------------------
    # Pitching
    # -------------------------------------------------------------------

    def record_pitching(self, side: Side, player_id: str, innings_delta: float = 0.0,
                        hits: int = 0, runs: int = 0, earned_runs: int = 0,
                        walks: int = 0, strikeouts: int = 0) -> PitchingLine:
        """Add deltas to a pitching line.

        ``innings_delta`` must be a whole number of outs (a multiple of 1/3);
        anything else raises ``ValueError``.
        """
        outs = innings_delta * 3
        if abs(outs - round(outs)) > 1e-6:
            raise ValueError(f"Innings delta {innings_delta} is not a whole number of outs")
        line = self.ensure_pitching_line(side, player_id)
        line.outs_recorded += round(outs)
        line.hits += hits
        line.runs += runs
        line.earned_runs += earned_runs
        line.walks += walks
        line.strikeouts += strikeouts
        return line

    def assign_decision(self, side: Side, player_id: str, decision: Decision) -> PitchingLine:
        """Set the pitcher's decision, replacing any earlier one."""
        line = self.ensure_pitching_line(side, player_id)
        line.decision = Decision(decision)
        return line

    def clear_decision(self, side: Side, player_id: str) -> PitchingLine:
        line = self.ensure_pitching_line(side, player_id)
        line.decision = None
        return line

    # -------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------

    def team_runs(self, side: Side) -> int:
        return sum(line.runs for line in self._batting[Side(side)].values())

    def team_hits(self, side: Side) -> int:
        return sum(line.hits for line in self._batting[Side(side)].values())

    def stat(self, side: Side, player_id: str, kind: StatKind | str) -> int | float:
        """Look up one stat for a player; names are parsed into StatKind.

        A player with no line reads as zero. Lookups never create lines.
        """
        kind = StatKind.parse(kind)
        pid = _check_player(player_id)
        if kind.is_pitching:
            line = self._pitching[Side(side)].get(pid)
            return getattr(line, _PITCHING_ATTRS[kind]) if line else 0
        line = self._batting[Side(side)].get(pid)
        return getattr(line, _BATTING_ATTRS[kind]) if line else 0

    def to_dict(self) -> dict:
        def side_dict(side: Side) -> dict:
            return {
                "team_name": self.team_names[side],
                "runs": self.team_runs(side),
                "hits": self.team_hits(side),
                "batting": [asdict(l) for l in self.batting_lines(side)],
                "pitching": [
                    {**asdict(l), "decision": l.decision.value if l.decision else None}
                    for l in self.pitching_lines(side)
                ],
            }
        return {"away": side_dict(Side.AWAY), "home": side_dict(Side.HOME)}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_box_score(ledger: BoxScoreLedger, line_score: dict[Side, list[int]] | None = None,
                     names: dict[str, str] | None = None) -> str:
    """Render the ledger as a plain-text box score."""
    names = names or {}
    lines = []

    lines.append("=" * 72)
    lines.append("FINAL BOX SCORE")
    lines.append("=" * 72)

    if line_score:
        innings = max(len(line_score.get(Side.AWAY, [])), len(line_score.get(Side.HOME, [])))
        header = f"{'Team':<20}"
        for i in range(1, innings + 1):
            header += f" {i:>3}"
        header += "  |   R   H"
        lines.append(header)
        lines.append("-" * len(header))
        for side in (Side.AWAY, Side.HOME):
            row = f"{ledger.team_names[side]:<20}"
            runs = line_score.get(side, [])
            for i in range(innings):
                row += f" {runs[i]:>3}" if i < len(runs) else "   x"
            row += f"  | {ledger.team_runs(side):>3} {ledger.team_hits(side):>3}"
            lines.append(row)

    for side in (Side.AWAY, Side.HOME):
        lines.append(f"\n{ledger.team_names[side]} Batting:")
        lines.append(f"  {'Name':<20} {'AB':>3} {'H':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'K':>3} {'HR':>3}")
        lines.append(f"  {'-'*20} {'-'*3} {'-'*3} {'-'*3} {'-'*4} {'-'*3} {'-'*3} {'-'*3}")
        for b in ledger.batting_lines(side):
            lines.append(
                f"  {names.get(b.player_id, b.player_id):<20} {b.at_bats:>3} {b.hits:>3} "
                f"{b.runs:>3} {b.rbi:>4} {b.walks:>3} {b.strikeouts:>3} {b.home_runs:>3}"
            )

    for side in (Side.AWAY, Side.HOME):
        lines.append(f"\n{ledger.team_names[side]} Pitching:")
        lines.append(f"  {'Name':<20} {'IP':>5} {'H':>3} {'R':>3} {'ER':>3} {'BB':>3} {'K':>3} {'DEC':>4}")
        lines.append(f"  {'-'*20} {'-'*5} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*3} {'-'*4}")
        for p in ledger.pitching_lines(side):
            dec = p.decision.value if p.decision else ""
            lines.append(
                f"  {names.get(p.player_id, p.player_id):<20} {p.ip_display:>5} {p.hits:>3} "
                f"{p.runs:>3} {p.earned_runs:>3} {p.walks:>3} {p.strikeouts:>3} {dec:>4}"
            )

    return "\n".join(lines)
