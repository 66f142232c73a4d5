# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Game state machine.

Drives a game pitch by pitch: asks the outcome model for each pitch,
applies the result to the count, the bases and the outs, records every
event in the box score ledger, and decides when half-innings, innings and
the game end.

Phases run ``PRE_GAME -> IN_PROGRESS -> COMPLETE``. Once a game is
complete its situation is frozen and further pitches raise
``GameOverError``. A hard innings cap guarantees every game terminates no
matter what the random source produces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from box_score import BoxScoreLedger
from config import GameRules
from errors import GameEngineError, GameOverError
from models import (
    BattedBallOutcome,
    Half,
    ParkContext,
    PitchContext,
    PitchOutcome,
    Side,
)
from roster import Player, TeamRoster
from simulation import Simulator

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    PRE_GAME = "PRE_GAME"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"


# ---------------------------------------------------------------------------
# Game situation
# ---------------------------------------------------------------------------

@dataclass
class GameSituation:
    """Inning, half, outs and base occupants (player ids)."""
    inning: int = 1
    half: Half = Half.TOP
    outs: int = 0
    bases: list[str | None] = field(default_factory=lambda: [None, None, None])
    game_over: bool = False

    @property
    def runner_on_first(self) -> bool:
        return self.bases[0] is not None

    @property
    def runner_on_second(self) -> bool:
        return self.bases[1] is not None

    @property
    def runner_on_third(self) -> bool:
        return self.bases[2] is not None

    @property
    def batting_side(self) -> Side:
        return Side.AWAY if self.half is Half.TOP else Side.HOME

    @property
    def fielding_side(self) -> Side:
        return self.batting_side.opponent

    def runner_on(self, base: int) -> str | None:
        return self.bases[base - 1]

    def clear_bases(self) -> None:
        self.bases = [None, None, None]

    def bases_string(self) -> str:
        """Return base state string like '110' for runners on 1st and 2nd."""
        return "".join("1" if b else "0" for b in self.bases)


# ---------------------------------------------------------------------------
# Play-by-play event
# ---------------------------------------------------------------------------

@dataclass
class PlayEvent:
    inning: int
    half: Half
    outs_before: int
    event_type: str  # "game_start", "pitch", "walk", "strikeout", "in_play", "inning_change", "game_end"
    description: str
    pitch_outcome: PitchOutcome | None = None
    batted_ball: BattedBallOutcome | None = None
    runs_scored: int = 0
    score_home: int = 0
    score_away: int = 0
    batter_id: str = ""
    pitcher_id: str = ""

    def to_dict(self) -> dict:
        return {
            "inning": self.inning,
            "half": self.half.value,
            "outs_before": self.outs_before,
            "event_type": self.event_type,
            "description": self.description,
            "pitch_outcome": self.pitch_outcome.value if self.pitch_outcome else None,
            "batted_ball": self.batted_ball.value if self.batted_ball else None,
            "runs_scored": self.runs_scored,
            "score": {"home": self.score_home, "away": self.score_away},
            "batter_id": self.batter_id,
            "pitcher_id": self.pitcher_id,
        }


@dataclass
class GameResult:
    home_runs: int
    away_runs: int
    winner: Side | None  # None only when the innings cap ends a tie
    innings: int
    ended_by_cap: bool
    ledger: BoxScoreLedger
    line_score: dict[Side, list[int]]
    play_log: list[PlayEvent]
    seed: int | None = None

    def to_dict(self) -> dict:
        return {
            "final_score": {"home": self.home_runs, "away": self.away_runs},
            "winner": self.winner.value if self.winner else None,
            "innings": self.innings,
            "ended_by_cap": self.ended_by_cap,
            "line_score": {s.value.lower(): runs for s, runs in self.line_score.items()},
            "box_score": self.ledger.to_dict(),
            "play_log": [e.to_dict() for e in self.play_log],
            "seed": self.seed,
        }


def _ordinal(n: int) -> str:
    """Return ordinal string for an integer (1st, 2nd, 3rd, etc.)."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


# ---------------------------------------------------------------------------
# Game manager
# ---------------------------------------------------------------------------

class GameManager:
    """Runs one game between two rosters.

    Args:
        home: Home team roster; bats in the bottom half.
        away: Away team roster; bats in the top half.
        ledger: Box score for this game. A fresh one is created if omitted.
        simulator: Outcome model. Anything with ``resolve_pitch`` and
            ``resolve_batted_ball`` works, e.g. a ``ScriptedSimulator``.
        rules: Game rules; defaults to ``GameRules()``.
        park: Park dimensions passed to batted-ball resolution.
    """

    def __init__(self, home: TeamRoster, away: TeamRoster,
                 ledger: BoxScoreLedger | None = None,
                 simulator=None, rules: GameRules | None = None,
                 park: ParkContext | None = None):
        self.rules = rules or GameRules()
        self.teams = {Side.HOME: home, Side.AWAY: away}
        self.ledger = ledger or BoxScoreLedger(home.name, away.name)
        self.simulator = simulator or Simulator(
            foul_share=self.rules.foul_share,
            fielding_affects_outs=self.rules.fielding_affects_outs,
        )
        self.park = park or ParkContext()

        self.phase = GamePhase.PRE_GAME
        self.situation = GameSituation()
        self.batter_index = {Side.HOME: 0, Side.AWAY: 0}
        self.pitch_context = PitchContext()
        self.line_score: dict[Side, list[int]] = {Side.HOME: [], Side.AWAY: []}
        self.play_log: list[PlayEvent] = []
        self.ended_by_cap = False

    # -------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------

    @property
    def is_game_over(self) -> bool:
        return self.situation.game_over

    @property
    def batting_team(self) -> TeamRoster:
        return self.teams[self.situation.batting_side]

    @property
    def fielding_team(self) -> TeamRoster:
        return self.teams[self.situation.fielding_side]

    def score(self, side: Side) -> int:
        return self.ledger.team_runs(side)

    def current_batter(self) -> Player:
        side = self.situation.batting_side
        return self.teams[side].batter_at(self.batter_index[side])

    def current_pitcher(self) -> Player:
        return self.fielding_team.current_pitcher()

    def situation_display(self) -> str:
        s = self.situation
        half_str = "Top" if s.half is Half.TOP else "Bot"
        on = [name for flag, name in ((s.runner_on_first, "1st"),
                                       (s.runner_on_second, "2nd"),
                                       (s.runner_on_third, "3rd")) if flag]
        runners = "runners on " + ", ".join(on) if on else "bases empty"
        return (f"{half_str} {s.inning}, {s.outs} out, {runners}, "
                f"Away {self.score(Side.AWAY)} - Home {self.score(Side.HOME)}")

    # -------------------------------------------------------------------
    # Manager requests
    # -------------------------------------------------------------------

    def request_intentional_walk(self) -> None:
        """Every remaining pitch of the current at-bat is thrown wide."""
        self.pitch_context.intentional_walk = True

    def request_pitch_out(self) -> None:
        """The next pitch only is a pitch-out."""
        self.pitch_context.pitch_out = True

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def start_game(self) -> None:
        """Validate both rosters and open the top of the first."""
        if self.phase is not GamePhase.PRE_GAME:
            return
        try:
            for team in (self.teams[Side.AWAY], self.teams[Side.HOME]):
                team.batter_at(0)
                team.current_pitcher()
        except GameEngineError as exc:
            self._abort(exc)
            raise

        self.phase = GamePhase.IN_PROGRESS
        self.line_score[Side.AWAY].append(0)
        away, home = self.teams[Side.AWAY].name, self.teams[Side.HOME].name
        logger.info("Game start: %s at %s", away, home)
        self._log_event("game_start", f"--- Top of the 1st --- ({away} at {home})")

    def run_half_inning(self) -> None:
        """Pitch until the current half-inning ends or the game does."""
        start = (self.situation.inning, self.situation.half)
        while not self.is_game_over and (self.situation.inning, self.situation.half) == start:
            self.proceed_pitch()

    def run_game(self) -> GameResult:
        """Drive the game to completion and return the final result."""
        self.start_game()
        while not self.is_game_over:
            self.run_half_inning()
        return self.result()

    def result(self) -> GameResult:
        home, away = self.score(Side.HOME), self.score(Side.AWAY)
        winner = None
        if home > away:
            winner = Side.HOME
        elif away > home:
            winner = Side.AWAY
        return GameResult(
            home_runs=home,
            away_runs=away,
            winner=winner,
            innings=self.situation.inning,
            ended_by_cap=self.ended_by_cap,
            ledger=self.ledger,
            line_score={s: list(runs) for s, runs in self.line_score.items()},
            play_log=list(self.play_log),
            seed=getattr(self.simulator, "seed", None),
        )

    # -------------------------------------------------------------------
    # Pitch loop
    # -------------------------------------------------------------------

    def proceed_pitch(self) -> PitchOutcome:
        """Throw one pitch and apply its effects."""
        if self.is_game_over:
            raise GameOverError("Game is complete; no further pitches")
        if self.phase is GamePhase.PRE_GAME:
            self.start_game()

        try:
            batter = self.current_batter()
            pitcher = self.current_pitcher()
            outcome = self.simulator.resolve_pitch(
                pitcher.pitching, batter.batting, self.pitch_context)
        except GameEngineError as exc:
            self._abort(exc)
            raise
        self.pitch_context.pitch_out = False
        logger.debug("%s | %s vs %s: %s", self.situation_display(),
                     batter.name, pitcher.name, outcome.value)

        ctx = self.pitch_context
        if outcome is PitchOutcome.BALL:
            if not self.rules.count_pitches or ctx.balls + 1 >= self.rules.balls_for_walk:
                self._walk(batter, pitcher, outcome)
            else:
                ctx.balls += 1
                self._log_pitch(batter, pitcher, outcome, f"Ball {ctx.balls}")
        elif outcome.is_strike:
            if not self.rules.count_pitches or ctx.strikes + 1 >= self.rules.strikes_for_strikeout:
                self._strikeout(batter, pitcher, outcome)
            else:
                ctx.strikes += 1
                self._log_pitch(batter, pitcher, outcome, f"Strike {ctx.strikes}")
        elif outcome is PitchOutcome.FOUL:
            if self.rules.count_pitches and ctx.strikes < self.rules.strikes_for_strikeout - 1:
                ctx.strikes += 1
            self._log_pitch(batter, pitcher, outcome, "Foul ball")
        else:
            try:
                batted = self.simulator.resolve_batted_ball(
                    pitcher.pitching, batter.batting, self.park,
                    self.fielding_team.defense())
            except GameEngineError as exc:
                self._abort(exc)
                raise
            self._ball_in_play(batter, pitcher, batted)
        return outcome

    # -------------------------------------------------------------------
    # At-bat endings
    # -------------------------------------------------------------------

    def _walk(self, batter: Player, pitcher: Player, outcome: PitchOutcome) -> None:
        side = self.situation.batting_side
        scorers = self._force_advance(batter.player_id)
        for runner in scorers:
            self.ledger.record_run(side, runner)
        self.ledger.record_walk(side, batter.player_id, rbi=len(scorers))
        self.ledger.record_pitching(
            side.opponent, pitcher.player_id, walks=1,
            runs=len(scorers), earned_runs=len(scorers))

        desc = f"{batter.name} walks"
        if self.pitch_context.intentional_walk:
            desc = f"{batter.name} is intentionally walked"
        if scorers:
            desc += f", {self._names(scorers)} scores"
        self._end_at_bat(batter, pitcher, "walk", desc, outcome, None, len(scorers))

    def _strikeout(self, batter: Player, pitcher: Player, outcome: PitchOutcome) -> None:
        side = self.situation.batting_side
        self.situation.outs += 1
        self.ledger.record_strikeout(side, batter.player_id)
        self.ledger.record_pitching(side.opponent, pitcher.player_id,
                                    innings_delta=1 / 3, strikeouts=1)
        how = "swinging" if outcome is PitchOutcome.STRIKE_SWINGING else "looking"
        self._end_at_bat(batter, pitcher, "strikeout",
                         f"{batter.name} strikes out {how}", outcome, None, 0)

    def _ball_in_play(self, batter: Player, pitcher: Player, batted: BattedBallOutcome) -> None:
        side = self.situation.batting_side
        if batted is BattedBallOutcome.OUT:
            self.situation.outs += 1
            self.ledger.record_at_bat(side, batter.player_id, at_bats=1)
            self.ledger.record_pitching(side.opponent, pitcher.player_id, innings_delta=1 / 3)
            self._end_at_bat(batter, pitcher, "in_play", f"{batter.name} is out in play",
                             PitchOutcome.BALL_IN_PLAY, batted, 0)
            return

        scorers = self._advance_on_hit(batter.player_id, batted.bases)
        runners_home = [r for r in scorers if r != batter.player_id]
        for runner in runners_home:
            self.ledger.record_run(side, runner)
        batter_scored = batter.player_id in scorers
        self.ledger.record_hit(side, batter.player_id, batted,
                               rbi=len(runners_home), runs=int(batter_scored))
        self.ledger.record_pitching(side.opponent, pitcher.player_id, hits=1,
                                    runs=len(scorers), earned_runs=len(scorers))

        verb = {
            BattedBallOutcome.SINGLE: "singles",
            BattedBallOutcome.DOUBLE: "doubles",
            BattedBallOutcome.TRIPLE: "triples",
            BattedBallOutcome.HOME_RUN: "homers",
        }[batted]
        desc = f"{batter.name} {verb}"
        if batted is BattedBallOutcome.HOME_RUN and len(scorers) > 1:
            desc += f" ({len(scorers)}-run homer)"
        elif runners_home:
            desc += f", {self._names(runners_home)} {'score' if len(runners_home) > 1 else 'scores'}"
        self._end_at_bat(batter, pitcher, "in_play", desc,
                         PitchOutcome.BALL_IN_PLAY, batted, len(scorers))

    def _end_at_bat(self, batter: Player, pitcher: Player, event_type: str, description: str,
                    outcome: PitchOutcome, batted: BattedBallOutcome | None, runs: int) -> None:
        side = self.situation.batting_side
        outs_before = self.situation.outs - (1 if event_type == "strikeout" or
                                             batted is BattedBallOutcome.OUT else 0)
        if runs:
            self.line_score[side][-1] += runs
        self._log_event(event_type, description, outs_before=outs_before,
                        pitch_outcome=outcome, batted_ball=batted, runs_scored=runs,
                        batter_id=batter.player_id, pitcher_id=pitcher.player_id)
        logger.debug("%s", description)

        lineup_len = len(self.teams[side].lineup)
        self.batter_index[side] = (self.batter_index[side] + 1) % lineup_len
        self.pitch_context = PitchContext()

        if self._is_walk_off():
            self.situation.outs = 0
            self.situation.clear_bases()
            home, away = self.score(Side.HOME), self.score(Side.AWAY)
            self._finish(f"Walk-off! {self.teams[Side.HOME].name} wins {home}-{away}!")
        elif self.situation.outs >= 3:
            self._end_half_inning()

    # -------------------------------------------------------------------
    # Baserunning
    # -------------------------------------------------------------------

    def _force_advance(self, batter_id: str) -> list[str]:
        """Put the batter on first, moving only runners who are forced.

        Returns the ids of runners forced home.
        """
        first, second, third = self.situation.bases
        scored = []
        if first is not None:
            if second is not None:
                if third is not None:
                    scored.append(third)
                third = second
            second = first
        self.situation.bases = [batter_id, second, third]
        return scored

    def _advance_on_hit(self, batter_id: str, bases: int) -> list[str]:
        """Move every runner ``bases`` bases (runners on third always score).

        Returns the ids that crossed the plate, batter last on a home run.
        """
        first, second, third = self.situation.bases
        if bases >= 4:
            self.situation.clear_bases()
            return [r for r in (third, second, first) if r is not None] + [batter_id]

        scored = []
        new_bases: list[str | None] = [None, None, None]
        if third is not None:
            scored.append(third)
        if second is not None:
            if bases >= 2:
                scored.append(second)
            else:
                new_bases[2] = second
        if first is not None:
            if bases >= 3 or (bases == 2 and self.rules.score_from_first_on_double):
                scored.append(first)
            else:
                new_bases[bases] = first
        new_bases[bases - 1] = batter_id
        self.situation.bases = new_bases
        return scored

    # -------------------------------------------------------------------
    # Inning and game transitions
    # -------------------------------------------------------------------

    def _is_walk_off(self) -> bool:
        s = self.situation
        return (s.half is Half.BOTTOM
                and s.inning >= self.rules.regulation_innings
                and self.score(Side.HOME) > self.score(Side.AWAY))

    def _end_half_inning(self) -> None:
        s = self.situation
        s.outs = 0
        s.clear_bases()
        home, away = self.score(Side.HOME), self.score(Side.AWAY)
        regulation = s.inning >= self.rules.regulation_innings

        if s.half is Half.TOP:
            if regulation and home > away:
                self._finish(f"Game over! {self.teams[Side.HOME].name} wins {home}-{away}!")
                return
            s.half = Half.BOTTOM
            self.line_score[Side.HOME].append(0)
            self._log_event("inning_change", f"--- Bottom of the {_ordinal(s.inning)} ---")
            return

        if regulation and home != away:
            winner = self.teams[Side.HOME if home > away else Side.AWAY].name
            self._finish(f"Game over! {winner} wins {max(home, away)}-{min(home, away)}!")
            return

        if s.inning + 1 > self.rules.max_innings:
            self.ended_by_cap = True
            logger.warning("Innings cap reached after %d innings (score %d-%d); ending game",
                           s.inning, away, home)
            self._finish(f"Game stopped after {s.inning} innings (innings limit)")
            return

        s.inning += 1
        s.half = Half.TOP
        self.line_score[Side.AWAY].append(0)
        self._log_event("inning_change", f"--- Top of the {_ordinal(s.inning)} ---")

    def _finish(self, description: str) -> None:
        self._log_event("game_end", description)
        self.situation.game_over = True
        self.phase = GamePhase.COMPLETE
        logger.info("%s (Away %d - Home %d, %d innings)", description,
                    self.score(Side.AWAY), self.score(Side.HOME), self.situation.inning)

    def _abort(self, exc: Exception) -> None:
        """Terminate the game on a failed precondition."""
        logger.error("Game aborted in %s: %s", self.situation_display(), exc)
        self.situation.game_over = True
        self.phase = GamePhase.COMPLETE

    # -------------------------------------------------------------------
    # Logging helpers
    # -------------------------------------------------------------------

    def _names(self, player_ids: list[str]) -> str:
        registry = self.batting_team.registry
        return ", ".join(registry.name_of(pid) for pid in player_ids)

    def _log_pitch(self, batter: Player, pitcher: Player, outcome: PitchOutcome,
                   description: str) -> None:
        ctx = self.pitch_context
        self._log_event("pitch", f"{description} ({ctx.balls}-{ctx.strikes})",
                        pitch_outcome=outcome, batter_id=batter.player_id,
                        pitcher_id=pitcher.player_id)

    def _log_event(self, event_type: str, description: str, outs_before: int | None = None,
                   **details) -> PlayEvent:
        event = PlayEvent(
            inning=self.situation.inning,
            half=self.situation.half,
            outs_before=self.situation.outs if outs_before is None else outs_before,
            event_type=event_type,
            description=description,
            score_home=self.score(Side.HOME),
            score_away=self.score(Side.AWAY),
            **details,
        )
        self.play_log.append(event)
        return event


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------

def play_game(home: TeamRoster, away: TeamRoster, seed: int | None = None,
              rules: GameRules | None = None, park: ParkContext | None = None,
              simulator=None) -> GameResult:
    """Simulate one complete game with a fresh ledger."""
    rules = rules or GameRules()
    simulator = simulator or Simulator(
        seed=seed,
        foul_share=rules.foul_share,
        fielding_affects_outs=rules.fielding_affects_outs,
    )
    manager = GameManager(home, away, simulator=simulator, rules=rules, park=park)
    return manager.run_game()
