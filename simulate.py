# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Simulate one game between the sample rosters and print the box score.

Usage:
    uv run simulate.py --seed 42
    uv run simulate.py --seed 7 --json
    uv run simulate.py --rosters my_rosters.json --max-innings 12 --verbose
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from box_score import format_box_score
from config import get_log_level, get_seed, load_rules
from errors import GameEngineError
from game_manager import GameManager, GameResult
from models import Decision, Side
from roster import PlayerRegistry, build_teams, load_rosters
from simulation import Simulator


def assign_decisions(manager: GameManager, result: GameResult) -> None:
    """Credit the winning starter with the W and the losing starter with the L."""
    if result.winner is None:
        return
    loser = result.winner.opponent
    result.ledger.assign_decision(
        result.winner, manager.teams[result.winner].current_pitcher().player_id, Decision.WIN)
    result.ledger.assign_decision(
        loser, manager.teams[loser].current_pitcher().player_id, Decision.LOSS)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Simulate a baseball game pitch by pitch."
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed (default: $BASEBALL_SIM_SEED, else random).",
    )
    parser.add_argument(
        "--rosters", default=None, metavar="PATH",
        help="Roster JSON file (default: data/sample_rosters.json).",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="Print the full result as JSON instead of a box score.",
    )
    parser.add_argument(
        "--max-innings", type=int, default=None, metavar="N",
        help="Innings safety cap (default: $BASEBALL_SIM_MAX_INNINGS, else 20).",
    )
    parser.add_argument(
        "--single-pitch", action="store_true",
        help="Resolve each at-bat on a single pitch instead of a full count.",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Print the play-by-play log before the box score.",
    )
    parser.add_argument(
        "--log-level", default=None,
        help="Logging level (default: $BASEBALL_SIM_LOG_LEVEL, else WARNING).",
    )
    args = parser.parse_args(argv)

    level = (args.log_level or get_log_level()).upper()
    if level not in logging.getLevelNamesMapping():
        print(f"Error: Unknown log level: {level!r}", file=sys.stderr)
        return 1

    # Configure logging
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )

    seed = args.seed if args.seed is not None else get_seed()

    try:
        rules = load_rules(
            max_innings=args.max_innings,
            count_pitches=False if args.single_pitch else None,
        )
        registry = PlayerRegistry()
        home, away = build_teams(load_rosters(args.rosters), registry)
        simulator = Simulator(
            seed=seed,
            foul_share=rules.foul_share,
            fielding_affects_outs=rules.fielding_affects_outs,
        )
        manager = GameManager(home, away, simulator=simulator, rules=rules)
        result = manager.run_game()
    except (GameEngineError, FileNotFoundError, json.JSONDecodeError,
            KeyError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    assign_decisions(manager, result)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    if args.verbose:
        for event in result.play_log:
            if event.event_type in ("inning_change", "game_start", "game_end"):
                print(f"\n{event.description}")
            elif event.event_type != "pitch":
                print(f"  {event.description}")

    names = {pid: registry.name_of(pid)
             for side in (Side.HOME, Side.AWAY)
             for pid in manager.teams[side].lineup + manager.teams[side].rotation}
    print(format_box_score(result.ledger, result.line_score, names))
    print(f"\nSeed: {result.seed}")
    if result.ended_by_cap:
        print(f"Game stopped at the {result.innings}-inning limit.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
