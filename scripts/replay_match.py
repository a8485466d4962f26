# scripts/replay_match.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from scoreboard import config as defaults
from scoreboard import engine
from scoreboard.engine import AddPoint, Undo
from scoreboard.exceptions import EngineError
from scoreboard.models import Doubles, MatchConfig, MatchView, Side, Singles, Team


STEP_CODES = {
    "A": AddPoint(Side.SIDE1),
    "B": AddPoint(Side.SIDE2),
    "U": Undo(),
}


def build_config(args: argparse.Namespace) -> MatchConfig:
    overrides = {}
    if args.points_to_win is not None:
        overrides["points_to_win"] = args.points_to_win
    if args.serves_before_change is not None:
        overrides["serves_before_change"] = args.serves_before_change
    if args.serves_in_deuce is not None:
        overrides["serves_in_deuce"] = args.serves_in_deuce
    if args.no_deuce:
        overrides["deuce_enabled"] = False
    if args.serve_style:
        overrides["serve_style"] = args.serve_style
    return MatchConfig.from_game_mode(args.mode, **overrides)


def build_arrangement(doubles: bool):
    if doubles:
        return Doubles(side1=Team("A1", "A2"), side2=Team("B1", "B2"))
    return Singles(side1="A", side2="B")


def format_view(step: str, v: MatchView) -> str:
    server = v.current_server if v.current_server is not None else "-"
    deuce = " DEUCE" if v.is_deuce else ""
    winner = f" winner={v.winner.value}" if v.winner else ""
    return f"{step:>2} {v.score[0]:>3}-{v.score[1]:<3} server={server}{deuce} [{v.status.value}]{winner}"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Replay a table-tennis point sequence.")
    ap.add_argument("points", help="Point string: A=side1, B=side2, U=undo (e.g. AABBU)")
    ap.add_argument("--mode", default=defaults.DEFAULT_GAME_MODE, choices=sorted(defaults.GAME_MODES))
    ap.add_argument("--points-to-win", type=int, default=None)
    ap.add_argument("--serves-before-change", type=int, default=None)
    ap.add_argument("--serves-in-deuce", type=int, default=None)
    ap.add_argument("--no-deuce", action="store_true")
    ap.add_argument("--serve-style", choices=["free", "cross"], default=None)
    ap.add_argument("--doubles", action="store_true")
    ap.add_argument("--first-server", default=None, help="Defaults to side1 captain")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        arrangement = build_arrangement(args.doubles)
        state = engine.new_match(build_config(args), arrangement)
        first = args.first_server or arrangement.participants()[0]
        state = engine.set_first_server(state, first)
    except EngineError as e:
        print(f"setup error: {e}", file=sys.stderr)
        return 2

    print(format_view("", engine.view(state)))

    for step in args.points.upper():
        if step not in STEP_CODES:
            print(f"unknown step {step!r}", file=sys.stderr)
            return 2

        result = engine.execute(state, STEP_CODES[step])
        if not result.ok:
            print(f"rejected {step}: {result.error}", file=sys.stderr)
            return 1

        state = result.state
        print(format_view(step, engine.view(state)))

    return 0


if __name__ == "__main__":
    sys.exit(main())
