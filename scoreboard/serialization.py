"""Plain-dict snapshots of a MatchState.

The full event log is kept because server and deuce state can only be
re-derived from it. Where the dict ends up is the caller's business.
"""

from typing import Any, Dict

from scoreboard.config import SCHEMA_VERSION
from scoreboard.exceptions import EngineError, InvalidSnapshot
from scoreboard.models import (
    Doubles,
    MatchConfig,
    MatchState,
    MatchStatus,
    PointEvent,
    Side,
    Singles,
    Team,
)
from scoreboard.rules import evaluate_winner
from scoreboard.score_log import ScoreLog


REQUIRED_FIELDS = {
    "schema_version",
    "config",
    "arrangement",
    "status",
    "first_server",
    "winner",
    "events",
}


def state_to_dict(state: MatchState) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "config": {
            "points_to_win": state.config.points_to_win,
            "serves_before_change": state.config.serves_before_change,
            "deuce_enabled": state.config.deuce_enabled,
            "serves_in_deuce": state.config.serves_in_deuce,
            "serve_style": state.config.serve_style.value,
        },
        "arrangement": _arrangement_to_dict(state.arrangement),
        "status": state.status.value,
        "first_server": state.first_server,
        "winner": state.winner.value if state.winner else None,
        "events": [
            {
                "side": e.side.value,
                "sequence": e.sequence,
                "scored_by": e.scored_by,
                "timestamp": e.timestamp,
            }
            for e in state.events
        ],
    }


def state_from_dict(data: Dict[str, Any]) -> MatchState:
    missing = REQUIRED_FIELDS - set(data.keys())
    if missing:
        raise InvalidSnapshot(f"Missing field(s): {sorted(missing)}")

    if data["schema_version"] != SCHEMA_VERSION:
        raise InvalidSnapshot(f"Unsupported schema_version: {data['schema_version']!r}")

    try:
        config = MatchConfig(**data["config"])
        arrangement = _arrangement_from_dict(data["arrangement"])
        status = MatchStatus(data["status"])
        winner = Side(data["winner"]) if data["winner"] is not None else None
        events = [
            PointEvent(
                side=Side(e["side"]),
                sequence=int(e["sequence"]),
                scored_by=e.get("scored_by"),
                timestamp=e.get("timestamp"),
            )
            for e in data["events"]
        ]
        log = ScoreLog(events)
    except InvalidSnapshot:
        raise
    except (EngineError, KeyError, TypeError, ValueError) as e:
        raise InvalidSnapshot(f"Malformed snapshot: {e}") from e

    state = MatchState(
        config=config,
        arrangement=arrangement,
        events=log.events,
        status=status,
        first_server=data["first_server"],
        winner=winner,
    )
    _validate_consistency(state)
    return state


# =========================================================
# VALIDATION
# =========================================================

def _validate_consistency(state: MatchState):
    if state.first_server is not None:
        try:
            state.arrangement.side_of(state.first_server)
        except EngineError as e:
            raise InvalidSnapshot(str(e)) from e

    if state.status is MatchStatus.AWAITING_SERVER:
        if state.first_server is not None or len(state.log):
            raise InvalidSnapshot("Match awaiting server cannot have a server or points")
    elif state.first_server is None and state.status is not MatchStatus.CANCELLED:
        raise InvalidSnapshot(f"Match {state.status.value} without a first server")

    if state.first_server is None and len(state.log):
        raise InvalidSnapshot("Points recorded without a first server")

    _validate_events(state)

    derived = evaluate_winner(state.config, state.log.score())
    expected = derived if state.status is MatchStatus.FINISHED else None

    if state.status is MatchStatus.FINISHED and derived is None:
        raise InvalidSnapshot("Finished match has no winning score")
    if state.winner != expected:
        raise InvalidSnapshot(
            f"Stored winner {state.winner} does not match score {state.log.score()}"
        )

    # a won score in a live match would have been finished
    if state.status in (MatchStatus.IN_PROGRESS, MatchStatus.CANCELLED) and derived is not None:
        raise InvalidSnapshot(f"Score {state.log.score()} is already decided")

    # only the last point may decide the match
    replay = ScoreLog()
    for event in list(state.log)[:-1]:
        replay.append(event.side)
        if evaluate_winner(state.config, replay.score()) is not None:
            raise InvalidSnapshot(f"Points recorded after the match was won at {replay.score()}")


def _validate_events(state: MatchState):
    previous = None
    for event in state.events:
        if event.scored_by is not None:
            try:
                side = state.arrangement.side_of(event.scored_by)
            except EngineError as e:
                raise InvalidSnapshot(str(e)) from e
            if side is not event.side:
                raise InvalidSnapshot(
                    f"Point {event.sequence} credited to {event.scored_by!r} on {event.side.value}"
                )

        if event.timestamp is None:
            continue
        if isinstance(event.timestamp, bool) or not isinstance(event.timestamp, (int, float)):
            raise InvalidSnapshot(f"Point {event.sequence} has timestamp {event.timestamp!r}")
        if previous is not None and event.timestamp < previous:
            raise InvalidSnapshot(f"Point {event.sequence} is earlier than the point before it")
        previous = event.timestamp


def _arrangement_to_dict(arrangement) -> Dict[str, Any]:
    if isinstance(arrangement, Doubles):
        return {
            "kind": "doubles",
            "side1": {"captain": arrangement.side1.captain, "partner": arrangement.side1.partner},
            "side2": {"captain": arrangement.side2.captain, "partner": arrangement.side2.partner},
        }
    return {"kind": "singles", "side1": arrangement.side1, "side2": arrangement.side2}


def _arrangement_from_dict(data: Dict[str, Any]):
    kind = data["kind"]
    if kind == "singles":
        return Singles(side1=data["side1"], side2=data["side2"])
    if kind == "doubles":
        return Doubles(side1=Team(**data["side1"]), side2=Team(**data["side2"]))
    raise InvalidSnapshot(f"Unknown arrangement kind: {kind!r}")
