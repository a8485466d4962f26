from typing import Iterable, List

from scoreboard import engine
from scoreboard.models import Arrangement, Identity, MatchConfig, MatchState, MatchStatus, MatchView, Side


def replay(
    config: MatchConfig,
    arrangement: Arrangement,
    first_server: Identity,
    sides: Iterable[Side],
) -> MatchState:
    """
    Builds a match by applying points one at a time.
    Raises InvalidTransition if a point follows the winning one.
    """
    state = engine.set_first_server(engine.new_match(config, arrangement), first_server)

    for side in sides:
        state = engine.add_point(state, side)

    return state


def build_match_timeline(
    config: MatchConfig,
    arrangement: Arrangement,
    first_server: Identity,
    sides: Iterable[Side],
) -> List[MatchView]:
    """
    Replays a match from scratch and returns the view after each point.
    Points after the winning one are ignored.
    Does NOT mutate external state.
    """
    state = engine.set_first_server(engine.new_match(config, arrangement), first_server)

    timeline: List[MatchView] = []

    for side in sides:
        state = engine.add_point(state, side)
        timeline.append(engine.view(state))

        if state.status is MatchStatus.FINISHED:
            break

    return timeline


def rebuild_view(state: MatchState) -> MatchView:
    """
    Recomputes the view of a stored match from its log alone.

    Only status, first server and the event log are trusted; score,
    server, deuce and winner are derived again.
    """
    fresh = engine.new_match(state.config, state.arrangement)

    if state.first_server is None:
        return engine.view(_with_status(fresh, state))

    rebuilt = engine.set_first_server(fresh, state.first_server)
    for event in state.events:
        rebuilt = engine.add_point(
            rebuilt, event.side, scored_by=event.scored_by, timestamp=event.timestamp
        )
    return engine.view(_with_status(rebuilt, state))


def _with_status(rebuilt: MatchState, stored: MatchState) -> MatchState:
    # cancellation is not derivable from the log
    if stored.status is MatchStatus.CANCELLED:
        return engine.cancel(rebuilt)
    return rebuilt
