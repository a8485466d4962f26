import pytest

from scoreboard import engine
from scoreboard.exceptions import InvalidTransition
from scoreboard.models import MatchConfig, MatchStatus, Side, Singles
from scoreboard.timeline import build_match_timeline, rebuild_view, replay


CONFIG = MatchConfig()
SINGLES = Singles(side1="A", side2="B")


# -------------------------------------------------
# Basic Timeline Build
# -------------------------------------------------

def test_timeline_basic_build():
    timeline = build_match_timeline(CONFIG, SINGLES, "A", [Side.SIDE1] * 5)

    assert len(timeline) == 5
    assert timeline[-1].score == (5, 0)
    assert [v.current_server for v in timeline] == ["A", "B", "B", "A", "A"]


# -------------------------------------------------
# Timeline Stops After Match Finish
# -------------------------------------------------

def test_timeline_stops_after_match_finish():
    sides = [Side.SIDE1] * 11 + [Side.SIDE2] * 20

    timeline = build_match_timeline(CONFIG, SINGLES, "A", sides)

    last = timeline[-1]

    assert len(timeline) == 11
    assert last.status is MatchStatus.FINISHED
    assert last.winner is Side.SIDE1


# -------------------------------------------------
# Empty Events
# -------------------------------------------------

def test_empty_timeline():
    timeline = build_match_timeline(CONFIG, SINGLES, "A", [])

    assert timeline == []


# -------------------------------------------------
# Replay
# -------------------------------------------------

def test_replay_rejects_points_after_finish():
    with pytest.raises(InvalidTransition):
        replay(CONFIG, SINGLES, "A", [Side.SIDE1] * 12)


def test_replay_equals_incremental_commands():
    sides = [Side.SIDE1, Side.SIDE2, Side.SIDE2, Side.SIDE1, Side.SIDE2]

    state = engine.set_first_server(engine.new_match(CONFIG, SINGLES), "B")
    for side in sides:
        state = engine.add_point(state, side)

    replayed = replay(CONFIG, SINGLES, "B", sides)

    assert replayed == state
    assert build_match_timeline(CONFIG, SINGLES, "B", sides)[-1] == engine.view(state)


def test_rebuild_view_after_undo():
    state = replay(CONFIG, SINGLES, "A", [Side.SIDE1, Side.SIDE2, Side.SIDE2])
    state = engine.undo(state)

    assert rebuild_view(state) == engine.view(state)


def test_rebuild_view_awaiting_and_cancelled():
    fresh = engine.new_match(CONFIG, SINGLES)
    assert rebuild_view(fresh) == engine.view(fresh)

    cancelled = engine.cancel(fresh)
    assert rebuild_view(cancelled) == engine.view(cancelled)

    mid = engine.cancel(replay(CONFIG, SINGLES, "A", [Side.SIDE2] * 4))
    assert rebuild_view(mid) == engine.view(mid)


# -------------------------------------------------
# Rebuild Keeps Event Details
# -------------------------------------------------

def test_rebuild_view_keeps_timestamps():
    state = engine.set_first_server(engine.new_match(MatchConfig(points_to_win=2), SINGLES), "B")
    state = engine.add_point(state, Side.SIDE2, timestamp=3.0)
    state = engine.add_point_for(state, "B", timestamp=4.0)

    view = rebuild_view(state)

    assert view == engine.view(state)
    assert view.started_at == 3.0
    assert view.ended_at == 4.0
