import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from scoreboard.exceptions import (
    EmptyUndo,
    EngineError,
    InvalidConfig,
    InvalidEvent,
    InvalidTransition,
)
from scoreboard.models import (
    Arrangement,
    Doubles,
    Identity,
    MatchConfig,
    MatchState,
    MatchStatus,
    MatchView,
    Side,
    Singles,
)
from scoreboard.rotation import current_server
from scoreboard.rules import evaluate_winner, is_deuce, serves_remaining
from scoreboard.score_log import ScoreLog

logger = logging.getLogger(__name__)


# =========================================================
# COMMANDS
# =========================================================

@dataclass(frozen=True)
class SetFirstServer:
    identity: Identity


@dataclass(frozen=True)
class AddPoint:
    side: Side
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class AddPointFor:
    identity: Identity
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


Command = Union[SetFirstServer, AddPoint, AddPointFor, Undo, Cancel]


@dataclass(frozen=True)
class CommandResult:
    state: Optional[MatchState]
    error: Optional[EngineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MatchStateMachine:
    """
    Match lifecycle and scoring.

    Responsibilities:
    - Validate each command against the current status
    - Append to / truncate the score log
    - Detect the winning point and freeze the winner
    - Derive score, server and deuce state for callers

    Every command takes a MatchState and returns a new one. The input is
    never mutated and the machine keeps nothing between calls.
    """

    # =========================================================
    # SETUP
    # =========================================================

    def new_match(self, config: MatchConfig, arrangement: Arrangement) -> MatchState:
        if not isinstance(config, MatchConfig):
            raise InvalidConfig(f"Expected MatchConfig, got {type(config).__name__}")
        if not isinstance(arrangement, (Singles, Doubles)):
            raise InvalidConfig(f"Expected Singles or Doubles, got {type(arrangement).__name__}")

        return MatchState(config=config, arrangement=arrangement)

    def rematch(self, state: MatchState, swap_sides: bool = True) -> MatchState:
        """Fresh match with the same rules, optionally with ends swapped."""
        if not state.status.is_terminal:
            raise InvalidTransition(f"Cannot start a rematch while {state.status.value}")

        arrangement = state.arrangement.swapped() if swap_sides else state.arrangement
        return self.new_match(state.config, arrangement)

    # =========================================================
    # COMMANDS
    # =========================================================

    def set_first_server(self, state: MatchState, identity: Identity) -> MatchState:
        self._require_status(state, "set first server", MatchStatus.AWAITING_SERVER)
        state.arrangement.side_of(identity)

        logger.info("First server %r, match in progress", identity)
        return replace(state, status=MatchStatus.IN_PROGRESS, first_server=identity)

    def add_point(
        self,
        state: MatchState,
        side: Side,
        scored_by: Optional[Identity] = None,
        timestamp: Optional[float] = None,
    ) -> MatchState:
        self._require_status(state, "add point", MatchStatus.IN_PROGRESS)
        side = self._validate_side(side)
        self._validate_scorer(state, side, scored_by)

        log = state.log
        self._validate_timestamp(log, timestamp)
        event = log.append(side, scored_by=scored_by, timestamp=timestamp)
        winner = evaluate_winner(state.config, log.score())

        logger.debug("Point %d to %s, score %s", event.sequence, side.value, log.score())

        if winner is None:
            return replace(state, events=log.events)

        logger.info("Match won by %s at %s", winner.value, log.score())
        return replace(state, events=log.events, status=MatchStatus.FINISHED, winner=winner)

    def add_point_for(
        self,
        state: MatchState,
        identity: Identity,
        timestamp: Optional[float] = None,
    ) -> MatchState:
        """Credit a point to whichever side the participant plays on."""
        self._require_status(state, "add point", MatchStatus.IN_PROGRESS)
        side = state.arrangement.side_of(identity)
        return self.add_point(state, side, scored_by=identity, timestamp=timestamp)

    def undo(self, state: MatchState) -> MatchState:
        self._require_status(
            state, "undo", MatchStatus.IN_PROGRESS, MatchStatus.FINISHED
        )

        log = state.log
        removed = log.remove_last()
        if removed is None:
            raise EmptyUndo("No points to undo")

        logger.debug("Undid point %d (%s)", removed.sequence, removed.side.value)

        if state.status is MatchStatus.FINISHED:
            logger.info("Winning point undone, match back in progress")

        return replace(state, events=log.events, status=MatchStatus.IN_PROGRESS, winner=None)

    def cancel(self, state: MatchState) -> MatchState:
        self._require_status(
            state, "cancel", MatchStatus.AWAITING_SERVER, MatchStatus.IN_PROGRESS
        )

        logger.info("Match cancelled at %s", state.log.score())
        return replace(state, status=MatchStatus.CANCELLED)

    # =========================================================
    # BOUNDARY
    # =========================================================

    def apply(self, state: MatchState, command: Command) -> MatchState:
        if isinstance(command, SetFirstServer):
            return self.set_first_server(state, command.identity)
        if isinstance(command, AddPoint):
            return self.add_point(state, command.side, timestamp=command.timestamp)
        if isinstance(command, AddPointFor):
            return self.add_point_for(state, command.identity, timestamp=command.timestamp)
        if isinstance(command, Undo):
            return self.undo(state)
        if isinstance(command, Cancel):
            return self.cancel(state)
        raise TypeError(f"Unknown command: {command!r}")

    def execute(self, state: MatchState, command: Command) -> CommandResult:
        """
        Apply a command, reporting engine errors as a result.

        On failure the returned state is the untouched input. A bad side
        value in AddPoint comes back as InvalidEvent; only an unknown
        command type raises.
        """
        try:
            return CommandResult(state=self.apply(state, command))
        except EngineError as e:
            logger.debug("Rejected %s: %s", type(command).__name__, e)
            return CommandResult(state=state, error=e)

    def try_new_match(self, make_config, make_arrangement) -> CommandResult:
        """
        Build a match from callables that construct the config and
        arrangement, so that validation failures come back as a result.
        """
        try:
            return CommandResult(state=self.new_match(make_config(), make_arrangement()))
        except EngineError as e:
            logger.debug("Rejected match setup: %s", e)
            return CommandResult(state=None, error=e)

    # =========================================================
    # VIEW
    # =========================================================

    def view(self, state: MatchState) -> MatchView:
        score = state.log.score()
        total = state.log.total_points()
        deuce = is_deuce(state.config, score)

        server = None
        remaining = None
        if state.first_server is not None:
            server = current_server(state.config, state.arrangement, state.first_server, total, deuce)
            remaining = serves_remaining(state.config, total, deuce)

        winning = ()
        if state.winner is not None:
            winning = state.arrangement.members(state.winner)

        stamps = [e.timestamp for e in state.events if e.timestamp is not None]
        started_at = stamps[0] if stamps else None

        # the winning point is always the last event
        ended_at = None
        if state.status is MatchStatus.FINISHED:
            ended_at = state.events[-1].timestamp

        return MatchView(
            score=score,
            current_server=server,
            is_deuce=deuce,
            status=state.status,
            winner=state.winner,
            serving_side=state.arrangement.side_of(server) if server is not None else None,
            serves_remaining=remaining,
            winning_participants=winning,
            started_at=started_at,
            ended_at=ended_at,
        )

    # =========================================================
    # VALIDATION
    # =========================================================

    def _require_status(self, state: MatchState, action: str, *allowed: MatchStatus):
        if state.status not in allowed:
            raise InvalidTransition(f"Cannot {action} while {state.status.value}")

    def _validate_side(self, side) -> Side:
        try:
            return Side(side)
        except ValueError:
            raise InvalidEvent(f"Unknown side: {side!r}") from None

    def _validate_scorer(self, state: MatchState, side: Side, scored_by: Optional[Identity]):
        if scored_by is None:
            return
        if state.arrangement.side_of(scored_by) is not side:
            raise InvalidEvent(f"{scored_by!r} does not play on {side.value}")

    def _validate_timestamp(self, log: ScoreLog, timestamp: Optional[float]):
        if timestamp is None:
            return
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise InvalidEvent(f"Timestamp must be a number, got {timestamp!r}")

        # Enforce monotonic timestamp
        previous = log.last_timestamp()
        if previous is not None and timestamp < previous:
            raise InvalidEvent("Event timestamp must be non-decreasing")


_machine = MatchStateMachine()

new_match = _machine.new_match
rematch = _machine.rematch
set_first_server = _machine.set_first_server
add_point = _machine.add_point
add_point_for = _machine.add_point_for
undo = _machine.undo
cancel = _machine.cancel
apply = _machine.apply
execute = _machine.execute
try_new_match = _machine.try_new_match
view = _machine.view
