import threading
from copy import deepcopy
from typing import Dict, List, Optional

from scoreboard import engine
from scoreboard.engine import Command, CommandResult
from scoreboard.models import Arrangement, Identity, MatchConfig, MatchState, MatchView, Side
from scoreboard.serialization import state_from_dict, state_to_dict


class MatchSession:
    """
    Single local match session.

    Responsibilities:
    - Hold the authoritative MatchState for one match
    - Serialize commands (one writer at a time)
    - Keep the view after every accepted command
    - Export / restore a lossless snapshot
    """

    def __init__(self, config: MatchConfig, arrangement: Arrangement):
        self._lock = threading.Lock()
        self._state = engine.new_match(config, arrangement)
        self._history: List[MatchView] = [engine.view(self._state)]

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def set_first_server(self, identity: Identity) -> MatchView:
        return self._run(engine.set_first_server, identity)

    def add_point(self, side: Side, timestamp: Optional[float] = None) -> MatchView:
        return self._run(engine.add_point, side, None, timestamp)

    def add_point_for(self, identity: Identity, timestamp: Optional[float] = None) -> MatchView:
        return self._run(engine.add_point_for, identity, timestamp)

    def undo(self) -> MatchView:
        return self._run(engine.undo)

    def cancel(self) -> MatchView:
        return self._run(engine.cancel)

    def try_command(self, command: Command) -> CommandResult:
        """
        Apply a command without raising engine errors.
        A rejected command leaves the session untouched.
        """
        with self._lock:
            result = engine.execute(self._state, command)
            if result.ok:
                self._commit(result.state)
            return result

    def rematch(self, swap_sides: bool = True) -> MatchView:
        """
        Replace the finished or cancelled match with a new one.
        History restarts with the new match.
        """
        with self._lock:
            self._state = engine.rematch(self._state, swap_sides=swap_sides)
            self._history = [engine.view(self._state)]
            return self._history[-1]

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    @property
    def state(self) -> MatchState:
        return self._state

    def get_view(self) -> MatchView:
        return self._history[-1]

    def get_history(self) -> List[MatchView]:
        return list(self._history)

    # ---------------------------------------------------------
    # Snapshot
    # ---------------------------------------------------------

    def export(self) -> Dict:
        with self._lock:
            return deepcopy(state_to_dict(self._state))

    @classmethod
    def restore(cls, data: Dict) -> "MatchSession":
        """
        Rebuild a session from an exported snapshot.
        History only holds the restored view.
        """
        state = state_from_dict(data)
        session = cls(state.config, state.arrangement)
        session._state = state
        session._history = [engine.view(state)]
        return session

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _run(self, command, *args) -> MatchView:
        with self._lock:
            self._commit(command(self._state, *args))
            return self._history[-1]

    def _commit(self, state: Optional[MatchState]):
        self._state = state
        self._history.append(engine.view(state))
