from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Hashable, Optional, Tuple, Union

from scoreboard import config
from scoreboard.exceptions import InvalidConfig, UnknownParticipant

if TYPE_CHECKING:
    from scoreboard.score_log import ScoreLog


Identity = Hashable


class Side(str, Enum):
    SIDE1 = "side1"
    SIDE2 = "side2"

    @property
    def other(self) -> "Side":
        return Side.SIDE2 if self is Side.SIDE1 else Side.SIDE1


class ServeStyle(str, Enum):
    FREE = "free"
    CROSS = "cross"


class MatchStatus(str, Enum):
    AWAITING_SERVER = "awaiting_server"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (MatchStatus.FINISHED, MatchStatus.CANCELLED)


# =========================================================
# RULES
# =========================================================

@dataclass(frozen=True)
class MatchConfig:
    """
    Rule parameters captured for one match.

    Validated on construction; a bad count raises InvalidConfig.
    serve_style is carried for display only.
    """
    points_to_win: int = config.DEFAULT_POINTS_TO_WIN
    serves_before_change: int = config.DEFAULT_SERVES_BEFORE_CHANGE
    deuce_enabled: bool = True
    serves_in_deuce: int = config.DEFAULT_SERVES_IN_DEUCE
    serve_style: ServeStyle = ServeStyle(config.DEFAULT_SERVE_STYLE)

    def __post_init__(self):
        for name in ("points_to_win", "serves_before_change", "serves_in_deuce"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfig(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidConfig(f"{name} must be >= 1, got {value}")

        if not isinstance(self.deuce_enabled, bool):
            raise InvalidConfig(f"deuce_enabled must be a bool, got {self.deuce_enabled!r}")

        try:
            style = ServeStyle(self.serve_style)
        except ValueError:
            raise InvalidConfig(f"Unknown serve style: {self.serve_style!r}") from None
        object.__setattr__(self, "serve_style", style)

    @classmethod
    def from_game_mode(cls, name: str, **overrides) -> "MatchConfig":
        """
        Build a config from one of the preset game modes.

        Overrides replace individual preset values, e.g. a match that
        keeps "Standard 11" scoring but plays 2 serves in deuce.
        """
        if name not in config.GAME_MODES:
            raise InvalidConfig(f"Unknown game mode: {name!r}")

        params = {k: v for k, v in config.GAME_MODES[name].items() if k != "description"}
        unknown = set(overrides) - set(params)
        if unknown:
            raise InvalidConfig(f"Unknown override(s): {sorted(unknown)}")

        params.update(overrides)
        return cls(**params)


# =========================================================
# PARTICIPANTS
# =========================================================

@dataclass(frozen=True)
class Team:
    captain: Identity
    partner: Identity


@dataclass(frozen=True)
class Singles:
    side1: Identity
    side2: Identity

    def __post_init__(self):
        _require_distinct(self.participants())

    @property
    def is_doubles(self) -> bool:
        return False

    def participants(self) -> Tuple[Identity, ...]:
        return (self.side1, self.side2)

    def members(self, side: Side) -> Tuple[Identity, ...]:
        return (self.side1,) if side is Side.SIDE1 else (self.side2,)

    def side_of(self, identity: Identity) -> Side:
        if identity == self.side1:
            return Side.SIDE1
        if identity == self.side2:
            return Side.SIDE2
        raise UnknownParticipant(f"{identity!r} is not in this match")

    def swapped(self) -> "Singles":
        return Singles(side1=self.side2, side2=self.side1)


@dataclass(frozen=True)
class Doubles:
    side1: Team
    side2: Team

    def __post_init__(self):
        _require_distinct(self.participants())

    @property
    def is_doubles(self) -> bool:
        return True

    def participants(self) -> Tuple[Identity, ...]:
        return (
            self.side1.captain,
            self.side1.partner,
            self.side2.captain,
            self.side2.partner,
        )

    def team(self, side: Side) -> Team:
        return self.side1 if side is Side.SIDE1 else self.side2

    def members(self, side: Side) -> Tuple[Identity, ...]:
        team = self.team(side)
        return (team.captain, team.partner)

    def side_of(self, identity: Identity) -> Side:
        if identity in (self.side1.captain, self.side1.partner):
            return Side.SIDE1
        if identity in (self.side2.captain, self.side2.partner):
            return Side.SIDE2
        raise UnknownParticipant(f"{identity!r} is not in this match")

    def swapped(self) -> "Doubles":
        return Doubles(side1=self.side2, side2=self.side1)


Arrangement = Union[Singles, Doubles]


def _require_distinct(identities):
    if len(set(identities)) != len(identities):
        raise InvalidConfig(f"Participants must be distinct: {list(identities)}")


# =========================================================
# EVENTS & STATE
# =========================================================

@dataclass(frozen=True)
class PointEvent:
    side: Side
    sequence: int
    scored_by: Optional[Identity] = None
    timestamp: Optional[float] = None  # caller supplied, seconds


@dataclass(frozen=True)
class MatchState:
    """
    Everything needed to reconstruct a match.

    Score, server and deuce are not stored; they are derived from
    the events on every view. events is a tuple so snapshots never
    share mutable data.
    """
    config: MatchConfig
    arrangement: Arrangement
    events: Tuple[PointEvent, ...] = ()
    status: MatchStatus = MatchStatus.AWAITING_SERVER
    first_server: Optional[Identity] = None
    winner: Optional[Side] = None

    @property
    def log(self) -> "ScoreLog":
        """A fresh ScoreLog over events; changing it does not touch the state."""
        from scoreboard.score_log import ScoreLog

        return ScoreLog(self.events)


@dataclass(frozen=True)
class MatchView:
    score: Tuple[int, int]
    current_server: Optional[Identity]
    is_deuce: bool
    status: MatchStatus
    winner: Optional[Side]
    serving_side: Optional[Side] = None
    serves_remaining: Optional[int] = None
    winning_participants: Tuple[Identity, ...] = field(default_factory=tuple)
    started_at: Optional[float] = None
    ended_at: Optional[float] = None

    @property
    def total_points(self) -> int:
        return self.score[0] + self.score[1]
