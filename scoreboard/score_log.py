from typing import Iterable, Iterator, List, Optional, Tuple

from scoreboard.models import Identity, PointEvent, Side


class ScoreLog:
    """
    Append-only, truncatable record of who won each point.

    The log is the only place score lives. Sequence numbers equal the
    event's position, so truncating the end keeps them gapless.
    """

    def __init__(self, events: Optional[Iterable[PointEvent]] = None):
        self._events: List[PointEvent] = []
        for event in events or []:
            if event.sequence != len(self._events):
                raise ValueError(
                    f"Expected sequence {len(self._events)}, got {event.sequence}"
                )
            self._events.append(event)

    # ---------------------------------------------------------
    # Mutation
    # ---------------------------------------------------------

    def append(
        self,
        side: Side,
        scored_by: Optional[Identity] = None,
        timestamp: Optional[float] = None,
    ) -> PointEvent:
        event = PointEvent(
            side=Side(side),
            sequence=len(self._events),
            scored_by=scored_by,
            timestamp=timestamp,
        )
        self._events.append(event)
        return event

    def remove_last(self) -> Optional[PointEvent]:
        if not self._events:
            return None
        return self._events.pop()

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    def score(self) -> Tuple[int, int]:
        side1 = sum(1 for e in self._events if e.side is Side.SIDE1)
        return side1, len(self._events) - side1

    def total_points(self) -> int:
        return len(self._events)

    @property
    def events(self) -> Tuple[PointEvent, ...]:
        return tuple(self._events)

    def last(self) -> Optional[PointEvent]:
        return self._events[-1] if self._events else None

    def last_timestamp(self) -> Optional[float]:
        """Latest recorded timestamp; events without one are skipped."""
        for event in reversed(self._events):
            if event.timestamp is not None:
                return event.timestamp
        return None

    def copy(self) -> "ScoreLog":
        clone = ScoreLog()
        clone._events = list(self._events)
        return clone

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PointEvent]:
        return iter(tuple(self._events))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScoreLog):
            return NotImplemented
        return self._events == other._events

    def __repr__(self) -> str:
        a, b = self.score()
        return f"ScoreLog({a}-{b}, {len(self._events)} events)"
