class EngineError(Exception):
    pass


class InvalidTransition(EngineError):
    """Command is not valid in the match's current status."""


class EmptyUndo(EngineError):
    """Undo requested with no points in the log."""


class UnknownParticipant(EngineError):
    pass


class InvalidConfig(EngineError):
    """Rule set or arrangement rejected at match setup."""


class InvalidSnapshot(EngineError):
    pass


class InvalidEvent(EngineError):
    """Point rejected: unknown side, scorer on the other side, or out-of-order timestamp."""
