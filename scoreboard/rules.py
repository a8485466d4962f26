"""Deuce detection, serve cadence and win evaluation.

Plain functions of (config, score). Nothing here holds state.
"""

from typing import Optional, Tuple

from scoreboard.models import MatchConfig, Side


# =========================================================
# DEUCE
# =========================================================

def is_deuce(config: MatchConfig, score: Tuple[int, int]) -> bool:
    threshold = config.points_to_win - 1
    return config.deuce_enabled and score[0] >= threshold and score[1] >= threshold


def pre_deuce_points(config: MatchConfig) -> int:
    """Total points at which both sides can first sit on points_to_win - 1."""
    return (config.points_to_win - 1) * 2


def cadence(config: MatchConfig, deuce: bool) -> int:
    return config.serves_in_deuce if deuce else config.serves_before_change


def turn_index(config: MatchConfig, total_points: int, deuce: bool) -> int:
    """
    Number of completed serve turns.

    Outside deuce turns are counted from the first point. In deuce the
    count restarts at pre_deuce_points with the deuce cadence. When the
    offset would be negative the regular count is used instead.
    """
    if deuce:
        offset = total_points - pre_deuce_points(config)
        if offset >= 0:
            return offset // config.serves_in_deuce
    return total_points // config.serves_before_change


def serves_remaining(config: MatchConfig, total_points: int, deuce: bool) -> int:
    """Points left in the current serve turn, including the next one."""
    if deuce:
        offset = total_points - pre_deuce_points(config)
        if offset >= 0:
            return config.serves_in_deuce - offset % config.serves_in_deuce
    return config.serves_before_change - total_points % config.serves_before_change


# =========================================================
# WIN CONDITION
# =========================================================

def evaluate_winner(config: MatchConfig, score: Tuple[int, int]) -> Optional[Side]:
    a, b = score

    if not config.deuce_enabled:
        # sudden death at the target
        if a >= config.points_to_win:
            return Side.SIDE1
        if b >= config.points_to_win:
            return Side.SIDE2
        return None

    if a >= config.points_to_win and a - b >= 2:
        return Side.SIDE1
    if b >= config.points_to_win and b - a >= 2:
        return Side.SIDE2
    return None
