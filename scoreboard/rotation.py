from typing import Tuple

from scoreboard.models import Arrangement, Identity, MatchConfig
from scoreboard.rules import turn_index


def build_rotation(arrangement: Arrangement, starter: Identity) -> Tuple[Identity, ...]:
    """
    Fixed serving order for the whole match.

    Singles: starter, opponent.
    Doubles: starter, opposing captain, starter's partner, opposing partner.
    """
    starting_side = arrangement.side_of(starter)

    if not arrangement.is_doubles:
        (receiver,) = arrangement.members(starting_side.other)
        return (starter, receiver)

    captain, partner = arrangement.members(starting_side)
    if starter == partner:
        partner = captain

    primary_opponent, secondary_opponent = arrangement.members(starting_side.other)
    return (starter, primary_opponent, partner, secondary_opponent)


def current_server(
    config: MatchConfig,
    arrangement: Arrangement,
    starter: Identity,
    total_points: int,
    deuce: bool,
) -> Identity:
    rotation = build_rotation(arrangement, starter)
    return rotation[turn_index(config, total_points, deuce) % len(rotation)]
