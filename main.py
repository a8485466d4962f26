import logging

from scoreboard.match_session import MatchSession
from scoreboard.models import MatchConfig, Side, Singles

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

session = MatchSession(
    MatchConfig.from_game_mode("Standard 11"),
    Singles(side1="alice", side2="bob"),
)

session.set_first_server("alice")

# 10-10, deuce
for _ in range(10):
    session.add_point(Side.SIDE1)
    session.add_point(Side.SIDE2)

print("At deuce:")
print(session.get_view())

session.add_point(Side.SIDE1)  # 11-10
session.add_point(Side.SIDE1)  # 12-10 -> winner

print("\nFinished:")
print(session.get_view())

session.undo()  # mis-scored final point

print("\nAfter undo:")
print(session.get_view())

session.add_point(Side.SIDE2)  # 11-11
print("\nTrying to add point after cancel...")
session.cancel()
session.add_point(Side.SIDE1)  # raises InvalidTransition
