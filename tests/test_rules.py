import pytest

from scoreboard.exceptions import InvalidConfig
from scoreboard.models import MatchConfig, ServeStyle, Side
from scoreboard.rules import (
    cadence,
    evaluate_winner,
    is_deuce,
    pre_deuce_points,
    serves_remaining,
    turn_index,
)


STANDARD = MatchConfig(points_to_win=11, serves_before_change=2, deuce_enabled=True, serves_in_deuce=1)
NO_DEUCE = MatchConfig(points_to_win=11, serves_before_change=2, deuce_enabled=False)


# ---------------------------------------------------------
# Config validation
# ---------------------------------------------------------

@pytest.mark.parametrize("field", ["points_to_win", "serves_before_change", "serves_in_deuce"])
@pytest.mark.parametrize("value", [0, -1, 1.5, True, "3"])
def test_config_rejects_bad_counts(field, value):
    with pytest.raises(InvalidConfig):
        MatchConfig(**{field: value})


@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_config_rejects_non_bool_deuce_flag(value):
    with pytest.raises(InvalidConfig):
        MatchConfig(deuce_enabled=value)


def test_config_serve_style_from_string():
    config = MatchConfig(serve_style="cross")

    assert config.serve_style is ServeStyle.CROSS


def test_config_rejects_unknown_serve_style():
    with pytest.raises(InvalidConfig):
        MatchConfig(serve_style="lob")


def test_config_from_game_mode_with_overrides():
    config = MatchConfig.from_game_mode("Standard 11", serves_in_deuce=2, serve_style="cross")

    assert config.points_to_win == 11
    assert config.serves_before_change == 2
    assert config.serves_in_deuce == 2
    assert config.serve_style is ServeStyle.CROSS


@pytest.mark.parametrize("name, overrides", [
    ("Blitz 5", {}),
    ("Standard 11", {"best_of": 5}),
    ("Standard 11", {"points_to_win": 0}),
])
def test_config_from_game_mode_rejected(name, overrides):
    with pytest.raises(InvalidConfig):
        MatchConfig.from_game_mode(name, **overrides)


# ---------------------------------------------------------
# Deuce gate
# ---------------------------------------------------------

@pytest.mark.parametrize("score, expected", [
    ((10, 10), True),
    ((11, 10), True),
    ((15, 14), True),
    ((10, 9), False),
    ((9, 10), False),
    ((0, 0), False),
])
def test_is_deuce(score, expected):
    assert is_deuce(STANDARD, score) is expected


def test_is_deuce_disabled():
    assert is_deuce(NO_DEUCE, (10, 10)) is False


def test_cadence():
    assert pre_deuce_points(STANDARD) == 20
    assert cadence(STANDARD, False) == 2
    assert cadence(STANDARD, True) == 1


@pytest.mark.parametrize("total, deuce, expected", [
    (0, False, 0),
    (1, False, 0),
    (2, False, 1),
    (19, False, 9),
    (20, True, 0),
    (21, True, 1),
    (25, True, 5),
])
def test_turn_index(total, deuce, expected):
    assert turn_index(STANDARD, total, deuce) == expected


def test_turn_index_negative_offset_falls_back():
    # a deuce flag below the deuce epoch uses the regular count
    assert turn_index(STANDARD, 15, True) == 7


@pytest.mark.parametrize("total, deuce, expected", [
    (0, False, 2),
    (1, False, 1),
    (2, False, 2),
    (20, True, 1),
    (23, True, 1),
])
def test_serves_remaining(total, deuce, expected):
    assert serves_remaining(STANDARD, total, deuce) == expected


# ---------------------------------------------------------
# Win condition
# ---------------------------------------------------------

@pytest.mark.parametrize("config, score, expected", [
    (STANDARD, (11, 0), Side.SIDE1),
    (STANDARD, (11, 9), Side.SIDE1),
    (STANDARD, (11, 10), None),
    (STANDARD, (12, 11), None),
    (STANDARD, (12, 10), Side.SIDE1),
    (STANDARD, (13, 15), Side.SIDE2),
    (STANDARD, (10, 8), None),
    (NO_DEUCE, (11, 10), Side.SIDE1),
    (NO_DEUCE, (10, 11), Side.SIDE2),
    (NO_DEUCE, (10, 10), None),
])
def test_evaluate_winner(config, score, expected):
    assert evaluate_winner(config, score) is expected


def test_one_point_match():
    config = MatchConfig(points_to_win=1, deuce_enabled=False)

    assert evaluate_winner(config, (1, 0)) is Side.SIDE1
    assert evaluate_winner(config, (0, 0)) is None
