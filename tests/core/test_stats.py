"""
Tests for stat derivation.
"""

import pytest

from lostworlds.core.constants import Stat, StatCategory
from lostworlds.core.stats import dice_for, format_modifier, modifier_for, skill_bonus_dice


@pytest.mark.parametrize(
    "value, expected",
    [(0, 1), (19, 1), (20, 2), (39, 2), (40, 3), (99, 5), (100, 6), (1000, 6)],
)
def test_dice_for_non_negative_values(value, expected):
    assert dice_for(value) == expected


@pytest.mark.parametrize("value", [-1, -19, -40, -1000])
def test_dice_for_negative_values_is_one_die(value):
    assert dice_for(value) == 1


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (9, 0), (10, 1), (42, 4), (99, 9), (100, 10), (105, 10), (5000, 10)],
)
def test_modifier_for_non_negative_values(value, expected):
    assert modifier_for(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(-1, -1), (-5, -1), (-10, -1), (-11, -2), (-40, -4), (-41, -4), (-100, -4)],
)
def test_modifier_for_negative_values_floors(value, expected):
    assert modifier_for(value) == expected


def test_derivation_stays_within_bounds():
    """Both functions are total and bounded over a wide range of values."""
    for value in range(-500, 501):
        assert 1 <= dice_for(value) <= 6
        assert -4 <= modifier_for(value) <= 10


def test_skill_bonus_dice_is_level_capped_at_ten():
    assert skill_bonus_dice(0) == 0
    assert skill_bonus_dice(3) == 3
    assert skill_bonus_dice(10) == 10
    assert skill_bonus_dice(14) == 10
    assert skill_bonus_dice(-2) == 0


def test_format_modifier_signs():
    assert format_modifier(3) == "+3"
    assert format_modifier(0) == "+0"
    assert format_modifier(-2) == "-2"


@pytest.mark.parametrize(
    "key, expected",
    [("MIT", Stat.MIT), ("mit", Stat.MIT), ("might", Stat.MIT), ("Magiks", Stat.MAG), ("NAT", Stat.NAT)],
)
def test_stat_from_key(key, expected):
    assert Stat.from_key(key) == expected


def test_stat_from_unknown_key():
    with pytest.raises(ValueError):
        Stat.from_key("luck")


def test_stat_metadata():
    assert Stat.DET.key == "determination"
    assert Stat.DET.display_name == "Determination"
    assert Stat.DET.category == StatCategory.MENTAL
    assert StatCategory.PHYSICAL.stats == [Stat.MIT, Stat.GRT, Stat.SPD]
