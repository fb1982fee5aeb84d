"""
Stat derivation module for the combat engine.

Converts raw stat values into the modifier and the number of d20s they
contribute to a dice pool. Every stat used in a roll passes through both
functions.
"""

from lostworlds.core.constants import (
    MAX_SKILL_LEVEL,
    MAX_STAT_DICE,
    MAX_STAT_MODIFIER,
    MIN_STAT_DICE,
    MIN_STAT_MODIFIER,
)


def modifier_for(value: int) -> int:
    """
    Calculates the flat modifier granted by a stat value.

    Every ten points grant +1, up to +10. Negative values grant a penalty of
    at most -4.

    Args:
        value (int): The raw stat value.

    Returns:
        int: The modifier, between -4 and +10.

    """
    if value < 0:
        return max(MIN_STAT_MODIFIER, value // 10)
    return min(MAX_STAT_MODIFIER, value // 10)


def dice_for(value: int) -> int:
    """
    Calculates how many d20s a stat value contributes.

    Args:
        value (int): The raw stat value.

    Returns:
        int: The number of dice, between 1 and 6.

    """
    if value < 0:
        return MIN_STAT_DICE
    return min(MAX_STAT_DICE, 1 + value // 20)


def skill_bonus_dice(level: int) -> int:
    """Returns the bonus dice granted by a skill level (one per level)."""
    return max(0, min(level, MAX_SKILL_LEVEL))


def format_modifier(modifier: int) -> str:
    """
    Formats a modifier with an explicit sign.

    Args:
        modifier (int): The modifier to format.

    Returns:
        str: "+3" for positive (and zero) modifiers, "-2" for negative ones.

    """
    return f"+{modifier}" if modifier >= 0 else str(modifier)
