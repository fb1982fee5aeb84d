"""
Core system module for the Lost Worlds combat engine.

This module contains the fundamental pieces the combat modules build on:
game constants, stat derivation, error types, logging, settings and console
utilities.
"""

from .constants import (
    DIE_SIDES,
    MAX_SKILL_LEVEL,
    AttackType,
    CalculatorMode,
    CombatTab,
    RollType,
    Stat,
    StatCategory,
)
from .error_handling import (
    CharacterRecordError,
    CombatEngineError,
    FormulaNotFoundError,
    InvalidSelectionError,
)
from .settings import (
    EngineSettings,
    load_settings,
)
from .stats import (
    dice_for,
    format_modifier,
    modifier_for,
    skill_bonus_dice,
)
from .utils import (
    ccapture,
    cprint,
    crule,
)

__all__ = [
    # Import from constants.py
    "DIE_SIDES",
    "MAX_SKILL_LEVEL",
    "AttackType",
    "CalculatorMode",
    "CombatTab",
    "RollType",
    "Stat",
    "StatCategory",
    # Import from error_handling.py
    "CharacterRecordError",
    "CombatEngineError",
    "FormulaNotFoundError",
    "InvalidSelectionError",
    # Import from settings.py
    "EngineSettings",
    "load_settings",
    # Import from stats.py
    "dice_for",
    "format_modifier",
    "modifier_for",
    "skill_bonus_dice",
    # Import from utils.py
    "ccapture",
    "cprint",
    "crule",
]
