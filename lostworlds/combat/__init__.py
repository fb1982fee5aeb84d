"""
Combat module for the Lost Worlds combat engine.

Combat formulas, dice pool building, dice rolling, initiative tracking and
the controller that ties them together.
"""

from .controller import CalculatorState, CombatController, SkillOption
from .dice_pool import (
    DicePool,
    RollCalculation,
    RollContext,
    SkillContribution,
    StatContribution,
    calculate_combat_roll,
    calculate_simple_roll,
    create_stat_contribution,
    get_skill_contributions,
)
from .dice_roller import DiceRoller, DiceRollResult, RollHistory, RollRecord
from .formulas import (
    COMBAT_FORMULAS,
    CombatFormula,
    find_combat_formula,
    get_combat_formula,
)
from .initiative import CombatState, InitiativeEntry, InitiativeTracker

__all__ = [
    "CalculatorState",
    "CombatController",
    "SkillOption",
    "DicePool",
    "RollCalculation",
    "RollContext",
    "SkillContribution",
    "StatContribution",
    "calculate_combat_roll",
    "calculate_simple_roll",
    "create_stat_contribution",
    "get_skill_contributions",
    "DiceRoller",
    "DiceRollResult",
    "RollHistory",
    "RollRecord",
    "COMBAT_FORMULAS",
    "CombatFormula",
    "find_combat_formula",
    "get_combat_formula",
    "CombatState",
    "InitiativeEntry",
    "InitiativeTracker",
]
