"""
Combat formula module for the combat engine.

Each attack type has one formula for attacking and one for defending. A
formula names the two stats whose dice and modifiers make up the roll.
"""

from catchery import log_error
from pydantic import BaseModel, ConfigDict, Field

from lostworlds.core.constants import AttackType, Stat
from lostworlds.core.error_handling import FormulaNotFoundError


class CombatFormula(BaseModel):
    """The pair of stats rolled for an attack type and role."""

    model_config = ConfigDict(frozen=True)

    attack_type: AttackType = Field(
        description="The kind of attack this formula resolves.",
    )
    is_defense: bool = Field(
        description="Whether the formula is used to defend rather than attack.",
    )
    primary_stat: Stat = Field(
        description="The stat contributing the base dice.",
    )
    secondary_stat: Stat = Field(
        description="The stat contributing the secondary dice.",
    )
    label: str = Field(
        description="Short display label, e.g. 'Physical Attack'.",
    )
    description: str = Field(
        default="",
        description="Longer explanation of the formula.",
    )

    def __str__(self) -> str:
        return (
            f"{self.label} ({self.primary_stat.display_name} + "
            f"{self.secondary_stat.display_name})"
        )


COMBAT_FORMULAS: tuple[CombatFormula, ...] = (
    # Attacks
    CombatFormula(
        attack_type=AttackType.PHYSICAL,
        is_defense=False,
        primary_stat=Stat.SPD,
        secondary_stat=Stat.MIT,
        label="Physical Attack",
        description="Melee attacks using Speed + Might",
    ),
    CombatFormula(
        attack_type=AttackType.RANGED,
        is_defense=False,
        primary_stat=Stat.SPD,
        secondary_stat=Stat.KNW,
        label="Ranged Attack",
        description="Ranged attacks using Speed + Knowledge",
    ),
    CombatFormula(
        attack_type=AttackType.MAGICAL,
        is_defense=False,
        primary_stat=Stat.AST,
        secondary_stat=Stat.MAG,
        label="Magical Attack",
        description="Magical attacks using Astrology + Magiks",
    ),
    # Defenses
    CombatFormula(
        attack_type=AttackType.PHYSICAL,
        is_defense=True,
        primary_stat=Stat.SPD,
        secondary_stat=Stat.GRT,
        label="Physical Defense",
        description="Defending melee attacks using Speed + Grit",
    ),
    CombatFormula(
        attack_type=AttackType.RANGED,
        is_defense=True,
        primary_stat=Stat.SPD,
        secondary_stat=Stat.FRS,
        label="Ranged Defense",
        description="Defending ranged attacks using Speed + Foresight",
    ),
    CombatFormula(
        attack_type=AttackType.MAGICAL,
        is_defense=True,
        primary_stat=Stat.DET,
        secondary_stat=Stat.FRS,
        label="Magical Defense",
        description="Defending magical attacks using Determination + Foresight",
    ),
)


def find_combat_formula(
    attack_type: AttackType,
    is_defense: bool,
    formulas: tuple[CombatFormula, ...] = COMBAT_FORMULAS,
) -> CombatFormula | None:
    """
    Looks up the formula for an attack type and role.

    Args:
        attack_type (AttackType): The kind of attack.
        is_defense (bool): True to look up the defense formula.
        formulas (tuple[CombatFormula, ...]): The table to search.

    Returns:
        CombatFormula | None: The matching formula, or None.

    """
    for formula in formulas:
        if formula.attack_type == attack_type and formula.is_defense == is_defense:
            return formula
    return None


def get_combat_formula(
    attack_type: AttackType,
    is_defense: bool,
    formulas: tuple[CombatFormula, ...] = COMBAT_FORMULAS,
) -> CombatFormula:
    """
    Resolves the formula for an attack type and role.

    Args:
        attack_type (AttackType): The kind of attack.
        is_defense (bool): True to resolve the defense formula.
        formulas (tuple[CombatFormula, ...]): The table to search.

    Returns:
        CombatFormula: The matching formula.

    Raises:
        FormulaNotFoundError: If the table has no matching entry.

    """
    formula = find_combat_formula(attack_type, is_defense, formulas)
    if formula is None:
        role = "defense" if is_defense else "attack"
        log_error(
            f"No combat formula found for {attack_type} {role}",
            {"attack_type": attack_type, "is_defense": is_defense},
        )
        raise FormulaNotFoundError(f"No combat formula found for {attack_type} {role}")
    return formula


def attack_formulas() -> list[CombatFormula]:
    """Returns the attack formulas, in table order."""
    return [f for f in COMBAT_FORMULAS if not f.is_defense]


def defense_formulas() -> list[CombatFormula]:
    """Returns the defense formulas, in table order."""
    return [f for f in COMBAT_FORMULAS if f.is_defense]
