"""
Dice pool module for the combat engine.

Builds the deterministic part of a roll: which stats and skills contribute,
how many d20s end up in the pool and which flat modifier is added. Nothing
here rolls dice, so a calculation can be previewed any number of times and
always yields the same pool.
"""

from collections.abc import Iterable, Mapping

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field, model_validator

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.formulas import get_combat_formula
from lostworlds.core.constants import MAX_SKILL_LEVEL, AttackType, RollType, Stat
from lostworlds.core.error_handling import (
    InvalidSelectionError,
    ensure_int_in_range,
    ensure_non_negative_int,
)
from lostworlds.core.stats import dice_for, format_modifier, modifier_for, skill_bonus_dice


class StatContribution(BaseModel):
    """The dice and modifier a single stat adds to a pool."""

    model_config = ConfigDict(frozen=True)

    stat: Stat = Field(description="The contributing stat.")
    name: str = Field(description="Display name of the stat.")
    value: int = Field(description="The raw stat value.")
    dice: int = Field(description="Number of d20s granted by the value.")
    mod: int = Field(description="Flat modifier granted by the value.")

    def __str__(self) -> str:
        return f"{self.name} {self.value} ({self.dice}d20{format_modifier(self.mod)})"


class SkillContribution(BaseModel):
    """The bonus dice a selected skill adds to a pool."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="The skill identifier.")
    name: str = Field(description="Display name of the skill.")
    level: int = Field(description="The character's level in the skill.")
    bonus_dice: int = Field(description="Bonus d20s granted, equal to the level.")

    def __str__(self) -> str:
        return f"{self.name} {self.level} (+{self.bonus_dice}d20)"


class DicePool(BaseModel):
    """
    The aggregated dice and modifier of one roll.

    The totals are always the sum of their parts; a pool whose totals do not
    add up is rejected at construction. Use ``DicePool.build`` to have them
    computed.
    """

    model_config = ConfigDict(frozen=True)

    base_dice: int = Field(ge=0, description="Dice from the primary stat(s).")
    secondary_dice: int = Field(default=0, ge=0, description="Dice from the secondary stat.")
    skill_dice: int = Field(default=0, ge=0, description="Bonus dice from skills.")
    bonus_dice: int = Field(default=0, ge=0, description="Free-form bonus dice.")
    total_dice: int = Field(ge=0, description="Sum of all dice.")
    stat_modifier: int = Field(default=0, description="Modifier from the stats.")
    bonus_modifier: int = Field(default=0, description="Free-form bonus modifier.")
    modifier: int = Field(description="Total flat modifier added to the roll.")

    @model_validator(mode="after")
    def _check_totals(self) -> "DicePool":
        expected_dice = self.base_dice + self.secondary_dice + self.skill_dice + self.bonus_dice
        if self.total_dice != expected_dice:
            raise ValueError(
                f"total_dice must be {expected_dice} (sum of its parts), got {self.total_dice}"
            )
        if self.modifier != self.stat_modifier + self.bonus_modifier:
            raise ValueError(
                f"modifier must be {self.stat_modifier + self.bonus_modifier} "
                f"(sum of its parts), got {self.modifier}"
            )
        return self

    @classmethod
    def build(
        cls,
        base_dice: int,
        secondary_dice: int = 0,
        skill_dice: int = 0,
        bonus_dice: int = 0,
        stat_modifier: int = 0,
        bonus_modifier: int = 0,
    ) -> "DicePool":
        """
        Creates a pool, computing its totals from the parts.

        Returns:
            DicePool: The new pool.

        """
        return cls(
            base_dice=base_dice,
            secondary_dice=secondary_dice,
            skill_dice=skill_dice,
            bonus_dice=bonus_dice,
            total_dice=base_dice + secondary_dice + skill_dice + bonus_dice,
            stat_modifier=stat_modifier,
            bonus_modifier=bonus_modifier,
            modifier=stat_modifier + bonus_modifier,
        )

    def __str__(self) -> str:
        return f"{self.total_dice}d20{format_modifier(self.modifier)}"


class RollContext(BaseModel):
    """What kind of roll a calculation describes."""

    model_config = ConfigDict(frozen=True)

    type: RollType = Field(description="Stat, attack or defense roll.")
    attack_type: AttackType | None = Field(
        default=None,
        description="The attack type, for attack and defense rolls.",
    )
    is_defense: bool = Field(default=False, description="True for defense rolls.")


class RollCalculation(BaseModel):
    """Complete, immutable breakdown of a roll before the dice are thrown."""

    model_config = ConfigDict(frozen=True)

    context: RollContext = Field(description="The kind of roll.")
    character_id: str = Field(description="Identifier of the rolling character.")
    character_name: str = Field(description="Name of the rolling character.")
    primary_stats: tuple[StatContribution, ...] = Field(
        description=(
            "Stat contributions forming the base dice: every selected stat for "
            "simple rolls, the formula's primary stat for combat rolls."
        ),
    )
    secondary_stat: StatContribution | None = Field(
        default=None,
        description="The formula's secondary stat, for combat rolls.",
    )
    skills: tuple[SkillContribution, ...] = Field(
        default=(),
        description="Contributions of the selected skills.",
    )
    dice_pool: DicePool = Field(description="The resulting dice pool.")
    description: str = Field(description="Human-readable summary of the roll.")

    @property
    def primary_stat(self) -> StatContribution | None:
        """The single primary stat, or None when several stats were combined."""
        return self.primary_stats[0] if len(self.primary_stats) == 1 else None

    @property
    def stat_contributions(self) -> list[StatContribution]:
        """All stat contributions, primary first."""
        contributions = list(self.primary_stats)
        if self.secondary_stat is not None:
            contributions.append(self.secondary_stat)
        return contributions


# ==============================================================================
# BUILDERS
# ==============================================================================


def create_stat_contribution(character: CharacterSnapshot, stat: Stat) -> StatContribution:
    """
    Derives the contribution of one of the character's stats.

    Args:
        character (CharacterSnapshot): The rolling character.
        stat (Stat): The stat to derive.

    Returns:
        StatContribution: The dice and modifier the stat adds.

    """
    value = character.stat_value(stat)
    return StatContribution(
        stat=stat,
        name=stat.display_name,
        value=value,
        dice=dice_for(value),
        mod=modifier_for(value),
    )


def get_skill_contributions(
    skills: Mapping[str, int],
    selected_skill_ids: Iterable[str],
    skill_names: Mapping[str, str] | None = None,
) -> list[SkillContribution]:
    """
    Builds the contributions of the selected skills.

    Skills the character does not have are skipped. Skills without a display
    name use their identifier.

    Args:
        skills (Mapping[str, int]): The character's skill levels.
        selected_skill_ids (Iterable[str]): The skills selected for the roll.
        skill_names (Mapping[str, str] | None): Skill id to display name.

    Returns:
        list[SkillContribution]: One contribution per known selected skill.

    """
    skill_names = skill_names or {}
    contributions: list[SkillContribution] = []
    for skill_id in selected_skill_ids:
        if skill_id not in skills:
            continue
        level = ensure_int_in_range(
            skills[skill_id],
            f"skill level of '{skill_id}'",
            0,
            MAX_SKILL_LEVEL,
        )
        contributions.append(
            SkillContribution(
                id=skill_id,
                name=skill_names.get(skill_id) or skill_id,
                level=level,
                bonus_dice=skill_bonus_dice(level),
            )
        )
    return contributions


def _skill_and_bonus(
    character: CharacterSnapshot,
    selected_skills: Iterable[str],
    skill_names: Mapping[str, str] | None,
    bonus_dice: int,
) -> tuple[list[SkillContribution], int, int]:
    """Shared tail of both builders: skill contributions and clean bonus dice."""
    skill_contributions = get_skill_contributions(character.skills, selected_skills, skill_names)
    skill_dice = sum(s.bonus_dice for s in skill_contributions)
    bonus_dice = ensure_non_negative_int(bonus_dice, "bonus dice")
    return skill_contributions, skill_dice, bonus_dice


def calculate_simple_roll(
    character: CharacterSnapshot,
    stats: Iterable[Stat],
    selected_skills: Iterable[str] = (),
    skill_names: Mapping[str, str] | None = None,
    bonus_dice: int = 0,
    bonus_modifier: int = 0,
) -> RollCalculation:
    """
    Builds a roll from one or more freely chosen stats.

    Args:
        character (CharacterSnapshot): The rolling character.
        stats (Iterable[Stat]): The selected stats; must not be empty.
        selected_skills (Iterable[str]): The selected skill identifiers.
        skill_names (Mapping[str, str] | None): Skill id to display name.
        bonus_dice (int): Additional dice, never negative.
        bonus_modifier (int): Additional flat modifier.

    Returns:
        RollCalculation: The calculated roll.

    Raises:
        InvalidSelectionError: If no stat is selected.

    """
    # Keep the selection order but drop duplicates.
    selected_stats = list(dict.fromkeys(stats))
    if not selected_stats:
        raise InvalidSelectionError("A simple roll needs at least one stat")

    stat_contributions = [create_stat_contribution(character, stat) for stat in selected_stats]
    skill_contributions, skill_dice, bonus_dice = _skill_and_bonus(
        character, selected_skills, skill_names, bonus_dice
    )

    dice_pool = DicePool.build(
        base_dice=sum(s.dice for s in stat_contributions),
        skill_dice=skill_dice,
        bonus_dice=bonus_dice,
        stat_modifier=sum(s.mod for s in stat_contributions),
        bonus_modifier=bonus_modifier,
    )

    stat_names = " + ".join(s.name for s in stat_contributions)
    calculation = RollCalculation(
        context=RollContext(type=RollType.STAT),
        character_id=character.id,
        character_name=character.name,
        primary_stats=tuple(stat_contributions),
        skills=tuple(skill_contributions),
        dice_pool=dice_pool,
        description=f"{character.name} rolls {stat_names}",
    )
    log_debug(
        f"Calculated simple roll: {calculation.description} -> {dice_pool}",
        {"character": character.id, "stats": [s.value for s in selected_stats]},
    )
    return calculation


def calculate_combat_roll(
    character: CharacterSnapshot,
    attack_type: AttackType,
    is_defense: bool,
    selected_skills: Iterable[str] = (),
    skill_names: Mapping[str, str] | None = None,
    bonus_dice: int = 0,
    bonus_modifier: int = 0,
) -> RollCalculation:
    """
    Builds an attack or defense roll from the matching combat formula.

    Args:
        character (CharacterSnapshot): The rolling character.
        attack_type (AttackType): The kind of attack.
        is_defense (bool): True for a defense roll.
        selected_skills (Iterable[str]): The selected skill identifiers.
        skill_names (Mapping[str, str] | None): Skill id to display name.
        bonus_dice (int): Additional dice, never negative.
        bonus_modifier (int): Additional flat modifier.

    Returns:
        RollCalculation: The calculated roll.

    Raises:
        InvalidSelectionError: If no attack type is given.
        FormulaNotFoundError: If no formula matches the attack type and role.

    """
    if attack_type is None:
        raise InvalidSelectionError("A combat roll needs an attack type")

    formula = get_combat_formula(attack_type, is_defense)

    primary = create_stat_contribution(character, formula.primary_stat)
    secondary = create_stat_contribution(character, formula.secondary_stat)
    skill_contributions, skill_dice, bonus_dice = _skill_and_bonus(
        character, selected_skills, skill_names, bonus_dice
    )

    dice_pool = DicePool.build(
        base_dice=primary.dice,
        secondary_dice=secondary.dice,
        skill_dice=skill_dice,
        bonus_dice=bonus_dice,
        stat_modifier=primary.mod + secondary.mod,
        bonus_modifier=bonus_modifier,
    )

    calculation = RollCalculation(
        context=RollContext(
            type=RollType.DEFENSE if is_defense else RollType.ATTACK,
            attack_type=attack_type,
            is_defense=is_defense,
        ),
        character_id=character.id,
        character_name=character.name,
        primary_stats=(primary,),
        secondary_stat=secondary,
        skills=tuple(skill_contributions),
        dice_pool=dice_pool,
        description=f"{character.name} - {formula.label}",
    )
    log_debug(
        f"Calculated combat roll: {calculation.description} -> {dice_pool}",
        {"character": character.id, "attack_type": attack_type.value, "is_defense": is_defense},
    )
    return calculation


def describe_pool(calculation: RollCalculation) -> list[tuple[str, int]]:
    """
    Lists where the dice of a calculation come from.

    Args:
        calculation (RollCalculation): The calculation to summarize.

    Returns:
        list[tuple[str, int]]: One (source, dice) pair per contribution, in
        pool order. The dice always add up to the pool's total.

    """
    pool = calculation.dice_pool
    summary = [(" + ".join(s.name for s in calculation.primary_stats), pool.base_dice)]
    if calculation.secondary_stat is not None:
        summary.append((calculation.secondary_stat.name, pool.secondary_dice))
    summary.extend((skill.name, skill.bonus_dice) for skill in calculation.skills)
    if pool.bonus_dice:
        summary.append(("Bonus", pool.bonus_dice))
    return summary
