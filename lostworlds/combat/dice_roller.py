"""
Dice roller module for the combat engine.

Throws the d20s of a dice pool and classifies the outcome. The random source
is injected so rolls can be reproduced with a seeded generator.
"""

import random
from collections import deque
from collections.abc import Iterator
from typing import Any

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field, model_validator

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.dice_pool import DicePool, RollCalculation
from lostworlds.core.constants import DEFAULT_HISTORY_LIMIT, DIE_SIDES, Stat
from lostworlds.core.stats import dice_for, format_modifier, modifier_for


class DiceRollResult(BaseModel):
    """The outcome of rolling a dice pool."""

    model_config = ConfigDict(frozen=True)

    rolls: tuple[int, ...] = Field(
        default=(),
        description="Individual die results, in the order they were rolled.",
    )
    total: int = Field(description="Sum of all dice.")
    modifier: int = Field(description="Modifier carried over from the pool.")
    final_result: int = Field(description="Total plus modifier.")
    is_critical: bool = Field(
        default=False,
        description="At least one die shows a natural 20.",
    )
    is_fumble: bool = Field(
        default=False,
        description="Every die of a non-empty pool shows a natural 1.",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_flags(cls, data: Any) -> Any:
        """Fills in the critical and fumble flags from the rolls when omitted."""
        if isinstance(data, dict) and isinstance(data.get("rolls"), (list, tuple)):
            rolls = data["rolls"]
            data = dict(data)
            data.setdefault("is_critical", bool(rolls) and DIE_SIDES in rolls)
            data.setdefault("is_fumble", bool(rolls) and all(r == 1 for r in rolls))
        return data

    @model_validator(mode="after")
    def _check_result(self) -> "DiceRollResult":
        if any(roll < 1 or roll > DIE_SIDES for roll in self.rolls):
            raise ValueError(f"Every die must show a value between 1 and {DIE_SIDES}")
        if self.total != sum(self.rolls):
            raise ValueError("total must be the sum of the rolls")
        if self.final_result != self.total + self.modifier:
            raise ValueError("final_result must be total + modifier")
        if self.is_critical != (bool(self.rolls) and DIE_SIDES in self.rolls):
            raise ValueError("is_critical must be set exactly when a die shows a natural 20")
        if self.is_fumble != (bool(self.rolls) and all(r == 1 for r in self.rolls)):
            raise ValueError("is_fumble must be set exactly when every die shows a natural 1")
        return self

    @classmethod
    def from_rolls(cls, rolls: list[int] | tuple[int, ...], modifier: int) -> "DiceRollResult":
        """
        Evaluates a set of rolled dice.

        Args:
            rolls (list[int] | tuple[int, ...]): The rolled die faces.
            modifier (int): The flat modifier of the pool.

        Returns:
            DiceRollResult: The classified result.

        """
        total = sum(rolls)
        return cls(
            rolls=tuple(rolls),
            total=total,
            modifier=modifier,
            final_result=total + modifier,
        )

    def __str__(self) -> str:
        rolls = "+".join(map(str, self.rolls)) if self.rolls else "0"
        return f"{self.final_result} ({rolls}{format_modifier(self.modifier)})"


class DiceRoller:
    """Rolls dice pools using an injectable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Initializes the roller.

        Args:
            rng (random.Random | None):
                The random source to draw from. A fresh generator is created
                when omitted.

        """
        self.rng: random.Random = rng if rng is not None else random.Random()

    def roll_d20s(self, count: int) -> list[int]:
        """Draws ``count`` independent d20 results."""
        return [self.rng.randint(1, DIE_SIDES) for _ in range(max(0, count))]

    def roll_pool(self, pool: DicePool) -> DiceRollResult:
        """
        Rolls every die of a pool and applies its modifier.

        Args:
            pool (DicePool): The pool to roll.

        Returns:
            DiceRollResult: The classified result.

        """
        result = DiceRollResult.from_rolls(self.roll_d20s(pool.total_dice), pool.modifier)
        log_debug(
            f"Rolled {pool}: {result}",
            {
                "rolls": list(result.rolls),
                "critical": result.is_critical,
                "fumble": result.is_fumble,
            },
        )
        return result

    def roll(self, calculation: RollCalculation) -> DiceRollResult:
        """
        Rolls the pool of a calculation.

        Args:
            calculation (RollCalculation): The calculation to roll.

        Returns:
            DiceRollResult: The classified result.

        """
        return self.roll_pool(calculation.dice_pool)

    def roll_initiative(self, character: CharacterSnapshot) -> int:
        """
        Rolls initiative for a character.

        Initiative uses the Speed dice and modifier plus the character's
        initiative modifier.

        Args:
            character (CharacterSnapshot): The character rolling initiative.

        Returns:
            int: The initiative score.

        """
        speed = character.stat_value(Stat.SPD)
        rolls = self.roll_d20s(dice_for(speed))
        initiative = sum(rolls) + modifier_for(speed) + character.initiative_mod
        log_debug(
            f"{character.name} rolled initiative {initiative}",
            {"character": character.id, "rolls": rolls, "initiative_mod": character.initiative_mod},
        )
        return initiative


class RollRecord(BaseModel):
    """A calculation together with the result it produced."""

    model_config = ConfigDict(frozen=True)

    calculation: RollCalculation
    result: DiceRollResult


class RollHistory:
    """The most recent rolls, newest first. Older rolls are discarded."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit: int = limit
        self._records: deque[RollRecord] = deque(maxlen=limit)

    def record(self, calculation: RollCalculation, result: DiceRollResult) -> RollRecord:
        """Adds a roll to the front of the history."""
        entry = RollRecord(calculation=calculation, result=result)
        self._records.appendleft(entry)
        return entry

    def clear(self) -> None:
        self._records.clear()

    @property
    def latest(self) -> RollRecord | None:
        return self._records[0] if self._records else None

    def __iter__(self) -> Iterator[RollRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
