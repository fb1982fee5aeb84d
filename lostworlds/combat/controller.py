"""
Combat controller module for the combat engine.

The controller is the single owner of the dice calculator's selection state,
the last calculation and roll, the roll history and the initiative tracker.
Front ends call its methods and re-read its snapshots afterwards; nothing is
pushed to them.
"""

import uuid
from collections.abc import Iterable, Mapping

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.dice_pool import (
    RollCalculation,
    calculate_combat_roll,
    calculate_simple_roll,
)
from lostworlds.combat.dice_roller import DiceRoller, DiceRollResult, RollHistory
from lostworlds.combat.initiative import CombatState, InitiativeEntry, InitiativeTracker
from lostworlds.core.constants import (
    AttackType,
    CalculatorMode,
    CombatTab,
    Stat,
)
from lostworlds.core.settings import EngineSettings
from lostworlds.core.stats import skill_bonus_dice


class CalculatorState(BaseModel):
    """Everything the user has selected in the dice calculator."""

    model_config = ConfigDict(frozen=True)

    mode: CalculatorMode = CalculatorMode.SIMPLE
    combat_tab: CombatTab = CombatTab.ATTACK
    selected_character_id: str | None = None
    selected_stats: tuple[Stat, ...] = ()
    selected_attack_type: AttackType | None = None
    selected_skills: tuple[str, ...] = ()
    bonus_dice: int = Field(default=0, ge=0)
    bonus_modifier: int = 0


class SkillOption(BaseModel):
    """A skill the selected character can add to a roll."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    level: int
    bonus_dice: int
    selected: bool


def format_skill_name(skill_id: str) -> str:
    """Turns a skill id such as "master-lockpicker" into "Master Lockpicker"."""
    return " ".join(word.capitalize() for word in skill_id.split("-"))


class CombatController:
    """
    Owns the state of one dice calculator and one encounter.

    Attributes:
        roller (DiceRoller): The roller used for every roll.
        history (RollHistory): The most recent rolls, newest first.
        tracker (InitiativeTracker): The initiative of the encounter.

    """

    def __init__(
        self,
        roller: DiceRoller | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        """
        Initializes the controller.

        Args:
            roller (DiceRoller | None):
                The roller to use. A roller with a fresh random source is
                created when omitted.
            settings (EngineSettings | None):
                Engine settings; the defaults are used when omitted.

        """
        self.settings: EngineSettings = settings or EngineSettings()
        self.roller: DiceRoller = roller or DiceRoller()
        self.history: RollHistory = RollHistory(self.settings.history_limit)
        self.tracker: InitiativeTracker = InitiativeTracker(
            preserve_turn_identity=self.settings.preserve_turn_identity
        )

        self._state: CalculatorState = CalculatorState()
        self._character: CharacterSnapshot | None = None
        self._skill_names: dict[str, str] = {}
        self._calculation: RollCalculation | None = None
        self._last_roll: DiceRollResult | None = None

    # ============================================================================
    # SNAPSHOTS
    # ============================================================================

    @property
    def calculator_state(self) -> CalculatorState:
        return self._state

    @property
    def character(self) -> CharacterSnapshot | None:
        return self._character

    @property
    def calculation(self) -> RollCalculation | None:
        """The preview of the current selection, or None when it is not rollable."""
        return self._calculation

    @property
    def last_roll(self) -> DiceRollResult | None:
        return self._last_roll

    @property
    def combat_state(self) -> CombatState:
        return self.tracker.state

    # ============================================================================
    # CALCULATOR SELECTION
    # ============================================================================

    def set_skill_names(self, skill_names: Mapping[str, str]) -> None:
        """Sets the skill id to display name lookup used in calculations."""
        self._skill_names = dict(skill_names)
        self._recalculate()

    def select_character(self, character: CharacterSnapshot | None) -> None:
        """Selects the rolling character, clearing every other selection."""
        self._character = character
        self._state = CalculatorState(
            mode=self._state.mode,
            combat_tab=self._state.combat_tab,
            selected_character_id=character.id if character else None,
        )
        self._last_roll = None
        self._recalculate()

    def set_mode(self, mode: CalculatorMode) -> None:
        """Switches between simple and combat rolls, clearing stat and attack selections."""
        self._update(mode=mode, selected_stats=(), selected_attack_type=None)
        self._last_roll = None

    def set_combat_tab(self, tab: CombatTab) -> None:
        """Switches between attack and defense formulas."""
        self._update(combat_tab=tab, selected_attack_type=None)
        self._last_roll = None

    def toggle_stat(self, stat: Stat) -> None:
        """Adds a stat to the simple roll, or removes it if already selected."""
        stats = self._state.selected_stats
        if stat in stats:
            stats = tuple(s for s in stats if s != stat)
        else:
            stats = (*stats, stat)
        self._last_roll = None
        self._update(selected_stats=stats)

    def is_stat_selected(self, stat: Stat) -> bool:
        return stat in self._state.selected_stats

    def clear_stats(self) -> None:
        self._last_roll = None
        self._update(selected_stats=())

    def select_attack_type(self, attack_type: AttackType | None) -> None:
        self._last_roll = None
        self._update(selected_attack_type=attack_type)

    def toggle_skill(self, skill_id: str) -> None:
        """Adds a skill to the roll, or removes it if already selected."""
        skills = self._state.selected_skills
        if skill_id in skills:
            skills = tuple(s for s in skills if s != skill_id)
        else:
            skills = (*skills, skill_id)
        self._update(selected_skills=skills)

    def adjust_bonus_dice(self, delta: int) -> None:
        """Changes the bonus dice by ``delta``; they never drop below zero."""
        self._update(bonus_dice=max(0, self._state.bonus_dice + delta))

    def adjust_bonus_modifier(self, delta: int) -> None:
        self._update(bonus_modifier=self._state.bonus_modifier + delta)

    def skill_options(self) -> list[SkillOption]:
        """
        Lists the skills of the selected character that can join a roll.

        Returns:
            list[SkillOption]: Skills with a level above zero, by display name.

        """
        if self._character is None:
            return []
        options = [
            SkillOption(
                id=skill_id,
                name=self._skill_names.get(skill_id) or format_skill_name(skill_id),
                level=level,
                bonus_dice=skill_bonus_dice(level),
                selected=skill_id in self._state.selected_skills,
            )
            for skill_id, level in self._character.skills.items()
            if level and level > 0
        ]
        return sorted(options, key=lambda option: option.name.lower())

    def can_roll(self) -> bool:
        """Whether the current selection describes a complete roll."""
        if self._character is None:
            return False
        if self._state.mode == CalculatorMode.SIMPLE:
            return len(self._state.selected_stats) > 0
        return self._state.selected_attack_type is not None

    # ============================================================================
    # ROLLING
    # ============================================================================

    def roll(self) -> DiceRollResult | None:
        """
        Rolls the current calculation and records it in the history.

        Returns:
            DiceRollResult | None: The result, or None if nothing can be rolled.

        """
        calculation = self._calculation
        if calculation is None:
            return None
        result = self.roller.roll(calculation)
        self._last_roll = result
        self.history.record(calculation, result)
        return result

    def quick_roll(
        self,
        character: CharacterSnapshot,
        stats: Iterable[Stat],
        selected_skills: Iterable[str] = (),
    ) -> tuple[RollCalculation, DiceRollResult]:
        """Calculates and rolls a simple roll without touching the selection."""
        calculation = calculate_simple_roll(
            character, stats, selected_skills, self._skill_names
        )
        result = self.roller.roll(calculation)
        self._last_roll = result
        return calculation, result

    def quick_combat_roll(
        self,
        character: CharacterSnapshot,
        attack_type: AttackType,
        is_defense: bool,
        selected_skills: Iterable[str] = (),
    ) -> tuple[RollCalculation, DiceRollResult]:
        """Calculates and rolls a combat roll without touching the selection."""
        calculation = calculate_combat_roll(
            character, attack_type, is_defense, selected_skills, self._skill_names
        )
        result = self.roller.roll(calculation)
        self._last_roll = result
        return calculation, result

    def clear_history(self) -> None:
        self.history.clear()

    def reset(self) -> None:
        """Restores the calculator to its defaults; the encounter is left alone."""
        self._state = CalculatorState()
        self._character = None
        self._calculation = None
        self._last_roll = None

    # ============================================================================
    # INITIATIVE
    # ============================================================================

    def start_combat(self) -> CombatState:
        return self.tracker.start_combat()

    def end_combat(self) -> CombatState:
        return self.tracker.end_combat()

    def next_turn(self) -> CombatState:
        return self.tracker.next_turn()

    def previous_turn(self) -> CombatState:
        return self.tracker.previous_turn()

    def add_to_initiative(
        self,
        name: str,
        initiative: int,
        is_player: bool = False,
        character_id: str | None = None,
        notes: str | None = None,
        entry_id: str | None = None,
    ) -> CombatState:
        """
        Adds a combatant to the encounter.

        Args:
            name (str): Display name of the combatant.
            initiative (int): Its initiative score.
            is_player (bool): Whether a player controls it.
            character_id (str | None): The linked character, if any.
            notes (str | None): Free-form notes.
            entry_id (str | None): Id of the entry; generated when omitted.

        Returns:
            CombatState: The updated encounter.

        """
        entry = InitiativeEntry(
            id=entry_id or str(uuid.uuid4()),
            name=name.strip(),
            initiative=initiative,
            is_player=is_player,
            character_id=character_id,
            notes=notes,
        )
        return self.tracker.add_entry(entry)

    def remove_from_initiative(self, entry_id: str) -> CombatState:
        return self.tracker.remove_entry(entry_id)

    def roll_initiative_for(self, character: CharacterSnapshot) -> int:
        """Rolls initiative for a character without adding it to the encounter."""
        return self.roller.roll_initiative(character)

    # ============================================================================
    # HELPERS
    # ============================================================================

    def _update(self, **changes: object) -> None:
        self._state = self._state.model_copy(update=changes)
        self._recalculate()

    def _recalculate(self) -> None:
        """Rebuilds the preview from scratch for the current selection."""
        if not self.can_roll():
            self._calculation = None
            return

        character = self._character
        state = self._state
        assert character is not None

        if state.mode == CalculatorMode.SIMPLE:
            self._calculation = calculate_simple_roll(
                character,
                state.selected_stats,
                state.selected_skills,
                self._skill_names,
                state.bonus_dice,
                state.bonus_modifier,
            )
        else:
            assert state.selected_attack_type is not None
            self._calculation = calculate_combat_roll(
                character,
                state.selected_attack_type,
                state.combat_tab.is_defense,
                state.selected_skills,
                self._skill_names,
                state.bonus_dice,
                state.bonus_modifier,
            )
        log_debug(
            f"Preview updated: {self._calculation.description}",
            {"pool": str(self._calculation.dice_pool)},
        )
