"""
Tests for the combat controller.
"""

import pytest

from lostworlds.combat.controller import CombatController, format_skill_name
from lostworlds.core.constants import AttackType, CalculatorMode, CombatTab, Stat
from lostworlds.core.settings import EngineSettings


@pytest.fixture
def controller(hero, scripted_roller):
    controller = CombatController(scripted_roller(*([10] * 50)))
    controller.select_character(hero)
    return controller


def test_nothing_to_roll_without_selection():
    controller = CombatController()

    assert not controller.can_roll()
    assert controller.calculation is None
    assert controller.roll() is None
    assert len(controller.history) == 0


def test_preview_follows_stat_selection(controller):
    assert controller.calculation is None

    controller.toggle_stat(Stat.MIT)
    assert controller.calculation.dice_pool.total_dice == 3

    controller.toggle_stat(Stat.SPD)
    assert controller.is_stat_selected(Stat.SPD)
    assert controller.calculation.dice_pool.total_dice == 5

    controller.toggle_stat(Stat.MIT)
    assert not controller.is_stat_selected(Stat.MIT)
    assert controller.calculation.dice_pool.total_dice == 2

    controller.clear_stats()
    assert controller.calculation is None


def test_bonus_dice_never_negative(controller):
    controller.toggle_stat(Stat.KNW)
    controller.adjust_bonus_dice(2)
    controller.adjust_bonus_dice(-5)

    assert controller.calculator_state.bonus_dice == 0
    assert controller.calculation.dice_pool.bonus_dice == 0


def test_bonus_modifier_flows_into_preview(controller):
    controller.toggle_stat(Stat.KNW)
    controller.adjust_bonus_modifier(3)
    controller.adjust_bonus_modifier(-1)

    assert controller.calculation.dice_pool.modifier == 1 + 2


def test_combat_mode_uses_formula(controller):
    controller.toggle_stat(Stat.NAT)
    controller.set_mode(CalculatorMode.COMBAT)

    assert controller.calculator_state.selected_stats == ()
    assert not controller.can_roll()

    controller.select_attack_type(AttackType.PHYSICAL)
    assert controller.calculation.description == "Kael - Physical Attack"

    controller.set_combat_tab(CombatTab.DEFENSE)
    assert controller.calculation is None

    controller.select_attack_type(AttackType.PHYSICAL)
    assert controller.calculation.description == "Kael - Physical Defense"
    # Speed 25 + Grit 30.
    assert controller.calculation.dice_pool.total_dice == 4
    assert controller.calculation.dice_pool.modifier == 5


def test_roll_records_history(controller):
    controller.toggle_stat(Stat.MIT)

    result = controller.roll()

    assert result.rolls == (10, 10, 10)
    assert result.final_result == 34
    assert controller.last_roll == result
    assert controller.history.latest.result == result
    assert controller.history.latest.calculation == controller.calculation


def test_history_limit_comes_from_settings(hero, scripted_roller):
    controller = CombatController(
        scripted_roller(*([5] * 20)), EngineSettings(history_limit=2)
    )
    controller.select_character(hero)
    controller.toggle_stat(Stat.KNW)
    for _ in range(4):
        controller.roll()

    assert len(controller.history) == 2
    controller.clear_history()
    assert len(controller.history) == 0


def test_changing_selection_clears_last_roll(controller):
    controller.toggle_stat(Stat.MIT)
    controller.roll()

    controller.toggle_stat(Stat.SPD)

    assert controller.last_roll is None
    assert len(controller.history) == 1


def test_selecting_character_resets_selection(controller, weakling):
    controller.toggle_stat(Stat.MIT)
    controller.toggle_skill("bartender")

    controller.select_character(weakling)

    state = controller.calculator_state
    assert state.selected_character_id == "wretch"
    assert state.selected_stats == ()
    assert state.selected_skills == ()
    assert controller.calculation is None


def test_skill_options(controller, skill_names):
    controller.toggle_skill("bartender")
    options = controller.skill_options()

    assert [o.id for o in options] == ["bartender", "master-lockpicker"]
    assert options[0].selected
    assert options[1].name == "Master Lockpicker"

    controller.set_skill_names({"master-lockpicker": "Lockpicking"})
    assert [o.name for o in controller.skill_options()] == ["Bartender", "Lockpicking"]


def test_skills_add_dice_to_preview(controller):
    controller.toggle_stat(Stat.MIT)
    controller.toggle_skill("master-lockpicker")
    assert controller.calculation.dice_pool.skill_dice == 2

    controller.toggle_skill("master-lockpicker")
    assert controller.calculation.dice_pool.skill_dice == 0


def test_quick_roll_leaves_selection_alone(controller, weakling):
    calculation, result = controller.quick_combat_roll(weakling, AttackType.RANGED, True)

    assert calculation.character_id == "wretch"
    assert result.final_result == 10 + 10 - 8
    assert controller.calculator_state.selected_character_id == "kael"
    assert len(controller.history) == 0


def test_reset_keeps_encounter(controller):
    controller.add_to_initiative("Goblin", 12)
    controller.toggle_stat(Stat.MIT)

    controller.reset()

    assert controller.character is None
    assert controller.calculation is None
    assert len(controller.combat_state.initiative) == 1


def test_initiative_flow(controller, hero):
    controller.add_to_initiative("Goblin", 12, entry_id="goblin")
    score = controller.roll_initiative_for(hero)
    controller.add_to_initiative(hero.name, score, is_player=True, character_id=hero.id)

    state = controller.start_combat()
    assert state.is_active
    assert state.current_entry.name == "Kael"
    assert state.current_entry.character_id == "kael"
    assert score == 10 + 10 + 2 + 2

    assert controller.next_turn().current_entry.id == "goblin"
    assert controller.previous_turn().current_entry.name == "Kael"

    state = controller.remove_from_initiative("goblin")
    assert len(state.initiative) == 1

    assert controller.end_combat().initiative == ()


def test_positional_turns_from_settings():
    controller = CombatController(settings=EngineSettings(preserve_turn_identity=False))
    assert controller.tracker.preserve_turn_identity is False


def test_format_skill_name():
    assert format_skill_name("master-lockpicker") == "Master Lockpicker"
    assert format_skill_name("bartender") == "Bartender"


def test_skill_options_cap_bonus_dice(hero):
    prodigy = hero.model_copy(update={"skills": {"lore-master": 15}})
    controller = CombatController()
    controller.select_character(prodigy)

    option = controller.skill_options()[0]
    assert option.level == 15
    assert option.bonus_dice == 10

    controller.toggle_stat(Stat.KNW)
    controller.toggle_skill("lore-master")
    assert controller.calculation.dice_pool.skill_dice == option.bonus_dice
