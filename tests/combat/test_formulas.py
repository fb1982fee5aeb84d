"""
Tests for the combat formula table.
"""

import pytest

from lostworlds.combat.formulas import (
    COMBAT_FORMULAS,
    attack_formulas,
    defense_formulas,
    find_combat_formula,
    get_combat_formula,
)
from lostworlds.core.constants import AttackType, Stat
from lostworlds.core.error_handling import FormulaNotFoundError


@pytest.mark.parametrize(
    "attack_type, is_defense, primary, secondary, label",
    [
        (AttackType.PHYSICAL, False, Stat.SPD, Stat.MIT, "Physical Attack"),
        (AttackType.RANGED, False, Stat.SPD, Stat.KNW, "Ranged Attack"),
        (AttackType.MAGICAL, False, Stat.AST, Stat.MAG, "Magical Attack"),
        (AttackType.PHYSICAL, True, Stat.SPD, Stat.GRT, "Physical Defense"),
        (AttackType.RANGED, True, Stat.SPD, Stat.FRS, "Ranged Defense"),
        (AttackType.MAGICAL, True, Stat.DET, Stat.FRS, "Magical Defense"),
    ],
)
def test_formula_table(attack_type, is_defense, primary, secondary, label):
    formula = get_combat_formula(attack_type, is_defense)
    assert formula.primary_stat == primary
    assert formula.secondary_stat == secondary
    assert formula.label == label


def test_every_type_and_role_has_exactly_one_formula():
    for attack_type in AttackType:
        for is_defense in (False, True):
            matches = [
                f
                for f in COMBAT_FORMULAS
                if f.attack_type == attack_type and f.is_defense == is_defense
            ]
            assert len(matches) == 1


def test_missing_formula_is_reported():
    table = tuple(f for f in COMBAT_FORMULAS if f.attack_type != AttackType.RANGED)

    assert find_combat_formula(AttackType.RANGED, False, table) is None
    with pytest.raises(FormulaNotFoundError):
        get_combat_formula(AttackType.RANGED, False, table)


def test_formulas_by_role():
    assert [f.label for f in attack_formulas()] == [
        "Physical Attack",
        "Ranged Attack",
        "Magical Attack",
    ]
    assert all(f.is_defense for f in defense_formulas())
    assert len(defense_formulas()) == 3


def test_formula_string():
    formula = get_combat_formula(AttackType.PHYSICAL, False)
    assert str(formula) == "Physical Attack (Speed + Might)"
