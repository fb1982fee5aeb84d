"""
Shared fixtures for the combat engine tests.
"""

import random

import pytest

from lostworlds.character import CharacterSnapshot
from lostworlds.combat.dice_roller import DiceRoller
from lostworlds.core.constants import Stat


class ScriptedRandom(random.Random):
    """A random source that returns predetermined die faces."""

    def __init__(self, faces: list[int]) -> None:
        super().__init__(0)
        self.faces = list(faces)

    def randint(self, a: int, b: int) -> int:
        face = self.faces.pop(0)
        assert a <= face <= b, f"scripted face {face} outside [{a}, {b}]"
        return face


@pytest.fixture
def hero():
    return CharacterSnapshot(
        id="kael",
        name="Kael",
        stats={
            Stat.MIT: 42,
            Stat.GRT: 30,
            Stat.SPD: 25,
            Stat.KNW: 15,
            Stat.FRS: 20,
            Stat.COR: 35,
            Stat.DET: 18,
            Stat.AST: 5,
            Stat.MAG: -10,
            Stat.NAT: 12,
        },
        skills={"master-lockpicker": 2, "bartender": 1, "codebreaker": 0},
        initiative_mod=2,
    )


@pytest.fixture
def weakling():
    """A character whose stats are all at rock bottom."""
    return CharacterSnapshot(
        id="wretch",
        name="Wretch",
        stats={stat: -40 for stat in Stat},
    )


@pytest.fixture
def skill_names():
    return {
        "master-lockpicker": "Master Lockpicker",
        "bartender": "Bartender",
        "codebreaker": "Codebreaker",
    }


@pytest.fixture
def scripted_roller():
    """Factory for a roller that rolls the given faces in order."""

    def make(*faces: int) -> DiceRoller:
        return DiceRoller(ScriptedRandom(list(faces)))

    return make
