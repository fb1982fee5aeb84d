"""
Tests for character snapshots and the record adapter.
"""

import json

import pytest
from pydantic import ValidationError

from lostworlds.character import CharacterSnapshot, character_from_record, load_characters
from lostworlds.core.constants import Stat
from lostworlds.core.error_handling import CharacterRecordError


@pytest.fixture
def stored_record():
    """A record in the shape character files are stored in."""
    return {
        "id": "mira",
        "name": "Mira",
        "level": 4,
        "stats": {
            "physical": {
                "might": {"bonus": 0, "value": 8},
                "grit": {"bonus": 0, "value": 14},
                "speed": {"bonus": 0, "value": 31},
            },
            "mental": {
                "knowledge": {"bonus": 3, "value": 48},
                "foresight": {"bonus": 0, "value": 40},
                "courage": {"bonus": 0, "value": 10},
                "determination": {"bonus": 0, "value": 27},
            },
            "magical": {
                "astrology": {"bonus": 5, "value": 61},
                "magiks": {"bonus": 0, "value": 44},
                "nature": {"bonus": 0, "value": 3},
            },
        },
        "combat": {"actionPoints": 6, "baseMovement": 30, "initiativeMod": 1},
        "skills": {"lore-master": 3},
    }


def test_snapshot_fills_missing_stats_with_zero():
    snapshot = CharacterSnapshot(id="a", name="A", stats={Stat.SPD: 30})
    assert snapshot.stat_value(Stat.SPD) == 30
    assert snapshot.stat_value(Stat.NAT) == 0
    assert set(snapshot.stats) == set(Stat)


def test_snapshot_is_frozen(hero):
    with pytest.raises(ValidationError):
        hero.name = "Someone else"


def test_snapshot_mappings_are_read_only(hero):
    with pytest.raises(TypeError):
        hero.stats[Stat.MIT] = 1
    with pytest.raises(TypeError):
        hero.skills["bartender"] = 10

    assert hero.stat_value(Stat.MIT) == 42
    assert hero.skill_level("bartender") == 1


def test_adapter_reads_stored_shape(stored_record):
    snapshot = character_from_record(stored_record)

    assert snapshot.id == "mira"
    assert snapshot.name == "Mira"
    assert snapshot.stat_value(Stat.SPD) == 31
    assert snapshot.stat_value(Stat.KNW) == 48
    assert snapshot.stat_value(Stat.AST) == 61
    assert snapshot.skills == {"lore-master": 3}
    assert snapshot.initiative_mod == 1


def test_adapter_reads_legacy_flat_shape():
    snapshot = character_from_record(
        {
            "characterId": "old-1",
            "name": " Old Timer ",
            "stats": {"MIT": 20, "speed": 45, "Grit": {"value": -5}},
            "initiative_mod": -1,
        }
    )

    assert snapshot.id == "old-1"
    assert snapshot.name == "Old Timer"
    assert snapshot.stat_value(Stat.MIT) == 20
    assert snapshot.stat_value(Stat.SPD) == 45
    assert snapshot.stat_value(Stat.GRT) == -5
    assert snapshot.initiative_mod == -1
    assert snapshot.skills == {}


def test_adapter_ignores_unknown_stats():
    snapshot = character_from_record({"name": "X", "stats": {"luck": 99, "might": 10}})
    assert snapshot.id == "X"
    assert snapshot.stat_value(Stat.MIT) == 10


def test_adapter_rejects_missing_name():
    with pytest.raises(CharacterRecordError):
        character_from_record({"id": "nameless", "stats": {}})


def test_adapter_rejects_non_numeric_stat():
    with pytest.raises(CharacterRecordError):
        character_from_record({"name": "X", "stats": {"might": "strong"}})


def test_load_characters_from_list(tmp_path, stored_record):
    path = tmp_path / "characters.json"
    path.write_text(json.dumps([stored_record, {"id": "b", "name": "B"}]))

    characters = load_characters(path)

    assert list(characters) == ["mira", "b"]
    assert characters["b"].stat_value(Stat.MIT) == 0


def test_load_characters_from_single_record(tmp_path, stored_record):
    path = tmp_path / "mira.json"
    path.write_text(json.dumps(stored_record))

    assert list(load_characters(path)) == ["mira"]
