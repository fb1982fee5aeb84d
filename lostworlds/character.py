"""
Character snapshot module for the combat engine.

The engine never reads stored character records directly. It works on a
``CharacterSnapshot``: the character's identity, its ten current stat values,
its skill levels and its initiative modifier. ``character_from_record`` is
the one place where stored records (and their legacy field-name variants)
are mapped onto that shape.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from catchery import log_error, log_warning
from pydantic import BaseModel, ConfigDict, Field, field_validator

from lostworlds.core.constants import Stat, StatCategory
from lostworlds.core.error_handling import CharacterRecordError


class CharacterSnapshot(BaseModel):
    """Read-only view of the character data a roll depends on."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Unique identifier of the character.",
    )
    name: str = Field(
        description="Display name of the character.",
    )
    stats: Mapping[Stat, int] = Field(
        default_factory=dict,
        description="Current value of each of the ten stats.",
    )
    skills: Mapping[str, int] = Field(
        default_factory=dict,
        description="Skill levels (0-10), keyed by skill identifier.",
    )
    initiative_mod: int = Field(
        default=0,
        description="Flat bonus added to initiative rolls.",
    )

    @field_validator("stats", mode="after")
    @classmethod
    def _fill_missing_stats(cls, stats: Mapping[Stat, int]) -> Mapping[Stat, int]:
        """Every stat is present; the ones missing from the input are 0."""
        return MappingProxyType({stat: stats.get(stat, 0) for stat in Stat})

    @field_validator("skills", mode="after")
    @classmethod
    def _freeze_skills(cls, skills: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(skills))

    def stat_value(self, stat: Stat) -> int:
        """
        Returns the current value of a stat.

        Args:
            stat (Stat): The stat to read.

        Returns:
            int: The stat value.

        """
        return self.stats[stat]

    def skill_level(self, skill_id: str) -> int | None:
        """Returns the level of a skill, or None if the character lacks it."""
        return self.skills.get(skill_id)


# ==============================================================================
# RECORD ADAPTER
# ==============================================================================


def _as_int(value: Any, field: str, record_id: str) -> int:
    """Reads an integer field of a record, accepting {"value": n} blocks."""
    if isinstance(value, Mapping):
        value = value.get("value", 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        log_error(
            f"Field '{field}' of character '{record_id}' is not a number: {value!r}",
            {"character": record_id, "field": field, "value": value},
        )
        raise CharacterRecordError(
            f"Field '{field}' of character '{record_id}' is not a number: {value!r}"
        )
    return int(value)


def _read_stats(raw_stats: Any, record_id: str) -> dict[Stat, int]:
    """
    Flattens the stat block of a record.

    Stored records group stats by category (``stats.physical.might.value``).
    Older records store a flat mapping keyed by stat name or abbreviation,
    with either plain integers or ``{"value": n}`` blocks.
    """
    if not raw_stats:
        return {}
    if not isinstance(raw_stats, Mapping):
        raise CharacterRecordError(
            f"Stats of character '{record_id}' must be a mapping, got {type(raw_stats).__name__}"
        )

    # Expand the category groups into a single flat mapping.
    flat: dict[str, Any] = {}
    categories = {category.value for category in StatCategory}
    for key, value in raw_stats.items():
        if key in categories and isinstance(value, Mapping):
            flat.update(value)
        else:
            flat[key] = value

    stats: dict[Stat, int] = {}
    for key, value in flat.items():
        try:
            stat = Stat.from_key(key)
        except ValueError:
            log_warning(
                f"Ignoring unknown stat '{key}' of character '{record_id}'",
                {"character": record_id, "stat": key},
            )
            continue
        stats[stat] = _as_int(value, f"stats.{key}", record_id)
    return stats


def _read_skills(raw_skills: Any, record_id: str) -> dict[str, int]:
    """Reads the skill levels of a record, dropping empty entries."""
    if not raw_skills:
        return {}
    if not isinstance(raw_skills, Mapping):
        raise CharacterRecordError(
            f"Skills of character '{record_id}' must be a mapping, got {type(raw_skills).__name__}"
        )
    return {
        str(skill_id): _as_int(level, f"skills.{skill_id}", record_id)
        for skill_id, level in raw_skills.items()
        if level is not None
    }


def _read_initiative_mod(record: Mapping[str, Any], record_id: str) -> int:
    """Finds the initiative modifier under any of its known field names."""
    combat = record.get("combat")
    if isinstance(combat, Mapping):
        for key in ("initiativeMod", "initiative_mod"):
            if combat.get(key) is not None:
                return _as_int(combat[key], f"combat.{key}", record_id)
    for key in ("initiativeMod", "initiative_mod"):
        if record.get(key) is not None:
            return _as_int(record[key], key, record_id)
    return 0


def character_from_record(record: Mapping[str, Any]) -> CharacterSnapshot:
    """
    Creates a CharacterSnapshot from a stored character record.

    Args:
        record (Mapping[str, Any]):
            The character record, either in the current stored shape or in
            one of the legacy variants.

    Returns:
        CharacterSnapshot:
            The snapshot the engine works on.

    Raises:
        CharacterRecordError: If the record lacks a name or holds
            non-numeric stat, skill or initiative values.

    """
    if not isinstance(record, Mapping):
        raise CharacterRecordError(
            f"Character record must be a mapping, got {type(record).__name__}"
        )

    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        log_error("Character record has no name", {"record_keys": list(record.keys())})
        raise CharacterRecordError("Character record has no name")

    record_id = record.get("id") or record.get("characterId") or name
    record_id = str(record_id)

    return CharacterSnapshot(
        id=record_id,
        name=name.strip(),
        stats=_read_stats(record.get("stats"), record_id),
        skills=_read_skills(record.get("skills"), record_id),
        initiative_mod=_read_initiative_mod(record, record_id),
    )


def load_characters(path: Path) -> dict[str, CharacterSnapshot]:
    """
    Loads character snapshots from a JSON file.

    Args:
        path (Path):
            A JSON file holding either a single character record or a list
            of records.

    Returns:
        dict[str, CharacterSnapshot]:
            The snapshots, keyed by character id, in file order.

    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    records = data if isinstance(data, list) else [data]
    characters: dict[str, CharacterSnapshot] = {}
    for record in records:
        character = character_from_record(record)
        if character.id in characters:
            log_warning(
                f"Duplicate character id '{character.id}' in {path}, keeping the last one",
                {"path": str(path), "character": character.id},
            )
        characters[character.id] = character
    return characters
