"""
Constants and enumerations for the combat engine.

Defines the fixed game rules (die size, caps), the ten character stats and
their categories, attack types, roll types and calculator modes used
throughout the engine.
"""

from enum import Enum

# Every die rolled by the engine is a twenty-sided die.
DIE_SIDES = 20

# Stat derivation caps.
MIN_STAT_MODIFIER = -4
MAX_STAT_MODIFIER = 10
MIN_STAT_DICE = 1
MAX_STAT_DICE = 6

# Each skill level grants one bonus die, up to this level.
MAX_SKILL_LEVEL = 10

# Number of rolls kept in the roll history by default.
DEFAULT_HISTORY_LIMIT = 10


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class StatCategory(NiceEnum):
    """Groups the stats for display."""

    PHYSICAL = "physical"
    MENTAL = "mental"
    MAGICAL = "magical"

    @property
    def color(self) -> str:
        """Returns the color string associated with this category."""
        return {
            StatCategory.PHYSICAL: "bold red",
            StatCategory.MENTAL: "bold blue",
            StatCategory.MAGICAL: "bold magenta",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies category color formatting to a message."""
        return f"[{self.color}]{message}[/]"

    @property
    def stats(self) -> list["Stat"]:
        """Returns the stats belonging to this category, in sheet order."""
        return [stat for stat in Stat if stat.category == self]


class Stat(NiceEnum):
    """The ten character stats, identified by their abbreviation."""

    MIT = "MIT"
    GRT = "GRT"
    SPD = "SPD"
    KNW = "KNW"
    FRS = "FRS"
    COR = "COR"
    DET = "DET"
    AST = "AST"
    MAG = "MAG"
    NAT = "NAT"

    @property
    def key(self) -> str:
        """Returns the key used for this stat in character records."""
        return _STAT_KEYS[self]

    @property
    def display_name(self) -> str:
        return self.key.capitalize()

    @property
    def category(self) -> StatCategory:
        """Returns the category this stat belongs to."""
        if self in (Stat.MIT, Stat.GRT, Stat.SPD):
            return StatCategory.PHYSICAL
        if self in (Stat.KNW, Stat.FRS, Stat.COR, Stat.DET):
            return StatCategory.MENTAL
        return StatCategory.MAGICAL

    @property
    def colored_name(self) -> str:
        return self.category.colorize(self.display_name)

    @classmethod
    def from_key(cls, key: str) -> "Stat":
        """
        Resolves a stat from either its record key or its abbreviation.

        Args:
            key (str):
                The record key (e.g. "might") or abbreviation (e.g. "MIT").

        Returns:
            Stat:
                The matching stat.

        Raises:
            ValueError: If the key matches no stat.

        """
        normalized = key.strip()
        if normalized.upper() in cls.__members__:
            return cls[normalized.upper()]
        for stat, stat_key in _STAT_KEYS.items():
            if stat_key == normalized.lower():
                return stat
        raise ValueError(f"Unknown stat: {key!r}")


_STAT_KEYS: dict[Stat, str] = {
    Stat.MIT: "might",
    Stat.GRT: "grit",
    Stat.SPD: "speed",
    Stat.KNW: "knowledge",
    Stat.FRS: "foresight",
    Stat.COR: "courage",
    Stat.DET: "determination",
    Stat.AST: "astrology",
    Stat.MAG: "magiks",
    Stat.NAT: "nature",
}


class AttackType(NiceEnum):
    """Defines the kinds of attack a combat roll can resolve."""

    PHYSICAL = "physical"
    RANGED = "ranged"
    MAGICAL = "magical"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this attack type."""
        return {
            AttackType.PHYSICAL: "⚔️",
            AttackType.RANGED: "🏹",
            AttackType.MAGICAL: "✨",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this attack type."""
        return {
            AttackType.PHYSICAL: "bold red",
            AttackType.RANGED: "bold green",
            AttackType.MAGICAL: "bold magenta",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies attack type color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class RollType(NiceEnum):
    """Defines what kind of roll a calculation describes."""

    STAT = "stat"
    ATTACK = "attack"
    DEFENSE = "defense"


class CalculatorMode(NiceEnum):
    """Defines how the dice calculator builds its pool."""

    SIMPLE = "simple"
    COMBAT = "combat"


class CombatTab(NiceEnum):
    """Selects between attack and defense formulas in combat mode."""

    ATTACK = "attack"
    DEFENSE = "defense"

    @property
    def is_defense(self) -> bool:
        return self == CombatTab.DEFENSE
