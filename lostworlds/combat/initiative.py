"""
Initiative module for the combat engine.

Tracks the turn order of an encounter: the combatants sorted by initiative,
whose turn it is and which round is being played. The tracker only moves
between states through its transition methods, each of which returns a
read-only ``CombatState`` snapshot.
"""

import uuid

from catchery import log_debug, log_warning
from pydantic import BaseModel, ConfigDict, Field


class InitiativeEntry(BaseModel):
    """A combatant in the turn order."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique identifier of the entry.")
    name: str = Field(description="Display name of the combatant.")
    initiative: int = Field(description="Initiative score; higher acts first.")
    is_player: bool = Field(default=False, description="Whether a player controls it.")
    character_id: str | None = Field(
        default=None,
        description="The linked character, if any.",
    )
    notes: str | None = Field(default=None, description="Free-form notes.")
    is_current_turn: bool = Field(
        default=False,
        description="Whether it is this combatant's turn. Derived by the tracker.",
    )


class CombatState(BaseModel):
    """Read-only snapshot of an encounter."""

    model_config = ConfigDict(frozen=True)

    is_active: bool = Field(default=False, description="Whether combat is running.")
    round: int = Field(default=1, ge=1, description="The current round, from 1.")
    current_turn_index: int = Field(
        default=0,
        ge=0,
        description="Position of the combatant whose turn it is.",
    )
    initiative: tuple[InitiativeEntry, ...] = Field(
        default=(),
        description="Combatants by descending initiative.",
    )

    @property
    def current_entry(self) -> InitiativeEntry | None:
        """The combatant whose turn it is, or None for an empty list."""
        for entry in self.initiative:
            if entry.is_current_turn:
                return entry
        return None


class InitiativeTracker:
    """
    Turn-order state machine of an encounter.

    The tracker is either inactive (no encounter running) or active. Entries
    can be added and removed in both states. The list is kept sorted by
    descending initiative; equal scores keep their insertion order.

    Attributes:
        preserve_turn_identity (bool):
            When True, adding or removing entries keeps the turn on the same
            combatant (as long as it is still in the list). When False, the
            turn stays on the same position, so a re-sort can hand the turn
            to somebody else.

    """

    def __init__(self, preserve_turn_identity: bool = True) -> None:
        self.preserve_turn_identity: bool = preserve_turn_identity
        self._entries: list[InitiativeEntry] = []
        self._index: int = 0
        self._round: int = 1
        self._active: bool = False

    # ============================================================================
    # SNAPSHOTS
    # ============================================================================

    @property
    def state(self) -> CombatState:
        """Returns a snapshot of the encounter with current-turn flags set."""
        return CombatState(
            is_active=self._active,
            round=self._round,
            current_turn_index=self._index,
            initiative=tuple(
                entry.model_copy(update={"is_current_turn": i == self._index})
                for i, entry in enumerate(self._entries)
            ),
        )

    @property
    def current_entry(self) -> InitiativeEntry | None:
        return self.state.current_entry

    def __len__(self) -> int:
        return len(self._entries)

    # ============================================================================
    # ENCOUNTER LIFECYCLE
    # ============================================================================

    def start_combat(self) -> CombatState:
        """Starts the encounter at round 1 with the first combatant, keeping the list."""
        self._active = True
        self._round = 1
        self._index = 0
        log_debug("Combat started", {"combatants": len(self._entries)})
        return self.state

    def end_combat(self) -> CombatState:
        """Ends the encounter and clears the initiative list."""
        self._active = False
        self._round = 1
        self._index = 0
        self._entries = []
        log_debug("Combat ended", {})
        return self.state

    # ============================================================================
    # LIST MUTATION
    # ============================================================================

    def add_entry(self, entry: InitiativeEntry) -> CombatState:
        """
        Adds a combatant and re-sorts the list by descending initiative.

        Args:
            entry (InitiativeEntry):
                The combatant to add. Its is_current_turn flag is ignored.
                An existing entry with the same id is replaced; a blank id
                is replaced by a generated one.

        Returns:
            CombatState: The updated encounter.

        """
        if not entry.id.strip():
            entry = entry.model_copy(update={"id": str(uuid.uuid4())})
            log_debug(
                f"Initiative entry '{entry.name}' has no id, using '{entry.id}'",
                {"entry_id": entry.id, "name": entry.name},
            )
        current_id = self._current_id()

        if any(e.id == entry.id for e in self._entries):
            log_warning(
                f"Initiative entry '{entry.id}' already exists, replacing it",
                {"entry_id": entry.id, "name": entry.name},
            )
            self._entries = [e for e in self._entries if e.id != entry.id]

        self._entries.append(entry.model_copy(update={"is_current_turn": False}))
        # sorted() is stable, including with reverse=True.
        self._entries = sorted(self._entries, key=lambda e: e.initiative, reverse=True)

        if self.preserve_turn_identity and current_id is not None:
            self._index = self._position_of(current_id, default=self._index)
        self._clamp_index()

        log_debug(
            f"Added {entry.name} to initiative with {entry.initiative}",
            {"entry_id": entry.id, "position": self._position_of(entry.id)},
        )
        return self.state

    def remove_entry(self, entry_id: str) -> CombatState:
        """
        Removes a combatant from the list.

        If the turn pointer ends up past the end of the list it goes back to
        the first combatant. Unknown ids leave the encounter unchanged.

        Args:
            entry_id (str): The id of the entry to remove.

        Returns:
            CombatState: The updated encounter.

        """
        position = self._position_of(entry_id)
        if position is None:
            log_debug(f"No initiative entry '{entry_id}' to remove", {"entry_id": entry_id})
            return self.state

        del self._entries[position]

        # Keep the turn on the same combatant when somebody before it leaves.
        if self.preserve_turn_identity and position < self._index:
            self._index -= 1
        self._clamp_index()

        log_debug(
            f"Removed initiative entry '{entry_id}'",
            {"entry_id": entry_id, "current_turn_index": self._index},
        )
        return self.state

    # ============================================================================
    # TURN ORDER
    # ============================================================================

    def next_turn(self) -> CombatState:
        """Moves to the next combatant, starting a new round after the last one."""
        if not self._entries:
            return self.state

        self._index = (self._index + 1) % len(self._entries)
        if self._index == 0:
            self._round += 1
            log_debug(f"Round {self._round} begins", {"round": self._round})
        return self.state

    def previous_turn(self) -> CombatState:
        """Moves back to the previous combatant; the round never drops below 1."""
        if not self._entries:
            return self.state

        self._index -= 1
        if self._index < 0:
            self._index = len(self._entries) - 1
            if self._round > 1:
                self._round -= 1
        return self.state

    # ============================================================================
    # HELPERS
    # ============================================================================

    def _current_id(self) -> str | None:
        if 0 <= self._index < len(self._entries):
            return self._entries[self._index].id
        return None

    def _position_of(self, entry_id: str, default: int | None = None) -> int | None:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return default

    def _clamp_index(self) -> None:
        """Resets an out-of-range turn pointer to the first combatant."""
        if self._index >= len(self._entries) or self._index < 0:
            if self._entries:
                log_debug(
                    "Turn pointer out of range, back to the first combatant",
                    {"index": self._index, "combatants": len(self._entries)},
                )
            self._index = 0
