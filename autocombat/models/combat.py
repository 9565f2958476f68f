"""Combat state and log models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autocombat.models.combatant import Combatant, CombatantRole


class CombatPhase(str, Enum):
    """Lifecycle stage of a battle."""

    INITIATIVE = "initiative"
    COMBAT = "combat"
    VICTORY = "victory"
    DEFEAT = "defeat"


class LogEntryType(str, Enum):
    """Category of a combat log entry."""

    ATTACK = "attack"
    ABILITY = "ability"
    MOVEMENT = "movement"
    CONDITION = "condition"
    SYSTEM = "system"


class CombatLogEntry(BaseModel):
    """Immutable combat log record."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    entry_id: str = Field(description="Unique entry identifier")
    round: int = Field(ge=0, description="Round the entry belongs to")
    actor_id: str = Field(description="Acting combatant id, or 'system'")
    actor_name: str = Field(description="Acting combatant display name")
    action: str = Field(description="What the actor did")
    result: str = Field(description="What came of it")
    timestamp: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    entry_type: LogEntryType = Field(description="Entry category")


class CombatState(BaseModel):
    """Single source of truth for an in-progress battle."""

    model_config = ConfigDict(validate_assignment=True)

    combat_id: Optional[str] = Field(default=None, description="Identifier of the current encounter")
    is_active: bool = Field(default=False, description="Whether combat is running")
    round: int = Field(default=0, ge=0, description="Current round, starts at 1")
    current_turn_index: int = Field(default=0, ge=0, description="Index into turn_order")
    combatants: list[Combatant] = Field(default_factory=list, description="Roster, never shrinks mid-combat")
    turn_order: list[str] = Field(default_factory=list, description="Combatant ids by initiative")
    log: list[CombatLogEntry] = Field(default_factory=list, description="Append-only combat log")
    phase: CombatPhase = Field(default=CombatPhase.INITIATIVE, description="Lifecycle phase")

    def get_combatant(self, combatant_id: str) -> Optional[Combatant]:
        """Find a combatant by id."""
        return next((c for c in self.combatants if c.id == combatant_id), None)

    def get_player(self) -> Optional[Combatant]:
        """Get the player combatant, if any."""
        return next((c for c in self.combatants if c.role == CombatantRole.PLAYER), None)

    def active_enemies(self) -> list[Combatant]:
        """Enemies still able to fight."""
        return [c for c in self.combatants if c.role == CombatantRole.ENEMY and c.is_active]


class CombatOutcome(BaseModel):
    """Terminal result reported when combat ends."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    victory: bool = Field(description="Whether the player won")
    xp_awarded: int = Field(default=0, ge=0, description="Experience earned")
    rounds: int = Field(default=0, ge=0, description="Rounds fought")
