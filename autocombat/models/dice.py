"""Dice roll record models."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Canonical dice notation: NdM, NdM+K or NdM-K
DICE_PATTERN = re.compile(r"^(\d+)d(\d+)([+-]\d+)?$", re.IGNORECASE)


class DiceNotation(BaseModel):
    """Parsed dice notation."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    count: int = Field(ge=1, description="Number of dice")
    sides: int = Field(ge=1, description="Sides per die")
    modifier: int = Field(default=0, description="Flat modifier added to the sum")


class DiceRoll(BaseModel):
    """Result of rolling a dice expression."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    notation: str = Field(description="Rolled expression (e.g., '2d6+3')")
    rolls: list[int] = Field(default_factory=list, description="Individual die results")
    modifier: int = Field(default=0, description="Modifier applied once to the sum")
    total: int = Field(description="Sum of the dice plus modifier")

    @property
    def natural(self) -> int:
        """Raw result of the first die, used for critical and fumble checks."""
        return self.rolls[0]


class AttackRoll(BaseModel):
    """Outcome of an attack roll against an armor class."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    attack_roll: DiceRoll = Field(description="The d20 roll including attack bonus")
    hit: bool = Field(description="Whether the attack hit")
    critical: bool = Field(default=False, description="Natural 20")
    fumble: bool = Field(default=False, description="Natural 1")
    damage_roll: Optional[DiceRoll] = Field(default=None, description="Damage dice, absent on a miss")
    total_damage: int = Field(default=0, ge=0, description="Damage dealt (0 on a miss)")
