"""Tactical decision models exchanged with the decision provider."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TacticalAction(str, Enum):
    """Actions an enemy can choose."""

    ATTACK = "attack"
    DEFEND = "defend"
    ABILITY = "ability"
    MOVE = "move"
    FLEE = "flee"


class CombatInfo(BaseModel):
    """Situation summary handed to the decision provider."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    enemy_name: str = Field(description="Acting enemy name")
    enemy_hp: int = Field(ge=0, description="Acting enemy current hit points")
    enemy_max_hp: int = Field(ge=1, description="Acting enemy maximum hit points")
    enemy_personality: str = Field(description="Coarse personality tag ('aggressive', 'desperate')")
    player_positions: list[str] = Field(default_factory=list, description="Player descriptions")


class TacticalDecision(BaseModel):
    """Action chosen for an enemy turn."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    action: TacticalAction = Field(description="Chosen action")
    target: Optional[str] = Field(default=None, description="Target name")
    ability: Optional[str] = Field(default=None, description="Ability name, if applicable")
    description: Optional[str] = Field(default=None, description="Short narrative description")
