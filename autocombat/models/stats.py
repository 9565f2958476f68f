"""Combatant attribute models."""

from pydantic import BaseModel, ConfigDict, Field


class Attributes(BaseModel):
    """The six base attribute scores."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    strength: int = Field(default=10, ge=1, description="Strength score")
    dexterity: int = Field(default=10, ge=1, description="Dexterity score")
    constitution: int = Field(default=10, ge=1, description="Constitution score")
    intelligence: int = Field(default=10, ge=1, description="Intelligence score")
    wisdom: int = Field(default=10, ge=1, description="Wisdom score")
    charisma: int = Field(default=10, ge=1, description="Charisma score")
