"""Player character snapshot model."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from autocombat.models.stats import Attributes


class CharacterSnapshot(BaseModel):
    """Character sheet values needed to build a player combatant."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    name: str = Field(description="Character name")
    character_class: str = Field(description="Character class (e.g., 'Warrior', 'Mage')")
    level: int = Field(default=1, ge=1, description="Character level")
    hp: int = Field(ge=0, description="Current hit points")
    max_hp: int = Field(ge=1, description="Maximum hit points")
    attributes: Attributes = Field(default_factory=Attributes, description="Base attributes")

    @model_validator(mode="after")
    def check_hp(self) -> "CharacterSnapshot":
        """Current hit points cannot exceed the maximum."""
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) exceeds max_hp ({self.max_hp})")
        return self
