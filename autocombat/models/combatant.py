"""Combatant, attack and ability models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autocombat.models.dice import DICE_PATTERN
from autocombat.models.stats import Attributes


class CombatantRole(str, Enum):
    """Which side a combatant fights on."""

    PLAYER = "player"
    ENEMY = "enemy"
    ALLY = "ally"


class DamageType(str, Enum):
    """Damage type tag (no mechanical effect)."""

    SLASHING = "slashing"
    PIERCING = "piercing"
    BLUDGEONING = "bludgeoning"
    FIRE = "fire"
    COLD = "cold"
    LIGHTNING = "lightning"
    POISON = "poison"
    MAGIC = "magic"


class AttackRange(str, Enum):
    """Range class of an attack."""

    MELEE = "melee"
    RANGED = "ranged"


class Attack(BaseModel):
    """Attack definition attached to a combatant."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    name: str = Field(description="Attack name")
    attack_bonus: int = Field(default=0, description="To-hit bonus")
    damage_dice: str = Field(default="1d6", description="Damage dice expression (e.g., '1d8')")
    damage_bonus: int = Field(default=0, description="Flat damage bonus")
    damage_type: DamageType = Field(default=DamageType.BLUDGEONING, description="Damage type tag")
    range: AttackRange = Field(default=AttackRange.MELEE, description="Melee or ranged")
    description: Optional[str] = Field(default=None, description="Flavour text")

    @field_validator("damage_dice")
    @classmethod
    def check_damage_dice(cls, value: str) -> str:
        """Reject damage expressions that are not canonical dice notation."""
        value = value.strip()
        if not DICE_PATTERN.match(value):
            raise ValueError(f"Invalid dice notation: {value}")
        return value


class RechargePolicy(str, Enum):
    """When an ability regains its uses."""

    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"
    ROUND = "round"


class EffectType(str, Enum):
    """Kind of ability effect."""

    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"
    SPECIAL = "special"


class Condition(BaseModel):
    """Named status effect on a combatant."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    name: str = Field(description="Condition name")
    duration: int = Field(default=-1, ge=-1, description="Rounds remaining, -1 for permanent")
    effect: str = Field(default="", description="Effect description")
    armor_class_bonus: int = Field(default=0, description="Armor class change while active")

    @property
    def is_permanent(self) -> bool:
        return self.duration == -1


class AbilityEffect(BaseModel):
    """What an ability does when used."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    type: EffectType = Field(description="Effect type")
    value: Optional[str] = Field(default=None, description="Dice notation or fixed value")
    condition: Optional[Condition] = Field(default=None, description="Condition applied by the effect")
    duration: Optional[int] = Field(default=None, description="Duration in rounds")


class Ability(BaseModel):
    """Special ability, passive or with limited uses."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    name: str = Field(description="Ability name")
    description: str = Field(default="", description="Ability description")
    uses: int = Field(default=-1, ge=-1, description="Uses left, -1 for unlimited")
    max_uses: int = Field(default=-1, ge=-1, description="Maximum uses, -1 for unlimited")
    recharge_on: Optional[RechargePolicy] = Field(default=None, description="Recharge policy")
    effect: AbilityEffect = Field(description="Effect of the ability")

    @property
    def is_unlimited(self) -> bool:
        return self.max_uses == -1


class Combatant(BaseModel):
    """One fighter in a battle. Mutated in place during combat."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(description="Unique combatant identifier")
    name: str = Field(description="Display name")
    role: CombatantRole = Field(description="Player, enemy or ally")
    hp: int = Field(ge=0, description="Current hit points")
    max_hp: int = Field(ge=1, description="Maximum hit points")
    armor_class: int = Field(description="Base armor class")
    initiative: int = Field(default=0, description="Initiative score for this combat")
    attributes: Attributes = Field(default_factory=Attributes, description="Base attributes")
    attacks: list[Attack] = Field(default_factory=list, description="Available attacks in order")
    abilities: list[Ability] = Field(default_factory=list, description="Abilities")
    conditions: list[Condition] = Field(default_factory=list, description="Active conditions")
    is_active: bool = Field(default=True, description="False once defeated or fled")

    def has_condition(self, name: str) -> bool:
        """Check whether a condition with the given name is active."""
        return any(condition.name == name for condition in self.conditions)
