"""Item, inventory and buff models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemType(str, Enum):
    """Item categories."""

    WEAPON = "weapon"
    ARMOR = "armor"
    POTION = "potion"
    ACCESSORY = "accessory"
    CONSUMABLE = "consumable"


class ItemRarity(str, Enum):
    """Item rarity."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class EquipSlot(str, Enum):
    """Equipment slots that contribute combat bonuses."""

    MAIN_HAND = "main_hand"
    CHEST = "chest"
    ACCESSORY = "accessory"


class Item(BaseModel):
    """Complete item definition."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    item_id: str = Field(description="Unique item identifier")
    name: str = Field(description="Item name")
    description: Optional[str] = Field(default=None, description="Item description")
    item_type: ItemType = Field(description="Item category")
    rarity: ItemRarity = Field(default=ItemRarity.COMMON, description="Item rarity")

    # Combat properties
    damage_dice: Optional[str] = Field(default=None, description="Weapon damage dice")
    damage_bonus: int = Field(default=0, description="Bonus damage when equipped")
    armor_bonus: int = Field(default=0, description="Armor class bonus when equipped")

    # Consumable properties
    hp_restore: int = Field(default=0, ge=0, description="Hit points restored when used")
    temp_strength: int = Field(default=0, description="Temporary strength when used")
    temp_dexterity: int = Field(default=0, description="Temporary dexterity when used")
    temp_constitution: int = Field(default=0, description="Temporary constitution when used")

    value: int = Field(default=0, ge=0, description="Value in gold")
    weight: float = Field(default=0.0, ge=0, description="Weight")

    @property
    def is_consumable(self) -> bool:
        return self.item_type in (ItemType.POTION, ItemType.CONSUMABLE)

    @property
    def grants_buff(self) -> bool:
        return bool(self.temp_strength or self.temp_dexterity or self.temp_constitution)


class InventoryItem(BaseModel):
    """A stack of one item owned by the character."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    inventory_id: str = Field(description="Unique inventory entry identifier")
    item: Item = Field(description="The item")
    quantity: int = Field(default=1, ge=1, description="Stack size")
    is_equipped: bool = Field(default=False, description="Whether the item is equipped")
    slot: Optional[EquipSlot] = Field(default=None, description="Slot if equipped")


class EquippedGear(BaseModel):
    """Currently equipped items."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    weapon: Optional[InventoryItem] = Field(default=None, description="Main hand weapon")
    armor: Optional[InventoryItem] = Field(default=None, description="Chest armor")
    accessory: Optional[InventoryItem] = Field(default=None, description="Accessory")


class ActiveBuffs(BaseModel):
    """Temporary attribute deltas from a consumable."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    temp_strength: int = Field(default=0, description="Temporary strength")
    temp_dexterity: int = Field(default=0, description="Temporary dexterity")
    temp_constitution: int = Field(default=0, description="Temporary constitution")
    turns_remaining: int = Field(default=0, ge=0, description="Player actions left")

    @property
    def is_active(self) -> bool:
        return self.turns_remaining > 0


class CombatBonuses(BaseModel):
    """Bonuses the action resolver folds into rolls."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    attack_bonus: int = Field(default=0, description="Flat attack bonus")
    damage_bonus: int = Field(default=0, description="Flat damage bonus")
    damage_dice: str = Field(default="1d4", description="Equipped weapon dice (unarmed 1d4)")
    armor_bonus: int = Field(default=0, description="Armor class bonus")
    temp_strength: int = Field(default=0, description="Temporary strength")
    temp_dexterity: int = Field(default=0, description="Temporary dexterity")
    temp_constitution: int = Field(default=0, description="Temporary constitution")


class ConsumableResult(BaseModel):
    """What using a consumable did."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    hp_restored: int = Field(default=0, ge=0, description="Hit points restored")
    buffs_applied: ActiveBuffs = Field(default_factory=ActiveBuffs, description="Buffs granted")
