"""Inventory management and potion buff tracking."""

import logging
import uuid
from typing import Optional

from autocombat.config import DEFAULT_BUFF_DURATION, DEFAULT_STARTING_GOLD
from autocombat.models.items import (
    ActiveBuffs,
    CombatBonuses,
    ConsumableResult,
    EquippedGear,
    EquipSlot,
    InventoryItem,
    Item,
    ItemType,
)

logger = logging.getLogger(__name__)

UNARMED_DAMAGE_DICE = "1d4"

_SLOT_BY_TYPE = {
    ItemType.WEAPON: EquipSlot.MAIN_HAND,
    ItemType.ARMOR: EquipSlot.CHEST,
    ItemType.ACCESSORY: EquipSlot.ACCESSORY,
}

STARTER_ITEMS: tuple[Item, ...] = (
    Item(
        item_id="starter-sword",
        name="Shortsword",
        description="A light, versatile blade.",
        item_type=ItemType.WEAPON,
        damage_dice="1d6",
        value=10,
        weight=2,
    ),
    Item(
        item_id="starter-armor",
        name="Leather Armor",
        description="Basic, light protection.",
        item_type=ItemType.ARMOR,
        armor_bonus=2,
        value=10,
        weight=5,
    ),
    Item(
        item_id="starter-potion",
        name="Minor Healing Potion",
        description="Restores a small amount of health.",
        item_type=ItemType.POTION,
        hp_restore=10,
        value=5,
        weight=0.5,
    ),
)


def calculate_combat_bonuses(equipped: EquippedGear) -> CombatBonuses:
    """
    Calculate combat bonuses from equipped items.

    Args:
        equipped: Currently equipped gear

    Returns:
        Weapon dice and damage bonus, armor bonus from armor and accessory
    """
    damage_dice = UNARMED_DAMAGE_DICE
    damage_bonus = 0
    armor_bonus = 0

    if equipped.weapon:
        damage_dice = equipped.weapon.item.damage_dice or UNARMED_DAMAGE_DICE
        damage_bonus += equipped.weapon.item.damage_bonus

    if equipped.armor:
        armor_bonus += equipped.armor.item.armor_bonus

    if equipped.accessory:
        armor_bonus += equipped.accessory.item.armor_bonus
        damage_bonus += equipped.accessory.item.damage_bonus

    return CombatBonuses(damage_dice=damage_dice, damage_bonus=damage_bonus, armor_bonus=armor_bonus)


class BuffTracker:
    """Tracks the single active potion buff and its remaining turns."""

    def __init__(self, buffs: Optional[ActiveBuffs] = None) -> None:
        self._buffs = buffs or ActiveBuffs()

    @property
    def buffs(self) -> ActiveBuffs:
        return self._buffs

    def apply(self, item: Item, turns: int = DEFAULT_BUFF_DURATION) -> ActiveBuffs:
        """Replace the current buff with the item's temporary attributes."""
        self._buffs = ActiveBuffs(
            temp_strength=item.temp_strength,
            temp_dexterity=item.temp_dexterity,
            temp_constitution=item.temp_constitution,
            turns_remaining=turns,
        )
        logger.info(f"Buff from '{item.name}' active for {turns} turns")
        return self._buffs

    def decrement(self) -> ActiveBuffs:
        """Count down one resolved player action; the buff clears at zero."""
        if self._buffs.turns_remaining <= 1:
            if self._buffs.turns_remaining == 1:
                logger.info("Buff expired")
            self._buffs = ActiveBuffs()
        else:
            self._buffs = self._buffs.model_copy(
                update={"turns_remaining": self._buffs.turns_remaining - 1}
            )
        return self._buffs


class InventoryManager:
    """Handles the character's items, equipment, gold and potion buffs."""

    def __init__(
        self,
        items: Optional[list[InventoryItem]] = None,
        gold: int = DEFAULT_STARTING_GOLD,
        buff_tracker: Optional[BuffTracker] = None,
    ) -> None:
        """
        Initialize inventory.

        Args:
            items: Initial inventory entries
            gold: Starting gold
            buff_tracker: Buff tracker (a new one if None)
        """
        self._items: list[InventoryItem] = list(items or [])
        self._gold = gold
        self._buffs = buff_tracker or BuffTracker()

    @classmethod
    def with_starter_items(cls) -> "InventoryManager":
        """Create an inventory holding the starter kit, weapon and armor equipped."""
        manager = cls()
        for item in STARTER_ITEMS:
            manager.add_item(item, quantity=2 if item.is_consumable else 1)
        for entry in list(manager.items):
            if entry.item.item_type in _SLOT_BY_TYPE:
                manager.equip_item(entry.inventory_id)
        return manager

    @property
    def items(self) -> list[InventoryItem]:
        return list(self._items)

    @property
    def gold(self) -> int:
        return self._gold

    @property
    def active_buffs(self) -> ActiveBuffs:
        return self._buffs.buffs

    def get_entry(self, inventory_id: str) -> Optional[InventoryItem]:
        """Find an inventory entry by id."""
        return next((entry for entry in self._items if entry.inventory_id == inventory_id), None)

    def _replace(self, entry: InventoryItem, new_entry: Optional[InventoryItem]) -> None:
        index = self._items.index(entry)
        if new_entry is None:
            del self._items[index]
        else:
            self._items[index] = new_entry

    @property
    def equipped(self) -> EquippedGear:
        """Currently equipped gear by slot."""
        by_slot = {entry.slot: entry for entry in self._items if entry.is_equipped}
        return EquippedGear(
            weapon=by_slot.get(EquipSlot.MAIN_HAND),
            armor=by_slot.get(EquipSlot.CHEST),
            accessory=by_slot.get(EquipSlot.ACCESSORY),
        )

    def add_item(self, item: Item, quantity: int = 1) -> InventoryItem:
        """
        Add an item, stacking onto an unequipped entry of the same item.

        Args:
            item: Item to add
            quantity: How many

        Returns:
            The resulting inventory entry
        """
        existing = next(
            (entry for entry in self._items if entry.item.item_id == item.item_id and not entry.is_equipped),
            None,
        )
        if existing:
            updated = existing.model_copy(update={"quantity": existing.quantity + quantity})
            self._replace(existing, updated)
            return updated

        entry = InventoryItem(inventory_id=f"inv-{uuid.uuid4().hex[:12]}", item=item, quantity=quantity)
        self._items.append(entry)
        return entry

    def remove_item(self, inventory_id: str, quantity: int = 1) -> None:
        """Remove a quantity of an entry, dropping it when the stack runs out."""
        entry = self.get_entry(inventory_id)
        if entry is None:
            raise ValueError(f"Inventory entry {inventory_id} not found")

        if entry.quantity <= quantity:
            self._replace(entry, None)
        else:
            self._replace(entry, entry.model_copy(update={"quantity": entry.quantity - quantity}))

    def equip_item(self, inventory_id: str) -> InventoryItem:
        """
        Equip a weapon, armor or accessory, unequipping whatever held the slot.

        Args:
            inventory_id: Entry to equip

        Returns:
            The equipped entry
        """
        entry = self.get_entry(inventory_id)
        if entry is None:
            raise ValueError(f"Inventory entry {inventory_id} not found")

        slot = _SLOT_BY_TYPE.get(entry.item.item_type)
        if slot is None:
            raise ValueError(f"Item {entry.item.item_id} cannot be equipped")

        for other in list(self._items):
            if other.is_equipped and other.slot == slot and other is not entry:
                self._replace(other, other.model_copy(update={"is_equipped": False, "slot": None}))

        equipped = entry.model_copy(update={"is_equipped": True, "slot": slot})
        self._replace(entry, equipped)
        logger.debug(f"Equipped {entry.item.name} in {slot.value}")
        return equipped

    def unequip_item(self, inventory_id: str) -> None:
        """Unequip an entry."""
        entry = self.get_entry(inventory_id)
        if entry is None:
            raise ValueError(f"Inventory entry {inventory_id} not found")
        self._replace(entry, entry.model_copy(update={"is_equipped": False, "slot": None}))

    def use_consumable(self, inventory_id: str) -> Optional[ConsumableResult]:
        """
        Use a potion or consumable.

        Consumes one from the stack and starts a timed buff if the item grants
        temporary attributes.

        Args:
            inventory_id: Entry to use

        Returns:
            What the consumable did, or None if the entry is not a consumable
        """
        entry = self.get_entry(inventory_id)
        if entry is None or not entry.item.is_consumable:
            return None

        self.remove_item(inventory_id)

        buffs = ActiveBuffs()
        if entry.item.grants_buff:
            buffs = self._buffs.apply(entry.item)

        return ConsumableResult(hp_restored=entry.item.hp_restore, buffs_applied=buffs)

    def get_potions(self) -> list[InventoryItem]:
        """All potions and consumables."""
        return [entry for entry in self._items if entry.item.is_consumable]

    def get_combat_bonuses(self) -> CombatBonuses:
        """Gear bonuses plus the active buff's temporary attributes."""
        buffs = self._buffs.buffs
        return calculate_combat_bonuses(self.equipped).model_copy(
            update={
                "temp_strength": buffs.temp_strength,
                "temp_dexterity": buffs.temp_dexterity,
                "temp_constitution": buffs.temp_constitution,
            }
        )

    def decrement_buff_turns(self) -> ActiveBuffs:
        """Count down the active buff after a resolved player action."""
        return self._buffs.decrement()

    def add_gold(self, amount: int) -> int:
        """Add gold and return the new total."""
        self._gold += amount
        return self._gold

    def spend_gold(self, amount: int) -> bool:
        """Spend gold if there is enough."""
        if self._gold < amount:
            return False
        self._gold -= amount
        return True
