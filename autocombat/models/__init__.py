"""Data models module for AutoCombat."""

# Attributes and characters
from autocombat.models.stats import Attributes
from autocombat.models.character import CharacterSnapshot

# Dice
from autocombat.models.dice import DICE_PATTERN, AttackRoll, DiceNotation, DiceRoll

# Combatants
from autocombat.models.combatant import (
    Ability,
    AbilityEffect,
    Attack,
    AttackRange,
    Combatant,
    CombatantRole,
    Condition,
    DamageType,
    EffectType,
    RechargePolicy,
)

# Combat state
from autocombat.models.combat import (
    CombatLogEntry,
    CombatOutcome,
    CombatPhase,
    CombatState,
    LogEntryType,
)

# Items and buffs
from autocombat.models.items import (
    ActiveBuffs,
    CombatBonuses,
    ConsumableResult,
    EquippedGear,
    EquipSlot,
    InventoryItem,
    Item,
    ItemRarity,
    ItemType,
)

# Tactics
from autocombat.models.tactics import CombatInfo, TacticalAction, TacticalDecision

__all__ = [
    # Attributes and characters
    "Attributes",
    "CharacterSnapshot",
    # Dice
    "DICE_PATTERN",
    "AttackRoll",
    "DiceNotation",
    "DiceRoll",
    # Combatants
    "Ability",
    "AbilityEffect",
    "Attack",
    "AttackRange",
    "Combatant",
    "CombatantRole",
    "Condition",
    "DamageType",
    "EffectType",
    "RechargePolicy",
    # Combat state
    "CombatLogEntry",
    "CombatOutcome",
    "CombatPhase",
    "CombatState",
    "LogEntryType",
    # Items and buffs
    "ActiveBuffs",
    "CombatBonuses",
    "ConsumableResult",
    "EquippedGear",
    "EquipSlot",
    "InventoryItem",
    "Item",
    "ItemRarity",
    "ItemType",
    # Tactics
    "CombatInfo",
    "TacticalAction",
    "TacticalDecision",
]
