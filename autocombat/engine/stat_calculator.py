"""Effective combat values (base + gear + buffs + conditions)."""

from typing import Iterable, Optional

from autocombat.models.combatant import Attack, Combatant, CombatantRole, Condition
from autocombat.models.items import CombatBonuses


class StatCalculator:
    """Folds inventory and buff bonuses into attack and defence values."""

    @staticmethod
    def attack_bonus(attack: Attack, bonuses: Optional[CombatBonuses] = None) -> int:
        """
        Effective to-hit bonus for an attack.

        Adds half the temporary Strength (rounded down) while a buff is active.

        Args:
            attack: Attack being made
            bonuses: Player's combat bonuses, None for non-player attackers

        Returns:
            Attack bonus to roll with
        """
        if bonuses is None:
            return attack.attack_bonus
        return attack.attack_bonus + bonuses.attack_bonus + bonuses.temp_strength // 2

    @staticmethod
    def damage_bonus(attack: Attack, bonuses: Optional[CombatBonuses] = None) -> int:
        """Effective flat damage bonus for an attack."""
        if bonuses is None:
            return attack.damage_bonus
        return attack.damage_bonus + bonuses.damage_bonus

    @staticmethod
    def condition_armor_bonus(conditions: Iterable[Condition]) -> int:
        """Sum of armor class changes from active conditions."""
        return sum(condition.armor_class_bonus for condition in conditions)

    @staticmethod
    def armor_class(combatant: Combatant, bonuses: Optional[CombatBonuses] = None) -> int:
        """
        Effective armor class of a defender.

        Gear armor bonuses only apply to the player.

        Args:
            combatant: Defender
            bonuses: Player's combat bonuses

        Returns:
            Armor class an attack must meet or beat
        """
        armor_class = combatant.armor_class + StatCalculator.condition_armor_bonus(combatant.conditions)
        if bonuses is not None and combatant.role == CombatantRole.PLAYER:
            armor_class += bonuses.armor_bonus
        return armor_class
