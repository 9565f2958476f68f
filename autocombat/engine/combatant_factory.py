"""Conversion of a character sheet into a player combatant."""

from autocombat.engine.dice import DiceRoller
from autocombat.models.character import CharacterSnapshot
from autocombat.models.combatant import Attack, AttackRange, Combatant, CombatantRole, DamageType

PLAYER_ID = "player"

# Original client class names are accepted as aliases
_CLASS_ALIASES = {
    "warrior": "warrior",
    "fighter": "warrior",
    "guerreiro": "warrior",
    "paladin": "paladin",
    "paladino": "paladin",
    "rogue": "rogue",
    "ladino": "rogue",
    "mage": "mage",
    "wizard": "mage",
    "mago": "mage",
}


def get_proficiency_bonus(level: int) -> int:
    """Proficiency bonus by character level: +2 at level 1, +1 every four levels."""
    return 2 + (max(level, 1) - 1) // 4


def _class_attacks(character_class: str, str_mod: int, dex_mod: int, int_mod: int, pb: int) -> list[Attack]:
    match _CLASS_ALIASES.get(character_class.strip().lower()):
        case "warrior" | "paladin":
            return [
                Attack(
                    name="Longsword",
                    attack_bonus=str_mod + pb,
                    damage_dice="1d8",
                    damage_bonus=str_mod,
                    damage_type=DamageType.SLASHING,
                    range=AttackRange.MELEE,
                )
            ]
        case "rogue":
            return [
                Attack(
                    name="Dagger",
                    attack_bonus=dex_mod + pb,
                    damage_dice="1d4",
                    damage_bonus=dex_mod,
                    damage_type=DamageType.PIERCING,
                    range=AttackRange.MELEE,
                ),
                Attack(
                    name="Shortbow",
                    attack_bonus=dex_mod + pb,
                    damage_dice="1d6",
                    damage_bonus=dex_mod,
                    damage_type=DamageType.PIERCING,
                    range=AttackRange.RANGED,
                ),
            ]
        case "mage":
            # Spell damage does not add the casting modifier
            return [
                Attack(
                    name="Fire Bolt",
                    attack_bonus=int_mod + pb,
                    damage_dice="1d10",
                    damage_bonus=0,
                    damage_type=DamageType.FIRE,
                    range=AttackRange.RANGED,
                )
            ]
        case _:
            return [
                Attack(
                    name="Unarmed Strike",
                    attack_bonus=str_mod + pb,
                    damage_dice="1d4",
                    damage_bonus=str_mod,
                    damage_type=DamageType.BLUDGEONING,
                    range=AttackRange.MELEE,
                )
            ]


def create_player_combatant(character: CharacterSnapshot) -> Combatant:
    """
    Create the player combatant from a character snapshot.

    Armor class is 10 + Dexterity modifier. Equipment armor bonuses are added
    at resolution time by the stat calculator, not baked in here.

    Args:
        character: Character sheet values

    Returns:
        Player combatant with class-based attacks
    """
    attributes = character.attributes
    pb = get_proficiency_bonus(character.level)
    str_mod = DiceRoller.get_attribute_modifier(attributes.strength)
    dex_mod = DiceRoller.get_attribute_modifier(attributes.dexterity)
    int_mod = DiceRoller.get_attribute_modifier(attributes.intelligence)

    return Combatant(
        id=PLAYER_ID,
        name=character.name,
        role=CombatantRole.PLAYER,
        hp=character.hp,
        max_hp=character.max_hp,
        armor_class=10 + dex_mod,
        attributes=attributes,
        attacks=_class_attacks(character.character_class, str_mod, dex_mod, int_mod, pb),
        is_active=character.hp > 0,
    )
