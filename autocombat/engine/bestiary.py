"""Enemy template registry."""

import logging
import uuid
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from autocombat.config import DEFAULT_XP_PER_HP
from autocombat.models.combatant import (
    Ability,
    AbilityEffect,
    Attack,
    AttackRange,
    Combatant,
    CombatantRole,
    DamageType,
    EffectType,
)
from autocombat.models.stats import Attributes

logger = logging.getLogger(__name__)


class UnknownEnemyTemplateError(KeyError):
    """Raised when an enemy template id is not registered."""


def _scimitar() -> Attack:
    return Attack(
        name="Scimitar",
        attack_bonus=4,
        damage_dice="1d6",
        damage_bonus=2,
        damage_type=DamageType.SLASHING,
        range=AttackRange.MELEE,
    )


def _shortbow(attack_bonus: int, damage_bonus: int) -> Attack:
    return Attack(
        name="Shortbow",
        attack_bonus=attack_bonus,
        damage_dice="1d6",
        damage_bonus=damage_bonus,
        damage_type=DamageType.PIERCING,
        range=AttackRange.RANGED,
    )


# Template ids are placeholders; create_enemy assigns a fresh id to every instance
_TEMPLATES: dict[str, Combatant] = {
    "goblin": Combatant(
        id="template-goblin",
        name="Goblin",
        role=CombatantRole.ENEMY,
        hp=7,
        max_hp=7,
        armor_class=13,
        attributes=Attributes(strength=8, dexterity=14, constitution=10, intelligence=10, wisdom=8, charisma=8),
        attacks=[_scimitar(), _shortbow(4, 2)],
    ),
    "wolf": Combatant(
        id="template-wolf",
        name="Wolf",
        role=CombatantRole.ENEMY,
        hp=11,
        max_hp=11,
        armor_class=13,
        attributes=Attributes(strength=12, dexterity=15, constitution=12, intelligence=3, wisdom=12, charisma=6),
        attacks=[
            Attack(
                name="Bite",
                attack_bonus=4,
                damage_dice="2d4",
                damage_bonus=2,
                damage_type=DamageType.PIERCING,
                range=AttackRange.MELEE,
                description="On a hit the target must succeed on a DC 11 Strength save or be knocked prone.",
            )
        ],
        abilities=[
            Ability(
                name="Pack Tactics",
                description="Advantage on attacks while an ally is adjacent to the target.",
                effect=AbilityEffect(type=EffectType.BUFF),
            )
        ],
    ),
    "bandit": Combatant(
        id="template-bandit",
        name="Bandit",
        role=CombatantRole.ENEMY,
        hp=11,
        max_hp=11,
        armor_class=12,
        attributes=Attributes(strength=11, dexterity=12, constitution=12, intelligence=10, wisdom=10, charisma=10),
        attacks=[
            Attack(
                name="Shortsword",
                attack_bonus=3,
                damage_dice="1d6",
                damage_bonus=1,
                damage_type=DamageType.PIERCING,
                range=AttackRange.MELEE,
            ),
            Attack(
                name="Light Crossbow",
                attack_bonus=3,
                damage_dice="1d8",
                damage_bonus=1,
                damage_type=DamageType.PIERCING,
                range=AttackRange.RANGED,
            ),
        ],
    ),
    "skeleton": Combatant(
        id="template-skeleton",
        name="Skeleton",
        role=CombatantRole.ENEMY,
        hp=13,
        max_hp=13,
        armor_class=13,
        attributes=Attributes(strength=10, dexterity=14, constitution=15, intelligence=6, wisdom=8, charisma=5),
        attacks=[
            Attack(
                name="Shortsword",
                attack_bonus=4,
                damage_dice="1d6",
                damage_bonus=2,
                damage_type=DamageType.PIERCING,
                range=AttackRange.MELEE,
            ),
            _shortbow(4, 2),
        ],
    ),
    "orc": Combatant(
        id="template-orc",
        name="Orc",
        role=CombatantRole.ENEMY,
        hp=15,
        max_hp=15,
        armor_class=13,
        attributes=Attributes(strength=16, dexterity=12, constitution=16, intelligence=7, wisdom=11, charisma=10),
        attacks=[
            Attack(
                name="Greataxe",
                attack_bonus=5,
                damage_dice="1d12",
                damage_bonus=3,
                damage_type=DamageType.SLASHING,
                range=AttackRange.MELEE,
            ),
            Attack(
                name="Javelin",
                attack_bonus=5,
                damage_dice="1d6",
                damage_bonus=3,
                damage_type=DamageType.PIERCING,
                range=AttackRange.RANGED,
            ),
        ],
        abilities=[
            Ability(
                name="Aggressive",
                description="As a bonus action, moves up to its speed toward a hostile creature.",
                effect=AbilityEffect(type=EffectType.SPECIAL),
            )
        ],
    ),
}

ENEMY_TEMPLATES: Mapping[str, Combatant] = MappingProxyType(_TEMPLATES)


def get_template(template_id: str) -> Combatant:
    """
    Look up an enemy template.

    Raises:
        UnknownEnemyTemplateError: If the template is not registered
    """
    try:
        return ENEMY_TEMPLATES[template_id]
    except KeyError:
        raise UnknownEnemyTemplateError(template_id) from None


def create_enemy(template_id: str, custom_name: Optional[str] = None) -> Combatant:
    """
    Create a fresh enemy combatant from a template.

    Args:
        template_id: Registered template id (e.g., 'goblin')
        custom_name: Optional display name overriding the template's

    Returns:
        Deep copy of the template with a new unique id
    """
    template = get_template(template_id)
    enemy = template.model_copy(deep=True)
    enemy.id = f"enemy-{uuid.uuid4().hex[:12]}"
    enemy.name = custom_name or template.name
    enemy.initiative = 0
    enemy.is_active = True
    logger.debug(f"Created enemy {enemy.id} from template '{template_id}'")
    return enemy


def calculate_xp(template_ids: Iterable[str]) -> int:
    """XP reward for defeating the given enemies: max HP times the XP rate per template."""
    return sum(get_template(template_id).max_hp * DEFAULT_XP_PER_HP for template_id in template_ids)
