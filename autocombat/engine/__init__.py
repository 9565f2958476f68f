"""Combat engine package."""

from autocombat.engine.action_resolver import ActionResolver, EnemyTurnRequest, EnemyTurnResult
from autocombat.engine.bestiary import (
    ENEMY_TEMPLATES,
    UnknownEnemyTemplateError,
    calculate_xp,
    create_enemy,
)
from autocombat.engine.combat import CombatStateError, CombatSystem
from autocombat.engine.combat_engine import CombatEngine
from autocombat.engine.combatant_factory import create_player_combatant, get_proficiency_bonus
from autocombat.engine.dice import DiceParseError, DiceRoller, parse_dice
from autocombat.engine.hud import HudNotifier, LoggingHudNotifier
from autocombat.engine.inventory_manager import BuffTracker, InventoryManager, calculate_combat_bonuses
from autocombat.engine.stat_calculator import StatCalculator
from autocombat.engine.tactics import TacticalDecisionProvider, parse_tactical_decision

__all__ = [
    "ActionResolver",
    "EnemyTurnRequest",
    "EnemyTurnResult",
    "ENEMY_TEMPLATES",
    "UnknownEnemyTemplateError",
    "calculate_xp",
    "create_enemy",
    "CombatStateError",
    "CombatSystem",
    "CombatEngine",
    "create_player_combatant",
    "get_proficiency_bonus",
    "DiceParseError",
    "DiceRoller",
    "parse_dice",
    "HudNotifier",
    "LoggingHudNotifier",
    "BuffTracker",
    "InventoryManager",
    "calculate_combat_bonuses",
    "StatCalculator",
    "TacticalDecisionProvider",
    "parse_tactical_decision",
]
