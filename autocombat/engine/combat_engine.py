"""Combat engine owning one battle's state and serializing every update."""

import logging
import threading
from typing import Optional, Sequence

from autocombat.config import DEFAULT_DEFEND_MODE
from autocombat.engine.action_resolver import ActionResolver, EnemyTurnResult
from autocombat.engine.bestiary import calculate_xp
from autocombat.engine.combat import CombatSystem
from autocombat.engine.dice import DiceRoller
from autocombat.engine.hud import HudNotifier, LoggingHudNotifier
from autocombat.engine.inventory_manager import InventoryManager
from autocombat.engine.tactics import TacticalDecisionProvider
from autocombat.models.character import CharacterSnapshot
from autocombat.models.combat import CombatLogEntry, CombatOutcome, CombatPhase, CombatState
from autocombat.models.combatant import Attack, Combatant
from autocombat.models.dice import AttackRoll

logger = logging.getLogger(__name__)


class CombatEngine:
    """Main state machine for a single encounter."""

    def __init__(
        self,
        dice: Optional[DiceRoller] = None,
        tactics: Optional[TacticalDecisionProvider] = None,
        hud: Optional[HudNotifier] = None,
        inventory: Optional[InventoryManager] = None,
        defend_mode: str = DEFAULT_DEFEND_MODE,
    ) -> None:
        """
        Initialize combat engine.

        Args:
            dice: Dice roller (a default-seeded one if None)
            tactics: Decision provider for enemy turns
            hud: HUD notifier (logs events if None)
            inventory: Player inventory for gear and buff bonuses
            defend_mode: "cosmetic" or "condition"
        """
        self._dice = dice or DiceRoller()
        self._hud = hud or LoggingHudNotifier()
        self._combat = CombatSystem(self._dice, hud=self._hud)
        self._resolver = ActionResolver(
            self._dice,
            self._combat,
            tactics=tactics,
            hud=self._hud,
            inventory=inventory,
            defend_mode=defend_mode,
        )
        self._state = self._combat.create_state()
        self._enemy_template_ids: list[str] = []
        self._lock = threading.RLock()

    @property
    def state(self) -> CombatState:
        """Deep copy of the current combat state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def inventory(self) -> Optional[InventoryManager]:
        return self._resolver.inventory

    @property
    def enemy_template_ids(self) -> list[str]:
        return list(self._enemy_template_ids)

    def set_tactics(self, tactics: Optional[TacticalDecisionProvider]) -> None:
        """Swap the decision provider (for hot-reconfiguration)."""
        with self._lock:
            self._resolver.set_tactics(tactics)

    def start_combat(self, player_character: CharacterSnapshot, enemy_template_ids: Sequence[str]) -> list[Combatant]:
        """
        Start combat against the given enemy templates.

        Raises:
            UnknownEnemyTemplateError: If any template id is not registered
        """
        with self._lock:
            combatants = self._combat.start_combat(self._state, player_character, enemy_template_ids)
            self._enemy_template_ids = list(enemy_template_ids)
            return [c.model_copy(deep=True) for c in combatants]

    def get_current_combatant(self) -> Optional[Combatant]:
        """Get a copy of the combatant whose turn it is."""
        with self._lock:
            current = self._combat.get_current_combatant(self._state)
            return current.model_copy(deep=True) if current else None

    def is_player_turn(self) -> bool:
        """Check if it is the player's turn."""
        with self._lock:
            return self._combat.is_player_turn(self._state)

    def player_attack(self, target_id: str, attack: Attack | str | None = None) -> Optional[AttackRoll]:
        """
        Player attacks a target.

        Args:
            target_id: Combatant to attack
            attack: Attack, or the name of one of the player's attacks (first attack if None)

        Returns:
            The attack roll, or None if nothing happened or it is not the player's turn
        """
        with self._lock:
            player = self._state.get_player()
            if player is None or not self._can_player_act():
                return None
            if attack is not None and not isinstance(attack, (Attack, str)):
                return None
            if attack is None or isinstance(attack, str):
                attack = next(
                    (a for a in player.attacks if attack is None or a.name.lower() == attack.lower()),
                    None,
                )
                if attack is None:
                    return None
            return self._resolver.player_attack(self._state, target_id, attack)

    def player_defend(self) -> Optional[CombatLogEntry]:
        """Player takes the defend action, if it is the player's turn."""
        with self._lock:
            if not self._can_player_act():
                return None
            return self._resolver.player_defend(self._state)

    def _can_player_act(self) -> bool:
        return self._combat.is_in_combat(self._state) and self._combat.is_player_turn(self._state)

    def execute_enemy_turn(self) -> Optional[EnemyTurnResult]:
        """
        Run the current enemy's turn.

        The decision provider is called without holding the lock; the decision
        is only applied if the same combat and turn are still current.

        Returns:
            What the enemy did, or None if nothing happened
        """
        with self._lock:
            request = self._resolver.prepare_enemy_turn(self._state)
        if request is None:
            return None

        logger.debug(f"Requesting decision for {request.combat_info.enemy_name} in combat {request.combat_id}")
        decision = self._resolver.request_decision(request)

        with self._lock:
            return self._resolver.apply_enemy_decision(self._state, request, decision)

    def next_turn(self) -> CombatPhase:
        """Advance the turn, returning the resulting phase."""
        with self._lock:
            return self._combat.next_turn(self._state)

    def end_combat(self) -> CombatOutcome:
        """
        End combat, discarding its state.

        Returns:
            Outcome with XP for every enemy the combat was started with, if won
        """
        with self._lock:
            rounds = self._state.round
            victory = self._combat.end_combat(self._state)
            xp = calculate_xp(self._enemy_template_ids) if victory else 0
            self._enemy_template_ids = []

        self._hud.on_combat_end(victory, xp)
        return CombatOutcome(victory=victory, xp_awarded=xp, rounds=rounds)

