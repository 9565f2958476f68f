"""Resolution of player and enemy actions against combat state."""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from autocombat.config import (
    DEFAULT_DEFEND_ARMOR_BONUS,
    DEFAULT_DEFEND_MODE,
    DEFAULT_DESPERATE_HP_THRESHOLD,
    DEFAULT_FLEE_HP_THRESHOLD,
    DEFAULT_TACTICS_HISTORY_LIMIT,
)
from autocombat.engine.combat import CombatSystem
from autocombat.engine.dice import DiceRoller
from autocombat.engine.hud import HudNotifier
from autocombat.engine.inventory_manager import InventoryManager
from autocombat.engine.stat_calculator import StatCalculator
from autocombat.engine.tactics import (
    TacticalDecisionProvider,
    default_attack_decision,
    parse_tactical_decision,
)
from autocombat.models.combat import CombatLogEntry, CombatState, LogEntryType
from autocombat.models.combatant import Attack, Combatant, CombatantRole, Condition
from autocombat.models.dice import AttackRoll
from autocombat.models.items import CombatBonuses
from autocombat.models.tactics import CombatInfo, TacticalAction, TacticalDecision

logger = logging.getLogger(__name__)

DEFEND_MODES = ("cosmetic", "condition")
DEFENDING_CONDITION = "Defending"


class EnemyTurnRequest(BaseModel):
    """Snapshot of what the decision provider needs for one enemy turn."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    combat_id: str = Field(description="Combat the request belongs to")
    enemy_id: str = Field(description="Acting enemy id")
    player_name: str = Field(description="Player name, used as the default target")
    log_size: int = Field(ge=0, description="Log length when the request was made")
    combat_info: CombatInfo = Field(description="Situation summary")
    history: list[dict[str, str]] = Field(default_factory=list, description="Recent log as chat messages")


class EnemyTurnResult(BaseModel):
    """What an enemy turn did."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    enemy_id: str = Field(description="Acting enemy id")
    decision: TacticalDecision = Field(description="Decision that was carried out")
    attack_roll: Optional[AttackRoll] = Field(default=None, description="Attack roll, if the enemy attacked")
    log_entry: Optional[CombatLogEntry] = Field(default=None, description="Log entry written for the turn")


class ActionResolver:
    """Applies attacks, defends and enemy decisions to combatant state."""

    def __init__(
        self,
        dice: DiceRoller,
        combat: CombatSystem,
        tactics: Optional[TacticalDecisionProvider] = None,
        hud: Optional[HudNotifier] = None,
        inventory: Optional[InventoryManager] = None,
        defend_mode: str = DEFAULT_DEFEND_MODE,
        history_limit: int = DEFAULT_TACTICS_HISTORY_LIMIT,
    ) -> None:
        """
        Initialize action resolver.

        Args:
            dice: Dice roller for attack rolls
            combat: Combat system used for logging
            tactics: Decision provider for enemy turns (default attack if None)
            hud: HUD notifier told about player damage
            inventory: Player inventory supplying gear and buff bonuses
            defend_mode: "cosmetic" logs the defend bonus only, "condition" applies it
            history_limit: Number of recent log entries sent to the provider
        """
        if defend_mode not in DEFEND_MODES:
            raise ValueError(f"Invalid defend mode: {defend_mode!r} (expected one of {DEFEND_MODES})")
        self._dice = dice
        self._combat = combat
        self._tactics = tactics
        self._hud = hud
        self._inventory = inventory
        self._defend_mode = defend_mode
        self._history_limit = history_limit

    @property
    def inventory(self) -> Optional[InventoryManager]:
        return self._inventory

    def set_tactics(self, tactics: Optional[TacticalDecisionProvider]) -> None:
        """Swap the decision provider."""
        self._tactics = tactics

    def _player_bonuses(self) -> Optional[CombatBonuses]:
        return self._inventory.get_combat_bonuses() if self._inventory else None

    def _after_player_action(self) -> None:
        if self._inventory:
            self._inventory.decrement_buff_turns()

    def effective_armor_class(self, combatant: Combatant) -> int:
        """Armor class including conditions and, for the player, equipped armor."""
        bonuses = self._player_bonuses() if combatant.role == CombatantRole.PLAYER else None
        return StatCalculator.armor_class(combatant, bonuses)

    def apply_damage(self, state: CombatState, target_id: str, damage: int) -> Optional[int]:
        """
        Apply damage to a combatant.

        Hit points are clamped at 0 and the combatant is deactivated when they
        reach it. The HUD is told whenever the player is damaged.

        Args:
            state: Combat state
            target_id: Combatant to damage
            damage: Damage dealt

        Returns:
            The target's new hit points, or None if the target does not exist
        """
        target = state.get_combatant(target_id)
        if target is None:
            return None

        new_hp = max(0, target.hp - damage)
        target.hp = new_hp
        if new_hp == 0:
            target.is_active = False
            logger.info(f"{target.name} ({target.id}) is down")

        if target.role == CombatantRole.PLAYER and self._hud:
            self._hud.on_player_damaged(damage, new_hp)

        return new_hp

    def _describe_attack(self, result: AttackRoll, armor_class: int) -> str:
        roll = self._dice.format_roll(result.attack_roll)
        if result.fumble:
            return "Critical miss! The attack fails miserably."
        if result.critical:
            return f"CRITICAL! {roll} vs AC {armor_class}. Deals {result.total_damage} damage!"
        if result.hit:
            return f"Hit! {roll} vs AC {armor_class}. Deals {result.total_damage} damage."
        return f"Miss! {roll} vs AC {armor_class}."

    def _resolve_attack(
        self,
        state: CombatState,
        attacker: Combatant,
        target: Combatant,
        attack: Attack,
        attacker_bonuses: Optional[CombatBonuses],
    ) -> tuple[AttackRoll, CombatLogEntry]:
        armor_class = self.effective_armor_class(target)
        result = self._dice.make_attack_roll(
            StatCalculator.attack_bonus(attack, attacker_bonuses),
            armor_class,
            attack.damage_dice,
            StatCalculator.damage_bonus(attack, attacker_bonuses),
        )

        if result.hit:
            self.apply_damage(state, target.id, result.total_damage)

        entry = self._combat.add_log_entry(
            state,
            attacker.id,
            attacker.name,
            f"uses {attack.name} against {target.name}",
            self._describe_attack(result, armor_class),
            LogEntryType.ATTACK,
        )
        return result, entry

    def player_attack(self, state: CombatState, target_id: str, attack: Attack) -> Optional[AttackRoll]:
        """
        Resolve a player attack.

        Args:
            state: Combat state
            target_id: Combatant to attack
            attack: Attack to use; gear and buff bonuses are added on top

        Returns:
            The attack roll, or None if the target is missing or already down
        """
        player = state.get_player()
        target = state.get_combatant(target_id)
        if player is None or target is None or not target.is_active or target.id == player.id:
            logger.debug(f"Ignoring attack on invalid target {target_id}")
            return None

        result, _ = self._resolve_attack(state, player, target, attack, self._player_bonuses())
        self._after_player_action()
        return result

    def _defend(self, state: CombatState, combatant: Combatant, description: Optional[str] = None) -> CombatLogEntry:
        if self._defend_mode == "condition":
            combatant.conditions = [c for c in combatant.conditions if c.name != DEFENDING_CONDITION] + [
                Condition(
                    name=DEFENDING_CONDITION,
                    duration=1,
                    effect=f"+{DEFAULT_DEFEND_ARMOR_BONUS} AC until next turn",
                    armor_class_bonus=DEFAULT_DEFEND_ARMOR_BONUS,
                )
            ]

        return self._combat.add_log_entry(
            state,
            combatant.id,
            combatant.name,
            "takes a defensive stance",
            description or f"Defensive stance: +{DEFAULT_DEFEND_ARMOR_BONUS} AC until next turn.",
            LogEntryType.ABILITY,
        )

    def player_defend(self, state: CombatState) -> Optional[CombatLogEntry]:
        """Player takes the defend action."""
        player = state.get_player()
        if player is None:
            return None

        entry = self._defend(state, player)
        self._after_player_action()
        return entry

    def prepare_enemy_turn(self, state: CombatState) -> Optional[EnemyTurnRequest]:
        """
        Snapshot the context for the current enemy's decision.

        Returns:
            The request, or None if it is not an active enemy's turn or the player is down
        """
        current = self._combat.get_current_combatant(state)
        if current is None or current.role != CombatantRole.ENEMY or not current.is_active:
            return None

        player = state.get_player()
        if player is None or not player.is_active:
            return None

        personality = "desperate" if current.hp < current.max_hp * DEFAULT_DESPERATE_HP_THRESHOLD else "aggressive"
        recent = state.log[-self._history_limit:] if self._history_limit > 0 else []
        history = [
            {"role": "assistant", "content": f"{entry.actor_name} {entry.action}: {entry.result}"}
            for entry in recent
        ]

        return EnemyTurnRequest(
            combat_id=state.combat_id,
            enemy_id=current.id,
            player_name=player.name,
            log_size=len(state.log),
            combat_info=CombatInfo(
                enemy_name=current.name,
                enemy_hp=current.hp,
                enemy_max_hp=current.max_hp,
                enemy_personality=personality,
                player_positions=[f"{player.name} (HP: {player.hp}/{player.max_hp})"],
            ),
            history=history,
        )

    def request_decision(self, request: EnemyTurnRequest) -> TacticalDecision:
        """
        Ask the provider for a decision. Never raises.

        Any provider error or unusable answer becomes a basic attack on the player.
        """
        if self._tactics is None:
            return default_attack_decision(request.player_name)

        try:
            raw = self._tactics.decide(request.combat_info, request.history)
        except Exception as e:
            logger.warning(f"Tactical decision for {request.combat_info.enemy_name} failed: {e}. Defaulting to attack.")
            return default_attack_decision(request.player_name)

        decision = parse_tactical_decision(raw)
        if decision is None:
            logger.warning(f"Unusable tactical decision for {request.combat_info.enemy_name}. Defaulting to attack.")
            return default_attack_decision(request.player_name)
        return decision

    def apply_enemy_decision(
        self, state: CombatState, request: EnemyTurnRequest, decision: TacticalDecision
    ) -> Optional[EnemyTurnResult]:
        """
        Carry out an enemy decision.

        The decision is dropped if the combat, the current turn or the log changed
        since the request was prepared.

        Args:
            state: Combat state
            request: Request the decision answers
            decision: Decision to carry out

        Returns:
            What the enemy did, or None if the decision is stale
        """
        enemy = self._combat.get_current_combatant(state)
        player = state.get_player()
        if (
            state.combat_id != request.combat_id
            or len(state.log) != request.log_size
            or enemy is None
            or enemy.id != request.enemy_id
            or not enemy.is_active
            or player is None
            or not player.is_active
        ):
            logger.info(f"Discarding stale decision for {request.enemy_id}")
            return None

        if decision.action == TacticalAction.FLEE and enemy.hp < enemy.max_hp * DEFAULT_FLEE_HP_THRESHOLD:
            enemy.is_active = False
            entry = self._combat.add_log_entry(
                state,
                enemy.id,
                enemy.name,
                "tries to flee",
                decision.description or "The enemy flees the battle!",
                LogEntryType.MOVEMENT,
            )
            return EnemyTurnResult(enemy_id=enemy.id, decision=decision, log_entry=entry)

        if decision.action == TacticalAction.DEFEND:
            entry = self._defend(state, enemy, decision.description)
            return EnemyTurnResult(enemy_id=enemy.id, decision=decision, log_entry=entry)

        if not enemy.attacks:
            entry = self._combat.add_log_entry(
                state, enemy.id, enemy.name, "hesitates", "Has no way to attack.", LogEntryType.ABILITY
            )
            return EnemyTurnResult(enemy_id=enemy.id, decision=decision, log_entry=entry)

        result, entry = self._resolve_attack(state, enemy, player, enemy.attacks[0], None)
        return EnemyTurnResult(enemy_id=enemy.id, decision=decision, attack_roll=result, log_entry=entry)

    def execute_enemy_turn(self, state: CombatState) -> Optional[EnemyTurnResult]:
        """
        Run the current enemy's turn.

        Returns:
            What the enemy did, or None if it is not an enemy's turn
        """
        request = self.prepare_enemy_turn(state)
        if request is None:
            return None
        return self.apply_enemy_decision(state, request, self.request_decision(request))
