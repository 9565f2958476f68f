"""Combat state machine: initiative, turn order, rounds and phases."""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Sequence

from autocombat.engine.bestiary import create_enemy
from autocombat.engine.combatant_factory import create_player_combatant
from autocombat.engine.dice import DiceRoller
from autocombat.engine.hud import HudNotifier
from autocombat.models.character import CharacterSnapshot
from autocombat.models.combat import CombatLogEntry, CombatPhase, CombatState, LogEntryType
from autocombat.models.combatant import Combatant, CombatantRole

logger = logging.getLogger(__name__)

SYSTEM_ACTOR_ID = "system"
SYSTEM_ACTOR_NAME = "System"


class CombatStateError(RuntimeError):
    """Raised when the state machine is driven out of order."""


class CombatSystem:
    """Handles turn-based combat flow over a caller-owned CombatState."""

    def __init__(
        self,
        dice: DiceRoller,
        hud: Optional[HudNotifier] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize combat system.

        Args:
            dice: Dice roller used for initiative
            hud: Optional HUD notifier receiving the log after every entry
            clock: Timestamp source for log entries
        """
        self._dice = dice
        self._hud = hud
        self._clock = clock

    @staticmethod
    def create_state() -> CombatState:
        """Create an empty state in the initiative phase."""
        return CombatState()

    @staticmethod
    def is_in_combat(state: CombatState) -> bool:
        """Check if combat is currently running."""
        return state.is_active and state.phase == CombatPhase.COMBAT

    def add_log_entry(
        self,
        state: CombatState,
        actor_id: str,
        actor_name: str,
        action: str,
        result: str,
        entry_type: LogEntryType,
        round_number: Optional[int] = None,
    ) -> CombatLogEntry:
        """
        Append an entry to the combat log.

        Args:
            state: Combat state to append to
            actor_id: Acting combatant id
            actor_name: Acting combatant name
            action: What happened
            result: Outcome text
            entry_type: Entry category
            round_number: Round to stamp, the current round if None

        Returns:
            The appended entry
        """
        entry = CombatLogEntry(
            entry_id=str(uuid.uuid4()),
            round=state.round if round_number is None else round_number,
            actor_id=actor_id,
            actor_name=actor_name,
            action=action,
            result=result,
            timestamp=self._clock(),
            entry_type=entry_type,
        )
        state.log.append(entry)
        if self._hud:
            self._hud.on_log_updated(list(state.log))
        return entry

    def _log_system(self, state: CombatState, action: str, result: str) -> CombatLogEntry:
        return self.add_log_entry(state, SYSTEM_ACTOR_ID, SYSTEM_ACTOR_NAME, action, result, LogEntryType.SYSTEM)

    def start_combat(
        self,
        state: CombatState,
        player_character: CharacterSnapshot,
        enemy_template_ids: Sequence[str],
    ) -> list[Combatant]:
        """
        Start a new combat.

        Every enemy template is instantiated before the state is touched, so an
        unknown template id leaves the state unchanged.

        Args:
            state: State to (re)initialize in place
            player_character: Player character snapshot
            enemy_template_ids: Enemy template ids, one combatant each

        Returns:
            Combatants in initiative order

        Raises:
            UnknownEnemyTemplateError: If a template id is not registered
        """
        player = create_player_combatant(player_character)
        enemies = [create_enemy(template_id) for template_id in enemy_template_ids]

        combatants = [player, *enemies]
        for combatant in combatants:
            dex_mod = self._dice.get_attribute_modifier(combatant.attributes.dexterity)
            combatant.initiative = self._dice.roll_initiative(dex_mod)

        # sorted() is stable, ties keep roster order
        combatants = sorted(combatants, key=lambda c: c.initiative, reverse=True)

        state.combat_id = str(uuid.uuid4())
        state.combatants = combatants
        state.turn_order = [c.id for c in combatants]
        state.round = 1
        state.current_turn_index = 0
        state.log = []
        state.phase = CombatPhase.COMBAT
        state.is_active = True

        initiative_order = ", ".join(f"{c.name}: {c.initiative}" for c in combatants)
        self._log_system(state, "Combat started!", f"Initiative order: {initiative_order}")
        logger.info(f"Combat {state.combat_id} started with {len(combatants)} combatants")

        return combatants

    @staticmethod
    def get_current_combatant(state: CombatState) -> Optional[Combatant]:
        """Get the combatant whose turn it is."""
        if not state.is_active or not state.turn_order:
            return None
        return state.get_combatant(state.turn_order[state.current_turn_index])

    def is_player_turn(self, state: CombatState) -> bool:
        """Check if it is the player's turn."""
        current = self.get_current_combatant(state)
        return current is not None and current.role == CombatantRole.PLAYER

    def _check_terminal(self, state: CombatState) -> Optional[CombatPhase]:
        if not state.active_enemies():
            return CombatPhase.VICTORY
        player = state.get_player()
        if player is None or not player.is_active:
            return CombatPhase.DEFEAT
        return None

    def _tick_conditions(self, state: CombatState, combatant: Combatant) -> None:
        """Count down timed conditions as the combatant's turn begins."""
        remaining = []
        for condition in combatant.conditions:
            if condition.is_permanent:
                remaining.append(condition)
            elif condition.duration > 1:
                remaining.append(condition.model_copy(update={"duration": condition.duration - 1}))
            else:
                self.add_log_entry(
                    state,
                    combatant.id,
                    combatant.name,
                    f"is no longer {condition.name.lower()}",
                    f"{condition.name} ended.",
                    LogEntryType.CONDITION,
                )
        combatant.conditions = remaining

    def next_turn(self, state: CombatState) -> CombatPhase:
        """
        Advance to the next active combatant.

        Terminal conditions are checked first: no active enemy is a victory, an
        inactive or missing player is a defeat. The round increments when the
        turn pointer wraps around.

        Args:
            state: Combat state

        Returns:
            The phase after advancing

        Raises:
            CombatStateError: If combat was never started
        """
        if not state.turn_order:
            raise CombatStateError("next_turn called with an empty turn order; start_combat first")

        if not state.is_active:
            return state.phase

        terminal = self._check_terminal(state)
        if terminal is not None:
            state.phase = terminal
            state.is_active = False
            if terminal == CombatPhase.VICTORY:
                self._log_system(state, "Victory!", "All enemies have been defeated.")
            else:
                self._log_system(state, "Defeat!", "The player has fallen.")
            logger.info(f"Combat {state.combat_id} ended in {terminal.value} after {state.round} rounds")
            return terminal

        previous_index = state.current_turn_index
        order_length = len(state.turn_order)
        next_index = (previous_index + 1) % order_length
        for _ in range(order_length):
            candidate = state.get_combatant(state.turn_order[next_index])
            if candidate is not None and candidate.is_active:
                break
            next_index = (next_index + 1) % order_length

        state.current_turn_index = next_index
        if next_index <= previous_index:
            state.round += 1
            self._log_system(state, f"Round {state.round}", "A new round of combat begins!")

        current = self.get_current_combatant(state)
        if current is not None and current.conditions:
            self._tick_conditions(state, current)

        return state.phase

    @staticmethod
    def reset_state(state: CombatState) -> None:
        """Reset a state in place to the initiative phase with an empty roster."""
        initial = CombatState()
        for field_name in CombatState.model_fields:
            setattr(state, field_name, getattr(initial, field_name))

    def end_combat(self, state: CombatState) -> bool:
        """
        End combat and discard its state.

        Args:
            state: Combat state, reset in place

        Returns:
            True if the combat ended in victory
        """
        victory = state.phase == CombatPhase.VICTORY
        logger.info(f"Combat {state.combat_id} closed ({'victory' if victory else 'no victory'})")
        self.reset_state(state)
        return victory
