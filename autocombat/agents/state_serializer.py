"""State serialization for agent and client consumption."""

from typing import Any, Optional

from autocombat.engine.inventory_manager import InventoryManager
from autocombat.models.combat import CombatState


class StateSerializer:
    """Serializes CombatState to client-readable format with subset extraction."""

    @staticmethod
    def serialize_full_state(state: CombatState) -> dict[str, Any]:
        """
        Serialize complete combat state to dict (for debugging/logging).

        Args:
            state: Combat state to serialize

        Returns:
            Complete state as dict
        """
        return state.model_dump(mode="json")

    @staticmethod
    def extract_hud_context(
        state: CombatState, inventory: Optional[InventoryManager] = None, log_limit: int = 10
    ) -> dict[str, Any]:
        """
        Extract what the HUD shows for the current turn.

        HUD needs:
        - Round, phase and whose turn it is
        - Every combatant's HP and status, in turn order
        - Recent log entries
        - Active buffs, if the player has an inventory

        Args:
            state: Combat state
            inventory: Optional player inventory
            log_limit: Number of recent log entries to include

        Returns:
            Context dict for the HUD
        """
        current_id = state.turn_order[state.current_turn_index] if state.is_active and state.turn_order else None

        combatants = []
        for combatant_id in state.turn_order:
            combatant = state.get_combatant(combatant_id)
            if combatant is None:
                continue
            combatants.append(
                {
                    "id": combatant.id,
                    "name": combatant.name,
                    "role": combatant.role.value,
                    "hp": combatant.hp,
                    "max_hp": combatant.max_hp,
                    "armor_class": combatant.armor_class,
                    "initiative": combatant.initiative,
                    "is_active": combatant.is_active,
                    "is_current": combatant.id == current_id,
                    "conditions": [c.name for c in combatant.conditions],
                }
            )

        recent_log = state.log[-log_limit:] if log_limit > 0 else []

        context = {
            "combat_id": state.combat_id,
            "round": state.round,
            "phase": state.phase.value,
            "is_active": state.is_active,
            "current_combatant_id": current_id,
            "combatants": combatants,
            "log": [
                {
                    "round": entry.round,
                    "actor": entry.actor_name,
                    "action": entry.action,
                    "result": entry.result,
                    "type": entry.entry_type.value,
                    "timestamp": entry.timestamp.isoformat(),
                }
                for entry in recent_log
            ],
            "active_buffs": (
                inventory.active_buffs.model_dump(mode="json") if inventory else None
            ),
        }

        return context
