"""HUD notifier contract and default implementation."""

import logging
from typing import Protocol

from autocombat.models.combat import CombatLogEntry

logger = logging.getLogger(__name__)


class HudNotifier(Protocol):
    """Receives combat events for display."""

    def on_player_damaged(self, damage: int, new_hp: int) -> None: ...

    def on_log_updated(self, entries: list[CombatLogEntry]) -> None: ...

    def on_combat_end(self, victory: bool, xp_awarded: int) -> None: ...


class LoggingHudNotifier:
    """HUD notifier that writes events to the log."""

    def on_player_damaged(self, damage: int, new_hp: int) -> None:
        logger.info(f"Player took {damage} damage, HP now {new_hp}")

    def on_log_updated(self, entries: list[CombatLogEntry]) -> None:
        if entries:
            last = entries[-1]
            logger.debug(f"[round {last.round}] {last.actor_name} {last.action}: {last.result}")

    def on_combat_end(self, victory: bool, xp_awarded: int) -> None:
        logger.info(f"Combat ended: {'victory' if victory else 'defeat'}, {xp_awarded} XP")
