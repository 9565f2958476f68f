"""Pytest configuration and fixtures."""

from collections import deque
from datetime import datetime

import pytest

from autocombat.engine.action_resolver import ActionResolver
from autocombat.engine.combat import CombatSystem
from autocombat.engine.dice import DiceRoller
from autocombat.models.character import CharacterSnapshot
from autocombat.models.combat import CombatLogEntry
from autocombat.models.stats import Attributes


class ScriptedRandom:
    """Random source returning queued values, for forcing die results."""

    def __init__(self, values=()):
        self._values = deque(values)
        self.calls: list[tuple[int, int]] = []

    def push(self, *values: int) -> None:
        self._values.extend(values)

    @property
    def remaining(self) -> int:
        return len(self._values)

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            raise AssertionError(f"ScriptedRandom ran out of values (randint({a}, {b}))")
        value = self._values.popleft()
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside [{a}, {b}]")
        return value


class RecordingHud:
    """HUD notifier that records every event."""

    def __init__(self):
        self.damage_events: list[tuple[int, int]] = []
        self.log_snapshots: list[list[CombatLogEntry]] = []
        self.end_events: list[tuple[bool, int]] = []

    def on_player_damaged(self, damage: int, new_hp: int) -> None:
        self.damage_events.append((damage, new_hp))

    def on_log_updated(self, entries: list[CombatLogEntry]) -> None:
        self.log_snapshots.append(entries)

    def on_combat_end(self, victory: bool, xp_awarded: int) -> None:
        self.end_events.append((victory, xp_awarded))


class StubTactics:
    """Decision provider returning a fixed answer, or raising it if it is an exception."""

    def __init__(self, answer):
        self.answer = answer
        self.calls = []

    def decide(self, combat_info, history):
        self.calls.append((combat_info, history))
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


@pytest.fixture
def rng():
    """Empty scripted random source; push values in the test."""
    return ScriptedRandom()


@pytest.fixture
def dice(rng):
    """Dice roller over the scripted random source."""
    return DiceRoller(rng)


@pytest.fixture
def hud():
    """Recording HUD notifier."""
    return RecordingHud()


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed timestamp."""
    return lambda: datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def combat_system(dice, hud, fixed_clock):
    """Combat system over scripted dice."""
    return CombatSystem(dice, hud=hud, clock=fixed_clock)


@pytest.fixture
def resolver(dice, combat_system, hud):
    """Action resolver with no tactics provider and no inventory."""
    return ActionResolver(dice, combat_system, hud=hud)


@pytest.fixture
def warrior():
    """Level 1 warrior: Longsword +5 to hit, 1d8+3 damage, AC 11."""
    return CharacterSnapshot(
        name="Aria",
        character_class="Warrior",
        level=1,
        hp=12,
        max_hp=12,
        attributes=Attributes(strength=16, dexterity=12, constitution=14, intelligence=10, wisdom=10, charisma=8),
    )


@pytest.fixture
def mage():
    """Level 5 mage: Fire Bolt +6 to hit, 1d10 damage, AC 12."""
    return CharacterSnapshot(
        name="Milo",
        character_class="mago",
        level=5,
        hp=20,
        max_hp=24,
        attributes=Attributes(strength=8, dexterity=14, constitution=12, intelligence=17, wisdom=12, charisma=10),
    )


@pytest.fixture
def stub_tactics():
    """Factory for fixed-answer decision providers."""
    return StubTactics
