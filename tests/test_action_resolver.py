"""Tests for the action resolver."""

import pytest

from autocombat.engine.action_resolver import DEFENDING_CONDITION, ActionResolver
from autocombat.engine.inventory_manager import InventoryManager
from autocombat.models.combat import CombatPhase, LogEntryType
from autocombat.models.items import Item, ItemType
from autocombat.models.tactics import TacticalAction, TacticalDecision


@pytest.fixture
def state(combat_system, rng, warrior):
    """Aria (initiative 16) against a goblin (initiative 12); Aria acts first."""
    rng.push(15, 10)
    state = combat_system.create_state()
    combat_system.start_combat(state, warrior, ["goblin"])
    return state


def goblin_of(state):
    return state.get_combatant(state.turn_order[1])


def longsword(state):
    return state.get_player().attacks[0]


class TestPlayerAttack:
    """Test suite for player attacks."""

    def test_hit_applies_damage(self, resolver, state, rng):
        """Test that a hit reduces the target's HP and logs the roll."""
        goblin = goblin_of(state)
        rng.push(12, 2)

        result = resolver.player_attack(state, goblin.id, longsword(state))

        assert result.hit
        assert result.total_damage == 5
        assert goblin.hp == 2
        assert goblin.is_active
        entry = state.log[-1]
        assert entry.entry_type == LogEntryType.ATTACK
        assert entry.actor_id == "player"
        assert entry.action == "uses Longsword against Goblin"
        assert entry.result == "Hit! [12] +5 = 17 vs AC 13. Deals 5 damage."

    def test_lethal_hit_deactivates(self, resolver, state, rng):
        """Test that dropping to 0 HP deactivates the target."""
        goblin = goblin_of(state)
        rng.push(15, 4)

        resolver.player_attack(state, goblin.id, longsword(state))

        assert goblin.hp == 0
        assert not goblin.is_active

    def test_miss(self, resolver, state, rng):
        """Test that a miss leaves HP unchanged."""
        goblin = goblin_of(state)
        rng.push(5)

        result = resolver.player_attack(state, goblin.id, longsword(state))

        assert not result.hit
        assert goblin.hp == 7
        assert state.log[-1].result == "Miss! [5] +5 = 10 vs AC 13."

    def test_fumble_text(self, resolver, state, rng):
        """Test the natural 1 log text."""
        rng.push(1)
        resolver.player_attack(state, goblin_of(state).id, longsword(state))
        assert state.log[-1].result == "Critical miss! The attack fails miserably."

    def test_critical_text_and_clamp(self, resolver, state, rng):
        """Test the natural 20 log text and that HP never goes negative."""
        goblin = goblin_of(state)
        rng.push(20, 3, 5)

        result = resolver.player_attack(state, goblin.id, longsword(state))

        assert result.critical
        assert result.total_damage == 11
        assert goblin.hp == 0
        assert state.log[-1].result == "CRITICAL! [20] +5 = 25 vs AC 13. Deals 11 damage!"

    @pytest.mark.parametrize("target_id", ["nobody", "player"])
    def test_invalid_target(self, resolver, state, rng, target_id):
        """Test that unknown targets and self-targeting do nothing."""
        log_size = len(state.log)
        assert resolver.player_attack(state, target_id, longsword(state)) is None
        assert len(state.log) == log_size
        assert rng.calls[2:] == []

    def test_inactive_target(self, resolver, state):
        """Test that a defeated target cannot be attacked."""
        goblin = goblin_of(state)
        goblin.is_active = False
        assert resolver.player_attack(state, goblin.id, longsword(state)) is None


class TestApplyDamage:
    """Test suite for damage application."""

    def test_player_damage_notifies_hud(self, resolver, state, hud):
        """Test that the HUD hears about player damage."""
        assert resolver.apply_damage(state, "player", 5) == 7
        assert hud.damage_events == [(5, 7)]

    def test_enemy_damage_does_not_notify_hud(self, resolver, state, hud):
        """Test that enemy damage is not a HUD event."""
        resolver.apply_damage(state, goblin_of(state).id, 3)
        assert hud.damage_events == []

    def test_overkill_clamps(self, resolver, state):
        """Test that HP stops at 0."""
        assert resolver.apply_damage(state, "player", 100) == 0
        assert not state.get_player().is_active

    def test_unknown_target(self, resolver, state):
        """Test that damaging a missing combatant returns None."""
        assert resolver.apply_damage(state, "nobody", 5) is None


class TestInventoryOverlay:
    """Test suite for gear and buff bonuses in resolution."""

    @pytest.fixture
    def inventory(self):
        return InventoryManager.with_starter_items()

    @pytest.fixture
    def geared_resolver(self, dice, combat_system, hud, inventory):
        return ActionResolver(dice, combat_system, hud=hud, inventory=inventory)

    def test_armor_raises_player_armor_class(self, geared_resolver, state):
        """Test that equipped leather armor adds +2 AC for the player only."""
        assert geared_resolver.effective_armor_class(state.get_player()) == 13
        assert geared_resolver.effective_armor_class(goblin_of(state)) == 13

    def test_strength_buff_adds_attack_bonus(self, geared_resolver, inventory, state, rng):
        """Test that half the temporary Strength is added to hit, and the buff counts down."""
        potion = Item(item_id="giant-strength", name="Potion of Strength", item_type=ItemType.POTION, temp_strength=4)
        entry = inventory.add_item(potion)
        inventory.use_consumable(entry.inventory_id)
        assert inventory.active_buffs.turns_remaining == 3

        # 6 + 5 + 2 meets AC 13 only with the buff
        rng.push(6, 1)
        result = geared_resolver.player_attack(state, goblin_of(state).id, longsword(state))

        assert result.hit
        assert inventory.active_buffs.turns_remaining == 2

    def test_accessory_damage_bonus(self, geared_resolver, inventory, state, rng):
        """Test that an equipped accessory adds its damage bonus."""
        ring = Item(item_id="ring", name="Ring of Force", item_type=ItemType.ACCESSORY, damage_bonus=2)
        inventory.equip_item(inventory.add_item(ring).inventory_id)
        rng.push(15, 1)

        result = geared_resolver.player_attack(state, goblin_of(state).id, longsword(state))

        assert result.total_damage == 1 + 3 + 2

    def test_buff_expires_after_its_turns(self, geared_resolver, inventory, state, rng):
        """Test that a 3-turn buff is gone after three player actions."""
        potion = Item(item_id="bulls", name="Bull Tonic", item_type=ItemType.POTION, temp_strength=2)
        inventory.use_consumable(inventory.add_item(potion).inventory_id)

        geared_resolver.player_defend(state)
        geared_resolver.player_defend(state)
        assert inventory.active_buffs.turns_remaining == 1
        geared_resolver.player_defend(state)

        assert inventory.active_buffs.turns_remaining == 0
        assert inventory.active_buffs.temp_strength == 0


class TestDefend:
    """Test suite for the defend action."""

    def test_cosmetic_defend_has_no_numeric_effect(self, resolver, state, combat_system, rng):
        """Test that cosmetic defend only logs the stance."""
        entry = resolver.player_defend(state)

        assert entry.entry_type == LogEntryType.ABILITY
        assert entry.action == "takes a defensive stance"
        assert entry.result == "Defensive stance: +2 AC until next turn."
        assert state.get_player().conditions == []
        assert resolver.effective_armor_class(state.get_player()) == 11

        # 7 + 4 = 11 still hits AC 11
        combat_system.next_turn(state)
        rng.push(7, 1)
        result = resolver.execute_enemy_turn(state)
        assert result.attack_roll.hit

    def test_condition_defend_raises_armor_class_until_next_turn(self, dice, combat_system, hud, state, rng):
        """Test that condition-mode defend gives +2 AC that ends at the defender's next turn."""
        resolver = ActionResolver(dice, combat_system, hud=hud, defend_mode="condition")
        player = state.get_player()

        resolver.player_defend(state)
        assert player.has_condition(DEFENDING_CONDITION)
        assert resolver.effective_armor_class(player) == 13

        combat_system.next_turn(state)
        rng.push(7)
        result = resolver.execute_enemy_turn(state)
        assert not result.attack_roll.hit
        assert state.log[-1].result == "Miss! [7] +4 = 11 vs AC 13."

        combat_system.next_turn(state)
        assert combat_system.is_player_turn(state)
        assert not player.has_condition(DEFENDING_CONDITION)
        assert resolver.effective_armor_class(player) == 11
        assert state.log[-1].entry_type == LogEntryType.CONDITION

    def test_repeated_defend_does_not_stack(self, dice, combat_system, hud, state):
        """Test that defending twice keeps a single condition."""
        resolver = ActionResolver(dice, combat_system, hud=hud, defend_mode="condition")
        resolver.player_defend(state)
        resolver.player_defend(state)
        assert resolver.effective_armor_class(state.get_player()) == 13

    def test_invalid_defend_mode(self, dice, combat_system):
        """Test that unknown defend modes are rejected."""
        with pytest.raises(ValueError):
            ActionResolver(dice, combat_system, defend_mode="heroic")


class TestEnemyTurn:
    """Test suite for enemy turns."""

    @pytest.fixture
    def enemy_state(self, state, combat_system):
        combat_system.next_turn(state)
        return state

    def make_resolver(self, dice, combat_system, hud, tactics):
        return ActionResolver(dice, combat_system, tactics=tactics, hud=hud)

    def test_not_enemy_turn(self, resolver, state):
        """Test that nothing happens on the player's turn."""
        assert resolver.execute_enemy_turn(state) is None

    def test_default_attack_without_provider(self, resolver, enemy_state, rng, hud):
        """Test that enemies attack the player with their first attack when no provider is set."""
        rng.push(15, 1)

        result = resolver.execute_enemy_turn(enemy_state)

        assert result.decision.action == TacticalAction.ATTACK
        assert result.decision.description == "attacks ferociously"
        assert result.attack_roll.total_damage == 3
        assert enemy_state.get_player().hp == 9
        assert hud.damage_events == [(3, 9)]
        assert result.log_entry.action == "uses Scimitar against Aria"

    def test_provider_exception_falls_back_to_attack(self, dice, combat_system, hud, enemy_state, rng, stub_tactics):
        """Test that a failing provider never blocks the turn."""
        resolver = self.make_resolver(dice, combat_system, hud, stub_tactics(TimeoutError("LLM timed out")))
        rng.push(15, 1)

        result = resolver.execute_enemy_turn(enemy_state)

        assert result.decision.action == TacticalAction.ATTACK
        assert result.attack_roll is not None

    @pytest.mark.parametrize("answer", [None, "I will eat you!", {"action": "dance"}, 42])
    def test_unusable_answer_falls_back_to_attack(self, dice, combat_system, hud, enemy_state, rng, stub_tactics, answer):
        """Test that garbage answers become a basic attack."""
        resolver = self.make_resolver(dice, combat_system, hud, stub_tactics(answer))
        rng.push(15, 1)

        result = resolver.execute_enemy_turn(enemy_state)

        assert result.decision.action == TacticalAction.ATTACK
        assert result.attack_roll.hit

    def test_defend_decision_from_fenced_json(self, dice, combat_system, hud, enemy_state, rng, stub_tactics):
        """Test that a fenced JSON defend decision is logged without rolling."""
        answer = '```json\n{"action": "defend", "target": "Aria", "description": "raises a crude shield"}\n```'
        resolver = self.make_resolver(dice, combat_system, hud, stub_tactics(answer))
        calls_before = len(rng.calls)

        result = resolver.execute_enemy_turn(enemy_state)

        assert result.decision.action == TacticalAction.DEFEND
        assert result.attack_roll is None
        assert result.log_entry.result == "raises a crude shield"
        assert len(rng.calls) == calls_before

    def test_flee_refused_when_healthy(self, dice, combat_system, hud, enemy_state, rng, stub_tactics):
        """Test that a healthy enemy that wants to flee attacks instead."""
        resolver = self.make_resolver(dice, combat_system, hud, stub_tactics({"acao": "fugir", "alvo": "Aria"}))
        rng.push(15, 1)

        result = resolver.execute_enemy_turn(enemy_state)

        assert result.decision.action == TacticalAction.FLEE
        assert result.attack_roll is not None
        assert goblin_of(enemy_state).is_active

    def test_flee_allowed_when_nearly_dead(self, dice, combat_system, hud, enemy_state, stub_tactics):
        """Test that an enemy below 20% HP flees and leaves the battle."""
        goblin = goblin_of(enemy_state)
        goblin.hp = 1
        resolver = self.make_resolver(
            dice, combat_system, hud, stub_tactics(TacticalDecision(action=TacticalAction.FLEE))
        )

        result = resolver.execute_enemy_turn(enemy_state)

        assert not goblin.is_active
        assert result.log_entry.entry_type == LogEntryType.MOVEMENT
        assert result.log_entry.result == "The enemy flees the battle!"
        assert combat_system.next_turn(enemy_state) == CombatPhase.VICTORY

    def test_ability_and_move_become_attacks(self, dice, combat_system, hud, enemy_state, rng, stub_tactics):
        """Test that ability and move decisions resolve as basic attacks."""
        resolver = self.make_resolver(dice, combat_system, hud, stub_tactics({"action": "move"}))
        rng.push(15, 1)
        assert resolver.execute_enemy_turn(enemy_state).attack_roll is not None

    def test_enemy_without_attacks_hesitates(self, resolver, enemy_state):
        """Test that an enemy with no attacks logs a hesitation."""
        goblin_of(enemy_state).attacks = []
        result = resolver.execute_enemy_turn(enemy_state)
        assert result.log_entry.action == "hesitates"
        assert result.attack_roll is None

    def test_context_sent_to_provider(self, dice, combat_system, hud, enemy_state, rng, stub_tactics):
        """Test the combat info and history handed to the provider."""
        goblin_of(enemy_state).hp = 2
        tactics = stub_tactics(TacticalDecision(action=TacticalAction.ATTACK, target="Aria"))
        resolver = self.make_resolver(dice, combat_system, hud, tactics)
        rng.push(15, 1)

        resolver.execute_enemy_turn(enemy_state)

        combat_info, history = tactics.calls[0]
        assert combat_info.enemy_name == "Goblin"
        assert combat_info.enemy_hp == 2
        assert combat_info.enemy_personality == "desperate"
        assert combat_info.player_positions == ["Aria (HP: 12/12)"]
        assert len(history) == 1
        assert history[0]["role"] == "assistant"
        assert history[0]["content"].startswith("System Combat started!")

    def test_history_is_limited(self, dice, combat_system, hud, enemy_state, stub_tactics):
        """Test that at most five log entries are sent."""
        for _ in range(8):
            combat_system.add_log_entry(enemy_state, "system", "System", "tick", "tock", LogEntryType.SYSTEM)
        request = ActionResolver(dice, combat_system).prepare_enemy_turn(enemy_state)
        assert len(request.history) == 5

    def test_no_turn_when_player_down(self, resolver, enemy_state):
        """Test that enemies do not act against a fallen player."""
        enemy_state.get_player().is_active = False
        assert resolver.execute_enemy_turn(enemy_state) is None


class TestStaleDecisions:
    """Test suite for discarding decisions that no longer apply."""

    def test_log_change_discards_decision(self, resolver, state, combat_system):
        """Test that a decision is dropped if the log changed meanwhile."""
        combat_system.next_turn(state)
        request = resolver.prepare_enemy_turn(state)
        decision = resolver.request_decision(request)
        combat_system.add_log_entry(state, "player", "Aria", "shouts", "Over here!", LogEntryType.ABILITY)

        assert resolver.apply_enemy_decision(state, request, decision) is None
        assert state.get_player().hp == 12

    def test_turn_change_discards_decision(self, resolver, state, combat_system):
        """Test that a decision is dropped once the turn has moved on."""
        combat_system.next_turn(state)
        request = resolver.prepare_enemy_turn(state)
        decision = resolver.request_decision(request)
        combat_system.next_turn(state)

        assert resolver.apply_enemy_decision(state, request, decision) is None

    def test_ended_combat_discards_decision(self, resolver, state, combat_system):
        """Test that ending combat cancels an in-flight decision."""
        combat_system.next_turn(state)
        request = resolver.prepare_enemy_turn(state)
        decision = resolver.request_decision(request)
        combat_system.end_combat(state)

        assert resolver.apply_enemy_decision(state, request, decision) is None
