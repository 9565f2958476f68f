"""Tests for player combatant creation."""

import pytest

from autocombat.engine.combatant_factory import PLAYER_ID, create_player_combatant, get_proficiency_bonus
from autocombat.models.character import CharacterSnapshot
from autocombat.models.combatant import CombatantRole, DamageType
from autocombat.models.stats import Attributes


class TestProficiencyBonus:
    """Test suite for the proficiency bonus."""

    @pytest.mark.parametrize("level,bonus", [(1, 2), (4, 2), (5, 3), (8, 3), (9, 4), (17, 6), (20, 6)])
    def test_proficiency_by_level(self, level, bonus):
        """Test the proficiency progression."""
        assert get_proficiency_bonus(level) == bonus


class TestCreatePlayerCombatant:
    """Test suite for create_player_combatant."""

    def test_warrior(self, warrior):
        """Test the warrior's longsword and armor class."""
        player = create_player_combatant(warrior)
        assert player.id == PLAYER_ID
        assert player.role == CombatantRole.PLAYER
        assert player.armor_class == 11
        assert len(player.attacks) == 1
        longsword = player.attacks[0]
        assert longsword.name == "Longsword"
        assert longsword.attack_bonus == 5
        assert longsword.damage_dice == "1d8"
        assert longsword.damage_bonus == 3

    def test_mage_uses_portuguese_alias(self, mage):
        """Test that 'mago' maps to the mage's Fire Bolt without damage bonus."""
        player = create_player_combatant(mage)
        fire_bolt = player.attacks[0]
        assert fire_bolt.name == "Fire Bolt"
        assert fire_bolt.attack_bonus == 6
        assert fire_bolt.damage_bonus == 0
        assert fire_bolt.damage_type == DamageType.FIRE
        assert player.armor_class == 12
        assert player.hp == 20

    def test_rogue_has_two_attacks(self):
        """Test that rogues get a dagger and a shortbow using Dexterity."""
        rogue = CharacterSnapshot(
            name="Vex", character_class="Rogue", hp=9, max_hp=9, attributes=Attributes(dexterity=16)
        )
        player = create_player_combatant(rogue)
        assert [a.name for a in player.attacks] == ["Dagger", "Shortbow"]
        assert all(a.attack_bonus == 5 and a.damage_bonus == 3 for a in player.attacks)

    def test_unknown_class_fights_unarmed(self):
        """Test that unknown classes get an unarmed strike."""
        bard = CharacterSnapshot(name="Lute", character_class="Bard", hp=8, max_hp=8)
        player = create_player_combatant(bard)
        assert player.attacks[0].name == "Unarmed Strike"
        assert player.attacks[0].damage_dice == "1d4"

    def test_zero_hp_character_is_inactive(self):
        """Test that a character at 0 HP starts inactive."""
        fallen = CharacterSnapshot(name="Fallen", character_class="Warrior", hp=0, max_hp=10)
        assert not create_player_combatant(fallen).is_active

    def test_snapshot_rejects_hp_above_max(self):
        """Test that a snapshot cannot have more HP than its maximum."""
        with pytest.raises(ValueError):
            CharacterSnapshot(name="Bad", character_class="Warrior", hp=11, max_hp=10)
