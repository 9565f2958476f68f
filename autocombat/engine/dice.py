"""Dice rolling system for combat mechanics."""

import logging
import random
from typing import Optional, Protocol

from autocombat.models.dice import DICE_PATTERN, AttackRoll, DiceNotation, DiceRoll

logger = logging.getLogger(__name__)


class DiceParseError(ValueError):
    """Raised when a dice expression is not canonical notation."""


class RandomSource(Protocol):
    """Anything that can produce a uniform integer in [a, b]."""

    def randint(self, a: int, b: int) -> int: ...


def parse_dice(notation: str) -> DiceNotation:
    """
    Parse dice notation like "2d6+3" or "1d20".

    Args:
        notation: Dice expression (NdM, NdM+K or NdM-K)

    Returns:
        Parsed count, sides and modifier

    Raises:
        DiceParseError: If the notation is malformed
    """
    match = DICE_PATTERN.match(notation.strip()) if isinstance(notation, str) else None
    if not match:
        raise DiceParseError(f"Invalid dice notation: {notation!r}")

    count = int(match.group(1))
    sides = int(match.group(2))
    if count < 1 or sides < 1:
        raise DiceParseError(f"Dice count and sides must be at least 1: {notation!r}")

    return DiceNotation(
        count=count,
        sides=sides,
        modifier=int(match.group(3)) if match.group(3) else 0,
    )


class DiceRoller:
    """Handles DnD dice mechanics over an injectable random source."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        """
        Initialize dice roller.

        Args:
            rng: Random source exposing randint(a, b); a fresh random.Random if None
        """
        self._rng = rng or random.Random()

    parse_dice = staticmethod(parse_dice)

    def roll_die(self, sides: int) -> int:
        """Roll a single die with the given number of sides."""
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        return self._rng.randint(1, sides)

    def roll_dice(self, notation: str) -> DiceRoll:
        """
        Roll dice with notation like "2d6+3".

        Args:
            notation: Dice expression

        Returns:
            DiceRoll with every die, the modifier and the total
        """
        parsed = parse_dice(notation)
        rolls = [self.roll_die(parsed.sides) for _ in range(parsed.count)]
        return DiceRoll(
            notation=notation.strip(),
            rolls=rolls,
            modifier=parsed.modifier,
            total=sum(rolls) + parsed.modifier,
        )

    def roll_d20(self, modifier: int = 0) -> DiceRoll:
        """Roll a d20 with modifier."""
        roll = self.roll_die(20)
        return DiceRoll(
            notation=f"1d20{modifier:+d}",
            rolls=[roll],
            modifier=modifier,
            total=roll + modifier,
        )

    @staticmethod
    def get_attribute_modifier(score: int) -> int:
        """D&D attribute modifier: floor((score - 10) / 2)."""
        return (score - 10) // 2

    def make_attack_roll(
        self,
        attack_bonus: int,
        target_armor_class: int,
        damage_dice: str = "1d6",
        damage_bonus: int = 0,
    ) -> AttackRoll:
        """
        Make an attack roll and roll damage on a hit.

        A natural 20 always hits as a critical and rolls the damage dice a second
        time. A natural 1 always misses. Damage on any hit is at least 1.

        Args:
            attack_bonus: Bonus added to the d20
            target_armor_class: Armor class to meet or beat
            damage_dice: Damage dice expression
            damage_bonus: Flat damage added once

        Returns:
            AttackRoll describing the outcome
        """
        attack_roll = self.roll_d20(attack_bonus)
        critical = attack_roll.natural == 20
        fumble = attack_roll.natural == 1
        hit = critical or (not fumble and attack_roll.total >= target_armor_class)

        if not hit:
            return AttackRoll(attack_roll=attack_roll, hit=False, critical=False, fumble=fumble)

        damage_roll = self.roll_dice(damage_dice)
        total_damage = damage_roll.total + damage_bonus

        if critical:
            # Only the extra dice count; modifiers are applied once
            crit_rolls = self.roll_dice(damage_dice).rolls
            total_damage += sum(crit_rolls)
            damage_roll = damage_roll.model_copy(
                update={
                    "rolls": damage_roll.rolls + crit_rolls,
                    "total": damage_roll.total + sum(crit_rolls),
                }
            )

        total_damage = max(1, total_damage)
        logger.debug(
            f"Attack roll {attack_roll.total} (natural {attack_roll.natural}) vs AC {target_armor_class}: "
            f"{'critical ' if critical else ''}hit for {total_damage}"
        )

        return AttackRoll(
            attack_roll=attack_roll,
            hit=True,
            critical=critical,
            fumble=False,
            damage_roll=damage_roll,
            total_damage=total_damage,
        )

    def roll_initiative(self, dexterity_modifier: int) -> int:
        """Roll initiative (d20 + Dexterity modifier)."""
        return self.roll_d20(dexterity_modifier).total

    @staticmethod
    def format_roll(roll: DiceRoll) -> str:
        """Format a dice roll for display, e.g. '[4 + 3] +2 = 9'."""
        rolls = " + ".join(str(r) for r in roll.rolls)
        modifier = f" {roll.modifier:+d}" if roll.modifier else ""
        return f"[{rolls}]{modifier} = {roll.total}"
