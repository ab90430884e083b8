"""Tests for dice rolling mechanics."""

from __future__ import annotations

import random

import pytest

from arcadia_tactics.core.exceptions import DiceRollError
from arcadia_tactics.engine.dice import DiceExpression, DiceRoller, make_rng


class TestDiceRoller:
    """Tests for the DiceRoller class."""

    def test_simple_d20_roll(self, dice_roller: DiceRoller) -> None:
        """Test simple d20 roll."""
        result = dice_roller.roll("1d20")

        assert isinstance(result, DiceExpression)
        assert 1 <= result.total <= 20
        assert len(result.dice) == 1

    def test_roll_with_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with positive modifier."""
        result = dice_roller.roll("1d20+5")

        assert result.modifier == 5
        assert 6 <= result.total <= 25

    def test_roll_with_negative_modifier(self, dice_roller: DiceRoller) -> None:
        """Test roll with negative modifier."""
        result = dice_roller.roll("1d20-3")

        assert result.modifier == -3

    def test_multiple_dice(self, dice_roller: DiceRoller) -> None:
        """Test rolling multiple dice."""
        result = dice_roller.roll("3d6")

        assert 3 <= result.total <= 18
        assert len(result.dice) == 3

    def test_complex_expression(self, dice_roller: DiceRoller) -> None:
        """Test complex dice expression."""
        result = dice_roller.roll("2d6+1d4+3")

        assert 6 <= result.total <= 19

    def test_parenthesised_and_bare_dice(self, dice_roller: DiceRoller) -> None:
        """Test that dice notation accepts groups and an implied count."""
        grouped = dice_roller.roll("(1d4+2)")
        bare = dice_roller.roll("d20")

        assert 3 <= grouped.total <= 6
        assert grouped.modifier == 2
        assert len(bare.dice) == 1

    def test_subtracted_dice_are_negated(self, dice_roller: DiceRoller) -> None:
        """Test that subtracted dice count against the total."""
        result = dice_roller.roll("10-1d4")

        assert result.dice[0] < 0
        assert result.total == 10 + result.dice[0]
        assert result.modifier == 10

    def test_rolls_use_injected_source(self) -> None:
        """Test that expression dice come from the roller's own random source."""
        expected = random.Random(7)
        roller = DiceRoller(random.Random(7))

        result = roller.roll("3d6")

        assert result.dice == [expected.randint(1, 6) for _ in range(3)]

    def test_unsupported_operator(self, dice_roller: DiceRoller) -> None:
        """Test that multiplication and keep operators are rejected."""
        with pytest.raises(DiceRollError):
            dice_roller.roll("2d6*2")
        with pytest.raises(DiceRollError):
            dice_roller.roll("2d20kh1")

    def test_seeded_rollers_agree(self) -> None:
        """Test that identical seeds replay identical rolls."""
        first = DiceRoller.seeded(99)
        second = DiceRoller.seeded(99)

        assert [first.roll("2d8+1").total for _ in range(10)] == [
            second.roll("2d8+1").total for _ in range(10)
        ]

    def test_critical_detection(self) -> None:
        """Test that critical hits are detected."""
        roller = DiceRoller.seeded(5)

        for _ in range(400):
            result = roller.roll("1d20")
            if result.is_critical:
                assert result.dice[0] == 20
                break
        else:
            pytest.fail("no natural 20 in 400 rolls")

    def test_invalid_expression_raises_error(self, dice_roller: DiceRoller) -> None:
        """Test that invalid expressions raise DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.roll("invalid")

    def test_empty_expression_raises_error(self, dice_roller: DiceRoller) -> None:
        """Test that empty expression raises DiceRollError."""
        with pytest.raises(DiceRollError):
            dice_roller.roll("")

    def test_too_many_dice(self, dice_roller: DiceRoller) -> None:
        """Test that absurd dice counts are rejected."""
        with pytest.raises(DiceRollError):
            dice_roller.roll("1000d6")

    def test_die_needs_sides(self, dice_roller: DiceRoller) -> None:
        """Test that a zero-sided die is rejected."""
        with pytest.raises(DiceRollError):
            dice_roller.die(0)


class TestDiceRollerHelpers:
    """Tests for specialized dice rolling methods."""

    def test_chance_extremes(self, dice_roller: DiceRoller) -> None:
        """Test probability 0 never and 1 always succeeds."""
        assert not any(dice_roller.chance(0.0) for _ in range(50))
        assert all(dice_roller.chance(1.0) for _ in range(50))

    def test_uniform_range(self, dice_roller: DiceRoller) -> None:
        """Test uniform draws stay within bounds."""
        assert all(15 <= dice_roller.uniform(15, 30) <= 30 for _ in range(50))

    def test_make_rng(self) -> None:
        """Test seeded and entropy random sources."""
        assert make_rng(3).random() == random.Random(3).random()
        assert isinstance(make_rng(), random.SystemRandom)


class TestDiceExpression:
    """Tests for the DiceExpression dataclass."""

    def test_expression_is_frozen(self) -> None:
        """Test that DiceExpression is immutable."""
        expr = DiceExpression(expression="1d20", total=15, dice=[15])

        with pytest.raises(AttributeError):
            expr.total = 20  # type: ignore[misc]
