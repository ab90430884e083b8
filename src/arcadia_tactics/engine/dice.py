"""Dice rolling mechanics.

All randomness in the engine flows through an injected ``random.Random``
so that a seeded session replays identically while a normal session draws
from OS entropy. Dice notation is parsed with the d20 library; the dice
in the parsed tree are then rolled on that random source rather than on
d20's global one. Sums and differences of dice and numbers are supported
(``2d4+1d6-1``); keep/drop and reroll operators are not.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

import d20
from d20 import diceast

from arcadia_tactics.core.exceptions import DiceRollError
from arcadia_tactics.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

MAX_DICE = 100
PERCENTILE = "%"


def make_rng(seed: int | None = None) -> random.Random:
    """Create the random source for a session.

    Args:
        seed: Fixed seed for reproducible runs; ``None`` uses OS entropy.

    Returns:
        A seeded ``random.Random`` or a ``random.SystemRandom``.
    """
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The dice expression string that was rolled.
        total: The total result of the roll.
        dice: Individual dice results, negated where the dice are subtracted.
        modifier: Static modifier applied.
        is_critical: Whether a single d20 came up 20.
        is_fumble: Whether a single d20 came up 1.
    """

    expression: str
    total: int
    dice: list[int] = field(default_factory=list)
    modifier: int = 0
    is_critical: bool = False
    is_fumble: bool = False


@dataclass
class _Tally:
    dice: list[int] = field(default_factory=list)
    d20s: list[int] = field(default_factory=list)


class DiceRoller:
    """Dice rolling over an injectable random source.

    Example:
        >>> roller = DiceRoller.seeded(42)
        >>> result = roller.roll("1d20+5")
        >>> 6 <= result.total <= 25
        True
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize the dice roller.

        Args:
            rng: Random source; defaults to OS entropy.
        """
        self.rng = rng if rng is not None else make_rng()

    @classmethod
    def seeded(cls, seed: int) -> DiceRoller:
        """Create a roller whose sequence is fully determined by ``seed``."""
        return cls(random.Random(seed))

    def die(self, sides: int) -> int:
        """Roll one die with ``sides`` faces."""
        if sides < 1:
            raise DiceRollError("A die needs at least one side", expression=f"d{sides}")
        return self.rng.randint(1, sides)

    def d20(self) -> int:
        return self.die(20)

    def roll_dice(self, count: int, sides: int) -> int:
        """Sum of ``count`` dice with ``sides`` faces."""
        return sum(self.die(sides) for _ in range(count))

    def roll(self, expression: str) -> DiceExpression:
        """Roll dice according to the given expression.

        Args:
            expression: Dice expression (e.g., '1d20+5', '2d6+3').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is empty, malformed or uses
                operators other than ``+`` and ``-``.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            tree = d20.parse(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        tally = _Tally()
        total = self._evaluate(tree, 1, tally, expression)
        is_critical = len(tally.d20s) == 1 and tally.d20s[0] == 20
        is_fumble = len(tally.d20s) == 1 and tally.d20s[0] == 1

        logger.debug(
            "Dice rolled",
            expression=expression,
            total=total,
            is_critical=is_critical,
        )
        return DiceExpression(
            expression=expression,
            total=total,
            dice=tally.dice,
            modifier=total - sum(tally.dice),
            is_critical=is_critical,
            is_fumble=is_fumble,
        )

    def _evaluate(self, node: Any, sign: int, tally: _Tally, expression: str) -> int:
        """Walk a parsed d20 tree, rolling each dice node on ``self.rng``."""
        if isinstance(node, diceast.Expression):
            return self._evaluate(node.roll, sign, tally, expression)
        if isinstance(node, (diceast.AnnotatedNumber, diceast.Parenthetical)):
            return self._evaluate(node.value, sign, tally, expression)
        if isinstance(node, diceast.Literal):
            return int(node.value)
        if isinstance(node, diceast.UnOp) and node.op in ("+", "-"):
            factor = -1 if node.op == "-" else 1
            return factor * self._evaluate(node.value, sign * factor, tally, expression)
        if isinstance(node, diceast.BinOp) and node.op in ("+", "-"):
            factor = -1 if node.op == "-" else 1
            left = self._evaluate(node.left, sign, tally, expression)
            right = self._evaluate(node.right, sign * factor, tally, expression)
            return left + factor * right
        if isinstance(node, (diceast.OperatedSet, diceast.OperatedDice)) and not node.operations:
            return self._evaluate(node.value, sign, tally, expression)
        if isinstance(node, diceast.NumberSet) and len(node.values) == 1:
            return self._evaluate(node.values[0], sign, tally, expression)
        if isinstance(node, diceast.Dice):
            return self._roll_node(node, sign, tally, expression)
        raise DiceRollError("Unsupported dice expression", expression=expression)

    def _roll_node(self, node: diceast.Dice, sign: int, tally: _Tally, expression: str) -> int:
        count = int(node.num)
        sides = 100 if node.size == PERCENTILE else int(node.size)
        if count > MAX_DICE or sides < 1:
            raise DiceRollError("Dice count or size out of range", expression=expression)
        faces = [self.die(sides) for _ in range(count)]
        tally.dice.extend(sign * face for face in faces)
        if sides == 20 and count == 1:
            tally.d20s.extend(faces)
        return sum(faces)

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.rng.random() < probability

    def randint(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def choice(self, options: Sequence[T]) -> T:
        return self.rng.choice(options)

    def uniform(self, low: float, high: float) -> float:
        return low + self.rng.random() * (high - low)


__all__ = [
    "make_rng",
    "DiceExpression",
    "DiceRoller",
]
