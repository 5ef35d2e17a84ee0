"""
Dice rolling tools for Deadwood.

One Dice object per session owns the only random generator: act rolls,
wrap dice and the daily deck shuffle all draw from it. Seeding it makes a
whole game reproducible.
"""

import logging
import random
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

DIE_SIDES = 6

T = TypeVar("T")


@dataclass
class ActRoll:
    """Result of an acting roll against a scene budget."""
    die: int     # The d6 as rolled
    bonus: int   # Rehearsal bonus added
    budget: int  # Target to meet or beat

    @property
    def total(self) -> int:
        return self.die + self.bonus

    @property
    def success(self) -> bool:
        return self.total >= self.budget

    @property
    def margin(self) -> int:
        """Positive = over budget, negative = under."""
        return self.total - self.budget

    @property
    def narrative(self) -> str:
        """Narrative description of the result."""
        if self.success:
            if self.die == DIE_SIDES and self.bonus == 0:
                return "a natural"
            elif self.margin >= 2:
                return "a fine take"
            else:
                return "good enough"
        else:
            if self.margin <= -4:
                return "a disaster"
            else:
                return "a flubbed line"


class Dice:
    """
    Seedable d6 source.

    Tests substitute a subclass that overrides roll() and shuffle().
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.seed = seed
        self.rng = rng or random.Random(seed)

    def roll(self) -> int:
        """Roll a single d6."""
        return self.rng.randint(1, DIE_SIDES)

    def roll_many(self, count: int) -> list[int]:
        """Roll `count` d6, in roll order."""
        return [self.roll() for _ in range(count)]

    def roll_act(self, bonus: int, budget: int) -> ActRoll:
        """
        Roll to act.

        Args:
            bonus: Rehearsal bonus
            budget: Scene budget to meet or beat

        Returns:
            ActRoll with all roll information
        """
        result = ActRoll(die=self.roll(), bonus=bonus, budget=budget)
        logger.debug(
            "Act roll %d + %d vs %d: %s",
            result.die, result.bonus, result.budget, result.narrative,
        )
        return result

    def shuffle(self, items: list[T]) -> list[T]:
        """Return a shuffled copy of items."""
        shuffled = list(items)
        self.rng.shuffle(shuffled)
        return shuffled
