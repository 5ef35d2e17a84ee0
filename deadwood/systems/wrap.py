"""
Scene wrap resolution.

Runs when an act removes the last take on a set:

1. Collect the card's occupied starring roles, highest level first.
2. If there is at least one, roll one die per point of budget.
3. Deal the dice highest first, round-robin over those occupants.
4. Release every occupant at the set (starring and extra) and clear
   their rehearsal bonus.
5. Mark the set wrapped.

Extras earn nothing at the wrap; they were paid per successful act.
The end-of-day check that follows a wrap belongs to the turn engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..rules.scenes import distribute_payout, order_for_payout, total_payouts, vacate
from ..tools.dice import Dice

if TYPE_CHECKING:
    from ..state.schema import Game, ShootingLocation

logger = logging.getLogger(__name__)


@dataclass
class WrapOutcome:
    """What a wrap paid out and who it released."""
    location: str                                      # Set display name
    card_title: str
    budget: int
    dice: list[int] = field(default_factory=list)      # In roll order, empty if no starring occupants
    dealt: list[tuple[str, int]] = field(default_factory=list)
    released: list[str] = field(default_factory=list)  # Every occupant freed

    @property
    def payouts(self) -> dict[str, int]:
        return total_payouts(self.dealt)

    @property
    def summary(self) -> str:
        if not self.dealt:
            return f"{self.card_title} wraps at {self.location}; no starring players to pay."
        paid = ", ".join(f"{name} ${amount}" for name, amount in self.payouts.items())
        return f"{self.card_title} wraps at {self.location}: {paid}"


class WrapResolver:
    """Pays out and clears a set whose scene just wrapped."""

    def __init__(self, dice: Dice):
        self._dice = dice

    def resolve(self, game: "Game", location: "ShootingLocation") -> WrapOutcome:
        card = game.card_at(location)
        outcome = WrapOutcome(
            location=location.name,
            card_title=card.title,
            budget=card.budget,
        )

        starring = order_for_payout(card.roles)
        if starring:
            outcome.dice = self._dice.roll_many(card.budget)
            outcome.dealt = distribute_payout([r.occupant for r in starring], outcome.dice)
            for name, die in outcome.dealt:
                game.player(name).dollars += die
            logger.debug("Wrap dice at %s: %s", location.name, outcome.dice)

        for role in [*location.extras, *card.roles]:
            if role.occupant is not None:
                outcome.released.append(role.occupant)
                vacate(role, game.player(role.occupant))
        card.clear_roles()
        location.wrapped = True

        logger.info(outcome.summary)
        return outcome
