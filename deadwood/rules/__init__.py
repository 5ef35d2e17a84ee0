"""
Game rules as pure functions.

Separates logic from data models for easier testing.
"""

from .scenes import (
    STARRING_CREDITS,
    EXTRA_DOLLARS,
    occupy,
    vacate,
    remove_take,
    can_rehearse,
    act_reward,
    order_for_payout,
    distribute_payout,
    total_payouts,
)
from .scoring import (
    MIN_PLAYERS,
    MAX_PLAYERS,
    PLAYER_COLORS,
    total_days,
    starting_dollars,
    rank_scores,
)

__all__ = [
    "STARRING_CREDITS",
    "EXTRA_DOLLARS",
    "occupy",
    "vacate",
    "remove_take",
    "can_rehearse",
    "act_reward",
    "order_for_payout",
    "distribute_payout",
    "total_payouts",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "PLAYER_COLORS",
    "total_days",
    "starting_dollars",
    "rank_scores",
]
