"""
Session parameters and scoring as pure functions.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..state.schema import Player


MIN_PLAYERS = 2
MAX_PLAYERS = 8

# Default player names, in turn order
PLAYER_COLORS = ["blue", "cyan", "green", "orange", "pink", "red", "violet", "yellow"]


def total_days(player_count: int) -> int:
    """Three days for small tables, four otherwise."""
    return 3 if player_count <= 3 else 4


def starting_dollars(player_count: int) -> int:
    """Larger tables start with a little cash to catch up on upgrades."""
    if player_count <= 4:
        return 0
    if player_count == 5:
        return 1
    if player_count == 6:
        return 2
    return 3


def rank_scores(players: list["Player"]) -> list["Player"]:
    """
    Players by score, highest first.

    Equal scores keep turn order, so the winner is the first player
    encountered with the top score.
    """
    return sorted(players, key=lambda p: p.score, reverse=True)
