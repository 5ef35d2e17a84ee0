"""
Scene rules as pure functions.

These functions operate on roles, sets and cards without being methods on
the models. The engine decides when to call them; the functions only know
how acting, rehearsing and wrap payouts work.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..state.schema import Player, Role, ShootingLocation, Take


STARRING_CREDITS = 2  # Paid per successful act in a starring role
EXTRA_DOLLARS = 1     # Paid per successful act in an extra role


def occupy(role: "Role", player: "Player") -> None:
    """
    Link a player and a role in both directions.

    The rehearsal bonus belongs to the role, so it restarts at zero.
    """
    role.occupant = player.name
    player.role_id = role.id
    player.rehearsal = 0


def vacate(role: "Role | None", player: "Player") -> None:
    """Break the player/role link from both sides and clear the bonus."""
    if role is not None and role.occupant == player.name:
        role.occupant = None
    player.role_id = None
    player.rehearsal = 0


def remove_take(location: "ShootingLocation") -> "Take | None":
    """
    Deactivate the active take with the lowest number.

    Returns:
        The removed take, or None if none were active
    """
    active = sorted(location.active_takes, key=lambda t: t.number)
    if not active:
        return None
    active[0].active = False
    return active[0]


def can_rehearse(bonus: int, budget: int) -> bool:
    """
    Whether one more rehearsal is allowed.

    The bonus stops at budget - 1. At the cap every roll, a 1 included,
    meets the budget, so further rehearsing would add nothing.
    """
    return bonus < budget - 1


def act_reward(role: "Role") -> tuple[int, int]:
    """(dollars, credits) earned by a successful act in this role."""
    if role.starring:
        return 0, STARRING_CREDITS
    return EXTRA_DOLLARS, 0


def order_for_payout(roles: list["Role"]) -> list["Role"]:
    """
    Occupied starring roles by level, highest first.

    Equal levels keep card order (stable sort).
    """
    occupied = [r for r in roles if r.occupant is not None]
    return sorted(occupied, key=lambda r: r.level, reverse=True)


def distribute_payout(recipients: list[str], dice: list[int]) -> list[tuple[str, int]]:
    """
    Deal wrap dice round-robin, highest die first.

    Args:
        recipients: Occupant names in payout order (highest role first)
        dice: One die per point of budget, in roll order

    Returns:
        (name, die) pairs in dealing order
    """
    if not recipients:
        return []
    ordered = sorted(dice, reverse=True)
    return [(recipients[i % len(recipients)], die) for i, die in enumerate(ordered)]


def total_payouts(pairs: list[tuple[str, int]]) -> dict[str, int]:
    """Sum dealt dice per recipient."""
    totals: dict[str, int] = {}
    for name, die in pairs:
        totals[name] = totals.get(name, 0) + die
    return totals
