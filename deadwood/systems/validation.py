"""
Command validator for the turn engine.

Pure checks: validate(command, game, **args) -> CommandCheck.
No state mutation, no side effects.

Each command has a dedicated method that runs its checks in a fixed order
and reports the first one that fails. On success the check carries the
resolved target (location key, role id or upgrade offer) so the engine can
apply the command without looking it up again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..rules.scenes import can_rehearse
from ..state.schema import (
    MAX_RANK,
    Currency,
    DayPhase,
    OfficeLocation,
    ShootingLocation,
    location_key,
)
from ..state.schemas.command import (
    CommandCheck,
    CommandType,
    RejectionReason,
)

if TYPE_CHECKING:
    from ..state.schema import Game


MIN_UPGRADE_RANK = 2


class CommandValidator:
    """
    Validates commands for the active player.

    This class is stateless; all state comes from the game parameter.
    """

    def validate(self, command: CommandType, game: "Game", **args) -> CommandCheck:
        """
        Validate a command for the active player.

        Routes to command-specific validators. No state mutation occurs.
        """
        if game.phase == DayPhase.GAME_OVER:
            return CommandCheck.reject(RejectionReason.GAME_OVER)

        validators = {
            CommandType.MOVE: self._validate_move,
            CommandType.WORK: self._validate_work,
            CommandType.ACT: self._validate_act,
            CommandType.REHEARSE: self._validate_rehearse,
            CommandType.UPGRADE: self._validate_upgrade,
            CommandType.END: self._validate_always,
            CommandType.QUIT: self._validate_always,
        }
        return validators[command](game, **args)

    # ─── Movement ────────────────────────────────────────────────

    def _validate_move(self, game: "Game", target: str) -> CommandCheck:
        player = game.active_player
        if player.is_working:
            return CommandCheck.reject(RejectionReason.WORKING_ROLE)
        if player.flags.moved:
            return CommandCheck.reject(RejectionReason.ALREADY_MOVED)

        here = game.location_of(player)
        if not here.is_adjacent(target):
            adjacent = ", ".join(game.board.locations[n].name for n in here.neighbors)
            return CommandCheck.reject(
                RejectionReason.NOT_ADJACENT, f"adjacent: {adjacent}",
            )
        return CommandCheck(location_key=location_key(target))

    # ─── Roles ───────────────────────────────────────────────────

    def _validate_work(self, game: "Game", role_name: str) -> CommandCheck:
        player = game.active_player
        if player.is_working:
            return CommandCheck.reject(RejectionReason.WORKING_ROLE)
        if player.flags.took_role:
            return CommandCheck.reject(RejectionReason.ALREADY_TOOK_ROLE)

        here = game.location_of(player)
        if not isinstance(here, ShootingLocation):
            return CommandCheck.reject(RejectionReason.NOT_A_SET, here.name)
        if here.is_wrapped:
            return CommandCheck.reject(RejectionReason.SCENE_WRAPPED, here.name)

        wanted = location_key(role_name)
        role = next(
            (r for r in game.roles_at(here)
             if r.available and location_key(r.name) == wanted),
            None,
        )
        if role is None:
            return CommandCheck.reject(RejectionReason.ROLE_UNAVAILABLE, role_name)
        if player.rank < role.level:
            return CommandCheck.reject(
                RejectionReason.RANK_TOO_LOW,
                f"{role.name} needs rank {role.level}",
            )
        return CommandCheck(role_id=role.id)

    # ─── Acting ──────────────────────────────────────────────────

    def _validate_act(self, game: "Game") -> CommandCheck:
        player = game.active_player
        if not player.is_working:
            return CommandCheck.reject(RejectionReason.NOT_WORKING)
        if player.flags.acted:
            return CommandCheck.reject(RejectionReason.ALREADY_ACTED)
        if player.flags.rehearsed:
            return CommandCheck.reject(RejectionReason.ALREADY_REHEARSED)
        return CommandCheck(role_id=player.role_id)

    def _validate_rehearse(self, game: "Game") -> CommandCheck:
        player = game.active_player
        if not player.is_working:
            return CommandCheck.reject(RejectionReason.NOT_WORKING)
        if player.flags.acted:
            return CommandCheck.reject(RejectionReason.ALREADY_ACTED)
        if player.flags.rehearsed:
            return CommandCheck.reject(RejectionReason.ALREADY_REHEARSED)

        card = game.card_at(game.location_of(player))
        if not can_rehearse(player.rehearsal, card.budget):
            return CommandCheck.reject(
                RejectionReason.REHEARSAL_CAPPED,
                f"bonus {player.rehearsal}, budget {card.budget}",
            )
        return CommandCheck(role_id=player.role_id)

    # ─── Upgrades ────────────────────────────────────────────────

    def _validate_upgrade(self, game: "Game", level: int, currency: Currency) -> CommandCheck:
        player = game.active_player
        here = game.location_of(player)
        if not isinstance(here, OfficeLocation):
            return CommandCheck.reject(RejectionReason.NOT_AT_OFFICE)
        if player.is_working:
            return CommandCheck.reject(RejectionReason.WORKING_ROLE)
        if not MIN_UPGRADE_RANK <= level <= MAX_RANK:
            return CommandCheck.reject(RejectionReason.INVALID_RANK, str(level))
        if level <= player.rank:
            return CommandCheck.reject(
                RejectionReason.RANK_NOT_HIGHER, f"current rank {player.rank}",
            )

        offer = here.find_upgrade(level, currency)
        if offer is None:
            return CommandCheck.reject(
                RejectionReason.NO_SUCH_UPGRADE, f"rank {level} for {currency.value}s",
            )
        funds = player.dollars if currency == Currency.DOLLAR else player.credits
        if funds < offer.cost:
            return CommandCheck.reject(
                RejectionReason.INSUFFICIENT_FUNDS,
                f"costs {offer.cost} {currency.value}s, you have {funds}",
            )
        return CommandCheck(offer=offer)

    # ─── Turn ────────────────────────────────────────────────────

    def _validate_always(self, game: "Game") -> CommandCheck:
        return CommandCheck()
