"""
Turn engine for Deadwood.

Owns the day state machine and applies player commands:
    SETUP → ACTIVE → ENDING → ACTIVE (next day) | GAME_OVER

Design principles:
- Validation precedes mutation. The CommandValidator decides; a rejected
  command returns CommandResult(ok=False) and the state is untouched.
- The engine mutates, then records. Every change produces a TurnEvent that
  is both returned in the CommandResult and published on the EventBus.
- One Dice object supplies every random draw (act rolls, wrap dice, the
  daily shuffle), so a seeded session replays exactly.
- A wrap that leaves at most one live scene ends the day on the spot, even
  in the middle of the turn order.

Usage:
    engine = setup(3, load_board(), load_deck(), seed=7)
    engine.move("Main Street")
    engine.work("Railroad Worker")
    engine.end()
"""

from __future__ import annotations

import logging
from enum import Enum

from ..rules.scenes import act_reward, occupy, remove_take, vacate
from ..rules.scoring import rank_scores
from ..state.event_bus import EventBus, EventType, get_event_bus
from ..state.schema import (
    Currency,
    DayPhase,
    Game,
    Location,
    Player,
    Role,
    ShootingLocation,
)
from ..state.schemas.command import CommandCheck, CommandResult, CommandType
from ..state.schemas.event import TurnEvent
from ..state.schemas.views import (
    LocationView,
    PlayerView,
    RoleView,
    ScoreLine,
    UpgradeView,
)
from ..tools.dice import Dice
from .validation import CommandValidator
from .wrap import WrapOutcome, WrapResolver

logger = logging.getLogger(__name__)


# Valid phase transitions: each phase maps to allowed next phases
VALID_TRANSITIONS: dict[DayPhase, set[DayPhase]] = {
    DayPhase.SETUP: {DayPhase.ACTIVE},
    DayPhase.ACTIVE: {DayPhase.ENDING},
    DayPhase.ENDING: {DayPhase.ACTIVE, DayPhase.GAME_OVER},  # Next day or final
    DayPhase.GAME_OVER: set(),
}


class ReleaseReason(str, Enum):
    WRAP = "wrap"
    DAY_END = "day_end"
    QUIT = "quit"


class TurnError(Exception):
    """Engine used incorrectly (not a rule violation)."""
    pass


class InvalidPhaseError(TurnError):
    """Attempted operation not valid in current phase."""
    def __init__(self, current: DayPhase, attempted: str):
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} during {current.value} phase."
        )


class GameNotOverError(TurnError):
    """Final results requested while the game is still running."""
    def __init__(self):
        super().__init__("The game is not over yet.")


class TurnEngine:
    """
    Runs one game session.

    Responsibilities:
    - Day phase state machine enforcement
    - Applying validated commands to the Game
    - Wrap, end-of-day and end-of-game transitions
    - Read-only queries returning detached views

    NOT responsible for:
    - Deciding legality (CommandValidator)
    - Wrap payout arithmetic (WrapResolver)
    - Building the session (session.setup)
    """

    def __init__(
        self,
        game: Game,
        dice: Dice | None = None,
        bus: EventBus | None = None,
        validator: CommandValidator | None = None,
    ):
        self._game = game
        self._dice = dice or Dice()
        self._bus = bus or get_event_bus()
        self._validator = validator or CommandValidator()
        self._wrap = WrapResolver(self._dice)
        self._events: list[TurnEvent] = []

    @property
    def phase(self) -> DayPhase:
        """Current phase of the day state machine."""
        return self._game.phase

    @property
    def game(self) -> Game:
        return self._game

    @property
    def dice(self) -> Dice:
        return self._dice

    @property
    def day(self) -> int:
        return self._game.day

    @property
    def total_days(self) -> int:
        return self._game.total_days

    def _transition(self, to: DayPhase) -> None:
        """Transition to a new phase, enforcing valid transitions."""
        if to not in VALID_TRANSITIONS.get(self._game.phase, set()):
            raise InvalidPhaseError(
                self._game.phase,
                f"transition to {to.value}",
            )
        self._game.phase = to

    def _record(
        self,
        event_type: EventType,
        summary: str = "",
        player: str | None = None,
        **payload,
    ) -> TurnEvent:
        """Publish an event and keep it for the current command's result."""
        event = self._bus.emit(
            event_type,
            player=player,
            day=self._game.day,
            summary=summary,
            **payload,
        )
        self._events.append(event)
        return event

    # ─── Day Lifecycle ───────────────────────────────────────────

    def begin(self) -> list[TurnEvent]:
        """
        Deal the first day. Called once by setup().

        Raises:
            InvalidPhaseError: If the game already started
        """
        if self._game.phase != DayPhase.SETUP:
            raise InvalidPhaseError(self._game.phase, "begin")
        self._events = []
        self._start_day()
        return list(self._events)

    def _start_day(self) -> None:
        game = self._game
        self._transition(DayPhase.ACTIVE)

        for location in game.board.sets:
            location.reset_for_day()
        for card in game.deck:
            card.clear_roles()

        game.deck = self._dice.shuffle(game.deck)
        deals: dict[str, str] = {}
        for location, card in zip(game.board.sets, game.deck):
            location.card_id = card.id
            deals[location.name] = card.title

        for player in game.players:
            player.location = game.board.rest_key
            player.role_id = None
            player.rehearsal = 0
            player.start_turn()
        game.active_index = 0

        logger.info("Day %d of %d begins", game.day, game.total_days)
        self._record(
            EventType.DAY_STARTED,
            f"Day {game.day} of {game.total_days} begins",
            deals=deals,
        )

    def _release_all(self, reason: ReleaseReason) -> list[str]:
        """Free every occupant on the board without paying anyone."""
        game = self._game
        released = []
        for location in game.board.sets:
            card = game.card_at(location)
            roles = [*location.extras, *(card.roles if card else [])]
            for role in roles:
                if role.occupant is not None:
                    released.append(role.occupant)
                    self._release(role, game.player(role.occupant), location, reason)
        for player in game.players:
            player.rehearsal = 0
        return released

    def _release(
        self,
        role: Role,
        player: Player,
        location: ShootingLocation,
        reason: ReleaseReason,
    ) -> None:
        vacate(role, player)
        self._record(
            EventType.ROLE_RELEASED,
            f"{player.name} leaves {role.name}",
            player=player.name,
            role=role.name,
            location=location.name,
            reason=reason.value,
        )

    def _check_day_end(self) -> None:
        """End the day when at most one scene is still shooting."""
        remaining = self._game.board.count_active_sets()
        if remaining <= 1:
            logger.info("%d scene(s) remaining, day ends", remaining)
            self._end_day()

    def _end_day(self) -> None:
        game = self._game
        self._transition(DayPhase.ENDING)
        released = self._release_all(ReleaseReason.DAY_END)

        logger.info("Day %d ends", game.day)
        self._record(
            EventType.DAY_ENDED,
            f"Day {game.day} wraps up",
            released=released,
        )

        if game.day >= game.total_days:
            self._finish_game()
        else:
            game.day += 1
            self._start_day()

    def _finish_game(self) -> None:
        self._transition(DayPhase.GAME_OVER)
        scores = self.final_scores()
        winner = scores[0].name
        logger.info("Game over, %s wins with %d", winner, scores[0].score)
        self._record(
            EventType.GAME_OVER,
            f"Game over! {winner} wins with {scores[0].score} points",
            winner=winner,
            scores={line.name: line.score for line in scores},
        )

    # ─── Command Plumbing ────────────────────────────────────────

    def _check(self, command: CommandType, **args) -> tuple[CommandCheck, CommandResult | None]:
        """
        Validate a command for the active player.

        Returns the check and, when it failed, the rejection result.
        """
        if self._game.phase == DayPhase.SETUP:
            raise InvalidPhaseError(self._game.phase, command.value)

        self._events = []
        check = self._validator.validate(command, self._game, **args)
        if check.ok:
            return check, None

        player = self._game.active_player
        logger.debug("%s rejected for %s: %s", command.value, player.name, check.rejection.reason.value)
        return check, CommandResult(
            command=command,
            player=player.name,
            ok=False,
            rejection=check.rejection,
            day=self._game.day,
            game_over=self.is_game_over(),
        )

    def _result(self, command: CommandType, player: Player, summary: str) -> CommandResult:
        result = CommandResult(
            command=command,
            player=player.name,
            ok=True,
            summary=summary,
            events=list(self._events),
            day=self._game.day,
            game_over=self.is_game_over(),
        )
        self._events = []
        return result

    # ─── Commands ────────────────────────────────────────────────

    def move(self, target: str) -> CommandResult:
        """Move the active player to an adjacent location."""
        check, rejected = self._check(CommandType.MOVE, target=target)
        if rejected:
            return rejected

        player = self._game.active_player
        origin = self._game.location_of(player)
        player.location = check.location_key
        player.flags.moved = True

        dest = self._game.location_of(player)
        summary = f"{player.name} moves to {self._game.describe(dest)}"
        self._record(
            EventType.PLAYER_MOVED,
            summary,
            player=player.name,
            origin=origin.name,
            destination=dest.name,
        )
        return self._result(CommandType.MOVE, player, summary)

    def work(self, role_name: str) -> CommandResult:
        """Take a free role at the active player's set."""
        check, rejected = self._check(CommandType.WORK, role_name=role_name)
        if rejected:
            return rejected

        player = self._game.active_player
        role = self._game.role(check.role_id)
        occupy(role, player)
        player.flags.took_role = True

        location = self._game.location_of(player)
        summary = f"{player.name} takes the {role.kind} role {role.name} (level {role.level})"
        self._record(
            EventType.ROLE_TAKEN,
            summary,
            player=player.name,
            role=role.name,
            role_id=role.id,
            level=role.level,
            starring=role.starring,
            location=location.name,
            line=role.line,
        )
        return self._result(CommandType.WORK, player, summary)

    def act(self) -> CommandResult:
        """
        Roll to act on the active player's role.

        Success removes the lowest-numbered active take and pays the role's
        reward. Removing the last take wraps the scene, which may end the
        day or the game.
        """
        check, rejected = self._check(CommandType.ACT)
        if rejected:
            return rejected

        game = self._game
        player = game.active_player
        role = game.role(player.role_id)
        location: ShootingLocation = game.location_of(player)
        card = game.card_at(location)

        roll = self._dice.roll_act(player.rehearsal, card.budget)
        player.flags.acted = True

        dollars = credits = 0
        take_removed = None
        if roll.success:
            take = remove_take(location)
            take_removed = take.number if take else None
            dollars, credits = act_reward(role)
            player.dollars += dollars
            player.credits += credits
            summary = (
                f"{player.name} rolls {roll.die} (+{roll.bonus}) vs budget {roll.budget}: "
                f"{roll.narrative}! Takes remaining: {len(location.active_takes)}"
            )
        else:
            summary = (
                f"{player.name} rolls {roll.die} (+{roll.bonus}) vs budget {roll.budget}: "
                f"{roll.narrative}."
            )

        self._record(
            EventType.ACT_RESOLVED,
            summary,
            player=player.name,
            role=role.name,
            location=location.name,
            die=roll.die,
            bonus=roll.bonus,
            budget=roll.budget,
            success=roll.success,
            take=take_removed,
            dollars=dollars,
            credits=credits,
        )

        if roll.success and not location.active_takes:
            self._wrap_scene(location)
            self._check_day_end()

        return self._result(CommandType.ACT, player, summary)

    def _wrap_scene(self, location: ShootingLocation) -> WrapOutcome:
        outcome = self._wrap.resolve(self._game, location)
        self._record(
            EventType.SCENE_WRAPPED,
            outcome.summary,
            location=location.name,
            card=outcome.card_title,
            budget=outcome.budget,
            dice=outcome.dice,
            payouts=outcome.payouts,
            released=outcome.released,
        )
        for name in outcome.released:
            self._record(
                EventType.ROLE_RELEASED,
                f"{name} is released from {location.name}",
                player=name,
                location=location.name,
                reason=ReleaseReason.WRAP.value,
            )
        return outcome

    def rehearse(self) -> CommandResult:
        """Add one to the active player's rehearsal bonus."""
        check, rejected = self._check(CommandType.REHEARSE)
        if rejected:
            return rejected

        player = self._game.active_player
        player.rehearsal += 1
        player.flags.rehearsed = True

        summary = f"{player.name} rehearses (bonus +{player.rehearsal})"
        self._record(
            EventType.PLAYER_REHEARSED,
            summary,
            player=player.name,
            bonus=player.rehearsal,
        )
        return self._result(CommandType.REHEARSE, player, summary)

    def upgrade(self, level: int, currency: Currency | str) -> CommandResult:
        """
        Buy a rank at the casting office.

        Raises:
            ValueError: If level is not an int, or currency is not a known
                currency literal
        """
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"Rank must be a whole number, got {level!r}")
        currency = Currency.parse(currency)
        check, rejected = self._check(CommandType.UPGRADE, level=level, currency=currency)
        if rejected:
            return rejected

        player = self._game.active_player
        offer = check.offer
        if currency == Currency.DOLLAR:
            player.dollars -= offer.cost
        else:
            player.credits -= offer.cost
        previous = player.rank
        player.rank = offer.level

        summary = f"{player.name} upgrades to rank {offer.level} for {offer.cost} {currency.value}s"
        self._record(
            EventType.RANK_UPGRADED,
            summary,
            player=player.name,
            previous=previous,
            rank=offer.level,
            currency=currency.value,
            cost=offer.cost,
        )
        return self._result(CommandType.UPGRADE, player, summary)

    def end(self) -> CommandResult:
        """Pass the turn to the next player in order."""
        _, rejected = self._check(CommandType.END)
        if rejected:
            return rejected

        game = self._game
        player = game.active_player
        game.active_index = (game.active_index + 1) % len(game.players)
        game.active_player.start_turn()

        summary = f"{player.name} ends their turn. {game.active_player.name} is up."
        self._record(
            EventType.TURN_ENDED,
            summary,
            player=player.name,
            next_player=game.active_player.name,
        )
        return self._result(CommandType.END, player, summary)

    def quit(self) -> CommandResult:
        """End the game now. Occupants are released without payout."""
        _, rejected = self._check(CommandType.QUIT)
        if rejected:
            return rejected

        player = self._game.active_player
        self._transition(DayPhase.ENDING)
        self._release_all(ReleaseReason.QUIT)
        self._finish_game()
        return self._result(CommandType.QUIT, player, f"{player.name} calls it a wrap on the whole game.")

    # ─── Queries ─────────────────────────────────────────────────

    def _player_view(self, player: Player) -> PlayerView:
        role = self._game.role(player.role_id)
        return PlayerView(
            name=player.name,
            rank=player.rank,
            dollars=player.dollars,
            credits=player.credits,
            location=self._game.location_of(player).name,
            role=role.name if role else None,
            starring=role.starring if role else False,
            rehearsal=player.rehearsal,
            active=player is self._game.active_player,
        )

    def active_player(self) -> PlayerView:
        return self._player_view(self._game.active_player)

    def player(self, name: str) -> PlayerView | None:
        player = self._game.player(name)
        return self._player_view(player) if player else None

    def board_summary(self) -> list[PlayerView]:
        """Every player's position and role, in turn order."""
        return [self._player_view(p) for p in self._game.players]

    def locations(self) -> list[LocationView]:
        """Every location with its current status."""
        game = self._game
        views = []
        for key, location in game.board.locations.items():
            view = LocationView(
                name=location.name,
                kind=location.kind,
                status=game.describe(location),
                neighbors=[game.board.locations[n].name for n in location.neighbors],
                occupants=[p.name for p in game.players if p.location == key],
            )
            if isinstance(location, ShootingLocation):
                view.takes_left = len(location.active_takes)
                card = game.card_at(location)
                if card is not None and not location.is_wrapped:
                    view.budget = card.budget
            views.append(view)
        return views

    def adjacent_locations(self) -> list[str]:
        """Names of the locations the active player could move to."""
        here = self._game.location_of(self._game.active_player)
        return [self._game.board.locations[n].name for n in here.neighbors]

    def _resolve_location(self, location: str | None) -> Location | None:
        if location is None:
            return self._game.location_of(self._game.active_player)
        return self._game.board.get(location)

    def roles_at(self, location: str | None = None) -> list[RoleView]:
        """
        Roles at a set, extras first, occupied ones included.

        Defaults to the active player's location. Non-sets have no roles,
        and a wrapped set only lists its extras.
        """
        where = self._resolve_location(location)
        if not isinstance(where, ShootingLocation):
            return []
        rank = self._game.active_player.rank
        return [
            RoleView(
                id=role.id,
                name=role.name,
                level=role.level,
                line=role.line,
                starring=role.starring,
                occupant=role.occupant,
                location=where.name,
                eligible=role.available and role.level <= rank and not where.is_wrapped,
            )
            for role in self._game.roles_at(where)
        ]

    def available_roles(self, location: str | None = None) -> list[RoleView]:
        """Free roles at a set whose scene is still shooting."""
        where = self._resolve_location(location)
        if not isinstance(where, ShootingLocation) or where.is_wrapped:
            return []
        return [r for r in self.roles_at(where.name) if r.available]

    def upgrade_offers(self, affordable_only: bool = True) -> list[UpgradeView]:
        """Office offers above the active player's rank."""
        player = self._game.active_player
        views = []
        for offer in self._game.board.office.upgrades:
            if offer.level <= player.rank:
                continue
            funds = player.dollars if offer.currency == Currency.DOLLAR else player.credits
            affordable = funds >= offer.cost
            if affordable_only and not affordable:
                continue
            views.append(UpgradeView(
                level=offer.level,
                currency=offer.currency,
                cost=offer.cost,
                affordable=affordable,
            ))
        return views

    def is_game_over(self) -> bool:
        return self._game.phase == DayPhase.GAME_OVER

    def standings(self) -> list[ScoreLine]:
        """Current score table, highest first. Available at any time."""
        return [
            ScoreLine(
                place=i,
                name=p.name,
                dollars=p.dollars,
                credits=p.credits,
                rank=p.rank,
            )
            for i, p in enumerate(rank_scores(self._game.players), start=1)
        ]

    def final_scores(self) -> list[ScoreLine]:
        """
        Final score table, highest first.

        Raises:
            GameNotOverError: If the game is still running
        """
        if not self.is_game_over():
            raise GameNotOverError()
        return self.standings()

    def winner(self) -> str:
        """
        Name of the first player with the top final score.

        Raises:
            GameNotOverError: If the game is still running
        """
        return self.final_scores()[0].name
