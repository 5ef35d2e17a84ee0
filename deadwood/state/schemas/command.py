"""
Command contracts for the turn engine.

A command goes through two steps:

    CommandCheck (validator, no mutation) → CommandResult (engine, after mutation)

A rejected command never reaches the second step's mutation: the engine
returns a CommandResult with ok=False and the state is untouched.
"""

from enum import Enum

from pydantic import BaseModel, Field

from ..schema import UpgradeOffer
from .event import TurnEvent


class CommandType(str, Enum):
    """Commands a player can issue on their turn."""
    MOVE = "move"
    WORK = "work"
    ACT = "act"
    REHEARSE = "rehearse"
    UPGRADE = "upgrade"
    END = "end"
    QUIT = "quit"


class RejectionReason(str, Enum):
    """Why a command was refused. The state is unchanged for every reason."""
    GAME_OVER = "game_over"
    WORKING_ROLE = "working_role"
    ALREADY_MOVED = "already_moved"
    NOT_ADJACENT = "not_adjacent"
    ALREADY_TOOK_ROLE = "already_took_role"
    NOT_A_SET = "not_a_set"
    SCENE_WRAPPED = "scene_wrapped"
    ROLE_UNAVAILABLE = "role_unavailable"
    RANK_TOO_LOW = "rank_too_low"
    NOT_WORKING = "not_working"
    ALREADY_ACTED = "already_acted"
    ALREADY_REHEARSED = "already_rehearsed"
    REHEARSAL_CAPPED = "rehearsal_capped"
    NOT_AT_OFFICE = "not_at_office"
    INVALID_RANK = "invalid_rank"
    RANK_NOT_HIGHER = "rank_not_higher"
    NO_SUCH_UPGRADE = "no_such_upgrade"
    INSUFFICIENT_FUNDS = "insufficient_funds"


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.GAME_OVER: "The game is over.",
    RejectionReason.WORKING_ROLE: "You are working a role.",
    RejectionReason.ALREADY_MOVED: "You already moved this turn.",
    RejectionReason.NOT_ADJACENT: "That location is not adjacent.",
    RejectionReason.ALREADY_TOOK_ROLE: "You already took a role this turn.",
    RejectionReason.NOT_A_SET: "There are no roles here.",
    RejectionReason.SCENE_WRAPPED: "This scene has wrapped.",
    RejectionReason.ROLE_UNAVAILABLE: "No available role by that name here.",
    RejectionReason.RANK_TOO_LOW: "Your rank is too low for that role.",
    RejectionReason.NOT_WORKING: "You are not working a role.",
    RejectionReason.ALREADY_ACTED: "You already acted this turn.",
    RejectionReason.ALREADY_REHEARSED: "You already rehearsed this turn.",
    RejectionReason.REHEARSAL_CAPPED: "Rehearsing further would guarantee success; act instead.",
    RejectionReason.NOT_AT_OFFICE: "Upgrades are sold at the casting office.",
    RejectionReason.INVALID_RANK: "Ranks range from 2 to 6.",
    RejectionReason.RANK_NOT_HIGHER: "You can only upgrade to a higher rank.",
    RejectionReason.NO_SUCH_UPGRADE: "The office does not sell that upgrade.",
    RejectionReason.INSUFFICIENT_FUNDS: "You cannot afford that upgrade.",
}


class Rejection(BaseModel):
    """A refused command: machine-readable reason plus fixed message."""
    reason: RejectionReason
    detail: str = ""  # e.g. "Jail (need rank 3)"

    @property
    def message(self) -> str:
        base = REJECTION_MESSAGES[self.reason]
        return f"{base} ({self.detail})" if self.detail else base


class CommandCheck(BaseModel):
    """
    Outcome of validating a command against the current state.

    Carries the resolved target so the engine does not repeat the lookup.
    """
    rejection: Rejection | None = None
    location_key: str | None = None    # move target
    role_id: str | None = None         # work target
    offer: UpgradeOffer | None = None  # upgrade target

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def reject(cls, reason: RejectionReason, detail: str = "") -> "CommandCheck":
        return cls(rejection=Rejection(reason=reason, detail=detail))


class CommandResult(BaseModel):
    """
    What one command did.

    `events` holds every event the command produced, including any wrap,
    day change or game over it triggered.
    """
    command: CommandType
    player: str                            # Who issued it
    ok: bool
    summary: str = ""
    rejection: Rejection | None = None
    events: list[TurnEvent] = Field(default_factory=list)
    day: int = 1                           # Day after the command ran
    game_over: bool = False

    @property
    def reason(self) -> RejectionReason | None:
        return self.rejection.reason if self.rejection else None

    @property
    def message(self) -> str:
        """Rejection message, or the summary when accepted."""
        return self.rejection.message if self.rejection else self.summary

    def has_event(self, event_type: str) -> bool:
        return any(e.event_type == event_type for e in self.events)

    def events_of(self, event_type: str) -> list[TurnEvent]:
        return [e for e in self.events if e.event_type == event_type]
