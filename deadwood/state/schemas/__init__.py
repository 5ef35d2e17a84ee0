"""
Schema contracts for the turn engine.

    CommandCheck → CommandResult (+ TurnEvent records)

Queries return view models (PlayerView, RoleView, LocationView,
UpgradeView, ScoreLine) that are detached copies of the live state.
"""

from .event import TurnEvent
from .command import (
    CommandType,
    RejectionReason,
    REJECTION_MESSAGES,
    Rejection,
    CommandCheck,
    CommandResult,
)
from .views import (
    PlayerView,
    RoleView,
    LocationView,
    UpgradeView,
    ScoreLine,
)

__all__ = [
    # Events
    "TurnEvent",
    # Commands
    "CommandType",
    "RejectionReason",
    "REJECTION_MESSAGES",
    "Rejection",
    "CommandCheck",
    "CommandResult",
    # Views
    "PlayerView",
    "RoleView",
    "LocationView",
    "UpgradeView",
    "ScoreLine",
]
