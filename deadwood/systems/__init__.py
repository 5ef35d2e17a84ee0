"""
Game systems: the turn engine and its collaborators.

    setup() → TurnEngine ─┬─ CommandValidator (legality, no mutation)
                          └─ WrapResolver (scene payout)
"""

from .validation import CommandValidator
from .wrap import WrapOutcome, WrapResolver
from .turns import (
    VALID_TRANSITIONS,
    GameNotOverError,
    InvalidPhaseError,
    TurnEngine,
    TurnError,
)
from .session import new_game, setup

__all__ = [
    "CommandValidator",
    "WrapOutcome",
    "WrapResolver",
    "VALID_TRANSITIONS",
    "GameNotOverError",
    "InvalidPhaseError",
    "TurnEngine",
    "TurnError",
    "new_game",
    "setup",
]
