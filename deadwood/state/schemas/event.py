"""
TurnEvent schema: records of what a command did.

Every state change the engine makes is described by one event. The same
record is returned to the caller inside CommandResult.events and published
on the event bus, so the REPL and tests read identical data.
"""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class TurnEvent(BaseModel):
    """
    A single event produced while running a command.

    Events never mutate state; the engine mutates first and then records.
    """
    event_id: str = Field(default_factory=lambda: str(uuid4())[:8])
    event_type: str  # e.g., "player.moved", "scene.wrapped", "day.ended"
    player: str | None = None  # Acting player, None for day/game events
    day: int = 1
    payload: dict = Field(default_factory=dict)
    # Payload varies by event_type:
    # player.moved: {"from": "trailer", "to": "main street"}
    # act.resolved: {"die": 5, "bonus": 0, "budget": 4, "success": true, "dollars": 0, "credits": 2}
    # scene.wrapped: {"location": "jail", "dice": [6, 3], "payouts": {"blue": 9}, "bonuses": {"cyan": 2}}

    summary: str = ""  # "blue moves to Main Street"

    timestamp: datetime = Field(default_factory=datetime.now)
