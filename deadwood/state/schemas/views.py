"""
Read-only views returned by engine queries.

Views are copies built on demand. Mutating one has no effect on the game,
and asking twice with no command in between yields equal views.
"""

from pydantic import BaseModel, Field

from ..schema import Currency


class PlayerView(BaseModel):
    """Snapshot of one player."""
    name: str
    rank: int
    dollars: int
    credits: int
    location: str              # Display name
    role: str | None = None    # Role name
    starring: bool = False
    rehearsal: int = 0
    active: bool = False       # Is it this player's turn?

    @property
    def score(self) -> int:
        return self.dollars + self.credits + self.rank

    @property
    def role_label(self) -> str:
        if self.role is None:
            return "-"
        return f"{self.role} ({'starring' if self.starring else 'extra'})"


class RoleView(BaseModel):
    """A role at a set, seen from the asking player's side."""
    id: str
    name: str
    level: int
    line: str = ""
    starring: bool = False
    occupant: str | None = None
    location: str              # Display name of the set
    eligible: bool = False     # Free and within the asking player's rank

    @property
    def available(self) -> bool:
        return self.occupant is None


class LocationView(BaseModel):
    """One row of the board summary."""
    name: str
    kind: str
    status: str                # e.g. "Jail shooting Law and the Old West scene 20"
    neighbors: list[str] = Field(default_factory=list)
    occupants: list[str] = Field(default_factory=list)
    takes_left: int | None = None  # Sets only
    budget: int | None = None      # Sets with an active card


class UpgradeView(BaseModel):
    level: int
    currency: Currency
    cost: int
    affordable: bool


class ScoreLine(BaseModel):
    """One row of the final score table."""
    place: int
    name: str
    dollars: int
    credits: int
    rank: int

    @property
    def score(self) -> int:
        return self.dollars + self.credits + self.rank
