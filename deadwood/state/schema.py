"""
Pydantic models for Deadwood game state.

The engine mutates these models in place. Cross references are string
handles rather than object links: a player points at a location key and a
role id, a role points back at a player name, a set points at a card id in
the session deck. The board, the deck and the player list each own their
entities outright.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


MIN_RANK = 1
MAX_RANK = 6


def location_key(name: str) -> str:
    """Case-insensitive lookup key for a location or role name."""
    return " ".join(name.split()).lower()


def slugify(name: str) -> str:
    """Convert a display name to an id fragment."""
    return location_key(name).replace(" ", "_").replace("'", "").replace("-", "_")


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class Currency(str, Enum):
    DOLLAR = "dollar"    # primary currency, paid for extra roles and wraps
    CREDIT = "credit"    # secondary currency, paid for starring roles

    @classmethod
    def parse(cls, value: "Currency | str") -> "Currency":
        """
        Parse a currency literal ("dollar", "Dollars", "credit", ...).

        Raises:
            ValueError: For anything that is not a known currency.
        """
        if isinstance(value, Currency):
            return value
        text = str(value).strip().lower()
        if text.endswith("s"):
            text = text[:-1]
        return cls(text)


class LocationKind(str, Enum):
    PLAIN = "plain"          # rest area, no state
    SHOOTING = "shooting"    # filming set with takes and roles
    OFFICE = "office"        # casting office, sells rank upgrades


class DayPhase(str, Enum):
    """Phases of the day state machine."""
    SETUP = "setup"          # Session built, first day not dealt yet
    ACTIVE = "active"        # Players take turns
    ENDING = "ending"        # Day over, releasing roles
    GAME_OVER = "game_over"  # Terminal


# -----------------------------------------------------------------------------
# Roles, Cards, Takes
# -----------------------------------------------------------------------------

class Take(BaseModel):
    """A shot counter on a set. Removing the last one wraps the scene."""
    number: int = Field(ge=1)
    active: bool = True


class Role(BaseModel):
    """A part a player can work, either on a scene card or on a set."""
    id: str
    name: str
    level: int = Field(ge=MIN_RANK, le=MAX_RANK)  # Minimum rank required
    line: str = ""
    starring: bool = False                        # On-card role, pays credits
    occupant: str | None = None                   # Player name

    @property
    def available(self) -> bool:
        return self.occupant is None

    @property
    def kind(self) -> str:
        return "starring" if self.starring else "extra"


class SceneCard(BaseModel):
    """A scene dealt to a set for one day. Only role occupancy ever changes."""
    id: str
    title: str
    budget: int = Field(ge=1)
    scene_number: int
    description: str = ""
    roles: list[Role] = Field(default_factory=list)

    def clear_roles(self) -> None:
        for role in self.roles:
            role.occupant = None


class UpgradeOffer(BaseModel):
    """A rank upgrade sold at the casting office."""
    level: int = Field(ge=2, le=MAX_RANK)
    currency: Currency
    cost: int = Field(ge=0)


# -----------------------------------------------------------------------------
# Locations
# -----------------------------------------------------------------------------

class _LocationBase(BaseModel):
    name: str
    neighbors: list[str] = Field(default_factory=list)  # Location keys

    @property
    def key(self) -> str:
        return location_key(self.name)

    def is_adjacent(self, name: str) -> bool:
        return location_key(name) in self.neighbors


class PlainLocation(_LocationBase):
    """A location with no state of its own, such as the trailer."""
    kind: Literal["plain"] = "plain"


class ShootingLocation(_LocationBase):
    """A filming set: owns its takes and extra roles, hosts one card a day."""
    kind: Literal["shooting"] = "shooting"
    takes: list[Take] = Field(default_factory=list)
    extras: list[Role] = Field(default_factory=list)
    card_id: str | None = None
    wrapped: bool = False

    @property
    def active_takes(self) -> list[Take]:
        return [t for t in self.takes if t.active]

    @property
    def is_wrapped(self) -> bool:
        """True when the set has no scene left to shoot today."""
        return self.wrapped or self.card_id is None or not self.active_takes

    def reset_for_day(self) -> None:
        """Clear the card, restore every take and free the extras."""
        self.card_id = None
        self.wrapped = False
        for take in self.takes:
            take.active = True
        for role in self.extras:
            role.occupant = None


class OfficeLocation(_LocationBase):
    """The casting office."""
    kind: Literal["office"] = "office"
    upgrades: list[UpgradeOffer] = Field(default_factory=list)

    def find_upgrade(self, level: int, currency: Currency) -> UpgradeOffer | None:
        for offer in self.upgrades:
            if offer.level == level and offer.currency == currency:
                return offer
        return None


Location = Annotated[
    Union[PlainLocation, ShootingLocation, OfficeLocation],
    Field(discriminator="kind"),
]


class Board(BaseModel):
    """
    All locations keyed by case-insensitive name.

    Topology is fixed once built: neighbors must exist, edges must be
    symmetric and every location must be reachable from the rest location.
    """
    locations: dict[str, Location]
    rest_key: str
    office_key: str

    @model_validator(mode="after")
    def _check_topology(self) -> "Board":
        rest = self.locations.get(self.rest_key)
        if not isinstance(rest, PlainLocation):
            raise ValueError(f"rest location {self.rest_key!r} is not a plain location")
        office = self.locations.get(self.office_key)
        if not isinstance(office, OfficeLocation):
            raise ValueError(f"office {self.office_key!r} is not an office location")

        for key, location in self.locations.items():
            if key != location.key:
                raise ValueError(f"location {location.name!r} filed under {key!r}")
            for neighbor in location.neighbors:
                other = self.locations.get(neighbor)
                if other is None:
                    raise ValueError(f"{location.name}: unknown neighbor {neighbor!r}")
                if key not in other.neighbors:
                    raise ValueError(
                        f"edge {location.name} -> {other.name} has no way back"
                    )

        seen = {self.rest_key}
        frontier = [self.rest_key]
        while frontier:
            for neighbor in self.locations[frontier.pop()].neighbors:
                if neighbor not in seen:
                    seen.add(neighbor)
                    frontier.append(neighbor)
        unreachable = [loc.name for key, loc in self.locations.items() if key not in seen]
        if unreachable:
            raise ValueError(f"board is not connected, unreachable: {', '.join(unreachable)}")
        return self

    def get(self, name: str) -> Location | None:
        """Look up a location by name, ignoring case."""
        return self.locations.get(location_key(name))

    @property
    def sets(self) -> list[ShootingLocation]:
        """Filming sets in board order."""
        return [loc for loc in self.locations.values() if isinstance(loc, ShootingLocation)]

    @property
    def rest(self) -> PlainLocation:
        return self.locations[self.rest_key]

    @property
    def office(self) -> OfficeLocation:
        return self.locations[self.office_key]

    def neighbors_of(self, name: str) -> list[Location]:
        location = self.get(name)
        if location is None:
            return []
        return [self.locations[key] for key in location.neighbors]

    def count_active_sets(self) -> int:
        """Sets whose scene has not wrapped (active card and a take left)."""
        return sum(1 for loc in self.sets if not loc.is_wrapped)


# -----------------------------------------------------------------------------
# Players
# -----------------------------------------------------------------------------

class TurnFlags(BaseModel):
    """What the player has already done this turn. Reset at turn start."""
    moved: bool = False
    took_role: bool = False
    acted: bool = False
    rehearsed: bool = False


class Player(BaseModel):
    """A player's resources and position."""
    name: str
    rank: int = Field(default=MIN_RANK, ge=MIN_RANK, le=MAX_RANK)
    dollars: int = 0
    credits: int = 0
    location: str = ""           # Location key
    role_id: str | None = None   # Current role handle
    rehearsal: int = 0           # Bonus added to the acting die
    flags: TurnFlags = Field(default_factory=TurnFlags)

    @property
    def is_working(self) -> bool:
        return self.role_id is not None

    @property
    def score(self) -> int:
        """Final score: dollars + credits + rank."""
        return self.dollars + self.credits + self.rank

    def start_turn(self) -> None:
        self.flags = TurnFlags()


# -----------------------------------------------------------------------------
# Game
# -----------------------------------------------------------------------------

class Game(BaseModel):
    """
    Everything one session mutates: board, deck, players and day counters.

    Only the turn engine writes to this model.
    """
    board: Board
    deck: list[SceneCard]
    players: list[Player]
    active_index: int = 0
    day: int = 1
    total_days: int
    phase: DayPhase = DayPhase.SETUP

    @property
    def active_player(self) -> Player:
        return self.players[self.active_index]

    def player(self, name: str) -> Player | None:
        wanted = name.strip().lower()
        for player in self.players:
            if player.name.lower() == wanted:
                return player
        return None

    def card(self, card_id: str | None) -> SceneCard | None:
        if card_id is None:
            return None
        for card in self.deck:
            if card.id == card_id:
                return card
        return None

    def card_at(self, location: ShootingLocation) -> SceneCard | None:
        return self.card(location.card_id)

    def role(self, role_id: str | None) -> Role | None:
        """Resolve a role handle against set extras and the deck."""
        if role_id is None:
            return None
        for location in self.board.sets:
            for role in location.extras:
                if role.id == role_id:
                    return role
        for card in self.deck:
            for role in card.roles:
                if role.id == role_id:
                    return role
        return None

    def roles_at(self, location: ShootingLocation) -> list[Role]:
        """Extras first, then the card's starring roles while the scene runs."""
        roles = list(location.extras)
        card = self.card_at(location)
        if card is not None and not location.is_wrapped:
            roles.extend(card.roles)
        return roles

    def location_of(self, player: Player) -> Location:
        return self.board.locations[player.location]

    def describe(self, location: Location) -> str:
        """Short status line for a location, as shown by `where`."""
        if isinstance(location, ShootingLocation):
            card = self.card_at(location)
            if card is None or location.is_wrapped:
                return f"{location.name} (wrapped)"
            return f"{location.name} shooting {card.title} scene {card.scene_number}"
        return location.name
