"""State models, static data loading and events for Deadwood."""

from .schema import (
    MIN_RANK,
    MAX_RANK,
    Currency,
    LocationKind,
    DayPhase,
    Take,
    Role,
    SceneCard,
    UpgradeOffer,
    PlainLocation,
    ShootingLocation,
    OfficeLocation,
    Location,
    Board,
    TurnFlags,
    Player,
    Game,
    location_key,
    slugify,
)
from .event_bus import (
    EventBus,
    EventType,
    get_event_bus,
    reset_event_bus,
)
from .loader import (
    ConfigError,
    DEFAULT_BOARD_PATH,
    DEFAULT_CARDS_PATH,
    load_board,
    load_deck,
)

__all__ = [
    # Schema
    "MIN_RANK",
    "MAX_RANK",
    "Currency",
    "LocationKind",
    "DayPhase",
    "Take",
    "Role",
    "SceneCard",
    "UpgradeOffer",
    "PlainLocation",
    "ShootingLocation",
    "OfficeLocation",
    "Location",
    "Board",
    "TurnFlags",
    "Player",
    "Game",
    "location_key",
    "slugify",
    # Events
    "EventBus",
    "EventType",
    "get_event_bus",
    "reset_event_bus",
    # Loader
    "ConfigError",
    "DEFAULT_BOARD_PATH",
    "DEFAULT_CARDS_PATH",
    "load_board",
    "load_deck",
]
