"""
Session setup: build a Game from static data and deal the first day.
"""

import logging
from pathlib import Path

from ..rules.scoring import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLAYER_COLORS,
    starting_dollars,
    total_days,
)
from ..state.event_bus import EventBus
from ..state.loader import (
    DEFAULT_BOARD_PATH,
    DEFAULT_CARDS_PATH,
    ConfigError,
    load_board,
    load_deck,
)
from ..state.schema import Board, Game, Player, SceneCard
from ..tools.dice import Dice
from .turns import TurnEngine

logger = logging.getLogger(__name__)


def setup(
    player_count: int,
    board: Board,
    deck: list[SceneCard],
    *,
    seed: int | None = None,
    names: list[str] | None = None,
    dice: Dice | None = None,
    bus: EventBus | None = None,
) -> TurnEngine:
    """
    Create a session and deal day 1.

    The board and deck are deep-copied, so one loaded board can seed many
    sessions.

    Args:
        player_count: 2 to 8
        board: Validated board
        deck: Scene cards, any order (they are shuffled each day)
        seed: Seed for the session's Dice (ignored when dice is given)
        names: Player names in turn order; defaults to the colour names
        dice: Dice to use instead of a seeded one
        bus: Event bus (defaults to the global one)

    Raises:
        ConfigError: Player count outside 2-8, bad names, no sets, empty deck
    """
    if not MIN_PLAYERS <= player_count <= MAX_PLAYERS:
        raise ConfigError(
            f"Deadwood needs {MIN_PLAYERS} to {MAX_PLAYERS} players, got {player_count}"
        )
    if names is None:
        names = PLAYER_COLORS[:player_count]
    names = [n.strip() for n in names]
    if len(names) != player_count:
        raise ConfigError(f"Expected {player_count} player names, got {len(names)}")
    if any(not n for n in names) or len({n.lower() for n in names}) != len(names):
        raise ConfigError("Player names must be non-empty and unique")
    if not board.sets:
        raise ConfigError("The board has no filming sets")
    if not deck:
        raise ConfigError("The scene deck is empty")

    board = board.model_copy(deep=True)
    deck = [card.model_copy(deep=True) for card in deck]
    players = [
        Player(
            name=name,
            dollars=starting_dollars(player_count),
            location=board.rest_key,
        )
        for name in names
    ]
    game = Game(
        board=board,
        deck=deck,
        players=players,
        total_days=total_days(player_count),
    )

    engine = TurnEngine(game, dice=dice or Dice(seed), bus=bus)
    logger.info(
        "New game: %d players, %d days, %d sets, %d cards",
        player_count, game.total_days, len(board.sets), len(deck),
    )
    engine.begin()
    return engine


def new_game(
    player_count: int,
    board_path: Path | str | None = None,
    cards_path: Path | str | None = None,
    **kwargs,
) -> TurnEngine:
    """Load board and deck files (the bundled ones by default) and set up."""
    board = load_board(board_path or DEFAULT_BOARD_PATH)
    deck = load_deck(cards_path or DEFAULT_CARDS_PATH)
    return setup(player_count, board, deck, **kwargs)
