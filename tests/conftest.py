"""
Pytest fixtures for Deadwood engine tests.

Provides a small hand-built board, an ordered deck and loaded dice so that
every scenario knows exactly which card sits on which set and what the
next roll will be.
"""

import pytest

from deadwood.interface.command_registry import reset_registry
from deadwood.rules.scenes import occupy
from deadwood.state import load_board, load_deck, location_key, reset_event_bus
from deadwood.systems.session import setup
from deadwood.tools.dice import Dice


UPGRADES = [
    {"level": 2, "currency": "dollar", "cost": 4},
    {"level": 3, "currency": "dollar", "cost": 10},
    {"level": 4, "currency": "dollar", "cost": 18},
    {"level": 5, "currency": "dollar", "cost": 28},
    {"level": 6, "currency": "dollar", "cost": 40},
    {"level": 2, "currency": "credit", "cost": 5},
    {"level": 3, "currency": "credit", "cost": 10},
    {"level": 4, "currency": "credit", "cost": 15},
    {"level": 5, "currency": "credit", "cost": 20},
    {"level": 6, "currency": "credit", "cost": 25},
]


def make_board_data() -> dict:
    """Four sets around the trailer and the casting office."""
    return {
        "rest": "Trailer",
        "locations": [
            {"name": "Trailer", "kind": "plain",
             "neighbors": ["Main Street", "Saloon", "Hotel"]},
            {"name": "Casting Office", "kind": "office",
             "neighbors": ["Hotel", "Jail"], "upgrades": UPGRADES},
            {"name": "Main Street", "kind": "shooting", "takes": 3,
             "neighbors": ["Trailer", "Saloon", "Jail"],
             "extras": [
                 {"name": "Railroad Worker", "level": 1, "line": "I'm a steel-drivin' man!"},
                 {"name": "Falls off Roof", "level": 2, "line": "Aaaaiiiigggghh!"},
             ]},
            {"name": "Saloon", "kind": "shooting", "takes": 2,
             "neighbors": ["Trailer", "Main Street"],
             "extras": [
                 {"name": "Reluctant Farmer", "level": 1},
                 {"name": "Woman in Red Dress", "level": 2},
             ]},
            {"name": "Jail", "kind": "shooting", "takes": 1,
             "neighbors": ["Main Street", "Casting Office"],
             "extras": [
                 {"name": "Prisoner In Cell", "level": 2},
                 {"name": "Feller in Irons", "level": 3},
             ]},
            {"name": "Hotel", "kind": "shooting", "takes": 3,
             "neighbors": ["Trailer", "Casting Office"],
             "extras": [
                 {"name": "Sleeping Drunkard", "level": 1},
                 {"name": "Faro Player", "level": 1},
             ]},
        ],
    }


def make_cards_data() -> dict:
    """Five cards; with identity shuffles the first four land on the sets in board order."""
    return {
        "cards": [
            {"id": "c0", "title": "Evil Wears a Hat", "budget": 4, "scene": 7,
             "roles": [{"name": "Mean Pete", "level": 1}, {"name": "Sheriff", "level": 3}]},
            {"id": "c1", "title": "Law and the Old West", "budget": 2, "scene": 20,
             "roles": [{"name": "Rug Merchant", "level": 1}, {"name": "Town Drunk", "level": 2},
                       {"name": "Mayor", "level": 4}]},
            {"id": "c2", "title": "The Way the West Was Run", "budget": 3, "scene": 14,
             "roles": [{"name": "Dog Trainer", "level": 1}]},
            {"id": "c3", "title": "Go West, You!", "budget": 5, "scene": 3,
             "roles": [{"name": "Cowhand", "level": 2}, {"name": "Gambler", "level": 5}]},
            {"id": "c4", "title": "Buffalo Bill", "budget": 1, "scene": 12,
             "roles": [{"name": "Buffalo Bill", "level": 1}]},
        ],
    }


class LoadedDice(Dice):
    """Dice that roll from a queue and never reorder the deck."""

    def __init__(self, rolls=None):
        super().__init__(seed=0)
        self.queue = list(rolls or [])

    def load(self, *rolls: int) -> None:
        self.queue.extend(rolls)

    def roll(self) -> int:
        if not self.queue:
            raise AssertionError("LoadedDice ran out of rolls")
        return self.queue.pop(0)

    def shuffle(self, items):
        return list(items)


@pytest.fixture(autouse=True)
def fresh_globals():
    """Every test starts with an empty event bus and command registry."""
    reset_event_bus()
    reset_registry()
    yield
    reset_event_bus()
    reset_registry()


@pytest.fixture
def board_data():
    return make_board_data()


@pytest.fixture
def cards_data():
    return make_cards_data()


@pytest.fixture
def board(board_data):
    return load_board(board_data)


@pytest.fixture
def deck(cards_data):
    return load_deck(cards_data)


@pytest.fixture
def dice():
    return LoadedDice()


@pytest.fixture
def engine(board, deck, dice):
    """Three players (blue, cyan, green), day 1 dealt, blue to play."""
    return setup(3, board, deck, dice=dice)


@pytest.fixture
def place(engine):
    """Put a player somewhere without spending a move."""
    def _place(name: str, location: str):
        player = engine.game.player(name)
        player.location = location_key(location)
        return player
    return _place


@pytest.fixture
def cast(engine, place):
    """Seat a player in a role at a set, as if they had taken it earlier."""
    def _cast(name: str, location: str, role_name: str):
        player = place(name, location)
        where = engine.game.board.get(location)
        role = next(r for r in engine.game.roles_at(where) if r.name == role_name)
        occupy(role, player)
        return player
    return _cast


@pytest.fixture
def wrap_set(engine):
    """Mark sets as already wrapped for today."""
    def _wrap(*names: str):
        for name in names:
            engine.game.board.get(name).wrapped = True
    return _wrap
