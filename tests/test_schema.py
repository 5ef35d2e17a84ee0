"""Tests for the state models."""

import pytest
from pydantic import ValidationError

from deadwood.state.schema import (
    Board,
    Currency,
    Game,
    OfficeLocation,
    PlainLocation,
    Player,
    Role,
    SceneCard,
    ShootingLocation,
    Take,
    UpgradeOffer,
    location_key,
    slugify,
)


class TestNames:
    """Lookup keys and id slugs."""

    def test_location_key_ignores_case_and_spacing(self):
        assert location_key("  Main   STREET ") == "main street"

    def test_slugify(self):
        assert slugify("Falls off Roof") == "falls_off_roof"
        assert slugify("Railroad Worker") == "railroad_worker"
        assert slugify("Buffalo Bill - The Lost Years") == "buffalo_bill___the_lost_years"
        assert slugify("I'm a man") == "im_a_man"


class TestCurrency:
    """Currency literal parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("dollar", Currency.DOLLAR),
        ("Dollars", Currency.DOLLAR),
        ("  CREDIT ", Currency.CREDIT),
        ("credits", Currency.CREDIT),
    ])
    def test_parse(self, text, expected):
        assert Currency.parse(text) == expected

    def test_parse_passes_enum_through(self):
        assert Currency.parse(Currency.CREDIT) is Currency.CREDIT

    def test_unknown_literal_raises(self):
        with pytest.raises(ValueError):
            Currency.parse("pesos")


class TestRolesAndCards:
    """Role, card and upgrade constraints."""

    def test_role_kind(self):
        assert Role(id="a/b", name="B", level=1).kind == "extra"
        assert Role(id="a/b", name="B", level=1, starring=True).kind == "starring"

    def test_role_level_bounds(self):
        with pytest.raises(ValidationError):
            Role(id="a/b", name="B", level=0)
        with pytest.raises(ValidationError):
            Role(id="a/b", name="B", level=7)

    def test_card_budget_must_be_positive(self):
        with pytest.raises(ValidationError):
            SceneCard(id="c", title="C", budget=0, scene_number=1)

    def test_clear_roles(self):
        card = SceneCard(
            id="c", title="C", budget=2, scene_number=1,
            roles=[Role(id="c/x", name="X", level=1, starring=True, occupant="blue")],
        )
        card.clear_roles()
        assert card.roles[0].available

    def test_upgrade_level_range(self):
        with pytest.raises(ValidationError):
            UpgradeOffer(level=1, currency="dollar", cost=1)
        with pytest.raises(ValidationError):
            UpgradeOffer(level=7, currency="credit", cost=1)


class TestShootingLocation:
    """Take bookkeeping on a set."""

    def _set(self) -> ShootingLocation:
        return ShootingLocation(
            name="Jail",
            takes=[Take(number=1), Take(number=2)],
            extras=[Role(id="jail/x", name="X", level=1, occupant="blue")],
            card_id="c2",
        )

    def test_active_set_is_not_wrapped(self):
        assert not self._set().is_wrapped

    def test_wrapped_without_card(self):
        location = self._set()
        location.card_id = None
        assert location.is_wrapped

    def test_wrapped_without_active_takes(self):
        location = self._set()
        for take in location.takes:
            take.active = False
        assert location.is_wrapped

    def test_reset_for_day(self):
        location = self._set()
        location.takes[0].active = False
        location.wrapped = True
        location.reset_for_day()

        assert location.card_id is None
        assert not location.wrapped
        assert all(t.active for t in location.takes)
        assert location.extras[0].available


class TestBoard:
    """Topology validation on the Board model itself."""

    def _locations(self) -> dict:
        return {
            "trailer": PlainLocation(name="Trailer", neighbors=["office"]),
            "office": OfficeLocation(name="Office", neighbors=["trailer"]),
        }

    def test_valid_board(self):
        board = Board(locations=self._locations(), rest_key="trailer", office_key="office")
        assert board.rest.name == "Trailer"
        assert board.office.name == "Office"
        assert board.sets == []

    def test_one_way_edge_rejected(self):
        locations = self._locations()
        locations["office"].neighbors = []
        with pytest.raises(ValidationError, match="no way back"):
            Board(locations=locations, rest_key="trailer", office_key="office")

    def test_disconnected_rejected(self):
        locations = self._locations()
        locations["shed"] = PlainLocation(name="Shed")
        with pytest.raises(ValidationError, match="not connected"):
            Board(locations=locations, rest_key="trailer", office_key="office")

    def test_rest_must_be_plain(self):
        with pytest.raises(ValidationError, match="not a plain location"):
            Board(locations=self._locations(), rest_key="office", office_key="office")

    def test_get_is_case_insensitive(self, board):
        assert board.get("MAIN street").name == "Main Street"
        assert board.get("Nowhere") is None

    def test_neighbors_of(self, board):
        names = [loc.name for loc in board.neighbors_of("Jail")]
        assert names == ["Main Street", "Casting Office"]

    def test_sets_in_board_order(self, board):
        assert [s.name for s in board.sets] == ["Main Street", "Saloon", "Jail", "Hotel"]


class TestPlayer:
    """Player score and per-turn flags."""

    def test_score(self):
        player = Player(name="blue", rank=3, dollars=4, credits=5)
        assert player.score == 12

    def test_start_turn_clears_flags(self):
        player = Player(name="blue")
        player.flags.moved = True
        player.flags.acted = True
        player.start_turn()
        assert not player.flags.moved
        assert not player.flags.acted

    def test_rank_bounds(self):
        with pytest.raises(ValidationError):
            Player(name="blue", rank=7)


class TestGame:
    """Handle resolution on the Game aggregate."""

    def test_describe(self, engine, wrap_set):
        game = engine.game
        assert game.describe(game.board.get("Jail")) == "Jail shooting The Way the West Was Run scene 14"
        assert game.describe(game.board.rest) == "Trailer"
        wrap_set("Jail")
        assert game.describe(game.board.get("Jail")) == "Jail (wrapped)"

    def test_role_lookup(self, engine):
        game = engine.game
        assert game.role("set:main_street/railroad_worker").name == "Railroad Worker"
        assert game.role("card:c0/mean_pete").starring
        assert game.role("nope") is None
        assert game.role(None) is None

    def test_roles_at_hides_card_roles_once_wrapped(self, engine, wrap_set):
        game = engine.game
        jail = game.board.get("Jail")
        assert [r.name for r in game.roles_at(jail)] == ["Prisoner In Cell", "Feller in Irons", "Dog Trainer"]
        wrap_set("Jail")
        assert [r.name for r in game.roles_at(jail)] == ["Prisoner In Cell", "Feller in Irons"]

    def test_player_lookup_is_case_insensitive(self, engine):
        assert engine.game.player("CYAN").name == "cyan"
        assert engine.game.player("magenta") is None

    def test_game_defaults(self, board, deck):
        game = Game(board=board, deck=deck, players=[Player(name="a")], total_days=3)
        assert game.day == 1
        assert game.phase.value == "setup"
