"""Tests for the validator and wrap resolver used on their own."""

from deadwood.state.schema import Currency
from deadwood.state.schemas.command import CommandType, RejectionReason
from deadwood.systems.validation import CommandValidator
from deadwood.systems.wrap import WrapResolver


class TestCommandValidator:
    """Validation is a pure check against the game."""

    def test_resolves_move_target(self, engine):
        check = CommandValidator().validate(CommandType.MOVE, engine.game, target="HOTEL")
        assert check.ok
        assert check.location_key == "hotel"

    def test_resolves_role(self, engine, place):
        place("blue", "Saloon")
        check = CommandValidator().validate(CommandType.WORK, engine.game, role_name="rug merchant")
        assert check.role_id == "card:c1/rug_merchant"

    def test_resolves_offer(self, engine, place):
        place("blue", "Casting Office").credits = 15
        check = CommandValidator().validate(
            CommandType.UPGRADE, engine.game, level=4, currency=Currency.CREDIT,
        )
        assert check.offer.cost == 15

    def test_never_mutates(self, engine, place):
        place("blue", "Main Street")
        before = engine.game.model_dump()
        validator = CommandValidator()
        validator.validate(CommandType.WORK, engine.game, role_name="Railroad Worker")
        validator.validate(CommandType.MOVE, engine.game, target="Saloon")
        validator.validate(CommandType.END, engine.game)
        assert engine.game.model_dump() == before

    def test_first_failing_check_reported(self, engine, cast):
        cast("blue", "Main Street", "Railroad Worker")
        engine.game.active_player.flags.moved = True
        check = CommandValidator().validate(CommandType.MOVE, engine.game, target="Mars")
        assert check.rejection.reason == RejectionReason.WORKING_ROLE

    def test_rejection_message(self, engine):
        check = CommandValidator().validate(CommandType.ACT, engine.game)
        assert check.rejection.message == "You are not working a role."


class TestWrapResolver:
    """Wrap payout without the engine around it."""

    def test_resolve(self, engine, cast, dice):
        cast("blue", "Main Street", "Sheriff")
        cast("cyan", "Main Street", "Mean Pete")
        main_street = engine.game.board.get("Main Street")
        dice.load(1, 2, 3, 4)

        outcome = WrapResolver(dice).resolve(engine.game, main_street)

        assert outcome.dice == [1, 2, 3, 4]
        assert outcome.dealt == [("blue", 4), ("cyan", 3), ("blue", 2), ("cyan", 1)]
        assert outcome.payouts == {"blue": 6, "cyan": 4}
        assert outcome.summary == "Evil Wears a Hat wraps at Main Street: blue $6, cyan $4"
        assert main_street.wrapped
        assert engine.game.player("blue").role_id is None
