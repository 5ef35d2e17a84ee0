"""Tests for the REPL command layer: registry, handlers, config and CLI."""

import json

import pytest

from deadwood.interface.cli import build_parser, main, resolve_settings
from deadwood.interface.command_registry import (
    CommandCategory,
    fuzzy_match,
    get_registry,
    register_command,
)
from deadwood.interface.commands import dispatch, register_all_commands
from deadwood.interface.config import (
    DEFAULT_CONFIG,
    get_config_path,
    load_config,
    save_config,
    set_show_banner,
)
from deadwood.interface.renderer import console
from deadwood.state.loader import load_board, load_deck
from deadwood.systems.session import setup


@pytest.fixture
def registry():
    register_all_commands()
    return get_registry()


def run(engine, line: str):
    """Dispatch one line and return (handler result, printed text)."""
    with console.capture() as capture:
        result = dispatch(engine, line)
    return result, capture.get()


class TestFuzzyMatch:
    """Fuzzy matching for completion and autocorrect."""

    def test_prefix_scores_highest(self):
        prefix = fuzzy_match("reh", "rehearse")
        scattered = fuzzy_match("rhs", "rehearse")
        assert prefix[0] and scattered[0]
        assert prefix[1] > scattered[1]

    def test_no_match(self):
        assert fuzzy_match("xyz", "move") == (False, 0)


class TestRegistry:
    """Parsing input lines into commands."""

    def test_single_word(self, registry):
        command, args = registry.parse("act")
        assert command.name == "act"
        assert args == []

    def test_arguments_keep_their_words(self, registry):
        command, args = registry.parse("move Main Street")
        assert command.name == "move"
        assert args == ["Main", "Street"]

    def test_aliases(self, registry):
        assert registry.parse("r")[0].name == "rehearse"
        assert registry.parse("role Mean Pete")[0].name == "work"
        assert registry.parse("players")[0].name == "board"

    def test_multi_word_alias_wins(self, registry):
        assert registry.parse("end game")[0].name == "quit"
        assert registry.parse("END")[0].name == "end"

    def test_unknown(self, registry):
        assert registry.parse("dance a jig") == (None, ["dance", "a", "jig"])
        assert registry.parse("   ") == (None, [])

    def test_registration_is_idempotent(self, registry):
        count = len(registry.all_commands())
        register_all_commands()
        assert len(registry.all_commands()) == count

    def test_help_categories(self, registry):
        grouped = registry.by_category()
        assert [c.name for c in grouped[CommandCategory.TURN]] == [
            "move", "work", "act", "rehearse", "upgrade", "end",
        ]
        assert "quit" in [c.name for c in grouped[CommandCategory.SYSTEM]]

    def test_autocorrect(self, registry):
        assert registry.autocorrect("upgr")[0] == "upgrade"
        assert registry.autocorrect("zzz") == ("zzz", None)

    def test_decorator_registration(self):
        @register_command("ping", "Test command", CommandCategory.SYSTEM, hidden=True)
        def cmd_ping(engine, args):
            return "pong"

        command = get_registry().get("ping")
        assert command.handler(None, []) == "pong"
        assert command not in get_registry().by_category()[CommandCategory.SYSTEM]


class TestDispatch:
    """Handlers drive the engine and print through the renderer."""

    def test_move(self, engine, registry):
        result, text = run(engine, "move main street")
        assert result.ok
        assert "blue moves to Main Street" in text

    def test_rejection_is_printed(self, engine, registry):
        result, text = run(engine, "move Jail")
        assert not result.ok
        assert "not adjacent" in text

    def test_work_prints_the_line(self, engine, registry):
        engine.move("Main Street")
        result, text = run(engine, "work Railroad Worker")
        assert result.ok
        assert "steel-drivin'" in text

    def test_usage_hint(self, engine, registry):
        result, text = run(engine, "move")
        assert result is None
        assert "Usage: move <room>" in text

    def test_bad_currency(self, engine, registry, place):
        place("blue", "Casting Office")
        result, text = run(engine, "upgrade 2 pesos")
        assert result is None
        assert "Unknown currency" in text

    def test_upgrade(self, engine, registry, place):
        place("blue", "Casting Office").dollars = 4
        result, _ = run(engine, "upgrade 2 dollars")
        assert result.ok
        assert engine.active_player().rank == 2

    def test_unknown_command_suggests(self, engine, registry):
        result, text = run(engine, "rehea")
        assert result is None
        assert "Did you mean 'rehearse'?" in text

    def test_info_commands(self, engine, registry):
        for line in ("who", "where", "board", "board map", "roles Main Street", "upgrades all", "scores", "help"):
            result, text = run(engine, line)
            assert result is None
            assert text

    def test_where_lists_exits(self, engine, registry):
        _, text = run(engine, "where")
        assert "Main Street, Saloon, Hotel" in text

    def test_end_game(self, engine, registry):
        result, text = run(engine, "end game")
        assert result.game_over
        assert "Game over!" in text

    def test_end_turn(self, engine, registry):
        result, _ = run(engine, "end")
        assert result.ok
        assert engine.active_player().name == "cyan"


class TestConfig:
    """JSON config persistence."""

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_round_trip(self, tmp_path):
        config = load_config(tmp_path)
        config["players"] = 5
        config["seed"] = 99
        assert save_config(config, tmp_path)
        assert load_config(tmp_path)["players"] == 5
        assert load_config(tmp_path)["seed"] == 99

    def test_corrupt_file_falls_back(self, tmp_path):
        get_config_path(tmp_path).write_text("{oops", encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_unknown_keys_ignored(self, tmp_path):
        get_config_path(tmp_path).write_text(json.dumps({"players": 4, "colour": "red"}), encoding="utf-8")
        config = load_config(tmp_path)
        assert config["players"] == 4
        assert "colour" not in config

    def test_set_show_banner(self, tmp_path):
        set_show_banner(False, tmp_path)
        assert load_config(tmp_path)["show_banner"] is False

    def test_banner_command_persists(self, engine, tmp_path):
        register_all_commands(tmp_path)
        result, text = run(engine, "banner off")
        assert result is None
        assert "Banner off" in text
        assert load_config(tmp_path)["show_banner"] is False

        run(engine, "banner ON")
        assert load_config(tmp_path)["show_banner"] is True

    def test_banner_command_usage(self, engine, tmp_path):
        register_all_commands(tmp_path)
        _, text = run(engine, "banner maybe")
        assert "Usage: banner <on|off>" in text
        assert not get_config_path(tmp_path).exists()

    def test_saved_banner_setting_is_read_back(self, engine, tmp_path):
        register_all_commands(tmp_path)
        run(engine, "banner off")
        args = build_parser().parse_args(["--config-dir", str(tmp_path)])
        assert resolve_settings(args)["show_banner"] is False


class TestCli:
    """Argument parsing and the non-interactive entry points."""

    def test_flags_override_config(self, tmp_path):
        save_config({**DEFAULT_CONFIG, "players": 5, "seed": 1}, tmp_path)
        args = build_parser().parse_args(["4", "--seed", "8", "--config-dir", str(tmp_path)])
        settings = resolve_settings(args)
        assert settings["players"] == 4
        assert settings["seed"] == 8

    def test_config_fills_gaps(self, tmp_path):
        save_config({**DEFAULT_CONFIG, "players": 5, "show_banner": False}, tmp_path)
        args = build_parser().parse_args(["--config-dir", str(tmp_path)])
        settings = resolve_settings(args)
        assert settings["players"] == 5
        assert settings["show_banner"] is False
        assert settings["board_path"] is None

    def test_bad_player_count_exits_2(self, tmp_path):
        with console.capture() as capture:
            code = main(["9", "-q", "--config-dir", str(tmp_path)])
        assert code == 2
        assert "Cannot start" in capture.get()

    def test_autoplay(self, tmp_path):
        with console.capture() as capture:
            code = main(["2", "--autoplay", "--seed", "4", "-q", "--config-dir", str(tmp_path)])
        assert code == 0
        assert "scenes wrapped" in capture.get()


class TestBracketedNames:
    """Names from data files are printed literally, never as console markup."""

    @pytest.fixture
    def bracket_engine(self, board_data, cards_data, dice):
        main_street = next(l for l in board_data["locations"] if l["name"] == "Main Street")
        main_street["extras"][0] = {"name": "Worker [/x]", "level": 1, "line": "[bold]Hey[/bold]"}
        return setup(3, load_board(board_data), load_deck(cards_data), dice=dice)

    def test_work_prints_the_name(self, bracket_engine, registry):
        run(bracket_engine, "move Main Street")
        result, text = run(bracket_engine, "work Worker [/x]")
        assert result.ok
        assert "takes the extra role Worker [/x]" in text
        assert '"[bold]Hey[/bold]"' in text

    def test_info_commands_survive(self, bracket_engine, registry):
        bracket_engine.move("Main Street")
        bracket_engine.work("Worker [/x]")
        for line in ("who", "board", "roles", "scores"):
            _, text = run(bracket_engine, line)
            assert text
