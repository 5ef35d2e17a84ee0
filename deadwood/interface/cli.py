"""
Command-line interface for Deadwood.

Main entry point and game loop. One session, players taking turns at the
same keyboard; the prompt shows whose turn it is.
"""

import argparse
import logging
import sys
from pathlib import Path

from prompt_toolkit import prompt as pt_prompt
from rich.markup import escape

from ..state.event_bus import EventType, get_event_bus
from ..state.loader import ConfigError
from ..systems.session import new_game
from ..systems.turns import TurnEngine
from ..simulation.runner import create_bots, run_simulation
from .command_registry import create_completer
from .commands import dispatch, register_all_commands
from .config import DEFAULT_CONFIG_DIR, load_config
from .renderer import (
    THEME,
    console,
    render_event,
    render_scores,
    pt_style,
    show_banner,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deadwood",
        description="Deadwood - bit-part actors in the cheapest studio in the West",
    )
    parser.add_argument(
        "players",
        type=int,
        nargs="?",
        help="Number of players, 2 to 8 (default from config)",
    )
    parser.add_argument("--board", type=Path, help="Board file (YAML or JSON)")
    parser.add_argument("--cards", type=Path, help="Scene deck file (YAML or JSON)")
    parser.add_argument("--seed", type=int, help="Seed for reproducible dice and shuffles")
    parser.add_argument(
        "--no-banner", "-q",
        action="store_true",
        help="Skip the banner",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log engine activity",
    )
    parser.add_argument(
        "--autoplay",
        action="store_true",
        help="Let bots play every seat and print the result",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=DEFAULT_CONFIG_DIR,
        help=argparse.SUPPRESS,
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> dict:
    """Stored config overlaid with command-line flags."""
    config = load_config(args.config_dir)
    return {
        "players": args.players if args.players is not None else config.get("players", 3),
        "board_path": args.board or config.get("board_path"),
        "cards_path": args.cards or config.get("cards_path"),
        "seed": args.seed if args.seed is not None else config.get("seed"),
        "show_banner": config.get("show_banner", True) and not args.no_banner,
    }


def autoplay(engine: TurnEngine, seed: int | None) -> None:
    names = [p.name for p in engine.board_summary()]
    transcript = run_simulation(engine, create_bots(names, seed=seed), seed=seed)
    console.print(
        f"[{THEME['dim']}]{len(transcript.turns)} turns, "
        f"{transcript.wraps} scenes wrapped[/{THEME['dim']}]"
    )
    if transcript.finished:
        render_scores(transcript.scores)


def play(engine: TurnEngine) -> None:
    """The interactive loop. Returns when the game is over or input ends."""
    completer = create_completer(lambda: engine)
    console.print(f"[{THEME['dim']}]Type help for commands.[/{THEME['dim']}]\n")

    while not engine.is_game_over():
        try:
            player = engine.active_player()
            user_input = pt_prompt(
                f"[day {engine.day}] {player.name} > ",
                completer=completer,
                style=pt_style,
                complete_while_typing=True,
            ).strip()
            if not user_input:
                continue
            dispatch(engine, user_input)
        except KeyboardInterrupt:
            console.print(f"\n[{THEME['dim']}]Use quit to end the game[/{THEME['dim']}]")
        except EOFError:
            break

    if engine.is_game_over():
        render_scores(engine.final_scores())


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    settings = resolve_settings(args)
    if settings["show_banner"]:
        show_banner()

    try:
        engine = new_game(
            settings["players"],
            board_path=settings["board_path"],
            cards_path=settings["cards_path"],
            seed=settings["seed"],
        )
    except ConfigError as e:
        console.print(f"[{THEME['danger']}]Cannot start: {escape(str(e))}[/{THEME['danger']}]")
        return 2

    opening = get_event_bus().get_history(EventType.DAY_STARTED)
    if opening:
        render_event(opening[-1])

    if args.autoplay:
        autoplay(engine, settings["seed"])
        return 0

    register_all_commands(args.config_dir)
    play(engine)
    return 0


if __name__ == "__main__":
    sys.exit(main())
