"""
Command handlers for the Deadwood REPL.

Each command function takes (engine, args) and returns the engine's
CommandResult for turn commands, or None for info commands. Handlers
print through the renderer; the engine never prints.
"""

from pathlib import Path

from rich.markup import escape

from ..state.schemas.command import CommandResult
from ..systems.turns import TurnEngine
from .command_registry import CommandCategory, get_registry, register_command
from .config import DEFAULT_CONFIG_DIR, set_show_banner
from .renderer import (
    THEME,
    console,
    render_locations,
    render_player,
    render_players,
    render_result,
    render_roles,
    render_scores,
    render_upgrades,
    show_help,
)


def _usage(text: str) -> None:
    console.print(f"[{THEME['warning']}]Usage: {text}[/{THEME['warning']}]")


# -----------------------------------------------------------------------------
# Info Commands
# -----------------------------------------------------------------------------

def cmd_who(engine: TurnEngine, args: list[str]):
    """Show the active player."""
    player = engine.active_player()
    render_player(player, where=_where(engine))


def _where(engine: TurnEngine) -> str:
    location = engine.active_player().location
    for view in engine.locations():
        if view.name == location:
            return view.status
    return location


def cmd_where(engine: TurnEngine, args: list[str]):
    """Show where the active player is and where they can go."""
    console.print(f"[bold]{escape(_where(engine))}[/bold]")
    adjacent = engine.adjacent_locations()
    console.print(f"[{THEME['dim']}]Adjacent: {escape(', '.join(adjacent))}[/{THEME['dim']}]")


def cmd_board(engine: TurnEngine, args: list[str]):
    """Show every player, or every location with `board map`."""
    if args and args[0].lower() in ("map", "locations", "sets"):
        render_locations(engine.locations())
        return
    console.print(f"[{THEME['dim']}]Day {engine.day} of {engine.total_days}[/{THEME['dim']}]")
    render_players(engine.board_summary())


def cmd_roles(engine: TurnEngine, args: list[str]):
    """List roles at the active player's location, or at a named one."""
    where = " ".join(args) if args else engine.active_player().location
    render_roles(engine.roles_at(where), where)


def cmd_upgrades(engine: TurnEngine, args: list[str]):
    """List upgrades above the active player's rank (`upgrades all` includes unaffordable)."""
    show_all = bool(args) and args[0].lower() == "all"
    render_upgrades(
        engine.upgrade_offers(affordable_only=not show_all),
        engine.active_player().rank,
    )


def cmd_scores(engine: TurnEngine, args: list[str]):
    """Current standings, or the final table once the game is over."""
    if engine.is_game_over():
        render_scores(engine.final_scores())
    else:
        render_scores(engine.standings(), title="Standings")


def cmd_help(engine: TurnEngine, args: list[str]):
    show_help(get_registry().by_category())


def cmd_banner(engine: TurnEngine, args: list[str], config_dir: Path | str = DEFAULT_CONFIG_DIR):
    """Turn the startup banner on or off for future games."""
    if len(args) != 1 or args[0].lower() not in ("on", "off"):
        _usage("banner <on|off>")
        return
    show = args[0].lower() == "on"
    set_show_banner(show, config_dir)
    console.print(f"[{THEME['dim']}]Banner {'on' if show else 'off'} from the next game.[/{THEME['dim']}]")


# -----------------------------------------------------------------------------
# Turn Commands
# -----------------------------------------------------------------------------

def cmd_move(engine: TurnEngine, args: list[str]) -> CommandResult | None:
    if not args:
        _usage("move <room>")
        return None
    result = engine.move(" ".join(args))
    render_result(result)
    return result


def cmd_work(engine: TurnEngine, args: list[str]) -> CommandResult | None:
    if not args:
        _usage("work <role>")
        return None
    result = engine.work(" ".join(args))
    render_result(result)
    if result.ok:
        line = result.events[0].payload.get("line")
        if line:
            console.print(f'[{THEME["dim"]}]  "{escape(line)}"[/{THEME["dim"]}]')
    return result


def cmd_act(engine: TurnEngine, args: list[str]) -> CommandResult:
    result = engine.act()
    render_result(result)
    return result


def cmd_rehearse(engine: TurnEngine, args: list[str]) -> CommandResult:
    result = engine.rehearse()
    render_result(result)
    return result


def cmd_upgrade(engine: TurnEngine, args: list[str]) -> CommandResult | None:
    """Buy a rank: `upgrade <rank> <dollar|credit>`."""
    if len(args) != 2 or not args[0].isdigit():
        _usage("upgrade <rank> <dollar|credit>")
        return None
    try:
        result = engine.upgrade(int(args[0]), args[1])
    except ValueError as e:
        console.print(f"[{THEME['warning']}]Unknown currency {escape(repr(args[1]))}: {escape(str(e))}[/{THEME['warning']}]")
        return None
    render_result(result)
    return result


def cmd_end(engine: TurnEngine, args: list[str]) -> CommandResult:
    result = engine.end()
    render_result(result)
    return result


def cmd_quit(engine: TurnEngine, args: list[str]) -> CommandResult:
    result = engine.quit()
    render_result(result)
    return result


# -----------------------------------------------------------------------------
# Registration
# -----------------------------------------------------------------------------

def register_all_commands(config_dir: Path | str = DEFAULT_CONFIG_DIR) -> None:
    """
    Register every REPL command with the global registry.

    config_dir is where `banner` saves the preference.
    """
    registry = get_registry()
    if registry.get("move") is not None:
        return

    # Turn
    register_command("move", "Move to an adjacent location", CommandCategory.TURN,
                     handler=cmd_move, usage="<room>")
    register_command("work", "Take a role at this set", CommandCategory.TURN,
                     handler=cmd_work, usage="<role>", aliases=["role", "take"])
    register_command("act", "Roll to act in your role", CommandCategory.TURN,
                     handler=cmd_act)
    register_command("rehearse", "Add +1 to future act rolls", CommandCategory.TURN,
                     handler=cmd_rehearse, aliases=["r"])
    register_command("upgrade", "Buy a rank at the casting office", CommandCategory.TURN,
                     handler=cmd_upgrade, usage="<rank> <dollar|credit>")
    register_command("end", "End your turn", CommandCategory.TURN,
                     handler=cmd_end)

    # Info
    register_command("who", "Show the active player", CommandCategory.INFO,
                     handler=cmd_who)
    register_command("where", "Show your location and exits", CommandCategory.INFO,
                     handler=cmd_where)
    register_command("board", "Show all players (`board map` for locations)", CommandCategory.INFO,
                     handler=cmd_board, aliases=["players"])
    register_command("roles", "List roles at a set", CommandCategory.INFO,
                     handler=cmd_roles, usage="[set]")
    register_command("upgrades", "List rank upgrades", CommandCategory.INFO,
                     handler=cmd_upgrades, usage="[all]")
    register_command("scores", "Show standings", CommandCategory.INFO,
                     handler=cmd_scores, aliases=["standings"])

    # System
    register_command("help", "Show this help", CommandCategory.SYSTEM,
                     handler=cmd_help, aliases=["?"])
    register_command("banner", "Show or hide the startup banner", CommandCategory.SYSTEM,
                     handler=lambda engine, args: cmd_banner(engine, args, config_dir),
                     usage="<on|off>")
    register_command("quit", "End the game now and score it", CommandCategory.SYSTEM,
                     handler=cmd_quit, aliases=["q", "end game", "exit"])


def dispatch(engine: TurnEngine, line: str):
    """
    Parse one input line and run its handler.

    Returns whatever the handler returned, or None for blank or unknown
    input (unknown commands get an autocorrect hint).
    """
    registry = get_registry()
    command, args = registry.parse(line)
    if command is None:
        if args:
            _, note = registry.autocorrect(args[0].lower())
            hint = f" {note}" if note else ""
            console.print(f"[{THEME['warning']}]Unknown command: {escape(args[0])}.{hint}[/{THEME['warning']}]")
        return None

    return command.handler(engine, args)
