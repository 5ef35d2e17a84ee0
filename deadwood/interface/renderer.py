"""
Display and rendering helpers for the Deadwood REPL.

Handles theming, the banner, and tables/panels for engine views.
Everything here reads views and results; nothing touches the engine state.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from prompt_toolkit.styles import Style as PTStyle

from ..state.schemas.command import CommandResult
from ..state.schemas.event import TurnEvent
from ..state.schemas.views import (
    LocationView,
    PlayerView,
    RoleView,
    ScoreLine,
    UpgradeView,
)


# Shared console instance
console = Console()

# -----------------------------------------------------------------------------
# Theme: dusty boomtown
# -----------------------------------------------------------------------------

THEME = {
    "primary": "dark_goldenrod",  # brass and lamplight
    "secondary": "wheat1",        # sun-bleached boards
    "warning": "orange3",
    "danger": "red3",
    "accent": "gold1",            # marquee bulbs
    "dim": "dim",
    "text": "grey85",
    "money": "green3",
    "credit": "light_sky_blue1",
}

# Prompt toolkit style to match theme
pt_style = PTStyle.from_dict({
    "completion-menu.completion": "bg:#3b2f1e #e8d9b0",
    "completion-menu.completion.current": "bg:#8b6914 #ffffff bold",
    "completion-menu.meta.completion": "bg:#3b2f1e #a08c64",
    "completion-menu.meta.completion.current": "bg:#8b6914 #e8d9b0",
    "scrollbar.background": "bg:#3b2f1e",
    "scrollbar.button": "bg:#8b6914",
})

# Events worth a line in the feed after a command
FEED_EVENTS = {
    "scene.wrapped",
    "role.released",
    "day.ended",
    "day.started",
    "game.over",
}


def _style(key: str, text: str) -> str:
    return f"[{THEME[key]}]{text}[/{THEME[key]}]"


def show_banner():
    """Display the Deadwood banner."""
    banner_lines = [
        "   ____                 _                         _",
        "  |  _ \\  ___  __ _  __| |_      _____   ___   __| |",
        "  | | | |/ _ \\/ _` |/ _` \\ \\ /\\ / / _ \\ / _ \\ / _` |",
        "  | |_| |  __/ (_| | (_| |\\ V  V / (_) | (_) | (_| |",
        "  |____/ \\___|\\__,_|\\__,_| \\_/\\_/ \\___/ \\___/ \\__,_|",
    ]
    text = Text()
    for line in banner_lines:
        text.append(line + "\n", style=f"bold {THEME['primary']}")
    text.append("        the cheapest studio in the West\n", style=THEME["secondary"])
    console.print(text)


def render_result(result: CommandResult) -> None:
    """Print a command outcome, then any wrap/day/game events it caused."""
    if not result.ok:
        console.print(_style("warning", escape(result.message)))
        return

    console.print(escape(result.summary))
    for event in result.events:
        if event.event_type in FEED_EVENTS:
            render_event(event)


def render_event(event: TurnEvent) -> None:
    if event.event_type == "scene.wrapped":
        dice = event.payload.get("dice") or []
        body = escape(event.summary)
        if dice:
            body += f"\n{_style('dim', 'Dice: ' + ' '.join(str(d) for d in dice))}"
        console.print(Panel(body, title="That's a wrap!", border_style=THEME["accent"]))
    elif event.event_type == "day.started":
        console.print(Panel(escape(event.summary), border_style=THEME["primary"]))
    elif event.event_type == "game.over":
        console.print(Panel(escape(event.summary), border_style=THEME["danger"]))
    else:
        console.print(_style("dim", escape(event.summary)))


def render_player(view: PlayerView, where: str | None = None) -> None:
    """The `who` panel for one player."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style=THEME["dim"])
    table.add_column("Value", style=THEME["secondary"])
    table.add_row("Rank", str(view.rank))
    table.add_row("Dollars", _style("money", f"${view.dollars}"))
    table.add_row("Credits", _style("credit", f"{view.credits}cr"))
    table.add_row("Location", escape(where or view.location))
    table.add_row("Role", escape(view.role_label))
    if view.role is not None:
        table.add_row("Rehearsal", f"+{view.rehearsal}")
    console.print(Panel(table, title=f"[bold]{escape(view.name)}[/bold]", border_style=THEME["primary"]))


def render_players(views: list[PlayerView]) -> None:
    """All players, in turn order."""
    table = Table(title="Players", border_style=THEME["primary"])
    table.add_column("")
    table.add_column("Name")
    table.add_column("Rank", justify="right")
    table.add_column("$", justify="right", style=THEME["money"])
    table.add_column("cr", justify="right", style=THEME["credit"])
    table.add_column("Location")
    table.add_column("Role")
    for view in views:
        table.add_row(
            ">" if view.active else "",
            escape(view.name),
            str(view.rank),
            str(view.dollars),
            str(view.credits),
            escape(view.location),
            escape(view.role_label),
        )
    console.print(table)


def render_locations(views: list[LocationView]) -> None:
    """Board overview: each location's status and who stands there."""
    table = Table(title="Board", border_style=THEME["primary"])
    table.add_column("Location")
    table.add_column("Status")
    table.add_column("Takes", justify="right")
    table.add_column("Budget", justify="right")
    table.add_column("Players")
    for view in views:
        table.add_row(
            escape(view.name),
            escape(view.status),
            "" if view.takes_left is None else str(view.takes_left),
            "" if view.budget is None else str(view.budget),
            escape(", ".join(view.occupants)),
        )
    console.print(table)


def render_roles(roles: list[RoleView], where: str) -> None:
    """Roles at a set; ineligible roles are dimmed."""
    if not roles:
        console.print(_style("dim", f"No roles at {escape(where)}."))
        return

    table = Table(title=f"Roles at {escape(where)}", border_style=THEME["primary"])
    table.add_column("Role")
    table.add_column("Kind")
    table.add_column("Level", justify="right")
    table.add_column("Taken by")
    table.add_column("Line", style=THEME["dim"])
    for role in roles:
        name = escape(role.name)
        if not role.eligible:
            name = _style("dim", name)
        table.add_row(
            name,
            "starring" if role.starring else "extra",
            str(role.level),
            escape(role.occupant or ""),
            escape(f'"{role.line}"') if role.line else "",
        )
    console.print(table)


def render_upgrades(offers: list[UpgradeView], rank: int) -> None:
    if not offers:
        console.print(_style("dim", f"No upgrades above rank {rank} on offer."))
        return

    table = Table(title="Casting Office", border_style=THEME["primary"])
    table.add_column("Rank", justify="right")
    table.add_column("Currency")
    table.add_column("Cost", justify="right")
    for offer in offers:
        cost = str(offer.cost) if offer.affordable else _style("dim", str(offer.cost))
        table.add_row(str(offer.level), offer.currency.value, cost)
    console.print(table)


def render_scores(lines: list[ScoreLine], title: str = "Final Scores") -> None:
    """Score table, highest first."""
    table = Table(title=title, border_style=THEME["accent"])
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("$", justify="right", style=THEME["money"])
    table.add_column("cr", justify="right", style=THEME["credit"])
    table.add_column("Rank", justify="right")
    table.add_column("Score", justify="right", style="bold")
    for line in lines:
        table.add_row(
            str(line.place),
            escape(line.name),
            str(line.dollars),
            str(line.credits),
            str(line.rank),
            str(line.score),
        )
    console.print(table)


def show_help(commands_by_category: dict) -> None:
    """Show available commands grouped by category."""
    table = Table(title="Commands", border_style=THEME["primary"], show_header=False)
    table.add_column("Command", style=THEME["accent"])
    table.add_column("Description")
    for category, commands in commands_by_category.items():
        if not commands:
            continue
        table.add_row(f"[bold]{category.value}[/bold]", "")
        for cmd in commands:
            aliases = f" {_style('dim', '(' + ', '.join(cmd.aliases) + ')')}" if cmd.aliases else ""
            table.add_row(f"  {escape(cmd.signature)}", cmd.description + aliases)
    console.print(table)
