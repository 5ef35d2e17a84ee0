"""
Command registry for the Deadwood table.

Every typed command lives here once: the REPL parses lines against it,
`help` groups it by category and the prompt completes from it. Handlers
register themselves through register_command().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..systems.turns import TurnEngine


class CommandCategory(str, Enum):
    """Help sections, in display order."""
    TURN = "Turn"
    INFO = "Info"
    SYSTEM = "System"


CommandHandler = Callable[["TurnEngine", list[str]], Any]

# Suggestions below this score are not offered as corrections
CONFIDENT_MATCH = 500


@dataclass
class Command:
    """
    One verb the players can type.

    Attributes:
        name: Canonical word, e.g. "move"
        description: One line for help and the completion menu
        category: Help section
        handler: Called as handler(engine, args)
        usage: Argument hint, e.g. "<room>"
        aliases: Other spellings, possibly several words ("end game")
        hidden: Left out of help and completion
    """
    name: str
    description: str
    category: CommandCategory
    handler: CommandHandler | None = None
    usage: str = ""
    aliases: list[str] = field(default_factory=list)
    hidden: bool = False

    @property
    def signature(self) -> str:
        return f"{self.name} {self.usage}".strip()

    @property
    def spellings(self) -> list[str]:
        return [self.name, *self.aliases]


def fuzzy_match(pattern: str, text: str) -> tuple[bool, int]:
    """
    Score a typed fragment against a command word.

    A prefix beats any scattered match, and shorter words win among
    prefixes. Otherwise every letter of the fragment must appear in order;
    adjacent hits score up and the spread between first and last hit
    scores down.

    Returns:
        (matched, score)
    """
    pattern = pattern.lower()
    text = text.lower()
    if text.startswith(pattern):
        return True, 1000 - len(text)

    hits: list[int] = []
    start = 0
    for char in pattern:
        found = text.find(char, start)
        if found < 0:
            return False, 0
        hits.append(found)
        start = found + 1

    adjacent = sum(1 for a, b in zip(hits, hits[1:]) if b == a + 1)
    score = 100 * len(hits) + 60 * adjacent - 5 * (hits[-1] - hits[0])
    return True, max(score, 1)


class CommandRegistry:
    """
    Name and alias lookup for the table's commands.

    Lines are parsed longest phrase first, so a multi-word alias such as
    "end game" shadows the single word "end".
    """

    def __init__(self):
        self._by_spelling: dict[str, Command] = {}
        self._order: list[Command] = []

    def register(self, command: Command) -> None:
        """Add a command, replacing any earlier one with the same name."""
        existing = self._by_spelling.get(command.name)
        if existing is not None:
            self._order = [c for c in self._order if c.name != existing.name]
            for spelling in existing.spellings:
                self._by_spelling.pop(spelling.lower(), None)
        self._order.append(command)
        for spelling in command.spellings:
            self._by_spelling[spelling.lower()] = command

    def get(self, name: str) -> Command | None:
        return self._by_spelling.get(name.lower())

    def parse(self, line: str) -> tuple[Command | None, list[str]]:
        """
        Split an input line into (command, args).

        Args keep their original case. Unknown input returns
        (None, words); a blank line returns (None, []).
        """
        words = line.split()
        for length in range(len(words), 0, -1):
            command = self._by_spelling.get(" ".join(words[:length]).lower())
            if command is not None:
                return command, words[length:]
        return None, words

    def all_commands(self) -> list[Command]:
        """Registered commands in registration order, one entry each."""
        return list(self._order)

    def by_category(self) -> dict[CommandCategory, list[Command]]:
        """Visible commands grouped for help."""
        grouped: dict[CommandCategory, list[Command]] = {cat: [] for cat in CommandCategory}
        for command in self._order:
            if not command.hidden:
                grouped[command.category].append(command)
        return grouped

    def suggest(self, fragment: str) -> list[tuple[Command, int]]:
        """
        Visible commands matching a fragment, best first.

        Each command is scored by its best spelling. Ties fall back to help
        order.
        """
        scored: list[tuple[Command, int]] = []
        for command in self._order:
            if command.hidden:
                continue
            best = 0
            for spelling in command.spellings:
                matched, score = fuzzy_match(fragment, spelling)
                if matched:
                    best = max(best, score)
            if best:
                scored.append((command, best))
        scored.sort(key=lambda pair: -pair[1])
        return scored

    def autocorrect(self, word: str) -> tuple[str, str | None]:
        """
        Guess the command meant by a mistyped word.

        Returns (command name, note) for a confident guess, else (word, None).
        """
        if self.get(word) is not None:
            return word, None
        suggestions = self.suggest(word)
        if suggestions and suggestions[0][1] > CONFIDENT_MATCH:
            name = suggestions[0][0].name
            return name, f"Did you mean '{name}'?"
        return word, None


_registry: CommandRegistry | None = None


def get_registry() -> CommandRegistry:
    """Process-wide registry, created on first use."""
    global _registry
    if _registry is None:
        _registry = CommandRegistry()
    return _registry


def reset_registry() -> None:
    """Forget every registered command. Used between tests."""
    global _registry
    _registry = None


def register_command(
    name: str,
    description: str,
    category: CommandCategory,
    handler: CommandHandler | None = None,
    usage: str = "",
    aliases: list[str] | None = None,
    hidden: bool = False,
):
    """
    Register a command with the global registry.

    Pass handler= to register directly, or use it as a decorator:

        @register_command("act", "Roll to act", CommandCategory.TURN)
        def cmd_act(engine, args):
            ...
    """
    def attach(fn: CommandHandler) -> CommandHandler:
        get_registry().register(Command(
            name=name,
            description=description,
            category=category,
            handler=fn,
            usage=usage,
            aliases=list(aliases or []),
            hidden=hidden,
        ))
        return fn

    if handler is not None:
        attach(handler)
        return get_registry().get(name)
    return attach


def create_completer(engine_ref: Callable[[], "TurnEngine"] | None = None):
    """
    Build a prompt_toolkit completer over the registry.

    The first word completes to command names. After `move` it offers the
    active player's exits, after `work` the free roles where they stand.
    """
    from prompt_toolkit.completion import Completer, Completion

    def arguments_for(command: Command) -> list[str]:
        if engine_ref is None:
            return []
        engine = engine_ref()
        if engine.is_game_over():
            return []
        if command.name == "move":
            return engine.adjacent_locations()
        if command.name == "work":
            return [role.name for role in engine.available_roles()]
        return []

    class TableCompleter(Completer):
        def get_completions(self, document, complete_event):
            typed = document.text_before_cursor.lstrip()
            registry = get_registry()

            if " " not in typed:
                for command, _ in registry.suggest(typed):
                    yield Completion(
                        command.name,
                        start_position=-len(typed),
                        display=command.signature,
                        display_meta=command.description,
                    )
                return

            command, args = registry.parse(typed)
            if command is None:
                return
            verb_words = len(typed.split()) - len(args)
            pieces = typed.split(None, verb_words)
            partial = pieces[verb_words] if len(pieces) > verb_words else ""
            for option in arguments_for(command):
                if option.lower().startswith(partial.lower()):
                    yield Completion(option, start_position=-len(partial))

    return TableCompleter()
