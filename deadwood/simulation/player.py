"""Bot player for simulation mode."""

import random

from ..state.schemas.command import CommandResult
from ..systems.turns import TurnEngine
from .personas import get_persona


class BotPlayer:
    """Plays Deadwood turns through the engine's public commands and queries."""

    def __init__(
        self,
        name: str,
        persona: str = "drifter",
        rng: random.Random | None = None,
    ):
        """
        Initialize a bot.

        Args:
            name: Player name this bot controls
            persona: One of: cautious, eager, drifter
            rng: Source for the bot's own choices (separate from the game dice)
        """
        self.name = name
        self.persona_name = persona
        self.persona = get_persona(persona)
        self.rng = rng or random.Random()
        self.decisions: list[str] = []

    def _roll(self, bias_key: str) -> bool:
        return self.rng.random() < self.persona[bias_key]

    def _still_my_turn(self, engine: TurnEngine, day: int) -> bool:
        """A wrap can end the day and hand the turn to the first player."""
        return (
            not engine.is_game_over()
            and engine.day == day
            and engine.active_player().name == self.name
        )

    def take_turn(self, engine: TurnEngine) -> list[CommandResult]:
        """
        Play one full turn, ending it unless the game or day moved on.

        Returns:
            Results of every command issued, in order
        """
        day = engine.day
        results: list[CommandResult] = []

        def issue(result: CommandResult) -> bool:
            results.append(result)
            if result.ok:
                self.decisions.append(result.command.value)
            return self._still_my_turn(engine, day)

        if self._play(engine, issue):
            issue(engine.end())
        return results

    def _play(self, engine: TurnEngine, issue) -> bool:
        """Issue this turn's commands. Returns False once the turn was taken away."""
        me = engine.active_player()
        if me.role is not None:
            if self._roll("rehearse_bias"):
                rehearsed = engine.rehearse()
                if rehearsed.ok:
                    return issue(rehearsed)
            return issue(engine.act())

        if me.location == engine.game.board.office.name and self._roll("upgrade_bias"):
            offers = engine.upgrade_offers(affordable_only=True)
            if offers:
                best = max(offers, key=lambda o: (o.level, -o.cost))
                issue(engine.upgrade(best.level, best.currency))

        if not self._try_work(engine, issue):
            destination = self._choose_destination(engine)
            if destination is not None:
                issue(engine.move(destination))
                self._try_work(engine, issue)
        return True

    def _try_work(self, engine: TurnEngine, issue) -> bool:
        roles = [r for r in engine.available_roles() if r.eligible]
        if not roles:
            return False
        prefer_starring = self._roll("starring_bias")
        role = max(roles, key=lambda r: (r.starring == prefer_starring, r.level))
        result = engine.work(role.name)
        issue(result)
        return result.ok

    def _choose_destination(self, engine: TurnEngine) -> str | None:
        adjacent = engine.adjacent_locations()
        if not adjacent:
            return None
        if engine.upgrade_offers(affordable_only=True) and self._roll("upgrade_bias"):
            step = self._step_toward(engine, engine.game.board.office.name)
            if step is not None:
                return step
        with_roles = [
            name for name in adjacent
            if any(r.eligible for r in engine.available_roles(name))
        ]
        if with_roles:
            return self.rng.choice(with_roles)
        return self.rng.choice(adjacent)

    def _step_toward(self, engine: TurnEngine, target: str) -> str | None:
        """First move on a shortest path to target, or None if already there."""
        graph = {view.name: view.neighbors for view in engine.locations()}
        start = engine.active_player().location
        parents: dict[str, str | None] = {start: None}
        frontier = [start]
        while frontier and target not in parents:
            next_frontier = []
            for name in frontier:
                for neighbor in graph[name]:
                    if neighbor not in parents:
                        parents[neighbor] = name
                        next_frontier.append(neighbor)
            frontier = next_frontier

        if target == start or target not in parents:
            return None
        step = target
        while parents[step] != start:
            step = parents[step]
        return step

    def get_stats(self) -> dict:
        """Summary statistics about the bot's accepted commands."""
        return {
            "total_decisions": len(self.decisions),
            "moves": self.decisions.count("move"),
            "roles_taken": self.decisions.count("work"),
            "acts": self.decisions.count("act"),
            "rehearsals": self.decisions.count("rehearse"),
            "upgrades": self.decisions.count("upgrade"),
        }
