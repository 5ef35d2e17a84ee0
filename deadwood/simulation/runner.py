"""Bot-played games and their Markdown transcripts."""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..state.schemas.command import CommandResult
from ..state.schemas.views import ScoreLine
from ..systems.session import new_game
from ..systems.turns import TurnEngine
from .personas import PERSONAS
from .player import BotPlayer

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 5000


@dataclass
class SimulationTurn:
    """What one bot did on its turn."""

    turn_number: int
    day: int
    player: str
    lines: list[str] = field(default_factory=list)  # Accepted/rejected command messages


@dataclass
class SimulationTranscript:
    """Record of one bot-played game."""

    seed: int | None = None
    started_at: datetime = field(default_factory=datetime.now)
    personas: dict[str, str] = field(default_factory=dict)
    turns: list[SimulationTurn] = field(default_factory=list)
    scores: list[ScoreLine] = field(default_factory=list)
    wraps: int = 0
    days_played: int = 0
    finished: bool = False
    player_stats: dict = field(default_factory=dict)

    @property
    def winner(self) -> str | None:
        return self.scores[0].name if self.scores else None

    def add_turn(self, day: int, player: str, results: list[CommandResult]) -> None:
        """Append a bot turn and count any wraps it caused."""
        self.turns.append(SimulationTurn(
            turn_number=len(self.turns) + 1,
            day=day,
            player=player,
            lines=[r.message for r in results],
        ))
        self.wraps += sum(len(r.events_of("scene.wrapped")) for r in results)

    def to_markdown(self) -> str:
        """Render the game day by day, ending with the score table."""
        lines = [
            "# Simulation Transcript",
            "",
            f"- **Date:** {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"- **Seed:** {self.seed}",
            f"- **Players:** {', '.join(f'{n} ({p})' for n, p in self.personas.items())}",
            f"- **Turns:** {len(self.turns)}",
            f"- **Scenes wrapped:** {self.wraps}",
            "",
            "---",
            "",
        ]

        current_day = 0
        for turn in self.turns:
            if turn.day != current_day:
                current_day = turn.day
                lines.append(f"## Day {current_day}")
                lines.append("")
            lines.append(f"**{turn.turn_number}. {turn.player}**")
            lines.append("")
            for line in turn.lines:
                lines.append(f"- {line}")
            lines.append("")

        lines.append("## Final Scores")
        lines.append("")
        if self.scores:
            lines.append("| # | Name | $ | cr | Rank | Score |")
            lines.append("|---|------|---|----|------|-------|")
            for s in self.scores:
                lines.append(f"| {s.place} | {s.name} | {s.dollars} | {s.credits} | {s.rank} | {s.score} |")
        else:
            lines.append("*Game did not finish.*")
        lines.append("")

        return "\n".join(lines)

    def save(self, simulations_dir: Path) -> Path:
        """Write the transcript as sim_<timestamp>_seed<seed>.md under simulations_dir."""
        simulations_dir.mkdir(parents=True, exist_ok=True)

        timestamp = self.started_at.strftime("%Y-%m-%d_%H%M%S")
        filename = f"sim_{timestamp}_seed{self.seed}.md"
        filepath = simulations_dir / filename

        filepath.write_text(self.to_markdown(), encoding="utf-8")
        return filepath


def create_bots(
    names: list[str],
    personas: list[str] | None = None,
    seed: int | None = None,
) -> dict[str, BotPlayer]:
    """One bot per player; personas cycle when fewer are given."""
    personas = personas or list(PERSONAS)
    rng = random.Random(seed)
    return {
        name: BotPlayer(
            name,
            persona=personas[i % len(personas)],
            rng=random.Random(rng.randrange(2**32)),
        )
        for i, name in enumerate(names)
    }


def run_simulation(
    engine: TurnEngine,
    bots: dict[str, BotPlayer],
    max_turns: int = DEFAULT_MAX_TURNS,
    seed: int | None = None,
) -> SimulationTranscript:
    """
    Let bots play until the game ends or max_turns turns pass.

    Args:
        engine: A session from setup()
        bots: Bot for every player name
        max_turns: Safety limit on player turns
        seed: Recorded in the transcript

    Returns:
        The transcript, with scores only if the game finished
    """
    transcript = SimulationTranscript(
        seed=seed,
        personas={name: bot.persona_name for name, bot in bots.items()},
    )

    while not engine.is_game_over() and len(transcript.turns) < max_turns:
        day = engine.day
        bot = bots[engine.active_player().name]
        results = bot.take_turn(engine)
        transcript.add_turn(day, bot.name, results)

    transcript.finished = engine.is_game_over()
    transcript.days_played = engine.day
    if transcript.finished:
        transcript.scores = engine.final_scores()
    else:
        logger.warning("Simulation stopped after %d turns without finishing", max_turns)

    transcript.player_stats = {name: bot.get_stats() for name, bot in bots.items()}
    return transcript


def simulate_game(
    player_count: int,
    seed: int | None = None,
    personas: list[str] | None = None,
    max_turns: int = DEFAULT_MAX_TURNS,
    **setup_kwargs,
) -> tuple[TurnEngine, SimulationTranscript]:
    """Set up a game on the bundled data (or given paths) and let bots play it."""
    engine = new_game(player_count, seed=seed, **setup_kwargs)
    names = [p.name for p in engine.board_summary()]
    bots = create_bots(names, personas, seed=seed)
    return engine, run_simulation(engine, bots, max_turns=max_turns, seed=seed)
