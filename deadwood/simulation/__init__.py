"""Simulation module: bots playing whole games for testing and autoplay."""

from .player import BotPlayer
from .personas import PERSONAS
from .runner import (
    run_simulation,
    simulate_game,
    create_bots,
    SimulationTranscript,
)

__all__ = [
    "BotPlayer",
    "PERSONAS",
    "run_simulation",
    "simulate_game",
    "create_bots",
    "SimulationTranscript",
]
