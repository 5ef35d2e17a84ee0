"""Randomness for the engine."""

from .dice import DIE_SIDES, ActRoll, Dice

__all__ = ["DIE_SIDES", "ActRoll", "Dice"]
