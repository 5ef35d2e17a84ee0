"""Deadwood: turn engine for a board game about bit-part actors in western films."""

__version__ = "0.1.0"
