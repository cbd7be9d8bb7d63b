"""
Games module - The ten sidequest mini-games and the novelty generators.

Each game is a SidequestGame subclass that declares its thresholds and
timings and implements its own input handling. The registry maps game
ids to classes.
"""

from .registry import GAMES, catalog, create_game, get_game_class
from .novelty import NOVELTIES, generate_novelty

__all__ = [
    "GAMES",
    "catalog",
    "create_game",
    "get_game_class",
    "NOVELTIES",
    "generate_novelty",
]
