"""Deterministic BSP dungeon layout generation."""
from .config import GenerationSettings
from .errors import ConfigurationError, DelveError
from .generator import DungeonGenerator, DungeonLayout, generate_dungeon

__all__ = [
    "ConfigurationError",
    "DelveError",
    "DungeonGenerator",
    "DungeonLayout",
    "GenerationSettings",
    "generate_dungeon",
]

__version__ = "0.1.0"
