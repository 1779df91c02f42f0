"""Core Game of Life logic."""

from .coordinate import Coordinate, as_coordinate
from .rules import CellFate, Generation
from .grid import LifeGrid
from .game import GameOfLife
from .patterns import Pattern, PatternLibrary

__all__ = [
    "Coordinate",
    "as_coordinate",
    "CellFate",
    "Generation",
    "LifeGrid",
    "GameOfLife",
    "Pattern",
    "PatternLibrary",
]
