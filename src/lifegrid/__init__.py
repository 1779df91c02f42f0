"""Conway's Game of Life on an unbounded, sparse integer grid."""

__version__ = "0.1.0"

from .core.coordinate import Coordinate
from .core.grid import LifeGrid
from .core.game import GameOfLife
from .core.patterns import Pattern, PatternLibrary
from .core.rules import CellFate, Generation

__all__ = ["Coordinate", "LifeGrid", "GameOfLife", "Pattern", "PatternLibrary", "CellFate", "Generation"]
