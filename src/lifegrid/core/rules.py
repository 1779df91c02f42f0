"""Conway's Game of Life transition rule (B3/S23)."""

from enum import Enum
from typing import FrozenSet, NamedTuple

from .coordinate import Coordinate

# Live cell with 2 or 3 live neighbors survives
SURVIVAL_COUNTS: FrozenSet[int] = frozenset({2, 3})

# Empty cell with exactly 3 live neighbors is born
BIRTH_COUNTS: FrozenSet[int] = frozenset({3})


class CellFate(Enum):
    """Verdict for a single coordinate in one generation."""

    SURVIVE = "survive"
    DIE = "die"
    BORN = "born"
    STAYS_EMPTY = "stays_empty"


class Generation(NamedTuple):
    """Cells that changed during one call to ``LifeGrid.advance()``."""

    newly_born: FrozenSet[Coordinate]
    newly_dead: FrozenSet[Coordinate]

    @property
    def changed(self) -> bool:
        """Whether any cell was born or died."""
        return bool(self.newly_born or self.newly_dead)


def live_cell_fate(neighbor_count: int) -> CellFate:
    """Fate of a live cell with the given number of live neighbors."""
    return CellFate.SURVIVE if neighbor_count in SURVIVAL_COUNTS else CellFate.DIE


def empty_cell_fate(neighbor_count: int) -> CellFate:
    """Fate of an empty cell with the given number of live neighbors."""
    return CellFate.BORN if neighbor_count in BIRTH_COUNTS else CellFate.STAYS_EMPTY
