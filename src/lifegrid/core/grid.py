"""Sparse live-cell grid for Conway's Game of Life."""

from typing import Any, Dict, FrozenSet, Iterable, Iterator, Optional, Tuple

from .coordinate import Coordinate, as_coordinate, as_coordinates
from .dense import dense_step, window_area
from .rules import CellFate, Generation, empty_cell_fate, live_cell_fate

BACKENDS = ("auto", "sparse", "dense")

# Thresholds for the "auto" backend
DENSE_MIN_POPULATION = 512
DENSE_MAX_AREA = 4_000_000


class LifeGrid:
    """Unbounded Game of Life grid stored as a set of live coordinates.

    The live set is the whole simulation state. It is only replaced by
    ``seed()`` and ``advance()``; every classification reads the same
    pre-tick snapshot, so births and deaths never see each other's effects.
    """

    def __init__(self, initial: Optional[Iterable[Any]] = None, backend: str = "auto") -> None:
        """Initialize a grid.

        Args:
            initial: Optional seed coordinates
            backend: 'sparse' (hashed set lookups), 'dense' (window convolution)
                or 'auto' to choose per tick

        Raises:
            ValueError: If backend is not a known name
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}', expected one of {', '.join(BACKENDS)}")

        self.backend = backend
        self._live: FrozenSet[Coordinate] = frozenset()
        if initial is not None:
            self.seed(initial)

    def seed(self, initial: Iterable[Any]) -> None:
        """Replace the live cells with exactly the given coordinates.

        Duplicates are collapsed.

        Args:
            initial: Iterable of (x, y) pairs

        Raises:
            TypeError: If an item is not an (x, y) pair
            ValueError: If a component is not integer-valued
        """
        self._live = frozenset(as_coordinates(initial))

    def current_live(self) -> FrozenSet[Coordinate]:
        """Read-only snapshot of the live cells."""
        return self._live

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return len(self._live)

    def is_alive(self, pos: Any) -> bool:
        """Check whether a coordinate is live."""
        return as_coordinate(pos) in self._live

    def neighbor_count(self, pos: Any) -> int:
        """Count live cells in the Moore neighborhood of a coordinate.

        Args:
            pos: Any coordinate, live or not

        Returns:
            Number of living neighbors (0-8)
        """
        live = self._live
        return sum(1 for n in as_coordinate(pos).neighbors() if n in live)

    def classify_survival(self) -> Dict[Coordinate, CellFate]:
        """Decide SURVIVE or DIE for every live cell.

        Returns:
            Mapping of each live coordinate to its fate
        """
        return {cell: live_cell_fate(self.neighbor_count(cell)) for cell in self._live}

    def classify_candidates(self) -> Dict[Coordinate, CellFate]:
        """Decide BORN or STAYS_EMPTY for every empty neighbor of a live cell.

        Only these coordinates can gain a cell, since birth needs live
        neighbors.

        Returns:
            Mapping of each candidate coordinate to its fate
        """
        live = self._live
        verdicts: Dict[Coordinate, CellFate] = {}
        for cell in live:
            for n in cell.neighbors():
                if n in live or n in verdicts:
                    continue
                verdicts[n] = empty_cell_fate(self.neighbor_count(n))
        return verdicts

    def classify_births(self) -> FrozenSet[Coordinate]:
        """Get empty coordinates that will be born next generation."""
        return frozenset(
            pos for pos, fate in self.classify_candidates().items() if fate is CellFate.BORN
        )

    def _use_dense(self) -> bool:
        if self.backend == "sparse" or not self._live:
            return False
        # Scattered cells fall back to sparse even when dense is forced
        if window_area(self._live) > DENSE_MAX_AREA:
            return False
        return self.backend == "dense" or len(self._live) >= DENSE_MIN_POPULATION

    def advance(self) -> Generation:
        """Advance the grid by one generation.

        Returns:
            Generation with the coordinates born and the coordinates that died
        """
        snapshot = self._live

        if self._use_dense():
            survival, births = dense_step(snapshot)
        else:
            survival = self.classify_survival()
            births = self.classify_births()

        newly_dead = frozenset(cell for cell, fate in survival.items() if fate is CellFate.DIE)
        newly_born = births - snapshot

        self._live = (snapshot - newly_dead) | newly_born
        return Generation(newly_born, newly_dead)

    def clear(self) -> None:
        """Remove all live cells."""
        self._live = frozenset()

    def copy(self) -> "LifeGrid":
        """Return an independent grid with the same live cells and backend."""
        other = LifeGrid(backend=self.backend)
        other._live = self._live
        return other

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None if no living cells
        """
        if not self._live:
            return None

        xs = [x for x, _ in self._live]
        ys = [y for _, y in self._live]
        return (min(xs), min(ys), max(xs), max(ys))

    def to_list(self) -> list:
        """Sorted list of [x, y] pairs for serialization."""
        return [[x, y] for x, y in sorted(self._live)]

    def render(self, live_char: str = "*", dead_char: str = ".", pad: int = 0) -> str:
        """Text view of the bounding box, one row per y, top row is min y."""
        bbox = self.get_bounding_box()
        if bbox is None:
            return ""

        min_x, min_y, max_x, max_y = bbox
        rows = []
        for y in range(min_y - pad, max_y + pad + 1):
            rows.append(
                "".join(
                    live_char if (x, y) in self._live else dead_char
                    for x in range(min_x - pad, max_x + pad + 1)
                )
            )
        return "\n".join(rows)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._live)

    def __len__(self) -> int:
        return len(self._live)

    def __contains__(self, pos: object) -> bool:
        try:
            return as_coordinate(pos) in self._live
        except (TypeError, ValueError):
            return False

    def __eq__(self, other: object) -> bool:
        """Check if two grids hold the same live cells."""
        if not isinstance(other, LifeGrid):
            return False
        return self._live == other._live

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return self.render()
