"""Conway's Game of Life simulation driver."""

from typing import Any, Callable, Deque, Dict, FrozenSet, Iterable, Optional, Tuple
from collections import deque
import numpy as np

from .coordinate import Coordinate
from .grid import LifeGrid
from .rules import Generation

ShapeKey = FrozenSet[Coordinate]


def normalize_shape(cells: FrozenSet[Coordinate]) -> Tuple[ShapeKey, Coordinate]:
    """Translate cells so their bounding box starts at (0, 0).

    Returns:
        Tuple of (normalized cells, original bounding box origin)
    """
    if not cells:
        return frozenset(), Coordinate(0, 0)

    min_x = min(x for x, _ in cells)
    min_y = min(y for _, y in cells)
    shape = frozenset(Coordinate(x - min_x, y - min_y) for x, y in cells)
    return shape, Coordinate(min_x, min_y)


class GameOfLife:
    """Conway's Game of Life simulation engine.

    Implements the classic rules:
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other cells die or stay dead

    Cycle detection compares shapes up to translation, so a repeated pattern
    is reported either as a cycle (same place) or a spaceship (moved).
    """

    def __init__(self, grid: LifeGrid) -> None:
        """Initialize the game with a grid.

        Args:
            grid: The live-cell grid to simulate
        """
        self.grid = grid
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[ShapeKey] = deque(maxlen=1000)
        self._seen_states: Dict[ShapeKey, Tuple[int, Coordinate]] = {}
        self._last_generation: Optional[Generation] = None
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._cycle_displacement = Coordinate(0, 0)

        # Track initial population
        self._update_population_history()

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def last_generation(self) -> Optional[Generation]:
        """Births and deaths from the most recent step (None before the first)."""
        return self._last_generation

    @property
    def cycle_detected(self) -> bool:
        """Whether a cycle has been detected."""
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        """Generation where cycle started (0 if no cycle)."""
        return self._cycle_start_generation

    @property
    def cycle_displacement(self) -> Coordinate:
        """Translation per cycle; (0, 0) for still lifes and oscillators."""
        return self._cycle_displacement

    @property
    def is_spaceship(self) -> bool:
        """Whether the detected cycle moves the pattern."""
        return self._cycle_detected and self._cycle_displacement != (0, 0)

    def seed(self, cells: Iterable[Any]) -> None:
        """Seed the grid and restart tracking from generation 0."""
        self.grid.seed(cells)
        self.reset(clear_grid=False)

    def step(self) -> Generation:
        """Advance the simulation by one generation.

        Returns:
            Cells born and cells that died this generation
        """
        # Check for cycles before updating
        self._check_for_cycles()

        result = self.grid.advance()

        # Update tracking
        self._last_generation = result
        self._generation += 1
        self._update_population_history()

        return result

    def _update_population_history(self) -> None:
        """Update the population history."""
        self._population_history.append(self.population)

    def _check_for_cycles(self) -> None:
        """Check if the current shape has been seen before (cycle detection)."""
        if self._cycle_detected:
            return

        # Extinction is reported separately
        if self.population == 0:
            return

        shape, origin = normalize_shape(self.grid.current_live())

        if shape in self._seen_states:
            first_generation, first_origin = self._seen_states[shape]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_generation
            self._cycle_start_generation = first_generation
            self._cycle_displacement = Coordinate(origin.x - first_origin.x, origin.y - first_origin.y)
            return

        # Record this state
        self._seen_states[shape] = (self._generation, origin)
        self._state_history.append(shape)

        # Clean up old states to prevent memory growth
        if len(self._state_history) > 900:
            old_state = self._state_history[0]
            if old_state in self._seen_states:
                # Only delete if it's still the first occurrence
                if self._seen_states[old_state][0] == self._generation - len(self._state_history) + 1:
                    del self._seen_states[old_state]

    def reset(self, clear_grid: bool = True) -> None:
        """Reset the simulation.

        Args:
            clear_grid: Whether to clear the grid as well
        """
        if clear_grid:
            self.grid.clear()

        self._generation = 0
        self._population_history.clear()
        self._last_generation = None
        self.clear_cycle_detection()

        self._update_population_history()

    def clear_cycle_detection(self) -> None:
        """Clear cycle detection state while preserving generation and population history.

        This should be called when the grid is reseeded mid-run since the
        state space has changed.
        """
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0
        self._cycle_displacement = Coordinate(0, 0)
        self._seen_states.clear()
        self._state_history.clear()

    def run_until_stable(
        self,
        max_generations: int = 10000,
        on_step: Optional[Callable[[Generation], None]] = None,
    ) -> Tuple[int, str]:
        """Run simulation until it becomes stable, cycles or dies out.

        Args:
            max_generations: Maximum generations to run
            on_step: Optional callback invoked with each generation's diff

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'spaceship', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            if self.population == 0:
                return self._generation, "extinction"

            result = self.step()
            if on_step is not None:
                on_step(result)

            if self._cycle_detected:
                return self._generation, "spaceship" if self.is_spaceship else "cycle"

        if self.population == 0:
            return self._generation, "extinction"

        return self._generation, "max_generations"

    def get_population_change_rate(self, window_size: int = 10) -> float:
        """Calculate recent population change rate.

        Args:
            window_size: Number of recent generations to consider

        Returns:
            Average population change per generation
        """
        if len(self._population_history) < 2:
            return 0.0

        recent_history = list(self._population_history)[-window_size:]
        if len(recent_history) < 2:
            return 0.0

        changes = np.diff(recent_history)
        return float(np.mean(changes))

    def save_state(self) -> Dict:
        """Save complete game state as a plain dictionary.

        Returns:
            Dictionary containing all game state
        """
        return {
            "generation": self._generation,
            "cells": self.grid.to_list(),
            "backend": self.grid.backend,
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "cycle_displacement": list(self._cycle_displacement),
        }

    def load_state(self, state: Dict) -> None:
        """Load complete game state from a dictionary.

        Args:
            state: Dictionary containing game state

        Raises:
            ValueError: If state is missing fields or holds invalid cells
        """
        missing = [key for key in ("generation", "cells") if key not in state]
        if missing:
            raise ValueError(f"Game state is missing fields: {', '.join(missing)}")

        try:
            self.grid.seed(state["cells"])
        except TypeError as e:
            raise ValueError(f"Invalid cells in game state: {e}") from e

        # Load game state
        self._generation = state["generation"]
        self._population_history = deque(
            state.get("population_history", [self.population]), maxlen=100
        )
        self._last_generation = None
        self._cycle_detected = state.get("cycle_detected", False)
        self._cycle_length = state.get("cycle_length", 0)
        self._cycle_start_generation = state.get("cycle_start_generation", 0)
        self._cycle_displacement = Coordinate(*state.get("cycle_displacement", (0, 0)))

        # Clear state history (it's not serialized)
        self._state_history.clear()
        self._seen_states.clear()

    def get_statistics(self) -> Dict:
        """Get comprehensive simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        bbox = self.grid.get_bounding_box()
        last = self._last_generation

        stats = {
            "generation": self._generation,
            "population": self.population,
            "population_change_rate": self.get_population_change_rate(),
            "population_history": list(self._population_history),
            "births": len(last.newly_born) if last else 0,
            "deaths": len(last.newly_dead) if last else 0,
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "cycle_displacement": tuple(self._cycle_displacement),
        }

        if bbox:
            stats["bounding_box"] = bbox
            box_width = bbox[2] - bbox[0] + 1
            box_height = bbox[3] - bbox[1] + 1
            stats["bounding_box_size"] = (box_width, box_height)
            stats["bounding_box_area"] = box_width * box_height
            stats["population_density"] = self.population / (box_width * box_height)
        else:
            stats["bounding_box"] = None
            stats["bounding_box_size"] = (0, 0)
            stats["bounding_box_area"] = 0
            stats["population_density"] = 0.0

        return stats
