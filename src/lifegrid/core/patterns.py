"""Seed patterns and pattern management."""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import json
from pathlib import Path

from .coordinate import Coordinate, as_coordinates
from .grid import LifeGrid


class Pattern:
    """A named set of live cells used to seed a grid."""

    def __init__(
        self,
        name: str,
        cells: Iterable[Any],
        description: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize a pattern.

        Args:
            name: Pattern name
            cells: (x, y) coordinates of living cells; duplicates are dropped
            description: Optional description
            metadata: Optional metadata dictionary

        Raises:
            TypeError: If a cell is not an (x, y) pair
            ValueError: If a cell has non-integer components
        """
        self.name = name
        self.cells: List[Coordinate] = sorted(set(as_coordinates(cells)))
        self.description = description
        self.metadata = metadata or {}

    def seed_into(self, grid: LifeGrid, offset_x: int = 0, offset_y: int = 0) -> None:
        """Replace the grid's live cells with this pattern.

        Args:
            grid: Target grid
            offset_x: Horizontal offset
            offset_y: Vertical offset
        """
        grid.seed(cell.offset(offset_x, offset_y) for cell in self.cells)

    def translated(self, dx: int, dy: int) -> "Pattern":
        """Return a copy of this pattern shifted by (dx, dy)."""
        return Pattern(
            self.name,
            [cell.offset(dx, dy) for cell in self.cells],
            self.description,
            self.metadata.copy(),
        )

    def get_bounding_box(self) -> Tuple[int, int, int, int]:
        """Get bounding box of the pattern.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y), all zero for an empty pattern
        """
        if not self.cells:
            return (0, 0, 0, 0)

        xs, ys = zip(*self.cells)
        return (min(xs), min(ys), max(xs), max(ys))

    def get_size(self) -> Tuple[int, int]:
        """Get pattern size as (width, height)."""
        if not self.cells:
            return (0, 0)

        min_x, min_y, max_x, max_y = self.get_bounding_box()
        return (max_x - min_x + 1, max_y - min_y + 1)

    def normalize(self) -> "Pattern":
        """Return a new pattern with coordinates normalized to start at (0, 0)."""
        min_x, min_y, _, _ = self.get_bounding_box()
        return self.translated(-min_x, -min_y)

    def to_dict(self) -> Dict[str, Any]:
        """Convert pattern to dictionary for serialization."""
        return {
            "name": self.name,
            "cells": [[x, y] for x, y in self.cells],
            "description": self.description,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pattern":
        """Create pattern from dictionary.

        Args:
            data: Dictionary with pattern data

        Returns:
            New Pattern instance

        Raises:
            KeyError: If name or cells are missing
        """
        return cls(
            name=data["name"],
            cells=data["cells"],
            description=data.get("description", ""),
            metadata=data.get("metadata", {}),
        )

    @classmethod
    def from_grid(cls, grid: LifeGrid, name: str, description: str = "") -> "Pattern":
        """Create pattern from current grid state."""
        cells = grid.current_live()
        metadata = {"source_bounding_box": grid.get_bounding_box(), "population": len(cells)}
        return cls(name, cells, description, metadata)

    @classmethod
    def from_strings(
        cls,
        name: str,
        lines: Sequence[str],
        description: str = "",
        live_chars: str = "*#O",
    ) -> "Pattern":
        """Create a pattern from plaintext rows.

        Row index is y and column index is x; any character in live_chars
        marks a live cell.
        """
        cells = [
            (x, y)
            for y, row in enumerate(lines)
            for x, ch in enumerate(row)
            if ch in live_chars
        ]
        return cls(name, cells, description)

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Pattern({self.name!r}, {len(self.cells)} cells)"


BUILTIN_CATEGORIES: Dict[str, List[str]] = {
    "Still Life": ["Block", "Beehive", "Loaf"],
    "Oscillators": ["Blinker", "Toad", "Beacon", "Pulsar"],
    "Spaceships": ["Glider", "Lightweight Spaceship"],
    "Methuselahs": ["R-pentomino", "Diehard", "Acorn"],
}


class PatternLibrary:
    """Manages a collection of patterns."""

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize pattern library.

        Args:
            storage_dir: Directory for pattern JSON files (defaults to 'patterns');
                created on first save
        """
        self.storage_dir = Path(storage_dir or "patterns")
        self._patterns: Dict[str, Pattern] = {}
        self._load_builtin_patterns()

    def _load_builtin_patterns(self) -> None:
        """Load built-in common patterns."""
        # Still life patterns
        self.add_pattern(Pattern("Block", [(0, 0), (1, 0), (0, 1), (1, 1)], "2x2 still life block"))
        self.add_pattern(Pattern.from_strings("Beehive", [".**.", "*..*", ".**."], "Beehive still life"))
        self.add_pattern(
            Pattern.from_strings("Loaf", [".**.", "*..*", ".*.*", "..*."], "Loaf still life")
        )

        # Oscillators
        self.add_pattern(Pattern("Blinker", [(-1, 0), (0, 0), (1, 0)], "Period-2 oscillator, 3-cell line"))
        self.add_pattern(Pattern.from_strings("Toad", [".***", "***."], "Period-2 oscillator"))
        self.add_pattern(
            Pattern.from_strings("Beacon", ["**..", "*...", "...*", "..**"], "Period-2 oscillator")
        )
        pulsar_half = [
            "..***...***..",
            ".............",
            "*....*.*....*",
            "*....*.*....*",
            "*....*.*....*",
            "..***...***..",
        ]
        self.add_pattern(
            Pattern.from_strings(
                "Pulsar", pulsar_half + ["." * 13] + pulsar_half[::-1], "Period-3 oscillator"
            )
        )

        # Spaceships
        self.add_pattern(
            Pattern(
                "Glider",
                [(1, 0), (0, 1), (0, 2), (1, 2), (2, 2)],
                "Smallest spaceship, moves one cell diagonally every 4 generations",
            )
        )
        self.add_pattern(
            Pattern.from_strings(
                "Lightweight Spaceship",
                ["*..*.", "....*", "*...*", ".****"],
                "LWSS - Period-4 spaceship",
            )
        )

        # Methuselahs
        self.add_pattern(
            Pattern.from_strings(
                "R-pentomino",
                [".**", "**.", ".*."],
                "Famous methuselah that stabilizes after 1103 generations",
            )
        )
        self.add_pattern(
            Pattern.from_strings(
                "Diehard",
                ["......*.", "**......", ".*...***"],
                "Dies after exactly 130 generations",
            )
        )
        self.add_pattern(
            Pattern.from_strings(
                "Acorn",
                [".*.....", "...*...", "**..***"],
                "Takes 5206 generations to stabilize",
            )
        )

    def add_pattern(self, pattern: Pattern) -> None:
        """Add a pattern to the library, replacing any with the same name."""
        self._patterns[pattern.name] = pattern

    def get_pattern(self, name: str) -> Optional[Pattern]:
        """Get a pattern by name, or None if not found."""
        return self._patterns.get(name)

    def list_patterns(self) -> List[str]:
        """Get list of all pattern names."""
        return list(self._patterns.keys())

    def get_patterns_by_category(self) -> Dict[str, List[str]]:
        """Get patterns organized by category.

        Returns:
            Dictionary mapping categories to pattern name lists; empty
            categories are omitted
        """
        categories = {cat: list(names) for cat, names in BUILTIN_CATEGORIES.items()}
        categories["Custom"] = []

        all_builtin = set()
        for cat_patterns in BUILTIN_CATEGORIES.values():
            all_builtin.update(cat_patterns)

        for name in self._patterns:
            if name not in all_builtin:
                categories["Custom"].append(name)

        return {
            cat: [name for name in names if name in self._patterns]
            for cat, names in categories.items()
            if any(name in self._patterns for name in names)
        }

    def save_pattern(self, pattern: Pattern, filename: Optional[str] = None) -> Path:
        """Save a pattern to the storage directory as JSON.

        Args:
            pattern: Pattern to save
            filename: Optional filename (defaults to pattern name)

        Returns:
            Path of the written file
        """
        if filename is None:
            filename = f"{pattern.name.replace(' ', '_').lower()}.json"

        self.storage_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.storage_dir / filename
        with open(filepath, "w") as f:
            json.dump(pattern.to_dict(), f, indent=2)
        return filepath

    def load_pattern(self, filename: str) -> Pattern:
        """Load a pattern from the storage directory and add it.

        Args:
            filename: Filename to load from

        Returns:
            Loaded Pattern instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file is not valid JSON or holds invalid cells
            KeyError: If required fields are missing
        """
        filepath = self.storage_dir / filename

        with open(filepath, "r") as f:
            data = json.load(f)

        pattern = Pattern.from_dict(data)
        self.add_pattern(pattern)
        return pattern

    def load_all_patterns(self) -> int:
        """Load all patterns from the storage directory.

        Returns:
            Number of patterns loaded
        """
        if not self.storage_dir.is_dir():
            return 0

        loaded = 0
        for filepath in sorted(self.storage_dir.glob("*.json")):
            try:
                self.load_pattern(filepath.name)
                loaded += 1
            except (ValueError, KeyError, TypeError) as e:
                print(f"Warning: Failed to load pattern from {filepath.name}: {e}")
        return loaded
