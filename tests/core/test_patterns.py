"""Tests for the Pattern and PatternLibrary classes."""

import json

import pytest
from lifegrid.core.game import GameOfLife
from lifegrid.core.grid import LifeGrid
from lifegrid.core.patterns import Pattern, PatternLibrary


class TestPattern:
    """Test cases for the Pattern class."""

    def test_initialization(self):
        """Test pattern initialization."""
        pattern = Pattern("Blinker", [(2, 0), (0, 0), (1, 0)], "Period-2 oscillator")

        assert pattern.name == "Blinker"
        assert pattern.cells == [(0, 0), (1, 0), (2, 0)]
        assert pattern.description == "Period-2 oscillator"
        assert pattern.metadata == {}
        assert len(pattern) == 3

    def test_initialization_deduplicates(self):
        """Test duplicate cells are dropped."""
        pattern = Pattern("Dup", [(0, 0), (0, 0), [0, 0]])
        assert pattern.cells == [(0, 0)]

    def test_initialization_rejects_bad_cells(self):
        """Test invalid cells raise."""
        with pytest.raises(ValueError):
            Pattern("Bad", [(0.5, 0)])

    def test_seed_into(self):
        """Test seeding a grid replaces its cells."""
        grid = LifeGrid([(100, 100)])
        Pattern("Blinker", [(0, 0), (1, 0), (2, 0)]).seed_into(grid)

        assert grid.current_live() == {(0, 0), (1, 0), (2, 0)}

    def test_seed_into_with_offset(self):
        """Test seeding with an offset, including negative positions."""
        grid = LifeGrid()
        Pattern("Blinker", [(0, 0), (1, 0), (2, 0)]).seed_into(grid, offset_x=-5, offset_y=3)

        assert grid.current_live() == {(-5, 3), (-4, 3), (-3, 3)}

    def test_translated(self):
        """Test translation returns a new pattern."""
        pattern = Pattern("Dot", [(1, 1)], metadata={"k": 1})
        moved = pattern.translated(2, -3)

        assert moved.cells == [(3, -2)]
        assert pattern.cells == [(1, 1)]
        assert moved.metadata == {"k": 1}
        assert moved.metadata is not pattern.metadata

    def test_get_bounding_box(self):
        """Test bounding box calculation."""
        assert Pattern("Empty", []).get_bounding_box() == (0, 0, 0, 0)
        assert Pattern("Single", [(5, 3)]).get_bounding_box() == (5, 3, 5, 3)
        assert Pattern("Multi", [(1, 2), (5, 1), (3, 4)]).get_bounding_box() == (1, 1, 5, 4)

    def test_get_size(self):
        """Test pattern size calculation."""
        assert Pattern("Empty", []).get_size() == (0, 0)
        assert Pattern("Single", [(5, 3)]).get_size() == (1, 1)
        assert Pattern("Block", [(0, 0), (1, 0), (0, 1), (1, 1)]).get_size() == (2, 2)

    def test_normalize(self):
        """Test normalization to origin."""
        pattern = Pattern("Test", [(5, 3), (6, 4), (7, 3)])
        normalized = pattern.normalize()

        assert normalized.cells == [(0, 0), (1, 1), (2, 0)]
        assert normalized.name == "Test"

    def test_to_dict_round_trip(self):
        """Test dictionary conversion."""
        pattern = Pattern("Test", [(0, 0), (1, 1)], "desc", {"period": 2})
        data = pattern.to_dict()

        assert data == {
            "name": "Test",
            "cells": [[0, 0], [1, 1]],
            "description": "desc",
            "metadata": {"period": 2},
        }
        restored = Pattern.from_dict(json.loads(json.dumps(data)))
        assert restored.cells == pattern.cells

    def test_from_dict_missing_cells(self):
        """Test required fields."""
        with pytest.raises(KeyError):
            Pattern.from_dict({"name": "NoCells"})

    def test_from_grid(self):
        """Test capturing a grid's live cells."""
        grid = LifeGrid([(3, 3), (4, 3)])
        pattern = Pattern.from_grid(grid, "Captured")

        assert pattern.cells == [(3, 3), (4, 3)]
        assert pattern.metadata["population"] == 2
        assert pattern.metadata["source_bounding_box"] == (3, 3, 4, 3)

    def test_from_strings(self):
        """Test parsing plaintext rows."""
        pattern = Pattern.from_strings("Glider", [".*.", "*..", "***"])
        assert set(pattern.cells) == {(1, 0), (0, 1), (0, 2), (1, 2), (2, 2)}

    def test_from_strings_live_chars(self):
        """Test alternate live characters."""
        pattern = Pattern.from_strings("Pair", ["O.#", "..x"])
        assert pattern.cells == [(0, 0), (2, 0)]


class TestPatternLibrary:
    """Test cases for the PatternLibrary class."""

    def test_builtin_patterns(self):
        """Test built-in patterns are present."""
        library = PatternLibrary()
        names = library.list_patterns()

        for name in ["Block", "Beehive", "Loaf", "Blinker", "Toad", "Beacon", "Pulsar",
                     "Glider", "Lightweight Spaceship", "R-pentomino", "Diehard", "Acorn"]:
            assert name in names

    def test_builtin_sizes(self):
        """Test a few built-in shapes."""
        library = PatternLibrary()

        assert len(library.get_pattern("Pulsar")) == 48
        assert library.get_pattern("Pulsar").get_size() == (13, 13)
        assert len(library.get_pattern("Lightweight Spaceship")) == 9
        assert len(library.get_pattern("Acorn")) == 7
        assert library.get_pattern("Glider").cells == [(0, 1), (0, 2), (1, 0), (1, 2), (2, 2)]

    @pytest.mark.parametrize("name", ["Block", "Beehive", "Loaf"])
    def test_still_lifes(self, name):
        """Test still lifes do not change."""
        grid = LifeGrid()
        PatternLibrary().get_pattern(name).seed_into(grid)
        before = grid.current_live()

        grid.advance()
        assert grid.current_live() == before

    @pytest.mark.parametrize("name,period", [("Blinker", 2), ("Toad", 2), ("Beacon", 2), ("Pulsar", 3)])
    def test_oscillators(self, name, period):
        """Test oscillators return to their start after one period."""
        game = GameOfLife(LifeGrid())
        PatternLibrary().get_pattern(name).seed_into(game.grid)

        _, reason = game.run_until_stable(20)
        assert reason == "cycle"
        assert game.cycle_length == period

    @pytest.mark.parametrize("name", ["Glider", "Lightweight Spaceship"])
    def test_spaceships(self, name):
        """Test spaceships are detected with period 4."""
        game = GameOfLife(LifeGrid())
        PatternLibrary().get_pattern(name).seed_into(game.grid)

        _, reason = game.run_until_stable(20)
        assert reason == "spaceship"
        assert game.cycle_length == 4

    def test_get_missing_pattern(self):
        """Test unknown names return None."""
        assert PatternLibrary().get_pattern("Nope") is None

    def test_categories(self):
        """Test patterns are grouped by category."""
        library = PatternLibrary()
        library.add_pattern(Pattern("Mine", [(0, 0)]))
        categories = library.get_patterns_by_category()

        assert categories["Still Life"] == ["Block", "Beehive", "Loaf"]
        assert "Glider" in categories["Spaceships"]
        assert categories["Custom"] == ["Mine"]

    def test_categories_without_custom(self):
        """Test empty categories are omitted."""
        assert "Custom" not in PatternLibrary().get_patterns_by_category()

    def test_does_not_create_storage_dir(self, tmp_path):
        """Test the storage directory is only created on save."""
        storage = tmp_path / "patterns"
        PatternLibrary(str(storage))
        assert not storage.exists()

    def test_save_and_load(self, tmp_path):
        """Test saving and loading pattern files."""
        library = PatternLibrary(str(tmp_path / "patterns"))
        pattern = Pattern("My Shape", [(0, 0), (2, 1)], "custom")

        path = library.save_pattern(pattern)
        assert path.name == "my_shape.json"

        other = PatternLibrary(str(tmp_path / "patterns"))
        loaded = other.load_pattern("my_shape.json")
        assert loaded.cells == [(0, 0), (2, 1)]
        assert other.get_pattern("My Shape") is loaded

    def test_load_missing_file(self, tmp_path):
        """Test loading a missing file raises."""
        library = PatternLibrary(str(tmp_path))
        with pytest.raises(FileNotFoundError):
            library.load_pattern("missing.json")

    def test_load_all_patterns(self, tmp_path, capsys):
        """Test bulk loading skips broken files with a warning."""
        (tmp_path / "good.json").write_text(json.dumps({"name": "Good", "cells": [[0, 0]]}))
        (tmp_path / "bad.json").write_text(json.dumps({"name": "Bad"}))
        (tmp_path / "worse.json").write_text("{not json")

        library = PatternLibrary(str(tmp_path))
        loaded = library.load_all_patterns()

        assert loaded == 1
        assert library.get_pattern("Good") is not None
        assert "Warning: Failed to load pattern from bad.json" in capsys.readouterr().out

    def test_load_all_without_directory(self, tmp_path):
        """Test bulk loading from a missing directory."""
        assert PatternLibrary(str(tmp_path / "absent")).load_all_patterns() == 0
