"""Basic tests for the lifegrid package."""

from lifegrid import Coordinate, GameOfLife, LifeGrid, PatternLibrary


def test_grid_creation():
    """Test basic grid creation and seeding."""
    grid = LifeGrid()
    assert grid.population == 0
    assert not grid.is_alive((0, 0))

    grid.seed([(5, 5)])
    assert grid.is_alive((5, 5))
    assert grid.current_live() == {Coordinate(5, 5)}


def test_game_creation():
    """Test basic game creation."""
    grid = LifeGrid([(2, 2)])
    game = GameOfLife(grid)
    assert game.population == 1
    assert game.generation == 0


def test_pattern_library():
    """Test pattern library has some patterns."""
    patterns = PatternLibrary().list_patterns()
    assert len(patterns) > 0
    assert "Glider" in patterns


def test_blinker_pattern():
    """Test the 3-cell line oscillates between horizontal and vertical."""
    grid = LifeGrid([(-1, 0), (0, 0), (1, 0)])

    newly_born, newly_dead = grid.advance()
    assert grid.current_live() == {(0, -1), (0, 0), (0, 1)}
    assert newly_born == {(0, -1), (0, 1)}
    assert newly_dead == {(-1, 0), (1, 0)}

    grid.advance()
    assert grid.current_live() == {(-1, 0), (0, 0), (1, 0)}


def test_no_duplicates_over_time():
    """Test the live snapshot never repeats a coordinate."""
    grid = LifeGrid()
    PatternLibrary().get_pattern("R-pentomino").seed_into(grid)
    for _ in range(50):
        grid.advance()
        cells = list(grid.current_live())
        assert len(cells) == len(set(cells))
