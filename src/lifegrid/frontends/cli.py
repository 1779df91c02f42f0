"""Command-line driver for Conway's Game of Life."""

import argparse
import sys
import time
import numpy as np
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ..core.grid import BACKENDS, LifeGrid
from ..core.game import GameOfLife
from ..core.patterns import PatternLibrary
from ..core.rules import Generation

# Ticks per second for interactive playback
DEFAULT_TPS = 20.0


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""
    pattern: Optional[str] = "Glider"
    pattern_x: int = 0
    pattern_y: int = 0
    random_fill: bool = False
    width: int = 50
    height: int = 50
    population_rate: float = 0.3
    seed: Optional[int] = None
    max_generations: int = 1000
    backend: str = "auto"
    tps: float = 0.0


class FixedStepTicker:
    """Paces ticks at a fixed rate, independent of how long each tick takes.

    Deadlines advance by a constant step from the first call; a tick that runs
    late is not made up by sleeping less later, it just starts immediately.
    """

    def __init__(
        self,
        tps: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if tps <= 0:
            raise ValueError(f"Ticks per second must be positive, got {tps}")
        self.step = 1.0 / tps
        self._clock = clock
        self._sleep = sleep
        self._next_deadline: Optional[float] = None

    def wait(self) -> None:
        """Block until the next tick is due."""
        now = self._clock()
        if self._next_deadline is None:
            self._next_deadline = now + self.step
            return

        if now < self._next_deadline:
            self._sleep(self._next_deadline - now)
            self._next_deadline += self.step
        else:
            self._next_deadline = now + self.step


class CLIGameOfLife:
    """Command-line interface for running Game of Life simulations."""

    def __init__(self, pattern_dir: Optional[str] = None):
        """Initialize CLI interface.

        Args:
            pattern_dir: Optional directory of extra pattern JSON files
        """
        self.pattern_library = PatternLibrary(pattern_dir)
        if pattern_dir:
            self.pattern_library.load_all_patterns()

    def build_grid(self, config: SimulationConfig, verbose: bool = False) -> LifeGrid:
        """Create a grid seeded from a named pattern or a random soup.

        Raises:
            KeyError: If the named pattern does not exist
        """
        grid = LifeGrid(backend=config.backend)

        if config.random_fill or not config.pattern:
            if verbose:
                print(
                    f"Generating random {config.width}x{config.height} soup "
                    f"(rate: {config.population_rate:.2%})"
                )
            rng = np.random.default_rng(config.seed)
            mask = rng.random((config.width, config.height)) < config.population_rate
            xs, ys = np.nonzero(mask)
            grid.seed(
                (int(x) + config.pattern_x, int(y) + config.pattern_y) for x, y in zip(xs, ys)
            )
            return grid

        pattern = self.pattern_library.get_pattern(config.pattern)
        if pattern is None:
            raise KeyError(config.pattern)

        if verbose:
            print(f"Loading pattern '{config.pattern}' at ({config.pattern_x}, {config.pattern_y})")
        pattern.seed_into(grid, config.pattern_x, config.pattern_y)
        return grid

    def run_simulation(
        self,
        config: SimulationConfig,
        verbose: bool = False,
        show_grid: bool = False,
    ) -> Tuple[int, str, dict]:
        """Run a Game of Life simulation.

        Args:
            config: Seed, backend and run length settings
            verbose: Print births and deaths for every tick
            show_grid: Show initial and final grid states

        Returns:
            Tuple of (final_generation, finish_reason, statistics)
        """
        grid = self.build_grid(config, verbose)
        game = GameOfLife(grid)
        initial_population = game.population

        if verbose:
            print(f"Initial population: {initial_population} cells (backend: {grid.backend})")

        if show_grid:
            print("\nInitial grid:")
            print(self._format_grid(grid))

        ticker = FixedStepTicker(config.tps) if config.tps > 0 else None

        def on_step(result: Generation) -> None:
            if verbose:
                report_generation(game.generation, result)
            if ticker is not None:
                ticker.wait()

        start_time = time.time()

        if verbose:
            print(f"\nRunning simulation (max {config.max_generations} generations)...")

        final_generation, reason = game.run_until_stable(config.max_generations, on_step=on_step)

        duration = time.time() - start_time

        stats = game.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = final_generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population

        if show_grid and reason != "extinction":
            print(f"\nFinal grid (generation {final_generation}):")
            print(self._format_grid(grid))

        return final_generation, reason, stats

    def _format_grid(self, grid: LifeGrid, max_size: int = 80) -> str:
        """Format the live region for display, truncating if too large.

        Args:
            grid: Grid to format
            max_size: Maximum bounding box dimension to display

        Returns:
            Formatted grid string
        """
        bbox = grid.get_bounding_box()
        if bbox is None:
            return "(empty)"

        width = bbox[2] - bbox[0] + 1
        height = bbox[3] - bbox[1] + 1
        if width > max_size or height > max_size:
            return f"Grid too large to display ({width}x{height})"

        return f"origin ({bbox[0]}, {bbox[1]})\n{grid.render()}"

    def list_patterns(self) -> None:
        """List available patterns by category."""
        categories = self.pattern_library.get_patterns_by_category()

        print("Available patterns:")
        for category, patterns in categories.items():
            print(f"\n{category}:")
            for pattern_name in patterns:
                pattern = self.pattern_library.get_pattern(pattern_name)
                if pattern is not None:
                    size = pattern.get_size()
                    print(f"  {pattern_name}: {size[0]}x{size[1]}, {len(pattern)} cells")
                    if pattern.description:
                        print(f"    {pattern.description}")


def report_generation(generation: int, result: Generation) -> None:
    """Print the cells born and killed in one generation."""
    for x, y in sorted(result.newly_born):
        print(f"Spawning cell at {x},{y}.")
    for x, y in sorted(result.newly_dead):
        print(f"Killing cell at {x},{y}.")
    print(f"Generation {generation}: +{len(result.newly_born)} -{len(result.newly_dead)}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Run Conway's Game of Life on an unbounded grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the glider until its period is detected
  lifegrid-cli --pattern Glider --show-grid

  # Watch a blinker at 20 ticks per second
  lifegrid-cli --pattern Blinker --tps 20 --max-generations 40 --verbose

  # Random 64x64 soup with 35% density, reproducible
  lifegrid-cli --random -W 64 -H 64 -p 0.35 --seed 7

  # Force the dense (PyTorch convolution) backend
  lifegrid-cli --pattern Acorn --backend dense -m 6000

  # List available patterns
  lifegrid-cli --list-patterns
        """,
    )

    # Seed configuration
    parser.add_argument(
        "--pattern",
        type=str,
        default="Glider",
        help="Pattern to seed the grid with (default: Glider)",
    )

    parser.add_argument("--pattern-x", type=int, default=0, help="X offset for the seed (default: 0)")

    parser.add_argument("--pattern-y", type=int, default=0, help="Y offset for the seed (default: 0)")

    parser.add_argument(
        "--pattern-dir",
        type=str,
        help="Directory of extra pattern JSON files to load",
    )

    parser.add_argument(
        "-r",
        "--random",
        action="store_true",
        help="Seed with a random soup instead of a pattern",
    )

    parser.add_argument("-W", "--width", type=int, default=50, help="Random soup width (default: 50)")

    parser.add_argument("-H", "--height", type=int, default=50, help="Random soup height (default: 50)")

    parser.add_argument(
        "-p",
        "--population",
        type=float,
        default=0.3,
        help="Random soup population rate 0.0-1.0 (default: 0.3)",
    )

    parser.add_argument("--seed", type=int, help="Random seed for reproducible soups")

    # Simulation configuration
    parser.add_argument(
        "-m",
        "--max-generations",
        type=int,
        default=1000,
        help="Maximum generations to simulate (default: 1000)",
    )

    parser.add_argument(
        "--backend",
        type=str,
        default="auto",
        choices=list(BACKENDS),
        help="Neighbor counting backend (default: auto)",
    )

    parser.add_argument(
        "--tps",
        type=float,
        default=0.0,
        help=f"Ticks per second, 0 runs unpaced (interactive: {DEFAULT_TPS:g})",
    )

    # Output configuration
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print births and deaths for every generation",
    )

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display initial and final live regions",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build a SimulationConfig from parsed arguments."""
    return SimulationConfig(
        pattern=args.pattern,
        pattern_x=args.pattern_x,
        pattern_y=args.pattern_y,
        random_fill=args.random,
        width=args.width,
        height=args.height,
        population_rate=args.population,
        seed=args.seed,
        max_generations=args.max_generations,
        backend=args.backend,
        tps=args.tps,
    )


def format_finish_reason(reason: str, stats: dict) -> str:
    """Format the simulation finish reason for display.

    Args:
        reason: Finish reason from GameOfLife.run_until_stable
        stats: Statistics dictionary

    Returns:
        Formatted reason string
    """
    if reason == "extinction":
        return "Extinction - all cells died"
    elif reason == "cycle":
        cycle_len = stats.get("cycle_length", 0)
        cycle_start = stats.get("cycle_start_generation", 0)
        if cycle_len == 1:
            return f"Still life - stable since generation {cycle_start}"
        return f"Cycle detected - length {cycle_len}, started at generation {cycle_start}"
    elif reason == "spaceship":
        cycle_len = stats.get("cycle_length", 0)
        dx, dy = stats.get("cycle_displacement", (0, 0))
        return f"Spaceship detected - period {cycle_len}, moves ({dx}, {dy}) per period"
    elif reason == "max_generations":
        return f"Maximum generations reached ({stats.get('generation', 0)})"
    else:
        return f"Unknown reason: {reason}"


def print_results(final_generation: int, reason: str, stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        final_generation: Final generation number
        reason: Finish reason
        stats: Statistics dictionary
        verbose: Whether to show detailed statistics
    """
    print(f"\nSimulation completed after {final_generation} generations")
    print(f"Finish reason: {format_finish_reason(reason, stats)}")

    if verbose:
        print("\nDetailed Statistics:")
        print(f"  Initial population: {stats['initial_population']}")
        print(f"  Final population: {stats['population']}")
        print(f"  Population density: {stats['population_density']:.2%}")
        print(f"  Population change rate: {stats['population_change_rate']:.2f}")
        if "duration_seconds" in stats:
            print(f"  Duration: {stats['duration_seconds']:.3f} seconds")
            print(f"  Speed: {stats['generations_per_second']:.0f} generations/second")

        if stats["bounding_box"]:
            bbox = stats["bounding_box"]
            bbox_size = stats["bounding_box_size"]
            print(
                f"  Bounding box: ({bbox[0]}, {bbox[1]}) to ({bbox[2]}, {bbox[3]}) "
                f"[{bbox_size[0]}x{bbox_size[1]}]"
            )
    else:
        initial_pop = stats["initial_population"]
        final_pop = stats["population"]
        duration = stats.get("duration_seconds", 0)
        speed = stats.get("generations_per_second", 0)

        print(
            "Population: {} → {}, "
            "Duration: {:.3f}s, "
            "Speed: {:.0f} gen/s".format(initial_pop, final_pop, duration, speed)
        )


def validate_args(args: argparse.Namespace) -> bool:
    """Validate command-line arguments.

    Args:
        args: Parsed arguments

    Returns:
        True if arguments are valid
    """
    errors = []

    if args.width <= 0:
        errors.append("Width must be positive")

    if args.height <= 0:
        errors.append("Height must be positive")

    if not 0.0 <= args.population <= 1.0:
        errors.append("Population rate must be between 0.0 and 1.0")

    if args.max_generations <= 0:
        errors.append("Max generations must be positive")

    if args.tps < 0:
        errors.append("Ticks per second must not be negative")

    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return False

    return True


def main(argv: Optional[list] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    cli = CLIGameOfLife(args.pattern_dir)

    if args.list_patterns:
        cli.list_patterns()
        return 0

    if not validate_args(args):
        return 1

    if not args.random and cli.pattern_library.get_pattern(args.pattern) is None:
        available = cli.pattern_library.list_patterns()
        print(f"Error: Pattern '{args.pattern}' not found")
        print(f"Available patterns: {', '.join(available)}")
        print("Use --list-patterns to see detailed information")
        return 1

    try:
        final_generation, reason, stats = cli.run_simulation(
            config_from_args(args),
            verbose=args.verbose,
            show_grid=args.show_grid,
        )
        print_results(final_generation, reason, stats, args.verbose)
        return 0

    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except Exception as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
