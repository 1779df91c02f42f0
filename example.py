#!/usr/bin/env python3
"""
Example usage of the lifegrid package.
"""

from lifegrid import GameOfLife, LifeGrid, PatternLibrary


def main():
    """Demonstrate programmatic usage of the lifegrid package."""
    grid = LifeGrid()
    game = GameOfLife(grid)

    library = PatternLibrary()
    glider = library.get_pattern("Glider")

    if glider:
        glider.seed_into(grid)

        print("Initial state:")
        print(grid)
        print(f"Population: {game.population}")
        print()

        # A renderer only needs the diffs to update its sprites
        for _ in range(8):
            newly_born, newly_dead = game.step()
            print(f"Generation {game.generation}: born {sorted(newly_born)}, died {sorted(newly_dead)}")
            print(grid)

            if game.cycle_detected:
                print(
                    f"Cycle detected! Length: {game.cycle_length}, "
                    f"displacement: {tuple(game.cycle_displacement)}"
                )
                break

            print()

    stats = game.get_statistics()
    print("Final statistics:")
    for key, value in stats.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
