"""Integer cell coordinates on an unbounded grid."""

import math
import numbers
from typing import Any, Iterable, Iterator, NamedTuple, Tuple


class Coordinate(NamedTuple):
    """A grid cell identity.

    Compares and hashes like a plain ``(x, y)`` tuple, so ``(1, 2) in live``
    works against a set of coordinates.
    """

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Coordinate":
        """Return the coordinate shifted by ``(dx, dy)``."""
        return Coordinate(self.x + dx, self.y + dy)

    def neighbors(self) -> Iterator["Coordinate"]:
        """Iterate over the 8 Moore-neighborhood coordinates."""
        x, y = self
        for dx, dy in MOORE_OFFSETS:
            yield Coordinate(x + dx, y + dy)


# Row-major, skipping the center cell
MOORE_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


def _as_int(value: Any, source: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Coordinate component must be a number, got {value!r} in {source!r}")

    if isinstance(value, numbers.Integral):
        return int(value)

    if isinstance(value, numbers.Real):
        as_float = float(value)
        if math.isfinite(as_float) and as_float.is_integer():
            return int(as_float)
        raise ValueError(f"Coordinate component {value!r} in {source!r} is not an integer")

    raise TypeError(f"Coordinate component must be a number, got {value!r} in {source!r}")


def as_coordinate(value: Any) -> Coordinate:
    """Normalize a pair-like value into an exact integer Coordinate.

    Args:
        value: A Coordinate, tuple, list or array of two integer-valued numbers

    Returns:
        Coordinate with plain ``int`` components

    Raises:
        TypeError: If value is not a pair of numbers
        ValueError: If a component is not integer-valued (e.g. 0.5 or nan)
    """
    if type(value) is Coordinate and type(value.x) is int and type(value.y) is int:
        return value

    try:
        x, y = value
    except (TypeError, ValueError):
        raise TypeError(f"Expected an (x, y) pair, got {value!r}") from None

    return Coordinate(_as_int(x, value), _as_int(y, value))


def as_coordinates(values: Iterable[Any]) -> Iterator[Coordinate]:
    """Normalize every value in an iterable of pairs."""
    for value in values:
        yield as_coordinate(value)
