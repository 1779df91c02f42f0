"""Dense neighbor counting over the live set's bounding window.

The sparse set is rasterized into a numpy array covering the bounding box of
the live cells, padded by one cell on every side so that every possible birth
lies inside the window, and neighbor counts come from a PyTorch convolution.
"""

from typing import AbstractSet, Dict, FrozenSet, Optional, Tuple
import numpy as np
import torch
import torch.nn.functional as F

from .coordinate import Coordinate
from .rules import CellFate, BIRTH_COUNTS, live_cell_fate

_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)


def padded_window(live: AbstractSet[Coordinate]) -> Optional[Tuple[int, int, int, int]]:
    """Get the bounding box of the live cells grown by one cell.

    Returns:
        Tuple of (min_x, min_y, width, height) or None if there are no live cells
    """
    if not live:
        return None

    xs = [x for x, _ in live]
    ys = [y for _, y in live]
    min_x, min_y = min(xs) - 1, min(ys) - 1
    return (min_x, min_y, max(xs) + 1 - min_x + 1, max(ys) + 1 - min_y + 1)


def window_area(live: AbstractSet[Coordinate]) -> int:
    """Number of cells in the padded window (0 for an empty set)."""
    window = padded_window(live)
    if window is None:
        return 0
    return window[2] * window[3]


def rasterize(live: AbstractSet[Coordinate], window: Tuple[int, int, int, int]) -> np.ndarray:
    """Build an int8 occupancy array of shape (width, height) for the window."""
    min_x, min_y, width, height = window
    cells = np.zeros((width, height), dtype=np.int8)
    if live:
        # Offsets are computed on Python ints so huge coordinates never hit int64
        xs = np.fromiter((x - min_x for x, _ in live), dtype=np.int64, count=len(live))
        ys = np.fromiter((y - min_y for _, y in live), dtype=np.int64, count=len(live))
        cells[xs, ys] = 1
    return cells


def count_neighbors_window(live: AbstractSet[Coordinate]) -> Tuple[Coordinate, np.ndarray]:
    """Count live neighbors for every cell in the padded window.

    Args:
        live: Snapshot of live cells

    Returns:
        Tuple of (origin, counts) where counts[i, j] is the neighbor count of
        origin + (i, j). An empty set gives an empty (0, 0) array.
    """
    window = padded_window(live)
    if window is None:
        return Coordinate(0, 0), np.zeros((0, 0), dtype=np.int8)

    cells = rasterize(live, window)

    # conv2d expects (height, width), so transpose in and out
    torch_input = torch.from_numpy(cells.T.astype(np.float32)).unsqueeze(0).unsqueeze(0)
    neighbors = F.conv2d(torch_input, _KERNEL, padding=1)
    counts = neighbors[0, 0].numpy().astype(np.int8).T

    return Coordinate(window[0], window[1]), counts


def dense_step(live: AbstractSet[Coordinate]) -> Tuple[Dict[Coordinate, CellFate], FrozenSet[Coordinate]]:
    """Classify one generation using window neighbor counts.

    Args:
        live: Snapshot of live cells (not modified)

    Returns:
        Tuple of (survival verdict per live cell, birth coordinates)
    """
    origin, counts = count_neighbors_window(live)
    if counts.size == 0:
        return {}, frozenset()

    survival = {}
    for cell in live:
        x, y = cell
        count = int(counts[x - origin.x, y - origin.y])
        survival[cell] = live_cell_fate(count)

    occupied = rasterize(live, (origin.x, origin.y) + counts.shape)
    birth_mask = (occupied == 0) & np.isin(counts, list(BIRTH_COUNTS))
    bx, by = np.nonzero(birth_mask)
    births = frozenset(
        Coordinate(origin.x + int(i), origin.y + int(j)) for i, j in zip(bx, by)
    )

    return survival, births
