"""
Default adjacency constraint: compare pixels along touching edges.

Two tiles may be neighbors when the pixels along their shared edge match.
Only a few points per edge are sampled: for the top edge that is the
top-left, top-middle and top-right pixels; for the right edge top-right,
middle-right and bottom-right; and so on.
"""

from typing import Any

import numpy as np

from .module import Direction

DEFAULT_SAMPLES = 3


def _sample_positions(length: int, samples: int) -> np.ndarray:
    steps = np.arange(samples) * length // max(samples - 1, 1)
    return np.minimum(steps, length - 1)


def edge_pixels(tile: Any, direction: Direction, samples: int = DEFAULT_SAMPLES) -> np.ndarray:
    """
    Sample `samples` evenly spaced pixels along one edge of a tile.

    Accepts anything numpy can turn into an (H, W) or (H, W, C) array,
    including Pillow images. Points run left-to-right for horizontal edges
    and top-to-bottom for vertical ones, always starting and ending at the
    corners. With three samples the middle one sits at index `length // 2`.
    """
    pixels = np.asarray(tile)
    height, width = pixels.shape[:2]

    if direction in (Direction.UP, Direction.DOWN):
        row = 0 if direction is Direction.UP else height - 1
        cols = _sample_positions(width, samples)
        return pixels[row, cols]

    col = 0 if direction is Direction.LEFT else width - 1
    rows = _sample_positions(height, samples)
    return pixels[rows, col]


def edge_constraint(tile_a: Any, tile_b: Any, direction: Direction, samples: int = DEFAULT_SAMPLES) -> bool:
    """
    Check whether tile_b may sit on the `direction` side of tile_a.

    The edge of tile_a facing `direction` must match the opposite edge of
    tile_b at every sampled point. Symmetric: RIGHT from a to b gives the same
    answer as LEFT from b to a.
    """
    a_edge = edge_pixels(tile_a, direction, samples)
    b_edge = edge_pixels(tile_b, direction.opposite(), samples)
    return a_edge.shape == b_edge.shape and bool(np.array_equal(a_edge, b_edge))


def sampled_edge_constraint(samples: int):
    """Build an edge constraint that samples `samples` points per edge."""
    if samples < 2:
        raise ValueError(f"Need at least 2 samples per edge, got {samples}")

    def constraint(tile_a: Any, tile_b: Any, direction: Direction) -> bool:
        return edge_constraint(tile_a, tile_b, direction, samples)

    return constraint
