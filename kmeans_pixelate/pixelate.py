# kmeans_pixelate/pixelate.py
from __future__ import annotations

import numpy as np


def pixelate(grid: np.ndarray, block_size: int) -> np.ndarray:
    """
    Block mosaic anchored at (0, 0).

    Each block_size x block_size block is filled with its top-left pixel,
    unchanged (no averaging). Blocks on the right and bottom edges are clipped
    to the grid. Works on [H,W] or [H,W,C] arrays of any dtype.
    """
    if block_size < 1:
        raise ValueError(f"block size must be >= 1, got {block_size}")
    if block_size == 1:
        return grid.copy()
    h, w = grid.shape[:2]
    # top-left row/column of the block each pixel falls in
    rows = (np.arange(h) // block_size) * block_size
    cols = (np.arange(w) // block_size) * block_size
    return grid[rows[:, None], cols[None, :]]


__all__ = ["pixelate"]
