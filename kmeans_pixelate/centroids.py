# kmeans_pixelate/centroids.py
from __future__ import annotations

import numpy as np

from .constants import CHANNELS
from .core_types import CentroidSet, PixelList


def initial_centroids(pixels: PixelList, k: int) -> CentroidSet:
    """
    Pick k starting centroids by fixed-stride sampling of the pixel list.

    Slot i takes pixels[i * N // k] for i < min(k, N). Slots past the end of a
    short pixel list stay all-zero. Deterministic; no randomness.
    """
    if k < 0:
        raise ValueError(f"centroid count must be >= 0, got {k}")
    px = np.asarray(pixels, dtype=np.int64).reshape(-1, CHANNELS)
    n = px.shape[0]
    out = np.zeros((k, CHANNELS), dtype=np.int64)
    m = min(k, n)
    if m:
        idx = (np.arange(m, dtype=np.int64) * n) // k
        out[:m] = px[idx]
    return out


__all__ = ["initial_centroids"]
