# kmeans_pixelate/distance.py
from __future__ import annotations

"""
Squared Euclidean distance over (R, G, B, A) samples.

All four channels weigh the same and nothing is normalised. Arithmetic is done
in int64 (or Python int for the scalar form): the largest possible sum is
4 * 65535**2, well inside the signed 64-bit range.
"""

import numpy as np

from .constants import DISTANCE_CHUNK
from .core_types import CentroidSet, Labels, PixelList, Sample


def squared_distance(a: Sample, b: Sample) -> int:
    """
    Sum of squared per-channel differences between two samples.

    Reference definition; squared_distances_to() is the vectorised form the
    nearest-centroid search runs on.
    """
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    da = int(a[3]) - int(b[3])
    return dr * dr + dg * dg + db * db + da * da


def squared_distances_to(pixels: np.ndarray, sample: np.ndarray) -> np.ndarray:
    """Distance from every int64 pixel row to one sample: int64 [N]."""
    diff = pixels - sample
    return np.sum(diff * diff, axis=1, dtype=np.int64)


def squared_distances(pixels: PixelList, centroids: CentroidSet) -> np.ndarray:
    """Full [N, k] int64 distance matrix. Intended for small inputs."""
    px = np.asarray(pixels, dtype=np.int64)
    cs = np.asarray(centroids, dtype=np.int64)
    out = np.empty((px.shape[0], cs.shape[0]), dtype=np.int64)
    for j in range(cs.shape[0]):
        out[:, j] = squared_distances_to(px, cs[j])
    return out


def _nearest_in_chunk(px: np.ndarray, cs: np.ndarray) -> Labels:
    best_idx = np.zeros(px.shape[0], dtype=np.int64)
    best_dist = squared_distances_to(px, cs[0])
    for j in range(1, cs.shape[0]):
        dist = squared_distances_to(px, cs[j])
        # strict '<': on ties the lower index stays
        closer = dist < best_dist
        best_dist = np.where(closer, dist, best_dist)
        best_idx[closer] = j
    return best_idx


def nearest_centroid_indices(
    pixels: PixelList, centroids: CentroidSet, chunk: int = DISTANCE_CHUNK
) -> Labels:
    """
    Index of the nearest centroid for every pixel row.

    Ties resolve to the lowest centroid index. Raises ValueError when the
    centroid set is empty, since there is nothing to map to.
    """
    cs = np.asarray(centroids, dtype=np.int64)
    if cs.ndim != 2 or cs.shape[0] == 0:
        raise ValueError("nearest-centroid search needs at least one centroid")
    px = np.asarray(pixels, dtype=np.int64).reshape(-1, cs.shape[1])
    out = np.empty(px.shape[0], dtype=np.int64)
    for i in range(0, px.shape[0], chunk):
        out[i : i + chunk] = _nearest_in_chunk(px[i : i + chunk], cs)
    return out


__all__ = [
    "squared_distance",
    "squared_distances_to",
    "squared_distances",
    "nearest_centroid_indices",
]
