# kmeans_pixelate/remap.py
from __future__ import annotations

"""
Nearest-centroid remap of a wide (16-bit) image into an 8-bit RGBA grid.

Every source sample is read from the image itself, matched to its nearest
centroid (ties to the lowest index), and written as that centroid narrowed by
a right shift. Alpha is matched and narrowed like the colour channels.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .constants import CHANNELS, NARROW_SHIFT
from .core_types import CentroidSet, U8Image, WideImage, assert_wide_image
from .distance import nearest_centroid_indices
from .utils import split_rows_into_parts


def narrow_centroids(centroids: CentroidSet) -> np.ndarray:
    """Drop the low byte of each channel: uint8 [k,4]. Truncates, never rounds."""
    cs = np.asarray(centroids, dtype=np.int64)
    return (cs >> NARROW_SHIFT).astype(np.uint8)


def _remap_rows(
    wide: WideImage, centroids: np.ndarray, palette_u8: np.ndarray
) -> U8Image:
    h, w, _ = wide.shape
    idx = nearest_centroid_indices(wide.reshape(-1, CHANNELS), centroids)
    return palette_u8[idx].reshape(h, w, CHANNELS)


def remap_to_centroids(
    wide: WideImage, centroids: CentroidSet, *, workers: int = 1
) -> U8Image:
    """
    Map each pixel to its nearest centroid colour.

    Args:
      wide      : uint16 [H,W,4] premultiplied source samples
      centroids : int64 [k,4], k >= 1
      workers   : threads; rows are split into bands, output is the same

    Returns:
      uint8 [H,W,4] image holding only narrowed centroid colours.
    """
    wide = assert_wide_image(wide)
    cs = np.asarray(centroids, dtype=np.int64)
    if cs.ndim != 2 or cs.shape[0] == 0:
        raise ValueError("remap needs at least one centroid")
    palette_u8 = narrow_centroids(cs)

    h = int(wide.shape[0])
    if workers <= 1 or h < 2 * workers:
        return _remap_rows(wide, cs, palette_u8)

    out = np.empty(wide.shape, dtype=np.uint8)
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futs = {
            ex.submit(_remap_rows, wide[s:e], cs, palette_u8): (s, e)
            for s, e in split_rows_into_parts(h, workers)
        }
        for fu, (s, e) in futs.items():
            out[s:e] = fu.result()
    return out


__all__ = ["narrow_centroids", "remap_to_centroids"]
