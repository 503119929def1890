# kmeans_pixelate/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight validators.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from .constants import CHANNELS

# Basic aliases

Sample = Tuple[int, int, int, int]  # (R, G, B, A), 0..65535 premultiplied

WideImage = NDArray[np.uint16]  # (H, W, 4)
U8Image = NDArray[np.uint8]  # (H, W, 4)
PixelList = NDArray[np.int64]  # (N, 4), row-major scan order
CentroidSet = NDArray[np.int64]  # (k, 4)
Labels = NDArray[np.int64]  # (N,)

# Value objects


@dataclass
class ClusterAccumulator:
    """
    Per-cluster channel sums and pixel counts for one round.

    Partials from independent shards combine with merge(); addition is
    associative and commutative so shard order does not matter.
    """

    sums: NDArray[np.int64]  # (k, 4)
    counts: NDArray[np.int64]  # (k,)

    @classmethod
    def empty(cls, k: int) -> "ClusterAccumulator":
        return cls(
            sums=np.zeros((k, CHANNELS), dtype=np.int64),
            counts=np.zeros((k,), dtype=np.int64),
        )

    @classmethod
    def from_labels(cls, pixels: PixelList, labels: Labels, k: int) -> "ClusterAccumulator":
        counts = np.bincount(labels, minlength=k).astype(np.int64)
        sums = np.zeros((k, CHANNELS), dtype=np.int64)
        for ch in range(CHANNELS):
            # exact while a cluster's channel sum stays below 2**53
            sums[:, ch] = np.bincount(
                labels, weights=pixels[:, ch].astype(np.float64), minlength=k
            ).astype(np.int64)
        return cls(sums=sums, counts=counts)

    def merge(self, other: "ClusterAccumulator") -> "ClusterAccumulator":
        return ClusterAccumulator(
            sums=self.sums + other.sums, counts=self.counts + other.counts
        )

    def apply(self, centroids: CentroidSet) -> CentroidSet:
        """Floor-mean update; clusters with no pixels keep their centroid."""
        out = centroids.copy()
        live = self.counts > 0
        out[live] = self.sums[live] // self.counts[live][:, None]
        return out


# Small helpers


def as_sample(value) -> Sample:
    """Coerce a 4-length sequence or array row to an (int, int, int, int) Sample."""
    if len(value) < CHANNELS:
        raise ValueError("sequence too small for RGBA")
    return (int(value[0]), int(value[1]), int(value[2]), int(value[3]))


def rgba_to_hex(rgba) -> str:
    """RGBA row to lowercase hex string '#rrggbbaa'."""
    r, g, b, a = as_sample(rgba)
    return f"#{r:02x}{g:02x}{b:02x}{a:02x}"


def assert_wide_image(image: np.ndarray) -> WideImage:
    """Validate a uint16 (H,W,4) image and return it typed as WideImage."""
    if image.dtype != np.uint16 or image.ndim != 3 or image.shape[-1] != CHANNELS:
        raise TypeError("expected uint16 (H,W,4) image")
    return image  # type: ignore[return-value]


def flatten_pixels(image: WideImage) -> PixelList:
    """Row-major (y outer, x inner) pixel list as int64 rows."""
    return image.reshape(-1, CHANNELS).astype(np.int64)


__all__ = [
    # aliases / types
    "Sample",
    "WideImage",
    "U8Image",
    "PixelList",
    "CentroidSet",
    "Labels",
    # value objects
    "ClusterAccumulator",
    # helpers
    "as_sample",
    "rgba_to_hex",
    "assert_wide_image",
    "flatten_pixels",
]
