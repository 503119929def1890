# kmeans_pixelate/pipeline.py
from __future__ import annotations

"""
Quantise-then-pixelate pipeline.

A pure function of (wide image, palette size, block size). Nothing is cached
between calls.
"""

import time
from dataclasses import dataclass

import numpy as np

from .constants import KMEANS_ROUNDS
from .core_types import CentroidSet, U8Image, WideImage, assert_wide_image, flatten_pixels
from .kmeans import KMeansResult, run_kmeans
from .pixelate import pixelate
from .remap import remap_to_centroids
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


@dataclass(frozen=True)
class QuantizeResult:
    image: U8Image  # uint8 [H,W,4], premultiplied
    centroids: CentroidSet  # int64 [k,4], 16-bit range
    kmeans: KMeansResult


@dataclass(frozen=True)
class PipelineResult:
    image: U8Image  # pixelated output
    quantized: U8Image  # remapped, before pixelation
    centroids: CentroidSet
    kmeans: KMeansResult


def quantize(
    wide: WideImage,
    num_colors: int,
    *,
    rounds: int = KMEANS_ROUNDS,
    stop_when_stable: bool = False,
    workers: int = 1,
    debug: bool = False,
) -> QuantizeResult:
    """Cluster the image colours and remap every pixel to its nearest centroid."""
    wide = assert_wide_image(wide)
    t0 = time.perf_counter()
    km = run_kmeans(
        flatten_pixels(wide),
        num_colors,
        rounds=rounds,
        stop_when_stable=stop_when_stable,
        workers=workers,
        debug=debug,
    )
    t1 = time.perf_counter()
    image = remap_to_centroids(wide, km.centroids, workers=workers)
    t2 = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Rounds", km.rounds_run),
                    ("Stable", km.stable),
                    ("Dead centroids", km.dead_clusters),
                    ("K-means", format_seconds_compact(t1 - t0)),
                    ("Remap", format_seconds_compact(t2 - t1)),
                ]
            )
        )
    return QuantizeResult(image=image, centroids=km.centroids, kmeans=km)


def quantize_and_pixelate(
    wide: WideImage,
    num_colors: int,
    block_size: int,
    *,
    rounds: int = KMEANS_ROUNDS,
    stop_when_stable: bool = False,
    workers: int = 1,
    debug: bool = False,
) -> PipelineResult:
    """Quantise to num_colors, then block-fill with block_size."""
    if block_size < 1:
        raise ValueError(f"block size must be >= 1, got {block_size}")
    q = quantize(
        wide,
        num_colors,
        rounds=rounds,
        stop_when_stable=stop_when_stable,
        workers=workers,
        debug=debug,
    )
    out = pixelate(q.image, block_size)
    return PipelineResult(
        image=np.ascontiguousarray(out),
        quantized=q.image,
        centroids=q.centroids,
        kmeans=q.kmeans,
    )


__all__ = ["QuantizeResult", "PipelineResult", "quantize", "quantize_and_pixelate"]
