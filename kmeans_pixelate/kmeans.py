# kmeans_pixelate/kmeans.py
from __future__ import annotations

"""
K-means colour clustering.

Each round assigns every pixel to its nearest centroid and then moves each
centroid to the floor mean of its pixels. A cluster that received no pixels
keeps its previous centroid; such dead centroids are expected on images with
few distinct colours and are not reseeded.

The default runs a fixed number of rounds with no convergence test. Passing
stop_when_stable=True ends the run after the first round in which no pixel
changed cluster.

With workers > 1 the assignment step is sharded over a thread pool. Shards
read the centroid set, return labels and a partial ClusterAccumulator, and the
partials are merged before the single update step replaces the centroids.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .centroids import initial_centroids
from .constants import CHANNELS, KMEANS_ROUNDS
from .core_types import CentroidSet, ClusterAccumulator, Labels, PixelList
from .distance import nearest_centroid_indices
from .utils import debug_log, key_value_pairs_to_string, split_rows_into_parts


@dataclass(frozen=True)
class KMeansResult:
    """Outcome of a k-means run."""

    centroids: CentroidSet  # (k, 4) int64
    labels: Labels  # (N,) cluster index per pixel from the last round
    cluster_sizes: np.ndarray  # (k,) pixels per cluster in the last round
    rounds_run: int
    stable: bool  # last round changed no assignment

    @property
    def dead_clusters(self) -> int:
        return int(np.count_nonzero(self.cluster_sizes == 0))


def _assign_shard(
    pixels: PixelList, centroids: CentroidSet, k: int
) -> Tuple[Labels, ClusterAccumulator]:
    labels = nearest_centroid_indices(pixels, centroids)
    return labels, ClusterAccumulator.from_labels(pixels, labels, k)


def assign_and_accumulate(
    pixels: PixelList,
    centroids: CentroidSet,
    *,
    workers: int = 1,
    executor: Optional[ThreadPoolExecutor] = None,
) -> Tuple[Labels, ClusterAccumulator]:
    """
    Assignment step: labels for every pixel plus per-cluster sums and counts.

    The result does not depend on the number of workers.
    """
    k = int(centroids.shape[0])
    n = int(pixels.shape[0])
    if executor is None or workers <= 1 or n < 2 * workers:
        return _assign_shard(pixels, centroids, k)

    spans = split_rows_into_parts(n, workers)
    futs = [executor.submit(_assign_shard, pixels[s:e], centroids, k) for s, e in spans]
    parts = [fu.result() for fu in futs]

    labels = np.concatenate([lab for lab, _ in parts])
    acc = ClusterAccumulator.empty(k)
    for _, part in parts:
        acc = acc.merge(part)
    return labels, acc


def run_kmeans(
    pixels: PixelList,
    num_colors: int,
    *,
    rounds: int = KMEANS_ROUNDS,
    stop_when_stable: bool = False,
    workers: int = 1,
    debug: bool = False,
) -> KMeansResult:
    """
    Cluster pixel rows into num_colors groups.

    Args:
      pixels           : int64 [N,4] samples in row-major scan order
      num_colors       : cluster count, must be >= 1
      rounds           : round cap (default 5)
      stop_when_stable : end early once assignments stop changing
      workers          : threads for the assignment step
      debug            : print per-round stats

    Returns:
      KMeansResult. Centroids are int64 [k,4] with the same channel range as the input.
    """
    if num_colors < 1:
        raise ValueError(f"palette size must be >= 1, got {num_colors}")
    if rounds < 1:
        raise ValueError(f"round count must be >= 1, got {rounds}")

    px = np.asarray(pixels, dtype=np.int64).reshape(-1, CHANNELS)
    centroids = initial_centroids(px, num_colors)

    prev_labels: Optional[Labels] = None
    labels: Labels = np.zeros(px.shape[0], dtype=np.int64)
    sizes = np.zeros(num_colors, dtype=np.int64)
    stable = False
    rounds_run = 0

    pool = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
    try:
        for r in range(rounds):
            labels, acc = assign_and_accumulate(
                px, centroids, workers=workers, executor=pool
            )
            centroids = acc.apply(centroids)
            sizes = acc.counts
            rounds_run = r + 1

            stable = prev_labels is not None and np.array_equal(labels, prev_labels)
            if debug:
                changed = (
                    px.shape[0]
                    if prev_labels is None
                    else int(np.count_nonzero(labels != prev_labels))
                )
                debug_log(
                    key_value_pairs_to_string(
                        [
                            ("Round", rounds_run),
                            ("Changed", changed),
                            ("Empty clusters", int(np.count_nonzero(sizes == 0))),
                        ]
                    )
                )
            if stop_when_stable and stable:
                break
            prev_labels = labels
    finally:
        if pool is not None:
            pool.shutdown(wait=True)

    return KMeansResult(
        centroids=centroids,
        labels=labels,
        cluster_sizes=sizes,
        rounds_run=rounds_run,
        stable=bool(stable),
    )


__all__ = ["KMeansResult", "assign_and_accumulate", "run_kmeans"]
