# kmeans_pixelate/__init__.py
"""
kmeans_pixelate package.

Purpose:
  Reduce an image to a small k-means palette, then pixelate it. See
  quantize_pixelate.py for the CLI.

Public API:
  quantize              : k-means + nearest-centroid remap.
  quantize_and_pixelate : quantize, then block mosaic.
  run_kmeans            : the clustering engine on a pixel list.
  remap_to_centroids    : nearest-centroid remap of a wide image.
  pixelate              : top-left-sample block fill.
  squared_distance      : RGBA squared Euclidean distance.
  initial_centroids     : fixed-stride centroid seeding.
  image_io              : Pillow decode/encode to 16-bit premultiplied RGBA.
  errors                : exception taxonomy raised by image_io.

Quick start:
  from kmeans_pixelate import quantize_and_pixelate
  from kmeans_pixelate.image_io import load_image, save_image
"""

__version__ = "0.1.0"

from . import constants
from . import core_types
from . import errors
from . import image_io
from . import utils

from .centroids import initial_centroids
from .distance import nearest_centroid_indices, squared_distance
from .kmeans import KMeansResult, run_kmeans
from .pipeline import PipelineResult, QuantizeResult, quantize, quantize_and_pixelate
from .pixelate import pixelate
from .remap import remap_to_centroids

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "errors",
    "image_io",
    "utils",
    "initial_centroids",
    "nearest_centroid_indices",
    "squared_distance",
    "KMeansResult",
    "run_kmeans",
    "PipelineResult",
    "QuantizeResult",
    "quantize",
    "quantize_and_pixelate",
    "pixelate",
    "remap_to_centroids",
]
