# kmeans_pixelate/constants.py
"""
Tunables used across the project.

- CLI fallbacks (DEFAULT_*)
- K-means round cap
- Channel widths and narrowing shift
- Encoder settings and supported formats
"""
from __future__ import annotations

from typing import Tuple

# =========================
# CLI fallbacks
# =========================
DEFAULT_BLOCK_SIZE: int = 10
DEFAULT_NUM_COLORS: int = 16

# =========================
# K-means
# =========================
KMEANS_ROUNDS: int = 5

# Pixels per distance chunk. Bounds the [chunk, k] distance buffer.
DISTANCE_CHUNK: int = 262_144

# =========================
# Channels
# =========================
WIDE_MAX: int = 0xFFFF
WIDE_PER_U8: int = 0x101  # 8-bit c -> c * 257 spans the 16-bit range
NARROW_SHIFT: int = 8
CHANNELS: int = 4  # R, G, B, A

# =========================
# Encoding
# =========================
SUPPORTED_FORMATS: Tuple[str, ...] = ("PNG", "JPEG")
JPEG_QUALITY: int = 100
LOSSLESS_HINT_COLORS: int = 2
