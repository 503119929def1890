# kmeans_pixelate/utils.py
from __future__ import annotations

"""
Shared utilities for kmeans_pixelate.

Includes lenient integer parsing for CLI arguments, row/shard partitioning for
the threaded paths, a colour usage report, duration formatting, and tidy logging.
"""

import os
import re
import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import U8Image, rgba_to_hex


# Argument helpers

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_int_or_default(text: str, default: int) -> int:
    """
    Parse a plain decimal integer with optional sign, else return default.

    Whitespace, underscores and other forms int() would accept are rejected,
    as are values outside the signed 64-bit range.
    """
    if _INT_RE.fullmatch(text) is None:
        return default
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return default
    return value


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    if height <= 0:
        return []
    parts = max(1, int(parts))
    step = (height + parts - 1) // parts
    return [(start, min(start + step, height)) for start in range(0, height, step)]


# Reports


def colour_usage_report(rgba: U8Image) -> List[Tuple[str, int]]:
    """
    Count distinct RGBA colours in an image.

    Returns a list of ('#rrggbbaa', count) sorted by count descending, ties by hex.
    """
    flat = rgba.reshape(-1, rgba.shape[-1])
    if flat.shape[0] == 0:
        return []
    uniques, counts = np.unique(flat, axis=0, return_counts=True)
    report = [(rgba_to_hex(row), int(c)) for row, c in zip(uniques, counts)]
    report.sort(key=lambda item: (-item[1], item[0]))
    return report


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Block size: 10  Colors: 16  Rounds: 5  Workers: 1
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "parse_int_or_default",
    "default_workers",
    "split_rows_into_parts",
    "colour_usage_report",
    "format_seconds_compact",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "log",
    "debug_log",
    "warn",
    "error",
]
