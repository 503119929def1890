#!/usr/bin/env python3
"""
quantize_pixelate.py
Reduce an image to a k-means palette, then pixelate it into flat blocks.

Usage:
  python quantize_pixelate.py INPUT OUTPUT PIXEL_SIZE NUM_COLORS [--rounds R] [--until-stable] [--workers N] [--report] [--debug]

Arguments:
  PIXEL_SIZE : block edge in pixels. Anything that is not a plain integer means 10.
  NUM_COLORS : palette size. Anything that is not a plain integer means 16.

Input:
  PNG or JPEG. Alpha takes part in clustering like any colour channel.

Output:
  Written in the input's format (PNG stays PNG, JPEG stays JPEG at quality 100),
  whatever the OUTPUT suffix says.

Notes:
  K-means runs 5 rounds by default with no convergence test. --until-stable stops
  once no pixel changes cluster. --workers spreads assignment and remap over threads;
  the output does not change.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from kmeans_pixelate.constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_NUM_COLORS,
    KMEANS_ROUNDS,
    LOSSLESS_HINT_COLORS,
)
from kmeans_pixelate.errors import PixelateError
from kmeans_pixelate.image_io import load_image, save_image
from kmeans_pixelate.pipeline import quantize_and_pixelate
from kmeans_pixelate.utils import (
    colour_usage_report,
    debug_log,
    default_workers,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    parse_int_or_default,
    print_config_line,
    warn,
)


# Flags recognised anywhere on the command line. Every other token is positional,
# so "-x" as PIXEL_SIZE falls back to its default instead of failing as an option.
_VALUE_FLAGS = ("--rounds", "--workers")
_SWITCH_FLAGS = ("--until-stable", "--report", "--debug", "-h", "--help")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quantize_pixelate",
        description="Quantise an image to a k-means palette, then pixelate it.",
        allow_abbrev=False,
    )
    parser.add_argument("input", type=Path, help="Input image (PNG or JPEG)")
    parser.add_argument("output", type=Path, help="Output image path")
    parser.add_argument(
        "pixel_size", help=f"Block size in pixels (default {DEFAULT_BLOCK_SIZE} if unparsable)"
    )
    parser.add_argument(
        "num_colors", help=f"Palette size (default {DEFAULT_NUM_COLORS} if unparsable)"
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=KMEANS_ROUNDS,
        help="K-means round cap.",
    )
    parser.add_argument(
        "--until-stable",
        action="store_true",
        help="Stop k-means early once no pixel changes cluster.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Threads for assignment and remap. 0 picks a count from the CPU.",
    )
    parser.add_argument(
        "--report", action="store_true", help="List the colours used in the output"
    )
    parser.add_argument("--debug", action="store_true", help="Timings and k-means stats")
    return parser


def split_argv(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Separate known flags (with their values) from positional tokens."""
    flags: List[str] = []
    positionals: List[str] = []
    i = 0
    while i < len(argv):
        tok = argv[i]
        if tok == "--":
            positionals.extend(argv[i + 1 :])
            break
        if tok in _SWITCH_FLAGS or tok.startswith(tuple(f + "=" for f in _VALUE_FLAGS)):
            flags.append(tok)
        elif tok in _VALUE_FLAGS:
            flags.extend(argv[i : i + 2])
            i += 1
        else:
            positionals.append(tok)
        i += 1
    return flags, positionals


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with input, output, pixel_size, num_colors (already
      resolved to ints with their fallbacks), rounds, until_stable, workers,
      report and debug.
    """
    if argv is None:
        argv = sys.argv[1:]
    flags, positionals = split_argv(list(argv))
    args = build_parser().parse_args(flags + ["--"] + positionals)
    args.pixel_size = parse_int_or_default(args.pixel_size, DEFAULT_BLOCK_SIZE)
    args.num_colors = parse_int_or_default(args.num_colors, DEFAULT_NUM_COLORS)
    return args


def run(args: argparse.Namespace) -> int:
    """Load -> quantise -> pixelate -> save. Returns a process exit status."""
    t_start = time.perf_counter()

    if args.pixel_size < 1:
        error(f"Pixel size must be at least 1, got {args.pixel_size}")
        return 1
    if args.num_colors < 1:
        error(f"Number of colors must be at least 1, got {args.num_colors}")
        return 1
    if args.rounds < 1:
        error(f"Rounds must be at least 1, got {args.rounds}")
        return 1
    if args.workers < 1:
        args.workers = default_workers()

    print_config_line(
        "run",
        [
            ("Block size", args.pixel_size),
            ("Colors", args.num_colors),
            ("Rounds", args.rounds),
            ("Until stable", bool(args.until_stable)),
            ("Workers", args.workers),
        ],
        debug=args.debug,
    )

    try:
        loaded = load_image(args.input)
    except PixelateError as e:
        error(str(e))
        return 1
    t_loaded = time.perf_counter()

    if args.debug:
        w, h = loaded.size
        debug_log(
            key_value_pairs_to_string(
                [("Loaded", f"{w}x{h}"), ("Format", loaded.format)]
            )
        )

    result = quantize_and_pixelate(
        loaded.wide,
        args.num_colors,
        args.pixel_size,
        rounds=args.rounds,
        stop_when_stable=args.until_stable,
        workers=args.workers,
        debug=args.debug,
    )
    t_mapped = time.perf_counter()

    if args.num_colors == LOSSLESS_HINT_COLORS:
        warn(
            "Note: For exactly 2 colors, PNG output is recommended to avoid compression artifacts."
        )

    try:
        save_image(args.output, result.image, loaded.format)
    except PixelateError as e:
        error(str(e))
        return 1
    t_saved = time.perf_counter()

    if args.report or args.debug:
        log("Colours used:")
        for hex_code, count in colour_usage_report(result.image):
            log(f"  {hex_code}: {count:,}")

    if args.debug:
        debug_log(
            f"Total {format_seconds_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"map={format_seconds_compact(t_mapped - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )

    log(f"Pixelated image with {args.num_colors} colors saved to {args.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Wrong argument count exits with status 2 and usage text."""
    return run(parse_cli_args(argv))


if __name__ == "__main__":
    sys.exit(main())
