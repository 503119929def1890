# kmeans_pixelate/errors.py
"""
Exception types raised by the image I/O layer.

Library code raises these; the CLI reports them and exits.
"""
from __future__ import annotations


class PixelateError(Exception):
    """Base class for fatal pipeline errors."""


class ImageReadError(PixelateError):
    """Input file could not be opened."""


class ImageDecodeError(PixelateError):
    """Input bytes are corrupt or not a recognised image."""


class UnsupportedFormatError(PixelateError):
    """Decoded fine, but the format cannot be written back."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported image format: {fmt}")
        self.format = fmt


class ImageWriteError(PixelateError):
    """Output file could not be created."""


class ImageEncodeError(PixelateError):
    """Encoder failed while writing the output image."""


__all__ = [
    "PixelateError",
    "ImageReadError",
    "ImageDecodeError",
    "UnsupportedFormatError",
    "ImageWriteError",
    "ImageEncodeError",
]
