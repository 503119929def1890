# kmeans_pixelate/image_io.py
from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from .constants import JPEG_QUALITY, SUPPORTED_FORMATS, WIDE_MAX, WIDE_PER_U8
from .core_types import U8Image, WideImage
from .errors import (
    ImageDecodeError,
    ImageEncodeError,
    ImageReadError,
    ImageWriteError,
    UnsupportedFormatError,
)

"""
Image I/O helpers.

Decoded images are handed to the quantiser as 16-bit alpha-premultiplied RGBA
samples (each 8-bit channel c widened to c * 257, colour scaled by alpha).
Encoding reverses that: PNG gets straight (un-premultiplied) alpha, or plain
RGB when every pixel is opaque; JPEG gets the premultiplied RGB channels.
"""


@dataclass(frozen=True)
class LoadedImage:
    wide: WideImage  # uint16 [H,W,4], premultiplied
    format: str  # Pillow format name, one of SUPPORTED_FORMATS

    @property
    def size(self) -> tuple[int, int]:
        h, w = self.wide.shape[:2]
        return w, h


def widen_rgba(rgba: U8Image) -> WideImage:
    """Straight-alpha uint8 [H,W,4] -> premultiplied uint16 [H,W,4]."""
    c16 = rgba.astype(np.int64) * WIDE_PER_U8
    a16 = c16[..., 3:4]
    out = c16.copy()
    out[..., :3] = (c16[..., :3] * a16) // WIDE_MAX
    return out.astype(np.uint16)


def unpremultiply_rgba(rgba: U8Image) -> U8Image:
    """Premultiplied uint8 [H,W,4] -> straight-alpha uint8 [H,W,4]."""
    c16 = rgba.astype(np.int64) * WIDE_PER_U8
    a16 = c16[..., 3:4]
    safe = np.where(a16 == 0, 1, a16)
    straight = np.where(a16 == 0, 0, (c16[..., :3] * WIDE_MAX) // safe) >> 8
    out = np.empty_like(rgba)
    out[..., :3] = np.minimum(straight, 255).astype(np.uint8)
    out[..., 3] = rgba[..., 3]
    return out


def load_image(path: Path) -> LoadedImage:
    """
    Read and decode an image file.

    Raises:
      ImageReadError         : file cannot be opened
      ImageDecodeError       : bytes are not a decodable image
      UnsupportedFormatError : decoded format is not PNG or JPEG
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageReadError(f"Error opening input file: {e}") from e

    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            fmt = im.format or ""
            rgba = np.array(im.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageDecodeError(f"Error decoding image: {e}") from e

    if fmt not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(fmt)
    return LoadedImage(wide=widen_rgba(rgba), format=fmt)


def encode_for_format(rgba_premul: U8Image, fmt: str) -> Image.Image:
    """Build the Pillow image an encoder of `fmt` should receive."""
    if fmt == "JPEG":
        return Image.fromarray(np.ascontiguousarray(rgba_premul[..., :3]))
    if fmt == "PNG":
        if np.all(rgba_premul[..., 3] == 255):
            return Image.fromarray(np.ascontiguousarray(rgba_premul[..., :3]))
        return Image.fromarray(unpremultiply_rgba(rgba_premul))
    raise UnsupportedFormatError(fmt)


def save_image(path: Path, rgba_premul: U8Image, fmt: str) -> Path:
    """
    Encode a premultiplied uint8 [H,W,4] grid as `fmt` and write it to path.

    The format is taken from the argument, never from the file suffix.
    """
    im = encode_for_format(rgba_premul, fmt)
    try:
        fh = open(path, "wb")
    except OSError as e:
        raise ImageWriteError(f"Error creating output file: {e}") from e
    with fh:
        try:
            if fmt == "JPEG":
                im.save(fh, format="JPEG", quality=JPEG_QUALITY)
            else:
                im.save(fh, format="PNG")
        except (OSError, ValueError) as e:
            raise ImageEncodeError(f"Error encoding output image: {e}") from e
    return Path(path)


__all__ = [
    "LoadedImage",
    "widen_rgba",
    "unpremultiply_rgba",
    "load_image",
    "encode_for_format",
    "save_image",
]
