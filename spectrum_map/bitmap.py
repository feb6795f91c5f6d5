"""
Minimal 24-bit uncompressed bitmap encoder.

Layout written:
- 14-byte file header (signature, file size, reserved, pixel offset)
- 40-byte info header (BITMAPINFOHEADER, no compression, no colour table)
- One BGR triple per grid cell, in the grid's own row order

Notes:
- Rows are NOT flipped to bottom-up order; row 0 of the grid is written first.
- The file-size field is 54 + 4*width*height, while the pixel data is
  3*width*height bytes long.
- Channel values are truncated and wrapped to a byte, not clamped: an
  intensity of 1.0 gives (93, 227, 226).

License: MIT
"""

from __future__ import annotations

import math
import struct
from typing import Tuple

import numpy as np

from .config import (
    ALIGNMENT,
    BMP_BITS_PER_PIXEL,
    BMP_INFO_HEADER_SIZE,
    BMP_PIXEL_OFFSET,
    BMP_PLANES,
    BMP_RESOLUTION_BASE,
    BMP_SIGNATURE,
    COLOR_RAMP,
    INT32_MAX,
)
from .errors import EncodingError


def _check_dimensions(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if value < 0 or value > INT32_MAX:
            raise EncodingError(f"Bitmap {name} {value} is outside [0, {INT32_MAX}].")
        if value % ALIGNMENT != 0:
            raise EncodingError(f"Bitmap {name} {value} is not a multiple of {ALIGNMENT}.")


def resolution(width: int, height: int) -> Tuple[int, int]:
    """Horizontal/vertical resolution: the reduced aspect ratio times 1000."""
    g = math.gcd(width, height)
    if g == 0:
        return BMP_RESOLUTION_BASE, BMP_RESOLUTION_BASE
    return BMP_RESOLUTION_BASE * (width // g), BMP_RESOLUTION_BASE * (height // g)


def file_header(width: int, height: int) -> bytes:
    file_size = BMP_PIXEL_OFFSET + 4 * width * height
    if file_size > 0xFFFFFFFF:
        raise EncodingError(f"Bitmap of {width} x {height} pixels is too large for the file-size field.")
    return struct.pack("<2sIII", BMP_SIGNATURE, file_size, 0, BMP_PIXEL_OFFSET)


def info_header(width: int, height: int) -> bytes:
    h_res, v_res = resolution(width, height)
    if h_res > INT32_MAX or v_res > INT32_MAX:
        raise EncodingError(f"Bitmap resolution {h_res} x {v_res} does not fit a 32-bit field.")
    return struct.pack(
        "<IiiHHIIiiII",
        BMP_INFO_HEADER_SIZE,
        width,
        height,
        BMP_PLANES,
        BMP_BITS_PER_PIXEL,
        0,  # no compression
        0,  # raw data size
        h_res,
        v_res,
        0,  # colour table entries
        0,  # important colours
    )


def _channel(values: np.ndarray, color: str) -> np.ndarray:
    numerator, denominator = COLOR_RAMP[color]
    scaled = np.trunc(numerator * values / denominator).astype(np.int64)
    return (scaled % 256).astype(np.uint8)


def pixel_bytes(grid: np.ndarray) -> bytes:
    """BGR bytes for every cell of grid in row-major order."""
    values = np.asarray(grid, dtype=float).ravel()
    bgr = np.stack(
        [_channel(values, "blue"), _channel(values, "green"), _channel(values, "red")],
        axis=1,
    )
    return bgr.tobytes()


def encode_bitmap(grid: np.ndarray, width: int, height: int) -> bytes:
    """
    Encode a grid of intensities normalized to <= 1 as a bitmap.

    Raises EncodingError if the dimensions are negative, too large or not
    multiples of 4, if the grid does not hold width*height values, or if any
    value exceeds 1. Values above 1 are rejected, never clamped.
    """
    width = int(width)
    height = int(height)
    _check_dimensions(width, height)

    values = np.asarray(grid, dtype=float)
    if values.size != width * height:
        raise EncodingError(
            f"Grid holds {values.size} values but the bitmap is {width} x {height}."
        )
    if values.size and np.any(values > 1):
        raise EncodingError(
            f"Intensity map not suitable for a bitmap: maximum {values.max()} exceeds 1."
        )

    return file_header(width, height) + info_header(width, height) + pixel_bytes(values)
