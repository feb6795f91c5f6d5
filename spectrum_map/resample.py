"""
Formatted grid construction.

The raw grid holds one cell per acquired position regardless of how far apart
positions are. The formatted grid gives every physical step the same pixel
size, using the smallest step on each axis as one pixel, and pads both
dimensions to a multiple of ALIGNMENT so it can be written as a bitmap.

Upsampling is nearest-neighbour: each output pixel holds the raw value of the
last raw index whose pixel-step boundary it has passed.

Known limitations:
- Axes that do not start at 0 may come out misaligned.
- Boundaries accumulate up to the padded size, so the last raw column (and
  row) usually never becomes active and is not shown in the formatted grid.
  For x in {0, 1, 2} padded to 4 pixels, the boundaries are [2, 4] and the
  value at x=2 is dropped.

License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .config import ALIGNMENT
from .errors import GeometryError
from .grid import RawMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormattedMap:
    grid: np.ndarray
    width: int
    height: int


def pad_to_alignment(n: int, alignment: int = ALIGNMENT) -> int:
    """Round n up to the next multiple of alignment."""
    if n % alignment:
        n += alignment - n % alignment
    return n


def _axis_extent(axis: np.ndarray) -> int:
    # Endpoints are truncated individually before subtracting.
    return int(axis[-1]) - int(axis[0])


def pixel_dimension(axis: np.ndarray, steps: np.ndarray, name: str) -> int:
    """Unpadded pixel count along one axis: extent / smallest step + 1."""
    if axis.size == 1:
        return 1

    min_step = int(steps.min())
    extent = _axis_extent(axis)
    if min_step <= 0 or extent <= 0:
        raise GeometryError(
            f"Degenerate {name} axis: smallest step {min_step}, extent {extent}. "
            "Positions closer than 0.5 cannot be resolved into pixels."
        )
    return extent // min_step + 1


def pixel_boundaries(axis: np.ndarray, steps: np.ndarray, padded: int) -> np.ndarray:
    """Pixel index at which each following raw index becomes active."""
    if axis.size == 1:
        return np.zeros(0, dtype=np.int64)
    extent = _axis_extent(axis)
    return np.cumsum(steps * padded // extent)


def raw_index_lookup(boundaries: np.ndarray, padded: int, n_raw: int) -> np.ndarray:
    """Map every output pixel 0..padded-1 to the raw index it copies."""
    idx = np.searchsorted(boundaries, np.arange(padded), side="right")
    return np.minimum(idx, n_raw - 1)


def _axis_lookup(axis: np.ndarray, steps: np.ndarray, name: str) -> Tuple[np.ndarray, int]:
    padded = pad_to_alignment(pixel_dimension(axis, steps, name))
    boundaries = pixel_boundaries(axis, steps, padded)
    return raw_index_lookup(boundaries, padded, axis.size), padded


def resample_grid(raw_map: RawMap) -> FormattedMap:
    """Resample raw_map onto a uniform, alignment-padded pixel grid."""
    if raw_map.x_axis[0] != 0 or raw_map.y_axis[0] != 0:
        logger.warning(
            "Map origin is (%g, %g), not (0, 0); the formatted grid and bitmap "
            "may be misaligned.",
            raw_map.x_axis[0],
            raw_map.y_axis[0],
        )

    cols, width = _axis_lookup(raw_map.x_axis, raw_map.x_steps, "x")
    rows, height = _axis_lookup(raw_map.y_axis, raw_map.y_steps, "y")

    grid = raw_map.raw[np.ix_(rows, cols)]
    logger.info("Formatted grid is %d x %d pixels", width, height)
    return FormattedMap(grid=grid, width=width, height=height)
