"""
Export helpers for spectrum maps.

Grids and axis handles are written as plain, space-delimited text so they can
be plotted in other software. The bitmap itself is produced by
`spectrum_map.bitmap.encode_bitmap`.

License: MIT
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .config import TEXT_FLOAT_FORMAT


def grid_to_text_bytes(grid: np.ndarray) -> bytes:
    """One grid row per line, values separated by a single space."""
    df = pd.DataFrame(np.atleast_2d(np.asarray(grid, dtype=float)))
    return df.to_csv(
        sep=" ",
        header=False,
        index=False,
        float_format=TEXT_FLOAT_FORMAT,
        lineterminator="\n",
    ).encode("utf-8")


def axis_to_text_bytes(axis: np.ndarray) -> bytes:
    """One axis value per line."""
    s = pd.Series(np.asarray(axis, dtype=float).ravel())
    return s.to_csv(
        header=False,
        index=False,
        float_format=TEXT_FLOAT_FORMAT,
        lineterminator="\n",
    ).encode("utf-8")
