"""
Raw grid assembly.

Implements:
- Projection of acquisition coordinates onto sorted, unique x and y axes
- Step inference between neighbouring axis values (may be non-uniform)
- A dense raw grid, one cell per (x, y) pair, zero where no file was acquired

Files may arrive in any order and positions may be missing; every observed
x is assumed to pair with every observed y.

License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

import numpy as np

from .data import Coordinate
from .errors import GeometryError


@dataclass(frozen=True)
class RawMap:
    """Sorted axes, their steps and the raw grid (rows over y, columns over x)."""
    x_axis: np.ndarray
    y_axis: np.ndarray
    x_steps: np.ndarray
    y_steps: np.ndarray
    raw: np.ndarray

    @property
    def true_width(self) -> int:
        return int(self.x_axis.size)

    @property
    def true_length(self) -> int:
        return int(self.y_axis.size)


def unique_axis(values: Iterable[float]) -> np.ndarray:
    """Sort ascending, then drop repeats."""
    return np.unique(np.asarray(list(values), dtype=float))


def axis_steps(axis: np.ndarray) -> np.ndarray:
    """Gaps between neighbouring axis values, rounded half away from zero."""
    gaps = np.diff(axis)
    return (np.sign(gaps) * np.floor(np.abs(gaps) + 0.5)).astype(np.int64)


def assemble_grid(
    coords: Iterable[Coordinate],
    values: Mapping[Coordinate, float],
) -> RawMap:
    """
    Build the raw grid from acquisition coordinates and their intensities.

    Parameters
    ----------
    coords:
        Unique (x, y) acquisition positions.
    values:
        Intensity per position. Positions of the full x/y cross product that
        are absent here are filled with 0.

    Returns
    -------
    RawMap
        raw has shape (len(y_axis), len(x_axis)).
    """
    coords = list(coords)
    if not coords or not values:
        raise GeometryError("No coordinates or intensities to build a map from.")

    x_axis = unique_axis(x for x, _ in coords)
    y_axis = unique_axis(y for _, y in coords)

    raw = np.zeros((y_axis.size, x_axis.size), dtype=float)
    for row, y in enumerate(y_axis):
        for col, x in enumerate(x_axis):
            raw[row, col] = values.get((float(x), float(y)), 0.0)

    return RawMap(
        x_axis=x_axis,
        y_axis=y_axis,
        x_steps=axis_steps(x_axis),
        y_steps=axis_steps(y_axis),
        raw=raw,
    )
