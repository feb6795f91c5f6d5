"""
End-to-end map building.

Implements:
- Directory scan and per-site intensity extraction
- Raw grid assembly and formatted grid resampling
- Output selection: raw / grid / bmp / all
- Normalization before bitmap encoding: peak / none

Text outputs are always written before the bitmap, so an encoding failure
leaves them in place.

License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

import numpy as np

from .bitmap import encode_bitmap
from .config import (
    BITMAP_EXTENSION,
    GRID_SUFFIX,
    RAW_SUFFIX,
    TEXT_EXTENSION,
    X_HANDLES_SUFFIX,
    Y_HANDLES_SUFFIX,
)
from .data import IntensityMode, build_intensity_map, load_spectra
from .export import axis_to_text_bytes, grid_to_text_bytes
from .grid import RawMap, assemble_grid
from .resample import FormattedMap, resample_grid

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    RAW = "raw"
    GRID = "grid"
    BMP = "bmp"
    ALL = "all"


class Normalization(str, Enum):
    PEAK = "peak"
    NONE = "none"


@dataclass
class MapOutputs:
    raw_map: RawMap
    formatted: Optional[FormattedMap] = None
    written: List[Path] = field(default_factory=list)


def normalize_grid(grid: np.ndarray, normalization: Normalization) -> np.ndarray:
    """Scale grid for bitmap encoding. PEAK divides by the maximum when it is > 0."""
    values = np.asarray(grid, dtype=float)
    if Normalization(normalization) == Normalization.NONE:
        return values

    peak = float(values.max(initial=0.0))
    if peak > 0:
        return values / peak
    # All zeros (or all negative): nothing to scale by
    return values


def _write(path: Path, payload: bytes, written: List[Path]) -> None:
    path.write_bytes(payload)
    written.append(path)
    logger.info("Created file: %s", path)


def build_map_outputs(
    directory: Path,
    *,
    output_format: OutputFormat,
    mode: IntensityMode,
    energy: float,
    title: str,
    out_dir: Path = Path("."),
    channels: Optional[int] = None,
    normalization: Normalization = Normalization.PEAK,
) -> MapOutputs:
    """
    Build the map for one energy and write the requested outputs.

    Parameters
    ----------
    directory:
        Folder with one spectrum file per acquisition site.
    output_format:
        RAW writes the raw matrix and both axis-handle files, GRID the
        formatted matrix, BMP the bitmap, ALL everything.
    mode, energy, channels:
        Intensity extraction per spectrum (channels only for INTEGRATED).
    title:
        Prefix for every output file name.
    out_dir:
        Created if missing.
    normalization:
        Applied to the formatted grid before bitmap encoding only.

    Returns
    -------
    MapOutputs
        The raw map, the formatted map (unless only RAW was requested) and the
        paths written, in write order.
    """
    output_format = OutputFormat(output_format)
    samples = load_spectra(directory)
    values = build_intensity_map(samples, mode=mode, energy=energy, channels=channels)
    raw_map = assemble_grid(values.keys(), values)
    logger.info("Raw map is %d x %d", raw_map.true_width, raw_map.true_length)

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    result = MapOutputs(raw_map=raw_map)

    if output_format in (OutputFormat.RAW, OutputFormat.ALL):
        raw_title = f"{title}{RAW_SUFFIX}"
        _write(out_dir / f"{raw_title}{TEXT_EXTENSION}", grid_to_text_bytes(raw_map.raw), result.written)
        _write(
            out_dir / f"{raw_title}{X_HANDLES_SUFFIX}{TEXT_EXTENSION}",
            axis_to_text_bytes(raw_map.x_axis),
            result.written,
        )
        _write(
            out_dir / f"{raw_title}{Y_HANDLES_SUFFIX}{TEXT_EXTENSION}",
            axis_to_text_bytes(raw_map.y_axis),
            result.written,
        )

    if output_format == OutputFormat.RAW:
        return result

    formatted = resample_grid(raw_map)
    result.formatted = formatted

    if output_format in (OutputFormat.GRID, OutputFormat.ALL):
        _write(
            out_dir / f"{title}{GRID_SUFFIX}{TEXT_EXTENSION}",
            grid_to_text_bytes(formatted.grid),
            result.written,
        )

    if output_format in (OutputFormat.BMP, OutputFormat.ALL):
        scaled = normalize_grid(formatted.grid, normalization)
        payload = encode_bitmap(scaled, formatted.width, formatted.height)
        _write(out_dir / f"{title}{BITMAP_EXTENSION}", payload, result.written)

    return result
