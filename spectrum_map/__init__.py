"""
Spectrum Map Builder - Core Package

This package contains reusable, testable building blocks for:
- Reading per-position spectrum files and the (x, y) position in their names
- Extracting one intensity per spectrum (integrated or interpolated)
- Assembling a raw grid from irregular coordinates
- Resampling it to a uniform, bitmap-aligned pixel grid
- Exporting grids as text and as a 24-bit bitmap

The command-line driver in `scripts/spectrumview.py` uses this package as its backend.

License: MIT
"""

from .bitmap import encode_bitmap
from .data import (
    IntensityMode,
    SpectrumSample,
    build_intensity_map,
    load_spectra,
    parse_position,
    read_spectrum_file,
)
from .errors import (
    EncodingError,
    EnergyRangeError,
    GeometryError,
    InputFormatError,
    SpectrumMapError,
)
from .export import axis_to_text_bytes, grid_to_text_bytes
from .grid import RawMap, assemble_grid
from .pipeline import MapOutputs, Normalization, OutputFormat, build_map_outputs
from .resample import FormattedMap, resample_grid

__all__ = [
    "encode_bitmap",
    "IntensityMode",
    "SpectrumSample",
    "build_intensity_map",
    "load_spectra",
    "parse_position",
    "read_spectrum_file",
    "EncodingError",
    "EnergyRangeError",
    "GeometryError",
    "InputFormatError",
    "SpectrumMapError",
    "axis_to_text_bytes",
    "grid_to_text_bytes",
    "RawMap",
    "assemble_grid",
    "MapOutputs",
    "Normalization",
    "OutputFormat",
    "build_map_outputs",
    "FormattedMap",
    "resample_grid",
]
