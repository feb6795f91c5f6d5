"""
Data loading utilities for spectrum map acquisitions.

Expected input:

Directory:
- One text file per acquisition site, nothing else.

File name:
- <any-id>-<x>-<y>.<ext>, where a literal "p" stands for the decimal point
  (e.g. "sample-2p5-10.txt" -> x=2.5, y=10).

File body:
- One "energy intensity" pair per line, separated by exactly one space.
- Numbers may carry a leading "-" and a single "."; nothing else.

Notes:
- The energy axis must be strictly increasing; repeated or descending
  energies are rejected.

License: MIT
"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .errors import EnergyRangeError, GeometryError, InputFormatError

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]

_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
_ALLOWED_PUNCTUATION = {"-", "."}


class IntensityMode(str, Enum):
    INTEGRATED = "integrated"
    INTERPOLATED = "interpolated"


def _parse_number(text: str, path: Path, lineno: int) -> float:
    """Convert one validated token to float or raise with file context."""
    if not _NUMBER_RE.fullmatch(text):
        raise InputFormatError(
            f"{path}:{lineno}: malformed value '{text}'. Only a leading '-' "
            "and a single '.' are allowed."
        )
    return float(text)


def _parse_line(line: str, path: Path, lineno: int) -> Tuple[float, float]:
    if any(c.isalpha() for c in line):
        raise InputFormatError(f"{path}:{lineno}: alphabetic characters are not allowed.")

    bad = sorted({c for c in line if c in string.punctuation and c not in _ALLOWED_PUNCTUATION})
    if bad:
        raise InputFormatError(
            f"{path}:{lineno}: unexpected punctuation {bad}. Only '-' and '.' are allowed."
        )

    if line.count(" ") != 1 or any(c.isspace() and c != " " for c in line):
        raise InputFormatError(
            f"{path}:{lineno}: each line must hold one energy/intensity pair "
            "separated by a single space."
        )

    energy_text, intensity_text = line.split(" ")
    if not energy_text or not intensity_text:
        raise InputFormatError(f"{path}:{lineno}: missing value in one of the columns.")

    return _parse_number(energy_text, path, lineno), _parse_number(intensity_text, path, lineno)


def read_spectrum_file(path: Path) -> Tuple[np.ndarray, np.ndarray]:
    """
    Read one spectrum file and return (energy, intensity) arrays.

    Raises InputFormatError on the first malformed line, on a non-increasing
    energy axis, or if the file is not UTF-8 text or is empty.
    """
    path = Path(path)
    energy: List[float] = []
    intensity: List[float] = []

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputFormatError(f"{path}: not a text spectrum file ({e.reason}).") from e

    for lineno, line in enumerate(text.splitlines(), start=1):
        e, i = _parse_line(line, path, lineno)
        energy.append(e)
        intensity.append(i)

    if not energy:
        raise InputFormatError(f"{path}: file is empty.")

    steps = np.diff(energy)
    if np.any(steps <= 0):
        lineno = int(np.argmax(steps <= 0)) + 2
        raise InputFormatError(f"{path}:{lineno}: energy axis must be strictly increasing.")

    return np.asarray(energy, dtype=float), np.asarray(intensity, dtype=float)


def _parse_coordinate(segment: str, axis: str, path: Path) -> float:
    if any(c in string.punctuation for c in segment):
        raise InputFormatError(f"Unrecognized character for {axis} position in file: {path}")

    # "p" is the decimal point; any other letters (units, labels) are dropped.
    cleaned = "".join("." if c == "p" else c for c in segment if c == "p" or not c.isalpha())
    if not cleaned:
        raise InputFormatError(f"No value specified for position {axis} in file: {path}")

    try:
        return float(cleaned)
    except ValueError as e:
        raise InputFormatError(f"Invalid {axis} position '{segment}' in file: {path}") from e


def parse_position(path: Path) -> Coordinate:
    """Extract (x, y) from the last two hyphen-delimited segments of the file stem."""
    path = Path(path)
    parts = path.stem.rsplit("-", 2)
    if len(parts) < 2:
        raise InputFormatError(
            f"File name must end with '-<x>-<y>' to carry its position: {path}"
        )
    x = _parse_coordinate(parts[-2], "x", path)
    y = _parse_coordinate(parts[-1], "y", path)
    return x, y


@dataclass(frozen=True)
class SpectrumSample:
    """One measured spectrum and the site it was acquired at."""
    path: Path
    energy: np.ndarray
    intensity: np.ndarray
    x: float
    y: float

    @classmethod
    def from_file(cls, path: Path) -> "SpectrumSample":
        path = Path(path)
        energy, intensity = read_spectrum_file(path)
        x, y = parse_position(path)
        return cls(path=path, energy=energy, intensity=intensity, x=x, y=y)

    @property
    def position(self) -> Coordinate:
        return self.x, self.y

    def _check_range(self, energy: float) -> None:
        if energy < self.energy[0] or energy > self.energy[-1]:
            raise EnergyRangeError(
                f"Requested energy {energy} is outside [{self.energy[0]}, {self.energy[-1]}] "
                f"in file {self.path}"
            )

    def integrated_intensity(self, energy: float, channels: int) -> float:
        """
        Sum intensities over `channels` samples on each side of the first
        axis value >= energy. The window is clipped at both ends of the axis.
        """
        if channels < 0:
            raise ValueError("channels must be >= 0")
        self._check_range(energy)

        pos = int(np.searchsorted(self.energy, energy, side="left"))
        lower = max(0, pos - channels)
        upper = min(len(self.energy) - 1, pos + channels)
        return float(self.intensity[lower:upper + 1].sum())

    def interpolated_intensity(self, energy: float) -> float:
        """Linear interpolation between the two axis samples bracketing energy."""
        self._check_range(energy)

        pos = int(np.searchsorted(self.energy, energy, side="right"))
        if pos == len(self.energy):
            return float(self.intensity[-1])

        e0, e1 = self.energy[pos - 1], self.energy[pos]
        i0, i1 = self.intensity[pos - 1], self.intensity[pos]
        return float(i0 + (energy - e0) * (i1 - i0) / (e1 - e0))


def list_spectrum_files(directory: Path) -> List[Path]:
    """Return regular files in directory, sorted by name."""
    directory = Path(directory)
    if not directory.exists():
        raise FileNotFoundError(str(directory))
    if not directory.is_dir():
        raise NotADirectoryError(str(directory))
    return sorted(p for p in directory.iterdir() if p.is_file())


def load_spectra(directory: Path) -> List[SpectrumSample]:
    """Read every file in directory as a SpectrumSample."""
    samples = [SpectrumSample.from_file(p) for p in list_spectrum_files(directory)]
    logger.info("Loaded %d spectra from %s", len(samples), directory)
    return samples


def build_intensity_map(
    samples: Iterable[SpectrumSample],
    *,
    mode: IntensityMode,
    energy: float,
    channels: Optional[int] = None,
) -> Dict[Coordinate, float]:
    """
    Extract one intensity per sample and key it by position.

    Two samples at the same position abort the run with GeometryError.
    """
    mode = IntensityMode(mode)
    if mode == IntensityMode.INTEGRATED and channels is None:
        raise ValueError("channels is required for integrated intensity.")

    values: Dict[Coordinate, float] = {}
    sources: Dict[Coordinate, Path] = {}
    for sample in samples:
        key = sample.position
        if key in values:
            raise GeometryError(
                f"Two files found for position {key}: {sources[key]} and {sample.path}. "
                "Make sure the directory only has one file per position."
            )
        if mode == IntensityMode.INTEGRATED:
            values[key] = sample.integrated_intensity(energy, channels)
        else:
            values[key] = sample.interpolated_intensity(energy)
        sources[key] = sample.path
    return values
