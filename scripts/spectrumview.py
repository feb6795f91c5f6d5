#!/usr/bin/env python3
"""
Spectrum Map Builder - Command line driver

Turns a directory of per-position spectra into a spatial intensity map at one
energy and writes it as text matrices and/or a bitmap.

Input directory
---------------
One file per acquisition site, named <id>-<x>-<y>.<ext> ("p" = decimal point),
each line "energy intensity" separated by a single space.

Output formats
--------------
  raw   <title>raw.txt, <title>raw-x-axis-handles.txt, <title>raw-y-axis-handles.txt
  grid  <title>grid.txt   (uniform pixels, padded to multiples of 4)
  bmp   <title>.bmp       (24-bit, rows written top row first)
  all   everything above

Intensity modes
---------------
  integrated    sum over --channels samples on each side of the energy
  interpolated  linear interpolation at the exact energy

How to run
------
python scripts/spectrumview.py data/EELS all integrated EELS_map_ 0.035 --channels 2 --out out/ --verbose


Exit codes
----------
1 missing directory or integrated mode without --channels, 2 usage error,
3 malformed input file, 4 energy out of range, 5 map geometry error,
6 bitmap encoding error.

License: MIT
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

# -------------------------------------------------------------------------
# Make imports robust:
# Add the repository root to sys.path so `import spectrum_map` works
# regardless of how/where the script is invoked.
# -------------------------------------------------------------------------
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from spectrum_map.data import IntensityMode  # noqa: E402
from spectrum_map.errors import (  # noqa: E402
    EncodingError,
    EnergyRangeError,
    GeometryError,
    InputFormatError,
)
from spectrum_map.pipeline import Normalization, OutputFormat, build_map_outputs  # noqa: E402

EXIT_CODES = {
    InputFormatError: 3,
    EnergyRangeError: 4,
    GeometryError: 5,
    EncodingError: 6,
}

_ENERGY_RE = re.compile(r"\d+\.?\d*|\.\d+")


def _err(msg: str, code: int = 1) -> None:
    """Print an error message to stderr and exit with a non-zero code."""
    print(f"ERROR: {msg}", file=sys.stderr)
    raise SystemExit(code)


def parse_energy(value: str) -> float:
    """Energy must be a non-negative integer or decimal."""
    if not _ENERGY_RE.fullmatch(value.strip()):
        raise argparse.ArgumentTypeError(f"Energy must be a float or an integer, got '{value}'.")
    return float(value)


def parse_channels(value: str) -> int:
    """Channels must be a non-negative integer."""
    if not value.strip().isdigit():
        raise argparse.ArgumentTypeError(f"channels must be an integer, got '{value}'.")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Build a spatial intensity map from spectrum files.")
    ap.add_argument("directory", type=Path, help="Directory with one spectrum file per position.")
    ap.add_argument("format", choices=[f.value for f in OutputFormat], help="Outputs to write.")
    ap.add_argument("mode", choices=[m.value for m in IntensityMode], help="Intensity extraction mode.")
    ap.add_argument("title", help="Prefix for output file names.")
    ap.add_argument("energy", type=parse_energy, help="Energy of interest.")
    ap.add_argument("--channels", type=parse_channels, default=None,
                    help="Channels per side to integrate (integrated mode only).")
    ap.add_argument("--out", type=Path, default=Path("."), help="Output directory.")
    ap.add_argument("--normalization", choices=[n.value for n in Normalization],
                    default=Normalization.PEAK.value,
                    help="Scaling applied before bitmap encoding.")
    ap.add_argument("--verbose", action="store_true", help="Print progress and map dimensions.")
    return ap


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    mode = IntensityMode(args.mode)
    if mode == IntensityMode.INTEGRATED and args.channels is None:
        _err("Integrated mode needs --channels.")

    try:
        result = build_map_outputs(
            args.directory,
            output_format=OutputFormat(args.format),
            mode=mode,
            energy=args.energy,
            channels=args.channels,
            title=args.title,
            out_dir=args.out,
            normalization=Normalization(args.normalization),
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        _err(f"Input directory not usable: {e}")
    except tuple(EXIT_CODES) as e:
        _err(str(e), EXIT_CODES[type(e)])

    raw = result.raw_map
    summary = f"Raw map: {raw.true_width} x {raw.true_length}"
    if result.formatted is not None:
        summary += f" | Formatted: {result.formatted.width} x {result.formatted.height}"
    print(f"Map building completed. {summary}. Files written: {len(result.written)}. Output dir: {args.out}")


if __name__ == "__main__":
    main()
