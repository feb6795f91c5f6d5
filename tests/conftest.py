from pathlib import Path

import pytest


def write_spectrum(directory: Path, name: str, pairs) -> Path:
    """Write one 'energy intensity' file and return its path."""
    p = directory / name
    p.write_text("".join(f"{e} {i}\n" for e, i in pairs), encoding="utf-8")
    return p


@pytest.fixture
def map_dir(tmp_path):
    """
    3 x 2 acquisition at x in {0, 1, 2}, y in {0, 1}.

    Each spectrum has energies 0..3; intensity at energy e is (e + 1) * scale,
    with scale = 1 + x + 3*y so every site is distinguishable.
    """
    d = tmp_path / "scan"
    d.mkdir()
    for y in (0, 1):
        for x in (0, 1, 2):
            scale = 1 + x + 3 * y
            write_spectrum(d, f"scan-{x}-{y}.txt", [(e, (e + 1) * scale) for e in range(4)])
    return d


@pytest.fixture
def spectrum_writer():
    return write_spectrum
