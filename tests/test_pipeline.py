import numpy as np
import pytest

from spectrum_map.data import IntensityMode
from spectrum_map.errors import EncodingError, EnergyRangeError, GeometryError
from spectrum_map.pipeline import Normalization, OutputFormat, build_map_outputs, normalize_grid


def _run(map_dir, out_dir, output_format, **kwargs):
    params = dict(mode=IntensityMode.INTERPOLATED, energy=0.5, title="map_")
    params.update(kwargs)
    return build_map_outputs(map_dir, output_format=output_format, out_dir=out_dir, **params)


def test_all_outputs_written(map_dir, tmp_path):
    out = tmp_path / "out"
    result = _run(map_dir, out, OutputFormat.ALL)

    assert [p.name for p in result.written] == [
        "map_raw.txt",
        "map_raw-x-axis-handles.txt",
        "map_raw-y-axis-handles.txt",
        "map_grid.txt",
        "map_.bmp",
    ]
    assert all(p.exists() for p in result.written)

    # intensity at e=0.5 is 1.5 * (1 + x + 3y)
    assert (out / "map_raw.txt").read_text() == "1.5 3 4.5\n6 7.5 9\n"
    assert (out / "map_raw-x-axis-handles.txt").read_text() == "0\n1\n2\n"
    assert (out / "map_raw-y-axis-handles.txt").read_text() == "0\n1\n"
    assert (out / "map_grid.txt").read_text() == "1.5 1.5 3 3\n" * 4


def test_bitmap_is_peak_normalized(map_dir, tmp_path):
    result = _run(map_dir, tmp_path, OutputFormat.BMP)

    assert [p.name for p in result.written] == ["map_.bmp"]
    data = result.written[0].read_bytes()
    assert data[:2] == b"BM"
    assert len(data) == 54 + 3 * 16
    # last column holds the formatted-grid maximum -> 1.0
    assert data[-3:] == bytes([93, 227, 226])


def test_raw_only_skips_resampling(map_dir, tmp_path):
    result = _run(map_dir, tmp_path, "raw")
    assert result.formatted is None
    assert len(result.written) == 3
    assert result.raw_map.raw.shape == (2, 3)


def test_integrated_mode(map_dir, tmp_path):
    result = _run(map_dir, tmp_path, OutputFormat.GRID, mode=IntensityMode.INTEGRATED, energy=1.0, channels=1)
    # window [0..2] of (e + 1) * scale -> 6 * scale
    assert result.raw_map.raw[1, 2] == pytest.approx(36.0)
    assert result.formatted.width == 4
    assert [p.name for p in result.written] == ["map_grid.txt"]


def test_encoding_failure_keeps_text_outputs(map_dir, tmp_path):
    with pytest.raises(EncodingError):
        _run(map_dir, tmp_path, OutputFormat.ALL, normalization=Normalization.NONE)

    assert (tmp_path / "map_raw.txt").exists()
    assert (tmp_path / "map_grid.txt").exists()
    assert not (tmp_path / "map_.bmp").exists()


def test_energy_out_of_range(map_dir, tmp_path):
    with pytest.raises(EnergyRangeError):
        _run(map_dir, tmp_path, OutputFormat.ALL, energy=10.0)


def test_duplicate_site_aborts_before_writing(map_dir, tmp_path, spectrum_writer):
    spectrum_writer(map_dir, "extra-1p0-0.txt", [(e, 1.0) for e in range(4)])
    out = tmp_path / "out"
    with pytest.raises(GeometryError):
        _run(map_dir, out, OutputFormat.ALL)
    assert not out.exists()


def test_normalize_grid():
    grid = np.array([[0.0, 2.0], [4.0, 1.0]])
    assert normalize_grid(grid, Normalization.PEAK).tolist() == [[0.0, 0.5], [1.0, 0.25]]
    assert normalize_grid(grid, "none").tolist() == grid.tolist()
    assert normalize_grid(np.zeros((2, 2)), Normalization.PEAK).tolist() == [[0.0, 0.0], [0.0, 0.0]]
