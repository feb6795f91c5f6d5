import numpy as np

from spectrum_map.export import axis_to_text_bytes, grid_to_text_bytes


def test_grid_text_rows_and_separators():
    grid = np.array([[1.0, 2.5, 0.0], [1e-7, 123456789.0, -3.0]])
    text = grid_to_text_bytes(grid)

    assert isinstance(text, (bytes, bytearray))
    assert text.decode("utf-8") == "1 2.5 0\n1e-07 1.23457e+08 -3\n"


def test_grid_text_line_count_matches_rows():
    grid = np.zeros((4, 8))
    lines = grid_to_text_bytes(grid).decode("utf-8").splitlines()
    assert len(lines) == 4
    assert all(len(line.split(" ")) == 8 for line in lines)


def test_axis_text_one_value_per_line():
    assert axis_to_text_bytes(np.array([0.0, 2.5, 10.0])) == b"0\n2.5\n10\n"
