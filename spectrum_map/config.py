"""
Constants for the spectrum map builder.

Edit values here if you need a different colour ramp or output naming.

Important:
- The bitmap layout constants describe a BITMAPINFOHEADER (40 bytes) file.
- Changing ALIGNMENT also changes the padding applied to formatted grids.

License: MIT
"""

# Bitmap layout
BMP_SIGNATURE = b"BM"
BMP_FILE_HEADER_SIZE = 14
BMP_INFO_HEADER_SIZE = 40
BMP_PIXEL_OFFSET = BMP_FILE_HEADER_SIZE + BMP_INFO_HEADER_SIZE
BMP_PLANES = 1
BMP_BITS_PER_PIXEL = 24
BMP_RESOLUTION_BASE = 1000
INT32_MAX = 2**31 - 1

# Formatted grids are padded so both dimensions are multiples of this.
ALIGNMENT = 4

# Colour ramp: channel = numerator * value / denominator (before wrapping to a byte).
COLOR_RAMP = {
    "blue": (75.0, 0.8),
    "green": (145.0, 0.3),
    "red": (250.0, 0.2),
}

# Output naming: <title><suffix>
RAW_SUFFIX = "raw"
GRID_SUFFIX = "grid"
TEXT_EXTENSION = ".txt"
BITMAP_EXTENSION = ".bmp"
X_HANDLES_SUFFIX = "-x-axis-handles"
Y_HANDLES_SUFFIX = "-y-axis-handles"

TEXT_FLOAT_FORMAT = "%.6g"
