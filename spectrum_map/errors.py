"""
Error types raised while building a spectrum map.

Every failure is a ValueError subclass so callers that only care about
"bad data" can keep catching ValueError, while the CLI can tell the
categories apart.

License: MIT
"""


class SpectrumMapError(ValueError):
    """Base class for all map-building failures."""


class InputFormatError(SpectrumMapError):
    """Malformed spectrum file contents or file name coordinates."""


class EnergyRangeError(SpectrumMapError):
    """Requested energy lies outside a spectrum's energy axis."""


class GeometryError(SpectrumMapError):
    """Empty or duplicated coordinates, or a degenerate step sequence."""


class EncodingError(SpectrumMapError):
    """Grid cannot be written as a bitmap (dimensions or values out of range)."""
