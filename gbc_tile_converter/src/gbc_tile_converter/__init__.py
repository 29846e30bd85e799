"""Image to Game Boy Color background data converter.

Converts a true-color image into up to 8 four-colour palettes, a table of up
to 1024 deduplicated 2bpp tiles (mirrored tiles share one entry) and a 32x32
tile map with per-cell palette and flip attributes. It can be invoked through
the ``gbc-tile-converter`` command or imported to convert an image in memory.
"""

from .converter import (
    ConversionResult,
    ConvertOptions,
    MapCell,
    convert_image,
    convert_pixels,
    convert_png,
)
from .errors import (
    ConversionError,
    DimensionError,
    PaletteBudgetExhausted,
    TileCapacityExhausted,
    TooManyColorsInTile,
)
from .output import render_preview, to_asm, to_binaries

__all__ = [
    "ConversionError",
    "ConversionResult",
    "ConvertOptions",
    "DimensionError",
    "MapCell",
    "PaletteBudgetExhausted",
    "TileCapacityExhausted",
    "TooManyColorsInTile",
    "convert_image",
    "convert_pixels",
    "convert_png",
    "render_preview",
    "to_asm",
    "to_binaries",
]
