"""Exceptions raised while converting an image into GBC tile data."""

from __future__ import annotations

from typing import Sequence


class ConversionError(Exception):
    """Custom exception for conversion errors."""


class DimensionError(ConversionError):
    """Raised when the image size cannot be split into 8x8 tiles or mapped."""


class TooManyColorsInTile(ConversionError):
    """Raised when a single 8x8 tile uses more than four source colors."""

    def __init__(self, tile_x: int, tile_y: int, colors: Sequence[int]):
        self.tile_x = tile_x
        self.tile_y = tile_y
        self.colors = list(colors)
        lines = [f"More than 4 colours in tile ({tile_x}, {tile_y})."]
        lines.extend(f"{idx}: 0x{color:08X}" for idx, color in enumerate(self.colors))
        super().__init__("\n".join(lines))


class PaletteBudgetExhausted(ConversionError):
    """Raised when none of the eight palettes can absorb a tile's colors."""

    def __init__(self, colors: Sequence[int], message: str | None = None):
        self.colors = list(colors)
        if message is None:
            listed = ", ".join(f"${color:04X}" for color in self.colors)
            message = f"Palette budget exhausted: no palette can hold colours {listed}"
        super().__init__(message)


class TileCapacityExhausted(ConversionError):
    """Raised when more distinct tiles are needed than the tile table holds."""
