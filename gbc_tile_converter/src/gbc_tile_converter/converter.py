"""Core conversion logic for the GBC tile converter."""

# Reference: GBC background data produced here
# Data              | Size                  | Notes
# ------------------|-----------------------|----------------------------------------------
# Palettes          | 8 bytes × ≤8          | 4 colours, 2 bytes each (0BBBBBGG GGGRRRRR, LE)
# Tile data         | 16 bytes × ≤512       | 2bpp, low plane byte then high plane byte per row
# Tile map          | 32×32 = 1024 bytes    | tile index + 0x80 (8800h addressing)
# Attribute map     | 32×32 = 1024 bytes    | bit 0-2 palette, bit 3 VRAM bank, bit 5 hflip, bit 6 vflip

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from PIL import Image

from .color import pack_rgba, quantize
from .errors import (
    ConversionError,
    DimensionError,
    PaletteBudgetExhausted,
    TileCapacityExhausted,
    TooManyColorsInTile,
)
from .palette import COLORS_PER_PALETTE, PaletteAllocator
from .tiles import TILE_HEIGHT, TILE_WIDTH, TileDeduplicator, encode

MAP_WIDTH = 32
MAP_HEIGHT = 32
DEFAULT_TILE_INDEX_OFFSET = 0x80
# 8-bit map byte plus the attribute VRAM bank bit
MAX_MAPPED_TILES = 512


@dataclass
class ConvertOptions:
    """Options for tile numbering, deduplication and output labels."""

    tile_index_offset: int = DEFAULT_TILE_INDEX_OFFSET
    allow_flips: bool = True
    label_prefix: str = ""


@dataclass
class MapCell:
    """One 8x8 position of the tile map and its attribute byte."""

    tile_index: int = 0
    palette_index: int = 0
    hflip: bool = False
    vflip: bool = False

    def map_byte(self, tile_index_offset: int = DEFAULT_TILE_INDEX_OFFSET) -> int:
        return (self.tile_index + tile_index_offset) & 0xFF

    def attribute_byte(self) -> int:
        value = self.palette_index & 0x07
        value |= ((self.tile_index >> 8) & 0x01) << 3
        if self.hflip:
            value |= 0x20
        if self.vflip:
            value |= 0x40
        return value


@dataclass
class ConversionResult:
    palettes: List[List[int]]
    tiles: List[bytes]
    width_in_tiles: int
    height_in_tiles: int
    cells: List[List[MapCell]]
    options: ConvertOptions = field(default_factory=ConvertOptions)

    @property
    def tile_map(self) -> List[int]:
        offset = self.options.tile_index_offset
        return [cell.map_byte(offset) for row in self.cells for cell in row]

    @property
    def attributes(self) -> List[int]:
        return [cell.attribute_byte() for row in self.cells for cell in row]


def _validate_dimensions(width: int, height: int, pixel_count: int) -> None:
    if width <= 0 or height <= 0 or width % TILE_WIDTH or height % TILE_HEIGHT:
        raise DimensionError("Width and height must be multiples of 8.")
    if pixel_count != width * height:
        raise DimensionError(
            f"Expected {width * height} pixels for {width}x{height}, got {pixel_count}"
        )
    if width > MAP_WIDTH * TILE_WIDTH or height > MAP_HEIGHT * TILE_HEIGHT:
        raise DimensionError(
            f"Image is {width}x{height}; the tile map only covers "
            f"{MAP_WIDTH * TILE_WIDTH}x{MAP_HEIGHT * TILE_HEIGHT} pixels."
        )


def tile_block(
    pixels: Sequence[int], width: int, tx: int, ty: int
) -> List[List[int]]:
    base = TILE_HEIGHT * ty * width + TILE_WIDTH * tx
    return [
        list(pixels[base + y * width : base + y * width + TILE_WIDTH])
        for y in range(TILE_HEIGHT)
    ]


def extract_tile_colors(block: Sequence[Sequence[int]], tx: int, ty: int) -> List[int]:
    """Return the distinct source colors of a tile in first-seen order."""

    colors: List[int] = []
    for row in block:
        for color in row:
            if color in colors:
                continue
            if len(colors) == COLORS_PER_PALETTE:
                raise TooManyColorsInTile(tx, ty, colors + [color])
            colors.append(color)
    return colors


def convert_pixels(
    width: int,
    height: int,
    pixels: Sequence[int],
    options: ConvertOptions | None = None,
) -> ConversionResult:
    """Convert a row-major grid of 32-bit colors into GBC background data."""

    return _convert(width, height, pixels, options, stacklevel=3)


def _convert(
    width: int,
    height: int,
    pixels: Sequence[int],
    options: ConvertOptions | None,
    stacklevel: int,
) -> ConversionResult:
    options = options or ConvertOptions()
    _validate_dimensions(width, height, len(pixels))

    tiles_x = width // TILE_WIDTH
    tiles_y = height // TILE_HEIGHT
    if tiles_x < MAP_WIDTH or tiles_y < MAP_HEIGHT:
        # stacklevel points at the caller of the public entry point
        warnings.warn(
            f"{width}x{height} image does not fill the 32x32 map; "
            "remaining cells use tile 0",
            RuntimeWarning,
            stacklevel=stacklevel,
        )

    # Pass 1: palette assignment per tile
    allocator = PaletteAllocator()
    blocks: List[Tuple[int, int, List[List[int]], int]] = []
    for ty in range(tiles_y):
        for tx in range(tiles_x):
            block = tile_block(pixels, width, tx, ty)
            colors = extract_tile_colors(block, tx, ty)
            candidates = [quantize(color) for color in colors]
            try:
                palette_index = allocator.assign(candidates)
            except PaletteBudgetExhausted as exc:
                raise PaletteBudgetExhausted(
                    exc.colors, f"{exc} (tile ({tx}, {ty}))"
                ) from exc
            blocks.append((tx, ty, block, palette_index))

    allocator.finalize()

    # Pass 2: encode against the sorted palettes and deduplicate
    dedup = TileDeduplicator(max_tiles=MAX_MAPPED_TILES, allow_flips=options.allow_flips)
    cells = [[MapCell() for _ in range(MAP_WIDTH)] for _ in range(MAP_HEIGHT)]
    for tx, ty, block, palette_index in blocks:
        data = encode(block, allocator.palettes[palette_index])
        try:
            tile_index, flip_x, flip_y = dedup.dedupe(data)
        except TileCapacityExhausted as exc:
            raise TileCapacityExhausted(
                f"Tile ({tx}, {ty}) needs tile index {len(dedup)}; the map can only "
                f"address {MAX_MAPPED_TILES} tiles (map byte plus VRAM bank bit)"
            ) from exc
        cells[ty][tx] = MapCell(tile_index, palette_index, flip_x, flip_y)

    return ConversionResult(
        palettes=allocator.palettes_in_use(),
        tiles=list(dedup.tiles),
        width_in_tiles=tiles_x,
        height_in_tiles=tiles_y,
        cells=cells,
        options=options,
    )


def image_to_pixels(image: Image.Image) -> List[int]:
    rgba = image.convert("RGBA")
    return [pack_rgba(r, g, b, a) for r, g, b, a in rgba.getdata()]


def convert_image(image: Image.Image, options: ConvertOptions | None = None) -> ConversionResult:
    width, height = image.size
    return _convert(width, height, image_to_pixels(image), options, stacklevel=3)


def convert_png(path: str | Path, options: ConvertOptions | None = None) -> ConversionResult:
    path = Path(path)
    try:
        with Image.open(path) as img:
            width, height = img.size
            pixels = image_to_pixels(img)
    except FileNotFoundError as exc:
        raise ConversionError(f"Input file not found: {path}") from exc
    except OSError as exc:
        raise ConversionError(f"Failed to read image: {path}") from exc
    return _convert(width, height, pixels, options, stacklevel=3)
