"""Serializers for converted GBC background data."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List

from PIL import Image

from .color import color_to_bytes, to_rgb
from .converter import MAP_HEIGHT, MAP_WIDTH, ConversionResult
from .tiles import TILE_HEIGHT, TILE_WIDTH, decode, orient

BINARY_EXTENSIONS = ("pal", "chr", "tilemap", "attrmap")


def format_db(values: Iterable[int]) -> str:
    return "  db " + ", ".join(f"${value:02X}" for value in values)


def palette_bytes(result: ConversionResult) -> bytes:
    data = bytearray()
    for palette in result.palettes:
        for color in palette:
            data.extend(color_to_bytes(color))
    return bytes(data)


def to_asm(result: ConversionResult) -> str:
    """Render the result as assembler ``db`` tables.

    Each palette color goes on its own line as ``low, high``; each tile is
    one line of 16 bytes; map and attribute tables are 32 lines of 32 bytes.
    """

    prefix = result.options.label_prefix
    lines: List[str] = []

    for idx, palette in enumerate(result.palettes):
        lines.append(f"{prefix}Palette{idx}:")
        for color in palette:
            lines.append(format_db(color_to_bytes(color)))

    lines.append(f"{prefix}TileData:")
    for tile in result.tiles:
        lines.append(format_db(tile))

    for label, values in (("Map", result.tile_map), ("Attributes", result.attributes)):
        lines.append(f"{prefix}{label}:")
        for row in range(MAP_HEIGHT):
            lines.append(format_db(values[row * MAP_WIDTH : (row + 1) * MAP_WIDTH]))

    return "\n".join(lines) + "\n"


def to_binaries(result: ConversionResult) -> Dict[str, bytes]:
    """Return raw blobs keyed by file extension."""

    blobs = (
        palette_bytes(result),
        b"".join(result.tiles),
        bytes(result.tile_map),
        bytes(result.attributes),
    )
    return dict(zip(BINARY_EXTENSIONS, blobs))


def write_binaries(result: ConversionResult, output_dir: Path, stem: str) -> List[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for extension, data in to_binaries(result).items():
        target = output_dir / f"{stem}.{extension}"
        target.write_bytes(data)
        written.append(target)
    return written


def render_preview(result: ConversionResult) -> Image.Image:
    """Rebuild the image from palettes, tiles and map cells."""

    width = result.width_in_tiles * TILE_WIDTH
    height = result.height_in_tiles * TILE_HEIGHT
    out = [(0, 0, 0)] * (width * height)

    for ty in range(result.height_in_tiles):
        for tx in range(result.width_in_tiles):
            cell = result.cells[ty][tx]
            # orient() is its own inverse, so this undoes the stored flip
            data = orient(result.tiles[cell.tile_index], cell.hflip, cell.vflip)
            colors = [to_rgb(color) for color in result.palettes[cell.palette_index]]
            for ry, row in enumerate(decode(data)):
                y = ty * TILE_HEIGHT + ry
                for rx, index in enumerate(row):
                    out[y * width + tx * TILE_WIDTH + rx] = colors[index]

    preview = Image.new("RGB", (width, height))
    preview.putdata(out)
    return preview
