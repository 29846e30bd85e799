from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "gbc_tile_converter/src"))

from gbc_tile_converter.color import pack_rgba
from gbc_tile_converter.converter import ConvertOptions, convert_pixels
from gbc_tile_converter.output import (
    format_db,
    palette_bytes,
    render_preview,
    to_asm,
    to_binaries,
    write_binaries,
)

pytestmark = pytest.mark.filterwarnings("ignore::RuntimeWarning")

BLACK = pack_rgba(0, 0, 0)
WHITE = pack_rgba(0xFF, 0xFF, 0xFF)
RED = pack_rgba(0xFF, 0, 0)


def _result(options=None):
    pixels = []
    for y in range(8):
        row = [WHITE] * 16
        row[0] = BLACK
        row[15] = BLACK
        if y == 0:
            row[1] = RED
            row[14] = RED
        pixels.extend(row)
    return convert_pixels(16, 8, pixels, options)


def test_format_db() -> None:
    assert format_db([0, 0x7F, 0xAB]) == "  db $00, $7F, $AB"


def test_asm_layout() -> None:
    text = to_asm(_result())
    lines = text.splitlines()

    assert lines[0] == "Palette0:"
    assert lines[1] == "  db $00, $00"  # black
    assert lines[2] == "  db $1F, $00"  # red
    assert lines[3] == "  db $FF, $7F"  # white
    assert lines[4] == "  db $00, $00"  # padding
    assert lines[5] == "TileData:"
    assert lines[6].startswith("  db $40, $3F, $00, $7F")
    assert lines[6].count("$") == 16
    assert lines[7] == "Map:"
    assert lines[8] == format_db([0x80] * 32)
    assert lines[7 + 33] == "Attributes:"
    assert lines[7 + 34] == "  db $00, $20, " + ", ".join(["$00"] * 30)
    assert len(lines) == 7 + 33 + 33
    assert text.endswith("\n")


def test_asm_label_prefix() -> None:
    text = to_asm(_result(ConvertOptions(label_prefix="Title")))
    labels = [line for line in text.splitlines() if not line.startswith(" ")]
    assert labels == ["TitlePalette0:", "TitleTileData:", "TitleMap:", "TitleAttributes:"]


def test_binaries(tmp_path: Path) -> None:
    result = _result()
    blobs = to_binaries(result)

    assert blobs["pal"] == palette_bytes(result) == bytes([0, 0, 0x1F, 0, 0xFF, 0x7F, 0, 0])
    assert blobs["chr"] == result.tiles[0]
    assert len(blobs["tilemap"]) == 1024
    assert blobs["attrmap"][:2] == bytes([0x00, 0x20])

    written = write_binaries(result, tmp_path / "out", "title")
    assert [p.name for p in written] == ["title.pal", "title.chr", "title.tilemap", "title.attrmap"]
    assert (tmp_path / "out" / "title.chr").read_bytes() == result.tiles[0]


def test_preview_reproduces_quantized_image() -> None:
    preview = render_preview(_result())

    assert preview.size == (16, 8)
    assert preview.getpixel((0, 0)) == (0, 0, 0)
    assert preview.getpixel((1, 0)) == (255, 0, 0)
    assert preview.getpixel((14, 0)) == (255, 0, 0)
    assert preview.getpixel((15, 5)) == (0, 0, 0)
    assert preview.getpixel((8, 4)) == (255, 255, 255)
