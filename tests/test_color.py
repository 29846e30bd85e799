from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1] / "gbc_tile_converter/src"))

from gbc_tile_converter.color import (
    channels,
    color_to_bytes,
    luminance,
    pack_rgba,
    quantize,
    to_rgb,
)


def test_quantize_packs_top_five_bits() -> None:
    assert quantize(pack_rgba(0xFF, 0x00, 0x00)) == 0x001F
    assert quantize(pack_rgba(0x00, 0xFF, 0x00)) == 0x03E0
    assert quantize(pack_rgba(0x00, 0x00, 0xFF)) == 0x7C00
    assert quantize(pack_rgba(0xFF, 0xFF, 0xFF)) == 0x7FFF
    assert quantize(pack_rgba(0x08, 0x10, 0x18)) == 1 | (2 << 5) | (3 << 10)


def test_quantize_ignores_low_bits_and_alpha() -> None:
    base = pack_rgba(0x40, 0x80, 0xC0)
    for low in range(8):
        noisy = pack_rgba(0x40 | low, 0x80 | (7 - low), 0xC0 | low, a=low * 30)
        assert quantize(noisy) == quantize(base)


def test_channel_helpers() -> None:
    gbc = 3 | (17 << 5) | (31 << 10)
    assert channels(gbc) == (3, 17, 31)
    assert luminance(gbc) == 51
    assert color_to_bytes(gbc) == bytes([gbc & 0xFF, gbc >> 8])
    assert color_to_bytes(0x7FFF) == b"\xFF\x7F"


def test_to_rgb_expands_extremes() -> None:
    assert to_rgb(0x0000) == (0, 0, 0)
    assert to_rgb(0x7FFF) == (255, 255, 255)
    assert to_rgb(0x001F) == (255, 0, 0)
