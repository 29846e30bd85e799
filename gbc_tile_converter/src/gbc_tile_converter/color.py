"""Source color to Game Boy Color (GBC15) conversion.

Source colors are 32-bit values laid out like an RGBA buffer read as a little
endian word: red in bits 0-7, green in bits 8-15, blue in bits 16-23 and alpha
in bits 24-31. GBC colors keep the top 5 bits of each channel::

    GBC15 = 0BBBBBGG GGGRRRRR  (stored low byte first)
"""

from __future__ import annotations

from typing import Tuple

Rgb = Tuple[int, int, int]

CHANNEL_MASK = 0x1F


def pack_rgba(r: int, g: int, b: int, a: int = 0xFF) -> int:
    """Pack 8-bit channels into a 32-bit source color."""

    return (r & 0xFF) | ((g & 0xFF) << 8) | ((b & 0xFF) << 16) | ((a & 0xFF) << 24)


def quantize(color: int) -> int:
    """Return the GBC15 value for a 32-bit source color.

    The low 3 bits of each channel are dropped and alpha is ignored, so the
    result only depends on bits 3-7 of the red, green and blue bytes.
    """

    r = (color >> 3) & CHANNEL_MASK
    g = (color >> 11) & CHANNEL_MASK
    b = (color >> 19) & CHANNEL_MASK
    return r | (g << 5) | (b << 10)


def channels(gbc: int) -> Tuple[int, int, int]:
    return gbc & CHANNEL_MASK, (gbc >> 5) & CHANNEL_MASK, (gbc >> 10) & CHANNEL_MASK


def luminance(gbc: int) -> int:
    """Sort key used when finalizing palettes: sum of the 5-bit channels."""

    r, g, b = channels(gbc)
    return r + g + b


def color_to_bytes(gbc: int) -> bytes:
    return bytes([gbc & 0xFF, (gbc >> 8) & 0xFF])


def to_rgb(gbc: int) -> Rgb:
    """Expand a GBC15 color back to 8 bits per channel for previews."""

    def expand(value: int) -> int:
        return (value << 3) | (value >> 2)

    r, g, b = channels(gbc)
    return expand(r), expand(g), expand(b)
