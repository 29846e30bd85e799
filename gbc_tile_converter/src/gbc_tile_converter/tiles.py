"""2bpp tile encoding and flip-aware tile deduplication."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .color import quantize
from .errors import ConversionError, TileCapacityExhausted

TILE_WIDTH = 8
TILE_HEIGHT = 8
TILE_BYTES = 16
MAX_TILES = 1024

# orientation precedence when several match: (hflip, vflip)
ORIENTATIONS: Tuple[Tuple[bool, bool], ...] = (
    (False, False),
    (True, False),
    (False, True),
    (True, True),
)

_REVERSED_BITS = bytes(int(f"{value:08b}"[::-1], 2) for value in range(256))


def encode(block: Sequence[Sequence[int]], palette: Sequence[int]) -> bytes:
    """Encode 8 rows of 8 source colors into 16 bytes of 2bpp data.

    Each row produces a low plane byte followed by a high plane byte, with the
    leftmost pixel in the most significant bit. Every pixel's quantized color
    must be present in ``palette``.
    """

    data = bytearray()
    for row in block:
        low = 0
        high = 0
        for color in row:
            gbc = quantize(color)
            try:
                index = palette.index(gbc)
            except ValueError as exc:
                raise ConversionError(
                    f"Colour ${gbc:04X} is missing from its assigned palette"
                ) from exc
            low = (low << 1) | (index & 1)
            high = (high << 1) | ((index >> 1) & 1)
        data.append(low)
        data.append(high)
    return bytes(data)


def decode(data: bytes) -> List[List[int]]:
    """Return the 8x8 palette indices stored in a 16-byte tile."""

    rows = []
    for y in range(TILE_HEIGHT):
        low = data[2 * y]
        high = data[2 * y + 1]
        rows.append(
            [
                ((low >> (7 - x)) & 1) | (((high >> (7 - x)) & 1) << 1)
                for x in range(TILE_WIDTH)
            ]
        )
    return rows


def hflip(data: bytes) -> bytes:
    return bytes(_REVERSED_BITS[value] for value in data)


def vflip(data: bytes) -> bytes:
    pairs = [data[i : i + 2] for i in range(0, TILE_BYTES, 2)]
    return b"".join(reversed(pairs))


def orient(data: bytes, flip_x: bool, flip_y: bool) -> bytes:
    if flip_x:
        data = hflip(data)
    if flip_y:
        data = vflip(data)
    return data


class TileDeduplicator:
    """Append-only table of canonical tiles.

    A candidate matches a stored tile if it equals one of the stored tile's
    four orientations. Lookups go through a dict keyed by every orientation of
    every stored tile; only the first (lowest index, then orientation order)
    match is kept, which is the same answer a linear scan would give.
    """

    def __init__(self, max_tiles: int = MAX_TILES, allow_flips: bool = True):
        self.max_tiles = max_tiles
        self.allow_flips = allow_flips
        self.tiles: List[bytes] = []
        self._lookup: Dict[bytes, Tuple[int, bool, bool]] = {}

    def __len__(self) -> int:
        return len(self.tiles)

    def dedupe(self, encoded: bytes) -> Tuple[int, bool, bool]:
        if len(encoded) != TILE_BYTES:
            raise ValueError(f"Tiles must be {TILE_BYTES} bytes, got {len(encoded)}")
        encoded = bytes(encoded)

        found = self._lookup.get(encoded)
        if found is not None:
            return found

        if len(self.tiles) >= self.max_tiles:
            raise TileCapacityExhausted(
                f"More than {self.max_tiles} distinct tiles are required"
            )

        index = len(self.tiles)
        self.tiles.append(encoded)
        orientations = ORIENTATIONS if self.allow_flips else ORIENTATIONS[:1]
        for flip_x, flip_y in orientations:
            self._lookup.setdefault(orient(encoded, flip_x, flip_y), (index, flip_x, flip_y))
        return index, False, False
