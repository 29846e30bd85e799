"""Greedy palette allocation shared by every tile of an image."""

from __future__ import annotations

from typing import List, Sequence

from .color import luminance
from .errors import PaletteBudgetExhausted

MAX_PALETTES = 8
COLORS_PER_PALETTE = 4
UNUSED_COLOR = 0x0000


class PaletteAllocator:
    """Assign tile color sets to at most eight four-color palettes.

    Palettes are scanned in index order and the first one that already holds,
    or still has room for, every candidate color wins. Colors are appended as
    they are found missing, so a palette that runs out of room half way keeps
    the colors it picked up before failing. This is a first-fit heuristic and
    the output depends on tile order; it is kept as is so generated data stays
    byte compatible with existing ROM builds.
    """

    def __init__(self, max_palettes: int = MAX_PALETTES):
        self.max_palettes = max_palettes
        self.palettes: List[List[int]] = [[] for _ in range(max_palettes)]
        self.highest_assigned = -1
        self.finalized = False

    def assign(self, candidate_colors: Sequence[int]) -> int:
        if self.finalized:
            raise RuntimeError("Palettes are already finalized")
        if len(candidate_colors) > COLORS_PER_PALETTE:
            raise ValueError("A tile can use at most 4 colors")

        for index, palette in enumerate(self.palettes):
            accepted = True
            for color in candidate_colors:
                if color in palette:
                    continue
                if len(palette) < COLORS_PER_PALETTE:
                    palette.append(color)
                else:
                    accepted = False
                    break
            if accepted:
                self.highest_assigned = max(self.highest_assigned, index)
                return index

        raise PaletteBudgetExhausted(candidate_colors)

    def finalize(self) -> None:
        # sorted() is stable, so equal sums keep discovery order
        for index, palette in enumerate(self.palettes):
            self.palettes[index] = sorted(palette, key=luminance)
        self.finalized = True

    @property
    def palette_count(self) -> int:
        return self.highest_assigned + 1

    def palettes_in_use(self) -> List[List[int]]:
        """Return palettes 0..highest assigned, each padded to four colors."""

        if not self.finalized:
            raise RuntimeError("Palettes must be finalized before output")
        result = []
        for palette in self.palettes[: self.palette_count]:
            result.append(palette + [UNUSED_COLOR] * (COLORS_PER_PALETTE - len(palette)))
        return result
