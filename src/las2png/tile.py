from __future__ import annotations

from typing import Optional

import numpy as np

from .terrain_rgb import NO_DATA, decode_elevation, encode_elevation
from .web_mercator import TILE_SIZE


class Tile:
    """A 256x256 grid of Terrain-RGB cells that keeps the lowest elevation per pixel."""

    def __init__(self) -> None:
        self._cells = np.full((TILE_SIZE, TILE_SIZE), NO_DATA, dtype=np.uint32)

    @staticmethod
    def _in_grid(px: int, py: int) -> bool:
        return 0 <= px < TILE_SIZE and 0 <= py < TILE_SIZE

    def put(self, px: int, py: int, elevation: float) -> bool:
        """Write `elevation` at (px, py) unless a lower one is already stored.

        Returns False when the write was ignored because the pixel is outside
        the grid or the elevation has no Terrain-RGB encoding.
        """

        if not self._in_grid(px, py):
            return False
        candidate = encode_elevation(elevation)
        if candidate is None:
            return False

        # Encoding is monotonic, so the smaller raw value is the lower elevation.
        previous = int(self._cells[py, px])
        if previous == NO_DATA or candidate < previous:
            self._cells[py, px] = candidate
        return True

    def raw(self, px: int, py: int) -> int:
        if not self._in_grid(px, py):
            raise IndexError(f"pixel out of range: ({px}, {py})")
        return int(self._cells[py, px])

    def elevation_at(self, px: int, py: int) -> Optional[float]:
        return decode_elevation(self.raw(px, py))

    def populated_count(self) -> int:
        return int(np.count_nonzero(self._cells))

    def to_rgba(self) -> np.ndarray:
        """Return the cells as a (256, 256, 4) uint8 RGBA array."""

        big_endian = self._cells.astype(">u4")
        return big_endian.view(np.uint8).reshape(TILE_SIZE, TILE_SIZE, 4).copy()
