from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .tile import Tile


@dataclass(frozen=True, order=True)
class TileKey:
    """Slippy-map (XYZ) tile coordinates."""

    zoom: int
    x: int
    y: int

    def __post_init__(self) -> None:
        if self.zoom < 0:
            raise ValueError(f"Invalid zoom: {self.zoom}")


class TilePyramid:
    """Sparse tile collection; a tile is created on the first write to its key."""

    def __init__(self) -> None:
        self._tiles: dict[TileKey, Tile] = {}

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, key: object) -> bool:
        return key in self._tiles

    def get(self, key: TileKey) -> Optional[Tile]:
        return self._tiles.get(key)

    def get_or_create(self, zoom: int, x: int, y: int) -> Tile:
        key = TileKey(zoom=zoom, x=x, y=y)
        tile = self._tiles.get(key)
        if tile is None:
            tile = Tile()
            self._tiles[key] = tile
        return tile

    def zoom_levels(self) -> list[int]:
        return sorted({key.zoom for key in self._tiles})

    def iter_tiles(self) -> Iterator[tuple[TileKey, Tile]]:
        """Iterate tiles ordered by zoom, then x, then y."""

        for key in sorted(self._tiles):
            yield key, self._tiles[key]

    def for_each_tile(self, fn: Callable[[TileKey, Tile], None]) -> None:
        for key, tile in self.iter_tiles():
            fn(key, tile)
