from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

WEB_MERCATOR_MAX_LAT: Final[float] = 85.05112878

TILE_SIZE_BITS: Final[int] = 8
TILE_SIZE: Final[int] = 1 << TILE_SIZE_BITS


class ProjectionDomainError(ValueError):
    pass


@dataclass(frozen=True)
class PixelAddress:
    """Tile coordinate plus the pixel offset inside that tile."""

    zoom: int
    tile_x: int
    tile_y: int
    px: int
    py: int


def lonlat_to_global_pixel(lon: float, lat: float, zoom: int) -> tuple[int, int]:
    """Project lon/lat to a pixel address on the whole-world grid at `zoom`.

    The grid has 2**(zoom + 8) pixels per axis, i.e. 256 pixels per tile.
    Longitude is not clamped.
    """

    if zoom < 0:
        raise ProjectionDomainError(f"Invalid zoom: {zoom}")
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise ProjectionDomainError(f"Non-finite coordinate: lon={lon}, lat={lat}")
    if abs(lat) > WEB_MERCATOR_MAX_LAT:
        raise ProjectionDomainError(
            f"Latitude outside Web Mercator range (±{WEB_MERCATOR_MAX_LAT}): {lat}"
        )

    n = 1 << (zoom + TILE_SIZE_BITS)
    lat_rad = math.radians(lat)
    x = n * ((lon + 180.0) / 360.0)
    y = n * (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ProjectionDomainError(f"Projection is not finite for lon={lon}, lat={lat}")
    return int(math.floor(x)), int(math.floor(y))


def project(lon: float, lat: float, zoom: int) -> PixelAddress:
    global_x, global_y = lonlat_to_global_pixel(lon, lat, zoom)
    tile_x, px = divmod(global_x, TILE_SIZE)
    tile_y, py = divmod(global_y, TILE_SIZE)
    return PixelAddress(zoom=zoom, tile_x=tile_x, tile_y=tile_y, px=px, py=py)
