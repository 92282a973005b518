from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

# Serialised form of a box that has seen no samples.
EMPTY_BOUNDS: Final[tuple[float, float, float, float]] = (180.0, 90.0, -180.0, -90.0)


@dataclass(frozen=True)
class Sample:
    """One decoded point: WGS84 longitude/latitude in degrees, elevation in metres."""

    longitude: float
    latitude: float
    elevation: float


@dataclass
class GeoBounds:
    """Running lon/lat bounding box. It only ever widens."""

    min_lon: float = math.inf
    min_lat: float = math.inf
    max_lon: float = -math.inf
    max_lat: float = -math.inf

    @property
    def is_empty(self) -> bool:
        return self.min_lon > self.max_lon or self.min_lat > self.max_lat

    def widen(self, lon: float, lat: float) -> None:
        self.min_lon = min(self.min_lon, lon)
        self.min_lat = min(self.min_lat, lat)
        self.max_lon = max(self.max_lon, lon)
        self.max_lat = max(self.max_lat, lat)

    def contains(self, lon: float, lat: float) -> bool:
        return self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat

    def as_list(self) -> list[float]:
        """Return [west, south, east, north]."""

        if self.is_empty:
            return list(EMPTY_BOUNDS)
        return [self.min_lon, self.min_lat, self.max_lon, self.max_lat]
