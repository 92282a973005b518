from __future__ import annotations

import logging
from typing import Iterable, Optional

from .models import GeoBounds, Sample
from .pyramid import TilePyramid
from .web_mercator import project

logger = logging.getLogger(__name__)


def _unique_zooms(zoom_levels: Iterable[int]) -> tuple[int, ...]:
    return tuple(dict.fromkeys(int(z) for z in zoom_levels))


class Aggregator:
    """Bins samples into a tile pyramid and tracks their bounding box.

    This is the only writer of pyramid and bounds state.
    """

    def __init__(
        self,
        pyramid: Optional[TilePyramid] = None,
        bounds: Optional[GeoBounds] = None,
    ) -> None:
        self._pyramid = pyramid if pyramid is not None else TilePyramid()
        self._bounds = bounds if bounds is not None else GeoBounds()
        self._sample_count = 0
        self._dropped_writes = 0

    @property
    def pyramid(self) -> TilePyramid:
        return self._pyramid

    @property
    def bounds(self) -> GeoBounds:
        return self._bounds

    @property
    def sample_count(self) -> int:
        return self._sample_count

    @property
    def dropped_writes(self) -> int:
        """Pixel writes skipped because the elevation had no Terrain-RGB encoding."""

        return self._dropped_writes

    def ingest(self, sample: Sample, zoom_levels: Iterable[int]) -> None:
        # Project at every zoom before touching state so a domain error
        # leaves the pyramid and bounds unchanged.
        addresses = [
            project(sample.longitude, sample.latitude, zoom)
            for zoom in _unique_zooms(zoom_levels)
        ]

        self._bounds.widen(sample.longitude, sample.latitude)
        for address in addresses:
            tile = self._pyramid.get_or_create(
                address.zoom, address.tile_x, address.tile_y
            )
            if not tile.put(address.px, address.py, sample.elevation):
                self._dropped_writes += 1
        self._sample_count += 1

    def ingest_many(self, samples: Iterable[Sample], zoom_levels: Iterable[int]) -> int:
        zooms = _unique_zooms(zoom_levels)
        count = 0
        for sample in samples:
            self.ingest(sample, zooms)
            count += 1
        logger.debug(
            "samples_ingested",
            extra={"samples": count, "zoom_levels": list(zooms), "tiles": len(self._pyramid)},
        )
        return count
