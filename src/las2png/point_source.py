from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, Iterator, Optional, Union

import laspy
import numpy as np
from laspy.errors import LaspyException
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError, ProjError

from .errors import PointSourceError
from .models import Sample
from .web_mercator import WEB_MERCATOR_MAX_LAT

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: Final[int] = 1_000_000

WGS84: Final[CRS] = CRS.from_epsg(4326)


def resolve_crs(value: Union[str, int, CRS, None]) -> Optional[CRS]:
    """Turn ``2450``, ``"2450"``, ``"EPSG:2450"`` or any pyproj CRS input into a CRS."""

    if value is None:
        return None
    if isinstance(value, CRS):
        return value
    text = str(value).strip()
    if text == "":
        return None
    if text.isdigit():
        text = f"EPSG:{text}"
    try:
        return CRS.from_user_input(text)
    except CRSError as exc:
        raise PointSourceError(f"Unknown source CRS: {value!r}") from exc


class LasPointSource:
    """Stream a LAS/LAZ file as WGS84 samples.

    Points whose coordinates do not land on a finite position inside the
    Web Mercator latitude range are dropped and counted in `skipped`.
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        source_crs: Union[str, int, CRS, None] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self._path = Path(path)
        self._source_crs = resolve_crs(source_crs)
        self._chunk_size = int(chunk_size)
        self._count = 0
        self._skipped = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def count(self) -> int:
        return self._count

    @property
    def skipped(self) -> int:
        return self._skipped

    def _transformer_for(self, header: laspy.LasHeader) -> Optional[Transformer]:
        crs = self._source_crs
        if crs is None:
            try:
                crs = header.parse_crs()
            except (LaspyException, CRSError) as exc:
                raise PointSourceError(
                    f"Failed to read CRS from LAS header: {self._path}"
                ) from exc
        if crs is None:
            raise PointSourceError(
                f"No source CRS given and none recorded in LAS header: {self._path}"
            )
        if crs.equals(WGS84, ignore_axis_order=True):
            return None
        try:
            return Transformer.from_crs(crs, WGS84, always_xy=True)
        except (CRSError, ProjError) as exc:
            raise PointSourceError(
                f"No transformation from {crs.name} to WGS84: {self._path}"
            ) from exc

    def _samples_from_chunk(
        self, points: laspy.ScaleAwarePointRecord, transformer: Optional[Transformer]
    ) -> Iterator[Sample]:
        xs = np.asarray(points.x, dtype=np.float64)
        ys = np.asarray(points.y, dtype=np.float64)
        zs = np.asarray(points.z, dtype=np.float64)
        if transformer is not None:
            lons, lats = transformer.transform(xs, ys)
            lons = np.asarray(lons, dtype=np.float64)
            lats = np.asarray(lats, dtype=np.float64)
        else:
            lons, lats = xs, ys

        valid = (
            np.isfinite(lons)
            & np.isfinite(lats)
            & (np.abs(lats) <= WEB_MERCATOR_MAX_LAT)
        )
        self._skipped += int(valid.size - np.count_nonzero(valid))

        for lon, lat, elevation in zip(
            lons[valid].tolist(), lats[valid].tolist(), zs[valid].tolist()
        ):
            self._count += 1
            yield Sample(longitude=lon, latitude=lat, elevation=elevation)

    def __iter__(self) -> Iterator[Sample]:
        try:
            with laspy.open(self._path) as reader:
                transformer = self._transformer_for(reader.header)
                logger.debug(
                    "las_opened",
                    extra={
                        "path": str(self._path),
                        "point_count": int(reader.header.point_count),
                        "reprojected": transformer is not None,
                    },
                )
                for points in reader.chunk_iterator(self._chunk_size):
                    yield from self._samples_from_chunk(points, transformer)
        except (OSError, LaspyException) as exc:
            raise PointSourceError(f"Failed to read LAS file: {self._path}") from exc
