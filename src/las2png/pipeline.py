from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Protocol

from .aggregator import Aggregator
from .config import PipelineConfig
from .models import Sample
from .point_source import LasPointSource
from .storage import export_pyramid

logger = logging.getLogger(__name__)


class PointSource(Protocol):
    skipped: int

    def __iter__(self) -> Iterator[Sample]: ...


PointSourceFactory = Callable[..., PointSource]


@dataclass(frozen=True)
class PipelineResult:
    files: tuple[Path, ...]
    sample_count: int
    skipped_count: int
    dropped_writes: int
    tile_count: int
    bytes_written: int
    elapsed_s: float
    manifest: Path

    def to_dict(self) -> dict[str, object]:
        return {
            "files": [str(path) for path in self.files],
            "samples": self.sample_count,
            "skipped": self.skipped_count,
            "dropped_writes": self.dropped_writes,
            "tiles": self.tile_count,
            "bytes": self.bytes_written,
            "elapsed_s": round(self.elapsed_s, 3),
            "manifest": str(self.manifest),
        }


def _with_progress(
    samples: Iterable[Sample], *, path: Path, every: int
) -> Iterator[Sample]:
    count = 0
    for sample in samples:
        count += 1
        if count % every == 0:
            logger.info("las_read_progress", extra={"path": str(path), "samples": count})
        yield sample


def run_pipeline(
    config: PipelineConfig,
    *,
    source_factory: PointSourceFactory = LasPointSource,
    aggregator: Optional[Aggregator] = None,
) -> PipelineResult:
    """Ingest every input file in order, then export the pyramid once."""

    if not config.inputs:
        raise ValueError("At least one input file is required")

    started = time.perf_counter()
    aggregator = aggregator or Aggregator()
    zooms = config.zoom
    total_files = len(config.inputs)

    skipped = 0
    for index, path in enumerate(config.inputs, start=1):
        logger.info(
            "las_read_started",
            extra={"path": str(path), "index": index, "total": total_files},
        )
        source = source_factory(
            path, source_crs=config.source_crs, chunk_size=config.chunk_size
        )
        count = aggregator.ingest_many(
            _with_progress(source, path=path, every=config.progress_log_every), zooms
        )
        skipped += int(source.skipped)
        logger.info(
            "las_read_completed",
            extra={
                "path": str(path),
                "index": index,
                "total": total_files,
                "samples": count,
                "skipped": int(source.skipped),
            },
        )

    if aggregator.dropped_writes:
        logger.warning(
            "elevation_out_of_range",
            extra={
                "dropped_writes": aggregator.dropped_writes,
                "detail": "elevations outside the Terrain-RGB range were not written",
            },
        )

    export = export_pyramid(
        aggregator.pyramid,
        bounds=aggregator.bounds,
        zoom_levels=zooms,
        output_dir=config.output_dir,
    )
    elapsed_s = time.perf_counter() - started
    logger.info(
        "export_completed",
        extra={
            "output_dir": str(config.output_dir),
            "tiles": export.tile_count,
            "bytes": export.total_bytes,
            "elapsed_s": round(elapsed_s, 3),
        },
    )

    return PipelineResult(
        files=tuple(config.inputs),
        sample_count=aggregator.sample_count,
        skipped_count=skipped,
        dropped_writes=aggregator.dropped_writes,
        tile_count=export.tile_count,
        bytes_written=export.total_bytes,
        elapsed_s=elapsed_s,
        manifest=export.manifest,
    )
