from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Sequence

from PIL import Image

from .errors import TileStorageError
from .models import GeoBounds
from .pyramid import TileKey, TilePyramid
from .tile import Tile

logger = logging.getLogger(__name__)

TILEJSON_VERSION: Final[str] = "2.2.0"
TILEJSON_FILENAME: Final[str] = "tilejson.json"
TILES_TEMPLATE: Final[str] = "./{z}/{x}/{y}.png"


@dataclass(frozen=True)
class ExportResult:
    manifest: Path
    tile_paths: tuple[Path, ...]
    total_bytes: int

    @property
    def tile_count(self) -> int:
        return len(self.tile_paths)


def build_tilejson(zoom_levels: Sequence[int], bounds: GeoBounds) -> dict[str, Any]:
    if not zoom_levels:
        raise ValueError("zoom_levels must not be empty")
    return {
        "tilejson": TILEJSON_VERSION,
        "scheme": "xyz",
        "tiles": [TILES_TEMPLATE],
        "minzoom": int(min(zoom_levels)),
        "maxzoom": int(max(zoom_levels)),
        "bounds": bounds.as_list(),
    }


def write_tilejson(path: Path, *, tilejson: dict[str, Any]) -> None:
    path.write_text(json.dumps(tilejson, ensure_ascii=False, indent=2), encoding="utf-8")


def tile_path(output_dir: Path, key: TileKey) -> Path:
    return output_dir / str(key.zoom) / str(key.x) / f"{key.y}.png"


def encode_png(tile: Tile) -> bytes:
    img = Image.fromarray(tile.to_rgba())
    buffer = io.BytesIO()
    img.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def export_pyramid(
    pyramid: TilePyramid,
    *,
    bounds: GeoBounds,
    zoom_levels: Sequence[int],
    output_dir: str | Path,
) -> ExportResult:
    """Write one PNG per populated tile under `output_dir`, then `tilejson.json`.

    The manifest only appears once every tile is on disk.
    """

    root = Path(output_dir)
    manifest = root / TILEJSON_FILENAME
    tilejson = build_tilejson(zoom_levels, bounds)

    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TileStorageError(f"Failed to create output directory: {root}") from exc

    written: list[Path] = []
    total_bytes = 0
    for key, tile in pyramid.iter_tiles():
        path = tile_path(root, key)
        payload = encode_png(tile)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            raise TileStorageError(
                f"Failed to write tile: {path} ({len(written)} tiles already written, "
                "no manifest)"
            ) from exc
        logger.debug("tile_written", extra={"path": str(path), "bytes": len(payload)})
        written.append(path)
        total_bytes += len(payload)

    try:
        write_tilejson(manifest, tilejson=tilejson)
    except OSError as exc:
        raise TileStorageError(f"Failed to write manifest: {manifest}") from exc

    return ExportResult(
        manifest=manifest, tile_paths=tuple(written), total_bytes=total_bytes
    )
