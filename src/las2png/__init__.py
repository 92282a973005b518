"""Terrain-RGB tile pyramids from LAS point clouds."""

from .aggregator import Aggregator
from .errors import Las2PngError, PointSourceError, TileStorageError
from .models import GeoBounds, Sample
from .pyramid import TileKey, TilePyramid
from .tile import Tile
from .web_mercator import PixelAddress, ProjectionDomainError, project
from .zoom import parse_zoom_levels

__all__ = [
    "Aggregator",
    "GeoBounds",
    "Las2PngError",
    "PixelAddress",
    "PointSourceError",
    "ProjectionDomainError",
    "Sample",
    "Tile",
    "TileKey",
    "TilePyramid",
    "TileStorageError",
    "parse_zoom_levels",
    "project",
]
