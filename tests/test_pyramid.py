from __future__ import annotations

import pytest

from las2png.pyramid import TileKey, TilePyramid


def test_get_or_create_returns_same_tile_for_same_key() -> None:
    pyramid = TilePyramid()

    first = pyramid.get_or_create(15, 29106, 12903)
    second = pyramid.get_or_create(15, 29106, 12903)

    assert first is second
    assert len(pyramid) == 1
    assert TileKey(zoom=15, x=29106, y=12903) in pyramid
    assert pyramid.get(TileKey(zoom=15, x=29106, y=12903)) is first


def test_get_missing_tile_returns_none() -> None:
    assert TilePyramid().get(TileKey(zoom=1, x=0, y=0)) is None


def test_iteration_is_ordered_by_zoom_x_y() -> None:
    pyramid = TilePyramid()
    for zoom, x, y in [(16, 2, 1), (15, 3, 0), (16, 1, 9), (15, 3, -1), (16, 2, 0)]:
        pyramid.get_or_create(zoom, x, y)

    keys = [key for key, _ in pyramid.iter_tiles()]
    assert keys == [
        TileKey(15, 3, -1),
        TileKey(15, 3, 0),
        TileKey(16, 1, 9),
        TileKey(16, 2, 0),
        TileKey(16, 2, 1),
    ]
    assert pyramid.zoom_levels() == [15, 16]


def test_for_each_tile_visits_every_tile_in_order() -> None:
    pyramid = TilePyramid()
    pyramid.get_or_create(2, 1, 1)
    pyramid.get_or_create(1, 0, 0)

    visited: list[TileKey] = []
    pyramid.for_each_tile(lambda key, tile: visited.append(key))

    assert visited == [TileKey(1, 0, 0), TileKey(2, 1, 1)]


def test_tile_key_rejects_negative_zoom() -> None:
    with pytest.raises(ValueError, match="Invalid zoom"):
        TileKey(zoom=-1, x=0, y=0)
