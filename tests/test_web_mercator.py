from __future__ import annotations

import math

import pytest

from las2png.web_mercator import (
    TILE_SIZE,
    WEB_MERCATOR_MAX_LAT,
    ProjectionDomainError,
    lonlat_to_global_pixel,
    project,
)


@pytest.mark.parametrize("zoom", [1, 2, 3, 4])
def test_origin_maps_to_top_left_pixel_of_center_tile(zoom: int) -> None:
    address = project(0.0, 0.0, zoom)

    half = 2 ** (zoom - 1)
    assert (address.zoom, address.tile_x, address.tile_y) == (zoom, half, half)
    assert (address.px, address.py) == (0, 0)


def test_global_pixel_grid_has_256_pixels_per_tile() -> None:
    assert lonlat_to_global_pixel(0.0, 0.0, 0) == (128, 128)
    assert lonlat_to_global_pixel(-180.0, 0.0, 0) == (0, 128)
    assert lonlat_to_global_pixel(0.0, 0.0, 3) == (1024, 1024)


def test_higher_zoom_refines_lower_zoom_address() -> None:
    lon, lat = 139.767, 35.681
    for zoom in range(0, 20):
        x, y = lonlat_to_global_pixel(lon, lat, zoom)
        x2, y2 = lonlat_to_global_pixel(lon, lat, zoom + 1)
        assert x2 in (2 * x, 2 * x + 1)
        assert y2 in (2 * y, 2 * y + 1)


def test_tile_x_matches_slippy_map_formula() -> None:
    lon, lat = 139.767, 35.681
    for zoom in (5, 10, 15, 18):
        n = 2**zoom
        expected_x = int(math.floor((lon + 180.0) / 360.0 * n))
        expected_y = int(
            math.floor((1.0 - math.asinh(math.tan(math.radians(lat))) / math.pi) / 2.0 * n)
        )
        address = project(lon, lat, zoom)
        assert address.tile_x == expected_x
        assert address.tile_y == expected_y


def test_northern_hemisphere_is_above_equator() -> None:
    north = project(10.0, 45.0, 4)
    south = project(10.0, -45.0, 4)
    assert north.tile_y < 8 <= south.tile_y


def test_pixel_offset_is_always_inside_tile_without_longitude_clamping() -> None:
    address = project(-200.0, 10.0, 2)

    assert address.tile_x < 0
    assert 0 <= address.px < TILE_SIZE
    assert 0 <= address.py < TILE_SIZE


@pytest.mark.parametrize(
    "lon, lat",
    [
        (0.0, 90.0),
        (0.0, -90.0),
        (0.0, WEB_MERCATOR_MAX_LAT + 0.01),
        (float("nan"), 0.0),
        (0.0, float("inf")),
    ],
)
def test_out_of_domain_coordinates_raise(lon: float, lat: float) -> None:
    with pytest.raises(ProjectionDomainError):
        project(lon, lat, 10)


def test_negative_zoom_raises() -> None:
    with pytest.raises(ProjectionDomainError, match="Invalid zoom"):
        project(0.0, 0.0, -1)


def test_domain_error_is_a_value_error() -> None:
    assert issubclass(ProjectionDomainError, ValueError)
