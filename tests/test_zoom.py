from __future__ import annotations

import pytest

from las2png.zoom import DEFAULT_ZOOM_SPEC, parse_zoom_levels


def test_parses_values_and_ranges() -> None:
    assert parse_zoom_levels("15-17,20") == (15, 16, 17, 20)


def test_default_spec() -> None:
    assert parse_zoom_levels(DEFAULT_ZOOM_SPEC) == (15, 16, 17, 18)


def test_reversed_range_is_inclusive() -> None:
    assert parse_zoom_levels("18-15") == (15, 16, 17, 18)


def test_deduplicates_and_tolerates_whitespace() -> None:
    assert parse_zoom_levels(" 3, 3 ,2-3,, 10 ") == (2, 3, 10)


def test_accepts_ints_and_iterables() -> None:
    assert parse_zoom_levels(7) == (7,)
    assert parse_zoom_levels([5, 3, 5]) == (3, 5)


@pytest.mark.parametrize("spec", ["abc", "1-", "-1", "1-2-3", "1.5"])
def test_rejects_malformed_tokens(spec: str) -> None:
    with pytest.raises(ValueError, match="Invalid zoom token"):
        parse_zoom_levels(spec)


def test_rejects_empty_spec() -> None:
    with pytest.raises(ValueError, match="No zoom levels"):
        parse_zoom_levels(" , ")
    with pytest.raises(ValueError, match="No zoom levels"):
        parse_zoom_levels([])


def test_rejects_negative_and_non_integer_levels() -> None:
    with pytest.raises(ValueError, match="must be >= 0"):
        parse_zoom_levels([-1, 2])
    with pytest.raises(ValueError, match="must be integers"):
        parse_zoom_levels([1.5])
    with pytest.raises(ValueError, match="Invalid zoom specification"):
        parse_zoom_levels(True)
