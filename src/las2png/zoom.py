from __future__ import annotations

import re
from typing import Final, Iterable, Union

DEFAULT_ZOOM_SPEC: Final[str] = "15-18"

_SINGLE_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")
_RANGE_RE: Final[re.Pattern[str]] = re.compile(r"^([0-9]+)\s*-\s*([0-9]+)$")

ZoomInput = Union[str, int, Iterable[int]]


def parse_zoom_levels(value: ZoomInput) -> tuple[int, ...]:
    """Parse a zoom set such as ``"15-17,20"`` into ``(15, 16, 17, 20)``.

    Ranges are inclusive and may be written in either order. The result is
    de-duplicated and sorted ascending.
    """

    levels: set[int] = set()
    if isinstance(value, bool):
        raise ValueError(f"Invalid zoom specification: {value!r}")
    if isinstance(value, int):
        levels.add(value)
    elif isinstance(value, str):
        for token in value.split(","):
            token = token.strip()
            if token == "":
                continue
            match = _RANGE_RE.fullmatch(token)
            if match is not None:
                start, end = int(match.group(1)), int(match.group(2))
                levels.update(range(min(start, end), max(start, end) + 1))
            elif _SINGLE_RE.fullmatch(token) is not None:
                levels.add(int(token))
            else:
                raise ValueError(f"Invalid zoom token {token!r} in {value!r}")
    else:
        for level in value:
            if isinstance(level, bool) or not isinstance(level, int):
                raise ValueError(f"Zoom levels must be integers, got {level!r}")
            levels.add(level)

    if not levels:
        raise ValueError(f"No zoom levels in {value!r}")
    if min(levels) < 0:
        raise ValueError(f"Zoom levels must be >= 0, got {min(levels)}")
    return tuple(sorted(levels))
