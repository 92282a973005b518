"""Terrain-RGB fixed-point elevation encoding.

A populated cell packs ``floor((elevation + 10000) * 10)`` into the top three
bytes of a 32-bit value (R, G, B when written big-endian) and ``0xFF`` into the
low byte (alpha). ``0`` is reserved as the no-data value: every encoded value
has a non-zero low byte, so a real elevation can never produce it.
"""

from __future__ import annotations

import math
from typing import Final, Optional

NO_DATA: Final[int] = 0
PRESENT: Final[int] = 0xFF

ELEVATION_OFFSET_M: Final[float] = 10000.0
ELEVATION_SCALE: Final[float] = 10.0

MAX_FIXED_POINT: Final[int] = 0xFFFFFF

MIN_ELEVATION_M: Final[float] = -ELEVATION_OFFSET_M
MAX_ELEVATION_M: Final[float] = MAX_FIXED_POINT / ELEVATION_SCALE - ELEVATION_OFFSET_M


def encode_elevation(elevation: float) -> Optional[int]:
    """Return the raw 32-bit cell value, or None when it cannot be encoded."""

    if not math.isfinite(elevation):
        return None
    fixed = math.floor((elevation + ELEVATION_OFFSET_M) * ELEVATION_SCALE)
    if fixed < 0 or fixed > MAX_FIXED_POINT:
        return None
    return (fixed << 8) | PRESENT


def decode_elevation(raw: int) -> Optional[float]:
    if raw == NO_DATA:
        return None
    return (int(raw) >> 8) / ELEVATION_SCALE - ELEVATION_OFFSET_M
