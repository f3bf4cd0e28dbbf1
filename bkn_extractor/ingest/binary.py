"""Bounds-checked primitive readers for the BKN layout.

Every reader takes the whole buffer plus an offset and returns
``(value, bytes_consumed)``. None of them keep state; the caller owns the cursor.
All multi-byte values are little-endian.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from bkn_extractor.errors import FormatError
from bkn_extractor.models.records import Point
from bkn_extractor.models.schema import LENGTH_PREFIX_SIZE, POINT_SIZE, PointOrder


_U32 = np.dtype("<u4")

# Two little-endian float32 per point; field names follow the stored order.
_POINT_DTYPES = {
    PointOrder.TIME_FIRST: np.dtype([("time", "<f4"), ("absorbance", "<f4")]),
    PointOrder.ABSORBANCE_FIRST: np.dtype([("absorbance", "<f4"), ("time", "<f4")]),
}


def require(buffer: bytes, offset: int, needed: int, what: str) -> None:
    """Raise FormatError unless [offset, offset + needed) lies inside buffer."""
    size = len(buffer)
    if offset < 0 or needed < 0 or offset + needed > size:
        raise FormatError(
            f"truncated {what}: need {needed} bytes at 0x{offset:X}, buffer has {size} bytes",
            offset=offset,
            needed=needed,
        )


def read_u32(buffer: bytes, offset: int) -> Tuple[int, int]:
    require(buffer, offset, 4, "u32")
    return int(np.frombuffer(buffer, dtype=_U32, count=1, offset=offset)[0]), 4


def read_points(
    buffer: bytes,
    offset: int,
    count: int,
    order: PointOrder = PointOrder.TIME_FIRST,
) -> Tuple[List[Point], int]:
    """
    Read count consecutive (float32, float32) pairs starting at offset.

    The pair order is a single layout convention (see PointOrder). Values are
    widened to Python floats exactly, so float32 inputs compare equal after a
    round trip.
    """
    if count < 0:
        raise FormatError(f"negative point count {count} at 0x{offset:X}", offset=offset)
    nbytes = count * POINT_SIZE
    require(buffer, offset, nbytes, f"point array ({count} points)")
    if count == 0:
        return [], 0
    arr = np.frombuffer(buffer, dtype=_POINT_DTYPES[PointOrder(order)], count=count, offset=offset)
    t = arr["time"].astype(np.float64)
    a = arr["absorbance"].astype(np.float64)
    points = [Point(absorbance=float(ai), time=float(ti)) for ti, ai in zip(t, a)]
    return points, nbytes


def read_length_prefixed(buffer: bytes, offset: int) -> Tuple[bytes, int]:
    """Read a u32 byte count followed by that many raw bytes; consumes 4 + L."""
    require(buffer, offset, LENGTH_PREFIX_SIZE, "length prefix")
    length, _ = read_u32(buffer, offset)
    start = offset + LENGTH_PREFIX_SIZE
    require(buffer, start, length, f"field body (declared length {length})")
    return bytes(buffer[start:start + length]), LENGTH_PREFIX_SIZE + length
