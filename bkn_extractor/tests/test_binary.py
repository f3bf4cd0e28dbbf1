"""Tests for the bounds-checked primitive readers."""

from __future__ import annotations

import struct

import numpy as np
import pytest

from bkn_extractor.errors import FormatError
from bkn_extractor.ingest.binary import read_length_prefixed, read_points, read_u32
from bkn_extractor.models.schema import PointOrder


def _f32(x: float) -> float:
    return float(np.float32(x))


# -----------------------------------------------------------------------
# read_u32
# -----------------------------------------------------------------------


def test_read_u32_little_endian() -> None:
    buf = b"\xaa" + struct.pack("<I", 0x01020304)
    assert read_u32(buf, 1) == (0x01020304, 4)


def test_read_u32_truncated() -> None:
    with pytest.raises(FormatError) as ei:
        read_u32(b"\x01\x02\x03", 0)
    assert ei.value.offset == 0
    assert ei.value.needed == 4


# -----------------------------------------------------------------------
# read_points
# -----------------------------------------------------------------------


def test_read_points_time_first() -> None:
    buf = b"\x00\x00" + struct.pack("<ffff", 1.5, 0.1, 2.5, 0.2)
    pts, used = read_points(buf, 2, 2)
    assert used == 16
    assert [(p.time, p.absorbance) for p in pts] == [(1.5, _f32(0.1)), (2.5, _f32(0.2))]


def test_read_points_absorbance_first() -> None:
    buf = struct.pack("<ff", 0.75, 3.0)
    pts, _ = read_points(buf, 0, 1, order=PointOrder.ABSORBANCE_FIRST)
    assert pts[0].absorbance == 0.75
    assert pts[0].time == 3.0


def test_read_points_zero_count() -> None:
    assert read_points(b"", 0, 0) == ([], 0)


def test_read_points_truncated_mid_array() -> None:
    buf = struct.pack("<fff", 1.0, 2.0, 3.0)  # 1.5 points
    with pytest.raises(FormatError):
        read_points(buf, 0, 2)


def test_read_points_huge_count_fails_fast() -> None:
    with pytest.raises(FormatError):
        read_points(b"\x00" * 64, 0, 0xFFFFFFFF)


def test_read_points_negative_count() -> None:
    with pytest.raises(FormatError):
        read_points(b"\x00" * 8, 0, -1)


# -----------------------------------------------------------------------
# read_length_prefixed
# -----------------------------------------------------------------------


def test_read_length_prefixed_consumes_prefix_and_body() -> None:
    buf = struct.pack("<I", 5) + b"hello" + b"rest"
    raw, used = read_length_prefixed(buf, 0)
    assert raw == b"hello"
    assert used == 9


def test_read_length_prefixed_empty_field() -> None:
    assert read_length_prefixed(struct.pack("<I", 0), 0) == (b"", 4)


def test_read_length_prefixed_truncated_prefix() -> None:
    with pytest.raises(FormatError):
        read_length_prefixed(b"\x05\x00", 0)


def test_read_length_prefixed_truncated_body() -> None:
    buf = struct.pack("<I", 10) + b"short"
    with pytest.raises(FormatError) as ei:
        read_length_prefixed(buf, 0)
    assert "declared length 10" in str(ei.value)
