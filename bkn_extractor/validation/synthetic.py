"""Synthetic BKN buffers.

Inverse of the decoder: lays out marker, skip regions, point count, points and
length-prefixed metadata exactly as a :class:`BknLayout` describes them. Used to
build test fixtures without shipping real instrument files.

Examples
--------
>>> from bkn_extractor.ingest.pipeline import extract_all
>>> buf = build_bkn_buffer([([(1.5, 0.1), (2.5, 0.2)], default_field_texts())])
>>> len(extract_all(buf))
1
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from bkn_extractor.models.schema import DEFAULT_LAYOUT, BknLayout, FieldType, PointOrder


# (time, absorbance) pairs plus one text per metadata field.
MethodSpec = Tuple[Sequence[Tuple[float, float]], Sequence[str]]


def default_field_texts(overrides: Optional[Dict[str, str]] = None, layout: BknLayout = DEFAULT_LAYOUT) -> List[str]:
    """
    Realistic field texts for every schema entry, in schema order.

    overrides maps a schema field name to the raw text to store instead.
    """
    samples = {
        "Method Name": "Kinetics 340nm",
        "Collection Time": "Collection Time: 3/14/2024 10:22:31 AM",
        "Operator Name": "Operator Name:   Jane Doe",
        "Instrument": "Instrument: Cary 60",
        "Instrument Version": "Instrument Version: 2.00",
        "Wavelength": "Wavelength      340.0 (nm)   ",
        "Ordinate Mode": "Ordinate Mode      Absorbance",
        "Ave Time": "Ave Time      0.1000 (sec)",
        "Cycle Time": "Cycle Time      0.0500 (min)",
        "Stop Time": "Stop Time      10.00 (min)",
        "SBW": "SBW      1.5 (nm)",
        "Beam Mode": "Beam Mode      Dual",
        "Baseline Correction": "Baseline Correction      Zero",
        "End Method": "End Method",
    }
    overrides = overrides or {}
    texts: List[str] = []
    for entry in layout.schema:
        if entry.name in overrides:
            texts.append(overrides[entry.name])
        elif entry.name in samples:
            texts.append(samples[entry.name])
        elif entry.field_type is FieldType.LABELED:
            texts.append(f"{entry.name}: value")
        elif entry.field_type is FieldType.VALUE_UNIT:
            texts.append(f"{entry.name}      value")
        else:
            texts.append(entry.name)
    return texts


def encode_field(text: str | bytes, encoding: str = DEFAULT_LAYOUT.encoding) -> bytes:
    body = text if isinstance(text, bytes) else text.encode(encoding)
    return np.array([len(body)], dtype="<u4").tobytes() + body


def encode_points(points: Sequence[Tuple[float, float]], order: PointOrder = PointOrder.TIME_FIRST) -> bytes:
    arr = np.asarray(points, dtype=np.float32).reshape(-1, 2)
    if PointOrder(order) is PointOrder.ABSORBANCE_FIRST:
        arr = arr[:, ::-1]
    return np.ascontiguousarray(arr, dtype="<f4").tobytes()


def build_record_bytes(
    points: Sequence[Tuple[float, float]],
    field_texts: Sequence[str | bytes],
    layout: BknLayout = DEFAULT_LAYOUT,
    filler: int = 0,
) -> bytes:
    """
    Bytes of one method, starting with the marker.

    points are (time, absorbance) pairs regardless of layout.point_order. In schema
    mode field_texts must match the schema length and every pad_before is emitted
    as filler bytes; in sentinel mode the texts are written as-is.
    """
    if layout.metadata_mode == "schema" and len(field_texts) != len(layout.schema):
        raise ValueError(f"expected {len(layout.schema)} field texts, got {len(field_texts)}")
    if layout.point_array_skip < 4:
        raise ValueError("point_array_skip must leave room for the u32 point count")
    pad = bytes([filler])
    chunks = [
        layout.marker,
        pad * layout.point_count_skip,
        np.array([len(points)], dtype="<u4").tobytes(),
        pad * (layout.point_array_skip - 4),
        encode_points(points, layout.point_order),
    ]
    for k, text in enumerate(field_texts):
        if layout.metadata_mode == "schema":
            chunks.append(pad * layout.schema[k].pad_before)
        chunks.append(encode_field(text, layout.encoding))
    return b"".join(chunks)


def build_bkn_buffer(
    methods: Sequence[MethodSpec],
    layout: BknLayout = DEFAULT_LAYOUT,
    header: bytes = b"BKN\x00synthetic header\x00",
    gap: bytes = b"\x00" * 16,
) -> bytes:
    """Concatenate a header and one block per method, separated by gap bytes."""
    parts = [header]
    for points, texts in methods:
        parts.append(build_record_bytes(points, texts, layout))
        parts.append(gap)
    return b"".join(parts)
