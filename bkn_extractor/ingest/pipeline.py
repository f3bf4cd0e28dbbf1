from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from bkn_extractor.errors import FormatError, PatternMismatchError
from bkn_extractor.ingest.binary import read_length_prefixed, read_points, read_u32, require
from bkn_extractor.ingest.classify import classify_text, decode_field_text
from bkn_extractor.ingest.loader import load_bkn_bytes
from bkn_extractor.ingest.scanner import iter_marker_offsets
from bkn_extractor.models.records import MetadataField, Record, RecordSet
from bkn_extractor.models.schema import DEFAULT_LAYOUT, BknLayout

logger = logging.getLogger(__name__)


def _read_schema_fields(
    buffer: bytes,
    offset: int,
    layout: BknLayout,
    record_offset: int,
) -> Tuple[List[MetadataField], List[str], int]:
    meta: List[MetadataField] = []
    raw_texts: List[str] = []
    pos = offset
    for entry in layout.schema:
        if entry.pad_before:
            require(buffer, pos, entry.pad_before, f"padding before '{entry.name}'")
            pos += entry.pad_before
        raw, used = read_length_prefixed(buffer, pos)
        pos += used
        text = decode_field_text(raw, max_text=layout.max_field_text, encoding=layout.encoding)
        raw_texts.append(text)
        try:
            meta.append(classify_text(text, entry.field_type, name=entry.name))
        except PatternMismatchError as exc:
            raise exc.with_context(entry.name, record_offset) from exc
    return meta, raw_texts, pos


def _read_sentinel_fields(
    buffer: bytes,
    offset: int,
    layout: BknLayout,
) -> Tuple[List[MetadataField], List[str], int]:
    meta: List[MetadataField] = []
    raw_texts: List[str] = []
    pos = offset
    while True:
        # read_length_prefixed raises FormatError if the buffer ends before the sentinel.
        raw, used = read_length_prefixed(buffer, pos)
        pos += used
        text = decode_field_text(raw, max_text=layout.max_field_text, encoding=layout.encoding)
        raw_texts.append(text)
        meta.append(MetadataField(name="", value=text))
        if text.startswith(layout.sentinel):
            return meta, raw_texts, pos


def extract_record(buffer: bytes, marker_end_offset: int, layout: BknLayout = DEFAULT_LAYOUT) -> Record:
    """
    Decode one method record that starts right after a marker.

    Stages (fixed, no branching on content):
      1. skip point_count_skip, read the u32 point count (cursor stays on the count)
      2. skip point_array_skip from the count field, read the points
      3. read metadata fields (typed schema, or raw fields up to the sentinel)
      4. assemble the Record

    Any out-of-bounds read raises FormatError; nothing partial is returned.
    """
    count_at = marker_end_offset + layout.point_count_skip
    try:
        num_points, _ = read_u32(buffer, count_at)
    except FormatError as exc:
        raise FormatError(f"record at 0x{marker_end_offset:X}: {exc}", offset=exc.offset, needed=exc.needed) from exc

    points_at = count_at + layout.point_array_skip
    logger.debug("record at 0x%X: %d points at 0x%X", marker_end_offset, num_points, points_at)
    try:
        points, used = read_points(buffer, points_at, num_points, order=layout.point_order)
        pos = points_at + used
        if layout.metadata_mode == "sentinel":
            meta, raw_texts, pos = _read_sentinel_fields(buffer, pos, layout)
        else:
            meta, raw_texts, pos = _read_schema_fields(buffer, pos, layout, marker_end_offset)
    except FormatError as exc:
        raise FormatError(f"record at 0x{marker_end_offset:X}: {exc}", offset=exc.offset, needed=exc.needed) from exc

    return Record(
        points=tuple(points),
        meta=tuple(meta),
        num_points=int(num_points),
        offset=int(marker_end_offset),
        raw_metadata=tuple(raw_texts),
    )


def find_record_offsets(buffer: bytes, layout: BknLayout = DEFAULT_LAYOUT) -> List[int]:
    """Every marker end offset in the buffer, in file order."""
    return list(iter_marker_offsets(buffer, layout.marker))


def extract_all(buffer: bytes, layout: BknLayout = DEFAULT_LAYOUT) -> RecordSet:
    """
    Extract every record in the buffer.

    Marker offsets are collected first; each record is then extracted independently
    from its own offset. A failure on any record is fatal for the whole buffer.
    """
    offsets = find_record_offsets(buffer, layout)
    logger.debug("found %d method markers at %s", len(offsets), [hex(o) for o in offsets])
    records = tuple(extract_record(buffer, off, layout) for off in offsets)
    return RecordSet(records=records, metadata_mode=layout.metadata_mode)


@dataclass(frozen=True)
class BknReaderConfig:
    """
    Reader configuration for BKN (batch kinetics) files.

    layout:
      Binary layout and metadata schema (see BknLayout).
    warn_on_empty_points:
      Add a RecordSet warning for every method whose point count is zero.
    """
    layout: BknLayout = field(default=DEFAULT_LAYOUT)
    warn_on_empty_points: bool = True


class BknReader:
    """
    Reader for BKN files.

    The whole file is loaded into memory once and never modified. Records are
    returned in file order.
    """

    def __init__(self, config: Optional[BknReaderConfig] = None):
        self.config = config or BknReaderConfig()

    def read(self, file_path: str | Path) -> RecordSet:
        path = Path(file_path).expanduser().resolve()
        buffer = load_bkn_bytes(path)
        return self.read_bytes(buffer, source_path=path)

    def read_bytes(self, buffer: bytes, source_path: Optional[Path] = None) -> RecordSet:
        layout = self.config.layout
        result = extract_all(buffer, layout)

        warnings: List[str] = []
        if not result.records:
            warnings.append("no method marker found")
        if self.config.warn_on_empty_points:
            for k, rec in enumerate(result.records):
                if rec.num_points == 0:
                    warnings.append(f"method {k} (offset 0x{rec.offset:X}) has no points")

        name = source_path.name if source_path is not None else "<bytes>"
        logger.info("%s: %d method(s), %d byte(s)", name, len(result.records), len(buffer))
        for w in warnings:
            logger.warning("%s: %s", name, w)

        return RecordSet(
            records=result.records,
            metadata_mode=layout.metadata_mode,
            source_path=source_path,
            warnings=tuple(warnings),
        )


def read_bkn(file_path: str | Path, layout: Optional[BknLayout] = None) -> RecordSet:
    """Convenience wrapper: read one file with the given (or default) layout."""
    cfg = BknReaderConfig(layout=layout) if layout is not None else BknReaderConfig()
    return BknReader(cfg).read(file_path)

