"""Ingest package - BKN loading and binary decoding.

This package handles:
- Loading a BKN file into memory (one immutable byte buffer)
- Scanning the buffer for method markers
- Reading point blocks and length-prefixed metadata fields
- Classifying metadata text into value/unit pairs

Key entry points:
- BknReader: reads one file and returns a RecordSet
- extract_all: decodes every method in an in-memory buffer
- extract_record: decodes one method from a marker end offset

Design principle:
- Every offset comes from BknLayout (no literal offsets in the readers)
- Any out-of-bounds read raises FormatError; nothing partial is returned
"""
from .binary import read_length_prefixed, read_points, read_u32
from .classify import classify, classify_text, decode_field_text, trim_text
from .loader import load_bkn_bytes
from .pipeline import BknReader, BknReaderConfig, extract_all, extract_record, find_record_offsets, read_bkn
from .scanner import find_next, iter_marker_offsets

__all__ = [
    "BknReader",
    "BknReaderConfig",
    "extract_all",
    "extract_record",
    "find_record_offsets",
    "read_bkn",
    "find_next",
    "iter_marker_offsets",
    "read_u32",
    "read_points",
    "read_length_prefixed",
    "classify",
    "classify_text",
    "decode_field_text",
    "trim_text",
    "load_bkn_bytes",
]
