"""BKN extractor -- Python tooling for batch kinetics (.bkn) instrument files.

A BKN file is a flat binary buffer with no index. Each kinetics method (run) starts
after a fixed marker and is laid out at fixed offsets: a point count, an array of
float32 (time, absorbance) pairs, then a run of length-prefixed text metadata fields.

This package provides tools for:
- Scanning a buffer for method markers
- Reading point blocks and length-prefixed fields with strict bounds checks
- Classifying metadata text into name / value / unit
- Rendering the decoded records as JSON (10-digit fixed decimals) or pandas tables

Key principles:
- Fixed layout: every offset is a named constant in BknLayout
- Fail fast: any out-of-bounds read is a FormatError; no partial output
- Write-once data: decoded records are frozen dataclasses

Main subpackages:
- ingest: loader, scanner, binary readers, classifier, extraction pipeline
- models: Record / RecordSet data model, BknLayout and metadata schema
- export: JSON and tabular export
- validation: synthetic BKN buffers for tests
- scripts: bkn-to-json command-line entry point
"""

from .errors import BknError, BknIOError, FormatError, PatternMismatchError
from .ingest.pipeline import BknReader, BknReaderConfig, extract_all, extract_record, read_bkn
from .models import BknLayout, FieldType, MetadataField, Point, PointOrder, Record, RecordSet

__all__ = [
    "BknError",
    "BknIOError",
    "FormatError",
    "PatternMismatchError",
    "BknReader",
    "BknReaderConfig",
    "extract_all",
    "extract_record",
    "read_bkn",
    "BknLayout",
    "FieldType",
    "MetadataField",
    "Point",
    "PointOrder",
    "Record",
    "RecordSet",
]

__version__ = "0.1.0"
