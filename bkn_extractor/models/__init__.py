from .records import MetadataField, Point, Record, RecordSet
from .schema import (
    DEFAULT_LAYOUT,
    DEFAULT_SCHEMA,
    BknLayout,
    FieldType,
    PointOrder,
    SchemaEntry,
)

__all__ = [
    "Point",
    "MetadataField",
    "Record",
    "RecordSet",
    "BknLayout",
    "FieldType",
    "PointOrder",
    "SchemaEntry",
    "DEFAULT_LAYOUT",
    "DEFAULT_SCHEMA",
]
