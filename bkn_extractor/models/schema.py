"""BKN layout constants and the metadata schema.

Every byte offset the decoder relies on is declared here, in one frozen
:class:`BknLayout`. A layout correction should only ever touch this module.

The layout is reverse-engineered, not documented:

- a method starts right after the ASCII marker ``TContinuumStore``
- the u32 point count sits 0x1C bytes after the marker end
- the point array starts 0x3EC bytes after the point count field
- the metadata fields follow the point array as length-prefixed text blobs
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple


class FieldType(str, Enum):
    """How the text of one metadata field is split into value and unit."""

    PLAIN = "plain"
    LABELED = "labeled"
    VALUE_UNIT = "value_unit"


class PointOrder(str, Enum):
    """Which float of a stored pair comes first."""

    TIME_FIRST = "time_first"
    ABSORBANCE_FIRST = "absorbance_first"


METADATA_MODES: Tuple[str, ...] = ("schema", "sentinel")

METHOD_MARKER: bytes = b"TContinuumStore"
POINT_COUNT_SKIP: int = 0x1C
POINT_ARRAY_SKIP: int = 0x3EC
POINT_SIZE: int = 8
LENGTH_PREFIX_SIZE: int = 4
END_METHOD_SENTINEL: str = "End Method"

# Fields are copied into bounded storage; one byte is kept for the terminator.
MAX_FIELD_TEXT: int = 511
DEFAULT_ENCODING: str = "cp1252"


@dataclass(frozen=True)
class SchemaEntry:
    """One metadata field in file order.

    pad_before:
        Bytes to skip before this field's length prefix. Zero for most fields.
    """

    name: str
    field_type: FieldType
    pad_before: int = 0


DEFAULT_SCHEMA: Tuple[SchemaEntry, ...] = (
    SchemaEntry("Method Name", FieldType.PLAIN),
    SchemaEntry("Collection Time", FieldType.LABELED),
    SchemaEntry("Operator Name", FieldType.LABELED),
    SchemaEntry("Instrument", FieldType.LABELED),
    SchemaEntry("Instrument Version", FieldType.LABELED),
    SchemaEntry("Wavelength", FieldType.VALUE_UNIT, pad_before=4),
    SchemaEntry("Ordinate Mode", FieldType.VALUE_UNIT),
    SchemaEntry("Ave Time", FieldType.VALUE_UNIT),
    SchemaEntry("Cycle Time", FieldType.VALUE_UNIT),
    SchemaEntry("Stop Time", FieldType.VALUE_UNIT),
    SchemaEntry("SBW", FieldType.VALUE_UNIT),
    SchemaEntry("Beam Mode", FieldType.VALUE_UNIT),
    SchemaEntry("Baseline Correction", FieldType.VALUE_UNIT, pad_before=2),
    SchemaEntry("End Method", FieldType.PLAIN),
)


@dataclass(frozen=True)
class BknLayout:
    """Frozen description of the BKN binary layout.

    Attributes
    ----------
    marker:
        Byte sequence that precedes every method record.
    point_count_skip:
        Distance from the marker end to the u32 point count.
    point_array_skip:
        Distance from the point count field to the first point.
    point_order:
        Order of the two float32 values in a stored pair.
    schema:
        Ordered metadata fields (schema mode only).
    metadata_mode:
        "schema": read exactly ``len(schema)`` typed fields.
        "sentinel": read raw fields up to and including the one starting with ``sentinel``.
    max_field_text:
        Bytes of each field kept before decoding.
    encoding:
        Text encoding of metadata fields.
    """

    marker: bytes = METHOD_MARKER
    point_count_skip: int = POINT_COUNT_SKIP
    point_array_skip: int = POINT_ARRAY_SKIP
    point_order: PointOrder = PointOrder.TIME_FIRST
    schema: Tuple[SchemaEntry, ...] = field(default=DEFAULT_SCHEMA)
    metadata_mode: str = "schema"
    sentinel: str = END_METHOD_SENTINEL
    max_field_text: int = MAX_FIELD_TEXT
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if not self.marker:
            raise ValueError("marker must be a non-empty byte sequence")
        if self.point_count_skip < 0 or self.point_array_skip < 0:
            raise ValueError("skip distances must be >= 0")
        if self.metadata_mode not in METADATA_MODES:
            raise ValueError(f"metadata_mode must be one of {METADATA_MODES}, got {self.metadata_mode!r}")
        if self.max_field_text <= 0:
            raise ValueError("max_field_text must be > 0")
        if any(e.pad_before < 0 for e in self.schema):
            raise ValueError("schema pad_before must be >= 0")

    def with_overrides(self, **overrides: Any) -> "BknLayout":
        """Return a copy with selected fields replaced (strings accepted for enums)."""
        if "point_order" in overrides:
            overrides["point_order"] = PointOrder(overrides["point_order"])
        return replace(self, **overrides)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (bytes become latin-1 text, enums their values)."""
        d = asdict(self)
        d["marker"] = self.marker.decode("latin-1")
        d["point_order"] = self.point_order.value
        d["schema"] = [
            {"name": e.name, "field_type": e.field_type.value, "pad_before": e.pad_before}
            for e in self.schema
        ]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BknLayout":
        """Reconstruct from a dict produced by :meth:`to_dict`."""
        d = dict(d)
        if isinstance(d.get("marker"), str):
            d["marker"] = d["marker"].encode("latin-1")
        if "point_order" in d:
            d["point_order"] = PointOrder(d["point_order"])
        if "schema" in d:
            d["schema"] = tuple(
                SchemaEntry(str(e["name"]), FieldType(e["field_type"]), int(e.get("pad_before", 0)))
                for e in d["schema"]
            )
        return cls(**d)


DEFAULT_LAYOUT = BknLayout()
