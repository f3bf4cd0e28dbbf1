"""Metadata field classification.

A BKN metadata field is a free-text blob. Depending on its schema type the text is
split into a value and an optional unit:

- PLAIN      : ``Kinetics run 3``                   -> value only
- LABELED    : ``Operator Name:   Jane Doe``        -> text after the first ':'
- VALUE_UNIT : ``Wavelength      340.0 (nm)``       -> value after a 3+ whitespace
               separator, unit from an optional trailing parenthesised group

Examples
--------
>>> classify(b"Operator Name:   Jane Doe", FieldType.LABELED).value
'Jane Doe'
>>> f = classify(b"Wavelength      340.0 (nm)   ", FieldType.VALUE_UNIT)
>>> (f.value, f.unit)
('340.0', 'nm')
>>> classify(b"Ordinate Mode      Absorbance", FieldType.VALUE_UNIT).unit
''
"""

from __future__ import annotations

import re

from bkn_extractor.errors import PatternMismatchError
from bkn_extractor.models.records import MetadataField
from bkn_extractor.models.schema import DEFAULT_ENCODING, MAX_FIELD_TEXT, FieldType


_TRIM_CHARS = " \t\n\r"

_RE_LABELED = re.compile(r"^[^:]*:(?P<value>.*)$", flags=re.DOTALL)

# label, then 3+ whitespace, then the value up to an optional "(unit)" group.
# A truncated group without ')' still yields its interior; anything after it is ignored.
_RE_VALUE_UNIT = re.compile(
    r"^(?P<label>.*?)\s{3,}(?P<value>[^(]*)(?:\((?P<unit>[^)]*)\)?)?",
    flags=re.DOTALL,
)


def trim_text(text: str) -> str:
    """Strip leading/trailing space, tab, newline and carriage return (only those)."""
    return text.strip(_TRIM_CHARS)


def decode_field_text(raw: bytes, max_text: int = MAX_FIELD_TEXT, encoding: str = DEFAULT_ENCODING) -> str:
    """Truncate raw to max_text bytes, cut at the first NUL, decode."""
    clipped = bytes(raw[:max_text])
    nul = clipped.find(b"\x00")
    if nul >= 0:
        clipped = clipped[:nul]
    return clipped.decode(encoding, errors="replace")


def _labeled(text: str, name: str) -> MetadataField:
    m = _RE_LABELED.match(text)
    if not m:
        raise PatternMismatchError(
            f"labeled field has no ':' separator: {text!r}",
            field_type=FieldType.LABELED.value,
            text=text,
            field_name=name,
        )
    return MetadataField(name=name, value=trim_text(m.group("value")))


def _value_unit(text: str, name: str) -> MetadataField:
    body = trim_text(text)
    m = _RE_VALUE_UNIT.match(body)
    value = trim_text(m.group("value") or "") if m else ""
    if not value:
        raise PatternMismatchError(
            f"value/unit field has no value after a 3+ whitespace separator: {text!r}",
            field_type=FieldType.VALUE_UNIT.value,
            text=text,
            field_name=name,
        )
    unit = trim_text(m.group("unit") or "")
    return MetadataField(name=name, value=value, unit=unit)


def classify_text(text: str, field_type: FieldType, name: str = "") -> MetadataField:
    """Classify already-decoded text according to field_type."""
    ft = FieldType(field_type)
    if ft is FieldType.PLAIN:
        return MetadataField(name=name, value=trim_text(text))
    if ft is FieldType.LABELED:
        return _labeled(text, name)
    return _value_unit(text, name)


def classify(
    raw: bytes,
    field_type: FieldType,
    name: str = "",
    max_text: int = MAX_FIELD_TEXT,
    encoding: str = DEFAULT_ENCODING,
) -> MetadataField:
    """Decode raw field bytes and split them into value and unit.

    Raises PatternMismatchError when a LABELED or VALUE_UNIT field has no locatable
    value. A missing unit is never an error.
    """
    return classify_text(decode_field_text(raw, max_text=max_text, encoding=encoding), field_type, name=name)
