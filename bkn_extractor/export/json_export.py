"""JSON rendering of decoded BKN records.

Output is an array with one object per method:

    {"points": [{"time": 0.0000000000, "absorbance": 0.1234567890}, ...],
     "meta": [{"name": "Wavelength", "value": "340.0", "units": "nm"}, ...]}

In sentinel mode ``meta`` is replaced by ``metadata``, a flat array of strings.
Numbers are written as decimal text with exactly 10 digits after the point, in
compact and indented output alike, so the text is built by hand rather than
through ``json.dumps``; strings are still escaped with ``json.dumps``.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, List, Optional, Union
import json
import math

from bkn_extractor.models.records import Record, RecordSet


FLOAT_DIGITS = 10


class _Literal(str):
    """Already-rendered JSON text, emitted as-is."""


def format_number(x: float) -> str:
    """Fixed 10-digit decimal text; non-finite values become null."""
    x = float(x)
    if not math.isfinite(x):
        return "null"
    return format(x, f".{FLOAT_DIGITS}f")


def _record_tree(record: Record, mode: str) -> dict:
    tree: dict = {
        "points": [
            {"time": _Literal(format_number(p.time)), "absorbance": _Literal(format_number(p.absorbance))}
            for p in record.points
        ]
    }
    if mode == "sentinel":
        tree["metadata"] = [m.value for m in record.meta]
    else:
        tree["meta"] = [{"name": m.name, "value": m.value, "units": m.unit} for m in record.meta]
    return tree


def _render(node: Any, indent: Optional[int], level: int = 0) -> str:
    if isinstance(node, _Literal):
        return str(node)
    if isinstance(node, str):
        return json.dumps(node)
    if isinstance(node, dict):
        items = [json.dumps(k) + (":" if indent is None else ": ") + _render(v, indent, level + 1) for k, v in node.items()]
        open_, close = "{", "}"
    else:
        items = [_render(v, indent, level + 1) for v in node]
        open_, close = "[", "]"
    if not items:
        return open_ + close
    if indent is None:
        return open_ + ",".join(items) + close
    inner = "\n" + " " * (indent * (level + 1))
    return open_ + inner + ("," + inner).join(items) + "\n" + " " * (indent * level) + close


def record_to_json(record: Record, mode: str = "schema", indent: Optional[int] = None) -> str:
    """Render one record as a JSON object (compact unless indent is given)."""
    return _render(_record_tree(record, mode), indent)


def records_to_json(record_set: RecordSet, mode: Optional[str] = None, indent: Optional[int] = None) -> str:
    """
    Render a RecordSet as a JSON array.

    mode defaults to the RecordSet's own metadata_mode. indent pretty-prints the
    same layout json.dumps(indent=...) uses; numbers keep the fixed 10-digit form.
    """
    mode = mode or record_set.metadata_mode
    if indent is not None:
        indent = int(indent)
    return _render([_record_tree(r, mode) for r in record_set.records], indent)


def write_json(
    record_set: RecordSet,
    destination: Union[str, Path, IO[str]],
    mode: Optional[str] = None,
    indent: Optional[int] = None,
) -> None:
    """Write the JSON text plus a trailing newline to a path or text stream."""
    text = records_to_json(record_set, mode=mode, indent=indent) + "\n"
    if isinstance(destination, (str, Path)):
        out = Path(destination)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        return
    destination.write(text)


def summarize(record_set: RecordSet) -> List[str]:
    """One line per method: index, offset, point count, metadata count."""
    return [
        f"method {k}: offset=0x{r.offset:X} points={r.num_points} meta={len(r.meta)}"
        for k, r in enumerate(record_set.records)
    ]
