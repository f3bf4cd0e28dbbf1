from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from bkn_extractor.models.records import Record, RecordSet


def points_frame(source: Record | RecordSet, method: int | None = None) -> pd.DataFrame:
    """
    Points as a DataFrame with columns time, absorbance.

    A RecordSet gives all methods stacked with a leading 'method' column, or only
    one method when method is set (negative indices count from the end).
    """
    if isinstance(source, Record):
        return source.points_frame()
    if method is None:
        return source.points_frame()
    return source[method].points_frame()


def meta_frame(record: Record) -> pd.DataFrame:
    """Metadata as a DataFrame with columns name, value, units (schema order)."""
    return pd.DataFrame(
        {
            "name": [m.name for m in record.meta],
            "value": [m.value for m in record.meta],
            "units": [m.unit for m in record.meta],
        },
        columns=["name", "value", "units"],
    )


def export_points_csv(record_set: RecordSet, out_dir: str | Path, stem: str) -> List[Path]:
    """
    Write one CSV per method as <stem>_method_<k>.csv (k is 0-based).

    Returns the written paths in record order.
    """
    out = Path(out_dir).expanduser()
    out.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for k, rec in enumerate(record_set.records):
        p = out / f"{stem}_method_{k}.csv"
        rec.points_frame().to_csv(p, index=False, float_format="%.10f")
        written.append(p)
    return written
