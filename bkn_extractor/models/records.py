from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Point:
    """One kinetics sample, widened from float32."""

    absorbance: float
    time: float


@dataclass(frozen=True)
class MetadataField:
    """
    One decoded metadata field.

    name comes from the schema (empty in sentinel mode). value may be empty.
    unit is only non-empty for value/unit fields that carried a parenthesised unit.
    """

    name: str
    value: str
    unit: str = ""


@dataclass(frozen=True)
class Record:
    """
    One method (kinetics run) read from a BKN file.

    Notes
    - len(points) == num_points always holds.
    - In schema mode, meta follows the schema order exactly.
    - raw_metadata holds the decoded text of every field, in file order.
    """

    points: Tuple[Point, ...]
    meta: Tuple[MetadataField, ...]
    num_points: int
    offset: int
    raw_metadata: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.points) != self.num_points:
            raise ValueError(f"Record has {len(self.points)} points but num_points={self.num_points}")

    def meta_dict(self) -> Dict[str, Tuple[str, str]]:
        """Map field name -> (value, unit). Unnamed (sentinel mode) fields are skipped."""
        return {m.name: (m.value, m.unit) for m in self.meta if m.name}

    def points_frame(self) -> pd.DataFrame:
        """Points as a float64 DataFrame with columns 'time' and 'absorbance'."""
        t = np.fromiter((p.time for p in self.points), dtype=np.float64, count=len(self.points))
        a = np.fromiter((p.absorbance for p in self.points), dtype=np.float64, count=len(self.points))
        return pd.DataFrame({"time": t, "absorbance": a})


@dataclass(frozen=True)
class RecordSet:
    """
    Every record of one BKN file, in marker discovery order.

    warnings collects non-fatal observations (empty file, zero-point methods).
    """

    records: Tuple[Record, ...]
    metadata_mode: str = "schema"
    source_path: Optional[Path] = None
    warnings: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, idx: int) -> Record:
        return self.records[idx]

    def points_frame(self) -> pd.DataFrame:
        """All points stacked, with a 'method' column holding the record index."""
        frames = []
        for k, rec in enumerate(self.records):
            df = rec.points_frame()
            df.insert(0, "method", np.full(len(df), k, dtype=np.int64))
            frames.append(df)
        if not frames:
            return pd.DataFrame(
                {
                    "method": pd.Series(dtype=np.int64),
                    "time": pd.Series(dtype=np.float64),
                    "absorbance": pd.Series(dtype=np.float64),
                }
            )
        return pd.concat(frames, ignore_index=True)
