"""Export package - JSON and tabular rendering of decoded records."""

from .json_export import format_number, record_to_json, records_to_json, write_json
from .tables import export_points_csv, meta_frame, points_frame

__all__ = [
    "format_number",
    "record_to_json",
    "records_to_json",
    "write_json",
    "export_points_csv",
    "meta_frame",
    "points_frame",
]
