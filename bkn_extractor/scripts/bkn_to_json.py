"""
Convert a BKN (batch kinetics) file to JSON.

Examples
--------
$ python -m bkn_extractor run.bkn > run.json
$ bkn-to-json run.bkn --mode sentinel --output run.json
$ bkn-to-json run.bkn --csv-dir out/ --indent 2

Exit status
-----------
0  success
1  file could not be opened or read completely, or an output could not be written
2  malformed file (truncated layout, unparseable metadata) or bad arguments
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import logging
import sys

from bkn_extractor.errors import BknIOError, FormatError, PatternMismatchError
from bkn_extractor.export.json_export import records_to_json, summarize
from bkn_extractor.export.tables import export_points_csv
from bkn_extractor.ingest.pipeline import BknReader, BknReaderConfig
from bkn_extractor.models.schema import DEFAULT_LAYOUT, METADATA_MODES, PointOrder

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO = 1
EXIT_FORMAT = 2


def build_parser():
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="bkn-to-json",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Extract kinetics methods (points + metadata) from a BKN file and print them as JSON.

            Every method starts after a 'TContinuumStore' marker. Points are written with
            10 digits after the decimal point.
            """
        ),
    )
    p.add_argument("file", help="Path to the .bkn file")
    p.add_argument(
        "--mode",
        choices=METADATA_MODES,
        default=DEFAULT_LAYOUT.metadata_mode,
        help="'schema': typed name/value/units fields; 'sentinel': raw strings up to 'End Method'",
    )
    p.add_argument(
        "--point-order",
        choices=[o.value for o in PointOrder],
        default=DEFAULT_LAYOUT.point_order.value,
        help="Which float of each stored pair is read first",
    )
    p.add_argument("--output", "-o", default=None, help="Write JSON here instead of stdout")
    p.add_argument("--csv-dir", default=None, help="Also write one points CSV per method into this directory")
    p.add_argument("--indent", type=int, default=None, help="Pretty-print with this indent")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    layout = DEFAULT_LAYOUT.with_overrides(metadata_mode=ns.mode, point_order=ns.point_order)
    reader = BknReader(BknReaderConfig(layout=layout))

    try:
        record_set = reader.read(ns.file)
        text = records_to_json(record_set, indent=ns.indent)
    except BknIOError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_IO
    except (FormatError, PatternMismatchError) as exc:
        print(f"error: malformed BKN file '{ns.file}': {exc}", file=sys.stderr)
        return EXIT_FORMAT

    for line in summarize(record_set):
        logger.debug(line)

    # Files first; stdout only once nothing else can fail.
    try:
        if ns.csv_dir:
            paths = export_points_csv(record_set, ns.csv_dir, Path(ns.file).stem)
            logger.info("wrote %d CSV file(s) to %s", len(paths), ns.csv_dir)
        if ns.output:
            out = Path(ns.output).expanduser()
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(text + "\n", encoding="utf-8")
            logger.info("wrote %d method(s) to %s", len(record_set), out)
    except OSError as exc:
        print(f"error: cannot write output: {exc}", file=sys.stderr)
        return EXIT_IO

    if not ns.output:
        sys.stdout.write(text + "\n")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
