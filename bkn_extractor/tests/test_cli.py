"""Tests for the bkn-to-json command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bkn_extractor.models.schema import DEFAULT_LAYOUT
from bkn_extractor.scripts.bkn_to_json import EXIT_FORMAT, EXIT_IO, EXIT_OK, main
from bkn_extractor.validation.synthetic import build_bkn_buffer, default_field_texts


@pytest.fixture
def bkn_file(tmp_path: Path) -> Path:
    p = tmp_path / "run.bkn"
    p.write_bytes(
        build_bkn_buffer(
            [
                ([(1.5, 0.1), (2.5, 0.2)], default_field_texts()),
                ([(0.0, 0.5)], default_field_texts({"Method Name": "second"})),
            ]
        )
    )
    return p


def test_prints_json_to_stdout(bkn_file: Path, capsys) -> None:
    assert main([str(bkn_file)]) == EXIT_OK
    out = capsys.readouterr().out
    data = json.loads(out)
    assert len(data) == 2
    assert data[1]["meta"][0] == {"name": "Method Name", "value": "second", "units": ""}
    assert '"time":1.5000000000' in out


def test_output_file_and_csv_dir(bkn_file: Path, tmp_path: Path, capsys) -> None:
    out_json = tmp_path / "out" / "run.json"
    csv_dir = tmp_path / "csv"
    assert main([str(bkn_file), "--output", str(out_json), "--csv-dir", str(csv_dir), "--indent", "2"]) == EXIT_OK
    assert capsys.readouterr().out == ""
    assert len(json.loads(out_json.read_text(encoding="utf-8"))) == 2
    assert sorted(p.name for p in csv_dir.iterdir()) == ["run_method_0.csv", "run_method_1.csv"]


def test_sentinel_mode(tmp_path: Path, capsys) -> None:
    layout = DEFAULT_LAYOUT.with_overrides(metadata_mode="sentinel")
    p = tmp_path / "raw.bkn"
    p.write_bytes(build_bkn_buffer([([(0.0, 0.1)], ["Kinetics", "End Method"])], layout=layout))
    assert main([str(p), "--mode", "sentinel"]) == EXIT_OK
    data = json.loads(capsys.readouterr().out)
    assert data[0]["metadata"] == ["Kinetics", "End Method"]


def test_point_order_option(bkn_file: Path, capsys) -> None:
    assert main([str(bkn_file), "--point-order", "absorbance_first"]) == EXIT_OK
    data = json.loads(capsys.readouterr().out)
    assert data[0]["points"][0]["absorbance"] == 1.5


def test_missing_file_exit_code(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "nope.bkn")]) == EXIT_IO
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error:")


def test_truncated_file_exit_code(bkn_file: Path, capsys) -> None:
    data = bkn_file.read_bytes()
    # drop the 16-byte trailing gap and part of the last "End Method" field
    bkn_file.write_bytes(data[:-20])
    assert main([str(bkn_file)]) == EXIT_FORMAT
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "malformed BKN file" in captured.err


def test_pattern_mismatch_exit_code(tmp_path: Path, capsys) -> None:
    p = tmp_path / "bad.bkn"
    texts = default_field_texts({"Instrument": "Instrument Cary 60"})
    p.write_bytes(build_bkn_buffer([([(0.0, 0.1)], texts)]))
    assert main([str(p)]) == EXIT_FORMAT
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Instrument" in captured.err


def test_bad_arguments_exit_code() -> None:
    with pytest.raises(SystemExit) as ei:
        main([])
    assert ei.value.code == 2


def test_indented_output_keeps_fixed_digits(bkn_file: Path, capsys) -> None:
    assert main([str(bkn_file), "--indent", "2"]) == EXIT_OK
    out = capsys.readouterr().out
    assert '"time": 1.5000000000' in out
    assert '"absorbance": 0.1000000015' in out
    assert len(json.loads(out)) == 2


def test_unwritable_csv_dir_leaves_stdout_empty(bkn_file: Path, tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", encoding="utf-8")
    assert main([str(bkn_file), "--csv-dir", str(blocker)]) == EXIT_IO
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error:")


def test_unwritable_output_path(bkn_file: Path, tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "plain_file"
    blocker.write_text("x", encoding="utf-8")
    assert main([str(bkn_file), "--output", str(blocker / "out.json")]) == EXIT_IO
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error:")
    assert blocker.read_text(encoding="utf-8") == "x"
