import errno
import os
import tempfile
import unittest
from pathlib import Path

from bkn_extractor.errors import BknError, BknIOError, FormatError
from bkn_extractor.ingest.loader import load_bkn_bytes
from bkn_extractor.ingest.pipeline import BknReader, BknReaderConfig, read_bkn
from bkn_extractor.models.schema import DEFAULT_LAYOUT
from bkn_extractor.validation.synthetic import build_bkn_buffer, default_field_texts


class TestLoader(unittest.TestCase):
    def test_reads_whole_file(self):
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "x.bkn"
            p.write_bytes(b"\x01\x02\x03")
            self.assertEqual(load_bkn_bytes(p), b"\x01\x02\x03")
            self.assertEqual(load_bkn_bytes(str(p)), b"\x01\x02\x03")

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(BknIOError) as cm:
                load_bkn_bytes(Path(d) / "missing.bkn")
            self.assertIsInstance(cm.exception, OSError)
            self.assertIsInstance(cm.exception, BknError)
            self.assertEqual(cm.exception.errno, errno.ENOENT)
            self.assertIn("missing.bkn", str(cm.exception))

    def test_directory_is_rejected(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(BknIOError):
                load_bkn_bytes(d)


class TestBknReader(unittest.TestCase):
    def _write(self, d: str, data: bytes) -> Path:
        p = Path(d) / "run.bkn"
        p.write_bytes(data)
        return p

    def test_read_file(self):
        with tempfile.TemporaryDirectory() as d:
            buf = build_bkn_buffer(
                [
                    ([(0.0, 0.1), (1.0, 0.2)], default_field_texts()),
                    ([(0.0, 0.3)], default_field_texts()),
                ]
            )
            p = self._write(d, buf)
            rs = BknReader().read(p)
            self.assertEqual(len(rs), 2)
            self.assertEqual(rs.source_path, p.resolve())
            self.assertEqual(rs.warnings, ())
            self.assertEqual(rs.metadata_mode, "schema")

    def test_empty_file_warns(self):
        with tempfile.TemporaryDirectory() as d:
            rs = BknReader().read(self._write(d, b""))
            self.assertEqual(len(rs), 0)
            self.assertIn("no method marker found", rs.warnings)

    def test_zero_point_method_warns(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, build_bkn_buffer([([], default_field_texts())]))
            rs = BknReader().read(p)
            self.assertEqual(len(rs.warnings), 1)
            self.assertIn("has no points", rs.warnings[0])

            quiet = BknReader(BknReaderConfig(warn_on_empty_points=False)).read(p)
            self.assertEqual(quiet.warnings, ())

    def test_truncated_file_raises(self):
        with tempfile.TemporaryDirectory() as d:
            buf = build_bkn_buffer([([(0.0, 0.1)], default_field_texts())], gap=b"")
            p = self._write(d, buf[:-5])
            with self.assertRaises(FormatError):
                BknReader().read(p)

    def test_read_bkn_with_layout(self):
        layout = DEFAULT_LAYOUT.with_overrides(metadata_mode="sentinel")
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, build_bkn_buffer([([(0.0, 0.1)], ["a", "End Method"])], layout=layout))
            rs = read_bkn(p, layout=layout)
            self.assertEqual(rs.metadata_mode, "sentinel")
            self.assertEqual([m.value for m in rs[0].meta], ["a", "End Method"])

    def test_user_path_is_expanded(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._write(d, b"")
            old = os.environ.get("HOME")
            os.environ["HOME"] = d
            try:
                rs = BknReader().read("~/run.bkn")
            finally:
                if old is None:
                    del os.environ["HOME"]
                else:
                    os.environ["HOME"] = old
            self.assertEqual(rs.source_path, p.resolve())


if __name__ == "__main__":
    unittest.main()
