from __future__ import annotations

from pathlib import Path
import errno

from bkn_extractor.errors import BknIOError


def load_bkn_bytes(file_path: str | Path) -> bytes:
    """
    Read a whole BKN file into memory.

    Raises BknIOError if the path is missing, is not a regular file, cannot be read,
    or if the number of bytes read differs from the size reported by the filesystem.
    """
    path = Path(file_path).expanduser()
    if not path.exists():
        raise BknIOError(errno.ENOENT, "Unable to open BKN file (not found)", str(path))
    if not path.is_file():
        raise BknIOError(errno.EISDIR, "Unable to open BKN file (not a regular file)", str(path))

    try:
        expected = path.stat().st_size
        with path.open("rb") as fh:
            data = fh.read()
    except OSError as exc:
        raise BknIOError(exc.errno or errno.EIO, f"Error reading BKN file: {exc.strerror or exc}", str(path)) from exc

    if len(data) != expected:
        raise BknIOError(errno.EIO, f"Error reading BKN file: read {len(data)} of {expected} bytes", str(path))
    return data
