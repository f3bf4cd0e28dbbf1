from __future__ import annotations

from typing import Iterator, Optional

from bkn_extractor.errors import FormatError


def find_next(buffer: bytes, marker: bytes, start_offset: int = 0) -> Optional[int]:
    """
    Find the next occurrence of marker at or after start_offset.

    Returns the offset one past the end of the match, or None when the buffer is
    exhausted.

    Byte-by-byte scan with naive restart: after a partial match fails, the position
    is rewound by the number of matched bytes and matching restarts one byte after
    the previous attempt began. Worst case O(n*m).

    Examples
    --------
    >>> find_next(b"XAABAB", b"AB", 0)
    4
    >>> find_next(b"XAABAB", b"AB", 4)
    6
    >>> find_next(b"XAABAB", b"AB", 6) is None
    True
    """
    if not marker:
        raise ValueError("marker must be non-empty")
    size = len(buffer)
    if start_offset < 0 or start_offset > size:
        raise FormatError(f"scan start 0x{start_offset:X} outside buffer of {size} bytes", offset=start_offset)

    mv = memoryview(buffer)
    m = len(marker)
    pos = start_offset
    matched = 0
    while pos < size:
        if mv[pos] == marker[matched]:
            matched += 1
            if matched == m:
                return pos + 1
        else:
            if matched:
                pos -= matched
            matched = 0
        pos += 1
    return None


def iter_marker_offsets(buffer: bytes, marker: bytes, start_offset: int = 0) -> Iterator[int]:
    """Yield every offset returned by :func:`find_next`, resuming at each result."""
    pos: Optional[int] = start_offset
    while True:
        pos = find_next(buffer, marker, pos)
        if pos is None:
            return
        yield pos
