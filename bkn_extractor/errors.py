"""Exception types raised while loading and decoding BKN files.

All of them derive from :class:`BknError` so scripts can catch one type at the
boundary. Readers never retry: the layout is fixed, so a failure means the file is
corrupt, foreign, or described by the wrong layout.
"""

from __future__ import annotations

from typing import Optional


class BknError(Exception):
    """Base class for every error raised by bkn_extractor."""


class BknIOError(BknError, OSError):
    """The file could not be opened or was not read completely."""


class FormatError(BknError, ValueError):
    """A read or skip would run past the end of the buffer.

    Attributes
    ----------
    offset:
        Offset at which the failing read started (None if unknown).
    needed:
        Number of bytes the read required (None if unknown).
    """

    def __init__(self, message: str, *, offset: Optional[int] = None, needed: Optional[int] = None):
        super().__init__(message)
        self.offset = offset
        self.needed = needed


class PatternMismatchError(BknError, ValueError):
    """The value portion of a labeled or value/unit field could not be located."""

    def __init__(self, message: str, *, field_type: str, text: str, field_name: str = ""):
        super().__init__(message)
        self.field_type = field_type
        self.text = text
        self.field_name = field_name

    def with_context(self, field_name: str, record_offset: int) -> "PatternMismatchError":
        """Return a copy whose message names the schema field and record offset."""
        msg = f"{self} [field '{field_name}', record at 0x{record_offset:X}]"
        return PatternMismatchError(msg, field_type=self.field_type, text=self.text, field_name=field_name)
