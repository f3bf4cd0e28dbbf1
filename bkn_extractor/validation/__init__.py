"""Validation utilities.

This package contains *non-interactive* tooling used to check the decoder against
known content.

Design goals
------------
1) Build synthetic BKN buffers from known records (inverse of the decoder).
2) Keep fixtures reproducible: no real instrument file is required by the tests.
"""

from .synthetic import build_bkn_buffer, build_record_bytes, default_field_texts

__all__ = ["build_bkn_buffer", "build_record_bytes", "default_field_texts"]
