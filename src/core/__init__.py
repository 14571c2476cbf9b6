"""Shared library utilities."""

from src.core.batching import chunk_list
from src.core.diff import HunkHeader, parse_hunk_header
from src.core.logging import get_logger

__all__ = [
    "chunk_list",
    "get_logger",
    "HunkHeader",
    "parse_hunk_header",
]
