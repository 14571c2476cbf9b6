"""Unified diff hunk header parsing."""

import re
from dataclasses import dataclass
from typing import Optional

HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass(frozen=True)
class HunkHeader:
    """Parsed `@@ -old_start,old_count +new_start,new_count @@` header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int

    def format(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


def parse_hunk_header(line: str) -> Optional[HunkHeader]:
    """
    Parse a hunk header line.

    Counts are optional in unified diffs and default to 1 when omitted.
    Returns None when the line is not a hunk header.
    """
    match = HUNK_HEADER_PATTERN.match(line)
    if not match:
        return None

    old_start, old_count, new_start, new_count = match.groups()
    return HunkHeader(
        old_start=int(old_start),
        old_count=int(old_count) if old_count is not None else 1,
        new_start=int(new_start),
        new_count=int(new_count) if new_count is not None else 1,
    )


def find_first_hunk_header(lines: list[str]) -> int:
    """Index of the first parseable hunk header, or -1."""
    for index, line in enumerate(lines):
        if HUNK_HEADER_PATTERN.match(line):
            return index
    return -1
