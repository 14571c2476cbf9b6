"""Extend unified diff hunks with unchanged lines from the original file."""

import base64
import binascii
import re
from dataclasses import replace
from typing import Optional

from src.core.diff import parse_hunk_header
from src.core.exceptions import PatchDecodeError
from src.core.logging import get_logger

logger = get_logger("reviewer.patch_extender")

MAX_EXTRA_LINES = 10

_WHITESPACE = re.compile(r"\s+")


def decode_base64(content: str) -> str:
    """Decode base64 file content as returned by the GitHub contents API.

    Line breaks and other whitespace inside the payload are ignored.

    Raises:
        PatchDecodeError: If the payload is not valid base64 or not UTF-8
    """
    cleaned = _WHITESPACE.sub("", content)
    try:
        return base64.b64decode(cleaned, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise PatchDecodeError("base64", str(e)) from e


def extend_patch(
    original_content: Optional[str],
    patch: Optional[str],
    lines_before: int = 0,
    lines_after: int = 0,
    filename: str = "",
    encoding: Optional[str] = None,
    max_extra_lines: int = MAX_EXTRA_LINES,
) -> Optional[str]:
    """Pad every hunk of a patch with context lines from the original file.

    Context enrichment is best-effort: when the original content cannot be
    decoded or the patch cannot be processed, the patch is returned unmodified.

    Args:
        original_content: Full file content before the change
        patch: Unified diff for the file
        lines_before: Context lines to prepend to each hunk
        lines_after: Context lines to append to each hunk
        filename: Used for log messages only
        encoding: "base64" when original_content is transport-encoded,
            None when it is plain text
        max_extra_lines: Hard cap on lines added per side

    Returns:
        The extended patch, or the input patch on the fast path or on failure
    """
    if not patch or (lines_before == 0 and lines_after == 0) or not original_content:
        return patch

    try:
        if encoding == "base64":
            original_content = decode_base64(original_content)
        elif encoding is not None:
            raise PatchDecodeError(encoding, "unsupported encoding")

        return process_patch_lines(
            patch,
            original_content,
            lines_before,
            lines_after,
            max_extra_lines,
        )
    except PatchDecodeError as e:
        logger.warning(f"Could not extend patch for {filename or '<unknown>'}: {e}")
        return patch


def process_patch_lines(
    patch: str,
    original_content: str,
    extra_before: int,
    extra_after: int,
    max_extra_lines: int = MAX_EXTRA_LINES,
) -> str:
    """Rewrite each hunk of `patch` with extended old-side ranges."""
    extra_before = max(0, min(extra_before, max_extra_lines))
    extra_after = max(0, min(extra_after, max_extra_lines))

    original_lines = original_content.splitlines()
    patch_lines = patch.split("\n")
    extended: list[str] = []

    i = 0
    while i < len(patch_lines):
        header = parse_hunk_header(patch_lines[i])
        if header is None:
            extended.append(patch_lines[i])
            i += 1
            continue

        # Hunks at old_start 0 (file creation) have nothing above them
        prepend = min(extra_before, max(0, header.old_start - 1))
        before = original_lines[header.old_start - 1 - prepend : header.old_start - 1] if prepend else []

        # Old range is 1-based; hunk_end is the 0-based index just past it
        hunk_end = max(0, header.old_start - 1 + header.old_count)
        after = original_lines[hunk_end : hunk_end + extra_after] if extra_after else []

        extended_header = replace(
            header,
            old_start=header.old_start - len(before),
            old_count=header.old_count + len(before) + len(after),
        )
        extended.append(extended_header.format())
        extended.extend(" " + line for line in before)

        i += 1
        while i < len(patch_lines) and not patch_lines[i].startswith("@@"):
            extended.append(patch_lines[i])
            i += 1

        extended.extend(" " + line for line in after)

    return "\n".join(extended)
