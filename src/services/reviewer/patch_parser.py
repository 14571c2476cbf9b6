"""Patch parser to map review comments onto lines GitHub will accept."""

from typing import AbstractSet, Iterable, Mapping, Optional

from src.core.diff import parse_hunk_header
from src.core.logging import get_logger
from src.services.reviewer.schemas import Annotation, ResolvedAnnotation

logger = get_logger("reviewer.patch_parser")


def parse_patch_line_numbers(patch: Optional[str]) -> set[int]:
    """Extract the new-file line numbers of added lines in a unified diff patch.

    GitHub PR review comments on the RIGHT side can only be placed on lines
    that are part of the diff; added lines are the targets we use.

    Args:
        patch: Unified diff patch string

    Returns:
        Set of valid line numbers (in the new file) for review comments
    """
    valid_lines: set[int] = set()

    if not patch:
        return valid_lines

    # Track current line number in the new file
    current_line: Optional[int] = None

    for line in patch.split("\n"):
        header = parse_hunk_header(line)
        if header is not None:
            current_line = header.new_start
            continue

        # Skip if we haven't seen a hunk header yet
        if current_line is None:
            continue

        if line.startswith("-"):
            # Removed lines don't exist in the new file
            continue

        if line.startswith("\\"):
            # "\ No newline at end of file"
            continue

        if line.startswith("+") and not line.startswith("+++"):
            valid_lines.add(current_line)

        current_line += 1

    return valid_lines


def find_closest_line(valid_lines: Iterable[int], suggested_line: int) -> int:
    """Return the valid line nearest to `suggested_line`.

    Ties go to the lower line number. With no valid lines the suggestion is
    returned as-is.
    """
    closest = suggested_line
    min_distance: Optional[int] = None

    for line in sorted(valid_lines):
        distance = abs(line - suggested_line)
        if min_distance is None or distance < min_distance:
            min_distance = distance
            closest = line

    return closest


def snap_to_valid_line(valid_lines: AbstractSet[int], suggested_line: int) -> int:
    """Keep `suggested_line` if it is valid, else move it to the closest valid line."""
    if suggested_line in valid_lines:
        return suggested_line
    return find_closest_line(valid_lines, suggested_line)


def resolve_line(patch: Optional[str], suggested_line: int) -> int:
    """Map a suggested line number onto an added line of the patch."""
    return snap_to_valid_line(parse_patch_line_numbers(patch), suggested_line)


def resolve_annotations(
    annotations: list[Annotation],
    patches: Mapping[str, Optional[str]],
) -> list[ResolvedAnnotation]:
    """Move each annotation onto the closest added line of its file.

    Args:
        annotations: Comments with LLM-suggested line numbers
        patches: Dict mapping filename to patch content

    Returns:
        Annotations with resolved line numbers, in input order
    """
    # Build valid lines per file
    valid_lines_by_file = {
        filename: parse_patch_line_numbers(patch) for filename, patch in patches.items()
    }

    resolved = []
    for annotation in annotations:
        file_valid_lines = valid_lines_by_file.get(annotation.filename, set())
        suggested = annotation.suggested_start_line
        line = snap_to_valid_line(file_valid_lines, suggested)

        if not file_valid_lines:
            logger.warning(
                f"No added lines for {annotation.filename}, keeping suggested line {suggested}"
            )
        elif line != suggested:
            logger.debug(f"Moved comment on {annotation.filename} from line {suggested} to {line}")

        resolved.append(
            ResolvedAnnotation(
                filename=annotation.filename,
                resolved_line=line,
                body=annotation.body,
            )
        )

    return resolved
