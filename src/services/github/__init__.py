"""GitHub service."""

from src.services.github.service import (
    build_file_diff,
    get_diff_files,
    get_pull_request,
    submit_review,
)

__all__ = [
    "build_file_diff",
    "get_diff_files",
    "get_pull_request",
    "submit_review",
]
