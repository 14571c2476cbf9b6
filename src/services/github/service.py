"""GitHub service - business logic layer."""

import asyncio
from typing import Optional

from github.PullRequest import PullRequest
from github.Repository import Repository

from src.config import settings
from src.core.batching import chunk_list
from src.core.logging import get_logger
from src.services.github.client import (
    create_review,
    fetch_encoded_file_contents,
    fetch_merge_base,
    fetch_pr_files,
    fetch_pull_request,
)
from src.services.reviewer.patch_extender import extend_patch
from src.services.reviewer.schemas import FileDiff, ResolvedAnnotation, TokenBudget

logger = get_logger("github.service")

# Files with these statuses have no counterpart at the merge base
_NO_ORIGINAL_STATUSES = ("added", "removed")


def get_pull_request(owner: str, repo: str, pr_number: int) -> PullRequest:
    """Get a pull request by owner/repo and number."""
    logger.info(f"Fetching PR: {owner}/{repo}#{pr_number}")
    return fetch_pull_request(owner, repo, pr_number)


def build_file_diff(
    repository: Repository,
    merge_base: str,
    file: dict,
    budget: Optional[TokenBudget] = None,
) -> FileDiff:
    """Fetch the original content of one file and extend its patch with context.

    Context per side is capped by `budget.max_extra_context_lines`.
    """
    budget = budget or TokenBudget.from_settings()
    patch = file.get("patch")
    original_content = None
    encoding = None

    if patch and file.get("status") not in _NO_ORIGINAL_STATUSES:
        original_content, encoding = fetch_encoded_file_contents(
            repository, file["filename"], merge_base
        )

    extended = extend_patch(
        original_content,
        patch,
        settings.patch_extra_lines_before,
        settings.patch_extra_lines_after,
        file["filename"],
        encoding=encoding,
        max_extra_lines=budget.max_extra_context_lines,
    )

    return FileDiff(
        filename=file["filename"],
        patch=extended,
        original_content=original_content,
        raw_patch=patch,
        status=file.get("status"),
    )


async def get_diff_files(pr: PullRequest, budget: Optional[TokenBudget] = None) -> list[FileDiff]:
    """Fetch changed files with context-extended patches.

    Files are processed in batches of `fetch_batch_size` with a short pause
    between batches. A file whose fetch fails is logged and skipped.
    """
    budget = budget or TokenBudget.from_settings()
    files = fetch_pr_files(pr)
    merge_base = fetch_merge_base(pr)
    repository = pr.base.repo

    diff_files: list[FileDiff] = []
    batches = chunk_list(files, settings.fetch_batch_size)

    for batch_index, batch in enumerate(batches):
        results = await asyncio.gather(
            *(asyncio.to_thread(build_file_diff, repository, merge_base, f, budget) for f in batch),
            return_exceptions=True,
        )

        for file, result in zip(batch, results):
            if isinstance(result, Exception):
                logger.warning(f"Failed to process {file['filename']}: {result}")
                continue
            diff_files.append(result)

        if batch_index < len(batches) - 1:
            await asyncio.sleep(settings.fetch_batch_delay_seconds)

    logger.info(f"Prepared {len(diff_files)}/{len(files)} files for review")
    return diff_files


def submit_review(
    pr: PullRequest,
    body: str,
    comments: list[ResolvedAnnotation],
    event: str = "COMMENT",
) -> int:
    """Submit a review with inline comments to a PR."""
    payload = [
        {"path": c.filename, "line": c.resolved_line, "body": c.body} for c in comments
    ]
    try:
        posted = create_review(pr, body, payload, event)
        logger.info(f"Submitted review with {posted} comments")
        return posted
    except Exception as e:
        logger.error(f"Failed to submit review: {e}")
        raise
