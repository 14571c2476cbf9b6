"""Reviewer service - orchestration layer."""

from src.config import settings
from src.core.logging import get_logger
from src.core.prompts import render_review_system_prompt
from src.services.github.service import get_diff_files, get_pull_request, submit_review
from src.services.reviewer.analyzer import analyze_diff
from src.services.reviewer.comments import build_annotations, build_summary
from src.services.reviewer.context_assembler import ContextAssembler
from src.services.reviewer.patch_parser import resolve_annotations
from src.services.reviewer.schemas import ReviewResult, TokenBudget
from src.services.reviewer.tokens import get_token_counter

logger = get_logger("reviewer.service")


async def review_pull_request(
    owner: str,
    repo: str,
    pr_number: int,
) -> dict:
    """Review a complete pull request in a single LLM pass."""
    pr_ref = f"{owner}/{repo}#{pr_number}"
    logger.info(f"Starting review: {pr_ref}")

    pr = get_pull_request(owner, repo, pr_number)
    budget = TokenBudget.from_settings()
    files = await get_diff_files(pr, budget)

    # Filter to reviewable files (those with patches)
    reviewable_files = [f for f in files if f.patch]

    # Files past the cap are still named in the remaining-files notice
    overflow: list[str] = []
    if len(reviewable_files) > settings.max_files_per_review:
        logger.warning(f"Limiting review to {settings.max_files_per_review} files")
        overflow = [f.filename for f in reviewable_files[settings.max_files_per_review :]]
        reviewable_files = reviewable_files[: settings.max_files_per_review]

    if not reviewable_files:
        logger.info("No files with patches to review")
        return ReviewResult(
            pr=pr_ref,
            files_reviewed=0,
            comments=0,
            summary="No reviewable changes found.",
        ).model_dump()

    system_prompt = render_review_system_prompt()
    token_counter = get_token_counter()
    assembler = ContextAssembler(token_counter, budget)
    patch_diff = assembler.assemble(
        reviewable_files,
        prompt_tokens=token_counter.count(system_prompt),
        overflow=overflow,
    )

    review = await analyze_diff(system_prompt, patch_diff)
    annotations = build_annotations(review)

    # Resolve against the patches as GitHub lists them
    patches = {f.filename: f.raw_patch for f in reviewable_files}
    resolved = resolve_annotations(annotations, patches)
    summary = build_summary(review, len(reviewable_files))

    # Submit review to GitHub
    try:
        submit_review(pr, summary, resolved)
        logger.info(f"Review submitted with {len(resolved)} inline comments")
    except Exception as e:
        logger.error(f"Failed to submit review: {e}")

    return ReviewResult(
        pr=pr_ref,
        files_reviewed=len(reviewable_files),
        comments=len(resolved),
        summary=summary,
    ).model_dump()
