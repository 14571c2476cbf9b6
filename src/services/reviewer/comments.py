"""Turn the LLM's review into file annotations."""

from src.core.prompts import render_code_suggestion_comment
from src.schemas.review import KeyIssue, ReviewResponse
from src.services.reviewer.schemas import Annotation


def build_annotations(response: ReviewResponse) -> list[Annotation]:
    """One annotation per code suggestion.

    A key issue reported for the same file and start line supplies the
    comment title and text; otherwise the suggestion's explanation is used.
    """
    key_issues: dict[tuple[str, int], KeyIssue] = {
        (issue.relevant_file, issue.start_line): issue for issue in response.review.key_issues
    }

    annotations = []
    for suggestion in response.review.code_suggestions:
        issue = key_issues.get((suggestion.relevant_file, suggestion.start_line))
        header = issue.issue_header if issue else "Code Suggestion"
        content = issue.issue_content if issue else suggestion.explanation

        body = render_code_suggestion_comment(
            issue_header=header,
            issue_content=content,
            original_code=suggestion.original_code,
            suggested_code=suggestion.suggested_code,
        )
        annotations.append(
            Annotation(
                filename=suggestion.relevant_file,
                suggested_start_line=suggestion.start_line,
                body=body,
            )
        )

    return annotations


def build_summary(response: ReviewResponse, files_reviewed: int) -> str:
    """Review body posted alongside the inline comments."""
    review = response.review
    lines = [
        f"Reviewed {files_reviewed} files: "
        f"{len(review.key_issues)} key issues, {len(review.code_suggestions)} suggestions."
    ]
    if review.security_concerns and review.security_concerns.strip().lower() != "no":
        lines.append(f"**Security concerns:** {review.security_concerns.strip()}")
    return "\n\n".join(lines)
