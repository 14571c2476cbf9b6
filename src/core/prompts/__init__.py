"""Prompt templates using Jinja2."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

PROMPTS_DIR = Path(__file__).parent
_env = Environment(loader=FileSystemLoader(PROMPTS_DIR), keep_trailing_newline=False)


def render_review_system_prompt() -> str:
    """Render the system prompt describing the diff format and JSON answer."""
    template = _env.get_template("review_system.jinja2")
    return template.render()


def render_review_user_prompt(patch_diff: str) -> str:
    """Render the user prompt carrying the assembled diff."""
    template = _env.get_template("review_user.jinja2")
    return template.render(patch_diff=patch_diff)


def render_code_suggestion_comment(
    issue_header: str,
    issue_content: str,
    original_code: str,
    suggested_code: str,
) -> str:
    """Render the inline comment body for one code suggestion."""
    template = _env.get_template("code_suggestion_comment.jinja2")
    return template.render(
        issue_header=issue_header,
        issue_content=issue_content,
        original_code=original_code,
        suggested_code=suggested_code,
    )
