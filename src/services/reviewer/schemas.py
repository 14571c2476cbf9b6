"""Pydantic schemas for reviewer service."""

from pydantic import BaseModel, Field

from src.config import Settings, settings as default_settings


class FileDiff(BaseModel):
    """One changed file of a pull request."""

    filename: str
    patch: str | None = None
    original_content: str | None = None
    # Patch as listed by GitHub, before context extension
    raw_patch: str | None = None
    status: str | None = None


class TokenBudget(BaseModel):
    """Token ceiling plus the two reserve buffers kept free for the model's answer.

    The soft threshold is the larger reserve and triggers clipping; the hard
    threshold is the smaller one and triggers deferral once a file is in.
    """

    max_tokens: int = 30000
    soft_threshold_tokens: int = 3000
    hard_threshold_tokens: int = 2000
    max_extra_context_lines: int = Field(default=10, ge=0)

    @property
    def soft_limit(self) -> int:
        return self.max_tokens - self.soft_threshold_tokens

    @property
    def hard_limit(self) -> int:
        return self.max_tokens - self.hard_threshold_tokens

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "TokenBudget":
        config = config or default_settings
        return cls(
            max_tokens=config.max_tokens,
            soft_threshold_tokens=config.soft_threshold_tokens,
            hard_threshold_tokens=config.hard_threshold_tokens,
            max_extra_context_lines=config.max_extra_context_lines,
        )


class Annotation(BaseModel):
    """Reviewer comment anchored to a line suggested by the LLM."""

    filename: str
    suggested_start_line: int
    body: str


class ResolvedAnnotation(BaseModel):
    """Reviewer comment anchored to a line that exists in the diff."""

    filename: str
    resolved_line: int
    body: str


class ReviewResult(BaseModel):
    """Result of a PR review."""

    success: bool = True
    pr: str
    files_reviewed: int
    comments: int
    summary: str
