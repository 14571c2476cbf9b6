"""Review-related schemas for the LLM's JSON answer."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FIRST_INT = re.compile(r"-?\d+")


def coerce_line_number(value):
    """Accept 12, "12" or "12-14" as line 12."""
    if isinstance(value, str):
        match = _FIRST_INT.search(value)
        if not match:
            raise ValueError(f"no line number in {value!r}")
        return int(match.group())
    return value


class KeyIssue(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    relevant_file: str = Field(alias="relevantFile")
    issue_header: str = Field(default="Possible Issue", alias="issueHeader")
    issue_content: str = Field(default="", alias="issueContent")
    start_line: int = Field(alias="startLine")
    end_line: int | None = Field(default=None, alias="endLine")

    @field_validator("start_line", "end_line", mode="before")
    @classmethod
    def parse_line(cls, value):
        return coerce_line_number(value)


class CodeSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    relevant_file: str = Field(alias="relevantFile")
    suggested_code: str = Field(default="", alias="suggestedCode")
    original_code: str = Field(default="", alias="originalCode")
    explanation: str = ""
    start_line: int = Field(alias="startLine")
    end_line: int | None = Field(default=None, alias="endLine")

    @field_validator("start_line", "end_line", mode="before")
    @classmethod
    def parse_line(cls, value):
        return coerce_line_number(value)


class ReviewBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key_issues: list[KeyIssue] = Field(default_factory=list, alias="keyIssuesToReview")
    code_suggestions: list[CodeSuggestion] = Field(default_factory=list, alias="codeSuggestions")
    security_concerns: str | None = Field(default=None, alias="securityConcerns")


class ReviewResponse(BaseModel):
    review: ReviewBody
