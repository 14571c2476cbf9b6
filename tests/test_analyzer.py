"""Tests for LLM review parsing."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from src.core.exceptions import ReviewParseError
from src.services.reviewer.analyzer import analyze_diff, parse_review_response

REVIEW_JSON = json.dumps(
    {
        "review": {
            "keyIssuesToReview": [
                {
                    "relevantFile": "src/app.py",
                    "issueHeader": "Possible Bug",
                    "issueContent": "Missing None check.",
                    "startLine": 12,
                    "endLine": 14,
                }
            ],
            "securityConcerns": "No",
            "codeSuggestions": [
                {
                    "relevantFile": "src/app.py",
                    "originalCode": "return user.name",
                    "suggestedCode": "return user.name if user else None",
                    "explanation": "Guard against missing users.",
                    "startLine": 12,
                    "endLine": 12,
                }
            ],
        }
    }
)


class TestParseReviewResponse:
    """Tests for parse_review_response function."""

    def test_plain_json(self):
        """Parse a bare JSON object."""
        result = parse_review_response(REVIEW_JSON)

        assert len(result.review.key_issues) == 1
        assert result.review.key_issues[0].issue_header == "Possible Bug"
        assert result.review.code_suggestions[0].start_line == 12
        assert result.review.security_concerns == "No"

    def test_code_fences_and_prose(self):
        """Markdown fences and surrounding text are ignored."""
        text = f"Here is my review:\n```json\n{REVIEW_JSON}\n```\nThanks!"

        result = parse_review_response(text)

        assert result.review.code_suggestions[0].relevant_file == "src/app.py"

    def test_string_line_numbers(self):
        """Line numbers given as strings or ranges are coerced."""
        payload = {
            "review": {
                "codeSuggestions": [
                    {"relevantFile": "a.py", "suggestedCode": "x", "startLine": "8", "endLine": "8-10"}
                ]
            }
        }

        result = parse_review_response(json.dumps(payload))

        assert result.review.code_suggestions[0].start_line == 8
        assert result.review.code_suggestions[0].end_line == 8

    def test_missing_sections_default_empty(self):
        """Absent lists are empty."""
        result = parse_review_response('{"review": {}}')

        assert result.review.key_issues == []
        assert result.review.code_suggestions == []

    @pytest.mark.parametrize(
        "text",
        [
            "I could not review this.",
            '{"summary": "looks good"}',
            '{"review": {"codeSuggestions": [{"relevantFile": "a.py"}]}}',
            '{"review": {"keyIssuesToReview": [{"relevantFile": "a.py", "startLine": "n/a"}]}}',
            "{not json}",
        ],
    )
    def test_invalid_response(self, text):
        """Unusable replies raise ReviewParseError."""
        with pytest.raises(ReviewParseError):
            parse_review_response(text)

    def test_missing_review_message(self):
        """The error names the missing property."""
        with pytest.raises(ReviewParseError) as exc_info:
            parse_review_response('{"summary": "ok"}')

        assert "missing 'review' property" in exc_info.value.message


class TestAnalyzeDiff:
    """Tests for analyze_diff function."""

    @patch("src.services.reviewer.analyzer.get_chat_llm")
    def test_sends_prompt_and_parses(self, mock_get_llm):
        """System prompt and diff go to the model; the reply is parsed."""
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content=REVIEW_JSON))
        mock_get_llm.return_value = llm

        result = asyncio.run(analyze_diff("You are a reviewer.", "File: 'a.py'\n+x"))

        assert result.review.key_issues[0].relevant_file == "src/app.py"
        messages = llm.ainvoke.call_args.args[0]
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == "You are a reviewer."
        assert isinstance(messages[1], HumanMessage)
        assert "File: 'a.py'\n+x" in messages[1].content

    @patch("src.services.reviewer.analyzer.get_chat_llm")
    def test_unparseable_reply_raises(self, mock_get_llm):
        """Parse failures propagate to the caller."""
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content="no json here"))
        mock_get_llm.return_value = llm

        with pytest.raises(ReviewParseError):
            asyncio.run(analyze_diff("system", "diff"))
