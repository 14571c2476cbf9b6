"""Tests for building review comments from the LLM answer."""

from src.schemas.review import ReviewResponse
from src.services.reviewer.comments import build_annotations, build_summary


def make_response(**review) -> ReviewResponse:
    return ReviewResponse.model_validate({"review": review})


class TestBuildAnnotations:
    """Tests for build_annotations function."""

    def test_matching_key_issue_supplies_title(self):
        """A key issue on the same file and line titles the comment."""
        response = make_response(
            keyIssuesToReview=[
                {
                    "relevantFile": "app.py",
                    "issueHeader": "Possible Bug",
                    "issueContent": "Index may be out of range.",
                    "startLine": 10,
                    "endLine": 10,
                }
            ],
            codeSuggestions=[
                {
                    "relevantFile": "app.py",
                    "originalCode": "items[i]",
                    "suggestedCode": "items[i] if i < len(items) else None",
                    "explanation": "Guard the index.",
                    "startLine": 10,
                    "endLine": 10,
                }
            ],
        )

        annotations = build_annotations(response)

        assert len(annotations) == 1
        assert annotations[0].filename == "app.py"
        assert annotations[0].suggested_start_line == 10
        assert annotations[0].body.startswith("**Possible Bug**")
        assert "Index may be out of range." in annotations[0].body
        assert "- items[i]" in annotations[0].body
        assert "+ items[i] if i < len(items) else None" in annotations[0].body
        assert "Guard the index." not in annotations[0].body

    def test_unmatched_suggestion_uses_explanation(self):
        """Without a key issue the explanation is the comment text."""
        response = make_response(
            codeSuggestions=[
                {
                    "relevantFile": "util.py",
                    "suggestedCode": "return None",
                    "explanation": "Return explicitly.",
                    "startLine": "7-9",
                }
            ],
        )

        annotations = build_annotations(response)

        assert annotations[0].suggested_start_line == 7
        assert annotations[0].body.startswith("**Code Suggestion**")
        assert "Return explicitly." in annotations[0].body
        assert "Current code" not in annotations[0].body

    def test_key_issues_alone_produce_no_annotations(self):
        """Only code suggestions become inline comments."""
        response = make_response(
            keyIssuesToReview=[{"relevantFile": "a.py", "startLine": 1}],
        )

        assert build_annotations(response) == []


class TestBuildSummary:
    """Tests for build_summary function."""

    def test_counts(self):
        """Summary reports files, issues and suggestions."""
        response = make_response(
            keyIssuesToReview=[{"relevantFile": "a.py", "startLine": 1}],
            securityConcerns="No",
        )

        assert build_summary(response, 3) == "Reviewed 3 files: 1 key issues, 0 suggestions."

    def test_security_concerns_included(self):
        """Reported security concerns get their own paragraph."""
        response = make_response(securityConcerns="SQL built from user input.")

        summary = build_summary(response, 1)

        assert summary.endswith("\n\n**Security concerns:** SQL built from user input.")
