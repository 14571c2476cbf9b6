"""Custom exceptions for the application."""


class ReviewerError(Exception):
    """Base exception for all reviewer errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ReviewerError):
    """Missing or invalid configuration."""

    def __init__(self, setting: str, message: str = "not configured") -> None:
        super().__init__(f"{setting} {message}", {"setting": setting})


class PatchDecodeError(ReviewerError):
    """Original file content could not be decoded."""

    def __init__(self, encoding: str, reason: str) -> None:
        super().__init__(f"Could not decode {encoding} content: {reason}", {"encoding": encoding})


class ReviewParseError(ReviewerError):
    """LLM response could not be parsed into a review."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message, {"raw_text": raw_text[:200]})


class ExternalServiceError(ReviewerError):
    """External service (GitHub, LLM gateway) error."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service} error: {message}", {"service": service})


class PRNotFoundError(ReviewerError):
    """Pull request not found."""

    def __init__(self, owner: str, repo: str, pr_number: int) -> None:
        super().__init__(f"Pull request not found: {owner}/{repo}#{pr_number}")
