"""Token estimation for budgeting diff context."""

import math
from typing import Optional, Protocol

import tiktoken

from src.config import settings
from src.core.exceptions import ConfigurationError
from src.core.logging import get_logger

logger = get_logger("reviewer.tokens")


class TokenCounter(Protocol):
    """Anything that turns text into an approximate token count."""

    def count(self, text: str) -> int: ...


class CharTokenCounter:
    """Character-based estimate: one token per `chars_per_token` characters, rounded up."""

    def __init__(self, chars_per_token: int = 4) -> None:
        if chars_per_token < 1:
            raise ValueError(f"chars_per_token must be positive, got {chars_per_token}")
        self.chars_per_token = chars_per_token

    def count(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)


class TiktokenTokenCounter:
    """BPE token count using a tiktoken encoding."""

    def __init__(self, encoding_name: str = "cl100k_base") -> None:
        self.encoding_name = encoding_name
        self._encoding = tiktoken.get_encoding(encoding_name)

    def count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._encoding.encode(text, disallowed_special=()))


def get_token_counter(name: Optional[str] = None) -> TokenCounter:
    """Build the token counter selected by name, or by settings when omitted."""
    name = (name or settings.token_estimator).lower()

    if name == "chars":
        return CharTokenCounter()
    if name == "tiktoken":
        logger.debug(f"Using tiktoken encoding {settings.tiktoken_encoding}")
        return TiktokenTokenCounter(settings.tiktoken_encoding)

    raise ConfigurationError("TOKEN_ESTIMATOR", f"has unsupported value '{name}'")
