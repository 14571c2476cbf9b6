"""Tests for token estimation."""

from unittest.mock import MagicMock, patch

import pytest

from src.core.exceptions import ConfigurationError
from src.services.reviewer.tokens import (
    CharTokenCounter,
    TiktokenTokenCounter,
    get_token_counter,
)


class TestCharTokenCounter:
    """Tests for the character-based estimator."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hello", 2),
            ("Hello world", 3),
            ("", 0),
            ("a" * 100, 25),
        ],
    )
    def test_counts_rounded_up(self, text, expected):
        """Four characters per token, rounded up."""
        assert CharTokenCounter().count(text) == expected

    def test_monotonic_in_length(self):
        """Longer text never counts fewer tokens."""
        counter = CharTokenCounter()
        counts = [counter.count("x" * n) for n in range(50)]

        assert counts == sorted(counts)

    def test_custom_ratio(self):
        """One character per token counts characters."""
        assert CharTokenCounter(chars_per_token=1).count("abcdef") == 6

    def test_rejects_non_positive_ratio(self):
        """A zero ratio is a programming error."""
        with pytest.raises(ValueError):
            CharTokenCounter(chars_per_token=0)


class TestTiktokenTokenCounter:
    """Tests for the tiktoken-backed estimator."""

    @patch("src.services.reviewer.tokens.tiktoken")
    def test_counts_encoded_tokens(self, mock_tiktoken):
        """Count is the length of the encoding."""
        encoding = MagicMock()
        encoding.encode.return_value = [101, 102, 103]
        mock_tiktoken.get_encoding.return_value = encoding

        counter = TiktokenTokenCounter("cl100k_base")

        assert counter.count("some text") == 3
        mock_tiktoken.get_encoding.assert_called_once_with("cl100k_base")

    @patch("src.services.reviewer.tokens.tiktoken")
    def test_empty_text_skips_encoding(self, mock_tiktoken):
        """Empty string is zero tokens without calling the encoder."""
        encoding = MagicMock()
        mock_tiktoken.get_encoding.return_value = encoding

        assert TiktokenTokenCounter().count("") == 0
        encoding.encode.assert_not_called()


class TestGetTokenCounter:
    """Tests for estimator selection."""

    def test_chars(self):
        """'chars' selects the character estimator."""
        assert isinstance(get_token_counter("chars"), CharTokenCounter)

    @patch("src.services.reviewer.tokens.tiktoken")
    def test_tiktoken(self, mock_tiktoken):
        """'tiktoken' selects the BPE estimator."""
        assert isinstance(get_token_counter("TikToken"), TiktokenTokenCounter)

    @patch("src.services.reviewer.tokens.settings")
    def test_defaults_to_settings(self, mock_settings):
        """Without a name the configured estimator is used."""
        mock_settings.token_estimator = "chars"

        assert isinstance(get_token_counter(), CharTokenCounter)

    def test_unknown_name(self):
        """Unsupported estimator names are a configuration error."""
        with pytest.raises(ConfigurationError):
            get_token_counter("words")
