"""Tests for batching helpers."""

import pytest

from src.core.batching import chunk_list


class TestChunkList:
    """Tests for chunk_list function."""

    def test_last_batch_is_shorter(self):
        """Leftover items form a final short batch."""
        assert chunk_list([1, 2, 3, 4, 5, 6, 7], 3) == [[1, 2, 3], [4, 5, 6], [7]]

    def test_exact_multiple(self):
        """No empty trailing batch."""
        assert chunk_list(["a", "b", "c", "d"], 2) == [["a", "b"], ["c", "d"]]

    def test_empty(self):
        """Empty input gives no batches."""
        assert chunk_list([], 5) == []

    def test_default_size(self):
        """Batches of three by default."""
        assert chunk_list(list(range(4))) == [[0, 1, 2], [3]]

    def test_invalid_size(self):
        """Size must be positive."""
        with pytest.raises(ValueError):
            chunk_list([1], 0)
