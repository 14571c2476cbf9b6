"""Batching helpers."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def chunk_list(items: Sequence[T], size: int = 3) -> list[list[T]]:
    """Split items into consecutive batches of at most `size` elements."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
