"""Chunking utilities for batch write operations."""

from __future__ import annotations

from typing import Sequence, TypeVar

from ddb_batch.models.items import MAX_BATCH_SIZE

T = TypeVar("T")


def partition(items: Sequence[T], max_size: int = MAX_BATCH_SIZE) -> list[list[T]]:
    """Split a sequence into contiguous chunks of at most ``max_size`` items.

    Args:
        items: The sequence to split. Order is preserved.
        max_size: Maximum items per chunk (BatchWriteItem accepts 25).

    Returns:
        A list of sub-lists covering ``items`` exactly; the last may be shorter.

    Raises:
        ValueError: If ``max_size`` is not positive.
    """
    if max_size < 1:
        raise ValueError(f"max_size must be a positive integer, got {max_size}")
    return [list(items[i : i + max_size]) for i in range(0, len(items), max_size)]
