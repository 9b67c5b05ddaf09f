# gw2_market/parallel/chunking.py
"""Split id lists into request-sized chunks."""
from __future__ import annotations

from typing import List, Sequence, TypeVar

__all__ = ["chunk_ids", "num_chunks"]

T = TypeVar("T")


def num_chunks(total: int, chunk_size: int) -> int:
    """Number of chunks ``total`` items produce (ceiling division)."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return -(-total // chunk_size)


def chunk_ids(ids: Sequence[T], chunk_size: int) -> List[List[T]]:
    """
    Partition ``ids`` into ordered chunks of at most ``chunk_size`` items.

    Chunks cover the input exactly once in original order; only the last
    chunk may be shorter.

    Raises:
        ValueError: If chunk_size is not positive
    """
    count = num_chunks(len(ids), chunk_size)
    return [list(ids[i * chunk_size:(i + 1) * chunk_size]) for i in range(count)]
