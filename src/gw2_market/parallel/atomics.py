# gw2_market/parallel/atomics.py
"""Shared-memory counters usable from worker processes and threads."""
from __future__ import annotations

import multiprocessing as mp
from typing import List, Optional

__all__ = ["AtomicUIntArray", "AtomicCounter"]


class AtomicUIntArray:
    """
    Fixed-size array of unsigned 64-bit integers in shared memory.

    Every mutation holds the array's lock, so concurrent increments from
    several processes never lose updates. ``sum()`` reads slots one by one
    and is not a global snapshot; callers poll it until it settles.

    Instances are passed to child processes as ``Process`` arguments.
    """

    def __init__(self, size: int, ctx: Optional[mp.context.BaseContext] = None):
        if size < 1:
            raise ValueError(f"size must be positive, got {size}")
        ctx = ctx or mp.get_context("spawn")
        self._array = ctx.Array("Q", size)  # zero-initialized, lock=True

    def __len__(self) -> int:
        return len(self._array)

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self._array):
            raise IndexError(f"index {index} out of range for size {len(self._array)}")

    def get(self, index: int) -> int:
        self._check(index)
        with self._array.get_lock():
            return self._array[index]

    def set(self, index: int, value: int) -> None:
        self._check(index)
        if value < 0:
            raise ValueError(f"value must be non-negative, got {value}")
        with self._array.get_lock():
            self._array[index] = value

    def increment(self, index: int, delta: int = 1) -> int:
        """Add ``delta`` to a slot and return the new value."""
        self._check(index)
        with self._array.get_lock():
            self._array[index] += delta
            return self._array[index]

    def sum(self) -> int:
        return sum(self._array[i] for i in range(len(self._array)))

    def values(self) -> List[int]:
        with self._array.get_lock():
            return list(self._array)


class AtomicCounter:
    """Single shared counter; an AtomicUIntArray of size one."""

    def __init__(self, ctx: Optional[mp.context.BaseContext] = None):
        self._slots = AtomicUIntArray(1, ctx)

    @property
    def value(self) -> int:
        return self._slots.get(0)

    def increment(self) -> int:
        return self._slots.increment(0)
