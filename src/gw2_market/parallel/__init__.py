"""Work partitioning, shared counters, and worker messages."""

from .atomics import AtomicCounter, AtomicUIntArray
from .chunking import chunk_ids, num_chunks
from .messages import MessageType, WorkerMessage

__all__ = [
    "AtomicCounter",
    "AtomicUIntArray",
    "chunk_ids",
    "num_chunks",
    "MessageType",
    "WorkerMessage",
]
