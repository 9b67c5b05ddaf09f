# gw2_market/parallel/messages.py
"""Messages exchanged between the coordinator and fetch workers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

__all__ = ["MessageType", "WorkerMessage"]


class MessageType(str, Enum):
    # Worker -> host
    STATUS = "worker-status"
    DATA = "worker-data"
    # Host -> worker
    FETCH = "host-fetch"
    STOP = "host-stop"


@dataclass(frozen=True)
class WorkerMessage:
    """
    Tagged message passed over worker queues.

    ``data`` depends on ``type``: the endpoint for FETCH, a readiness flag
    for STATUS, the API payload for DATA. ``ok`` is False on DATA messages
    that report a strict-mode fetch failure, with ``data`` holding the error.
    """

    type: MessageType
    data: Any = None
    worker_id: Optional[int] = None
    ok: bool = True

    @classmethod
    def fetch(cls, endpoint: str) -> "WorkerMessage":
        return cls(MessageType.FETCH, endpoint)

    @classmethod
    def stop(cls) -> "WorkerMessage":
        return cls(MessageType.STOP)

    @classmethod
    def status(cls, worker_id: int, ready: bool = True) -> "WorkerMessage":
        return cls(MessageType.STATUS, ready, worker_id)

    @classmethod
    def data_for(cls, worker_id: int, payload: Any) -> "WorkerMessage":
        return cls(MessageType.DATA, payload, worker_id)

    @classmethod
    def failure(cls, worker_id: int, error: str) -> "WorkerMessage":
        return cls(MessageType.DATA, error, worker_id, ok=False)
