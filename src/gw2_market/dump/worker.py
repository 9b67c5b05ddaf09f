# gw2_market/dump/worker.py
"""Fetch worker: answers FETCH requests from the coordinator."""
from __future__ import annotations

from typing import Optional

from setproctitle import setproctitle

from gw2_market.config import ApiConfig
from gw2_market.io.api import FetchError, Gw2Api
from gw2_market.logger import configure_worker_logging
from gw2_market.parallel.atomics import AtomicUIntArray
from gw2_market.parallel.messages import MessageType, WorkerMessage

__all__ = ["fetch_worker"]


def fetch_worker(
        worker_id: int,
        api_config: ApiConfig,
        inbox,
        outbox,
        ready: AtomicUIntArray,
        *,
        strict: bool = False,
        backoff_s: float = 1.0,
        timeout: float = 30.0,
        log_file: Optional[str] = None,
        set_title: bool = True,
) -> None:
    """
    Serve fetch requests until told to stop.

    The worker marks its readiness slot and announces itself, then handles
    one message at a time: FETCH calls the API and replies with DATA, STOP
    ends the loop. Nothing is kept between requests.

    Args:
        worker_id: Ordinal of this worker (0-based)
        api_config: API connection settings
        inbox: Queue of WorkerMessage from the coordinator
        outbox: Queue shared by all workers for replies
        ready: Readiness vector; slot ``worker_id`` is set to 1 on startup
        strict: Report failed fetches instead of returning an empty chunk
        backoff_s: Sleep between rate-limited retries
        timeout: Per-request timeout in seconds
        log_file: Log file to attach in a spawned process
        set_title: Rename the process (off for thread workers)
    """
    worker_logger = configure_worker_logging(log_file, worker_id)

    if set_title:
        setproctitle(f"gw2:fetch-worker-{worker_id}")

    with Gw2Api(api_config, strict=strict, backoff_s=backoff_s, timeout=timeout) as api:
        ready.set(worker_id, 1)
        outbox.put(WorkerMessage.status(worker_id, True))
        worker_logger.info("Worker %s ready", worker_id)

        while True:
            message: WorkerMessage = inbox.get()

            if message.type is MessageType.STOP:
                worker_logger.info("Worker %s stopping", worker_id)
                break

            if message.type is not MessageType.FETCH:
                worker_logger.warning("Worker %s: unknown message %r", worker_id, message)
                continue

            try:
                payload = api.get(message.data, [])
            except FetchError as exc:
                outbox.put(WorkerMessage.failure(worker_id, str(exc)))
                continue

            outbox.put(WorkerMessage.data_for(worker_id, payload))
