# gw2_market/dump/coordinator.py
"""Distribute item chunks across fetch workers and collect the results."""
from __future__ import annotations

import logging
import multiprocessing as mp
import queue
import threading
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from gw2_market.config import ApiConfig, DumpConfig
from gw2_market.dump.progress import ProgressLine, format_duration
from gw2_market.dump.worker import fetch_worker
from gw2_market.io.api import FetchError, items_endpoint
from gw2_market.logger import current_log_file
from gw2_market.parallel.atomics import AtomicCounter, AtomicUIntArray
from gw2_market.parallel.chunking import chunk_ids
from gw2_market.parallel.messages import MessageType, WorkerMessage

logger = logging.getLogger(__name__)

__all__ = ["CoordinatorState", "FetchCoordinator"]


class CoordinatorState(str, Enum):
    PREPARING = "preparing"
    WAITING_FOR_WORKERS = "waiting_for_workers"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    DONE = "done"


class FetchCoordinator:
    """
    Host side of the parallel item fetch.

    Ids are split into chunks; each worker is handed one chunk at a time and
    receives the next unclaimed chunk as soon as it replies, so faster
    workers naturally take more chunks. Claims go through a shared atomic
    counter, which guarantees every chunk index is handed out exactly once.

    A worker is marked done in the Done vector only when no chunk is left
    and it has no request in flight; the run finishes when every worker is
    done. Failed fetches come back as empty chunks and are counted, not
    retried. A worker that never answers stalls the run.

    Args:
        ids: Item ids to fetch
        api_config: API connection settings passed to every worker
        config: Dump settings (chunk size, pool size, polling, strictness)
        ctx: Multiprocessing context (default: spawn)
        show_progress: Render the live progress line
    """

    def __init__(
            self,
            ids: Sequence[int],
            api_config: ApiConfig,
            config: DumpConfig,
            *,
            ctx: Optional[mp.context.BaseContext] = None,
            show_progress: bool = True,
    ):
        self.ids = list(ids)
        self.api_config = api_config
        self.config = config
        self.ctx = ctx or mp.get_context("spawn")
        self.show_progress = show_progress

        self.state = CoordinatorState.PREPARING
        self.chunks: List[List[int]] = []
        self.num_workers = 0

        # Result accumulator: sequence index -> chunk payload
        self.results: Dict[int, Any] = {}
        self.result_chunks: Dict[int, int] = {}
        self.claimed_chunks: List[int] = []
        self.empty_chunks = 0
        self.elapsed_s = 0.0

        self._in_flight: Dict[int, Optional[int]] = {}
        self._workers: list = []
        self._inboxes: list = []
        self._outbox = None

    # -- state ---------------------------------------------------------------

    def _set_state(self, state: CoordinatorState) -> None:
        logger.debug("Coordinator: %s -> %s", self.state.value, state.value)
        self.state = state

    @property
    def num_chunks(self) -> int:
        return len(self.chunks)

    def all_workers_ready(self) -> bool:
        return self.ready.sum() >= self.num_workers

    def all_workers_done(self) -> bool:
        return self.done.sum() >= self.num_workers

    # -- run -----------------------------------------------------------------

    def run(self) -> Dict[int, Any]:
        """
        Fetch every chunk and return the result accumulator.

        Raises:
            FetchError: In strict mode, when a worker reports a failed chunk
            RuntimeError: If a worker process dies before becoming ready
        """
        self._prepare()
        if not self.chunks:
            logger.info("No item ids to fetch")
            self._set_state(CoordinatorState.DONE)
            return self.results

        self._start_workers()
        try:
            self._wait_for_workers()
            self._dispatch_initial()
            self._drain()
        finally:
            self._shutdown()

        return self.results

    def _prepare(self) -> None:
        self.chunks = chunk_ids(self.ids, self.config.chunk_size)
        # Never more workers than chunks
        self.num_workers = min(self.config.max_workers, len(self.chunks))

        self.chunk_index = AtomicCounter(self.ctx)
        self.results_index = AtomicCounter(self.ctx)
        slots = max(1, self.num_workers)
        self.ready = AtomicUIntArray(slots, self.ctx)
        self.done = AtomicUIntArray(slots, self.ctx)

        logger.info(
            "Prepared %d ids in %d chunks of up to %d for %d workers",
            len(self.ids), len(self.chunks), self.config.chunk_size, self.num_workers,
        )

    def _start_workers(self) -> None:
        use_threads = self.config.use_threads
        log_file = None if use_threads else current_log_file()

        self._outbox = self.ctx.Queue()
        for worker_id in range(self.num_workers):
            inbox = self.ctx.Queue()
            args = (worker_id, self.api_config, inbox, self._outbox, self.ready)
            kwargs = dict(
                strict=self.config.strict,
                backoff_s=self.config.backoff_s,
                timeout=self.config.request_timeout_s,
                log_file=log_file,
                set_title=not use_threads,
            )
            name = f"fetch-worker-{worker_id:0{len(str(self.num_workers))}d}"

            if use_threads:
                worker = threading.Thread(target=fetch_worker, args=args, kwargs=kwargs, name=name, daemon=True)
            else:
                worker = self.ctx.Process(target=fetch_worker, args=args, kwargs=kwargs, name=name, daemon=True)

            worker.start()
            self._workers.append(worker)
            self._inboxes.append(inbox)
            self._in_flight[worker_id] = None

        logger.info(
            "Started %d fetch workers (%s)", self.num_workers, "threads" if use_threads else "processes"
        )

    def _wait_for_workers(self) -> None:
        self._set_state(CoordinatorState.WAITING_FOR_WORKERS)
        print(f"Waiting for workers to be ready... (0/{self.num_workers})", flush=True)

        while not self.all_workers_ready():
            for worker_id, worker in enumerate(self._workers):
                if not worker.is_alive() and not self.ready.get(worker_id):
                    raise RuntimeError(f"Worker {worker_id} exited before becoming ready")
            self._pump_messages()

        print(f"Workers ready ({self.num_workers}/{self.num_workers})", flush=True)
        logger.info("All %d workers ready", self.num_workers)

    def _dispatch_initial(self) -> None:
        self._set_state(CoordinatorState.DISPATCHING)
        for worker_id in range(self.num_workers):
            self._dispatch_next(worker_id)

    def _drain(self) -> None:
        self._set_state(CoordinatorState.DRAINING)
        progress = ProgressLine(
            self.num_chunks,
            eta_interval_s=self.config.eta_interval_s,
            disable=not self.show_progress,
        )

        try:
            while not self.all_workers_done():
                self._pump_messages()
                progress.update(self.chunk_index.value)
        finally:
            self.elapsed_s = progress.elapsed
            progress.finish(f"Fetched item pages in {format_duration(self.elapsed_s)}")

        logger.info(
            "Fetched %d chunks in %.2fs (%d empty)", len(self.results), self.elapsed_s, self.empty_chunks
        )

    def _shutdown(self) -> None:
        self._set_state(CoordinatorState.DONE)

        for inbox in self._inboxes:
            inbox.put(WorkerMessage.stop())

        for worker in self._workers:
            worker.join(self.config.join_timeout_s)
            if worker.is_alive():
                if isinstance(worker, threading.Thread):
                    logger.warning("Worker %s did not stop; abandoning daemon thread", worker.name)
                else:
                    logger.warning("Worker %s did not stop; terminating", worker.name)
                    worker.terminate()
                    worker.join()

        for q in (*self._inboxes, self._outbox):
            if q is not None:
                q.close()

        logger.info("Workers shut down")

    # -- dispatch ------------------------------------------------------------

    def _claim_next_chunk(self) -> Optional[int]:
        """Claim the next unclaimed chunk index, or None when all are taken."""
        if self.chunk_index.value >= self.num_chunks:
            return None
        claim = self.chunk_index.increment() - 1
        if claim >= self.num_chunks:
            return None
        self.claimed_chunks.append(claim)
        return claim

    def _dispatch_next(self, worker_id: int) -> None:
        if self._in_flight[worker_id] is not None:
            raise RuntimeError(f"Worker {worker_id} already has chunk {self._in_flight[worker_id]} in flight")

        claim = self._claim_next_chunk()
        if claim is None:
            self.done.set(worker_id, 1)
            logger.info("Worker %d done", worker_id)
            return

        self._in_flight[worker_id] = claim
        self._inboxes[worker_id].put(WorkerMessage.fetch(items_endpoint(self.chunks[claim])))

    # -- messages ------------------------------------------------------------

    def _pump_messages(self) -> None:
        """Wait up to one poll interval for replies, then handle all queued ones."""
        try:
            message = self._outbox.get(timeout=self.config.poll_interval_s)
        except queue.Empty:
            return

        while True:
            self._handle_message(message)
            try:
                message = self._outbox.get_nowait()
            except queue.Empty:
                return

    def _handle_message(self, message: WorkerMessage) -> None:
        worker_id = message.worker_id

        if message.type is MessageType.STATUS:
            logger.debug("Worker %s status: ready=%s", worker_id, message.data)
            return

        if message.type is not MessageType.DATA:
            logger.warning("Unknown message from worker %s: %r", worker_id, message)
            return

        chunk = self._in_flight.get(worker_id)
        self._in_flight[worker_id] = None

        if not message.ok:
            raise FetchError(f"Worker {worker_id} failed chunk {chunk}: {message.data}")

        index = self.results_index.increment()
        self.results[index] = message.data
        if chunk is not None:
            self.result_chunks[index] = chunk

        if not message.data:
            self.empty_chunks += 1
            logger.warning("Chunk %s from worker %s returned no items", chunk, worker_id)

        self._dispatch_next(worker_id)
