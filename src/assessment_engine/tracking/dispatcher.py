"""Background writer that keeps writes for the same key in submission order.

Writes for different keys run concurrently on a shared thread pool; writes
for one key are drained one at a time, FIFO, by a single pool task.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 4

_Job = tuple[Future, Callable[..., Any], tuple[Any, ...]]


class OrderedWriteDispatcher:
    """Per-key FIFO execution on a shared ThreadPoolExecutor."""

    def __init__(self, max_workers: int = _DEFAULT_MAX_WORKERS) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="history-writer"
        )
        self._lock = threading.Lock()
        self._queues: dict[Hashable, deque[_Job]] = {}
        self._outstanding: set[Future] = set()

    def submit(self, key: Hashable, fn: Callable[..., Any], *args: Any) -> Future:
        """Queue ``fn(*args)`` behind any earlier work for *key*."""
        future: Future = Future()
        with self._lock:
            self._outstanding.add(future)
            queue = self._queues.get(key)
            if queue is None:
                # No drainer running for this key; start one
                queue = deque()
                self._queues[key] = queue
                queue.append((future, fn, args))
                self._executor.submit(self._drain, key)
            else:
                queue.append((future, fn, args))
        future.add_done_callback(self._forget)
        return future

    def abandon(self, key: Hashable) -> int:
        """Cancel writes for *key* that have not started. Returns how many were cancelled.

        A write already running is left to finish or fail normally.
        """
        with self._lock:
            queue = self._queues.get(key)
            pending = list(queue) if queue else []
            if queue:
                queue.clear()
        cancelled = sum(1 for future, _, _ in pending if future.cancel())
        if cancelled:
            logger.info("Abandoned %d pending write(s) for %s", cancelled, key)
        return cancelled

    def flush(self, timeout: float | None = None) -> bool:
        """Wait for every outstanding write. Returns False on timeout."""
        with self._lock:
            pending = list(self._outstanding)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        if wait_for_pending:
            self.flush()
        self._executor.shutdown(wait=wait_for_pending)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._outstanding)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _drain(self, key: Hashable) -> None:
        while True:
            with self._lock:
                queue = self._queues.get(key)
                if not queue:
                    self._queues.pop(key, None)
                    return
                future, fn, args = queue.popleft()

            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._outstanding.discard(future)
