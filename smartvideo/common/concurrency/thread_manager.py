from __future__ import annotations

import logging
import os
import time
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")

log = logging.getLogger(__name__)


@dataclass
class ThreadStats:
    start_ts: float
    tasks_submitted: int = 0
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_cancelled: int = 0

    @property
    def uptime_sec(self) -> float:
        return time.time() - self.start_ts

    @property
    def in_flight(self) -> int:
        done = self.tasks_completed + self.tasks_failed + self.tasks_cancelled
        return max(0, self.tasks_submitted - done)


class ThreadManager(Generic[T, R]):
    """
    A reusable, bounded thread-pool manager focused on I/O-bound workloads
    (ffprobe subprocesses, remote loads).

    Features
    --------
    - submit(fn, *args, **kwargs) -> Future
    - map(fn, iterable) -> List[R] in input order; the first input-order
      failure is the one raised
    - Bounded outstanding tasks via a semaphore (max_queue)
    - Stop event accessible by tasks for cooperative cancellation
    - Stats snapshot
    - Clean shutdown, context manager support
    """

    def __init__(
        self,
        name: str = "worker",
        max_workers: Optional[int] = None,
        max_queue: Optional[int] = None,
        thread_name_prefix: Optional[str] = None,
        log_exceptions: bool = True,
    ) -> None:
        """
        Parameters
        ----------
        name:
            Logical name for logging.
        max_workers:
            Max threads in the pool. Default: auto for I/O (~min(8, max(4, 2*CPUs))).
        max_queue:
            Max number of *outstanding* tasks (submitted but not finished).
            If None or <= 0, it's effectively unbounded.
        thread_name_prefix:
            Prefix for thread names.
        log_exceptions:
            If True, exceptions in tasks are logged when futures complete.
        """
        if max_workers is None:
            n = os.cpu_count() or 4
            max_workers = max(4, min(8, n * 2))

        self._name = name
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix or f"{name}",
        )
        self._stop = threading.Event()
        self._stats = ThreadStats(start_ts=time.time())
        self._log_exceptions = log_exceptions

        if not max_queue or max_queue <= 0:
            self._slots = None
        else:
            self._slots = threading.Semaphore(max_queue)

        self._closed = False
        self._lock = threading.Lock()

    # -------------------------
    # Lifecycle
    # -------------------------
    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """Shut down the executor. Safe to call multiple times."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._stop.set()
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)

    def __enter__(self) -> "ThreadManager[T, R]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_futures=True)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def max_workers(self) -> int:
        return self._max_workers

    @property
    def stop_event(self) -> threading.Event:
        """A cooperative stop flag tasks check between units of work."""
        return self._stop

    def stats(self) -> ThreadStats:
        """Return a *snapshot* of current stats."""
        with self._lock:
            return ThreadStats(
                start_ts=self._stats.start_ts,
                tasks_submitted=self._stats.tasks_submitted,
                tasks_completed=self._stats.tasks_completed,
                tasks_failed=self._stats.tasks_failed,
                tasks_cancelled=self._stats.tasks_cancelled,
            )

    # -------------------------
    # Submission
    # -------------------------
    def submit(self, fn: Callable[..., R], /, *args, **kwargs) -> Future[R]:
        """
        Submit a single callable. Applies queue bounding and exception logging.
        Returns a Future that will hold the result or exception.
        """
        if self._closed:
            raise RuntimeError(f"{self._name}: submit() after shutdown")

        if self._slots is not None:
            self._slots.acquire()

        def _wrapped(*a, **kw) -> R:
            try:
                return fn(*a, **kw)
            finally:
                if self._slots is not None:
                    self._slots.release()

        with self._lock:
            self._stats.tasks_submitted += 1

        try:
            fut: Future[R] = self._executor.submit(_wrapped, *args, **kwargs)
        except RuntimeError:
            # executor shut down between the closed check and submit
            if self._slots is not None:
                self._slots.release()
            with self._lock:
                self._stats.tasks_cancelled += 1
            raise

        def _cb(f: Future[R]) -> None:
            if f.cancelled():
                # never ran, so the slot taken above is still held
                if self._slots is not None:
                    self._slots.release()
                with self._lock:
                    self._stats.tasks_cancelled += 1
                return
            exc = f.exception()
            with self._lock:
                if exc is None:
                    self._stats.tasks_completed += 1
                else:
                    self._stats.tasks_failed += 1
            if exc is not None and self._log_exceptions:
                log.error("%s task failed: %s", self._name, exc, exc_info=exc)

        fut.add_done_callback(_cb)
        return fut

    # -------------------------
    # Bulk helpers
    # -------------------------
    def map(self, fn: Callable[[T], R], iterable: Iterable[T]) -> List[R]:
        """
        Submit every item, then collect results in input order.
        The first failing item *in input order* raises; futures still queued
        behind it are cancelled.
        """
        futures_list = [self.submit(fn, item) for item in iterable]
        results: List[R] = []
        try:
            for f in futures_list:
                results.append(f.result())
        except (Exception, CancelledError):
            for f in futures_list:
                f.cancel()
            raise
        return results
