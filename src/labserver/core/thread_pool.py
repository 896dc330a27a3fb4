"""
=============================================================================
CONNECTION WORKER POOL
=============================================================================

Each accepted connection is one task; a worker owns it until the client
goes away. A connection that sits idle therefore holds a worker for up to
the first-request timeout, so the pool has to grow with the number of
connections actually waiting, not with the number of busy threads it
happened to observe.

=============================================================================
SIZING RULE
=============================================================================

    idle  = workers blocked in queue.get()
    ready = tasks sitting in the queue

    after every submit() and every dequeue:
        ready > idle  and  workers < max_workers   →  start one more worker

    ┌──────────┐  put   ┌───────────────┐  get   ┌──────────────────────┐
    │ submit() │ ─────► │ queue (bound) │ ─────► │ worker: idle → busy  │
    └──────────┘        └───────────────┘        │   run task           │
         │ full                                  │   busy → idle        │
         ▼                                       └──────────────────────┘
      False → caller answers 503

Workers never retire. The pool only grows, up to max_workers, and stops
when shutdown() feeds one None per worker.

=============================================================================
"""

import logging
import queue
import threading
import time
from typing import Any, Callable, List, Optional, Tuple


logger = logging.getLogger(__name__)


Job = Tuple[Callable[..., Any], tuple]


class ThreadPool:
    """
    Grows from min_workers to max_workers as connections pile up.

    Usage:
        pool = ThreadPool(min_workers=4, max_workers=16, queue_size=100)
        pool.start()
        if not pool.submit(serve, args=(conn,), block=False):
            reject(conn)
        pool.shutdown(timeout=5.0)
    """

    def __init__(self, min_workers: int = 4, max_workers: int = 16, queue_size: int = 100):
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.max_queue_size = queue_size

        self._jobs: "queue.Queue[Optional[Job]]" = queue.Queue(maxsize=queue_size)
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self._idle = 0
        self._running = False

        self.completed = 0
        self.failed = 0

    @property
    def worker_count(self) -> int:
        return len(self._threads)

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            for _ in range(self.min_workers):
                self._spawn_locked()
        logger.info(f"Worker pool started ({self.min_workers}-{self.max_workers} threads)")

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        block: bool = True,
        timeout: Optional[float] = None
    ) -> bool:
        """
        Queue func(*args).

        Returns:
            False if the queue stayed full.

        Raises:
            RuntimeError: The pool is not running.
        """
        if not self._running:
            raise RuntimeError("Thread pool is not running")

        try:
            self._jobs.put((func, args), block=block, timeout=timeout)
        except queue.Full:
            return False

        with self._lock:
            self._grow_locked()
        return True

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Stop every worker.

        Args:
            wait: Let queued jobs drain first.
            timeout: Upper bound on the drain; None waits indefinitely.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False
            threads = list(self._threads)

        if wait:
            self._drain(timeout)

        for _ in threads:
            try:
                self._jobs.put(None, timeout=1.0)
            except queue.Full:
                logger.warning("Job queue still full, not every worker was told to stop")
                break

        for thread in threads:
            thread.join(timeout=2.0)

        self._threads.clear()
        logger.info(f"Worker pool stopped ({self.completed} done, {self.failed} failed)")

    def _drain(self, timeout: Optional[float]) -> None:
        if timeout is None:
            self._jobs.join()
            return

        deadline = time.monotonic() + timeout
        while self._jobs.unfinished_tasks:
            if time.monotonic() > deadline:
                logger.warning("Timed out waiting for open connections")
                return
            time.sleep(0.05)

    def _spawn_locked(self) -> None:
        thread = threading.Thread(
            target=self._work,
            name=f"labserver-worker-{len(self._threads)}",
            daemon=True,
        )
        self._threads.append(thread)
        self._idle += 1
        thread.start()

    def _grow_locked(self) -> None:
        if self._jobs.qsize() > self._idle and len(self._threads) < self.max_workers:
            logger.debug(f"{self._jobs.qsize()} waiting, {self._idle} idle: adding a worker")
            self._spawn_locked()

    def _work(self) -> None:
        while True:
            job = self._jobs.get()

            with self._lock:
                self._idle -= 1
                if job is not None:
                    self._grow_locked()

            if job is None:
                self._jobs.task_done()
                return

            func, args = job
            ok = False
            try:
                func(*args)
                ok = True
            except Exception as e:
                logger.exception(f"Worker job {getattr(func, '__name__', func)} failed: {e}")
            finally:
                with self._lock:
                    self._idle += 1
                    if ok:
                        self.completed += 1
                    else:
                        self.failed += 1
                self._jobs.task_done()
