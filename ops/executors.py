from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from messaging.errors import DeliveryRejectedError

log = logging.getLogger("ownsms.executor")


class BoundedExecutor:
    """Fixed thread pool with a bounded pending queue.

    At most ``workers + queue_size`` tasks are accepted at once. Submitting
    beyond that raises ``DeliveryRejectedError`` immediately instead of
    blocking or queueing without limit.
    """

    def __init__(self, workers: int, queue_size: int, name: str = "own_sms_sender"):
        self.workers = workers
        self.queue_size = queue_size
        self._pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name)
        self._slots = threading.BoundedSemaphore(workers + queue_size)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        if not self._slots.acquire(blocking=False):
            log.warning(
                "executor_rejected",
                extra={"extra": {"event": "executor_rejected", "workers": self.workers, "queue_size": self.queue_size}},
            )
            raise DeliveryRejectedError(f"worker pool saturated ({self.workers} workers, {self.queue_size} queued)")

        def _run() -> Any:
            try:
                return fn(*args, **kwargs)
            finally:
                self._slots.release()

        try:
            fut = self._pool.submit(_run)
        except BaseException:
            self._slots.release()
            raise
        fut.add_done_callback(self._release_if_cancelled)
        return fut

    def _release_if_cancelled(self, fut: Future) -> None:
        # Cancelled work never runs, so _run cannot release its slot
        if fut.cancelled():
            self._slots.release()

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        self._pool.shutdown(wait=wait, cancel_futures=cancel_futures)


def new_fixed_thread_bounded_queue_executor(workers: int, queue_size: int, name: str = "own_sms_sender") -> BoundedExecutor:
    return BoundedExecutor(workers=workers, queue_size=queue_size, name=name)
