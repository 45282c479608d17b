"""Background task utilities."""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, TypeVar


T = TypeVar("T")


class DeferredRunner:
    """Run callables one at a time on a worker thread after a fixed delay.

    The delay only gives callers a window to report a pending state.
    """

    def __init__(self, delay: float = 0.0, *, name: str = "deferred") -> None:
        self.delay = max(float(delay), 0.0)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def _delayed(self, func: Callable[[], T]) -> T:
        if self.delay:
            time.sleep(self.delay)
        return func()

    def submit(self, func: Callable[[], T]) -> "Future[T]":
        return self._executor.submit(self._delayed, func)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


__all__ = ["DeferredRunner"]
