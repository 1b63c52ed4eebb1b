"""
Background task scheduler for django-solo-blog.

Two kinds of work run off the request path:

- fire-and-forget tasks (view-count increments), via submit()
- one-shot delayed tasks (recovery-token expiry), via schedule()

Neither reports back to the caller. A failing task is logged and dropped.
Delayed tasks cannot be cancelled once scheduled; shutdown() only discards
timers that have not fired yet, for process exit.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from django.db import close_old_connections

logger = logging.getLogger(__name__)


def task_name(func) -> str:
    return getattr(func, "__qualname__", repr(func))


def run_task(func, *args, **kwargs) -> None:
    """Run func, logging instead of raising on failure."""
    try:
        func(*args, **kwargs)
    except Exception:
        logger.exception("Background task %s failed", task_name(func))


def to_seconds(delay) -> float:
    if isinstance(delay, timedelta):
        return delay.total_seconds()
    return float(delay)


class TaskScheduler:
    """Thread-pool scheduler for fire-and-forget and delayed tasks."""

    def __init__(self, max_workers: int = 4, name: str = "solo-blog") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=name
        )
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()
        self._closed = False

    def submit(self, func, *args, **kwargs) -> None:
        """Run func on a worker thread as soon as one is free."""
        with self._lock:
            if self._closed:
                logger.warning("Scheduler closed, dropping task %s", task_name(func))
                return
            self._executor.submit(self._execute, func, args, kwargs)
        logger.debug("Task submitted: %s", task_name(func))

    def schedule(self, delay, func, *args, **kwargs) -> None:
        """Run func once after delay (seconds or timedelta)."""
        seconds = to_seconds(delay)
        timer = threading.Timer(seconds, self._fire, args=(func, args, kwargs))
        timer.daemon = True
        with self._lock:
            if self._closed:
                logger.warning("Scheduler closed, dropping task %s", task_name(func))
                return
            self._timers.add(timer)
        timer.start()
        logger.debug("Task %s scheduled in %.0fs", task_name(func), seconds)

    def shutdown(self, wait: bool = True) -> None:
        """Discard pending timers and stop the worker pool."""
        with self._lock:
            self._closed = True
            timers, self._timers = self._timers, set()
        for timer in timers:
            timer.cancel()
        self._executor.shutdown(wait=wait)
        logger.info("Task scheduler stopped (%d pending timers dropped)", len(timers))

    def _fire(self, func, args, kwargs) -> None:
        # Runs on the timer's own thread
        with self._lock:
            self._timers.discard(threading.current_thread())
        self.submit(func, *args, **kwargs)

    @staticmethod
    def _execute(func, args, kwargs) -> None:
        try:
            run_task(func, *args, **kwargs)
        finally:
            # Worker threads own their DB connections
            close_old_connections()
