"""Periodic tick drivers for charge cycles.

Every job fires its callback once immediately and then once per interval
until the callback returns ``False`` or the job is cancelled.  A job never
starts tick N+1 before tick N has returned.

Two drivers share that contract:

* :class:`ThreadedTickScheduler` runs each job on its own daemon thread
  against the monotonic clock.
* :class:`ManualTickScheduler` keeps a virtual clock that tests (and the
  CLI demo) advance explicitly.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Protocol

_LOGGER = logging.getLogger(__name__)

TickCallback = Callable[[], bool]


class TickHandle(Protocol):
    """Handle to a scheduled periodic job."""

    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class TickScheduler(Protocol):
    """Source of periodic ticks."""

    def schedule(self, callback: TickCallback, interval: float, name: str = "") -> TickHandle: ...


# ---------------------------------------------------------------------------
# Threaded driver
# ---------------------------------------------------------------------------


class _ThreadedJob:
    __slots__ = ("_callback", "_interval", "_stopped", "_thread")

    def __init__(self, callback: TickCallback, interval: float, name: str) -> None:
        self._callback = callback
        self._interval = interval
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name or "charge-tick", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    @property
    def active(self) -> bool:
        return not self._stopped.is_set() and self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the job thread to exit (no-op from inside the job)."""
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _run(self) -> None:
        next_due = time.monotonic()
        while not self._stopped.is_set():
            try:
                keep_going = self._callback()
            except Exception:
                _LOGGER.exception(f"Tick job '{self._thread.name}' raised; stopping it.")
                keep_going = False
            if not keep_going:
                break
            # Fixed rate; a slow tick shortens the next wait instead of overlapping.
            next_due += self._interval
            if self._stopped.wait(max(0.0, next_due - time.monotonic())):
                break
        self._stopped.set()


class ThreadedTickScheduler:
    """Runs each periodic job on a dedicated daemon thread."""

    def schedule(self, callback: TickCallback, interval: float, name: str = "") -> _ThreadedJob:
        if interval <= 0.0:
            raise ValueError("interval must be > 0.0.")
        job = _ThreadedJob(callback, interval, name)
        job.start()
        _LOGGER.debug(f"Started tick job '{name}' every {interval:.3f}s")
        return job


# ---------------------------------------------------------------------------
# Virtual clock driver
# ---------------------------------------------------------------------------


class _ManualJob:
    __slots__ = ("callback", "interval", "name", "next_due", "_active")

    def __init__(self, callback: TickCallback, interval: float, name: str, next_due: float) -> None:
        self.callback = callback
        self.interval = interval
        self.name = name
        self.next_due = next_due
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def run_once(self) -> None:
        if not self._active:
            return
        if not self.callback():
            self._active = False
        self.next_due += self.interval


class ManualTickScheduler:
    """Deterministic tick source driven by a virtual clock.

    Nothing fires on its own: call :meth:`fire` to run the next tick of
    every active job, or :meth:`advance` to move the clock and run every
    tick that falls due, in due-time order.

    Attributes:
        now: Current virtual time in seconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now: float = start
        self._jobs: list[_ManualJob] = []

    def schedule(self, callback: TickCallback, interval: float, name: str = "") -> _ManualJob:
        if interval <= 0.0:
            raise ValueError("interval must be > 0.0.")
        job = _ManualJob(callback, interval, name, next_due=self.now)
        self._jobs.append(job)
        return job

    @property
    def pending(self) -> int:
        """Number of jobs that will still fire."""
        self._prune()
        return len(self._jobs)

    def _prune(self) -> None:
        self._jobs = [job for job in self._jobs if job.active]

    def fire(self, count: int = 1) -> int:
        """Run the next *count* ticks of every active job.

        Returns:
            Number of callbacks invoked.
        """
        if count < 0:
            raise ValueError("count must be >= 0.")
        fired = 0
        for _ in range(count):
            self._prune()
            if not self._jobs:
                break
            for job in list(self._jobs):
                if not job.active:
                    continue
                self.now = max(self.now, job.next_due)
                job.run_once()
                fired += 1
        self._prune()
        return fired

    def advance(self, seconds: float) -> int:
        """Move the clock forward by *seconds*, firing due ticks on the way.

        Ticks due exactly at the new time are fired.

        Returns:
            Number of callbacks invoked.
        """
        if seconds < 0.0:
            raise ValueError("seconds must be >= 0.0.")
        target = self.now + seconds
        fired = 0
        while True:
            due = [job for job in self._jobs if job.active and job.next_due <= target]
            if not due:
                break
            job = min(due, key=lambda j: j.next_due)
            self.now = max(self.now, job.next_due)
            job.run_once()
            fired += 1
        self._prune()
        self.now = target
        return fired

    def run_until_idle(self, limit: int = 100_000) -> int:
        """Fire ticks until no job is active or *limit* ticks have run."""
        fired = 0
        while self.pending and fired < limit:
            fired += self.fire()
        return fired
