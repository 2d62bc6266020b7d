"""Background timers that call a function periodically until told to stop."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

TickCallback = Callable[[], bool]

_TIMER_RESOLUTION_NS = 100


class CallbackTimer:
    """Calls a function, then sleeps for the interval, until the function returns False."""

    def __init__(self) -> None:
        self._execute = threading.Event()
        self._wake = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def __enter__(self) -> "CallbackTimer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self, interval_ms: float, func: TickCallback) -> None:
        """Start calling func every interval_ms milliseconds, replacing any running loop."""
        if self._thread is not None:
            self.stop()

        self._wake.clear()
        self._execute.set()
        delay = max(0.0, float(interval_ms) / 1000.0)
        thread = threading.Thread(target=self._run, args=(delay, func), daemon=True)
        self._thread = thread
        thread.start()

    def _run(self, delay: float, func: TickCallback) -> None:
        while self._execute.is_set():
            try:
                keep_going = func()
            except BaseException:
                self._execute.clear()
                raise
            if not keep_going:
                self._execute.clear()
                break
            self._wake.wait(delay)

    def stop(self) -> None:
        """Stop the loop and wait for the worker to finish."""
        self._execute.clear()
        self._wake.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def is_running(self) -> bool:
        return self._execute.is_set() and self._thread is not None


class RenderTimer:
    """A re-armable one-shot timer on a worker thread that ticks until the callback returns False."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._running = False
        self._interval_ns = 0
        self._callback: Optional[TickCallback] = None
        self._rearm = False
        self._generation = 0
        self._thread: Optional[threading.Thread] = None
        self.high_resolution = False

    def __enter__(self) -> "RenderTimer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(
        self,
        interval_ns: int,
        callback: Optional[TickCallback],
        use_high_resolution: bool = False,
    ) -> bool:
        """Start ticking, or retarget a running timer; returns whether it is running."""
        if callback is None or interval_ns <= 0:
            self.stop()
            return False
        if not self.is_running():
            self.stop()

        with self._cond:
            if self._running:
                self._interval_ns = int(interval_ns)
                self._callback = callback
                self._rearm = True
                self._cond.notify_all()
                return True

            self._interval_ns = int(interval_ns)
            self._callback = callback
            self._rearm = False
            self.high_resolution = bool(use_high_resolution)
            self._generation += 1
            self._running = True
            thread = threading.Thread(
                target=self._worker, args=(self._generation,), daemon=True
            )
            self._thread = thread
            try:
                thread.start()
            except RuntimeError:
                self._running = False
                self._thread = None
                self._callback = None
                return False
        return True

    def stop(self) -> None:
        """Stop ticking and wait for the worker thread to exit."""
        with self._cond:
            thread = self._thread
            if thread is None:
                self._running = False
                return
            self._generation += 1
            self._cond.notify_all()

        if thread is not threading.current_thread():
            thread.join()

        with self._cond:
            self._running = False
            if self._thread is thread:
                self._thread = None
            self._callback = None
            self._rearm = False

    def is_running(self) -> bool:
        with self._cond:
            return self._running

    def _period_ns(self) -> int:
        ticks = self._interval_ns // _TIMER_RESOLUTION_NS
        return max(1, ticks) * _TIMER_RESOLUTION_NS

    def _active(self, generation: int) -> bool:
        return self._running and self._generation == generation

    def _worker(self, generation: int) -> None:
        try:
            with self._cond:
                deadline = time.monotonic_ns() + self._period_ns()
            while True:
                with self._cond:
                    while True:
                        if not self._active(generation):
                            return
                        if self._rearm:
                            self._rearm = False
                            deadline = time.monotonic_ns() + self._period_ns()
                            continue
                        remaining = deadline - time.monotonic_ns()
                        if remaining <= 0:
                            break
                        self._cond.wait(remaining / 1e9)
                    callback = self._callback

                if callback is None or not callback():
                    return

                with self._cond:
                    deadline = time.monotonic_ns() + self._period_ns()
        finally:
            with self._cond:
                if self._generation == generation:
                    self._running = False