"""
Scheduler

Delayed callbacks for presentation timing (reveal, unlock, message clear,
countdown ticks). Production code runs them on ``threading.Timer`` threads.
"""

import threading
from typing import Callable, List, Optional


class ScheduledCall:
    """Handle for a scheduled callback."""

    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False
        self._timer: Optional[threading.Timer] = None

    def cancel(self):
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()


class Scheduler:
    """Interface for running a callback after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        raise NotImplementedError

    def shutdown(self):
        pass


class ThreadingScheduler(Scheduler):
    """
    Runs each callback on its own daemon ``threading.Timer``.

    Callbacks touch engine state, so they must take the engine lock
    themselves; the scheduler gives no ordering guarantee between two
    callbacks scheduled for the same instant.
    """

    def __init__(self):
        self._pending: List[ScheduledCall] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(callback)

        def run():
            with self._lock:
                if call in self._pending:
                    self._pending.remove(call)
            if not call.cancelled:
                callback()

        timer = threading.Timer(max(delay, 0.0), run)
        timer.daemon = True
        call._timer = timer
        with self._lock:
            self._pending.append(call)
        timer.start()
        return call

    def shutdown(self):
        """Cancel every callback that has not fired yet."""
        with self._lock:
            pending, self._pending = self._pending, []
        for call in pending:
            call.cancel()
