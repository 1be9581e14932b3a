"""
Daily Rotation Timer

Computes when the next puzzle is released and counts down to it.
"""

import math
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from .scheduler import ScheduledCall, Scheduler


@dataclass(frozen=True)
class Remaining:
    """Time left until the next puzzle."""
    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Remaining":
        total = max(math.ceil(delta.total_seconds()), 0)
        hours, rest = divmod(total, 3600)
        minutes, seconds = divmod(rest, 60)
        return cls(hours, minutes, seconds)

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    def format(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def compute_next_release_instant(now: datetime, release_hour: int) -> datetime:
    """
    Return the next instant a puzzle is released.

    Today at ``release_hour:00:00`` if that hour has not been reached yet,
    otherwise tomorrow at the same time.
    """
    if not 0 <= release_hour <= 23:
        raise ValueError(f"release_hour must be between 0 and 23, got {release_hour}")
    target = now.replace(hour=release_hour, minute=0, second=0, microsecond=0)
    if now.hour >= release_hour:
        target += timedelta(days=1)
    return target


class Countdown:
    """
    Periodic countdown to a target instant.

    Each tick reports the remaining time; when it reaches zero ``on_expire``
    runs exactly once and ticking stops.
    """

    def __init__(self, scheduler: Scheduler, clock: Callable[[], datetime] = datetime.now,
                 tick_interval: float = 1.0):
        self.scheduler = scheduler
        self.clock = clock
        self.tick_interval = tick_interval
        self.target: Optional[datetime] = None
        self._on_expire: Optional[Callable[[], None]] = None
        self._on_tick: Optional[Callable[[Remaining], None]] = None
        self._call: Optional[ScheduledCall] = None
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    def start(self, target: datetime, on_expire: Callable[[], None],
              on_tick: Optional[Callable[[Remaining], None]] = None) -> Remaining:
        """Start (or restart) the countdown and emit the first tick immediately."""
        self.stop()
        with self._lock:
            self.target = target
            self._on_expire = on_expire
            self._on_tick = on_tick
            self._running = True
        return self._tick()

    def remaining(self) -> Remaining:
        if self.target is None:
            return Remaining(0, 0, 0)
        return Remaining.from_timedelta(self.target - self.clock())

    def stop(self):
        with self._lock:
            self._running = False
            if self._call is not None:
                self._call.cancel()
                self._call = None

    def _tick(self) -> Remaining:
        with self._lock:
            if not self._running:
                return self.remaining()
            remaining = self.remaining()
            expired = remaining.total_seconds <= 0
            if expired:
                self._running = False
                self._call = None
                callback = self._on_expire
            else:
                self._call = self.scheduler.call_later(self.tick_interval, self._tick)
                callback = None
            on_tick = self._on_tick

        if on_tick is not None:
            on_tick(remaining)
        if callback is not None:
            callback()
        return remaining
