"""Clock behind every wait of the resolver and the scheduler.

Clock time may run faster than the wall clock (``--speed``) so a whole
day of transitions can be watched in minutes. Waits poll a stop event and
return as soon as it is set.
"""
from datetime import datetime, timedelta, timezone
from threading import Event, RLock
from typing import Optional
import time


class SchedulerClock:
    """Wall clock with an optional speed factor and cancellable waits."""

    def __init__(
        self,
        start_time: Optional[datetime] = None,
        speed: float = 1.0,
        paused: bool = False,
        poll_interval: float = 1.0,
    ):
        """Initialize clock.

        Args:
            start_time: Clock time at construction (default: current UTC time)
            speed: Clock seconds per wall second
            paused: Freeze the clock; only set_time()/advance() move it
            poll_interval: Longest single wall-clock sleep, so host clock
                jumps (suspend/resume) are noticed within that bound
        """
        if speed <= 0:
            raise ValueError("Speed must be positive")

        self._lock = RLock()
        self._origin = start_time or datetime.now(timezone.utc)
        self._wall_origin = time.monotonic()
        self._speed = speed
        self._paused = paused
        self.poll_interval = poll_interval

    def now(self) -> datetime:
        with self._lock:
            if self._paused:
                return self._origin
            elapsed = time.monotonic() - self._wall_origin
            return self._origin + timedelta(seconds=elapsed * self._speed)

    def set_time(self, new_time: datetime) -> None:
        """Move the clock to ``new_time``; it keeps running from there."""
        with self._lock:
            self._origin = new_time
            self._wall_origin = time.monotonic()

    def advance(self, delta: timedelta) -> None:
        with self._lock:
            self.set_time(self.now() + delta)

    def time_until(self, target: datetime) -> Optional[float]:
        """Clock seconds until ``target``, None once it has passed."""
        remaining = (target - self.now()).total_seconds()
        return remaining if remaining > 0 else None

    def wait_until(self, target: datetime, stop_event: Event) -> bool:
        """Block until the clock reaches ``target``.

        Args:
            target: Time to wake up at
            stop_event: Cancellation signal checked throughout the wait

        Returns:
            True if the target was reached, False if cancelled first
        """
        while not stop_event.is_set():
            remaining = self.time_until(target)
            if remaining is None:
                return True
            if stop_event.wait(min(remaining / self._speed, self.poll_interval)):
                return False
        return False

    def wait(self, duration: timedelta, stop_event: Event) -> bool:
        """Block for ``duration`` of clock time; see :meth:`wait_until`."""
        return self.wait_until(self.now() + duration, stop_event)

    def __repr__(self) -> str:
        rate = "paused" if self._paused else f"{self._speed:g}x"
        return f"SchedulerClock({self.now().isoformat()}, {rate})"
