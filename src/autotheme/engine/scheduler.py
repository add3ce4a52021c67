"""Deadline-driven scheduling loop.

Each cycle predicts the current half-cycle, works out when to wake up
next, optionally publishes the intensity signal, hands the predictions to
the action and then sleeps until the deadline.
"""
from datetime import datetime, timedelta
from enum import Enum
from threading import Event
from typing import Callable, Optional
import logging
import math

from ..core.solar import PhasePredictions
from ..runtime.context import AppContext
from ..settings import SchedulerConfig
from .errors import InvalidDeadline, SchedulerError, UnableToPredict

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SLEEPING = "sleeping"
    STOPPED = "stopped"


def aligned_deadline(
    now: datetime,
    previous: datetime,
    upcoming: datetime,
    step: timedelta,
    samples: Optional[int] = None,
) -> datetime:
    """Next boundary of the grid ``previous + i * step`` strictly after ``now``.

    The grid is capped by ``upcoming``; with ``samples`` the last sample is
    always ``upcoming`` itself, so it absorbs whatever the step left over.
    """
    if step <= timedelta(0):
        return upcoming

    index = (now - previous) // step + 1
    if samples is not None and index >= samples:
        return upcoming
    return min(previous + index * step, upcoming)


def next_deadline(
    now: datetime,
    predictions: PhasePredictions,
    rate: Optional[int] = None,
    interval: Optional[timedelta] = None,
) -> datetime:
    """Wake-up time under the first matching policy: rate, interval, default."""
    previous, upcoming = predictions.previous, predictions.upcoming

    if rate:
        return aligned_deadline(now, previous, upcoming, predictions.span // rate, samples=rate)
    if interval:
        return aligned_deadline(now, previous, upcoming, interval)
    return upcoming


def intensity_at(now: datetime, predictions: Optional[PhasePredictions]) -> Optional[float]:
    """Closeness to the upcoming transition in [0, 1], None if undetermined.

    Logarithmic in the elapsed share of the half-cycle: 0 for the first
    ``1/e`` of it, then rising to 1 at the transition.
    """
    if predictions is None or not predictions.is_usable:
        return None

    span = predictions.span.total_seconds()
    if span <= 0:
        return 1.0

    fraction = (now - predictions.previous).total_seconds() / span
    if not math.isfinite(fraction) or fraction <= 0:
        return 0.0
    return max(0.0, min(1.0, 1.0 + math.log(fraction)))


class DeadlineScheduler:
    """Predict, act and sleep until cancelled."""

    def __init__(
        self,
        context: AppContext,
        action: Callable[[PhasePredictions], None],
        config: Optional[SchedulerConfig] = None,
        error_handler: Optional[Callable[[SchedulerError], None]] = None,
    ):
        """Initialize scheduler.

        Args:
            context: Shared context (clock, predictor, cells)
            action: Called with the predictions once per cycle
            config: Rate/interval/intensity settings
            error_handler: Receives prediction and deadline errors; without
                one they are raised out of :meth:`run`
        """
        self.context = context
        self.action = action
        self.config = config or SchedulerConfig()
        self.error_handler = error_handler
        self.state = SchedulerState.IDLE
        self.cycles = 0

    def run(self, stop_event: Event) -> None:
        """Run cycles until cancelled or an error stops the loop."""
        self.state = SchedulerState.RUNNING
        logger.info("Scheduler started")
        try:
            while not stop_event.is_set():
                if not self._cycle(stop_event):
                    break
        finally:
            self.state = SchedulerState.STOPPED
            self._publish(self.context.intensity, None)
            logger.info(f"Scheduler stopped after {self.cycles} cycles")

    def _cycle(self, stop_event: Event) -> bool:
        self.state = SchedulerState.RUNNING
        now = self.context.clock.now()
        location = self.context.location.get()

        predictions = None
        if location.is_valid:
            predictions = self.context.predictor.predict(now, location)
            if not predictions.is_usable:
                predictions = None
        self._publish(self.context.predictions, predictions)

        if predictions is None:
            self._publish(self.context.intensity, None)
            self._report(UnableToPredict(location, now))
            return False

        deadline = next_deadline(now, predictions, self.config.rate, self.config.interval)

        if self.config.intensity:
            self._publish(self.context.intensity, intensity_at(now, predictions))

        logger.debug(f"it is {'daytime' if predictions.is_daytime else 'nighttime'} at {location}")
        logger.debug(f"{predictions.sunrise.isoformat()} < sunrise/sunset > {predictions.sunset.isoformat()}")
        logger.debug(f"updating in {deadline - now} (at {deadline.isoformat()})")

        error = InvalidDeadline.check(deadline, now)
        if error is not None:
            self._report(error)
            return False

        if stop_event.is_set():
            return False

        self.action(predictions)
        self.cycles += 1

        if stop_event.is_set():
            return False

        self.state = SchedulerState.SLEEPING
        return self.context.clock.wait_until(deadline, stop_event)

    def _report(self, error: SchedulerError) -> None:
        if self.error_handler is None:
            raise error
        logger.warning(f"Scheduler cycle skipped: {error}")
        self.error_handler(error)

    def _publish(self, cell, value) -> None:
        self.context.ui.call(cell.set, value)
