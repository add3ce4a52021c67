"""Error taxonomy of the scheduling engine."""

from datetime import datetime, timedelta
from typing import Optional

from ..core.location import Coordinate

MAX_DEADLINE_AHEAD = timedelta(hours=24)


class SchedulerError(Exception):
    """Base class for errors raised by the scheduling loop."""


class UnableToPredict(SchedulerError):
    """No usable sunrise/sunset for the location and date (e.g. polar day)."""

    def __init__(self, location: Coordinate, at: Optional[datetime] = None):
        self.location = location
        self.at = at
        when = f" at {at.isoformat()}" if at else ""
        super().__init__(f"Unable to predict current phase with location {location}{when}")


class InvalidDeadline(SchedulerError):
    """Computed wake-up time is not within (now, now + 24h]."""

    def __init__(self, deadline: datetime, reference: datetime, too_soon: bool):
        self.deadline = deadline
        self.reference = reference
        self.too_soon = too_soon
        super().__init__(
            f"Update at {deadline.isoformat()} occurs too {'soon' if too_soon else 'late'} "
            f"(now {reference.isoformat()}), maybe the hours cycle of the system clock "
            f"is not being accounted for"
        )

    @classmethod
    def check(cls, deadline: datetime, reference: datetime) -> Optional["InvalidDeadline"]:
        """Return the error for an out-of-range deadline, or None if valid."""
        ahead = deadline - reference
        if ahead <= timedelta(0):
            return cls(deadline, reference, too_soon=True)
        if ahead > MAX_DEADLINE_AHEAD:
            return cls(deadline, reference, too_soon=False)
        return None


class ScriptError(Exception):
    """The scripted theme-set fallback failed; carries the platform's raw message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
