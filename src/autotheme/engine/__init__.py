"""Scheduling engine: location resolution, deadlines, dispatch, supervision."""

from .errors import SchedulerError, UnableToPredict, InvalidDeadline, ScriptError
from .resolver import LocationResolver, ResolverState
from .scheduler import DeadlineScheduler, SchedulerState, next_deadline, intensity_at
from .dispatcher import ThemeDispatcher, DispatchResult
from .supervisor import SchedulerSupervisor

__all__ = [
    "SchedulerError",
    "UnableToPredict",
    "InvalidDeadline",
    "ScriptError",
    "LocationResolver",
    "ResolverState",
    "DeadlineScheduler",
    "SchedulerState",
    "next_deadline",
    "intensity_at",
    "ThemeDispatcher",
    "DispatchResult",
    "SchedulerSupervisor",
]
