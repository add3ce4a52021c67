"""Runtime components for the theme scheduler."""

from .clock import SchedulerClock
from .state import ObservableCell, CellSnapshot
from .loop import UIContext
from .context import AppContext

__all__ = [
    "SchedulerClock",
    "ObservableCell",
    "CellSnapshot",
    "UIContext",
    "AppContext",
]
