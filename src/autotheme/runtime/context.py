"""Process-wide context handed to every component.

Built once at start-up and passed explicitly to the resolver, scheduler,
dispatcher and supervisor instead of living in module globals.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.location import Coordinate
from ..core.mode import Mode
from ..core.solar import SolarPredictor
from .clock import SchedulerClock
from .loop import UIContext
from .state import ObservableCell, optional_cell


@dataclass
class AppContext:
    """Clock, UI context, predictor and the shared observable cells."""
    clock: SchedulerClock
    ui: UIContext
    predictor: SolarPredictor
    location: ObservableCell = field(default_factory=lambda: ObservableCell("location", Coordinate.UNKNOWN))
    mode: ObservableCell = field(default_factory=lambda: ObservableCell("mode", Mode.AUTO))
    predictions: ObservableCell = field(default_factory=lambda: optional_cell("predictions"))
    intensity: ObservableCell = field(default_factory=lambda: optional_cell("intensity"))

    @classmethod
    def create(
        cls,
        location: Coordinate = Coordinate.UNKNOWN,
        mode: Mode = Mode.AUTO,
        start_time: Optional[datetime] = None,
        speed: float = 1.0,
        clock: Optional[SchedulerClock] = None,
        ui: Optional[UIContext] = None,
        predictor: Optional[SolarPredictor] = None,
    ) -> "AppContext":
        context = cls(
            clock=clock or SchedulerClock(start_time=start_time, speed=speed),
            ui=ui or UIContext(),
            predictor=predictor or SolarPredictor(),
        )
        context.location.set(location)
        context.mode.set(mode)
        return context

    def get_stats(self) -> dict:
        return {
            "time": self.clock.now().isoformat(),
            "cells": [
                cell.snapshot().to_dict()
                for cell in (self.location, self.mode, self.predictions, self.intensity)
            ],
        }
