import time as _time
from datetime import datetime, time, timedelta, timezone

import pytest

from autotheme.core.location import Coordinate
from autotheme.core.solar import PhasePredictions
from autotheme.platforms.base import LocationProvider
from autotheme.platforms.memory import MemoryThemePlatform
from autotheme.runtime import AppContext, SchedulerClock, UIContext

LONDON = Coordinate(51.5074, -0.1278)


def utc(*args):
  return datetime(*args, tzinfo=timezone.utc)


class ManualClock(SchedulerClock):
  """Paused clock; waits jump straight to their target.

  With ``blocking=True`` waits instead park until cancelled, so a loop on
  another thread performs exactly one cycle.
  """

  def __init__(self, start, blocking=False):
    super().__init__(start_time=start, paused=True)
    self.blocking = blocking
    self.waits = []
    self.on_wait = None

  def wait_until(self, target, stop_event):
    if stop_event.is_set():
      return False
    self.waits.append(target - self.now())
    if self.blocking:
      stop_event.wait(10)
      return False
    if target > self.now():
      self.set_time(target)
    if self.on_wait is not None:
      self.on_wait(target)
    return not stop_event.is_set()


class FixedDayPredictor:
  """Sunrise and sunset at the same UTC hours every day."""

  def __init__(self, sunrise_hour=6, sunset_hour=18):
    self.sunrise_hour = sunrise_hour
    self.sunset_hour = sunset_hour
    self.calls = 0

  def predict(self, timestamp, coordinate):
    self.calls += 1
    day = timestamp.date()

    def at(d, hour):
      return datetime.combine(d, time(hour), tzinfo=timezone.utc)

    sunrise, sunset = at(day, self.sunrise_hour), at(day, self.sunset_hour)
    if timestamp < sunrise:
      return PhasePredictions(sunrise=sunrise, sunset=at(day - timedelta(days=1), self.sunset_hour), is_daytime=False)
    if timestamp < sunset:
      return PhasePredictions(sunrise=sunrise, sunset=sunset, is_daytime=True)
    return PhasePredictions(sunrise=at(day + timedelta(days=1), self.sunrise_hour), sunset=sunset, is_daytime=False)


class ScriptedProvider(LocationProvider):
  """Answers with the queued coordinates, repeating the last one."""

  name = "scripted"

  def __init__(self, *responses):
    self.responses = list(responses)
    self.calls = 0
    self.checks = []

  def request(self, level):
    self.calls += 1
    if len(self.responses) > 1:
      return self.responses.pop(0)
    return self.responses[0]

  def check_authorization(self, level):
    self.checks.append(level)


def wait_for(predicate, timeout=3.0):
  deadline = _time.time() + timeout
  while _time.time() < deadline:
    if predicate():
      return True
    _time.sleep(0.01)
  return predicate()


def make_context(now, location=LONDON, predictor=None, blocking=False):
  return AppContext.create(
    location=location,
    clock=ManualClock(now, blocking=blocking),
    ui=UIContext(),
    predictor=predictor or FixedDayPredictor(),
  )


@pytest.fixture
def platform():
  return MemoryThemePlatform()
