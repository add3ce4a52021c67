from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from astral import Observer
from astral.sun import sunrise as astral_sunrise, sunset as astral_sunset

from .location import Coordinate

SUNRISE = "sunrise"
SUNSET = "sunset"


@dataclass(frozen=True)
class PhasePredictions:
  """Bounds of the current half-cycle.

  During the day ``sunrise <= now < sunset``; during the night the pair is
  the previous sunset and the next sunrise.
  """
  sunrise: Optional[datetime]
  sunset: Optional[datetime]
  is_daytime: bool

  @property
  def is_usable(self) -> bool:
    return self.sunrise is not None and self.sunset is not None

  @property
  def upcoming(self) -> datetime:
    return self.sunset if self.is_daytime else self.sunrise

  @property
  def previous(self) -> datetime:
    return self.sunrise if self.is_daytime else self.sunset

  @property
  def span(self) -> timedelta:
    return self.upcoming - self.previous

  def to_dict(self) -> dict:
    return {
      "sunrise": self.sunrise.isoformat() if self.sunrise else None,
      "sunset": self.sunset.isoformat() if self.sunset else None,
      "is_daytime": self.is_daytime,
    }


UNPREDICTABLE = PhasePredictions(sunrise=None, sunset=None, is_daytime=False)


def _as_utc(timestamp: datetime) -> datetime:
  if timestamp.tzinfo is None:
    return timestamp.replace(tzinfo=timezone.utc)
  return timestamp.astimezone(timezone.utc)


@dataclass
class SolarPredictor:
  # Days after today searched for the next transition.
  window_days: int = 2

  def transitions(self, observer: Observer, day) -> List[Tuple[datetime, str]]:
    events = []
    for kind, fn in ((SUNRISE, astral_sunrise), (SUNSET, astral_sunset)):
      try:
        events.append((fn(observer, date=day, tzinfo=timezone.utc), kind))
      except ValueError:
        # Polar day or night: the sun never crosses the horizon.
        continue
    return events

  def predict(self, timestamp: datetime, coordinate: Coordinate) -> PhasePredictions:
    if coordinate.is_invalid:
      raise ValueError(f"cannot predict solar phases for {coordinate} location")

    now = _as_utc(timestamp)
    observer = Observer(latitude=coordinate.latitude, longitude=coordinate.longitude)

    found = []
    for offset in range(-1, self.window_days + 1):
      found.extend(self.transitions(observer, now.date() + timedelta(days=offset)))
    found.sort()

    # Neighbouring UTC dates can report the same local event twice.
    events = []
    for instant, kind in found:
      if events and events[-1][1] == kind and instant - events[-1][0] < timedelta(hours=1):
        continue
      events.append((instant, kind))

    previous = next_ = None
    for instant, kind in events:
      if instant <= now:
        previous = (instant, kind)
      else:
        next_ = (instant, kind)
        break

    if previous is None or next_ is None or previous[1] == next_[1]:
      return UNPREDICTABLE

    if previous[1] == SUNRISE:
      return PhasePredictions(sunrise=previous[0], sunset=next_[0], is_daytime=True)
    return PhasePredictions(sunrise=next_[0], sunset=previous[0], is_daytime=False)
