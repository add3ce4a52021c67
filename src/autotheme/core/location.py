from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar
import math


class AuthorizationLevel(IntEnum):
  """Scope of permission requested to read the device location."""
  WHEN_IN_USE = 1
  ALWAYS = 2

  @classmethod
  def parse(cls, value) -> "AuthorizationLevel":
    if isinstance(value, cls):
      return value
    if isinstance(value, str):
      return cls[value.strip().upper().replace("-", "_").replace(" ", "_")]
    return cls(value)


@dataclass(frozen=True)
class Coordinate:
  x: float  # latitude
  y: float  # longitude

  UNKNOWN: ClassVar["Coordinate"]
  DENIED: ClassVar["Coordinate"]

  @property
  def latitude(self) -> float:
    return self.x

  @property
  def longitude(self) -> float:
    return self.y

  @property
  def is_unknown(self) -> bool:
    return self == Coordinate.UNKNOWN

  @property
  def is_denied(self) -> bool:
    return self == Coordinate.DENIED

  @property
  def is_invalid(self) -> bool:
    if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
      return True
    return not (-90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0)

  @property
  def is_valid(self) -> bool:
    return not self.is_invalid

  def to_dict(self) -> dict:
    return {"latitude": self.latitude, "longitude": self.longitude}

  def __str__(self) -> str:
    if self.is_unknown:
      return "unknown"
    if self.is_denied:
      return "denied"
    return f"({self.latitude:.4f}, {self.longitude:.4f})"


# Sentinels sit outside the finite domain so they are always invalid.
Coordinate.UNKNOWN = Coordinate(math.inf, math.inf)
Coordinate.DENIED = Coordinate(-math.inf, -math.inf)
