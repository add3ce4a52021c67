"""Configuration models, loaded from YAML."""

from datetime import timedelta
from pathlib import Path
from typing import Literal, Optional, Union
import os

import yaml
from pydantic import BaseModel, Field, field_validator

from .core.location import AuthorizationLevel, Coordinate
from .core.mode import Mode

CONFIG_ENV = "AUTOTHEME_CONFIG"
DEFAULT_CONFIG = Path(__file__).parent / "config" / "default.yaml"


def _positive(value: Optional[timedelta], name: str) -> Optional[timedelta]:
  if value is not None and value <= timedelta(0):
    raise ValueError(f"{name} must be positive")
  return value


class SchedulerConfig(BaseModel):
  # Samples per half-cycle; takes precedence over interval.
  rate: Optional[int] = Field(default=None, gt=0)
  interval: Optional[timedelta] = None
  intensity: bool = False
  transition: bool = False

  @field_validator("interval")
  @classmethod
  def _check_interval(cls, v):
    return _positive(v, "interval")


class LocationConfig(BaseModel):
  provider: Literal["static", "ip"] = "static"
  latitude: Optional[float] = None
  longitude: Optional[float] = None
  authorization: Optional[AuthorizationLevel] = AuthorizationLevel.ALWAYS
  always_ask: bool = False
  unknown_retry: Optional[timedelta] = timedelta(seconds=2.5)
  denied_retry: Optional[timedelta] = None
  refresh_interval: Optional[timedelta] = None
  url: str = "https://ipinfo.io/json"
  timeout: float = 5.0

  @field_validator("authorization", mode="before")
  @classmethod
  def _parse_authorization(cls, v):
    return None if v is None else AuthorizationLevel.parse(v)

  @field_validator("unknown_retry", "denied_retry", "refresh_interval")
  @classmethod
  def _check_durations(cls, v, info):
    return _positive(v, info.field_name)

  def coordinate(self) -> Coordinate:
    if self.latitude is None or self.longitude is None:
      return Coordinate.UNKNOWN
    return Coordinate(self.latitude, self.longitude)


class PlatformConfig(BaseModel):
  kind: Literal["command", "memory"] = "command"
  query: Optional[str] = None
  # Query output (quotes stripped, case-insensitive) that means dark.
  dark_output: str = "dark"
  set_light: Optional[str] = None
  set_dark: Optional[str] = None
  animate_light: Optional[str] = None
  animate_dark: Optional[str] = None
  probe: Optional[str] = None
  timeout: float = 10.0
  initial: Mode = Mode.LIGHT


class AppConfig(BaseModel):
  mode: Mode = Mode.AUTO
  debug: bool = False
  location: LocationConfig = Field(default_factory=LocationConfig)
  scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
  platform: PlatformConfig = Field(default_factory=PlatformConfig)


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
  """Load config from ``path``, ``$AUTOTHEME_CONFIG`` or the packaged default."""
  path = Path(path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG)
  raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
  return AppConfig(**raw)
