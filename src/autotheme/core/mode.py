from enum import Enum


class Mode(str, Enum):
  """Appearance mode selected by the user.

  ``LIGHT`` and ``DARK`` double as the concrete system themes the
  dispatcher can set; ``AUTO`` hands control to the solar scheduler.
  """
  AUTO = "auto"
  LIGHT = "light"
  DARK = "dark"

  @classmethod
  def for_daytime(cls, is_daytime: bool) -> "Mode":
    return cls.LIGHT if is_daytime else cls.DARK

  @property
  def is_fixed(self) -> bool:
    return self is not Mode.AUTO
