"""Host adapters for theme changes and location requests."""

from .base import ThemePlatform, LocationProvider
from .command import CommandThemePlatform
from .memory import MemoryThemePlatform
from .location import StaticLocationProvider, IPLocationProvider

__all__ = [
    "ThemePlatform",
    "LocationProvider",
    "CommandThemePlatform",
    "MemoryThemePlatform",
    "StaticLocationProvider",
    "IPLocationProvider",
]
