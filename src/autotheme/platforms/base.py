"""Interfaces to the host: theme primitives and location requests."""

from abc import ABC, abstractmethod

from ..core.location import AuthorizationLevel, Coordinate
from ..core.mode import Mode


class ThemePlatform(ABC):
    """OS-level theme primitives the dispatcher chooses between."""

    name = "platform"

    @abstractmethod
    def current_theme(self) -> Mode:
        """Return the theme the system currently shows (LIGHT or DARK)."""
        pass

    @abstractmethod
    def can_animate(self) -> bool:
        """Capability probe for the animated transition.

        May block (e.g. waiting on a permission check); never raises.
        """
        pass

    @abstractmethod
    def set_animated(self, theme: Mode) -> None:
        """Flip the theme directly, paired with an OS cross-fade.

        Called on the UI context.

        Raises:
            ScriptError: the animated change did not go through
        """
        pass

    @abstractmethod
    def run_script(self, theme: Mode) -> None:
        """Set the theme through the scripting fallback.

        Raises:
            ScriptError: with the platform's raw error message
        """
        pass


class LocationProvider(ABC):
    """Source of device coordinates under an authorization level."""

    name = "location"

    @abstractmethod
    def request(self, level: AuthorizationLevel) -> Coordinate:
        """Request the current coordinate.

        Returns a coordinate, ``Coordinate.UNKNOWN`` or ``Coordinate.DENIED``;
        failures are values, not exceptions.
        """
        pass

    def check_authorization(self, level: AuthorizationLevel) -> None:
        """Ask for ``level`` up front. Override when the host prompts."""
        pass
