"""In-process theme platform used for dry runs."""

from threading import RLock
from typing import List, Optional, Tuple

from ..core.mode import Mode
from ..engine.errors import ScriptError
from .base import ThemePlatform


class MemoryThemePlatform(ThemePlatform):
    """Keeps the theme in memory and records every primitive call."""

    name = "memory"

    def __init__(
        self,
        theme: Mode = Mode.LIGHT,
        animate: bool = False,
        script_error: Optional[str] = None,
        animate_error: Optional[str] = None,
    ):
        self.theme = theme
        self.animate = animate
        self.script_error = script_error
        self.animate_error = animate_error
        self.calls: List[Tuple[str, Mode]] = []
        self.probes = 0
        self._lock = RLock()

    def current_theme(self) -> Mode:
        with self._lock:
            return self.theme

    def can_animate(self) -> bool:
        with self._lock:
            self.probes += 1
            return self.animate

    def set_animated(self, theme: Mode) -> None:
        with self._lock:
            self.calls.append(("animated", theme))
            if self.animate_error:
                raise ScriptError(self.animate_error)
            self.theme = theme

    def run_script(self, theme: Mode) -> None:
        with self._lock:
            self.calls.append(("script", theme))
            if self.script_error:
                raise ScriptError(self.script_error)
            self.theme = theme
