"""Theme dispatch: pick the animated or scripted strategy and apply it."""

from enum import Enum
from threading import Event
from typing import Callable, Optional
import logging

from ..core.mode import Mode
from ..core.solar import PhasePredictions
from ..runtime.context import AppContext
from .errors import ScriptError

logger = logging.getLogger(__name__)


def _cancelled(stop_event: Optional[Event]) -> bool:
    return stop_event is not None and stop_event.is_set()


class DispatchResult(Enum):
    SKIPPED = "skipped"
    ANIMATED = "animated"
    SCRIPTED = "scripted"


class ThemeDispatcher:
    """Sets the system theme, skipping the call when it is already shown."""

    def __init__(
        self,
        context: AppContext,
        platform,
        transition: bool = False,
        on_predictions: Optional[Callable[[PhasePredictions], None]] = None,
    ):
        """Initialize dispatcher.

        Args:
            context: Shared context (UI context for the animated strategy)
            platform: ThemePlatform providing the primitives
            transition: Default for ``allow_transition``
            on_predictions: Called with each cycle's predictions before the
                theme is decided
        """
        self.context = context
        self.platform = platform
        self.transition = transition
        self.on_predictions = on_predictions
        self.last_result: Optional[DispatchResult] = None
        self.last_error: Optional[ScriptError] = None

    def apply(
        self,
        target: Mode,
        allow_transition: Optional[bool] = None,
        stop_event: Optional[Event] = None,
    ) -> DispatchResult:
        """Switch the system to ``target``.

        Args:
            target: LIGHT or DARK
            allow_transition: Use the animated strategy when the platform
                allows it (default: the dispatcher's ``transition``)
            stop_event: Set when the caller was cancelled; checked again
                on the UI thread right before the animated change

        Raises:
            ScriptError: The scripted fallback failed
        """
        if not target.is_fixed:
            raise ValueError("Cannot dispatch the auto mode, expected light or dark")
        if allow_transition is None:
            allow_transition = self.transition

        current = self.platform.current_theme()
        if current == target:
            logger.debug(f"current mode ({target.value}) already set")
            self.last_result = DispatchResult.SKIPPED
            return self.last_result

        logger.info(f"switching to {target.value} mode")
        if allow_transition and self.platform.can_animate():
            try:
                animated = self.context.ui.call(self._animate, target, stop_event, wait=True)
            except ScriptError as e:
                logger.warning(f"Animated switch to {target.value} failed, using the script: {e.message}")
            else:
                self.last_result = DispatchResult.ANIMATED if animated else DispatchResult.SKIPPED
                return self.last_result

        if _cancelled(stop_event):
            self.last_result = DispatchResult.SKIPPED
            return self.last_result
        try:
            self.platform.run_script(target)
        except ScriptError as e:
            logger.error(f"Failed to set {target.value} mode: {e.message}")
            raise
        self.last_result = DispatchResult.SCRIPTED
        return self.last_result

    def _animate(self, target: Mode, stop_event: Optional[Event]) -> bool:
        # Runs on the UI thread, possibly after the owning unit was cancelled.
        if _cancelled(stop_event):
            logger.debug(f"animated switch to {target.value} cancelled")
            return False
        self.platform.set_animated(target)
        return True

    def auto_action(self, predictions: PhasePredictions, stop_event: Optional[Event] = None) -> None:
        """Scheduler action: light during the day, dark at night.

        Script failures are logged and never abort the loop.
        """
        if self.on_predictions is not None:
            self.on_predictions(predictions)
        try:
            self.apply(Mode.for_daytime(predictions.is_daytime), stop_event=stop_event)
        except ScriptError as e:
            self.last_error = e

    def warm_capability_probe(self) -> bool:
        """Run the capability probe once so a permission prompt shows early."""
        allowed = self.platform.can_animate()
        logger.info(f"Animated transitions {'available' if allowed else 'unavailable'}")
        return allowed
